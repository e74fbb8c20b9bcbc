from typing import List, Optional

from fastapi import Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from prompty.database import get_db
from prompty.metrics.router import MetricsRouter
from prompty.schemas.prompts import PromptResponse
from prompty.services.prompt_service import (
    build_prompt_create,
    create_prompt,
    get_all_prompts,
    get_prompt_by_slug,
    read_preview_image,
    record_submission,
)
from prompty.services.storage_service import StorageClient, get_storage_client

router = MetricsRouter(tags=["prompts"])


@router.post("/prompts", response_model=PromptResponse, status_code=201)
async def create_prompt_route(
    title: str = Form(""),
    modality: str = Form(""),
    user_prompt_template: str = Form(""),
    expected_output_description: Optional[str] = Form(None),
    preview_image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage_client),
):
    try:
        image = await read_preview_image(preview_image)
        prompt_data = build_prompt_create(
            title, modality, user_prompt_template, expected_output_description
        )
        prompt = create_prompt(db, storage, prompt_data, image)
    except Exception:
        record_submission(success=False)
        raise
    record_submission(success=True)
    return prompt


@router.get("/prompts", response_model=List[PromptResponse])
def get_all_prompts_route(db: Session = Depends(get_db)):
    return get_all_prompts(db)


@router.get("/prompts/{slug}", response_model=PromptResponse)
def get_prompt_route(slug: str, db: Session = Depends(get_db)):
    return get_prompt_by_slug(db, slug)
