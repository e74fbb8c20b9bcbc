import logging
from pathlib import Path
from typing import Optional

from fastapi import Depends, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prompty.database import get_db
from prompty.metrics.router import MetricsRouter
from prompty.services.prompt_service import (
    get_prompt_by_slug,
    list_prompt_cards,
    read_preview_image,
    submit_prompt,
    to_card,
)
from prompty.services.storage_service import StorageClient, get_storage_client
from prompty.utils.constants import CATEGORY_OPTIONS, ERROR_PREFIX, UNKNOWN_ERROR, Dashboard, Page
from prompty.utils.exceptions import PromptNotFoundException

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

router = MetricsRouter(tags=["pages"], default_response_class=HTMLResponse)

EMPTY_FORM = {
    "title": "",
    "modality": "",
    "user_prompt_template": "",
    "expected_output_description": "",
}


def render_dashboard(request: Request, form: dict, message: Optional[str] = None, is_error: bool = False):
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "form": form,
            "message": message,
            "is_error": is_error,
            "category_options": CATEGORY_OPTIONS,
            "text": Dashboard,
        },
    )


@router.get("/")
def home_page(request: Request, db: Session = Depends(get_db)):
    cards = list_prompt_cards(db)
    return templates.TemplateResponse(request, "index.html", {"cards": cards, "text": Page})


@router.get("/dashboard")
def dashboard_page(request: Request):
    return render_dashboard(request, dict(EMPTY_FORM))


@router.post("/dashboard")
async def submit_dashboard(
    request: Request,
    title: str = Form(""),
    modality: str = Form(""),
    user_prompt_template: str = Form(""),
    expected_output_description: str = Form(""),
    preview_image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage_client),
):
    form = {
        "title": title,
        "modality": modality,
        "user_prompt_template": user_prompt_template,
        "expected_output_description": expected_output_description,
    }
    try:
        image = await read_preview_image(preview_image)
    except Exception as e:
        logger.exception(f"Failed to read preview image: {e}")
        return render_dashboard(request, form, f"{ERROR_PREFIX}{str(e) or UNKNOWN_ERROR}", is_error=True)

    result = submit_prompt(
        db,
        storage,
        title=title,
        modality=modality,
        user_prompt_template=user_prompt_template,
        expected_output_description=expected_output_description,
        image=image,
    )
    if result.success:
        form = dict(EMPTY_FORM)
    return render_dashboard(request, form, result.message, is_error=result.is_error)


@router.get("/prompts/{slug}")
def prompt_detail_page(request: Request, slug: str, db: Session = Depends(get_db)):
    try:
        prompt = get_prompt_by_slug(db, slug)
    except PromptNotFoundException:
        prompt = None
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch prompt {slug}: {e}")
        prompt = None

    if prompt is None:
        return templates.TemplateResponse(
            request, "not_found.html", {"slug": slug, "text": Page}, status_code=404
        )

    return templates.TemplateResponse(
        request,
        "prompt_detail.html",
        {"prompt": prompt, "card": to_card(prompt), "text": Page},
    )
