import logging
from typing import List, Optional

import requests
from fastapi import HTTPException, UploadFile
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prompty.constants.metrics import Constants
from prompty.metrics.statsd_client import statsd
from prompty.models.models import Prompt
from prompty.repository.prompt_repository import PromptRepository
from prompty.schemas.prompts import (
    PreviewImage,
    PromptCard,
    PromptCreate,
    PromptResponse,
    SubmissionResult,
)
from prompty.services.storage_service import StorageClient
from prompty.utils.card_utils import detail_path, is_allowed_image_url, modality_badge, shorten_prompt
from prompty.utils.constants import (
    DEFAULT_IMAGE_EXTENSION,
    ERROR_PREFIX,
    SUCCESS_MESSAGE,
    UNKNOWN_ERROR,
)
from prompty.utils.exceptions import (
    InvalidPreviewImageException,
    InvalidPromptException,
    PreviewUploadFailedException,
    PromptInsertFailedException,
    PromptNotFoundException,
    StorageError,
    error_message,
)
from prompty.utils.slug import derive_slug, now_ms

logger = logging.getLogger(__name__)

FIELD_LABELS = {
    "title": "Title",
    "modality": "Category",
    "user_prompt_template": "Prompt text",
    "expected_output_description": "Expected output description",
}


async def read_preview_image(upload: Optional[UploadFile]) -> Optional[PreviewImage]:
    """
    Read an uploaded preview into memory and release the spooled upload.

    A file input left empty by the browser still arrives as a part without a
    filename, which counts as no image.
    """
    if upload is None:
        return None
    try:
        if not upload.filename:
            return None
        data = await upload.read()
        return PreviewImage(
            filename=upload.filename,
            content_type=upload.content_type or "",
            data=data,
        )
    finally:
        await upload.close()


def record_submission(success: bool):
    statsd.increment(
        Constants.Metric.PROMPT_SUBMISSION,
        tags={Constants.Tag.OUTCOME: "success" if success else "error"},
    )


def validation_message(exc: ValidationError) -> str:
    messages = []
    for error in exc.errors():
        field = str(error["loc"][0]) if error.get("loc") else ""
        label = FIELD_LABELS.get(field, field)
        if field == "modality":
            messages.append(f"{label} must be one of visual, cinematic, logic, autonomous")
        elif error.get("type") == "value_error":
            messages.append(f"{label} is required")
        else:
            messages.append(f"{label}: {error['msg']}")
    return "; ".join(messages)


def build_prompt_create(
    title: Optional[str],
    modality: Optional[str],
    user_prompt_template: Optional[str],
    expected_output_description: Optional[str] = None,
) -> PromptCreate:
    try:
        return PromptCreate(
            title=title,
            modality=modality,
            user_prompt_template=user_prompt_template,
            expected_output_description=expected_output_description,
        )
    except ValidationError as e:
        raise InvalidPromptException(validation_message(e))


def preview_storage_path(slug: str, image: PreviewImage, timestamp_ms: Optional[int] = None) -> str:
    if timestamp_ms is None:
        timestamp_ms = now_ms()
    extension = image.extension or DEFAULT_IMAGE_EXTENSION
    return f"{slug}-{timestamp_ms}.{extension}"


def upload_preview(storage: StorageClient, slug: str, image: PreviewImage) -> str:
    """Upload the preview image and return its public URL."""
    path = preview_storage_path(slug, image)
    try:
        storage.upload(path, image.data, content_type=image.content_type, upsert=False)
    except StorageError as e:
        logger.error(f"Storage upload error: {e.message}")
        raise PreviewUploadFailedException(e.message)
    except requests.RequestException as e:
        logger.error(f"Storage request failed: {e}")
        raise PreviewUploadFailedException(str(e) or "Storage request failed")
    return storage.get_public_url(path)


def create_prompt(
    db: Session,
    storage: StorageClient,
    prompt_data: PromptCreate,
    image: Optional[PreviewImage] = None,
) -> Prompt:
    """
    Create a prompt, uploading its preview image first when one is given.

    The insert never happens if the upload fails.
    """
    if image is not None and not image.is_image:
        raise InvalidPreviewImageException(image.content_type)

    slug = derive_slug(prompt_data.title)

    preview_url = None
    if image is not None:
        preview_url = upload_preview(storage, slug, image)

    prompt = Prompt(
        title=prompt_data.title,
        slug=slug,
        modality=prompt_data.modality.value,
        user_prompt_template=prompt_data.user_prompt_template,
        expected_output_description=prompt_data.expected_output_description,
        preview_url=preview_url,
    )

    repository = PromptRepository(db)
    try:
        created = repository.create(prompt)
    except SQLAlchemyError as e:
        message = str(getattr(e, "orig", None) or e)
        logger.error(f"Prompt insert error: {message}")
        raise PromptInsertFailedException(message)

    logger.info(f"Created prompt {created.id} with slug {slug}")
    return created


def submit_prompt(
    db: Session,
    storage: StorageClient,
    title: Optional[str],
    modality: Optional[str],
    user_prompt_template: Optional[str],
    expected_output_description: Optional[str] = None,
    image: Optional[PreviewImage] = None,
) -> SubmissionResult:
    """Run the dashboard submission and report the outcome as a message."""
    try:
        prompt_data = build_prompt_create(
            title, modality, user_prompt_template, expected_output_description
        )
        prompt = create_prompt(db, storage, prompt_data, image)
    except HTTPException as e:
        record_submission(success=False)
        return SubmissionResult(success=False, message=f"{ERROR_PREFIX}{error_message(e)}")
    except Exception as e:
        message = str(e) or UNKNOWN_ERROR
        logger.exception(f"Form submit error: {message}")
        record_submission(success=False)
        return SubmissionResult(success=False, message=f"{ERROR_PREFIX}{message}")

    record_submission(success=True)
    return SubmissionResult(
        success=True, message=SUCCESS_MESSAGE, prompt=PromptResponse.model_validate(prompt)
    )


def get_all_prompts(db: Session) -> List[Prompt]:
    repository = PromptRepository(db)
    return repository.get_all()


def get_prompt_by_slug(db: Session, slug: str) -> Prompt:
    repository = PromptRepository(db)
    prompt = repository.get_by_slug(slug)

    if prompt is None:
        raise PromptNotFoundException(slug)

    return prompt


def to_card(prompt: Prompt) -> PromptCard:
    label, icon = modality_badge(prompt.modality)
    return PromptCard(
        id=prompt.id,
        title=prompt.title,
        slug=prompt.slug,
        modality=prompt.modality,
        modality_label=label,
        modality_icon=icon,
        prompt_preview=shorten_prompt(prompt.user_prompt_template),
        preview_url=prompt.preview_url if is_allowed_image_url(prompt.preview_url) else None,
        detail_url=detail_path(prompt.slug),
    )


def list_prompt_cards(db: Session) -> List[PromptCard]:
    """Cards for the listing page, newest first. A failed query yields no cards."""
    try:
        prompts = get_all_prompts(db)
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch prompts: {e}")
        return []
    return [to_card(prompt) for prompt in prompts]
