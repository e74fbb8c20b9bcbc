import re
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..models.enums import Modality

SAFE_EXTENSION = re.compile(r"^[A-Za-z0-9]{1,10}$")


class PromptBase(BaseModel):
    title: str
    modality: Modality
    user_prompt_template: str
    expected_output_description: Optional[str] = None


class PromptCreate(PromptBase):
    @field_validator("title", "user_prompt_template", mode="before")
    @classmethod
    def strip_required(cls, value, info):
        if value is None:
            value = ""
        if isinstance(value, str):
            value = value.strip()
        if value == "":
            raise ValueError(f"{info.field_name} is required")
        return value

    @field_validator("modality", mode="before")
    @classmethod
    def strip_modality(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("expected_output_description", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str):
            value = value.strip()
        return value or None


class PromptResponse(BaseModel):
    id: uuid.UUID
    title: str
    slug: str
    modality: str
    user_prompt_template: str
    expected_output_description: Optional[str] = None
    preview_url: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PreviewImage(BaseModel):
    filename: str
    content_type: str
    data: bytes

    @property
    def extension(self) -> Optional[str]:
        if "." not in self.filename:
            return None
        extension = self.filename.rsplit(".", 1)[-1]
        # The extension ends up in the object key, so anything odd is dropped
        if not SAFE_EXTENSION.match(extension):
            return None
        return extension.lower()

    @property
    def is_image(self) -> bool:
        return (self.content_type or "").startswith("image/")


class PromptCard(BaseModel):
    id: uuid.UUID
    title: str
    slug: str
    modality: str
    modality_label: str
    modality_icon: str
    prompt_preview: str
    preview_url: Optional[str] = None
    detail_url: str


class SubmissionResult(BaseModel):
    success: bool
    message: str
    prompt: Optional[PromptResponse] = None

    @property
    def is_error(self) -> bool:
        return not self.success
