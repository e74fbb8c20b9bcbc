from functools import wraps
from typing import Any, Callable, TypeVar

from fastapi import HTTPException
from sqlalchemy.orm import Session

F = TypeVar("F", bound=Callable[..., Any])


def rollback_on_exception(func: F) -> F:
    @wraps(func)
    def wrapper(*args, **kwargs):
        db: Session = kwargs.get("db") or next((a for a in args if isinstance(a, Session)), None)
        # If not found, check if first arg is self and has .db
        if not db and args:
            db = getattr(args[0], "db", None)
        if not db:
            raise ValueError("SQLAlchemy session (db: Session) is required")

        try:
            return func(*args, **kwargs)
        except Exception:
            db.rollback()
            raise

    return wrapper  # type: ignore


class StorageError(Exception):
    """Raised when the object storage backend rejects a request."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class PromptNotFoundException(HTTPException):
    def __init__(self, slug: str):
        super().__init__(status_code=404, detail={"type": "PROMPT_NOT_FOUND", "message": f"Prompt not found for slug {slug}"})


class InvalidPromptException(HTTPException):
    def __init__(self, message: str):
        super().__init__(status_code=422, detail={"type": "INVALID_PROMPT", "message": message})


class InvalidPreviewImageException(HTTPException):
    def __init__(self, content_type: str):
        super().__init__(status_code=422, detail={"type": "INVALID_PREVIEW_IMAGE", "message": f"Preview must be an image file, got {content_type or 'unknown type'}"})


class PreviewUploadFailedException(HTTPException):
    def __init__(self, message: str):
        super().__init__(status_code=502, detail={"type": "PREVIEW_UPLOAD_FAILED", "message": message})


class PromptInsertFailedException(HTTPException):
    def __init__(self, message: str):
        super().__init__(status_code=502, detail={"type": "PROMPT_INSERT_FAILED", "message": message})


def error_message(exc: HTTPException) -> str:
    detail = exc.detail
    if isinstance(detail, dict):
        return detail.get("message", str(detail))
    return str(detail)
