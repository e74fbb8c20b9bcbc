from typing import Optional, Tuple
from urllib.parse import urlparse

from prompty.config import PROMPT_PREVIEW_LENGTH, SUPABASE
from prompty.utils.constants import DEFAULT_MODALITY_ICON, ELLIPSIS, MODALITY_ICONS, MODALITY_LABELS


def shorten_prompt(text: Optional[str], max_length: int = PROMPT_PREVIEW_LENGTH) -> str:
    if not text or not text.strip():
        return ""
    trimmed = text.strip()
    if len(trimmed) <= max_length:
        return trimmed
    return trimmed[:max_length].strip() + ELLIPSIS


def modality_badge(modality: str) -> Tuple[str, str]:
    """Return ``(label, icon)`` for a modality, keeping unknown values readable."""
    label = MODALITY_LABELS.get(modality, modality)
    icon = MODALITY_ICONS.get(modality, DEFAULT_MODALITY_ICON)
    return label, icon


def is_allowed_image_url(url: Optional[str], allowed_host: Optional[str] = None) -> bool:
    """Only public storage objects on the configured backend host may be rendered."""
    if not url:
        return False
    host = allowed_host or SUPABASE.HOST
    parsed = urlparse(url)
    return (
        parsed.scheme == "https"
        and parsed.hostname == host
        and parsed.path.startswith(SUPABASE.PUBLIC_OBJECT_PATH)
    )


def detail_path(slug: str) -> str:
    return f"/prompts/{slug}"
