import re
import time
from typing import Optional

FALLBACK_SLUG_PREFIX = "prompt"

_WHITESPACE_RUN = re.compile(r"\s+")
_DISALLOWED_CHARS = re.compile(r"[^a-z0-9-]")


def now_ms() -> int:
    return int(time.time() * 1000)


def slug_from_title(title: str) -> str:
    """Lowercase, trim, hyphenate whitespace runs and drop anything outside [a-z0-9-]."""
    slug = title.lower().strip()
    slug = _WHITESPACE_RUN.sub("-", slug)
    return _DISALLOWED_CHARS.sub("", slug)


def derive_slug(title: str, timestamp_ms: Optional[int] = None) -> str:
    """
    Slug for a new prompt.

    Falls back to ``prompt-<epoch ms>`` when the title has nothing slug-worthy in it.
    Uniqueness against stored prompts is not checked.
    """
    slug = slug_from_title(title or "")
    if slug:
        return slug
    if timestamp_ms is None:
        timestamp_ms = now_ms()
    return f"{FALLBACK_SLUG_PREFIX}-{timestamp_ms}"
