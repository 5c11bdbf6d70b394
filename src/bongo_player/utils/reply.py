"""Text helpers for Discord message content."""

from __future__ import annotations

from functools import cache

ELLIPSIS = "…"


@cache
def truncate(text: str, max_length: int = 90) -> str:
    """Clip *text* to *max_length* characters, ending with an ellipsis when cut."""
    if max_length < 1:
        return ""
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + ELLIPSIS

