"""Pydantic models for the JSON records yt-dlp prints with ``--print-json``.

These are infrastructure-specific models for parsing external yt-dlp output
into something the resolver can turn into a domain ``Track``.
"""

from __future__ import annotations

from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bongo_player.domain.shared.types import HttpUrlStr, NonEmptyStr

DEFAULT_AUTHOR: Final[str] = "Unknown"
PLAYLIST_TYPE: Final[str] = "playlist"


class YtDlpTrackInfo(BaseModel):
    """Trimmed yt-dlp record for a single downloaded entry.

    Extra fields from yt-dlp are silently ignored. Before-validators coerce
    garbage from external yt-dlp data to ``None`` so that missing and broken
    values are treated the same way.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    record_type: str | None = Field(default=None, alias="_type")
    url: NonEmptyStr | None = None
    webpage_url: HttpUrlStr | None = None
    title: NonEmptyStr | None = None
    duration: int | None = None
    thumbnail: HttpUrlStr | None = None
    uploader: NonEmptyStr | None = None
    channel: NonEmptyStr | None = None
    artist: NonEmptyStr | None = None
    filename: NonEmptyStr | None = Field(default=None, alias="_filename")
    filepath: NonEmptyStr | None = None

    @field_validator(
        "record_type", "url", "webpage_url", "title", "thumbnail",
        "uploader", "channel", "artist", "filename", "filepath",
        mode="before",
    )
    @classmethod
    def _coerce_empty_to_none(cls, v: Any) -> str | None:
        """Convert empty / whitespace-only / non-string values to None."""
        if not isinstance(v, str) or not v.strip():
            return None
        return v.strip()

    @field_validator("webpage_url", "thumbnail", mode="before")
    @classmethod
    def _coerce_non_http(cls, v: Any) -> str | None:
        if isinstance(v, str) and not v.startswith(("http://", "https://")):
            return None
        return v

    @field_validator("duration", mode="before")
    @classmethod
    def _coerce_duration(cls, v: Any) -> int | None:
        """Round to whole seconds; return None for missing, garbage or non-positive values."""
        if v is None or isinstance(v, bool):
            return None
        try:
            val = round(float(v))
        except (TypeError, ValueError, OverflowError):
            return None
        return val if val > 0 else None

    @property
    def is_playlist(self) -> bool:
        return self.record_type == PLAYLIST_TYPE

    @property
    def missing_fields(self) -> list[str]:
        """Names of the fields a playable record must carry but this one lacks."""
        missing = []
        if self.url is None:
            missing.append("url")
        if self.title is None:
            missing.append("title")
        if self.duration is None:
            missing.append("duration")
        return missing

    @property
    def author(self) -> str:
        return self.uploader or self.channel or self.artist or DEFAULT_AUTHOR

    @property
    def source_url(self) -> str | None:
        if self.webpage_url:
            return self.webpage_url
        if self.url and self.url.startswith(("http://", "https://")):
            return self.url
        return None

    @property
    def reported_path(self) -> str | None:
        return self.filepath or self.filename
