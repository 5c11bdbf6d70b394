"""Port interface for the temporary audio file lifecycle."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.music.entities import Track


class TrackStorage(ABC):
    """Interface for allocating, checking and releasing downloaded track files."""

    @property
    @abstractmethod
    def directory(self) -> Path:
        ...

    @abstractmethod
    def allocate_template(self, timestamp_ms: int) -> str:
        """Return the extractor output template for a request made at *timestamp_ms*."""
        ...

    @abstractmethod
    def resolve_path(self, timestamp_ms: int, title: str) -> Path:
        """Return the concrete file path the template expands to for *title*."""
        ...

    @abstractmethod
    def normalize_path(self, path: str | Path) -> Path:
        """Force the playback container extension onto *path*."""
        ...

    @abstractmethod
    def exists(self, track: "Track") -> bool:
        ...

    @abstractmethod
    def release(self, track: "Track") -> None:
        """Best-effort delete of the track's backing file. Never raises."""
        ...

    @abstractmethod
    def purge(self) -> int:
        """Delete every leftover track file and return how many were removed."""
        ...
