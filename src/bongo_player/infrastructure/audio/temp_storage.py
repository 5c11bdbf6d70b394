"""Temporary on-disk storage for downloaded tracks."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Final

from bongo_player.application.interfaces.track_storage import TrackStorage
from bongo_player.domain.music.entities import Track
from bongo_player.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

FILE_PREFIX: Final[str] = "audio"
MAX_TITLE_LENGTH: Final[int] = 100

_UNSAFE_CHARS: Final[re.Pattern[str]] = re.compile(r'[\\/:*?"<>|\x00-\x1f]')
_WHITESPACE: Final[re.Pattern[str]] = re.compile(r"\s+")


def sanitize_title(title: str) -> str:
    """Make *title* safe to use as part of a file name."""
    cleaned = _UNSAFE_CHARS.sub("_", title)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    cleaned = cleaned[:MAX_TITLE_LENGTH].rstrip(" .")
    return cleaned or "track"


class TempTrackStorage(TrackStorage):
    """Single private directory holding ``audio-<timestamp>-<title>.<ext>`` files.

    Every file is owned by exactly one track and is deleted when that track
    is retired or its session stops. ``purge`` sweeps leftovers from a crash.
    """

    def __init__(self, directory: str | Path, audio_format: str = "mp3") -> None:
        self._directory = Path(directory).resolve()
        self._extension = audio_format.lstrip(".")
        self._directory.mkdir(parents=True, exist_ok=True)
        logger.info(LogTemplates.STORAGE_READY, self._directory)

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def extension(self) -> str:
        return self._extension

    def allocate_template(self, timestamp_ms: int) -> str:
        return str(self._directory / f"{FILE_PREFIX}-{timestamp_ms}-%(title)s.%(ext)s")

    def resolve_path(self, timestamp_ms: int, title: str) -> Path:
        return self._directory / f"{FILE_PREFIX}-{timestamp_ms}-{sanitize_title(title)}.{self._extension}"

    def normalize_path(self, path: str | Path) -> Path:
        return Path(path).with_suffix(f".{self._extension}")

    def exists(self, track: Track) -> bool:
        if not track.local_file_path:
            return False
        return Path(track.local_file_path).is_file()

    def release(self, track: Track) -> None:
        if not track.local_file_path:
            return
        path = Path(track.local_file_path)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(LogTemplates.STORAGE_RELEASE_FAILED, path, e)
            return
        logger.debug(LogTemplates.STORAGE_RELEASED, path)

    def purge(self) -> int:
        removed = 0
        for path in self._directory.glob(f"{FILE_PREFIX}-*"):
            if not path.is_file():
                continue
            try:
                path.unlink()
            except OSError as e:
                logger.warning(LogTemplates.STORAGE_RELEASE_FAILED, path, e)
                continue
            removed += 1

        if removed:
            logger.info(LogTemplates.STORAGE_PURGED, removed, self._directory)
        return removed
