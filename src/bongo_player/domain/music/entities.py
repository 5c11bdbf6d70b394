"""Core domain entities for the music bounded context."""

from __future__ import annotations

import random
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from bongo_player.domain.music.value_objects import PlayMode
from bongo_player.domain.shared.types import (
    DiscordSnowflake,
    DurationSeconds,
    DurationStr,
    HttpUrlStr,
    NonEmptyStr,
    TrackTitleStr,
)


def format_duration(seconds: int) -> str:
    """Format seconds as MM:SS, or HH:MM:SS when at least one hour long.

    >>> format_duration(125)
    '02:05'
    >>> format_duration(3725)
    '01:02:05'
    """
    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


class Track(BaseModel):
    """Immutable value object representing a downloaded, playable track."""

    model_config = ConfigDict(frozen=True, strict=True)

    UNKNOWN_REQUESTER: ClassVar[str] = "Unknown"

    title: TrackTitleStr
    source_url: HttpUrlStr
    duration: DurationStr
    duration_seconds: DurationSeconds
    author: NonEmptyStr
    requested_by: NonEmptyStr = UNKNOWN_REQUESTER
    local_file_path: NonEmptyStr | None = None
    thumbnail_url: HttpUrlStr | None = None

    @property
    def display_title(self) -> str:
        return f"{self.title} [{self.duration}]"

    def with_requester(self, display_name: NonEmptyStr) -> Track:
        """Return a copy of this track attributed to *display_name*."""
        return self.model_copy(update={"requested_by": display_name})


class GuildQueue(BaseModel):
    """Aggregate root holding the queue and play mode of a single guild.

    ``current`` is set only while a track is associated with the audio player
    and is ``None`` exactly when the guild is idle.
    """

    model_config = ConfigDict(strict=True)

    guild_id: DiscordSnowflake
    pending: list[Track] = Field(default_factory=list)
    current: Track | None = None
    mode: PlayMode = PlayMode.SEQUENTIAL
    autoplay: bool = False  # Reserved; never enabled

    @property
    def loop(self) -> bool:
        return self.mode.loop

    @property
    def shuffle(self) -> bool:
        return self.mode.shuffle

    @property
    def is_idle(self) -> bool:
        return self.current is None

    @property
    def has_pending(self) -> bool:
        return bool(self.pending)

    def enqueue(self, track: Track) -> int:
        """Append a track to the back of the queue and return the pending count."""
        self.pending.append(track)
        return len(self.pending)

    def select_next(self, rng: random.Random | None = None) -> tuple[Track | None, Track | None]:
        """Pick the track to play next.

        Returns ``(retired, selected)``. ``retired`` is the outgoing track whose
        file the caller must release, or ``None`` when nothing was retired (loop
        reselect or an idle queue). ``selected`` becomes ``current`` and is
        ``None`` when the queue is exhausted.
        """
        if self.loop and self.current is not None:
            return None, self.current

        retired = self.current
        selected: Track | None = None
        if self.pending:
            if self.shuffle:
                index = (rng or random).randrange(len(self.pending))
                selected = self.pending.pop(index)
            else:
                selected = self.pending.pop(0)

        self.current = selected
        return retired, selected

    def drop_current(self) -> Track | None:
        """Detach ``current`` without a loop reselect and return it."""
        dropped = self.current
        self.current = None
        return dropped

    def clear(self) -> list[Track]:
        """Empty the queue and return every track it held, current first."""
        removed = [self.current] if self.current is not None else []
        removed.extend(self.pending)
        self.current = None
        self.pending.clear()
        return removed

    def toggle_loop(self) -> PlayMode:
        self.mode = self.mode.toggled_loop()
        return self.mode

    def toggle_shuffle(self) -> PlayMode:
        self.mode = self.mode.toggled_shuffle()
        return self.mode
