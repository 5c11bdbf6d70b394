"""Command objects for the deferred play flow."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

from bongo_player.domain.music.entities import Track
from bongo_player.domain.shared.exceptions import ValidationError
from bongo_player.domain.shared.messages import DiscordUIMessages, ErrorMessages
from bongo_player.domain.shared.types import DiscordSnowflake, NonEmptyStr


class PlayStatus(Enum):
    """Final outcome of a background play job."""

    QUEUED = "queued"
    NO_RESULTS = "no_results"
    JOIN_FAILED = "join_failed"
    DISCARDED = "discarded"
    ERROR = "error"


class PlayRequest(BaseModel):
    """Request to resolve a query and queue the result in the requester's guild."""

    model_config = ConfigDict(frozen=True)

    guild_id: DiscordSnowflake | None
    voice_channel_id: DiscordSnowflake | None
    requester_id: DiscordSnowflake
    requester_name: NonEmptyStr
    query: str

    @field_validator("query", mode="before")
    @classmethod
    def _strip_query(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v

    def ensure_valid(self) -> None:
        """Raise ``ValidationError`` if the request cannot be served."""
        if self.guild_id is None:
            raise ValidationError(ErrorMessages.MISSING_GUILD, field="guild_id")
        if self.voice_channel_id is None:
            raise ValidationError(ErrorMessages.NOT_IN_VOICE, field="voice_channel_id")
        if not self.query:
            raise ValidationError(ErrorMessages.EMPTY_QUERY, field="query")


class PlayResult(BaseModel):
    """What the background job ended with, and the follow-up text it sent."""

    model_config = ConfigDict(frozen=True)

    status: PlayStatus
    message: str
    track: Track | None = None
    started_playing: bool = False

    @property
    def is_success(self) -> bool:
        return self.status == PlayStatus.QUEUED

    @classmethod
    def queued(cls, track: Track, *, started_playing: bool) -> PlayResult:
        return cls(
            status=PlayStatus.QUEUED,
            message=DiscordUIMessages.PLAY_ADDED.format(title=track.title),
            track=track,
            started_playing=started_playing,
        )

    @classmethod
    def no_results(cls, query: str) -> PlayResult:
        return cls(
            status=PlayStatus.NO_RESULTS,
            message=DiscordUIMessages.PLAY_NO_RESULTS.format(query=query),
        )

    @classmethod
    def join_failed(cls) -> PlayResult:
        return cls(status=PlayStatus.JOIN_FAILED, message=DiscordUIMessages.PLAY_JOIN_FAILED)

    @classmethod
    def discarded(cls, track: Track) -> PlayResult:
        return cls(
            status=PlayStatus.DISCARDED,
            message=DiscordUIMessages.PLAY_SESSION_STOPPED.format(title=track.title),
            track=track,
        )

    @classmethod
    def error(cls) -> PlayResult:
        return cls(status=PlayStatus.ERROR, message=DiscordUIMessages.PLAY_FAILED)


@dataclass
class Acknowledgement:
    """Immediate answer to a play request, sent before any real work happens."""

    accepted: bool
    message: str | None = None
    job: asyncio.Task[PlayResult] | None = field(default=None, repr=False)

    @property
    def ephemeral(self) -> bool:
        return not self.accepted

    @classmethod
    def deferred(cls, job: asyncio.Task[PlayResult]) -> Acknowledgement:
        return cls(accepted=True, job=job)

    @classmethod
    def rejected(cls, message: str) -> Acknowledgement:
        return cls(accepted=False, message=message)
