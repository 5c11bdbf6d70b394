"""DTOs describing what the playback panel shows."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ...domain.music.entities import GuildQueue
from ...domain.shared.types import DiscordSnowflake


class PanelSnapshot(BaseModel):
    """Read-only view of a guild's session, taken after an action ran."""

    model_config = ConfigDict(frozen=True)

    guild_id: DiscordSnowflake
    title: str
    source_url: str
    requested_by: str
    duration: str
    author: str
    thumbnail_url: str | None = None
    loop: bool = False
    shuffle: bool = False
    autoplay: bool = False
    paused: bool = False
    pending_count: int = 0

    @classmethod
    def capture(cls, queue: GuildQueue, *, paused: bool = False) -> PanelSnapshot | None:
        """Snapshot *queue*, or return None when nothing is current."""
        track = queue.current
        if track is None:
            return None
        return cls(
            guild_id=queue.guild_id,
            title=track.title,
            source_url=track.source_url,
            requested_by=track.requested_by,
            duration=track.duration,
            author=track.author,
            thumbnail_url=track.thumbnail_url,
            loop=queue.loop,
            shuffle=queue.shuffle,
            autoplay=queue.autoplay,
            paused=paused,
            pending_count=len(queue.pending),
        )
