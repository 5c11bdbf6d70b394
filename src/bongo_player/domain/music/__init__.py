"""
Music Bounded Context

Domain logic for tracks, the per-guild queue, and play modes.
"""

from bongo_player.domain.music.entities import GuildQueue, Track, format_duration
from bongo_player.domain.music.value_objects import (
    ControlAction,
    ControlStatus,
    PlaybackState,
    PlayMode,
)

__all__ = [
    # Entities
    "Track",
    "GuildQueue",
    "format_duration",
    # Value Objects
    "PlayMode",
    "PlaybackState",
    "ControlAction",
    "ControlStatus",
]
