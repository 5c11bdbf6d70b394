"""Port interfaces for the voice connection and audio player."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import Enum

from bongo_player.domain.shared.types import ChannelIdField, DiscordSnowflake


class PlayerStatus(Enum):
    """What the audio player is doing right now."""

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"


class PlayerEvent(Enum):
    """Status changes reported by the audio player.

    Exactly one ``IDLE`` or ``ERROR`` is emitted each time a track stops,
    whether it ran to completion, was stopped, or failed.
    """

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    ERROR = "error"


PlayerListener = Callable[[PlayerEvent, Exception | None], None]
"""Receives player events. May be invoked from a non-event-loop thread."""


class AudioPlayer(ABC):
    """A single audio output bound to one voice connection."""

    @property
    @abstractmethod
    def status(self) -> PlayerStatus:
        ...

    @abstractmethod
    def play(self, path: str) -> None:
        """Start playing the audio file at *path*. Raises if the source is rejected."""
        ...

    @abstractmethod
    def stop(self) -> None:
        """Stop the current track. Emits ``IDLE`` if something was playing."""
        ...

    @abstractmethod
    def pause(self) -> None:
        ...

    @abstractmethod
    def resume(self) -> None:
        ...

    @abstractmethod
    def set_listener(self, listener: PlayerListener | None) -> None:
        ...


class VoiceConnection(ABC):
    """A joined voice channel in one guild."""

    @property
    @abstractmethod
    def channel_id(self) -> ChannelIdField:
        ...

    @abstractmethod
    def subscribe(self, player: AudioPlayer) -> None:
        """Route the player's audio into this connection."""
        ...

    @abstractmethod
    async def destroy(self) -> None:
        """Leave the channel. Safe to call more than once."""
        ...


class VoiceTransport(ABC):
    """Factory for voice connections and audio players."""

    @abstractmethod
    async def join(self, guild_id: DiscordSnowflake, channel_id: ChannelIdField) -> VoiceConnection:
        """Join a voice channel. Raises ``TransportError`` on failure."""
        ...

    @abstractmethod
    def create_player(self) -> AudioPlayer:
        ...
