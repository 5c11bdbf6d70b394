"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from enum import Enum


class PlayMode(Enum):
    """How the next track is picked when the current one ends.

    A single tagged mode replaces a pair of flags, so a session can never
    loop and shuffle at the same time.
    """

    SEQUENTIAL = "sequential"
    LOOP = "loop"  # Replay the current track
    SHUFFLE = "shuffle"  # Pick a random pending track

    @property
    def loop(self) -> bool:
        return self is PlayMode.LOOP

    @property
    def shuffle(self) -> bool:
        return self is PlayMode.SHUFFLE

    def toggled_loop(self) -> PlayMode:
        """Flip loop on or off; turning it on clears shuffle."""
        return PlayMode.SEQUENTIAL if self.loop else PlayMode.LOOP

    def toggled_shuffle(self) -> PlayMode:
        """Flip shuffle on or off; turning it on clears loop."""
        return PlayMode.SEQUENTIAL if self.shuffle else PlayMode.SHUFFLE


class PlaybackState(Enum):
    """Per-session playback state, derived from the current track and player status.

    State transitions:
    - IDLE -> PLAYING (advance selects a track)
    - PLAYING -> PAUSED (pause)
    - PAUSED -> PLAYING (resume)
    - PLAYING -> IDLE (queue exhausted)
    """

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"

    @property
    def is_active(self) -> bool:
        return self in {PlaybackState.PLAYING, PlaybackState.PAUSED}


class ControlAction(Enum):
    """Control operations a user can dispatch against a guild's session."""

    SKIP = "skip"
    PAUSE_RESUME = "pause_resume"
    STOP = "stop"
    TOGGLE_LOOP = "loop"
    TOGGLE_SHUFFLE = "shuffle"


class ControlStatus(Enum):
    """Outcome of a dispatched control action."""

    SUCCESS = "success"
    NOTHING_PLAYING = "nothing_playing"
    NO_OP = "no_op"
