"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when a request fails validation (no voice channel, empty query, no session)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class ResolutionError(DomainError):
    """Raised when a query cannot be turned into a playable track."""

    def __init__(self, query: str, message: str | None = None) -> None:
        msg = message or f"Could not resolve '{query}'"
        super().__init__(msg, code="RESOLUTION_ERROR")
        self.query = query


class PlaybackError(DomainError):
    """Raised when a track cannot be played (missing file, transport refused the source)."""

    def __init__(self, track_title: str, message: str | None = None) -> None:
        msg = message or f"Could not play '{track_title}'"
        super().__init__(msg, code="PLAYBACK_ERROR")
        self.track_title = track_title


class TransportError(DomainError):
    """Raised when the voice transport fails (join timeout, missing permissions)."""

    def __init__(self, guild_id: int, message: str | None = None) -> None:
        msg = message or f"Voice transport failure in guild {guild_id}"
        super().__init__(msg, code="TRANSPORT_ERROR")
        self.guild_id = guild_id


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state
