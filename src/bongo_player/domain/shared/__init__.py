"""
Shared Domain Kernel

Contains constrained types and exceptions shared across the domain.
"""

from bongo_player.domain.shared.exceptions import (
    DomainError,
    InvalidOperationError,
    PlaybackError,
    ResolutionError,
    TransportError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "ResolutionError",
    "PlaybackError",
    "TransportError",
    "InvalidOperationError",
]
