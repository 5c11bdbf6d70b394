# ruff: noqa: N999
"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Constrained types, messages and exceptions
- music/: Track, guild queue and play mode rules
"""

from bongo_player.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
