"""Shared Pydantic validators for domain and settings models.

This module provides reusable validators for common validation patterns,
particularly for Discord-specific data types like snowflake IDs.
"""

from __future__ import annotations

from bongo_player.domain.shared.messages import ErrorMessages


def validate_discord_snowflake(value: int) -> int:
    """Validate a Discord snowflake ID.

    Discord snowflake IDs are 64-bit unsigned integers representing unique
    identifiers for users, guilds, channels, messages, etc.

    Raises:
        ValueError: If the snowflake ID is invalid.
    """
    if value <= 0:
        raise ValueError(ErrorMessages.INVALID_SNOWFLAKE)
    if value >= 2**64:
        raise ValueError(ErrorMessages.SNOWFLAKE_TOO_LARGE)
    return value


def split_csv(value: str) -> list[str]:
    """Split a comma-separated environment value, dropping blanks."""
    return [part.strip() for part in value.split(",") if part.strip()]
