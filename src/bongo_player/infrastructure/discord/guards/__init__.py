"""Voice channel guard functions for Discord cogs."""

from bongo_player.infrastructure.discord.guards.voice_guards import (
    display_name,
    send_ephemeral,
    voice_channel_id,
)

__all__ = [
    "display_name",
    "send_ephemeral",
    "voice_channel_id",
]
