"""discord.py implementations of the voice transport port."""

from bongo_player.infrastructure.discord.adapters.voice_adapter import (
    DiscordAudioPlayer,
    DiscordVoiceConnection,
    DiscordVoiceTransport,
)

__all__ = [
    "DiscordAudioPlayer",
    "DiscordVoiceConnection",
    "DiscordVoiceTransport",
]
