"""Discord cogs - command handlers."""

from bongo_player.infrastructure.discord.cogs.music_cog import MusicCog

__all__ = ["MusicCog"]
