"""Voice-channel guard functions shared by the slash commands and panel buttons."""

from __future__ import annotations

import discord

from bongo_player.domain.shared.messages import ErrorMessages


async def send_ephemeral(interaction: discord.Interaction, message: str) -> None:
    """Send an ephemeral message, handling both fresh and already-responded interactions."""
    if interaction.response.is_done():
        await interaction.followup.send(message, ephemeral=True)
    else:
        await interaction.response.send_message(message, ephemeral=True)


def voice_channel_id(member: discord.Member | None) -> int | None:
    """Id of the voice channel *member* is connected to, if any."""
    if member is None or member.voice is None or member.voice.channel is None:
        return None
    return member.voice.channel.id


def display_name(user: discord.abc.User) -> str:
    return getattr(user, "display_name", None) or user.name
