"""Slash-command cog: /play plus the control commands that mirror the panel buttons."""

from __future__ import annotations

from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from bongo_player.application.commands.play_track import PlayRequest
from bongo_player.domain.music.value_objects import ControlAction
from bongo_player.domain.shared.messages import ErrorMessages
from bongo_player.infrastructure.discord.guards.voice_guards import (
    display_name,
    send_ephemeral,
    voice_channel_id,
)
from bongo_player.infrastructure.discord.services.followup import InteractionFollowup
from bongo_player.infrastructure.discord.services.output_channel import DiscordOutputChannel
from bongo_player.infrastructure.discord.services.panel_renderer import build_panel_embed

if TYPE_CHECKING:
    from ....config.container import Container


class MusicCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    # ─────────────────────────────────────────────────────────────────
    # Play
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="play", description="Play a song by URL or search query.")
    @app_commands.describe(query="URL or search query")
    async def play(self, interaction: discord.Interaction, query: str) -> None:
        """Acknowledge immediately; joining, downloading and queueing happen in the background."""
        member = interaction.user if isinstance(interaction.user, discord.Member) else None
        request = PlayRequest(
            guild_id=interaction.guild_id,
            voice_channel_id=voice_channel_id(member),
            requester_id=interaction.user.id,
            requester_name=display_name(interaction.user),
            query=query,
        )

        followup = InteractionFollowup(interaction)
        output = DiscordOutputChannel(interaction.channel, self.container.command_dispatcher)
        ack = self.container.job_runner.submit_play(request, followup, output)

        if not ack.accepted:
            await interaction.response.send_message(ack.message, ephemeral=ack.ephemeral)
            return

        try:
            await interaction.response.defer(thinking=True)
        finally:
            followup.mark_acknowledged()

    # ─────────────────────────────────────────────────────────────────
    # Controls
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="skip", description="Skip the current track.")
    async def skip(self, interaction: discord.Interaction) -> None:
        await self._dispatch(interaction, ControlAction.SKIP)

    @app_commands.command(name="pause", description="Pause or resume playback.")
    async def pause(self, interaction: discord.Interaction) -> None:
        await self._dispatch(interaction, ControlAction.PAUSE_RESUME)

    @app_commands.command(name="stop", description="Stop playback, clear the queue and leave.")
    async def stop(self, interaction: discord.Interaction) -> None:
        await self._dispatch(interaction, ControlAction.STOP)

    @app_commands.command(name="loop", description="Toggle looping of the current track.")
    async def loop(self, interaction: discord.Interaction) -> None:
        await self._dispatch(interaction, ControlAction.TOGGLE_LOOP)

    @app_commands.command(name="shuffle", description="Toggle shuffled playback order.")
    async def shuffle(self, interaction: discord.Interaction) -> None:
        await self._dispatch(interaction, ControlAction.TOGGLE_SHUFFLE)

    async def _dispatch(self, interaction: discord.Interaction, action: ControlAction) -> None:
        if interaction.guild_id is None:
            await send_ephemeral(interaction, ErrorMessages.MISSING_GUILD)
            return

        await interaction.response.defer(ephemeral=True)
        result = await self.container.command_dispatcher.dispatch(interaction.guild_id, action)

        if result.snapshot is not None:
            await interaction.followup.send(
                result.message, embed=build_panel_embed(result.snapshot), ephemeral=True
            )
        else:
            await interaction.followup.send(result.message, ephemeral=True)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(MusicCog(bot, container))
