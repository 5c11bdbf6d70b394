"""Persistent playback panel: two rows of transport and mode buttons under the track embed."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from bongo_player.application.commands.dispatch_control import parse_action
from bongo_player.domain.music.value_objects import ControlAction, ControlStatus
from bongo_player.domain.shared.exceptions import ValidationError
from bongo_player.domain.shared.messages import ErrorMessages, LogTemplates
from bongo_player.infrastructure.discord.guards.voice_guards import send_ephemeral
from bongo_player.infrastructure.discord.services.panel_renderer import build_panel_embed
from bongo_player.infrastructure.discord.views.base_view import BaseInteractiveView

if TYPE_CHECKING:
    from bongo_player.application.commands.dispatch_control import CommandDispatcher, ControlResult
    from bongo_player.application.services.panel_models import PanelSnapshot

logger = logging.getLogger(__name__)

PanelButton = discord.ui.Button["PlaybackPanelView"]


class PlaybackPanelView(BaseInteractiveView):
    """Buttons attached to every playback panel message.

    The view never times out and every button has a fixed ``custom_id``, so a
    single instance registered with ``bot.add_view`` keeps old panels working
    across restarts. Button ids map onto ``ControlAction`` values; the ones
    without behaviour are rendered disabled.
    """

    def __init__(
        self, dispatcher: CommandDispatcher, snapshot: PanelSnapshot | None = None
    ) -> None:
        super().__init__(timeout=None)
        self.dispatcher = dispatcher
        self.apply_snapshot(snapshot)

    def apply_snapshot(self, snapshot: PanelSnapshot | None) -> None:
        """Set labels and styles to reflect *snapshot*."""
        paused = snapshot.paused if snapshot else False
        loop = snapshot.loop if snapshot else False
        shuffle = snapshot.shuffle if snapshot else False

        self.pause_resume_button.label = "Resume" if paused else "Pause"
        self.loop_button.style = discord.ButtonStyle.success if loop else discord.ButtonStyle.secondary
        self.shuffle_button.style = (
            discord.ButtonStyle.success if shuffle else discord.ButtonStyle.secondary
        )

    # Row 0

    @discord.ui.button(
        label="Down", custom_id="down", style=discord.ButtonStyle.secondary, row=0, disabled=True
    )
    async def down_button(self, interaction: discord.Interaction, button: PanelButton) -> None:
        await self._handle(interaction, button)

    @discord.ui.button(
        label="Back", custom_id="back", style=discord.ButtonStyle.secondary, row=0, disabled=True
    )
    async def back_button(self, interaction: discord.Interaction, button: PanelButton) -> None:
        await self._handle(interaction, button)

    @discord.ui.button(
        label="Pause", custom_id="pause_resume", style=discord.ButtonStyle.primary, row=0
    )
    async def pause_resume_button(self, interaction: discord.Interaction, button: PanelButton) -> None:
        await self._handle(interaction, button)

    @discord.ui.button(label="Skip", custom_id="skip", style=discord.ButtonStyle.primary, row=0)
    async def skip_button(self, interaction: discord.Interaction, button: PanelButton) -> None:
        await self._handle(interaction, button)

    @discord.ui.button(
        label="Up", custom_id="up", style=discord.ButtonStyle.secondary, row=0, disabled=True
    )
    async def up_button(self, interaction: discord.Interaction, button: PanelButton) -> None:
        await self._handle(interaction, button)

    # Row 1

    @discord.ui.button(
        label="Shuffle", custom_id="shuffle", style=discord.ButtonStyle.secondary, row=1
    )
    async def shuffle_button(self, interaction: discord.Interaction, button: PanelButton) -> None:
        await self._handle(interaction, button)

    @discord.ui.button(label="Loop", custom_id="loop", style=discord.ButtonStyle.secondary, row=1)
    async def loop_button(self, interaction: discord.Interaction, button: PanelButton) -> None:
        await self._handle(interaction, button)

    @discord.ui.button(label="Stop", custom_id="stop", style=discord.ButtonStyle.danger, row=1)
    async def stop_button(self, interaction: discord.Interaction, button: PanelButton) -> None:
        await self._handle(interaction, button)

    @discord.ui.button(
        label="AutoPlay",
        custom_id="autoplay",
        style=discord.ButtonStyle.secondary,
        row=1,
        disabled=True,
    )
    async def autoplay_button(self, interaction: discord.Interaction, button: PanelButton) -> None:
        await self._handle(interaction, button)

    @discord.ui.button(
        label="Playlist",
        custom_id="playlist",
        style=discord.ButtonStyle.secondary,
        row=1,
        disabled=True,
    )
    async def playlist_button(self, interaction: discord.Interaction, button: PanelButton) -> None:
        await self._handle(interaction, button)

    # Dispatch

    async def _handle(self, interaction: discord.Interaction, button: PanelButton) -> None:
        guild_id = interaction.guild_id
        if guild_id is None:
            await send_ephemeral(interaction, ErrorMessages.MISSING_GUILD)
            return

        try:
            action = parse_action(button.custom_id or "")
        except ValidationError as exc:
            await send_ephemeral(interaction, exc.message)
            return

        await interaction.response.defer()
        result = await self.dispatcher.dispatch(guild_id, action)
        await self._render(interaction, result)

        try:
            await interaction.followup.send(result.message, ephemeral=True)
        except discord.HTTPException as e:
            logger.warning(LogTemplates.FOLLOWUP_FAILED, e)

    async def _render(self, interaction: discord.Interaction, result: ControlResult) -> None:
        if result.action is ControlAction.STOP and result.status is ControlStatus.SUCCESS:
            view = PlaybackPanelView(self.dispatcher)
            view._disable_buttons()
            await view._try_edit(interaction)
            return

        if result.snapshot is None:
            return

        view = PlaybackPanelView(self.dispatcher, result.snapshot)
        await view._try_edit(interaction, embed=build_panel_embed(result.snapshot))
