"""Discord text channel implementation of the output channel port."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from bongo_player.application.interfaces.output_channel import OutputChannel
from bongo_player.domain.shared.messages import LogTemplates
from bongo_player.infrastructure.discord.services.panel_renderer import build_panel_embed

if TYPE_CHECKING:
    from bongo_player.application.commands.dispatch_control import CommandDispatcher
    from bongo_player.application.services.panel_models import PanelSnapshot

logger = logging.getLogger(__name__)


class DiscordOutputChannel(OutputChannel):
    """Posts panels and notices to the text channel a session was started from.

    Send failures are logged and swallowed; the session keeps playing even if
    the bot lost access to the channel.
    """

    def __init__(self, channel: discord.abc.Messageable, dispatcher: CommandDispatcher) -> None:
        self._channel = channel
        self._dispatcher = dispatcher

    async def send_panel(self, snapshot: PanelSnapshot) -> None:
        from bongo_player.infrastructure.discord.views.playback_panel_view import (
            PlaybackPanelView,
        )

        view = PlaybackPanelView(self._dispatcher, snapshot)
        try:
            message = await self._channel.send(embed=build_panel_embed(snapshot), view=view)
        except discord.HTTPException as e:
            logger.warning(LogTemplates.OUTPUT_SEND_FAILED, snapshot.guild_id, e)
            return
        view.set_message(message)

    async def send_notice(self, text: str) -> None:
        try:
            await self._channel.send(text)
        except discord.HTTPException as e:
            logger.warning(LogTemplates.OUTPUT_SEND_FAILED, getattr(self._channel, "guild", None), e)
