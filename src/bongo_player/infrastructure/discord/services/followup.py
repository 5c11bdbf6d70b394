"""Follow-up channel that delivers the result of a deferred play request."""

from __future__ import annotations

import asyncio
import logging

import discord

from bongo_player.application.interfaces.followup import FollowupChannel
from bongo_player.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class InteractionFollowup(FollowupChannel):
    """Sends through ``interaction.followup`` of a deferred gateway interaction.

    ``send`` waits until ``mark_acknowledged`` is called so the follow-up can
    never overtake the deferred response it continues.
    """

    def __init__(self, interaction: discord.Interaction) -> None:
        self._interaction = interaction
        self._acknowledged = asyncio.Event()

    def mark_acknowledged(self) -> None:
        self._acknowledged.set()

    async def send(self, content: str, *, ephemeral: bool = False) -> None:
        await self._acknowledged.wait()
        try:
            await self._interaction.followup.send(content, ephemeral=ephemeral)
        except discord.HTTPException as e:
            logger.warning(LogTemplates.FOLLOWUP_FAILED, e)
