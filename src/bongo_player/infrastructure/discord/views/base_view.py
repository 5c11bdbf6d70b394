"""Base class for interactive Discord views with common patterns."""

from __future__ import annotations

import logging

import discord

from bongo_player.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class BaseInteractiveView(discord.ui.View):
    """View that remembers the message it is attached to."""

    def __init__(self, *, timeout: float | None = 180.0) -> None:
        super().__init__(timeout=timeout)
        self._message: discord.Message | None = None

    @property
    def message(self) -> discord.Message | None:
        return self._message

    def set_message(self, message: discord.Message) -> None:
        self._message = message

    def _disable_buttons(self) -> None:
        for item in self.children:
            if isinstance(item, discord.ui.Button):
                item.disabled = True

    async def _try_edit(
        self,
        interaction: discord.Interaction,
        *,
        embed: discord.Embed | None = None,
    ) -> None:
        """Edit the message the interaction came from, logging failures."""
        try:
            if embed is not None:
                await interaction.edit_original_response(embed=embed, view=self)
            else:
                await interaction.edit_original_response(view=self)
        except discord.HTTPException as e:
            logger.warning(LogTemplates.PANEL_EDIT_FAILED, e)
