"""Builds the playback panel embed from a session snapshot."""

from __future__ import annotations

import discord

from bongo_player.application.services.panel_models import PanelSnapshot
from bongo_player.domain.shared.messages import DiscordUIMessages
from bongo_player.utils.reply import truncate


def _flag(enabled: bool) -> str:
    return DiscordUIMessages.FLAG_ON if enabled else DiscordUIMessages.FLAG_OFF


def build_panel_embed(snapshot: PanelSnapshot) -> discord.Embed:
    embed = discord.Embed(
        title=DiscordUIMessages.EMBED_PANEL_TITLE,
        description=f"[{truncate(snapshot.title, 200)}]({snapshot.source_url})",
        color=discord.Color.orange() if snapshot.paused else discord.Color.green(),
    )

    if snapshot.thumbnail_url:
        embed.set_thumbnail(url=snapshot.thumbnail_url)

    embed.add_field(name=DiscordUIMessages.FIELD_REQUESTED_BY, value=snapshot.requested_by, inline=True)
    embed.add_field(name=DiscordUIMessages.FIELD_DURATION, value=snapshot.duration, inline=True)
    embed.add_field(
        name=DiscordUIMessages.FIELD_AUTHOR, value=truncate(snapshot.author, 64), inline=True
    )
    embed.set_footer(
        text=DiscordUIMessages.FOOTER_MODES.format(
            loop=_flag(snapshot.loop), shuffle=_flag(snapshot.shuffle)
        )
    )
    return embed
