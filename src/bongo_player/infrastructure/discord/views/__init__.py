"""Discord UI views and components."""

from __future__ import annotations

from bongo_player.infrastructure.discord.views.base_view import BaseInteractiveView
from bongo_player.infrastructure.discord.views.playback_panel_view import PlaybackPanelView

__all__ = [
    "BaseInteractiveView",
    "PlaybackPanelView",
]
