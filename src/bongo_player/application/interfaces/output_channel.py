"""Port interface for posting playback messages to a guild's text channel."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..services.panel_models import PanelSnapshot


class OutputChannel(ABC):
    """Where a session announces new tracks and queue state."""

    @abstractmethod
    async def send_panel(self, snapshot: "PanelSnapshot") -> None:
        """Post the playback panel for the track described by *snapshot*."""
        ...

    @abstractmethod
    async def send_notice(self, text: str) -> None:
        ...
