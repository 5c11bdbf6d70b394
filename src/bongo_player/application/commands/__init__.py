"""
Application Commands

Command objects and their handlers for write operations.
"""

from bongo_player.application.commands.dispatch_control import (
    CommandDispatcher,
    ControlResult,
    parse_action,
)
from bongo_player.application.commands.play_track import (
    Acknowledgement,
    PlayRequest,
    PlayResult,
    PlayStatus,
)

__all__ = [
    # Play
    "PlayRequest",
    "PlayResult",
    "PlayStatus",
    "Acknowledgement",
    # Controls
    "CommandDispatcher",
    "ControlResult",
    "parse_action",
]
