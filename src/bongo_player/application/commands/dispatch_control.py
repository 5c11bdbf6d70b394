"""Command dispatcher for panel buttons and control slash commands."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from bongo_player.application.services.panel_models import PanelSnapshot
from bongo_player.domain.music.value_objects import ControlAction, ControlStatus
from bongo_player.domain.shared.exceptions import InvalidOperationError, ValidationError
from bongo_player.domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates
from bongo_player.domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ..services.guild_registry import GuildRegistry, GuildSession
    from ..services.playback_engine import PlaybackEngine

logger = logging.getLogger(__name__)

# Panel buttons that are rendered but have no behaviour behind them yet.
UNIMPLEMENTED_CONTROL_IDS: frozenset[str] = frozenset({"down", "back", "up", "autoplay", "playlist"})


def parse_action(custom_id: str) -> ControlAction:
    """Map a panel button id to its control action.

    Raises ``ValidationError`` for unknown ids and for buttons that are
    shown disabled on the panel.
    """
    if custom_id in UNIMPLEMENTED_CONTROL_IDS:
        raise ValidationError(
            ErrorMessages.CONTROL_NOT_IMPLEMENTED.format(custom_id=custom_id), field="custom_id"
        )
    try:
        return ControlAction(custom_id)
    except ValueError:
        raise ValidationError(
            ErrorMessages.UNKNOWN_CONTROL.format(custom_id=custom_id), field="custom_id"
        ) from None


def _flag(enabled: bool) -> str:
    return DiscordUIMessages.FLAG_ON if enabled else DiscordUIMessages.FLAG_OFF


class ControlResult(BaseModel):
    """Outcome of a dispatched control, with the panel state after it ran."""

    model_config = ConfigDict(frozen=True)

    action: ControlAction
    status: ControlStatus
    message: str
    snapshot: PanelSnapshot | None = None

    @property
    def is_success(self) -> bool:
        return self.status == ControlStatus.SUCCESS

    @classmethod
    def nothing_playing(cls, action: ControlAction) -> ControlResult:
        return cls(
            action=action,
            status=ControlStatus.NOTHING_PLAYING,
            message=DiscordUIMessages.STATE_NOTHING_PLAYING,
        )


class CommandDispatcher:
    """Routes control actions to the guild's session.

    Every action except STOP runs inside the session's actor; STOP tears the
    session down through the registry.
    """

    def __init__(self, *, registry: GuildRegistry, engine: PlaybackEngine) -> None:
        self._registry = registry
        self._engine = engine

    async def dispatch(self, guild_id: DiscordSnowflake, action: ControlAction) -> ControlResult:
        session = self._registry.get(guild_id)
        if session is None or session.is_closed:
            logger.debug(LogTemplates.CONTROL_NO_SESSION, action.value, guild_id)
            return ControlResult.nothing_playing(action)

        if action is ControlAction.STOP:
            if not await self._engine.stop(guild_id):
                return ControlResult.nothing_playing(action)
            logger.info(LogTemplates.CONTROL_DISPATCHED, action.value, guild_id)
            return ControlResult(
                action=action,
                status=ControlStatus.SUCCESS,
                message=DiscordUIMessages.CONTROL_STOPPED,
            )

        try:
            status, message = await self._run_in_session(session, action)
            snapshot = await self._engine.snapshot(session)
        except InvalidOperationError:
            # Session was stopped while the action waited in its inbox.
            return ControlResult.nothing_playing(action)

        if action is ControlAction.PAUSE_RESUME and status is ControlStatus.SUCCESS:
            paused = snapshot is not None and snapshot.paused
            message = DiscordUIMessages.CONTROL_PAUSED if paused else DiscordUIMessages.CONTROL_RESUMED

        logger.info(LogTemplates.CONTROL_DISPATCHED, action.value, guild_id)
        return ControlResult(action=action, status=status, message=message, snapshot=snapshot)

    async def _run_in_session(
        self, session: GuildSession, action: ControlAction
    ) -> tuple[ControlStatus, str]:
        if action is ControlAction.SKIP:
            status = await self._engine.skip(session)
            if status is ControlStatus.NO_OP:
                return status, DiscordUIMessages.STATE_NOTHING_PLAYING
            return status, DiscordUIMessages.CONTROL_SKIPPED

        if action is ControlAction.PAUSE_RESUME:
            status = await self._engine.pause_resume(session)
            if status is ControlStatus.NO_OP:
                return status, DiscordUIMessages.CONTROL_NOOP
            return status, DiscordUIMessages.CONTROL_PAUSED

        if action is ControlAction.TOGGLE_LOOP:
            mode = await self._engine.toggle_loop(session)
            return ControlStatus.SUCCESS, DiscordUIMessages.CONTROL_LOOP.format(state=_flag(mode.loop))

        mode = await self._engine.toggle_shuffle(session)
        return ControlStatus.SUCCESS, DiscordUIMessages.CONTROL_SHUFFLE.format(state=_flag(mode.shuffle))
