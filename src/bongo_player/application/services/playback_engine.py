"""Playback Engine - drives each guild's queue through its playback lifecycle."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from ...domain.music.entities import Track
from ...domain.music.value_objects import ControlStatus, PlayMode
from ...domain.shared.exceptions import PlaybackError
from ...domain.shared.messages import DiscordUIMessages, LogTemplates
from ...domain.shared.types import DiscordSnowflake
from ..interfaces.voice_transport import PlayerEvent, PlayerStatus
from .panel_models import PanelSnapshot

if TYPE_CHECKING:
    from ..interfaces.track_storage import TrackStorage
    from .guild_registry import GuildRegistry, GuildSession

logger = logging.getLogger(__name__)


class PlaybackEngine:
    """Owns the advance/retire rules and reacts to player events.

    Every method that touches a session's queue runs inside that session's
    actor. ``stop`` is the exception: it tears the actor down first and then
    cleans up the queue it leaves behind.
    """

    DEFAULT_MAX_ADVANCE_ATTEMPTS: int = 10

    def __init__(
        self,
        *,
        registry: GuildRegistry,
        storage: TrackStorage,
        max_advance_attempts: int = DEFAULT_MAX_ADVANCE_ATTEMPTS,
        idle_disconnect_seconds: float = 300,
        rng: random.Random | None = None,
    ) -> None:
        self._registry = registry
        self._storage = storage
        self._max_advance_attempts = max(1, max_advance_attempts)
        self._idle_disconnect_seconds = idle_disconnect_seconds
        self._rng = rng

        self._registry.set_player_event_handler(self._on_player_event)

    # ── Public API (each call is one actor message) ─────────────────

    async def enqueue(self, session: GuildSession, track: Track) -> Track | None:
        """Append *track* and start playback if the guild is idle.

        Returns the track that started playing, or None if playback was
        already underway. Raises ``InvalidOperationError`` if the session closed.
        """
        return await session.submit(lambda: self._enqueue(session, track))

    async def skip(self, session: GuildSession) -> ControlStatus:
        """Stop the current track; the player's IDLE event advances the queue."""
        return await session.submit(lambda: self._skip(session))

    async def pause_resume(self, session: GuildSession) -> ControlStatus:
        return await session.submit(lambda: self._pause_resume(session))

    async def toggle_loop(self, session: GuildSession) -> PlayMode:
        return await session.submit(lambda: self._toggle(session, loop=True))

    async def toggle_shuffle(self, session: GuildSession) -> PlayMode:
        return await session.submit(lambda: self._toggle(session, loop=False))

    async def snapshot(self, session: GuildSession) -> PanelSnapshot | None:
        return await session.submit(lambda: self._snapshot(session))

    async def ensure_idle_timer(self, session: GuildSession) -> None:
        """Arm the idle timer if the guild has nothing playing or queued."""
        await session.submit(lambda: self._ensure_idle_timer(session))

    async def stop(self, guild_id: DiscordSnowflake) -> bool:
        """Release the guild's session and every track file it still holds."""
        session = self._registry.get(guild_id)
        if session is None:
            return False

        if not await self._registry.release(guild_id):
            return False

        for track in session.queue.clear():
            self._storage.release(track)
        logger.info(LogTemplates.PLAYBACK_STOPPED, guild_id)
        return True

    async def shutdown(self) -> int:
        """Stop every guild. Returns how many sessions were torn down."""
        sessions = await self._registry.shutdown_all()
        for session in sessions:
            for track in session.queue.clear():
                self._storage.release(track)
            logger.info(LogTemplates.PLAYBACK_STOPPED, session.guild_id)
        return len(sessions)

    # ── Actor message bodies ────────────────────────────────────────

    async def _enqueue(self, session: GuildSession, track: Track) -> Track | None:
        session.cancel_idle_timer()
        pending = session.queue.enqueue(track)
        logger.info(LogTemplates.TRACK_ENQUEUED, track.title, session.guild_id, pending)

        if session.queue.is_idle:
            return await self._advance(session)
        return None

    async def _skip(self, session: GuildSession) -> ControlStatus:
        if session.queue.current is None:
            return ControlStatus.NO_OP
        session.player.stop()
        return ControlStatus.SUCCESS

    async def _pause_resume(self, session: GuildSession) -> ControlStatus:
        status = session.player.status
        if status is PlayerStatus.PLAYING:
            session.player.pause()
            logger.info(LogTemplates.PLAYBACK_PAUSED, session.guild_id)
            return ControlStatus.SUCCESS
        if status is PlayerStatus.PAUSED:
            session.player.resume()
            logger.info(LogTemplates.PLAYBACK_RESUMED, session.guild_id)
            return ControlStatus.SUCCESS
        return ControlStatus.NO_OP

    async def _toggle(self, session: GuildSession, *, loop: bool) -> PlayMode:
        mode = session.queue.toggle_loop() if loop else session.queue.toggle_shuffle()
        logger.info(LogTemplates.MODE_CHANGED, mode.value, session.guild_id)
        return mode

    async def _snapshot(self, session: GuildSession) -> PanelSnapshot | None:
        return PanelSnapshot.capture(
            session.queue, paused=session.player.status is PlayerStatus.PAUSED
        )

    async def _ensure_idle_timer(self, session: GuildSession) -> None:
        if session.queue.is_idle and not session.queue.has_pending and not session.idle_timer_armed:
            self._arm_idle_timer(session)

    async def _on_player_event(
        self, session: GuildSession, event: PlayerEvent, error: Exception | None
    ) -> None:
        if session.is_closed:
            logger.debug(LogTemplates.ACTOR_EVENT_AFTER_CLOSE, event.value, session.guild_id)
            return

        if event is PlayerEvent.IDLE:
            logger.info(LogTemplates.TRACK_FINISHED, session.guild_id)
            await self._advance(session)
        elif event is PlayerEvent.ERROR:
            logger.warning(LogTemplates.PLAYBACK_ERROR, session.guild_id, error)
            # A failed track is never loop-reselected.
            failed = session.queue.drop_current()
            if failed is not None:
                self._storage.release(failed)
            await self._advance(session)
        else:
            logger.debug(LogTemplates.VOICE_PLAYER_EVENT, event.value, session.guild_id, error)

    async def _advance(self, session: GuildSession) -> Track | None:
        """Select and start the next playable track.

        Tracks whose file is missing or that the player refuses are dropped
        and the next one is tried, up to ``max_advance_attempts`` times.
        """
        queue = session.queue
        for _ in range(self._max_advance_attempts):
            retired, selected = queue.select_next(self._rng)
            if retired is not None:
                self._storage.release(retired)

            if selected is None:
                await self._on_queue_empty(session)
                return None

            if not self._storage.exists(selected):
                logger.warning(LogTemplates.TRACK_FILE_MISSING, selected.title, session.guild_id)
                queue.drop_current()
                continue

            try:
                session.player.play(str(selected.local_file_path))
            except PlaybackError as exc:
                logger.warning(
                    LogTemplates.PLAYBACK_START_FAILED, selected.title, session.guild_id, exc
                )
                queue.drop_current()
                self._storage.release(selected)
                continue

            logger.info(LogTemplates.TRACK_STARTED, selected.title, session.guild_id)
            snapshot = PanelSnapshot.capture(queue)
            if snapshot is not None:
                await session.output.send_panel(snapshot)
            return selected

        logger.error(
            LogTemplates.PLAYBACK_ADVANCE_EXHAUSTED, self._max_advance_attempts, session.guild_id
        )
        self._arm_idle_timer(session)
        return None

    async def _on_queue_empty(self, session: GuildSession) -> None:
        logger.info(LogTemplates.QUEUE_EMPTY, session.guild_id)
        if self._idle_disconnect_seconds > 0:
            notice = DiscordUIMessages.STATE_QUEUE_EMPTY_NOTICE.format(
                minutes=f"{self._idle_disconnect_seconds / 60:g}"
            )
        else:
            notice = DiscordUIMessages.STATE_QUEUE_EMPTY
        await session.output.send_notice(notice)
        self._arm_idle_timer(session)

    def _arm_idle_timer(self, session: GuildSession) -> None:
        async def expire() -> None:
            if self._registry.get(session.guild_id) is not session:
                return
            logger.info(
                LogTemplates.SESSION_IDLE_DISCONNECT, session.guild_id, self._idle_disconnect_seconds
            )
            await self.stop(session.guild_id)

        session.arm_idle_timer(self._idle_disconnect_seconds, expire)
