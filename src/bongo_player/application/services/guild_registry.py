"""Guild session registry and the per-guild actor that serializes session work."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from ...domain.music.entities import GuildQueue
from ...domain.music.value_objects import PlaybackState
from ...domain.shared.exceptions import InvalidOperationError
from ...domain.shared.messages import LogTemplates
from ...domain.shared.types import ChannelIdField, DiscordSnowflake
from ..interfaces.output_channel import OutputChannel
from ..interfaces.voice_transport import (
    AudioPlayer,
    PlayerEvent,
    PlayerStatus,
    VoiceConnection,
    VoiceTransport,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

Message = Callable[[], Awaitable[Any]]
PlayerEventHandler = Callable[["GuildSession", PlayerEvent, "Exception | None"], Awaitable[None]]


class GuildSession:
    """Live playback state of one guild bound to its transport handles.

    All reads and writes of ``queue`` happen inside the session's actor: a
    single worker task draining an inbox of coroutine factories, one at a time.
    """

    def __init__(
        self,
        queue: GuildQueue,
        connection: VoiceConnection,
        player: AudioPlayer,
        output: OutputChannel,
    ) -> None:
        self.queue = queue
        self.connection = connection
        self.player = player
        self.output = output

        self._inbox: asyncio.Queue[tuple[Message, asyncio.Future[Any] | None] | None] = asyncio.Queue()
        self._worker: asyncio.Task[None] | None = None
        self._idle_timer: asyncio.Task[None] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._closed = False

    @property
    def guild_id(self) -> DiscordSnowflake:
        return self.queue.guild_id

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def state(self) -> PlaybackState:
        if self.queue.current is None:
            return PlaybackState.IDLE
        if self.player.status is PlayerStatus.PAUSED:
            return PlaybackState.PAUSED
        return PlaybackState.PLAYING

    @property
    def idle_timer_armed(self) -> bool:
        return self._idle_timer is not None and not self._idle_timer.done()

    # ── Actor ───────────────────────────────────────────────────────

    def start(self) -> None:
        """Start the actor worker. Must be called from the event loop."""
        if self._worker is None:
            self._loop = asyncio.get_running_loop()
            self._worker = asyncio.create_task(
                self._run(), name=f"guild-session-{self.guild_id}"
            )
            logger.debug(LogTemplates.ACTOR_STARTED, self.guild_id)

    async def submit(self, message: Callable[[], Awaitable[T]]) -> T:
        """Run *message* inside the actor and return its result."""
        if self._closed:
            raise InvalidOperationError(operation="submit", current_state="closed")
        future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        self._inbox.put_nowait((message, future))
        return await future

    def post(self, message: Message) -> None:
        """Queue *message* for the actor without waiting for it."""
        if self._closed:
            logger.debug(LogTemplates.ACTOR_EVENT_AFTER_CLOSE, "message", self.guild_id)
            return
        self._inbox.put_nowait((message, None))

    def post_threadsafe(self, message: Message) -> None:
        """Queue *message* from a thread that does not own the event loop."""
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(self.post, message)

    async def _run(self) -> None:
        while True:
            item = await self._inbox.get()
            if item is None:
                break

            message, future = item
            if self._closed:
                if future is not None and not future.done():
                    future.set_exception(
                        InvalidOperationError(operation="submit", current_state="closed")
                    )
                continue

            try:
                result = await message()
            except Exception as exc:
                if future is not None:
                    if not future.done():
                        future.set_exception(exc)
                else:
                    logger.exception(LogTemplates.ACTOR_MESSAGE_FAILED, self.guild_id)
            else:
                if future is not None and not future.done():
                    future.set_result(result)

        logger.debug(LogTemplates.ACTOR_STOPPED, self.guild_id)

    async def close(self) -> None:
        """Stop accepting work, let the running message finish, and stop the worker."""
        if self._closed:
            return
        self._closed = True
        self.cancel_idle_timer()
        self.player.set_listener(None)
        self._inbox.put_nowait(None)

        worker = self._worker
        if worker is not None and worker is not asyncio.current_task():
            await worker

    # ── Idle timer ──────────────────────────────────────────────────

    def arm_idle_timer(self, seconds: float, on_expire: Callable[[], Awaitable[Any]]) -> None:
        """Run *on_expire* after *seconds* unless cancelled first. 0 disables the timer."""
        self.cancel_idle_timer()
        if seconds <= 0 or self._closed:
            return

        async def countdown() -> None:
            await asyncio.sleep(seconds)
            await on_expire()

        self._idle_timer = asyncio.create_task(countdown(), name=f"idle-timer-{self.guild_id}")

    def cancel_idle_timer(self) -> None:
        timer, self._idle_timer = self._idle_timer, None
        if timer is not None and not timer.done() and timer is not asyncio.current_task():
            timer.cancel()


class GuildRegistry:
    """Process-wide map of guild id to live session.

    Only registry operations mutate the map, under the registry's own lock.
    """

    def __init__(self, transport: VoiceTransport) -> None:
        self._transport = transport
        self._sessions: dict[DiscordSnowflake, GuildSession] = {}
        self._lock = asyncio.Lock()
        self._join_locks: dict[DiscordSnowflake, asyncio.Lock] = {}
        self._event_handler: PlayerEventHandler | None = None

    def set_player_event_handler(self, handler: PlayerEventHandler) -> None:
        """Set the coroutine run inside a session's actor for each player event."""
        self._event_handler = handler

    def get(self, guild_id: DiscordSnowflake) -> GuildSession | None:
        return self._sessions.get(guild_id)

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def active_guild_ids(self) -> list[DiscordSnowflake]:
        return list(self._sessions)

    async def acquire(
        self,
        guild_id: DiscordSnowflake,
        voice_channel_id: ChannelIdField,
        output: OutputChannel,
    ) -> GuildSession:
        """Return the guild's session, joining *voice_channel_id* to create it if needed.

        An existing session is returned unchanged even if the requested channel
        differs. A failed join raises ``TransportError`` and registers nothing.
        Joins for one guild are serialized; other guilds never wait on them.
        """
        async with self._lock:
            session = self._sessions.get(guild_id)
            if session is not None:
                logger.debug(LogTemplates.SESSION_REUSED, guild_id)
                return session
            join_lock = self._join_locks.setdefault(guild_id, asyncio.Lock())

        async with join_lock:
            # Another caller may have finished the join while we waited.
            session = self._sessions.get(guild_id)
            if session is not None:
                logger.debug(LogTemplates.SESSION_REUSED, guild_id)
                return session

            session = await self._open_session(guild_id, voice_channel_id, output)
            async with self._lock:
                self._sessions[guild_id] = session

        logger.info(LogTemplates.SESSION_CREATED, guild_id, voice_channel_id)
        return session

    async def _open_session(
        self,
        guild_id: DiscordSnowflake,
        voice_channel_id: ChannelIdField,
        output: OutputChannel,
    ) -> GuildSession:
        connection = await self._transport.join(guild_id, voice_channel_id)
        try:
            player = self._transport.create_player()
            connection.subscribe(player)
        except Exception:
            logger.warning(LogTemplates.SESSION_SETUP_FAILED, guild_id)
            await connection.destroy()
            raise

        session = GuildSession(GuildQueue(guild_id=guild_id), connection, player, output)
        player.set_listener(self._make_listener(session))
        session.start()
        return session

    async def release(self, guild_id: DiscordSnowflake) -> bool:
        """Tear down the guild's session. Returns False when there was none."""
        async with self._lock:
            session = self._sessions.pop(guild_id, None)

        if session is None:
            logger.debug(LogTemplates.SESSION_NOT_FOUND, guild_id)
            return False

        await session.close()
        session.player.stop()
        await session.connection.destroy()
        logger.info(LogTemplates.SESSION_RELEASED, guild_id)
        return True

    async def shutdown_all(self) -> list[GuildSession]:
        """Release every session and return them so callers can clean up their tracks."""
        async with self._lock:
            sessions = list(self._sessions.values())

        released: list[GuildSession] = []
        for session in sessions:
            if await self.release(session.guild_id):
                released.append(session)
        return released

    def _make_listener(self, session: GuildSession) -> Callable[[PlayerEvent, Exception | None], None]:
        def listener(event: PlayerEvent, error: Exception | None) -> None:
            handler = self._event_handler
            if handler is None:
                return
            session.post_threadsafe(lambda: handler(session, event, error))

        return listener
