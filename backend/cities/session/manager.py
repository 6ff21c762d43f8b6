from __future__ import annotations

import asyncio
import contextlib
import time
from typing import TYPE_CHECKING

import structlog

from cities.logic.enums import EndReason, SessionPhase, TimerKind
from cities.logic.exceptions import InvalidInputError, MoveRejectedError, TransportError
from cities.logic.settings import GameSettings
from cities.logic.validator import validate_move
from cities.messaging import texts
from cities.session.achievements import NullAchievementSink
from cities.session.session_store import SessionStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from cities.logic.achievements import Unlocks
    from cities.logic.catalog import CityCatalog
    from cities.logic.types import GameEndResult, Player
    from cities.messaging.protocol import MessageHandle, Transport
    from cities.session.achievements import AchievementSink
    from cities.session.models import GameSession

logger = structlog.get_logger()


class SessionManager:
    """Run the game state machine of every room.

    Each room has its own asyncio lock, held for the whole handling of one
    event (join, leave, text, timer fire), so handlers for the same room
    never interleave. Timer callbacks re-check after taking the lock that
    their session is still the room's live one; stale fires do nothing.

    Achievement reporting happens after the lock is released and never
    affects game state.
    """

    def __init__(
        self,
        catalog: CityCatalog,
        transport: Transport,
        settings: GameSettings | None = None,
        achievements: AchievementSink | None = None,
    ) -> None:
        self._catalog = catalog
        self._transport = transport
        self._settings = settings or GameSettings()
        self._achievements = achievements or NullAchievementSink()
        self._store = SessionStore()
        self._room_locks: dict[str, asyncio.Lock] = {}  # room_id -> Lock
        self._lock_holders: dict[str, int] = {}  # room_id -> handlers holding or waiting on the lock

    @property
    def settings(self) -> GameSettings:
        return self._settings

    @property
    def session_count(self) -> int:
        return self._store.session_count

    def get_session(self, room_id: str) -> GameSession | None:
        return self._store.get_session(room_id)

    @contextlib.asynccontextmanager
    async def _room_lock(self, room_id: str) -> AsyncIterator[None]:
        """Hold the room's lock for one event.

        The lock is dropped once the room is idle and no other handler holds
        or waits on it. A waiter keeps it alive, so the next event in the room
        never takes a fresh lock while an older one is still queued.
        """
        lock = self._room_locks.get(room_id)
        if lock is None:
            lock = asyncio.Lock()
            self._room_locks[room_id] = lock
        self._lock_holders[room_id] = self._lock_holders.get(room_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            remaining = self._lock_holders[room_id] - 1
            if remaining:
                self._lock_holders[room_id] = remaining
            else:
                del self._lock_holders[room_id]
                if self._store.get_session(room_id) is None:
                    self._room_locks.pop(room_id, None)

    def _is_live(self, session: GameSession, phase: SessionPhase) -> bool:
        return self._store.is_current(session) and session.phase == phase

    # --- Player events ---

    async def join(self, room_id: str, player: Player) -> None:
        """Register a player, opening the join phase if the room is idle."""
        with structlog.contextvars.bound_contextvars(room_id=room_id, user_id=player.user_id):
            async with self._room_lock(room_id):
                session = self._store.get_session(room_id)
                if session is None:
                    await self._open_join_phase(room_id, player)
                    return

                if session.phase != SessionPhase.JOINING:
                    await self._send(room_id, texts.GAME_ALREADY_STARTED)
                    return

                if not session.add_player(player):
                    await self._send(room_id, texts.ALREADY_JOINED.format(name=player.name))
                    return

                logger.info("player joined", player_count=len(session.players))
                await self._post_roster(session)

    async def leave(self, room_id: str, player: Player) -> None:
        """Remove a player during the join phase. An emptied roster cancels the game."""
        with structlog.contextvars.bound_contextvars(room_id=room_id, user_id=player.user_id):
            async with self._room_lock(room_id):
                session = self._store.get_session(room_id)
                if session is None or session.phase != SessionPhase.JOINING:
                    await self._send(room_id, texts.NOTHING_TO_LEAVE)
                    return

                removed = session.remove_player(player.user_id)
                if removed is None:
                    await self._send(room_id, texts.NOT_JOINED)
                    return

                logger.info("player left", player_count=len(session.players))
                await self._send(room_id, texts.PLAYER_LEFT.format(name=removed.name))

                if session.players:
                    await self._post_roster(session)
                    return

                await self._send(room_id, texts.game_over(self._finish(session, EndReason.ALL_LEFT)))

    async def handle_text(self, room_id: str, player: Player, text: str) -> None:
        """Treat a plain message as a move attempt."""
        city: str | None = None
        result: GameEndResult | None = None
        with structlog.contextvars.bound_contextvars(room_id=room_id, user_id=player.user_id):
            async with self._room_lock(room_id):
                session = self._store.get_session(room_id)
                if session is None or not session.has_player(player.user_id):
                    return

                if session.phase == SessionPhase.JOINING:
                    if player.user_id not in session.waiting_notified:
                        session.waiting_notified.add(player.user_id)
                        await self._send(room_id, texts.WAIT_FOR_JOIN_END)
                    return

                if session.phase != SessionPhase.ACTIVE:
                    return

                try:
                    city = validate_move(text, session, self._catalog)
                except InvalidInputError:
                    await self._send(room_id, texts.INVALID_INPUT)
                    return
                except MoveRejectedError as e:
                    logger.info("move rejected", city=e.city, rejection=e.rejection)
                    await self._send(room_id, texts.rejection(e))
                    return

                move = session.apply_move(player.user_id, city)
                logger.info("move accepted", city=city, score=move.score, moves=session.moves)

                if move.wins_game:
                    result = self._finish(session, EndReason.SCORE_REACHED, winner_id=player.user_id)
                    await self._send(room_id, texts.game_over(result))
                else:
                    self._arm_inactivity(session)
                    await self._send(room_id, texts.move_accepted(move))

            if city is not None:
                await self._announce(room_id, player, await self._achievements.on_city_named(player, city))
            if result is not None:
                await self._report_game_end(room_id, result)

    # --- Timer callbacks ---

    async def _handle_join_expired(self, session: GameSession) -> None:
        room_id = session.room_id
        with structlog.contextvars.bound_contextvars(room_id=room_id):
            async with self._room_lock(room_id):
                if not self._is_live(session, SessionPhase.JOINING):
                    return

                session.timers.cancel(TimerKind.PROGRESS)
                if not session.players:
                    result = self._finish(session, EndReason.NO_PLAYERS)
                    await self._send(room_id, texts.game_over(result))
                    return

                session.begin(time.monotonic())
                self._arm_inactivity(session)
                logger.info("game started", players=session.player_names)
                await self._send(room_id, texts.game_started(session.player_names))

    async def _handle_progress_tick(self, session: GameSession, handle: MessageHandle) -> bool:
        """Refresh the roster message. Return False to stop the progress timer."""

        def is_stale() -> bool:
            return not self._is_live(session, SessionPhase.JOINING) or session.roster_handle is not handle

        async with self._room_lock(session.room_id):
            if is_stale():
                return False
            remaining = session.remaining_join_seconds(time.monotonic())
            if remaining <= 0:
                return False
            text = texts.roster(session.player_names, remaining)

        # Edited outside the lock: rate-limit retries may take a while and
        # must not hold up moves or the join deadline.
        try:
            await self._transport.edit_message(handle, text, is_stale=is_stale)
        except TransportError:
            logger.warning("roster update failed", room_id=session.room_id)
        return True

    async def _handle_inactivity(self, session: GameSession) -> None:
        room_id = session.room_id
        with structlog.contextvars.bound_contextvars(room_id=room_id):
            async with self._room_lock(room_id):
                if not self._is_live(session, SessionPhase.ACTIVE):
                    return
                result = self._finish(session, EndReason.INACTIVITY)
                await self._send(room_id, texts.game_over(result))

            await self._report_game_end(room_id, result)

    # --- Lifecycle helpers (called under the room lock) ---

    async def _open_join_phase(self, room_id: str, player: Player) -> None:
        session = self._store.create_session(room_id, self._settings)
        session.add_player(player)
        session.open_join_window(time.monotonic())
        session.timers.start_join(self._settings.join_seconds, lambda: self._handle_join_expired(session))
        logger.info("join phase opened", join_seconds=self._settings.join_seconds)
        await self._post_roster(session)

    async def _post_roster(self, session: GameSession) -> None:
        """Send a fresh roster message and point the progress timer at it."""
        text = texts.roster(session.player_names, session.remaining_join_seconds(time.monotonic()))
        try:
            handle = await self._transport.notify_with_handle(session.room_id, text)
        except TransportError:
            logger.warning("roster message failed", room_id=session.room_id)
            session.roster_handle = None
            session.timers.cancel(TimerKind.PROGRESS)
            return

        session.roster_handle = handle
        session.timers.start_progress(
            self._settings.progress_interval_seconds,
            lambda: self._handle_progress_tick(session, handle),
        )

    def _arm_inactivity(self, session: GameSession) -> None:
        session.touch(time.monotonic())
        session.timers.start_inactivity(self._settings.inactivity_seconds, lambda: self._handle_inactivity(session))

    def _finish(self, session: GameSession, reason: EndReason, winner_id: str | None = None) -> GameEndResult:
        """End the session: summarize, cancel every timer, free the room."""
        result = session.finish(reason, winner_id=winner_id)
        session.timers.cancel_all()
        self._store.remove_session(session)
        logger.info(
            "game ended",
            reason=reason,
            winner=result.winner.user_id if result.winner else None,
            moves=session.moves,
        )
        return result

    # --- Outbound ---

    async def _send(self, room_id: str, text: str) -> None:
        try:
            await self._transport.notify(room_id, text)
        except TransportError:
            logger.warning("message delivery failed", room_id=room_id)

    async def _report_game_end(self, room_id: str, result: GameEndResult) -> None:
        if result.reason not in (EndReason.SCORE_REACHED, EndReason.INACTIVITY):
            return
        for entry in result.standings:
            if result.winner is not None and entry.player.user_id == result.winner.user_id:
                unlocks = await self._achievements.on_game_won(entry.player, entry.score)
                await self._announce(room_id, entry.player, unlocks)
            else:
                await self._achievements.on_game_lost(entry.player, entry.score)

    async def _announce(self, room_id: str, player: Player, unlocks: Unlocks) -> None:
        for achievement in unlocks.achievements:
            await self._send(room_id, texts.achievement_unlocked(player.name, achievement))
        if unlocks.win_milestone is not None:
            await self._send(room_id, texts.win_milestone(player.name, unlocks.win_milestone))

    async def shutdown(self) -> None:
        """Cancel the timers of every live session and drop them."""
        sessions = self._store.clear()
        for session in sessions:
            session.timers.cancel_all()
        for room_id in [r for r in self._room_locks if r not in self._lock_holders]:
            del self._room_locks[room_id]
        if sessions:
            logger.info("sessions dropped on shutdown", count=len(sessions))
