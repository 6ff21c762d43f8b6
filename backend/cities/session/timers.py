"""Own the join, progress and inactivity timers of one game session."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cities.logic.enums import TimerKind
from cities.logic.timer import GameTimer

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


class SessionTimers:
    """Keep at most one live timer per kind for a session.

    This class only schedules and cancels. What happens on fire is decided
    by the callbacks the SessionManager passes in; each callback re-checks
    that its session is still live before acting.
    """

    def __init__(self) -> None:
        self._timers: dict[TimerKind, GameTimer] = {kind: GameTimer(kind.value) for kind in TimerKind}

    def start_join(self, seconds: float, on_expired: Callable[[], Awaitable[None]]) -> None:
        """Single-shot: close the join window after ``seconds``."""
        self._timers[TimerKind.JOIN].start_once(seconds, on_expired)

    def start_progress(self, interval: float, on_tick: Callable[[], Awaitable[bool]]) -> None:
        """Recurring: refresh the roster message until ``on_tick`` returns False."""
        self._timers[TimerKind.PROGRESS].start_every(interval, on_tick)

    def start_inactivity(self, seconds: float, on_expired: Callable[[], Awaitable[None]]) -> None:
        """Single-shot, rearmed after every accepted move."""
        self._timers[TimerKind.INACTIVITY].start_once(seconds, on_expired)

    def cancel(self, kind: TimerKind) -> None:
        self._timers[kind].cancel()

    def cancel_all(self) -> None:
        """Cancel every timer of the session."""
        for timer in self._timers.values():
            timer.cancel()

    def is_active(self, kind: TimerKind) -> bool:
        return self._timers[kind].active

    @property
    def active_kinds(self) -> set[TimerKind]:
        return {kind for kind, timer in self._timers.items() if timer.active}
