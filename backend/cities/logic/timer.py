"""
Cancellable asyncio timers.

A ``GameTimer`` owns at most one scheduled task. Starting it again cancels
the previous task first. Single-shot timers sleep once and fire; recurring
timers run as one loop that re-checks cancellation on every tick instead of
rescheduling themselves through callback chains.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = structlog.get_logger()


class GameTimer:
    """Own a single cancellable asyncio task."""

    def __init__(self, name: str = "timer") -> None:
        self._name = name
        self._active_task: asyncio.Task[None] | None = None

    @property
    def active(self) -> bool:
        return self._active_task is not None and not self._active_task.done()

    def start_once(self, seconds: float, on_fire: Callable[[], Awaitable[None]]) -> None:
        """Fire ``on_fire`` once after ``seconds``."""
        self.cancel()
        self._active_task = asyncio.create_task(self._run_once(seconds, on_fire))

    def start_every(self, seconds: float, on_tick: Callable[[], Awaitable[bool]]) -> None:
        """Call ``on_tick`` every ``seconds`` until it returns False or the timer is cancelled."""
        self.cancel()
        self._active_task = asyncio.create_task(self._run_every(seconds, on_tick))

    def cancel(self) -> None:
        """Cancel the scheduled task.

        A timer cancelled from inside its own callback only drops the handle:
        cancelling the running task would abort the callback halfway.
        """
        task = self._active_task
        self._active_task = None
        if task is None or task.done():
            return
        if task is asyncio.current_task():
            return
        task.cancel()

    async def _run_once(self, seconds: float, on_fire: Callable[[], Awaitable[None]]) -> None:
        try:
            await asyncio.sleep(seconds)
            await on_fire()
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("timer callback failed", timer=self._name)

    async def _run_every(self, seconds: float, on_tick: Callable[[], Awaitable[bool]]) -> None:
        try:
            while True:
                await asyncio.sleep(seconds)
                if not await on_tick():
                    return
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("timer callback failed", timer=self._name)
