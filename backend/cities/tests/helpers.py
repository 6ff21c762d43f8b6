from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from cities.logic.enums import SessionPhase

if TYPE_CHECKING:
    from collections.abc import Callable

    from cities.logic.types import Player
    from cities.session.manager import SessionManager
    from cities.session.models import GameSession


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Poll ``predicate`` on the event loop until it holds or ``timeout`` elapses."""
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0.005)


async def start_game(manager: SessionManager, room_id: str, *players: Player) -> GameSession:
    """Join every player and wait for the join window to close."""
    for player in players:
        await manager.join(room_id, player)
    session = manager.get_session(room_id)
    assert session is not None
    await wait_until(lambda: session.phase == SessionPhase.ACTIVE)
    return session
