from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from cities.logic.exceptions import TransportError
from cities.messaging.protocol import MessageHandle, Transport

if TYPE_CHECKING:
    from collections.abc import Callable


class MockTransport(Transport):
    """In-memory transport recording everything sent to every room."""

    def __init__(self) -> None:
        self._outbox: list[tuple[str, str]] = []  # (room_id, text)
        self._edits: list[tuple[MessageHandle, str]] = []
        self._next_message_id = 1
        self._fail_sends = False
        self._fail_edits = False
        self._dropped_edits = 0

    @property
    def sent_messages(self) -> list[tuple[str, str]]:
        return self._outbox.copy()

    @property
    def edits(self) -> list[tuple[MessageHandle, str]]:
        return self._edits.copy()

    @property
    def dropped_edits(self) -> int:
        return self._dropped_edits

    def texts_for(self, room_id: str) -> list[str]:
        return [text for room, text in self._outbox if room == room_id]

    def fail_sends(self, *, enabled: bool = True) -> None:
        self._fail_sends = enabled

    def fail_edits(self, *, enabled: bool = True) -> None:
        self._fail_edits = enabled

    def clear(self) -> None:
        self._outbox.clear()
        self._edits.clear()

    async def notify(self, room_id: str, text: str) -> None:
        await self.notify_with_handle(room_id, text)

    async def notify_with_handle(self, room_id: str, text: str) -> MessageHandle:
        await asyncio.sleep(0)
        if self._fail_sends:
            raise TransportError(f"send to {room_id} failed")
        self._outbox.append((room_id, text))
        handle = MessageHandle(room_id=room_id, message_id=self._next_message_id)
        self._next_message_id += 1
        return handle

    async def edit_message(
        self,
        handle: MessageHandle,
        text: str,
        *,
        is_stale: Callable[[], bool] | None = None,
    ) -> None:
        await asyncio.sleep(0)
        if is_stale is not None and is_stale():
            self._dropped_edits += 1
            return
        if self._fail_edits:
            raise TransportError(f"edit in {handle.room_id} failed")
        self._edits.append((handle, text))
