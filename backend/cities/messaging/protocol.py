"""Abstract chat transport used by the session layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True)
class MessageHandle:
    """Reference to a sent message that can later be edited in place."""

    room_id: str
    message_id: int


class Transport(ABC):
    """
    Abstract interface for sending messages to a chat room.

    This abstraction lets the game core run and be tested without a real
    chat platform. Implementations raise TransportError when delivery fails.
    """

    @abstractmethod
    async def notify(self, room_id: str, text: str) -> None:
        """
        Send a message to the room.
        """
        ...

    @abstractmethod
    async def notify_with_handle(self, room_id: str, text: str) -> MessageHandle:
        """
        Send a message to the room and return a handle for later edits.
        """
        ...

    @abstractmethod
    async def edit_message(
        self,
        handle: MessageHandle,
        text: str,
        *,
        is_stale: Callable[[], bool] | None = None,
    ) -> None:
        """
        Replace the text of a previously sent message.

        ``is_stale`` is re-checked before every delivery attempt, including
        retries; once it returns True the edit is silently dropped.
        """
        ...
