"""Telegram implementation of the chat transport."""

from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import TYPE_CHECKING

import structlog
from telegram.error import BadRequest, RetryAfter, TelegramError

from cities.logic.exceptions import TransportError
from cities.messaging.protocol import MessageHandle, Transport

if TYPE_CHECKING:
    from collections.abc import Callable

    from telegram import Bot

logger = structlog.get_logger()

_NOT_MODIFIED = "message is not modified"


def _retry_after_seconds(exc: RetryAfter) -> float:
    """Wait requested by Telegram. Newer library versions report it as a timedelta."""
    retry_after = exc.retry_after
    if isinstance(retry_after, timedelta):
        return retry_after.total_seconds()
    return float(retry_after)


def _chat_id(room_id: str) -> int | str:
    """Numeric chat ids travel as ints; public @usernames stay strings."""
    try:
        return int(room_id)
    except ValueError:
        return room_id


class TelegramTransport(Transport):
    """Send and edit messages through a python-telegram-bot ``Bot``.

    Edits that hit the flood limit (RetryAfter, HTTP 429) are retried with
    exponential backoff: ``backoff_seconds * 2**attempt`` between attempts,
    or Telegram's own ``retry_after`` when that is longer, at most
    ``edit_retry_attempts`` retries. Sends are not retried.
    """

    def __init__(self, bot: Bot, *, edit_retry_attempts: int = 5, backoff_seconds: float = 1.0) -> None:
        self._bot = bot
        self._edit_retry_attempts = edit_retry_attempts
        self._backoff_seconds = backoff_seconds

    async def notify(self, room_id: str, text: str) -> None:
        await self.notify_with_handle(room_id, text)

    async def notify_with_handle(self, room_id: str, text: str) -> MessageHandle:
        try:
            message = await self._bot.send_message(chat_id=_chat_id(room_id), text=text)
        except TelegramError as exc:
            raise TransportError(f"send to {room_id} failed: {exc}") from exc
        return MessageHandle(room_id=room_id, message_id=message.message_id)

    async def edit_message(
        self,
        handle: MessageHandle,
        text: str,
        *,
        is_stale: Callable[[], bool] | None = None,
    ) -> None:
        attempt = 0
        while True:
            if is_stale is not None and is_stale():
                logger.debug("stale edit dropped", room_id=handle.room_id, message_id=handle.message_id)
                return
            try:
                await self._bot.edit_message_text(
                    text=text,
                    chat_id=_chat_id(handle.room_id),
                    message_id=handle.message_id,
                )
                return
            except RetryAfter as exc:
                if attempt >= self._edit_retry_attempts:
                    raise TransportError(f"edit in {handle.room_id} rate limited after {attempt} retries") from exc
                delay = max(self._backoff_seconds * 2**attempt, _retry_after_seconds(exc))
                logger.info("edit rate limited, backing off", room_id=handle.room_id, attempt=attempt, delay=delay)
                attempt += 1
                await asyncio.sleep(delay)
            except BadRequest as exc:
                if _NOT_MODIFIED in str(exc).lower():
                    return
                raise TransportError(f"edit in {handle.room_id} rejected: {exc}") from exc
            except TelegramError as exc:
                raise TransportError(f"edit in {handle.room_id} failed: {exc}") from exc
