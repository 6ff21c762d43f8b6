"""Route chat messages to session operations and informational replies."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

import structlog

from cities.logic.exceptions import TransportError
from cities.messaging import texts

if TYPE_CHECKING:
    from cities.logic.types import Player
    from cities.messaging.protocol import Transport
    from cities.session.achievements import AchievementTracker
    from cities.session.manager import SessionManager

logger = structlog.get_logger()


class Command(str, Enum):
    """Bot commands, without the leading slash."""

    START = "start"
    HELP = "help"
    JOIN = "join"
    LEAVE = "leave"
    MYSTATS = "mystats"
    SHOWACHIEVEMENTS = "showachievements"


def parse_command(text: str) -> Command | None:
    """Parse ``/cmd``, ``/cmd@botname`` or ``/cmd args``. Return None for non-commands and unknown commands."""
    stripped = text.strip()
    if not stripped.startswith("/"):
        return None
    body = stripped[1:]
    if not body or body[0].isspace():
        return None
    name = body.split(maxsplit=1)[0].split("@", 1)[0].lower()
    try:
        return Command(name)
    except ValueError:
        return None


class CommandRouter:
    """
    Routes incoming chat messages to the session manager.

    This class contains no platform code and can be tested with a mock
    transport. Each command maps to exactly one manager operation or an
    informational reply; any other text is a move attempt.
    """

    def __init__(
        self,
        session_manager: SessionManager,
        transport: Transport,
        tracker: AchievementTracker | None = None,
    ) -> None:
        self._session_manager = session_manager
        self._transport = transport
        self._tracker = tracker

    async def handle_message(self, room_id: str, player: Player, text: str) -> None:
        command = parse_command(text)
        if command is None:
            if text.lstrip().startswith("/"):
                logger.debug("unknown command ignored", room_id=room_id, text=text)
                return
            await self._session_manager.handle_text(room_id, player, text)
            return

        if command == Command.START:
            await self._reply(room_id, texts.WELCOME)
        elif command == Command.HELP:
            await self._reply(room_id, texts.help_text(self._session_manager.settings.win_score))
        elif command == Command.JOIN:
            await self._session_manager.join(room_id, player)
        elif command == Command.LEAVE:
            await self._session_manager.leave(room_id, player)
        elif command == Command.MYSTATS:
            await self._handle_stats(room_id, player)
        elif command == Command.SHOWACHIEVEMENTS:
            await self._reply(room_id, texts.achievements_list())

    async def _handle_stats(self, room_id: str, player: Player) -> None:
        stats = await self._tracker.get_stats(player.user_id) if self._tracker is not None else None
        if stats is None:
            await self._reply(room_id, texts.NO_STATS)
            return
        await self._reply(room_id, texts.player_stats(player.name, stats))

    async def _reply(self, room_id: str, text: str) -> None:
        try:
            await self._transport.notify(room_id, text)
        except TransportError:
            logger.warning("reply delivery failed", room_id=room_id)
