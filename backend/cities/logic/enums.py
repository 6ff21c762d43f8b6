"""
String enum definitions for Cities game concepts.
"""

from enum import Enum


class SessionPhase(str, Enum):
    """Lifecycle phase of a room's game session. Idle rooms have no session."""

    JOINING = "joining"
    ACTIVE = "active"
    ENDED = "ended"


class MoveRejection(str, Enum):
    """Reasons a named city is not accepted as a move."""

    UNKNOWN_CITY = "unknown_city"
    ALREADY_USED = "already_used"
    WRONG_LETTER = "wrong_letter"


class EndReason(str, Enum):
    """Why a session was torn down."""

    SCORE_REACHED = "score_reached"
    INACTIVITY = "inactivity"
    NO_PLAYERS = "no_players"
    ALL_LEFT = "all_left"


class TimerKind(str, Enum):
    """Timers owned by a single session. At most one live task per kind."""

    JOIN = "join"
    PROGRESS = "progress"
    INACTIVITY = "inactivity"
