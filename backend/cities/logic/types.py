"""
Pydantic models for game logic data structures.

Contains the typed results that cross component boundaries: players,
accepted moves, leaderboard rows and game end summaries.
"""

from pydantic import BaseModel, ConfigDict

from cities.logic.enums import EndReason


class Player(BaseModel):
    """A chat user taking part in a session."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    name: str


class AcceptedMove(BaseModel):
    """An applied move and the resulting mover score."""

    model_config = ConfigDict(frozen=True)

    player: Player
    city: str
    score: int
    next_letter: str
    wins_game: bool = False


class LeaderboardEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    rank: int
    player: Player
    score: int


class GameEndResult(BaseModel):
    """Final standings of a session."""

    model_config = ConfigDict(frozen=True)

    reason: EndReason
    standings: list[LeaderboardEntry]
    winner: Player | None = None
    winner_score: int = 0
