"""Game session record and its phase transitions."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from cities.logic.enums import EndReason, SessionPhase
from cities.logic.exceptions import InvalidPhaseError
from cities.logic.leaderboard import pick_winner, rank
from cities.logic.letters import significant_letter
from cities.logic.settings import GameSettings
from cities.logic.types import AcceptedMove, GameEndResult, LeaderboardEntry, Player
from cities.session.timers import SessionTimers

if TYPE_CHECKING:
    from cities.messaging.protocol import MessageHandle


@dataclass
class GameSession:
    """State of the game in one room.

    Lifecycle:
    - Created in JOINING by the first join request in an idle room
    - JOINING -> ACTIVE when the join window closes with players present
    - -> ENDED on score threshold, inactivity, or an emptied join phase;
      the SessionManager then cancels all timers and drops the session

    Mutation happens only through the methods below, always under the
    room lock held by the SessionManager.
    """

    room_id: str
    settings: GameSettings = field(default_factory=GameSettings)
    phase: SessionPhase = SessionPhase.JOINING
    players: dict[str, Player] = field(default_factory=dict)  # user_id -> Player, join order
    scores: dict[str, int] = field(default_factory=dict)  # user_id -> score
    used_cities: set[str] = field(default_factory=set)
    last_city: str | None = None
    moves: int = 0
    score_reached_at: dict[str, int] = field(default_factory=dict)  # user_id -> move number
    join_deadline: float = 0.0  # time.monotonic() timestamp
    inactivity_deadline: float | None = None  # time.monotonic() timestamp, None until ACTIVE
    waiting_notified: set[str] = field(default_factory=set)
    roster_handle: MessageHandle | None = None
    timers: SessionTimers = field(default_factory=SessionTimers)

    @property
    def player_names(self) -> list[str]:
        return [p.name for p in self.players.values()]

    def has_player(self, user_id: str) -> bool:
        return user_id in self.players

    def open_join_window(self, now: float) -> None:
        self.join_deadline = now + self.settings.join_seconds

    def remaining_join_seconds(self, now: float) -> int:
        """Whole seconds left in the join window, rounded up, never negative."""
        return max(0, math.ceil(self.join_deadline - now))

    def add_player(self, player: Player) -> bool:
        """Register a player during JOINING. Return False if already registered."""
        self._require_phase(SessionPhase.JOINING, "join")
        if player.user_id in self.players:
            return False
        self.players[player.user_id] = player
        self.scores[player.user_id] = 0
        return True

    def remove_player(self, user_id: str) -> Player | None:
        """Remove a player during JOINING. Return the removed player, or None if absent."""
        self._require_phase(SessionPhase.JOINING, "leave")
        player = self.players.pop(user_id, None)
        if player is not None:
            self.scores.pop(user_id, None)
            self.waiting_notified.discard(user_id)
        return player

    def begin(self, now: float) -> None:
        """Close the join window and start play. The roster is frozen from here on."""
        self._require_phase(SessionPhase.JOINING, "begin")
        if not self.players:
            raise InvalidPhaseError("cannot begin a session without players")
        self.phase = SessionPhase.ACTIVE
        self.roster_handle = None
        self.touch(now)

    def touch(self, now: float) -> None:
        """Push the inactivity deadline forward after activity."""
        self.inactivity_deadline = now + self.settings.inactivity_seconds

    def apply_move(self, user_id: str, city: str) -> AcceptedMove:
        """Apply an already validated move and credit the mover."""
        self._require_phase(SessionPhase.ACTIVE, "move")
        player = self.players.get(user_id)
        if player is None:
            raise InvalidPhaseError(f"user {user_id} is not playing in room {self.room_id}")

        self.used_cities.add(city)
        self.last_city = city
        self.moves += 1
        score = self.scores.get(user_id, 0) + 1
        self.scores[user_id] = score
        self.score_reached_at[user_id] = self.moves

        return AcceptedMove(
            player=player,
            city=city,
            score=score,
            next_letter=significant_letter(city, self.settings.skip_letters),
            wins_game=score >= self.settings.win_score,
        )

    def standings(self) -> list[LeaderboardEntry]:
        return rank((player, self.scores.get(user_id, 0)) for user_id, player in self.players.items())

    def finish(self, reason: EndReason, winner_id: str | None = None) -> GameEndResult:
        """Move to ENDED and summarize the final standings.

        ``winner_id`` names the player whose move ended the game; otherwise
        the winner is picked from the standings.
        """
        if self.phase == SessionPhase.ENDED:
            raise InvalidPhaseError(f"session in room {self.room_id} already ended")
        self.phase = SessionPhase.ENDED

        standings = self.standings()
        winner_entry: LeaderboardEntry | None
        if winner_id is not None:
            winner_entry = next((e for e in standings if e.player.user_id == winner_id), None)
        else:
            winner_entry = pick_winner(standings, self.score_reached_at)

        return GameEndResult(
            reason=reason,
            standings=standings,
            winner=winner_entry.player if winner_entry else None,
            winner_score=winner_entry.score if winner_entry else 0,
        )

    def _require_phase(self, phase: SessionPhase, action: str) -> None:
        if self.phase != phase:
            raise InvalidPhaseError(f"cannot {action} in phase {self.phase.value}")
