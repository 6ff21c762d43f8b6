"""Final score ranking, winner selection and score label formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cities.logic.types import LeaderboardEntry

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from cities.logic.types import Player


def rank(scores: Iterable[tuple[Player, int]]) -> list[LeaderboardEntry]:
    """Rank players by score, highest first.

    Input order is the tie order (sorted() is stable), so equal scores keep
    join order. Rank is the 1-based position; ties are not re-ranked.
    """
    ordered = sorted(scores, key=lambda item: item[1], reverse=True)
    return [LeaderboardEntry(rank=i + 1, player=player, score=score) for i, (player, score) in enumerate(ordered)]


def pick_winner(
    standings: list[LeaderboardEntry],
    reached_at: Mapping[str, int],
) -> LeaderboardEntry | None:
    """Pick the winner among the top scorers.

    Ties on the top score go to whoever reached it first (lowest move
    number in ``reached_at``). Nobody wins with a top score of zero.
    """
    if not standings or standings[0].score <= 0:
        return None
    top_score = standings[0].score
    leaders = [entry for entry in standings if entry.score == top_score]
    return min(leaders, key=lambda entry: reached_at.get(entry.player.user_id, 0))


def points_word(points: int) -> str:
    """Russian plural form of "point" for the given count."""
    n = abs(points)
    if n % 10 == 1 and n % 100 != 11:
        return "очко"
    if 2 <= n % 10 <= 4 and not 12 <= n % 100 <= 14:
        return "очка"
    return "очков"


def format_leaderboard(standings: list[LeaderboardEntry]) -> str:
    return "\n".join(
        f"{entry.rank}. {entry.player.name}: {entry.score} {points_word(entry.score)}" for entry in standings
    )
