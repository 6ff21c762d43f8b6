"""Cross-session player statistics fed by game events."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import structlog

from cities.logic.achievements import AchievementMetric, Unlocks, is_win_milestone, unlocked_achievements
from shared.dal.models import PlayerStats

if TYPE_CHECKING:
    from cities.logic.types import Player
    from shared.dal.achievement_repository import AchievementRepository

logger = structlog.get_logger()


class AchievementSink(ABC):
    """Receives game events after the session state has been mutated.

    Implementations must never raise: a failing sink cannot block or roll
    back a game in progress.
    """

    @abstractmethod
    async def on_city_named(self, player: Player, city: str) -> Unlocks: ...

    @abstractmethod
    async def on_game_won(self, player: Player, score: int) -> Unlocks: ...

    @abstractmethod
    async def on_game_lost(self, player: Player, score: int) -> None: ...


class NullAchievementSink(AchievementSink):
    """Sink that records nothing. Used when no statistics store is configured."""

    async def on_city_named(self, player: Player, city: str) -> Unlocks:  # noqa: ARG002
        return Unlocks()

    async def on_game_won(self, player: Player, score: int) -> Unlocks:  # noqa: ARG002
        return Unlocks()

    async def on_game_lost(self, player: Player, score: int) -> None:
        return None


class AchievementTracker(AchievementSink):
    """Persist player statistics and detect unlocked achievements.

    Repository failures are logged and swallowed; the caller gets an empty
    Unlocks and the game carries on.
    """

    def __init__(self, repository: AchievementRepository) -> None:
        self._repository = repository

    async def get_stats(self, user_id: str) -> PlayerStats | None:
        """Look up a player's statistics. Return None when absent or unreadable."""
        try:
            return await self._repository.get_stats(user_id)
        except Exception:
            logger.exception("failed to load player stats", user_id=user_id)
            return None

    async def on_city_named(self, player: Player, city: str) -> Unlocks:
        try:
            stats = await self._load(player.user_id)
            before = stats.cities_named
            stats.cities_named += 1
            stats.favorite_cities[city] = stats.favorite_cities.get(city, 0) + 1
            await self._repository.save_stats(stats)
        except Exception:
            logger.exception("failed to record named city", user_id=player.user_id, city=city)
            return Unlocks()
        return Unlocks(
            achievements=tuple(unlocked_achievements(AchievementMetric.CITIES_NAMED, before, stats.cities_named)),
        )

    async def on_game_won(self, player: Player, score: int) -> Unlocks:
        try:
            stats = await self._load(player.user_id)
            before = stats.consecutive_wins
            stats.wins += 1
            stats.consecutive_wins += 1
            stats.total_games_played += 1
            await self._repository.save_stats(stats)
        except Exception:
            logger.exception("failed to record win", user_id=player.user_id, score=score)
            return Unlocks()
        return Unlocks(
            achievements=tuple(
                unlocked_achievements(AchievementMetric.CONSECUTIVE_WINS, before, stats.consecutive_wins),
            ),
            win_milestone=stats.wins if is_win_milestone(stats.wins) else None,
        )

    async def on_game_lost(self, player: Player, score: int) -> None:
        try:
            stats = await self._load(player.user_id)
            stats.consecutive_wins = 0
            stats.total_games_played += 1
            await self._repository.save_stats(stats)
        except Exception:
            logger.exception("failed to record loss", user_id=player.user_id, score=score)

    async def _load(self, user_id: str) -> PlayerStats:
        stats = await self._repository.get_stats(user_id)
        return stats if stats is not None else PlayerStats(user_id=user_id)
