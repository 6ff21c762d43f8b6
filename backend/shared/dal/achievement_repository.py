"""Abstract interface for player statistics persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.dal.models import PlayerStats


class AchievementRepository(ABC):
    """Abstract interface for player statistics persistence.

    Implementations can use SQLite, a document store, etc.
    """

    @abstractmethod
    async def get_stats(self, user_id: str) -> PlayerStats | None: ...

    @abstractmethod
    async def save_stats(self, stats: PlayerStats) -> None: ...
