"""SQLite-backed player statistics repository."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from shared.dal.achievement_repository import AchievementRepository
from shared.dal.models import PlayerStats

if TYPE_CHECKING:
    from shared.db.connection import Database


class SqliteAchievementRepository(AchievementRepository):
    """SQLite implementation of AchievementRepository.

    Stores each player's statistics as a JSON document keyed by user id.
    Writes are upserts serialized under an asyncio lock.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def get_stats(self, user_id: str) -> PlayerStats | None:
        row = self._db.connection.execute(
            "SELECT data FROM player_stats WHERE user_id = ?",
            (user_id,),
        ).fetchone()
        if row is None:
            return None
        return PlayerStats.model_validate_json(row[0])

    async def save_stats(self, stats: PlayerStats) -> None:
        """Insert or replace the statistics document for ``stats.user_id``."""
        async with self._lock:
            try:
                self._db.connection.execute(
                    "INSERT INTO player_stats (user_id, data) VALUES (?, ?) "
                    "ON CONFLICT(user_id) DO UPDATE SET data = excluded.data",
                    (stats.user_id, stats.model_dump_json()),
                )
                self._db.connection.commit()
            except Exception:
                self._db.connection.rollback()
                raise
