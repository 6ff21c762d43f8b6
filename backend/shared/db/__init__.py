"""SQLite database layer: connection management and repository implementations."""

from shared.db.achievement_repository import SqliteAchievementRepository
from shared.db.connection import Database

__all__ = [
    "Database",
    "SqliteAchievementRepository",
]
