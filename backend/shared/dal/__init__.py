"""Data access layer: repository interfaces and shared persistence models."""

from shared.dal.achievement_repository import AchievementRepository
from shared.dal.models import PlayerStats

__all__ = [
    "AchievementRepository",
    "PlayerStats",
]
