from cities.messaging.mock import MockTransport
from cities.tests.mocks.repository import FailingAchievementRepository, InMemoryAchievementRepository

__all__ = [
    "FailingAchievementRepository",
    "InMemoryAchievementRepository",
    "MockTransport",
]
