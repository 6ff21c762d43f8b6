"""Achievement definitions and milestone detection.

Pure functions over before/after counters; persistence lives in the
session layer's AchievementTracker.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

WIN_ANNOUNCE_EVERY = 10


class AchievementMetric(str, Enum):
    CITIES_NAMED = "cities_named"
    CONSECUTIVE_WINS = "consecutive_wins"


class Achievement(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    description: str
    metric: AchievementMetric
    threshold: int


ACHIEVEMENTS: tuple[Achievement, ...] = (
    Achievement(
        key="cities_100",
        name="Географ",
        description="Назвал 100 городов.",
        metric=AchievementMetric.CITIES_NAMED,
        threshold=100,
    ),
    Achievement(
        key="cities_500",
        name="Геополитик",
        description="Назвал 500 городов.",
        metric=AchievementMetric.CITIES_NAMED,
        threshold=500,
    ),
    Achievement(
        key="wins_10",
        name="Чемпион",
        description="Победил 10 раз подряд.",
        metric=AchievementMetric.CONSECUTIVE_WINS,
        threshold=10,
    ),
)


def unlocked_achievements(metric: AchievementMetric, before: int, after: int) -> list[Achievement]:
    """Return achievements whose threshold was crossed going from ``before`` to ``after``."""
    return [a for a in ACHIEVEMENTS if a.metric == metric and before < a.threshold <= after]


def is_win_milestone(wins: int) -> bool:
    """Win counts worth announcing: every tenth win."""
    return wins > 0 and wins % WIN_ANNOUNCE_EVERY == 0


class Unlocks(BaseModel):
    """What a statistics update unlocked, for announcement in the room."""

    model_config = ConfigDict(frozen=True)

    achievements: tuple[Achievement, ...] = ()
    win_milestone: int | None = None

    @property
    def empty(self) -> bool:
        return not self.achievements and self.win_milestone is None
