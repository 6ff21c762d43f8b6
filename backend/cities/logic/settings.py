"""Centralized game settings for Cities - all configurable gameplay rules."""

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SKIP_LETTERS: frozenset[str] = frozenset({"ь", "ъ", "ы"})


class GameSettings(BaseModel):
    """
    Configuration for a single game session.

    Durations are in seconds. Settings are captured when a session is
    created; changing them does not affect sessions already in progress.
    """

    model_config = ConfigDict(frozen=True)

    # --- Scoring ---
    win_score: int = Field(default=15, ge=1)

    # --- Timing ---
    join_seconds: float = Field(default=30, gt=0)
    progress_interval_seconds: float = Field(default=3, gt=0)
    inactivity_seconds: float = Field(default=300, gt=0)

    # --- Input ---
    max_city_length: int = Field(default=64, ge=1)
    skip_letters: frozenset[str] = DEFAULT_SKIP_LETTERS
