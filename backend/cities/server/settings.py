"""Bot configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings

from cities.logic.settings import GameSettings


class BotSettings(BaseSettings):
    model_config = {"env_prefix": "CITIES_"}

    bot_token: str = Field(min_length=1)
    catalog_path: str = Field(default="backend/data/cities.json", min_length=1)
    database_path: str = Field(default="backend/storage.db", min_length=1)
    log_dir: str | None = None

    # Game rules, forwarded to GameSettings.
    win_score: int = Field(default=15, ge=1)
    join_seconds: float = Field(default=30, gt=0)
    progress_interval_seconds: float = Field(default=3, gt=0)
    inactivity_seconds: float = Field(default=300, gt=0)
    max_city_length: int = Field(default=64, ge=1)

    # Roster edits hit Telegram's rate limit easily; retried with exponential backoff.
    edit_retry_attempts: int = Field(default=5, ge=0)
    edit_backoff_seconds: float = Field(default=1.0, ge=0)

    def to_game_settings(self) -> GameSettings:
        return GameSettings(
            win_score=self.win_score,
            join_seconds=self.join_seconds,
            progress_interval_seconds=self.progress_interval_seconds,
            inactivity_seconds=self.inactivity_seconds,
            max_city_length=self.max_city_length,
        )
