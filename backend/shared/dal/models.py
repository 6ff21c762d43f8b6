"""Persistence models for the data access layer."""

from pydantic import BaseModel, Field


class PlayerStats(BaseModel):
    """Cross-session statistics of one chat user."""

    user_id: str
    cities_named: int = 0
    wins: int = 0
    consecutive_wins: int = 0
    total_games_played: int = 0
    favorite_cities: dict[str, int] = Field(default_factory=dict)  # city -> times named

    def top_cities(self, limit: int = 3) -> list[tuple[str, int]]:
        """Most frequently named cities, most frequent first."""
        return sorted(self.favorite_cities.items(), key=lambda item: item[1], reverse=True)[:limit]
