"""Turn validation: decide whether a named city is an acceptable move.

Checks run in a fixed order: existence, then repetition, then chaining.
An unknown city is therefore never accepted regardless of its letter.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cities.logic.exceptions import (
    AlreadyUsedError,
    InvalidInputError,
    UnknownCityError,
    WrongLetterError,
)
from cities.logic.letters import significant_letter

if TYPE_CHECKING:
    from cities.logic.catalog import CityCatalog
    from cities.session.models import GameSession


def normalize_city(raw: str, max_length: int | None = None) -> str:
    """Trim and lowercase user input. Raise InvalidInputError on empty or oversized text."""
    city = raw.strip().lower()
    if not city:
        raise InvalidInputError("empty city name")
    if max_length is not None and len(city) > max_length:
        raise InvalidInputError(f"city name longer than {max_length} characters")
    return city


def expected_letter(session: GameSession) -> str | None:
    """Return the letter the next city must start with, or None before the first move."""
    if session.last_city is None:
        return None
    return significant_letter(session.last_city, session.settings.skip_letters)


def validate_move(raw: str, session: GameSession, catalog: CityCatalog) -> str:
    """Validate a candidate city against the session state.

    Return the normalized city name if the move is acceptable. Does not
    mutate the session.
    """
    city = normalize_city(raw, session.settings.max_city_length)

    if not catalog.exists(city):
        raise UnknownCityError(city)

    if city in session.used_cities:
        raise AlreadyUsedError(city)

    letter = expected_letter(session)
    if letter is not None and city[0] != letter:
        raise WrongLetterError(city, expected_letter=letter)

    return city
