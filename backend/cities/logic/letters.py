"""Significant-letter rule used to chain one city to the next."""

from collections.abc import Collection

from cities.logic.exceptions import InvalidInputError
from cities.logic.settings import DEFAULT_SKIP_LETTERS


def significant_letter(city: str, skip: Collection[str] = DEFAULT_SKIP_LETTERS) -> str:
    """Return the letter the next city must start with.

    Scan the name from the end and return the first character that is not
    in ``skip``. When every character is skippable, fall back to the first
    character of the name.
    """
    if not city:
        raise InvalidInputError("city name must not be empty")
    for char in reversed(city):
        if char not in skip:
            return char
    return city[0]
