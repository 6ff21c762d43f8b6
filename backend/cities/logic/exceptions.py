"""Typed domain exceptions for the Cities game.

Rule violations raised by the validator subclass GameRuleError and are
caught at the session boundary (SessionManager), where they are converted
into a user-facing reply. They never escape into the transport layer.
"""

from cities.logic.enums import MoveRejection


class GameRuleError(Exception):
    """Base exception for game rule violations."""


class InvalidInputError(GameRuleError):
    """Text cannot be interpreted as a city name (empty, too long)."""


class MoveRejectedError(GameRuleError):
    """A well-formed city name was rejected by the turn validator.

    Attributes:
        city: The normalized city name that was rejected.
        rejection: Machine-readable rejection code.

    """

    rejection: MoveRejection

    def __init__(self, city: str, message: str | None = None) -> None:
        self.city = city
        super().__init__(message or f"{self.rejection.value}: {city}")


class UnknownCityError(MoveRejectedError):
    """City is not present in the catalog."""

    rejection = MoveRejection.UNKNOWN_CITY


class AlreadyUsedError(MoveRejectedError):
    """City was already named in this session."""

    rejection = MoveRejection.ALREADY_USED


class WrongLetterError(MoveRejectedError):
    """City does not start with the previous city's significant letter."""

    rejection = MoveRejection.WRONG_LETTER

    def __init__(self, city: str, expected_letter: str) -> None:
        self.expected_letter = expected_letter
        super().__init__(city, f"{self.rejection.value}: {city} (expected {expected_letter!r})")


class CatalogUnavailableError(Exception):
    """The city dictionary could not be loaded. Fatal at startup."""


class TransportError(Exception):
    """A message could not be delivered or edited by the chat transport."""


class InvalidPhaseError(GameRuleError):
    """Operation is not valid in the session's current phase."""
