"""Static city dictionary lookup."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from cities.logic.exceptions import CatalogUnavailableError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = structlog.get_logger()


def _normalize(name: str) -> str:
    return name.strip().lower()


class CityCatalog:
    """Case-insensitive set of known city names. Immutable after construction."""

    def __init__(self, names: Iterable[str]) -> None:
        self._names = frozenset(n for n in (_normalize(name) for name in names) if n)

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.exists(name)

    def exists(self, name: str) -> bool:
        """Check whether a city with this name exists (case-insensitive)."""
        return _normalize(name) in self._names

    @classmethod
    def from_json(cls, path: str | Path) -> CityCatalog:
        """Load the catalog from a ``{"city": [{"name": ...}, ...]}`` JSON file.

        Raises CatalogUnavailableError when the file is missing or malformed.
        """
        json_path = Path(path)
        try:
            raw = json_path.read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"City dictionary not readable: {json_path}"
            raise CatalogUnavailableError(msg) from exc

        try:
            data = json.loads(raw)
            records = data["city"]
            names = [record["name"] for record in records]
        except (json.JSONDecodeError, KeyError, TypeError) as exc:
            msg = f"Malformed city dictionary: {json_path}"
            raise CatalogUnavailableError(msg) from exc

        if not all(isinstance(name, str) for name in names):
            msg = f"City names must be strings in {json_path}"
            raise CatalogUnavailableError(msg)

        catalog = cls(names)
        logger.info("city catalog loaded", path=str(json_path), count=len(catalog))
        return catalog
