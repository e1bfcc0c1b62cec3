"""Entity record — one curated thing (language, tool, format) in the dataset.

Every raw field is individually optional.  Callers ask :meth:`Entity.has`
or receive ``None`` from :meth:`Entity.get`; absence is never encoded as a
sentinel value.  Numeric readers degrade to ``0`` so that a sparse or
messy record contributes nothing instead of aborting a ranking build.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_int(raw: object) -> int:
    """Read the leading integer of *raw*, or ``0`` when there is none.

    ``"1200"`` and ``"1200 (estimate)"`` both read as 1200; ``None``,
    ``""`` and ``"n/a"`` read as 0.
    """
    if raw is None:
        return 0
    if isinstance(raw, bool):
        return int(raw)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw)
    match = _LEADING_INT.match(str(raw))
    if match is None:
        logger.debug("Non-numeric value %r read as 0", raw)
        return 0
    return int(match.group(1))


@dataclass(frozen=True, eq=False)
class Entity:
    """An immutable dataset record.  Equality and hashing are by ``id``."""

    id: str
    title: str = ""
    type: str | None = None
    fields: Mapping[str, str] = field(default_factory=dict)
    series: Mapping[str, Mapping[int, str]] = field(default_factory=dict)
    links: tuple[str, ...] = ()
    extensions: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Freeze the mappings so a snapshot cannot drift mid-computation
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))
        object.__setattr__(
            self,
            "series",
            MappingProxyType({k: MappingProxyType(dict(v)) for k, v in self.series.items()}),
        )
        if not self.title:
            object.__setattr__(self, "title", self.id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Entity(id={self.id!r})"

    # -- field access --------------------------------------------------------

    def has(self, key: str) -> bool:
        """True if the scalar field or series *key* is populated."""
        return self.get(key) is not None or bool(self.series.get(key))

    def get(self, key: str) -> str | None:
        """Raw scalar value for *key*, or ``None`` when absent or blank."""
        value = self.fields.get(key)
        if value is None or not str(value).strip():
            return None
        return value

    def get_int(self, key: str) -> int:
        """Leading integer of the scalar field *key*; ``0`` when absent."""
        return parse_int(self.get(key))

    def most_recent_int(self, key: str) -> int:
        """Integer value of the latest year recorded in the series *key*.

        Falls back to the scalar field of the same name when no series
        exists, and to ``0`` when neither does.
        """
        history = self.series.get(key)
        if history:
            return parse_int(history[max(history)])
        return self.get_int(key)

    @property
    def fact_count(self) -> int:
        """Number of populated raw fields and series."""
        populated = sum(1 for key in self.fields if self.get(key) is not None)
        return populated + sum(1 for values in self.series.values() if values)
