"""Entity providers — read the curated dataset into :class:`Entity` records.

The dataset is a directory holding one TOML file per entity; the file
stem is the entity id.  Files are yielded sorted by name, which fixes the
population order that ranking ties fall back on.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from langrank.errors import ActionableError
from langrank.store.entity import Entity

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

_KNOWN_KEYS = frozenset({"title", "type", "extensions", "links", "fields", "series"})


class EntityProvider(Protocol):
    """A finite, restartable source of entities."""

    def iterate(self) -> Iterator[Entity]: ...


class DirectoryProvider:
    """Yields one entity per ``*.toml`` file in *path*."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def iterate(self) -> Iterator[Entity]:
        if not self.path.is_dir():
            raise ActionableError.config(
                field_name="dataset.path",
                reason=f"Dataset directory not found: {self.path}",
                suggestion="Point [dataset].path at an existing directory of entity files",
            )
        for filepath in sorted(self.path.glob("*.toml")):
            yield load_entity(filepath)


def load_entity(filepath: Path) -> Entity:
    """Parse a single entity file."""
    try:
        data = tomllib.loads(filepath.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ActionableError.parse(
            source=str(filepath),
            raw_error=str(exc),
        ) from None
    return entity_from_dict(filepath.stem, data, source=str(filepath))


def entity_from_dict(entity_id: str, data: dict[str, object], *, source: str = "") -> Entity:
    """Build an :class:`Entity` from a decoded TOML document.

    Scalar ``[fields]`` values are kept as strings.  ``[series.<name>]``
    tables map years to values; keys that are not years are skipped.
    Unknown top-level keys and nested tables inside ``[fields]`` are
    skipped too, each logged at DEBUG.
    """
    source = source or entity_id

    for key in data:
        if key not in _KNOWN_KEYS:
            logger.debug("Skipping unknown key '%s' in %s", key, source)

    raw_fields = data.get("fields", {})
    if not isinstance(raw_fields, dict):
        raise ActionableError.validation(
            field_name=f"{source}: fields",
            reason="[fields] must be a table",
        )
    fields: dict[str, str] = {}
    for key, value in raw_fields.items():
        if isinstance(value, dict):
            logger.debug("Skipping nested table '%s' in [fields] of %s", key, source)
            continue
        fields[str(key)] = str(value)

    raw_series = data.get("series", {})
    if not isinstance(raw_series, dict):
        raise ActionableError.validation(
            field_name=f"{source}: series",
            reason="[series] must be a table of year tables",
        )
    series: dict[str, dict[int, str]] = {}
    for name, history in raw_series.items():
        if not isinstance(history, dict):
            logger.debug("Skipping series '%s' in %s: not a table", name, source)
            continue
        years: dict[int, str] = {}
        for year, value in history.items():
            try:
                years[int(year)] = str(value)
            except ValueError:
                logger.debug("Skipping non-year key '%s' in series '%s' of %s", year, name, source)
        series[str(name)] = years

    links = data.get("links", [])
    if isinstance(links, str):
        links = links.split()
    if not isinstance(links, list):
        raise ActionableError.validation(
            field_name=f"{source}: links",
            reason="links must be a list of entity ids",
        )

    extensions = data.get("extensions", "")
    if isinstance(extensions, list):
        extensions = " ".join(str(e) for e in extensions)

    entity_type = data.get("type")
    return Entity(
        id=entity_id,
        title=str(data.get("title", "") or entity_id),
        type=str(entity_type) if entity_type is not None else None,
        fields=fields,
        series=series,
        links=tuple(str(link) for link in links),
        extensions=tuple(str(extensions).split()),
    )
