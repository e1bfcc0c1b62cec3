"""Immutable dataset snapshot and its referential integrity checks.

A :class:`Snapshot` is the unit every derived ranking structure is keyed
on.  It is materialized once from an :class:`EntityProvider`; building
it validates that ids are unique and that every outbound link resolves
inside the population, because the inbound-link metric depends on a
closed id space.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING

from langrank.errors import ActionableError
from langrank.text import title_to_permalink

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Mapping

    from langrank.store.entity import Entity
    from langrank.store.loader import EntityProvider

logger = logging.getLogger(__name__)


class Snapshot:
    """A frozen, ordered population of entities."""

    def __init__(self, entities: Iterable[Entity]) -> None:
        ordered = tuple(entities)
        by_id: dict[str, Entity] = {}
        for entity in ordered:
            if entity.id in by_id:
                raise ActionableError.integrity(
                    entity.id, "duplicate entity id in the dataset"
                )
            by_id[entity.id] = entity

        self._entities = ordered
        self._by_id = MappingProxyType(by_id)
        self._inbound_links = _compute_inbound_links(ordered, by_id)
        self._search_index = _build_search_index(ordered)

    @classmethod
    def from_provider(cls, provider: EntityProvider) -> Snapshot:
        snapshot = cls(provider.iterate())
        logger.info("Loaded %d entities", len(snapshot))
        return snapshot

    # -- collection protocol -------------------------------------------------

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[Entity]:
        return iter(self._entities)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._by_id

    @property
    def entities(self) -> tuple[Entity, ...]:
        return self._entities

    def get(self, entity_id: str) -> Entity | None:
        return self._by_id.get(entity_id)

    def filter(self, predicate: Callable[[Entity], bool]) -> tuple[Entity, ...]:
        """Entities matching *predicate*, in population order."""
        return tuple(e for e in self._entities if predicate(e))

    # -- derived lookups -----------------------------------------------------

    @property
    def inbound_links(self) -> Mapping[str, tuple[str, ...]]:
        """``id -> ids of entities linking to it``; every id has an entry."""
        return self._inbound_links

    def search(self, query: str | None) -> Entity | None:
        """Resolve *query* by exact id, lower-cased id, or title permalink."""
        if not query:
            return None
        for key in (query, query.lower(), title_to_permalink(query)):
            entity_id = self._search_index.get(key)
            if entity_id is not None:
                return self._by_id[entity_id]
        return None


def _compute_inbound_links(
    entities: tuple[Entity, ...], by_id: Mapping[str, Entity]
) -> Mapping[str, tuple[str, ...]]:
    inbound: dict[str, list[str]] = {entity.id: [] for entity in entities}
    for entity in entities:
        for target in entity.links:
            if target not in by_id:
                raise ActionableError.integrity(
                    entity.id,
                    f"broken link: no entity '{target}' found",
                    suggestion=f"Create '{target}' or remove the link from '{entity.id}'",
                )
            inbound[target].append(entity.id)
    return MappingProxyType({k: tuple(v) for k, v in inbound.items()})


def _build_search_index(entities: tuple[Entity, ...]) -> dict[str, str]:
    # Exact ids win over lower-cased ids, which win over title permalinks
    index: dict[str, str] = {}
    for entity in entities:
        index.setdefault(title_to_permalink(entity.title), entity.id)
    for entity in entities:
        index[entity.id.lower()] = entity.id
    for entity in entities:
        index[entity.id] = entity.id
    return index
