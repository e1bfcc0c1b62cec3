"""Rank queries — lookups by position, by entity, and by file extension.

Every method takes an explicit :class:`RankedView` (``rankings.global_view``
or ``rankings.language_view``) so the two populations can never be mixed
up.  Queries for entities a view does not rank raise NOT_FOUND.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from langrank.errors import ActionableError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from langrank.ranking.cache import RankedView, Rankings
    from langrank.ranking.fusion import RankRecord
    from langrank.store.entity import Entity


class RankQueryService:
    """Read-only queries over one :class:`Rankings` record."""

    def __init__(self, rankings: Rankings) -> None:
        self.rankings = rankings

    @property
    def global_view(self) -> RankedView:
        return self.rankings.global_view

    @property
    def language_view(self) -> RankedView:
        return self.rankings.language_view

    def view(self, *, languages: bool = False) -> RankedView:
        return self.language_view if languages else self.global_view

    # -- position -> entity --------------------------------------------------

    def entity_at_rank(self, rank: int, view: RankedView) -> Entity:
        """Entity at *rank*, wrapping around at both ends.

        A negative rank maps to the last entity and a rank past the end
        maps to the first, so "previous of #0" and "next of last" cycle.
        """
        count = len(view)
        if count == 0:
            raise ActionableError.not_found(f"rank {rank}", view.population)
        if rank < 0:
            rank = count - 1
        elif rank >= count:
            rank = 0
        return self._entity(view.inverse.get(rank).id)

    # -- entity -> position --------------------------------------------------

    def rank(self, entity: Entity | str, view: RankedView) -> int:
        return self.explain(entity, view).index

    def percentile(self, entity: Entity | str, view: RankedView) -> float:
        """Fraction of the population ranked above *entity*; 0.0 is the best."""
        return self.explain(entity, view).index / len(view)

    def explain(self, entity: Entity | str, view: RankedView) -> RankRecord:
        entity_id = entity if isinstance(entity, str) else entity.id
        return view.table.get(entity_id)

    # -- language lookups ----------------------------------------------------

    def top_languages(self) -> list[Entity]:
        """Language entities, best language rank first."""
        return [self._entity(entity_id) for entity_id in self.rankings.top_languages]

    def find_by_extensions(self, extensions: Iterable[str]) -> Entity | None:
        """Language owning the first of *extensions* that any language uses."""
        extension_map = self.rankings.extension_map
        for ext in extensions:
            entity_id = extension_map.get(ext.lstrip("."))
            if entity_id is not None:
                return self._entity(entity_id)
        return None

    def search(self, query: str | None) -> Entity | None:
        return self.rankings.snapshot.search(query)

    def _entity(self, entity_id: str) -> Entity:
        entity = self.rankings.snapshot.get(entity_id)
        if entity is None:
            raise ActionableError.not_found(entity_id, "dataset")
        return entity
