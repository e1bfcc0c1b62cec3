"""Memoized rankings — every derived structure computed once per snapshot.

:func:`build_rankings` runs the full pipeline twice (all entities, then
languages only) and returns one immutable :class:`Rankings` record.
:class:`RankingCache` publishes that record behind a compute-once lock;
readers never see a half-built record, and invalidation discards the
whole record at once.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from langrank.ranking.fusion import fuse
from langrank.ranking.index import InverseIndex
from langrank.ranking.metrics import DEFAULT_METRICS, MetricContext

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Mapping, Sequence

    from langrank.ranking.fusion import RankTable
    from langrank.ranking.metrics import Metric
    from langrank.store.entity import Entity
    from langrank.store.snapshot import Snapshot

logger = logging.getLogger(__name__)

GLOBAL = "global"
LANGUAGES = "languages"


@dataclass(frozen=True)
class RankedView:
    """A RankTable paired with its InverseIndex."""

    table: RankTable
    inverse: InverseIndex

    @classmethod
    def from_table(cls, table: RankTable) -> RankedView:
        return cls(table=table, inverse=InverseIndex(table))

    @property
    def population(self) -> str:
        return self.table.population

    def __len__(self) -> int:
        return len(self.table)


@dataclass(frozen=True)
class Rankings:
    """Everything derived from one snapshot, built and dropped as a unit."""

    snapshot: Snapshot
    global_view: RankedView
    language_view: RankedView
    top_languages: tuple[str, ...]
    extension_map: Mapping[str, str]


class LanguagePredicate:
    """``is_language`` rule: any entity whose type is not excluded.

    Entities without a type count as languages.
    """

    def __init__(self, non_language_types: Collection[str]) -> None:
        self.non_language_types = frozenset(non_language_types)

    def __call__(self, entity: Entity) -> bool:
        return entity.type not in self.non_language_types


def build_rankings(
    snapshot: Snapshot,
    is_language: Callable[[Entity], bool],
    metrics: Sequence[Metric] = DEFAULT_METRICS,
) -> Rankings:
    """Rank the whole snapshot and its language sub-population."""
    # Inbound links always come from the full dataset, even for the subset
    context = MetricContext(inbound_links=snapshot.inbound_links)

    global_table = fuse(snapshot.entities, metrics, context, population=GLOBAL)
    language_table = fuse(
        snapshot.filter(is_language), metrics, context, population=LANGUAGES
    )

    top_languages = tuple(record.id for record in language_table)

    # Walk worst-to-best so the best-ranked language owns a shared extension
    extension_map: dict[str, str] = {}
    for entity_id in reversed(top_languages):
        entity = snapshot.get(entity_id)
        if entity is None:
            continue
        for ext in entity.extensions:
            extension_map[ext] = entity_id

    return Rankings(
        snapshot=snapshot,
        global_view=RankedView.from_table(global_table),
        language_view=RankedView.from_table(language_table),
        top_languages=top_languages,
        extension_map=MappingProxyType(extension_map),
    )


class RankingCache:
    """Compute-once holder for the :class:`Rankings` of the current dataset.

    Usage::

        cache = RankingCache(lambda: Snapshot.from_provider(provider), predicate)
        rankings = cache.get()   # first call loads and ranks
        cache.get()              # same object, no recomputation
        cache.invalidate()       # dataset changed; next get() rebuilds all
    """

    def __init__(
        self,
        load_snapshot: Callable[[], Snapshot],
        is_language: Callable[[Entity], bool],
        metrics: Sequence[Metric] = DEFAULT_METRICS,
    ) -> None:
        self._load_snapshot = load_snapshot
        self._is_language = is_language
        self._metrics = tuple(metrics)
        self._lock = threading.Lock()
        self._rankings: Rankings | None = None

    def get(self) -> Rankings:
        rankings = self._rankings
        if rankings is not None:
            return rankings
        with self._lock:
            if self._rankings is None:
                snapshot = self._load_snapshot()
                self._rankings = build_rankings(snapshot, self._is_language, self._metrics)
                logger.info(
                    "Rankings built: %d entities, %d languages",
                    len(self._rankings.global_view),
                    len(self._rankings.language_view),
                )
            return self._rankings

    def invalidate(self) -> None:
        with self._lock:
            self._rankings = None

    @property
    def is_built(self) -> bool:
        return self._rankings is not None
