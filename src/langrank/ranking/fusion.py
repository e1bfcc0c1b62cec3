"""Rank fusion — per-metric ranks combined into one final ordering.

:func:`fuse` performs four operations in sequence:

1. **Per-metric ranking** — every metric is extracted for every entity and
   competition-ranked independently (:func:`~langrank.ranking.sorter.competition_rank`).

2. **Drop-worst composite** — each entity's composite rank is the sum of
   its N-1 best (lowest) per-metric ranks.  The single worst metric is
   discarded, so one missing or flawed data source cannot sink an entity
   that is strong everywhere else.

3. **Final ordering** — entities are stably sorted ascending by composite.
   Entities with equal composites keep population order.

4. **Indexing** — each entity's ``index`` is its position in the final
   ordering, contiguous over ``[0, population size)``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import TYPE_CHECKING

from langrank.errors import ActionableError
from langrank.ranking.sorter import competition_rank

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from langrank.ranking.metrics import Metric, MetricContext
    from langrank.store.entity import Entity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankRecord:
    """One entity's position in one population, with its full breakdown."""

    id: str
    metric_names: tuple[str, ...]
    metric_values: tuple[int, ...]
    per_metric_ranks: tuple[int, ...]
    composite_rank: int
    index: int

    def rank_for(self, metric_name: str) -> int:
        return self.per_metric_ranks[self.metric_names.index(metric_name)]

    def value_for(self, metric_name: str) -> int:
        return self.metric_values[self.metric_names.index(metric_name)]

    def explanation(self) -> str:
        """Human-readable rank breakdown for CLI and export output."""
        parts = [
            f"{name}: {value} (#{rank})"
            for name, value, rank in zip(
                self.metric_names, self.metric_values, self.per_metric_ranks, strict=True
            )
        ]
        parts.append(f"Composite: {self.composite_rank}")
        return " | ".join(parts)


class RankTable:
    """``id -> RankRecord`` for one population, iterated in index order."""

    def __init__(self, population: str, records: Sequence[RankRecord]) -> None:
        self.population = population
        self._records = tuple(records)
        self._by_id = MappingProxyType({r.id: r for r in self._records})

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[RankRecord]:
        return iter(self._records)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._by_id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RankTable):
            return NotImplemented
        return self.population == other.population and self._records == other._records

    __hash__ = None  # type: ignore[assignment]

    def get(self, entity_id: str) -> RankRecord:
        """Record for *entity_id*; raises NOT_FOUND when it is not ranked here."""
        record = self._by_id.get(entity_id)
        if record is None:
            raise ActionableError.not_found(entity_id, self.population)
        return record


def composite_rank(ranks: Sequence[int]) -> int:
    """Sum of all per-metric ranks except the single worst (largest)."""
    if not ranks:
        return 0
    return sum(sorted(ranks)[:-1])


def fuse(
    entities: Sequence[Entity],
    metrics: Sequence[Metric],
    context: MetricContext,
    *,
    population: str = "global",
) -> RankTable:
    """Rank *entities* on every metric and fuse the ranks into a RankTable.

    Args:
        entities: The population, in the order ties fall back on.
        metrics: Ordered metric list; record tuples follow this order.
        context: Population-wide metric inputs (inbound links).
        population: Label used in errors and logs.

    Returns:
        A :class:`RankTable` whose records carry contiguous indices.
    """
    names = tuple(m.name for m in metrics)
    values: dict[str, list[int]] = {e.id: [] for e in entities}
    ranks: dict[str, list[int]] = {e.id: [] for e in entities}

    # Step 1: per-metric competition ranks
    for metric in metrics:
        pairs = [(e.id, metric.extract(e, context)) for e in entities]
        metric_ranks = competition_rank(pairs)
        for entity_id, value in pairs:
            values[entity_id].append(value)
            ranks[entity_id].append(metric_ranks[entity_id])

    # Step 2: drop-worst composite
    records = [
        RankRecord(
            id=e.id,
            metric_names=names,
            metric_values=tuple(values[e.id]),
            per_metric_ranks=tuple(ranks[e.id]),
            composite_rank=composite_rank(ranks[e.id]),
            index=-1,
        )
        for e in entities
    ]

    # Step 3 + 4: stable ascending sort, then index by position
    records.sort(key=lambda r: r.composite_rank)
    indexed = [replace(r, index=i) for i, r in enumerate(records)]

    logger.info(
        "Ranked %d entities in the %s population on %d metrics",
        len(indexed),
        population,
        len(names),
    )
    return RankTable(population, indexed)
