"""Metric extraction — map a raw entity record to one number per metric.

Each estimate is a weighted sum over optional raw fields, declared as an
explicit tuple of :class:`FieldTransform` entries and evaluated
uniformly.  An absent or non-numeric field contributes ``0``.

The engine ranks on a fixed ordered tuple of metrics,
:data:`DEFAULT_METRICS`: estimated jobs, estimated users, fact count,
and inbound-link count.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from langrank.store.entity import Entity


class TransformKind(StrEnum):
    """How a field's raw value becomes a contribution."""

    CONSTANT = "constant"  # factor, whenever the field is present
    SCALED = "scaled"  # factor x integer value
    MOST_RECENT = "most_recent"  # factor x latest year's integer value


@dataclass(frozen=True)
class FieldTransform:
    """One term of an estimate: a raw field and how it contributes."""

    field: str
    kind: TransformKind
    factor: float = 1.0

    def contribution(self, entity: Entity) -> float:
        if self.kind is TransformKind.MOST_RECENT:
            return self.factor * entity.most_recent_int(self.field)
        if not entity.has(self.field):
            return 0.0
        if self.kind is TransformKind.CONSTANT:
            return self.factor
        return self.factor * entity.get_int(self.field)


@dataclass(frozen=True)
class MetricContext:
    """Population-wide inputs some metrics need."""

    inbound_links: Mapping[str, tuple[str, ...]]


@dataclass(frozen=True)
class Metric:
    """A named extraction function."""

    name: str
    extract: Callable[[Entity, MetricContext], int]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def estimate(entity: Entity, transforms: tuple[FieldTransform, ...]) -> int:
    """Sum the contributions of *transforms* and round to an integer."""
    return round_half_up(sum(t.contribution(entity) for t in transforms))


# ---------------------------------------------------------------------------
# Reference heuristics
# ---------------------------------------------------------------------------

USER_ESTIMATE: tuple[FieldTransform, ...] = (
    FieldTransform("linkedInSkill", TransformKind.MOST_RECENT),
    FieldTransform("subreddit memberCount", TransformKind.MOST_RECENT),
    FieldTransform("projectEuler members", TransformKind.MOST_RECENT),
    FieldTransform("meetup members", TransformKind.SCALED),
    FieldTransform("githubRepo stars", TransformKind.SCALED),
    FieldTransform("wikipedia", TransformKind.CONSTANT, 20),
    # TODO: replace with the package repository's author count once it is collected
    FieldTransform("packageRepository", TransformKind.CONSTANT, 1000),
    # ~95% of page views are bots and ~1% of users visit the page daily
    FieldTransform("wikipedia dailyPageViews", TransformKind.SCALED, 100 / 20),
    # Linguist requires at least 200 users before accepting a grammar
    FieldTransform("linguistGrammarRepo", TransformKind.CONSTANT, 200),
    FieldTransform("codeMirror", TransformKind.CONSTANT, 50),
    FieldTransform("website", TransformKind.CONSTANT, 1),
    FieldTransform("githubRepo", TransformKind.CONSTANT, 1),
    FieldTransform("githubRepo forks", TransformKind.SCALED, 3),
    FieldTransform("annualReport", TransformKind.CONSTANT, 1000),
)


def predict_jobs(entity: Entity, context: MetricContext | None = None) -> int:
    """Estimated open job postings."""
    return round_half_up(entity.most_recent_int("linkedInSkill") * 0.01) + entity.most_recent_int(
        "indeedJobs"
    )


def predict_users(entity: Entity, context: MetricContext | None = None) -> int:
    """Estimated number of users."""
    return estimate(entity, USER_ESTIMATE)


def count_facts(entity: Entity, context: MetricContext | None = None) -> int:
    return entity.fact_count


def count_inbound_links(entity: Entity, context: MetricContext) -> int:
    return len(context.inbound_links.get(entity.id, ()))


DEFAULT_METRICS: tuple[Metric, ...] = (
    Metric("jobs", predict_jobs),
    Metric("users", predict_users),
    Metric("facts", count_facts),
    Metric("inbound_links", count_inbound_links),
)
