"""Ranking engine — per-metric ranks, drop-worst fusion, and rank lookups."""

from langrank.ranking.cache import (
    GLOBAL,
    LANGUAGES,
    LanguagePredicate,
    RankedView,
    RankingCache,
    Rankings,
    build_rankings,
)
from langrank.ranking.fusion import RankRecord, RankTable, composite_rank, fuse
from langrank.ranking.index import InverseIndex
from langrank.ranking.metrics import DEFAULT_METRICS, Metric, MetricContext
from langrank.ranking.queries import RankQueryService
from langrank.ranking.sorter import competition_rank

__all__ = [
    "DEFAULT_METRICS",
    "GLOBAL",
    "LANGUAGES",
    "InverseIndex",
    "LanguagePredicate",
    "Metric",
    "MetricContext",
    "RankQueryService",
    "RankRecord",
    "RankTable",
    "RankedView",
    "RankingCache",
    "Rankings",
    "build_rankings",
    "competition_rank",
    "composite_rank",
    "fuse",
]
