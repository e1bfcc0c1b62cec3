"""Inverse index tests.

Maps to BDD spec: TestInverseIndex
"""

from __future__ import annotations

import pytest

from conftest import EMPTY_CONTEXT, entity_with_values, field_metrics
from langrank.errors import ActionableError, ErrorType
from langrank.ranking.fusion import RankRecord, RankTable, fuse
from langrank.ranking.index import InverseIndex


def _record(entity_id: str, index: int) -> RankRecord:
    return RankRecord(
        id=entity_id,
        metric_names=("m",),
        metric_values=(0,),
        per_metric_ranks=(0,),
        composite_rank=0,
        index=index,
    )


class TestInverseIndex:
    """REQUIREMENT: Position lookups are the exact inverse of the table's indices.

    WHO: Wraparound rank queries ("who is rank N")
    WHAT: For every index in [0, n), get(index).index == index and the
          record is the table's record for that id; out-of-range lookups
          raise NOT_FOUND; a table with duplicate or gapped indices is
          rejected at construction
    WHY: A non-bijective index would make "rank N" and "rank of X"
         disagree about the same entity
    """

    def test_every_index_round_trips(self) -> None:
        """get(i).index == i and matches the table's record for the same id."""
        names = ("m1", "m2", "m3")
        entities = [entity_with_values(f"e{i}", names, (i, 10 - i, i % 2)) for i in range(8)]
        table = fuse(entities, field_metrics(*names), EMPTY_CONTEXT)
        inverse = InverseIndex(table)
        assert len(inverse) == len(table)
        for i in range(len(inverse)):
            record = inverse.get(i)
            assert record.index == i
            assert table.get(record.id) is record

    def test_out_of_range_lookup_raises_not_found(self) -> None:
        """Indices outside [0, n) raise NOT_FOUND rather than IndexError."""
        inverse = InverseIndex(RankTable("global", [_record("a", 0)]))
        for bad in (-1, 1, 99):
            with pytest.raises(ActionableError) as exc_info:
                inverse.get(bad)
            assert exc_info.value.error_type == ErrorType.NOT_FOUND

    def test_duplicate_indices_are_rejected(self) -> None:
        """Two records claiming the same index cannot form an inverse index."""
        table = RankTable("global", [_record("a", 0), _record("b", 0)])
        with pytest.raises(ActionableError) as exc_info:
            InverseIndex(table)
        assert exc_info.value.error_type == ErrorType.UNEXPECTED

    def test_index_outside_table_size_is_rejected(self) -> None:
        """A record whose index exceeds the population size is rejected."""
        table = RankTable("global", [_record("a", 0), _record("b", 5)])
        with pytest.raises(ActionableError):
            InverseIndex(table)

    def test_empty_table_builds_empty_index(self) -> None:
        """An empty population has an empty inverse index."""
        inverse = InverseIndex(RankTable("global", []))
        assert len(inverse) == 0
        with pytest.raises(ActionableError):
            inverse.get(0)
