"""Inverse index — final position back to record, for O(1) "who is rank N"."""

from __future__ import annotations

from typing import TYPE_CHECKING

from langrank.errors import ActionableError

if TYPE_CHECKING:
    from langrank.ranking.fusion import RankRecord, RankTable


class InverseIndex:
    """``index -> RankRecord``, the exact inverse of a table's ``index`` field."""

    def __init__(self, table: RankTable) -> None:
        self.population = table.population
        slots: list[RankRecord | None] = [None] * len(table)
        for record in table:
            if not 0 <= record.index < len(slots) or slots[record.index] is not None:
                raise ActionableError.unexpected(
                    "rankings",
                    f"building the {table.population} inverse index",
                    f"index {record.index} of '{record.id}' is out of range or duplicated",
                )
            slots[record.index] = record
        self._records: tuple[RankRecord, ...] = tuple(slots)  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._records)

    def get(self, index: int) -> RankRecord:
        """Record at *index*; raises NOT_FOUND outside ``[0, len)``."""
        if not 0 <= index < len(self._records):
            raise ActionableError.not_found(
                f"rank {index}",
                self.population,
                suggestion=f"Use a rank between 0 and {len(self._records) - 1}",
            )
        return self._records[index]
