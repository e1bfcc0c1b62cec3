"""CSV export of the global ranking."""

from __future__ import annotations

import csv
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from langrank.ranking.cache import Rankings

logger = logging.getLogger(__name__)

# Leading columns; one value column per metric follows, then the composite.
_COLUMNS = [
    "rank",
    "language_rank",
    "id",
    "title",
    "type",
]


class CSVExporter:
    """Renders the global ranking as a CSV file suitable for spreadsheet import."""

    def export(self, rankings: Rankings, output_path: str) -> int:
        """Write one row per entity, best first.  Returns the row count.

        ``language_rank`` is blank for entities outside the language
        population.
        """
        global_table = rankings.global_view.table
        language_table = rankings.language_view.table
        snapshot = rankings.snapshot

        metric_names: tuple[str, ...] = ()
        for record in global_table:
            metric_names = record.metric_names
            break

        rows = 0
        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow([*_COLUMNS, *metric_names, "composite_rank"])

            for record in global_table:
                entity = snapshot.get(record.id)
                language_rank = (
                    language_table.get(record.id).index if record.id in language_table else ""
                )
                writer.writerow([
                    record.index,
                    language_rank,
                    record.id,
                    entity.title if entity else record.id,
                    (entity.type if entity else None) or "",
                    *(str(value) for value in record.metric_values),
                    record.composite_rank,
                ])
                rows += 1

        logger.info("Exported %d ranked entities to %s", rows, output_path)
        return rows
