"""Export layer — CSV output of computed rankings."""

from langrank.export.csv_export import CSVExporter

__all__ = ["CSVExporter"]
