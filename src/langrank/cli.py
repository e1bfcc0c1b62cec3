"""CLI command handlers for langrank.

Each public function corresponds to a CLI subcommand and encapsulates
the wiring, orchestration, and output for that command.  Handlers receive
the parsed arguments and the validated :class:`Settings`.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import TYPE_CHECKING

from langrank.config import DEFAULT_SETTINGS_PATH
from langrank.errors import ActionableError
from langrank.ranking import LanguagePredicate, RankingCache, RankQueryService
from langrank.store import DirectoryProvider, Snapshot

if TYPE_CHECKING:
    from langrank.config import Settings
    from langrank.ranking import RankedView
    from langrank.store import Entity


def open_rankings(settings: Settings) -> RankQueryService:
    """Load the configured dataset and rank it."""
    provider = DirectoryProvider(settings.dataset.path)
    cache = RankingCache(
        lambda: Snapshot.from_provider(provider),
        LanguagePredicate(settings.population.non_language_types),
    )
    return RankQueryService(cache.get())


def _resolve(service: RankQueryService, query: str) -> Entity:
    entity = service.search(query)
    if entity is None:
        raise ActionableError.not_found(
            query,
            "dataset",
            suggestion="Use the entity's file name or title, e.g. 'python' or 'C++'",
        )
    return entity


def _label(view: RankedView) -> str:
    return "language rank" if view.population == "languages" else "rank"


def handle_top(args: argparse.Namespace, settings: Settings) -> None:
    """Print the best-ranked entities."""
    service = open_rankings(settings)
    view = service.view(languages=args.languages)
    limit = args.limit if args.limit is not None else settings.output.top_n
    if limit <= 0:
        raise ActionableError.validation(
            field_name="--limit",
            reason=f"is {limit} — must be an integer > 0",
            suggestion="Pass --limit with a positive number, or omit it to use [output].top_n",
        )

    if len(view) == 0:
        print(f"No entities in the {view.population} population.")
        return

    print(f"\n{'=' * 60}")
    print(f" Top {min(limit, len(view))} of {len(view)} ({view.population})")
    print(f"{'=' * 60}")
    for record in list(view.table)[:limit]:
        entity = service.rankings.snapshot.get(record.id)
        title = entity.title if entity else record.id
        print(f"{record.index:>4}. {title} [{record.id}]")
        print(f"      {record.explanation()}")
    print()


def handle_at(args: argparse.Namespace, settings: Settings) -> None:
    """Print the entity holding a rank, wrapping around at both ends."""
    service = open_rankings(settings)
    view = service.view(languages=args.languages)
    entity = service.entity_at_rank(args.rank, view)
    index = service.rank(entity, view)
    print(f"#{index} {entity.title} [{entity.id}]")


def handle_explain(args: argparse.Namespace, settings: Settings) -> None:
    """Print the full rank breakdown for one entity."""
    service = open_rankings(settings)
    view = service.view(languages=args.languages)
    entity = _resolve(service, args.query)
    record = service.explain(entity, view)
    percentile = service.percentile(entity, view)

    print(f"{entity.title} [{entity.id}]")
    print(f"  {_label(view).capitalize()}: {record.index} of {len(view)}")
    print(f"  Percentile: {percentile:.3f}")
    for name, value, rank in zip(
        record.metric_names, record.metric_values, record.per_metric_ranks, strict=True
    ):
        print(f"  {name:<14} {value:>12}  (#{rank})")
    print(f"  Composite rank: {record.composite_rank} (worst metric dropped)")


def handle_find(args: argparse.Namespace, settings: Settings) -> None:
    """Find an entity by name, id, or file extension."""
    service = open_rankings(settings)
    if args.ext:
        entity = service.find_by_extensions(args.ext)
    else:
        entity = service.search(args.query)

    if entity is None:
        print("No match found.")
        return
    print(f"{entity.title} [{entity.id}]")
    print(f"  Rank: {service.rank(entity, service.global_view)}")
    if entity.id in service.language_view.table:
        print(f"  Language rank: {service.rank(entity, service.language_view)}")


def handle_export(args: argparse.Namespace, settings: Settings) -> None:
    """Write the global ranking to CSV."""
    from langrank.export import CSVExporter

    service = open_rankings(settings)
    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
    else:
        out_dir = Path(settings.output.output_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        out_path = out_dir / "rankings.csv"

    try:
        rows = CSVExporter().export(service.rankings, str(out_path))
    except OSError as exc:
        raise ActionableError.from_exception(
            exc,
            "export",
            "write_csv",
            suggestion=f"Check that {out_path} is a writable file path",
        ) from exc
    print(f"Exported CSV → {out_path} ({rows} rows)")


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="langrank",
        description="Composite popularity ranking for a curated dataset of programming languages",
    )
    parser.add_argument(
        "--settings",
        type=str,
        default=str(DEFAULT_SETTINGS_PATH),
        metavar="PATH",
        help=f"Settings file (default: {DEFAULT_SETTINGS_PATH})",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # -- top -----------------------------------------------------------------
    top_p = sub.add_parser("top", help="List the best-ranked entities")
    top_p.add_argument("--languages", action="store_true", help="Rank languages only")
    top_p.add_argument(
        "--limit",
        type=int,
        default=None,
        metavar="N",
        help="Number of entities to list (default: [output].top_n)",
    )

    # -- at ------------------------------------------------------------------
    at_p = sub.add_parser("at", help="Show the entity at a rank (wraps around)")
    at_p.add_argument("rank", type=int, help="0-based rank; -1 is the last entity")
    at_p.add_argument("--languages", action="store_true", help="Use the language ranking")

    # -- explain -------------------------------------------------------------
    explain_p = sub.add_parser("explain", help="Break down an entity's rank")
    explain_p.add_argument("query", type=str, help="Entity id or title")
    explain_p.add_argument("--languages", action="store_true", help="Use the language ranking")

    # -- find ----------------------------------------------------------------
    find_p = sub.add_parser("find", help="Find an entity by name or file extension")
    find_p.add_argument("query", type=str, nargs="?", default=None, help="Entity id or title")
    find_p.add_argument(
        "--ext",
        type=str,
        nargs="+",
        default=None,
        metavar="EXT",
        help="File extensions to look up, first match wins",
    )

    # -- export --------------------------------------------------------------
    export_p = sub.add_parser("export", help="Export the ranking as CSV")
    export_p.add_argument(
        "--out",
        type=str,
        default=None,
        metavar="PATH",
        help="Output file (default: <output_dir>/rankings.csv)",
    )

    return parser
