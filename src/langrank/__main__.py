"""CLI entry point for langrank."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from langrank.cli import (
    build_parser,
    handle_at,
    handle_explain,
    handle_export,
    handle_find,
    handle_top,
)
from langrank.config import load_settings
from langrank.errors import ActionableError
from langrank.logging import configure_file_logging, set_level

if TYPE_CHECKING:
    from collections.abc import Sequence

_HANDLERS = {
    "top": handle_top,
    "at": handle_at,
    "explain": handle_explain,
    "find": handle_find,
    "export": handle_export,
}


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "find" and not args.query and not args.ext:
        parser.error("find requires a query or --ext")

    try:
        settings = load_settings(args.settings)
        set_level(settings.logging.level_number)
        if settings.logging.file_logging:
            configure_file_logging(
                settings.logging.log_dir, level=settings.logging.level_number
            )
        _HANDLERS[args.command](args, settings)
    except ActionableError as exc:
        print(f"Error: {exc.error}", file=sys.stderr)
        if exc.suggestion:
            print(f"  Suggestion: {exc.suggestion}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
