"""Command-line entry point for common-middleware.

Usage:
    common-middleware escape <file>
    common-middleware unescape <file> [--strip]
    common-middleware process <files...> --out <dir> [--config <path>] [--dry-run]
"""

import argparse
import logging
import sys

from common_middleware.cli.process import cmd_process
from common_middleware.cli.transform import cmd_escape, cmd_unescape


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="common-middleware",
        description="Front-matter, delimiter escaping, and JSON views for build pipelines",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command")

    esc = sub.add_parser("escape", help="Print a file with escaped delimiters replaced by sentinels")
    esc.add_argument("file")

    unesc = sub.add_parser("unescape", help="Print a file with sentinels restored")
    unesc.add_argument("file")
    unesc.add_argument(
        "--strip", action="store_true",
        help="Remove one level of escaping ({%%%%= becomes {%%=)",
    )

    proc = sub.add_parser("process", help="Run files through the load, post-render and pre-write handlers")
    proc.add_argument("files", nargs="+")
    proc.add_argument(
        "--config", default=None,
        help="YAML options file (default: $COMMON_MIDDLEWARE_CONFIG)",
    )
    proc.add_argument(
        "--out", required=True,
        help="Directory to write results to",
    )
    proc.add_argument(
        "--dry-run", action="store_true",
        help="Report changes without writing",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not args.command:
        parser.print_help()
        return 0

    dispatch = {
        "escape": cmd_escape,
        "unescape": cmd_unescape,
        "process": cmd_process,
    }
    return dispatch[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
