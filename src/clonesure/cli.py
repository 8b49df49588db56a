"""Command-line interface.

Provides the `clonesure` command: reads one closure literal from a file, the
command line or stdin and prints its expansion.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from clonesure.errors import ClosureSyntaxError
from clonesure.expander import expand
from clonesure.options import ExpandOptions, load_options

logger = logging.getLogger(__name__)


def setup_logging(verbosity: int) -> None:
    """Configure root logging for the command line."""
    level = logging.DEBUG if verbosity > 0 else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def resolve_options(args: argparse.Namespace) -> ExpandOptions:
    """Combine the config file with command-line overrides."""
    options = load_options(args.config) if args.config else ExpandOptions()
    overrides = {}
    if args.indent is not None:
        overrides["indent"] = args.indent
    if args.inline:
        overrides["inline"] = True
    if args.qualified_clone:
        overrides["qualified_clone"] = True
    return dataclasses.replace(options, **overrides)


def read_source(args: argparse.Namespace) -> tuple[str, str]:
    """Return (display name, closure text) for the selected input."""
    if args.expr is not None:
        return "<expr>", args.expr
    if args.file and args.file != "-":
        return args.file, Path(args.file).read_text()
    return "<stdin>", sys.stdin.read()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="clonesure",
        description="Expand a closure literal with @/@mut capture markers",
    )
    inputs = parser.add_mutually_exclusive_group()
    inputs.add_argument(
        "file",
        nargs="?",
        help="File holding one closure literal (default: stdin)",
    )
    inputs.add_argument(
        "-e",
        "--expr",
        help="Closure literal given on the command line",
    )
    parser.add_argument(
        "--config",
        help="Path to a YAML options file",
    )
    parser.add_argument(
        "--indent",
        type=int,
        help="Spaces per indentation level (default: 2)",
    )
    parser.add_argument(
        "--inline",
        action="store_true",
        help="Emit the expansion on a single line",
    )
    parser.add_argument(
        "--qualified-clone",
        action="store_true",
        help="Emit ::core::clone::Clone::clone(&x) instead of x.clone()",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log parser and generator decisions to stderr",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        options = resolve_options(args)
    except (OSError, ValueError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 2

    try:
        name, source = read_source(args)
    except OSError as e:
        print(f"Error: cannot read {args.file}: {e}", file=sys.stderr)
        return 2

    try:
        print(expand(source, options))
    except ClosureSyntaxError as e:
        print(e.render(name), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
