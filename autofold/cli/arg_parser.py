"""Argument parsing for the autofold CLI."""

import argparse


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add --config, --cwd and --verbose to a subcommand parser."""
    parser.add_argument(
        "--config",
        help="Config file (default: ~/.autofold/config.json merged with ./.autofold/config.json)",
    )
    parser.add_argument(
        "--cwd",
        help="Workspace directory used to find the IDE (default: current directory)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logs on the console",
    )


def parse_skip_range(value: str) -> tuple[int, int]:
    """Parse ``A:B`` (0-based, inclusive) into a pair of lines."""
    start, sep, end = value.partition(":")
    try:
        first = int(start)
        last = int(end) if sep else first
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid line range: {value!r} (expected A:B)") from None
    if first < 0 or last < first:
        raise argparse.ArgumentTypeError(f"invalid line range: {value!r}")
    return first, last


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autofold",
        description="Fold source files down to their outline in a connected IDE",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Connect to the IDE and auto-fold files as they are opened",
    )
    add_common_args(serve_parser)

    plan_parser = subparsers.add_parser(
        "plan",
        help="Compute a folding plan offline from a symbol snapshot",
        description=(
            "FILE holds a JSON outline: [[name, kind, start, end, children], ...]. "
            "Lines are 0-based."
        ),
    )
    plan_parser.add_argument("file", help="JSON symbol snapshot ('-' for stdin)")
    plan_parser.add_argument(
        "--lines",
        type=int,
        required=True,
        help="Number of lines in the document",
    )
    plan_parser.add_argument(
        "--target",
        type=int,
        help="Target number of visible lines (default: from config)",
    )
    plan_parser.add_argument(
        "--skip",
        type=parse_skip_range,
        action="append",
        default=[],
        metavar="A:B",
        help="Line range that must stay expanded (repeatable)",
    )
    plan_parser.add_argument(
        "--name",
        help="Document file name, used by the test-file heuristic (default: FILE)",
    )
    plan_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the plan as JSON",
    )
    add_common_args(plan_parser)

    refold_parser = subparsers.add_parser(
        "refold",
        help="Unfold and fold the IDE's active editor again",
    )
    add_common_args(refold_parser)

    debug_parser = subparsers.add_parser(
        "debug-symbols",
        help="Copy a planner test fixture for the active editor to the clipboard",
    )
    add_common_args(debug_parser)

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    return build_parser().parse_args(argv)
