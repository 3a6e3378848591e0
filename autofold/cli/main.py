"""Entry point for the autofold CLI."""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from pathlib import Path

from autofold.cli.arg_parser import build_parser
from autofold.cli.logging_setup import configure_logging
from autofold.config.loader import load_config
from autofold.config.schema import Config
from autofold.core.constants import get_log_dir
from autofold.core.errors import ConfigError


def _setup_logging(config: Config, verbose: bool) -> Path:
    log_dir = Path(config.logging.log_dir) if config.logging.log_dir else get_log_dir()
    console_level = logging.DEBUG if verbose else logging.getLevelName(config.logging.console_level)
    return configure_logging(
        log_dir,
        level=logging.getLevelName(config.logging.level),
        console_level=console_level,
    )


def main(argv: list[str] | None = None) -> None:
    """Entry point for the autofold CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help(sys.stderr)
        raise SystemExit(1)

    cwd = Path(args.cwd or os.getcwd()).resolve()
    try:
        config = load_config(Path(args.config) if args.config else None, cwd=cwd)
    except ConfigError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        raise SystemExit(1) from None

    log_file = _setup_logging(config, args.verbose)

    # Import here so --help stays fast
    from autofold.cli.commands import cmd_debug_symbols_remote, cmd_plan, cmd_refold_remote
    from autofold.cli.serve import run_serve

    try:
        if args.command == "plan":
            exit_code = cmd_plan(
                args.file,
                args.lines,
                config,
                target=args.target,
                skip=args.skip,
                name=args.name,
                as_json=args.json,
            )
        elif args.command == "serve":
            exit_code = asyncio.run(run_serve(config, cwd, log_file))
        elif args.command == "refold":
            exit_code = asyncio.run(cmd_refold_remote(config, cwd))
        elif args.command == "debug-symbols":
            exit_code = asyncio.run(cmd_debug_symbols_remote(config, cwd))
        else:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            exit_code = 1
    except KeyboardInterrupt:
        exit_code = 0
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
