"""CLI command handlers.

Each handler prints its result and returns a process exit code (0 success,
1 error). Results go to stdout, errors and progress to stderr.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

from rich.table import Table

from autofold.commands import CommandOutput, cmd_debug_symbols, cmd_refold
from autofold.config.load_utils import load_json
from autofold.config.schema import Config
from autofold.core.errors import AutoFoldError, LoadError
from autofold.core.geometry import LineRange
from autofold.display import get_console
from autofold.engine.task import TaskManager
from autofold.folding.plan import FoldingContext, generate_folding_plan
from autofold.folding.snapshot import symbols_from_literal
from autofold.ide.bridge import IDEBridge
from autofold.ide.connection import IDEConnection

logger = logging.getLogger(__name__)


def _print_json(data: Any) -> None:
    """Print data as formatted JSON to stdout."""
    print(json.dumps(data, indent=2))


def _print_error(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)


def _read_snapshot(file: str) -> list[Any]:
    if file == "-":
        try:
            data = json.load(sys.stdin)
        except json.JSONDecodeError as e:
            raise LoadError(f"snapshot: Invalid JSON on stdin: {e}") from e
    else:
        data = load_json(Path(file), error_context="snapshot")
    if not isinstance(data, list):
        raise LoadError(f"Expected a JSON array of symbols in {file}")
    return data


def cmd_plan(
    file: str,
    lines: int,
    config: Config,
    *,
    target: int | None = None,
    skip: list[tuple[int, int]] | None = None,
    name: str | None = None,
    as_json: bool = False,
) -> int:
    """Compute and print the folding plan for a symbol snapshot."""
    try:
        symbols = symbols_from_literal(_read_snapshot(file))
        skip_ranges = [LineRange(start, end) for start, end in skip or []]
    except (AutoFoldError, ValueError) as e:
        _print_error(str(e))
        return 1

    target_lines = target if target is not None else config.folding.target_lines
    file_name = name or file
    plan = generate_folding_plan(FoldingContext(
        symbols=symbols,
        visible_lines=lines,
        target_lines=target_lines,
        skip_ranges=skip_ranges,
        top_level_container_count=len(symbols),
        file_name=file_name,
    ))

    if as_json:
        _print_json({
            "file": file_name,
            "lines": lines,
            "target": target_lines,
            "folds": [list(r.as_pair()) for r in plan],
        })
        return 0

    console = get_console()
    if not plan:
        console.print(f"[dim]Nothing to fold in {file_name} ({lines} lines)[/dim]")
        return 0
    table = Table(title=f"{file_name}: {lines} lines, target {target_lines}")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Lines", justify="right")
    for r in plan:
        table.add_row(str(r.start), str(r.end), str(r.end - r.start + 1))
    console.print(table)
    return 0


async def connect_ide(bridge: IDEBridge, cwd: Path) -> IDEConnection | None:
    try:
        connection = await bridge.auto_connect(cwd)
    except Exception as e:
        _print_error(f"Failed to connect to IDE: {e}")
        return None
    if connection is None:
        _print_error(f"No IDE found for {cwd}")
    return connection


def _report(output: CommandOutput) -> int:
    if output.ok:
        if output.message:
            get_console().print(output.message)
        return 0
    _print_error(output.message or "Command failed")
    return 1


async def cmd_refold_remote(config: Config, cwd: Path) -> int:
    """Refold the active editor of the IDE serving ``cwd``."""
    bridge = IDEBridge(config.ide)
    connection = await connect_ide(bridge, cwd)
    if connection is None:
        return 1
    manager = TaskManager(connection, config)
    try:
        return _report(await cmd_refold(manager))
    finally:
        await manager.stop()
        await bridge.disconnect()


async def cmd_debug_symbols_remote(config: Config, cwd: Path) -> int:
    """Export a fixture for the active editor of the IDE serving ``cwd``."""
    bridge = IDEBridge(config.ide)
    connection = await connect_ide(bridge, cwd)
    if connection is None:
        return 1
    try:
        return _report(await cmd_debug_symbols(connection, config))
    finally:
        await bridge.disconnect()
