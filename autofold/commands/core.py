"""User command implementations.

Each command reports its outcome to the user through the host's message
popups and also returns a CommandOutput, so the CLI can print it and set the
exit code.

Example:
    from autofold.commands import cmd_debug_symbols

    output = await cmd_debug_symbols(connection, config)
    if output.data:
        print(output.data["snapshot"])
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from autofold.commands.protocol import CommandOutput
from autofold.folding.plan import FoldingContext, generate_folding_plan
from autofold.folding.snapshot import render_fixture

if TYPE_CHECKING:
    from autofold.config.schema import Config
    from autofold.engine.task import TaskManager
    from autofold.ide.host import EditorHost

logger = logging.getLogger(__name__)

NO_EDITOR_MESSAGE = "No active editor found"


async def _report_failure(host: EditorHost, message: str) -> CommandOutput:
    try:
        await host.show_message("error", message)
    except Exception:
        logger.debug("Failed to show error message", exc_info=True)
    return CommandOutput.error(message)


async def cmd_refold(manager: TaskManager) -> CommandOutput:
    """Unfold the active editor and run a fresh auto-fold pass on it.

    The document is folded even if it was folded before.

    Args:
        manager: Task manager owning the host connection.

    Returns:
        CommandOutput with the refolded document in data, or ERROR when no
        editor is active or the host call fails.
    """
    try:
        refolded = await manager.refold_current()
        if not refolded:
            await manager.host.show_message("warning", NO_EDITOR_MESSAGE)
            return CommandOutput.error(NO_EDITOR_MESSAGE)
    except Exception as e:
        logger.warning("Refold failed", exc_info=True)
        return await _report_failure(manager.host, f"Refold failed: {e}")

    editor = manager.active_editor
    document = editor.document_id if editor else None
    return CommandOutput.success(
        message=f"Refolded {editor.display_name}" if editor else "Refolded",
        data={"document": document},
    )


async def cmd_debug_symbols(host: EditorHost, config: Config) -> CommandOutput:
    """Copy a test fixture for the active editor's outline to the clipboard.

    The fixture holds the outline as a symbol literal followed by a
    ``check(...)`` call carrying the file name, line count, selections and
    the plan computed for them, ready to paste into a planner test.

    Args:
        host: The editor host.
        config: Configuration (the fold target is read from it).

    Returns:
        CommandOutput with the snapshot text in data on success.
    """
    try:
        editor = await host.get_active_editor()
        if editor is None:
            await host.show_message("warning", NO_EDITOR_MESSAGE)
            return CommandOutput.error(NO_EDITOR_MESSAGE)

        symbols = await host.get_symbols(editor)
        if not symbols:
            message = "No symbols found in current document"
            await host.show_message("info", message)
            return CommandOutput.success(message=message)

        file_name = os.path.basename(editor.file_name) or "unknown.ts"
        skip_ranges = list(editor.selections)
        plan = generate_folding_plan(FoldingContext(
            symbols=symbols,
            visible_lines=editor.line_count,
            target_lines=config.folding.target_lines,
            skip_ranges=skip_ranges,
            top_level_container_count=len(symbols),
            file_name=editor.file_name,
        ))
        snapshot = render_fixture(file_name, editor.line_count, symbols, skip_ranges, plan)

        await host.write_clipboard(snapshot)
        message = "Symbols exported to clipboard"
        await host.show_message("info", message)
        return CommandOutput.success(message=message, data={"snapshot": snapshot})
    except Exception as e:
        logger.warning("Failed to export symbols", exc_info=True)
        return await _report_failure(host, f"Failed to export symbols: {e}")
