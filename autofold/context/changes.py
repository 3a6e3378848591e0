"""Line ranges that must stay expanded besides the user's selections.

Lines with uncommitted changes are what the user is working on, so folding
them away is unhelpful. Same for lines carrying diagnostics, when enabled.
"""

from __future__ import annotations

import asyncio
import logging
import re
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING

from autofold.core.geometry import LineRange, expand

if TYPE_CHECKING:
    from autofold.config.schema import SkipConfig
    from autofold.ide.host import EditorHost, EditorState

logger = logging.getLogger(__name__)

# Timeout for the git subprocess call (seconds)
_GIT_TIMEOUT = 5

# @@ -old_start[,old_count] +new_start[,new_count] @@
_HUNK_HEADER = re.compile(r"^@@ -\d+(?:,\d+)? \+(\d+)(?:,(\d+))? @@")


def _run_git(args: list[str], cwd: str | Path) -> str | None:
    """Run a git command and return stdout, or None on any failure."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=_GIT_TIMEOUT,
            encoding="utf-8",
            errors="replace",
        )
    except (OSError, subprocess.TimeoutExpired, ValueError):
        return None
    if result.returncode != 0:
        if result.stderr:
            logger.debug("git %s failed: %s", " ".join(args), result.stderr.strip())
        return None
    return result.stdout


def parse_diff_hunks(diff: str) -> list[LineRange]:
    """Convert ``git diff --unified=0`` hunk headers to 0-based line ranges.

    Pure deletions (new count 0) mark the line where the deletion happened.
    """
    ranges: list[LineRange] = []
    for line in diff.splitlines():
        match = _HUNK_HEADER.match(line)
        if not match:
            continue
        start_line = int(match.group(1))
        count = int(match.group(2)) if match.group(2) is not None else 1
        if count == 0:
            at = max(0, start_line - 1)
            ranges.append(LineRange(at, at))
        else:
            ranges.append(LineRange(max(0, start_line - 1), max(0, start_line + count - 2)))
    return ranges


def get_uncommitted_changes(file_name: str) -> list[LineRange]:
    """Lines of ``file_name`` that differ from HEAD. [] outside a git repo."""
    path = Path(file_name)
    if not path.name or not path.parent.is_dir():
        return []
    output = _run_git(["diff", "--unified=0", "HEAD", "--", path.name], cwd=path.parent)
    if not output:
        return []
    return parse_diff_hunks(output)


async def collect_skip_ranges(
    host: EditorHost,
    editor: EditorState,
    config: SkipConfig,
) -> list[LineRange]:
    """Selections plus the optional change/diagnostic ranges for ``editor``.

    Never raises: a failing source simply contributes nothing.
    """
    ranges = list(editor.selections)

    changes = config.uncommitted_changes
    if changes.enable and editor.file_name:
        try:
            changed = await asyncio.to_thread(get_uncommitted_changes, editor.file_name)
        except Exception:
            logger.debug("Failed to read uncommitted changes", exc_info=True)
            changed = []
        ranges.extend(expand(r, changes.context_lines) for r in changed)
        if changed:
            logger.debug("Found %d changed hunks in %s", len(changed), editor.display_name)

    if config.diagnostics:
        try:
            ranges.extend(await host.get_diagnostics(editor))
        except Exception:
            logger.debug("Failed to get diagnostics", exc_info=True)

    return ranges
