"""Editor context that constrains folding (changed lines, diagnostics)."""

from autofold.context.changes import collect_skip_ranges, get_uncommitted_changes, parse_diff_hunks

__all__ = ["collect_skip_ranges", "get_uncommitted_changes", "parse_diff_hunks"]
