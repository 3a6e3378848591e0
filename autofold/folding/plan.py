"""Greedy, depth-aware folding planner.

Given a file's symbol outline and a visible-line budget, pick the symbols to
collapse. Candidates are visited deepest first and, within a depth, largest
first: collapsing nested bodies saves the most lines while the outer skeleton
(classes, modules) stays readable. Shallow containers are folded only when
nothing else gets the file under budget.

Folding a symbol also accounts for what was already collapsed inside it, so
the running estimate of visible lines never double-counts.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from autofold.core.geometry import LineRange, contained_in_any, contains, intersects_any
from autofold.core.types import FoldingRange, Symbol
from autofold.folding.flatten import SymbolWithDepth, flatten_symbols
from autofold.folding.rules import is_test_file, should_fold

logger = logging.getLogger(__name__)


@dataclass
class FoldingContext:
    """Working state for a single planning pass.

    The planner mutates ``visible_lines`` and ``folded_ranges``; treat the
    context as consumed once ``generate_folding_plan`` returns.

    Attributes:
        symbols: Symbol forest to consider (top level in source order).
        visible_lines: Current estimate of visible lines.
        target_lines: Visible-line budget to reach.
        folded_ranges: Ranges committed so far in this pass.
        skip_ranges: Lines that must stay expanded (selections, recent edits).
        top_level_container_count: Number of top-level symbols.
        file_name: File path or name, used for the test-file heuristic.
    """

    symbols: Sequence[Symbol]
    visible_lines: int
    target_lines: int
    folded_ranges: list[FoldingRange] = field(default_factory=list)
    skip_ranges: Sequence[LineRange] = ()
    top_level_container_count: int = 0
    file_name: str = ""

    @property
    def budget(self) -> int:
        """Lines still to gain; negative while over target."""
        return self.target_lines - self.visible_lines

    @property
    def within_target(self) -> bool:
        return self.visible_lines <= self.target_lines


def calculate_saved_lines(symbol: Symbol, already_folded: Sequence[FoldingRange]) -> int:
    """Lines that disappear when ``symbol`` is collapsed.

    Folds already committed inside the symbol show only their marker line, so
    they contribute 1 line instead of their full height.
    """
    visible = symbol.size
    for fold in already_folded:
        if contains(symbol, fold):
            visible -= fold.end - fold.start
    # The collapsed symbol keeps one marker line
    return max(0, visible - 1)


def _order_candidates(entries: list[SymbolWithDepth]) -> list[SymbolWithDepth]:
    """Deepest first, then largest first. Stable for equal keys."""
    return sorted(entries, key=lambda e: (-e.depth, -e.span))


def generate_folding_plan(context: FoldingContext) -> list[FoldingRange]:
    """Choose which symbols to collapse so the file fits ``target_lines``.

    Returns:
        Ranges to fold, ascending by start line. Empty when the file already
        fits or nothing qualifies.
    """
    if context.within_target:
        logger.debug("File already within target lines, no folding needed")
        return []

    candidates = _order_candidates(flatten_symbols(context.symbols))
    test_file = is_test_file(context.file_name)
    plan: list[FoldingRange] = []

    for entry in candidates:
        if context.within_target:
            break

        symbol = entry.symbol
        # Parent already collapsed: folding inside it changes nothing
        if contained_in_any(symbol, context.folded_ranges):
            continue
        if intersects_any(symbol, context.skip_ranges):
            logger.debug("%s in skip ranges", symbol.name)
            continue
        if not should_fold(
            symbol,
            context.budget,
            context.top_level_container_count,
            test_file,
        ):
            continue

        fold = FoldingRange.for_symbol(symbol)
        saved = calculate_saved_lines(symbol, context.folded_ranges)
        plan.append(fold)
        context.folded_ranges.append(fold)
        context.visible_lines -= saved
        logger.debug(
            "Folding %s (%s), saved %d lines, remaining: %d",
            symbol.name,
            symbol.kind.value,
            saved,
            context.visible_lines,
        )

    plan.sort(key=lambda r: r.start)
    logger.debug(
        "Generated %d folding ranges %s, estimated visible lines: %d",
        len(plan),
        [str(r) for r in plan],
        context.visible_lines,
    )
    return plan
