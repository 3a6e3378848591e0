"""Folding plan: flatten the outline, apply the rules, pick ranges."""

from autofold.folding.flatten import SymbolWithDepth, flatten_symbols
from autofold.folding.plan import FoldingContext, calculate_saved_lines, generate_folding_plan
from autofold.folding.rules import is_test_file, should_fold
from autofold.folding.snapshot import render_fixture, symbols_from_literal

__all__ = [
    "FoldingContext",
    "SymbolWithDepth",
    "calculate_saved_lines",
    "flatten_symbols",
    "generate_folding_plan",
    "is_test_file",
    "render_fixture",
    "should_fold",
    "symbols_from_literal",
]
