"""Flatten a symbol forest into a depth-annotated list."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from autofold.core.types import Symbol


@dataclass(eq=False)
class SymbolWithDepth:
    """A symbol plus its nesting depth.

    ``parent`` points at the enclosing entry (None at top level). It is only
    used for lookups; the planner never walks back up through it.
    """

    symbol: Symbol
    depth: int
    parent: SymbolWithDepth | None = None

    @property
    def span(self) -> int:
        return self.symbol.end - self.symbol.start


def flatten_symbols(symbols: Sequence[Symbol]) -> list[SymbolWithDepth]:
    """Depth-first, pre-order flattening of ``symbols``.

    Output order matches source order: each symbol is followed by its
    descendants, then by its next sibling.
    """
    result: list[SymbolWithDepth] = []
    stack: list[tuple[Symbol, int, SymbolWithDepth | None]] = [
        (symbol, 0, None) for symbol in reversed(symbols)
    ]
    while stack:
        symbol, depth, parent = stack.pop()
        entry = SymbolWithDepth(symbol=symbol, depth=depth, parent=parent)
        result.append(entry)
        for child in reversed(symbol.children):
            stack.append((child, depth + 1, entry))
    return result
