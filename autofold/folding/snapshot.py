"""Symbol snapshots in the compact fixture format.

A snapshot symbol is ``[name, kind, start, end, children]``. The debug
export renders an outline plus its computed plan as a ready-to-paste test
case::

    const symbols: UTSymbol[] = [
      ['Manager', SymbolKind.Class, 13, 116, [
        ['m1', SymbolKind.Method, 33, 41, []]
      ]]
    ];
    check('manager.ts', 120, symbols, [], [
      [33, 41],
    ]);

The same nested-list shape (as JSON) is what ``autofold plan`` reads.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from autofold.core.errors import LoadError
from autofold.core.geometry import LineRange
from autofold.core.types import FoldingRange, Symbol, SymbolKind

_KIND_PREFIX = "SymbolKind."


def symbols_to_literal(symbols: Sequence[Symbol], indent: int = 1) -> str:
    """Render symbols as nested ``[name, kind, start, end, children]`` literals."""
    pad = "  " * indent
    items = []
    for symbol in symbols:
        item = (
            f"{pad}['{symbol.name}', {_KIND_PREFIX}{symbol.kind.value}, "
            f"{symbol.start}, {symbol.end}, "
        )
        if symbol.children:
            item += "[\n" + symbols_to_literal(symbol.children, indent + 1) + f"{pad}]"
        else:
            item += "[]"
        items.append(item + "]")
    return ",\n".join(items) + ("" if indent == 1 else "\n")


def render_fixture(
    file_name: str,
    line_count: int,
    symbols: Sequence[Symbol],
    skip_ranges: Sequence[LineRange],
    plan: Sequence[FoldingRange],
) -> str:
    """Render a complete ``check(...)`` fixture for the given outline and plan."""
    skips = ", ".join(f"[{r.start}, {r.end}]" for r in skip_ranges)
    folds = ""
    if plan:
        folds = "\n  " + ",\n  ".join(f"[{r.start}, {r.end}]" for r in plan) + ",\n"
    return (
        "\nconst symbols: UTSymbol[] = [\n"
        f"  {symbols_to_literal(symbols)}\n"
        "];\n"
        f"check('{file_name}', {line_count}, symbols, [{skips}], [{folds}]);\n"
    )


def symbol_from_literal(item: Sequence[Any]) -> Symbol:
    """Build a Symbol from one ``[name, kind, start, end, children]`` entry.

    Raises:
        LoadError: If the entry does not have the expected shape.
    """
    if not isinstance(item, (list, tuple)) or len(item) != 5:
        raise LoadError(f"Expected [name, kind, start, end, children], got {item!r}")
    name, kind, start, end, children = item
    if isinstance(kind, str) and kind.startswith(_KIND_PREFIX):
        kind = kind[len(_KIND_PREFIX):]
    try:
        line_range = LineRange(int(start), int(end))
    except (TypeError, ValueError) as e:
        raise LoadError(f"Invalid line range for symbol {name!r}: {e}") from e
    if children is not None and not isinstance(children, (list, tuple)):
        raise LoadError(
            f"Children of symbol {name!r} must be a list, got {type(children).__name__}"
        )
    return Symbol(
        name=str(name),
        kind=SymbolKind.parse(kind),
        range=line_range,
        children=tuple(symbol_from_literal(child) for child in children or []),
    )


def symbols_from_literal(items: Sequence[Any]) -> list[Symbol]:
    """Build a symbol forest from a list of snapshot entries."""
    if not isinstance(items, (list, tuple)):
        raise LoadError(f"Expected a list of symbols, got {type(items).__name__}")
    return [symbol_from_literal(item) for item in items]
