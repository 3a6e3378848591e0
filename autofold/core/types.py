"""Core types: symbols from the outline provider and planned folds."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from autofold.core.geometry import LineRange

# LSP SymbolKind numbers (1-based) for the kinds the planner distinguishes.
_LSP_KINDS: dict[int, str] = {
    2: "Module",
    3: "Namespace",
    5: "Class",
    6: "Method",
    7: "Property",
    8: "Field",
    9: "Constructor",
    10: "Enum",
    11: "Interface",
    12: "Function",
    13: "Variable",
    14: "Constant",
    18: "Array",
    19: "Object",
    23: "Struct",
}


class SymbolKind(str, Enum):
    """Structural kind of a symbol, as far as folding cares."""

    FUNCTION = "Function"
    METHOD = "Method"
    CONSTRUCTOR = "Constructor"
    CLASS = "Class"
    STRUCT = "Struct"
    NAMESPACE = "Namespace"
    MODULE = "Module"
    INTERFACE = "Interface"
    ENUM = "Enum"
    VARIABLE = "Variable"
    CONSTANT = "Constant"
    OBJECT = "Object"
    ARRAY = "Array"
    FIELD = "Field"
    PROPERTY = "Property"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: str | int | SymbolKind) -> SymbolKind:
        """Map a host-reported kind to a SymbolKind.

        Accepts kind names in any case ("Function", "function") and LSP
        numeric kinds. Anything unrecognised becomes OTHER.
        """
        if isinstance(value, SymbolKind):
            return value
        if isinstance(value, int):
            name = _LSP_KINDS.get(value)
            return cls(name) if name else cls.OTHER
        for kind in cls:
            if kind.value.lower() == str(value).lower():
                return kind
        return cls.OTHER


@dataclass(frozen=True)
class Symbol:
    """A structural region of source code reported by the outline provider.

    Attributes:
        name: Display name (informational, also used by the test-file heuristic).
        kind: Structural kind.
        range: Lines the symbol spans (inclusive).
        children: Nested symbols in source order.
    """

    name: str
    kind: SymbolKind
    range: LineRange
    children: tuple[Symbol, ...] = ()

    @property
    def start(self) -> int:
        return self.range.start

    @property
    def end(self) -> int:
        return self.range.end

    @property
    def size(self) -> int:
        """Inclusive line count (a single-line symbol has size 1)."""
        return self.range.line_count

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Symbol:
        """Create from the host's JSON representation.

        Expected shape::

            {"name": "run", "kind": "Method", "startLine": 10, "endLine": 20,
             "children": [...]}
        """
        return cls(
            name=data.get("name", ""),
            kind=SymbolKind.parse(data.get("kind", "Other")),
            range=LineRange(int(data["startLine"]), int(data["endLine"])),
            children=tuple(cls.from_dict(c) for c in data.get("children") or []),
        )


class FoldingRangeKind(str, Enum):
    """Tag the host uses to tell folding ranges apart."""

    REGION = "region"


@dataclass(frozen=True)
class FoldingRange:
    """A range the planner decided to collapse."""

    start: int
    end: int
    kind: FoldingRangeKind = field(default=FoldingRangeKind.REGION)

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"Folding range end {self.end} is before start {self.start}")

    @classmethod
    def for_symbol(cls, symbol: Symbol) -> FoldingRange:
        return cls(symbol.start, symbol.end)

    def as_pair(self) -> tuple[int, int]:
        return (self.start, self.end)

    def __str__(self) -> str:
        return f"<FoldingRange L{self.start}-{self.end}>"
