"""Per-symbol folding decisions.

``budget`` is ``target_lines - visible_lines``: strongly negative while the
file is far over target, rising toward 0 as folds accumulate. The smaller it
is, the more readily a symbol folds. Thresholds are tuned against real files
and must not drift.
"""

from __future__ import annotations

import re

from autofold.core.types import Symbol, SymbolKind

_TEST_FILE_PATTERNS = (
    re.compile(r"\.test\."),
    re.compile(r"\.spec\."),
    re.compile(r"test", re.IGNORECASE),
    re.compile(r"spec", re.IGNORECASE),
    re.compile(r"__tests__"),
    re.compile(r"\.stories\."),
)

_CALLABLE_KINDS = frozenset({SymbolKind.FUNCTION, SymbolKind.METHOD, SymbolKind.CONSTRUCTOR})
_TYPE_KINDS = frozenset({SymbolKind.CLASS, SymbolKind.STRUCT})
_SCOPE_KINDS = frozenset({SymbolKind.NAMESPACE, SymbolKind.MODULE})
_DECLARATION_KINDS = frozenset({SymbolKind.INTERFACE, SymbolKind.ENUM})
_VALUE_KINDS = frozenset({
    SymbolKind.VARIABLE,
    SymbolKind.CONSTANT,
    SymbolKind.OBJECT,
    SymbolKind.ARRAY,
})
_MEMBER_KINDS = frozenset({SymbolKind.FIELD, SymbolKind.PROPERTY})


def is_test_file(file_name: str) -> bool:
    """Whether the file looks like a test, spec or story file."""
    return any(pattern.search(file_name) for pattern in _TEST_FILE_PATTERNS)


def should_fold_kind(symbol: Symbol, budget: int, top_level_container_count: int) -> bool:
    """Kind-specific rule for regular source files."""
    size = symbol.size
    kind = symbol.kind

    if kind in _CALLABLE_KINDS:
        return size > (2 if budget < 20 else 3)
    if kind in _TYPE_KINDS:
        # Classes stay open unless the file is a long list of them
        return top_level_container_count > 5 and budget < 10
    if kind in _SCOPE_KINDS:
        return top_level_container_count > 5 and size > 15 and budget < 20
    if kind in _DECLARATION_KINDS:
        return size > 3 or budget < 30
    if kind in _VALUE_KINDS:
        return size > (5 if budget < 20 else 10)
    if kind in _MEMBER_KINDS:
        # Single-line members never fold
        return size > 1 and (size > 8 or budget < 15)
    return size > 5


def should_fold_test_symbol(symbol: Symbol, budget: int) -> bool:
    """Rule for symbols in test files: keep suites open, fold cases."""
    name = symbol.name
    if "describe" in name:
        return False
    if "it" in name or "test" in name:
        return True if budget < 30 else symbol.end - symbol.start > 5
    return symbol.size > (3 if budget < 20 else 5)


def should_fold(
    symbol: Symbol,
    budget: int,
    top_level_container_count: int,
    test_file: bool,
) -> bool:
    """Decide whether ``symbol`` is worth collapsing at the current budget."""
    if test_file:
        return should_fold_test_symbol(symbol, budget)
    return should_fold_kind(symbol, budget, top_level_container_count)
