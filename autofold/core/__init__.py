"""Core types, geometry and shared infrastructure."""

from autofold.core.cancel import CancellationToken
from autofold.core.errors import AutoFoldError, ConfigError, HostError, LoadError
from autofold.core.geometry import LineRange, contains, intersects
from autofold.core.types import FoldingRange, FoldingRangeKind, Symbol, SymbolKind

__all__ = [
    "AutoFoldError",
    "CancellationToken",
    "ConfigError",
    "FoldingRange",
    "FoldingRangeKind",
    "HostError",
    "LineRange",
    "LoadError",
    "Symbol",
    "SymbolKind",
    "contains",
    "intersects",
]
