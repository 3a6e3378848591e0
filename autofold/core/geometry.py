"""Line interval geometry.

All ranges are closed intervals of 0-based line numbers: ``[start, end]``
includes both ends, so a single-line range has ``start == end``. The
predicates accept anything with ``start`` and ``end`` (``LineRange``,
``FoldingRange``).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol


class Interval(Protocol):
    """Anything exposing inclusive ``start``/``end`` lines."""

    @property
    def start(self) -> int: ...

    @property
    def end(self) -> int: ...


@dataclass(frozen=True, order=True)
class LineRange:
    """Inclusive range of lines.

    Attributes:
        start: First line (0-based).
        end: Last line (0-based, inclusive).
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"Line range start must be >= 0, got {self.start}")
        if self.end < self.start:
            raise ValueError(f"Line range end {self.end} is before start {self.start}")

    @property
    def line_count(self) -> int:
        """Number of lines covered, counting both ends."""
        return self.end - self.start + 1

    def __str__(self) -> str:
        return f"L{self.start}-{self.end}"


def contains(outer: Interval, inner: Interval) -> bool:
    """Whether ``inner`` lies entirely within ``outer`` (bounds inclusive)."""
    return outer.start <= inner.start and inner.end <= outer.end


def intersects(a: Interval, b: Interval) -> bool:
    """Whether the two ranges share at least one line."""
    return not (a.end < b.start or a.start > b.end)


def intersects_any(target: Interval, ranges: Iterable[Interval]) -> bool:
    """Whether ``target`` shares a line with any of ``ranges``."""
    return any(intersects(target, r) for r in ranges)


def contained_in_any(target: Interval, ranges: Iterable[Interval]) -> bool:
    """Whether one of ``ranges`` fully contains ``target``."""
    return any(contains(r, target) for r in ranges)


def expand(r: LineRange, lines: int) -> LineRange:
    """Grow ``r`` by ``lines`` on both sides, clamping the start at 0."""
    return LineRange(max(0, r.start - lines), r.end + lines)
