"""Drive one auto-fold pass for one editor.

A pass fetches the symbol outline (retrying while the language server is
still indexing), checks the editor is still the one the user is looking at,
plans folds and applies them, or falls back to the host's generic "fold level
2" when there is nothing better to do.

Cancellation is cooperative: the caller hands in an ``is_end`` predicate that
is checked before and after every suspension point (host call or delay). A
host call already in flight is never interrupted. Host fold commands act on
whatever editor has focus, so no command is issued once ``is_end`` is true.

``FoldOrchestrator.run`` never raises. Host failures are logged and treated
as "no result"; anything unexpected ends the pass quietly.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

from autofold.context.changes import collect_skip_ranges
from autofold.core.geometry import LineRange
from autofold.core.types import FoldingRange, Symbol
from autofold.folding.plan import FoldingContext, generate_folding_plan

if TYPE_CHECKING:
    from autofold.config.schema import Config
    from autofold.ide.host import EditorHost, EditorState

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FoldState(Enum):
    """Where a pass currently is."""

    IDLE = "idle"
    AWAITING_SYMBOLS = "awaiting_symbols"
    RETRY_1 = "retry_1"
    RETRY_2 = "retry_2"
    RETRY_3 = "retry_3"
    VALIDATING = "validating"
    PLANNING = "planning"
    APPLYING = "applying"
    FALLING_BACK = "falling_back"
    DONE = "done"
    CANCELLED = "cancelled"


_RETRY_STATES = (FoldState.RETRY_1, FoldState.RETRY_2, FoldState.RETRY_3)


class _PassCancelled(Exception):
    """Unwinds a pass once ``is_end`` reports true."""


def snap_fold_starts(
    plan: Sequence[FoldingRange],
    provider_ranges: Sequence[LineRange] | None,
) -> list[int]:
    """Lines to hand to the host fold command, bottom-to-top.

    The host folds the innermost region starting at a given line, and its
    regions may start where the body begins (e.g. an opening brace on the
    next line) rather than on the symbol's first line. Each planned range is
    mapped to a provider-reported start: an exact ``[start, end]`` match
    first, else the smallest provider start inside the planned range, else
    the planned start unchanged.
    """
    provider = list(provider_ranges or [])
    exact = {(r.start, r.end) for r in provider}
    lines: list[int] = []
    for fold in plan:
        if (fold.start, fold.end) in exact:
            lines.append(fold.start)
            continue
        inside = [r.start for r in provider if fold.start <= r.start <= fold.end]
        lines.append(min(inside) if inside else fold.start)
    # Bottom-to-top so earlier folds don't move later ones
    return list(dict.fromkeys(sorted(lines, reverse=True)))


class FoldOrchestrator:
    """Runs a single auto-fold pass against an `EditorHost`.

    One instance per pass: ``state`` and ``history`` describe that pass.
    """

    def __init__(self, host: EditorHost, config: Config) -> None:
        self._host = host
        self._config = config
        self._is_end: Callable[[], bool] = lambda: False
        self.state = FoldState.IDLE
        self.history: list[FoldState] = [FoldState.IDLE]
        self.plan: list[FoldingRange] = []

    async def run(
        self,
        editor: EditorState,
        is_end: Callable[[], bool],
        *,
        unfold_first: bool = False,
    ) -> FoldState:
        """Fold ``editor`` until done or ``is_end()`` turns true.

        Args:
            editor: The editor the pass targets.
            is_end: Cancellation predicate, polled around every suspension point.
            unfold_first: Clear existing folds before starting (explicit refold).

        Returns:
            DONE or CANCELLED.
        """
        self._is_end = is_end
        try:
            await self._run(editor, unfold_first)
        except _PassCancelled:
            self._enter(FoldState.CANCELLED)
        except Exception:
            logger.exception("Auto fold failed for %s", editor.display_name)
            self._enter(FoldState.DONE)
        return self.state

    async def _run(self, editor: EditorState, unfold_first: bool) -> None:
        if unfold_first:
            await self._host_call("unfold_all", self._host.unfold_all)

        folding = self._config.folding
        if editor.line_count < folding.min_lines:
            logger.debug("Skip short file: %s (%d lines)", editor.display_name, editor.line_count)
            self._enter(FoldState.DONE)
            return

        self._enter(FoldState.AWAITING_SYMBOLS)
        symbols = await self._fetch_symbols(editor)

        self._enter(FoldState.VALIDATING)
        active = await self._host_call("get_active_editor", self._host.get_active_editor)
        if active is None or not editor.same_editor(active):
            logger.debug("Editor changed, abort folding %s", editor.display_name)
            raise _PassCancelled
        if active.visible_range_count > 1:
            logger.debug("Skip folded file: %s", editor.display_name)
            self._enter(FoldState.DONE)
            return

        if not symbols:
            await self._fall_back("no symbols")
            return

        if folding.settle_delay > 0:
            await self._sleep(folding.settle_delay)

        self._enter(FoldState.PLANNING)
        self._checkpoint()
        skip_ranges = await collect_skip_ranges(self._host, active, self._config.skip)
        self._checkpoint()
        self.plan = generate_folding_plan(FoldingContext(
            symbols=symbols,
            visible_lines=active.line_count,
            target_lines=folding.target_lines,
            skip_ranges=skip_ranges,
            top_level_container_count=len(symbols),
            file_name=active.file_name or active.document_id,
        ))
        if not self.plan:
            logger.debug("No folding ranges generated")
            await self._fall_back("symbols folding failure")
            return

        await self._apply(active, self.plan)
        self._enter(FoldState.DONE)

    async def _fetch_symbols(self, editor: EditorState) -> list[Symbol] | None:
        """Get the outline, retrying with backoff while the host has none."""
        symbols = await self._host_call("get_symbols", self._host.get_symbols, editor)
        for attempt, delay in enumerate(self._config.folding.retry_delays):
            if symbols is not None:
                break
            self._enter(_RETRY_STATES[attempt])
            await self._sleep(delay)
            logger.debug("Retry %d to get symbols", attempt + 1)
            symbols = await self._host_call("get_symbols", self._host.get_symbols, editor)
        return symbols

    async def _apply(self, editor: EditorState, plan: list[FoldingRange]) -> None:
        self._enter(FoldState.APPLYING)
        provider_ranges = None
        if self._config.folding.snap_to_provider:
            provider_ranges = await self._host_call(
                "get_folding_ranges", self._host.get_folding_ranges, editor
            )
        lines = snap_fold_starts(plan, provider_ranges)
        await self._host_call("unfold_all", self._host.unfold_all)
        await self._host_call("fold_lines", self._host.fold_lines, lines)
        logger.debug("Completed folding %d ranges in %s", len(plan), editor.display_name)

    async def _fall_back(self, reason: str) -> None:
        self._enter(FoldState.FALLING_BACK)
        logger.info("Fallback: %s", reason)
        await self._host_call("fold_fallback", self._host.fold_fallback)
        self._enter(FoldState.DONE)

    async def _host_call(
        self,
        name: str,
        fn: Callable[..., Awaitable[T]],
        *args: Any,
    ) -> T | None:
        """Best-effort host call bracketed by cancellation checks."""
        self._checkpoint()
        try:
            result: T | None = await fn(*args)
        except Exception:
            logger.warning("Host call %s failed", name, exc_info=True)
            result = None
        self._checkpoint()
        return result

    async def _sleep(self, delay: float) -> None:
        self._checkpoint()
        await asyncio.sleep(delay)
        self._checkpoint()

    def _checkpoint(self) -> None:
        if self._is_end():
            raise _PassCancelled

    def _enter(self, state: FoldState) -> None:
        self.state = state
        self.history.append(state)
