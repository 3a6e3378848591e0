"""Process-wide coordination of auto-fold passes.

`TaskManager` tracks the active editor and runs at most one `FoldTask` at a
time. Switching editor cancels the running task before a new one starts.
Documents that were folded successfully are remembered so that refocusing
them does not fold again; closing a document forgets it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import TYPE_CHECKING, Any

from autofold.core.cancel import CancellationToken
from autofold.engine.orchestrator import FoldOrchestrator, FoldState

if TYPE_CHECKING:
    from autofold.config.schema import Config
    from autofold.ide.host import EditorHost, EditorState

logger = logging.getLogger(__name__)


class FoldTask:
    """One auto-fold pass for one editor."""

    def __init__(
        self,
        editor: EditorState,
        orchestrator: FoldOrchestrator,
        *,
        unfold_first: bool = False,
    ) -> None:
        self.editor = editor
        self.token = CancellationToken()
        self._orchestrator = orchestrator
        self._unfold_first = unfold_first

    def __str__(self) -> str:
        return f"<AutoFoldTask: {self.editor.display_name}>"

    @property
    def cancelled(self) -> bool:
        return self.token.is_cancelled

    def cancel(self) -> None:
        if self.token.is_cancelled:
            return
        self.token.cancel()
        logger.info("%s cancelled", self)

    async def run(self, is_end: Callable[[], bool] | None = None) -> FoldState:
        """Run the pass. ``is_end`` defaults to this task's own token."""
        logger.debug("Running %s...", self)
        state = await self._orchestrator.run(
            self.editor,
            is_end or self.token.is_end,
            unfold_first=self._unfold_first,
        )
        logger.info("%s completed: %s", self, state.value)
        return state


class TaskManager:
    """Single-flight scheduler for auto-fold passes.

    Construct one per host connection, call `start()` once the event loop is
    running and `stop()` before disconnecting.
    """

    def __init__(self, host: EditorHost, config: Config) -> None:
        self._host = host
        self._config = config
        self._active_editor: EditorState | None = None
        self._current_task: FoldTask | None = None
        self._current_future: asyncio.Task[None] | None = None
        self._processed_files: set[str] = set()
        self._pending_lookup: asyncio.Task[None] | None = None
        self._background: set[asyncio.Task[None]] = set()
        self._running = False

    @property
    def host(self) -> EditorHost:
        return self._host

    @property
    def active_editor(self) -> EditorState | None:
        return self._active_editor

    @property
    def current_task(self) -> FoldTask | None:
        return self._current_task

    @property
    def processed_files(self) -> frozenset[str]:
        return frozenset(self._processed_files)

    def is_processed(self, document_id: str) -> bool:
        return document_id in self._processed_files

    def start(self) -> None:
        """Begin handling editor events and evaluate the current editor."""
        if self._running:
            return
        self._running = True
        logger.info("Auto fold task manager started")
        self.set_active_editor_may_changed()

    async def stop(self) -> None:
        """Cancel pending work and wait for it to wind down."""
        self._running = False
        pending = list(self._background)
        if self._pending_lookup is not None:
            self._pending_lookup.cancel()
            self._pending_lookup = None
        # The fold task winds down at its next checkpoint
        self._stop_current_task()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        logger.info("Auto fold task manager stopped")

    def set_active_editor(self, editor: EditorState | None) -> None:
        """React to the host's active editor becoming ``editor``."""
        if editor is None:
            if self._active_editor is None:
                return
            self._active_editor = None
            self._stop_current_task()
            return
        if editor.same_editor(self._active_editor):
            # Same editor, maybe with fresher selections
            self._active_editor = editor
            return

        self._active_editor = editor
        if editor.document_id in self._processed_files:
            logger.debug("Skip processed: %s", editor.display_name)
            return

        self._launch(editor)

    def set_active_editor_may_changed(self) -> None:
        """Re-read the active editor after a short quiet period.

        Bursts of notifications within the debounce window trigger one lookup.
        """
        if self._pending_lookup is not None and not self._pending_lookup.done():
            return
        self._pending_lookup = self._spawn(self._debounced_lookup())

    async def _debounced_lookup(self) -> None:
        await asyncio.sleep(self._config.folding.debounce)
        self._pending_lookup = None
        try:
            editor = await self._host.get_active_editor()
        except Exception:
            logger.warning("Failed to read active editor", exc_info=True)
            return
        self.set_active_editor(editor)

    def remove_processed_file(self, document_id: str) -> None:
        """Forget a document (it was closed); reopening folds it afresh."""
        self._processed_files.discard(document_id)
        logger.debug("Remove processed: %s", document_id)

    async def refold_current(self) -> bool:
        """Unfold and fold the active editor again, ignoring history.

        Returns:
            False if no editor is active.
        """
        editor = await self._host.get_active_editor()
        if editor is None:
            return False
        self._active_editor = editor
        self._processed_files.discard(editor.document_id)
        self._launch(editor, unfold_first=True)
        await self.wait_idle()
        return True

    async def wait_idle(self) -> None:
        """Wait for the in-flight task, if any, to finish."""
        future = self._current_future
        if future is not None:
            await asyncio.gather(future, return_exceptions=True)

    def _launch(self, editor: EditorState, *, unfold_first: bool = False) -> None:
        self._stop_current_task()
        task = FoldTask(
            editor,
            FoldOrchestrator(self._host, self._config),
            unfold_first=unfold_first,
        )
        self._current_task = task
        self._current_future = self._spawn(self._run_task(task))

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    async def _run_task(self, task: FoldTask) -> None:
        def is_end() -> bool:
            return task.cancelled or not task.editor.same_editor(self._active_editor)

        try:
            state = await task.run(is_end)
            if state is FoldState.DONE:
                self._processed_files.add(task.editor.document_id)
                logger.debug("Mark processed: %s", task.editor.display_name)
        except Exception:
            logger.exception("%s failed", task)
        finally:
            if self._current_task is task:
                self._current_task = None
                self._current_future = None

    def _stop_current_task(self) -> None:
        if self._current_task is None:
            return
        self._current_task.cancel()
        self._current_task = None
        self._current_future = None
