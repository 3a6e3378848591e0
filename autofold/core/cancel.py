"""Cancellation support for fold tasks."""


class CancellationToken:
    """Token for cooperative cancellation of a fold task.

    The task manager cancels the token when the active editor changes.
    Orchestration code checks `is_end()` before and after every suspension
    point and stops at the next checkpoint; nothing is interrupted mid-call.

    Example:
        token = CancellationToken()

        async def run():
            if token.is_end():
                return
            symbols = await host.get_symbols(editor)
            if token.is_end():
                return

        # When the user switches editor:
        token.cancel()
    """

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def is_cancelled(self) -> bool:
        """Check if cancellation has been requested."""
        return self._cancelled

    def is_end(self) -> bool:
        """Predicate form of `is_cancelled`, handed to the orchestrator."""
        return self._cancelled

    def cancel(self) -> None:
        """Request cancellation. Calling it again has no further effect."""
        self._cancelled = True
