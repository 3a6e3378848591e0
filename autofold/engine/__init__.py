"""Auto-fold pass orchestration and scheduling."""

from autofold.engine.orchestrator import FoldOrchestrator, FoldState, snap_fold_starts
from autofold.engine.task import FoldTask, TaskManager

__all__ = [
    "FoldOrchestrator",
    "FoldState",
    "FoldTask",
    "TaskManager",
    "snap_fold_starts",
]
