"""What the orchestrator needs from the editor.

`EditorHost` is the seam between fold planning and a concrete editor. The
MCP-backed `IDEConnection` implements it for real IDEs; tests use mocks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Protocol

from autofold.core.geometry import LineRange
from autofold.core.types import Symbol
from autofold.core.utils import file_name_from_uri

MessageLevel = Literal["info", "warning", "error"]


@dataclass(frozen=True)
class EditorState:
    """Snapshot of an editor as reported by the host.

    Two snapshots refer to the same editor when ``editor_id`` and
    ``document_id`` match, regardless of selections or scroll position.

    Attributes:
        editor_id: Host identifier of the editor (tab) instance.
        document_id: Document URI.
        file_name: Filesystem path of the document (may be empty).
        line_count: Total lines in the document.
        selections: Current selections as line ranges.
        visible_range_count: Number of disjoint visible ranges; more than one
            means something is already folded.
    """

    editor_id: str
    document_id: str
    file_name: str = ""
    line_count: int = 0
    selections: tuple[LineRange, ...] = ()
    visible_range_count: int = 1

    def same_editor(self, other: EditorState | None) -> bool:
        return (
            other is not None
            and other.editor_id == self.editor_id
            and other.document_id == self.document_id
        )

    @property
    def display_name(self) -> str:
        return file_name_from_uri(self.file_name or self.document_id)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EditorState:
        """Create from the host's JSON representation."""
        return cls(
            editor_id=str(data.get("editorId", "")),
            document_id=data.get("uri", ""),
            file_name=data.get("fileName", ""),
            line_count=int(data.get("lineCount", 0)),
            selections=tuple(
                LineRange(int(s["startLine"]), int(s["endLine"]))
                for s in data.get("selections", [])
            ),
            visible_range_count=int(data.get("visibleRangeCount", 1)),
        )


class EditorHost(Protocol):
    """Editor services consumed by the fold orchestrator.

    Implementations may raise on transport failure; the orchestrator treats
    every call as best effort and degrades to "no effect".
    """

    async def get_active_editor(self) -> EditorState | None: ...

    async def get_symbols(self, editor: EditorState) -> list[Symbol] | None: ...

    async def get_folding_ranges(self, editor: EditorState) -> list[LineRange] | None: ...

    async def get_diagnostics(self, editor: EditorState) -> list[LineRange]: ...

    async def fold_lines(self, lines: list[int]) -> None: ...

    async def unfold_all(self) -> None: ...

    async def fold_fallback(self) -> None: ...

    async def write_clipboard(self, text: str) -> None: ...

    async def show_message(self, level: MessageLevel, message: str) -> None: ...
