from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from autofold.core.errors import HostError
from autofold.core.geometry import LineRange
from autofold.core.types import Symbol
from autofold.ide.host import EditorState, MessageLevel
from autofold.mcp.client import MCPClient

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from autofold.ide.discovery import IDEInfo

# Host editor commands
FOLD_COMMAND = "editor.fold"
UNFOLD_ALL_COMMAND = "editor.unfoldAll"
FALLBACK_FOLD_COMMAND = "editor.foldLevel2"


def _parse_json_text(result: Any, tool: str) -> Any:
    """Decode the JSON payload of a tool result; "" and "null" become None."""
    text = result.first_text()
    if not text or text == "null":
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise HostError(tool, f"invalid JSON: {e}") from e


class IDEConnection:
    """`EditorHost` implemented as typed wrappers around MCPClient.call_tool()."""

    def __init__(self, client: MCPClient, ide_info: IDEInfo) -> None:
        self._client = client
        self.ide_info = ide_info

    async def get_active_editor(self) -> EditorState | None:
        """The focused text editor, or None if no text editor has focus."""
        result = await self._client.call_tool("getActiveEditor", {})
        data = _parse_json_text(result, "getActiveEditor")
        if not data:
            return None
        return EditorState.from_dict(data)

    async def get_symbols(self, editor: EditorState) -> list[Symbol] | None:
        """Document outline; None while the language server is still indexing."""
        result = await self._client.call_tool("getDocumentSymbols", {"uri": editor.document_id})
        data = _parse_json_text(result, "getDocumentSymbols")
        if data is None:
            return None
        return [Symbol.from_dict(item) for item in data]

    async def get_folding_ranges(self, editor: EditorState) -> list[LineRange] | None:
        """Foldable regions according to the host's own folding provider."""
        result = await self._client.call_tool("getFoldingRanges", {"uri": editor.document_id})
        data = _parse_json_text(result, "getFoldingRanges")
        if data is None:
            return None
        return [LineRange(int(r["start"]), int(r["end"])) for r in data]

    async def get_diagnostics(self, editor: EditorState) -> list[LineRange]:
        """Line ranges of the document's problems (errors, warnings)."""
        result = await self._client.call_tool("getDiagnostics", {"uri": editor.document_id})
        data = _parse_json_text(result, "getDiagnostics")
        if not data:
            return []
        ranges = []
        for d in data:
            line = int(d.get("line", 0))
            ranges.append(LineRange(line, max(line, int(d.get("endLine", line)))))
        return ranges

    async def fold_lines(self, lines: list[int]) -> None:
        """Fold the innermost foldable region starting at each line, in order."""
        await self._execute(FOLD_COMMAND, {"selectionLines": lines})

    async def unfold_all(self) -> None:
        await self._execute(UNFOLD_ALL_COMMAND)

    async def fold_fallback(self) -> None:
        """Host's symbol-agnostic "fold level 2"."""
        await self._execute(FALLBACK_FOLD_COMMAND)

    async def write_clipboard(self, text: str) -> None:
        await self._client.call_tool("writeClipboard", {"text": text})

    async def show_message(self, level: MessageLevel, message: str) -> None:
        await self._client.call_tool("showMessage", {"level": level, "message": message})

    async def _execute(self, command: str, args: dict[str, Any] | None = None) -> None:
        arguments: dict[str, Any] = {"command": command}
        if args:
            arguments["args"] = args
        result = await self._client.call_tool("executeCommand", arguments)
        if result.is_error:
            raise HostError(command, result.first_text() or "command failed")

    @property
    def is_connected(self) -> bool:
        return self._client.is_connected

    async def close(self) -> None:
        await self._client.close()
