from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from autofold.core.errors import HostError
from autofold.core.geometry import LineRange
from autofold.core.types import SymbolKind
from autofold.ide.connection import IDEConnection
from autofold.ide.discovery import IDEInfo
from autofold.ide.host import EditorState


@dataclass
class FakeMCPToolResult:
    content: list[dict[str, Any]]
    is_error: bool = False

    def first_text(self) -> str:
        return self.content[0].get("text", "") if self.content else ""


def _text(payload: Any) -> FakeMCPToolResult:
    return FakeMCPToolResult(content=[{"type": "text", "text": json.dumps(payload)}])


def _make_ide_info() -> IDEInfo:
    return IDEInfo(
        pid=1234,
        workspace_folders=["/test"],
        ide_name="Test IDE",
        transport="ws",
        auth_token="token",
        port=9999,
        lock_path=Path("/tmp/9999.lock"),
    )


def _make_connection(call_tool_return: Any = None) -> tuple[IDEConnection, AsyncMock]:
    client = AsyncMock()
    client.call_tool = AsyncMock(return_value=call_tool_return)
    conn = IDEConnection(client, _make_ide_info())
    return conn, client


EDITOR = EditorState(
    editor_id="e1",
    document_id="file:///src/app.ts",
    file_name="/src/app.ts",
    line_count=120,
)


class TestGetActiveEditor:
    @pytest.mark.asyncio
    async def test_parses_editor(self) -> None:
        conn, client = _make_connection(_text({
            "editorId": "e1",
            "uri": "file:///src/app.ts",
            "fileName": "/src/app.ts",
            "lineCount": 120,
            "selections": [{"startLine": 4, "endLine": 6}],
            "visibleRangeCount": 1,
        }))

        editor = await conn.get_active_editor()
        assert editor is not None
        assert editor.editor_id == "e1"
        assert editor.document_id == "file:///src/app.ts"
        assert editor.line_count == 120
        assert editor.selections == (LineRange(4, 6),)
        client.call_tool.assert_called_once_with("getActiveEditor", {})

    @pytest.mark.asyncio
    async def test_null_means_no_editor(self) -> None:
        conn, _ = _make_connection(FakeMCPToolResult(content=[{"type": "text", "text": "null"}]))
        assert await conn.get_active_editor() is None

    @pytest.mark.asyncio
    async def test_empty_content_means_no_editor(self) -> None:
        conn, _ = _make_connection(FakeMCPToolResult(content=[]))
        assert await conn.get_active_editor() is None

    @pytest.mark.asyncio
    async def test_invalid_json_raises_host_error(self) -> None:
        conn, _ = _make_connection(FakeMCPToolResult(content=[{"type": "text", "text": "{nope"}]))
        with pytest.raises(HostError, match="getActiveEditor"):
            await conn.get_active_editor()


class TestGetSymbols:
    @pytest.mark.asyncio
    async def test_parses_nested_symbols(self) -> None:
        conn, client = _make_connection(_text([
            {
                "name": "App",
                "kind": "Class",
                "startLine": 2,
                "endLine": 40,
                "children": [
                    {"name": "render", "kind": 6, "startLine": 10, "endLine": 20, "children": []},
                ],
            },
        ]))

        symbols = await conn.get_symbols(EDITOR)
        assert symbols is not None
        assert len(symbols) == 1
        assert symbols[0].name == "App"
        assert symbols[0].kind == SymbolKind.CLASS
        assert symbols[0].children[0].kind == SymbolKind.METHOD
        assert symbols[0].children[0].range == LineRange(10, 20)
        client.call_tool.assert_called_once_with(
            "getDocumentSymbols", {"uri": "file:///src/app.ts"}
        )

    @pytest.mark.asyncio
    async def test_null_means_not_ready(self) -> None:
        conn, _ = _make_connection(FakeMCPToolResult(content=[{"type": "text", "text": "null"}]))
        assert await conn.get_symbols(EDITOR) is None

    @pytest.mark.asyncio
    async def test_empty_list_is_kept(self) -> None:
        conn, _ = _make_connection(_text([]))
        assert await conn.get_symbols(EDITOR) == []


class TestGetFoldingRanges:
    @pytest.mark.asyncio
    async def test_parses_ranges(self) -> None:
        conn, client = _make_connection(_text([{"start": 3, "end": 9}, {"start": 11, "end": 12}]))

        ranges = await conn.get_folding_ranges(EDITOR)
        assert ranges == [LineRange(3, 9), LineRange(11, 12)]
        client.call_tool.assert_called_once_with(
            "getFoldingRanges", {"uri": "file:///src/app.ts"}
        )


class TestGetDiagnostics:
    @pytest.mark.asyncio
    async def test_parses_lines(self) -> None:
        conn, _ = _make_connection(_text([
            {"line": 5, "endLine": 7, "message": "x", "severity": "error"},
            {"line": 12, "message": "y", "severity": "warning"},
        ]))

        assert await conn.get_diagnostics(EDITOR) == [LineRange(5, 7), LineRange(12, 12)]

    @pytest.mark.asyncio
    async def test_empty(self) -> None:
        conn, _ = _make_connection(_text([]))
        assert await conn.get_diagnostics(EDITOR) == []


class TestCommands:
    @pytest.mark.asyncio
    async def test_fold_lines(self) -> None:
        conn, client = _make_connection(FakeMCPToolResult(content=[]))

        await conn.fold_lines([30, 12])
        client.call_tool.assert_called_once_with("executeCommand", {
            "command": "editor.fold",
            "args": {"selectionLines": [30, 12]},
        })

    @pytest.mark.asyncio
    async def test_unfold_all(self) -> None:
        conn, client = _make_connection(FakeMCPToolResult(content=[]))

        await conn.unfold_all()
        client.call_tool.assert_called_once_with(
            "executeCommand", {"command": "editor.unfoldAll"}
        )

    @pytest.mark.asyncio
    async def test_fold_fallback(self) -> None:
        conn, client = _make_connection(FakeMCPToolResult(content=[]))

        await conn.fold_fallback()
        client.call_tool.assert_called_once_with(
            "executeCommand", {"command": "editor.foldLevel2"}
        )

    @pytest.mark.asyncio
    async def test_command_error_raises(self) -> None:
        result = FakeMCPToolResult(content=[{"type": "text", "text": "no editor"}], is_error=True)
        conn, _ = _make_connection(result)

        with pytest.raises(HostError, match="no editor"):
            await conn.unfold_all()

    @pytest.mark.asyncio
    async def test_write_clipboard(self) -> None:
        conn, client = _make_connection(FakeMCPToolResult(content=[]))

        await conn.write_clipboard("hello")
        client.call_tool.assert_called_once_with("writeClipboard", {"text": "hello"})

    @pytest.mark.asyncio
    async def test_show_message(self) -> None:
        conn, client = _make_connection(FakeMCPToolResult(content=[]))

        await conn.show_message("warning", "careful")
        client.call_tool.assert_called_once_with(
            "showMessage", {"level": "warning", "message": "careful"}
        )


class TestConnectionState:
    def test_is_connected_delegates_to_client(self) -> None:
        client = MagicMock()
        client.is_connected = False
        conn = IDEConnection(client, _make_ide_info())
        assert conn.is_connected is False

    @pytest.mark.asyncio
    async def test_close(self) -> None:
        conn, client = _make_connection()
        await conn.close()
        client.close.assert_awaited_once()
