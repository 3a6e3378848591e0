"""Tests for the refold and debug-symbols commands."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from autofold.commands import CommandOutput, CommandResult, cmd_debug_symbols, cmd_refold
from autofold.config.schema import Config
from autofold.core.errors import HostError
from autofold.core.geometry import LineRange
from autofold.core.types import Symbol, SymbolKind
from autofold.ide.host import EditorState

OUTLINE = [
    Symbol(
        "TestClass",
        SymbolKind.CLASS,
        LineRange(1, 20),
        (Symbol("method1", SymbolKind.METHOD, LineRange(5, 10)),),
    ),
    Symbol("TestFunction", SymbolKind.FUNCTION, LineRange(25, 35)),
]


def make_editor(file_name: str = "/path/to/test.ts", **overrides: object) -> EditorState:
    fields: dict[str, object] = {
        "editor_id": "e1",
        "document_id": "file://" + (file_name or "/untitled"),
        "file_name": file_name,
        "line_count": 100,
    }
    fields.update(overrides)
    return EditorState(**fields)  # type: ignore[arg-type]


def make_host(editor: EditorState | None, symbols: list[Symbol] | None = OUTLINE) -> MagicMock:
    host = MagicMock()
    host.get_active_editor = AsyncMock(return_value=editor)
    host.get_symbols = AsyncMock(return_value=symbols)
    host.write_clipboard = AsyncMock()
    host.show_message = AsyncMock()
    return host


class TestCommandOutput:
    def test_success(self) -> None:
        output = CommandOutput.success("done", {"k": 1})

        assert output.ok
        assert output.result is CommandResult.SUCCESS
        assert output.data == {"k": 1}

    def test_error(self) -> None:
        output = CommandOutput.error("nope")

        assert not output.ok
        assert output.message == "nope"
        assert output.data is None


class TestDebugSymbols:
    @pytest.mark.asyncio
    async def test_exports_fixture_to_clipboard(self) -> None:
        host = make_host(make_editor())

        output = await cmd_debug_symbols(host, Config())

        assert output.ok
        expected = (
            "\n"
            "const symbols: UTSymbol[] = [\n"
            "    ['TestClass', SymbolKind.Class, 1, 20, [\n"
            "    ['method1', SymbolKind.Method, 5, 10, []]\n"
            "  ]],\n"
            "  ['TestFunction', SymbolKind.Function, 25, 35, []]\n"
            "];\n"
            "check('test.ts', 100, symbols, [], [\n"
            "  [1, 20],\n"
            "  [5, 10],\n"
            "  [25, 35],\n"
            "]);\n"
        )
        host.write_clipboard.assert_awaited_once_with(expected)
        host.show_message.assert_awaited_once_with("info", "Symbols exported to clipboard")
        assert output.data == {"snapshot": expected}

    @pytest.mark.asyncio
    async def test_uses_basename(self) -> None:
        host = make_host(make_editor("/path/to/my-component.tsx"))

        await cmd_debug_symbols(host, Config())

        text = host.write_clipboard.await_args.args[0]
        assert "check('my-component.tsx', 100" in text

    @pytest.mark.asyncio
    async def test_unknown_file_name(self) -> None:
        host = make_host(make_editor(""))

        await cmd_debug_symbols(host, Config())

        text = host.write_clipboard.await_args.args[0]
        assert "check('unknown.ts', 100" in text

    @pytest.mark.asyncio
    async def test_selections_become_skip_ranges(self) -> None:
        host = make_host(make_editor(selections=(LineRange(6, 6),)))

        await cmd_debug_symbols(host, Config())

        text = host.write_clipboard.await_args.args[0]
        # The selection keeps TestClass and method1 open
        assert text.endswith("check('test.ts', 100, symbols, [[6, 6]], [\n  [25, 35],\n]);\n")

    @pytest.mark.asyncio
    async def test_no_active_editor(self) -> None:
        host = make_host(None)

        output = await cmd_debug_symbols(host, Config())

        assert not output.ok
        host.show_message.assert_awaited_once_with("warning", "No active editor found")
        host.get_symbols.assert_not_awaited()
        host.write_clipboard.assert_not_awaited()

    @pytest.mark.parametrize("symbols", [None, []])
    @pytest.mark.asyncio
    async def test_no_symbols(self, symbols: list[Symbol] | None) -> None:
        host = make_host(make_editor(), symbols)

        output = await cmd_debug_symbols(host, Config())

        assert output.ok
        host.show_message.assert_awaited_once_with("info", "No symbols found in current document")
        host.write_clipboard.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_symbol_fetch_error(self) -> None:
        host = make_host(make_editor())
        host.get_symbols.side_effect = RuntimeError("LSP crashed")

        output = await cmd_debug_symbols(host, Config())

        assert not output.ok
        assert output.message == "Failed to export symbols: LSP crashed"
        host.show_message.assert_awaited_once_with("error", "Failed to export symbols: LSP crashed")

    @pytest.mark.asyncio
    async def test_clipboard_error(self) -> None:
        host = make_host(make_editor())
        host.write_clipboard.side_effect = RuntimeError("clipboard busy")

        output = await cmd_debug_symbols(host, Config())

        assert not output.ok
        host.show_message.assert_awaited_once_with(
            "error", "Failed to export symbols: clipboard busy"
        )

    @pytest.mark.asyncio
    async def test_error_message_failure_is_swallowed(self) -> None:
        host = make_host(make_editor())
        host.get_symbols.side_effect = RuntimeError("boom")
        host.show_message.side_effect = ConnectionError("gone")

        output = await cmd_debug_symbols(host, Config())

        assert not output.ok

    @pytest.mark.asyncio
    async def test_active_editor_lookup_error(self) -> None:
        host = make_host(make_editor())
        host.get_active_editor.side_effect = HostError("getActiveEditor", "connection closed")

        output = await cmd_debug_symbols(host, Config())

        assert not output.ok
        assert output.message == (
            "Failed to export symbols: Host call 'getActiveEditor' failed: connection closed"
        )
        host.show_message.assert_awaited_once_with("error", output.message)
        host.get_symbols.assert_not_awaited()


class TestRefold:
    @pytest.mark.asyncio
    async def test_refolds_active_editor(self) -> None:
        editor = make_editor()
        manager = MagicMock()
        manager.refold_current = AsyncMock(return_value=True)
        manager.active_editor = editor

        output = await cmd_refold(manager)

        assert output.ok
        assert output.message == "Refolded test.ts"
        assert output.data == {"document": editor.document_id}

    @pytest.mark.asyncio
    async def test_no_active_editor(self) -> None:
        manager = MagicMock()
        manager.refold_current = AsyncMock(return_value=False)
        manager.host.show_message = AsyncMock()

        output = await cmd_refold(manager)

        assert not output.ok
        manager.host.show_message.assert_awaited_once_with("warning", "No active editor found")

    @pytest.mark.asyncio
    async def test_host_error_becomes_error_output(self) -> None:
        manager = MagicMock()
        manager.refold_current = AsyncMock(
            side_effect=HostError("unfoldAll", "connection closed")
        )
        manager.host.show_message = AsyncMock()

        output = await cmd_refold(manager)

        assert not output.ok
        assert output.message == "Refold failed: Host call 'unfoldAll' failed: connection closed"
        manager.host.show_message.assert_awaited_once_with("error", output.message)

    @pytest.mark.asyncio
    async def test_error_message_failure_is_swallowed(self) -> None:
        manager = MagicMock()
        manager.refold_current = AsyncMock(side_effect=ConnectionError("gone"))
        manager.host.show_message = AsyncMock(side_effect=ConnectionError("gone"))

        output = await cmd_refold(manager)

        assert not output.ok
        assert output.message == "Refold failed: gone"
