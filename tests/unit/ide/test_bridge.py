from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from autofold.config.schema import IDEConfig
from autofold.ide.bridge import IDEBridge
from autofold.ide.discovery import IDEInfo
from autofold.ide.host import EditorState
from autofold.mcp.protocol import MCPNotification


def _make_ide_info(port: int = 9999) -> IDEInfo:
    return IDEInfo(
        pid=1234,
        workspace_folders=["/test"],
        ide_name="Test IDE",
        transport="ws",
        auth_token="test-token",
        port=port,
        lock_path=Path(f"/tmp/{port}.lock"),
    )


class TestIDEBridgeAutoConnect:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "config",
        [IDEConfig(enabled=False), IDEConfig(auto_connect=False)],
    )
    async def test_disabled_returns_none(self, config: IDEConfig) -> None:
        bridge = IDEBridge(config)
        with patch("autofold.ide.bridge.discover_ides") as mock_discover:
            assert await bridge.auto_connect(Path("/test")) is None
        mock_discover.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_ides_returns_none(self) -> None:
        bridge = IDEBridge(IDEConfig())
        with patch("autofold.ide.bridge.discover_ides", return_value=[]):
            assert await bridge.auto_connect(Path("/test")) is None

    @pytest.mark.asyncio
    async def test_connects_to_best_match(self) -> None:
        bridge = IDEBridge(IDEConfig(), lock_dir=Path("/locks"))
        best, other = _make_ide_info(1), _make_ide_info(2)
        mock_conn = AsyncMock()

        with (
            patch("autofold.ide.bridge.discover_ides", return_value=[best, other]) as mock_discover,
            patch.object(bridge, "connect", return_value=mock_conn) as mock_connect,
        ):
            result = await bridge.auto_connect(Path("/test"))

        assert result is mock_conn
        mock_discover.assert_called_once_with(Path("/test"), Path("/locks"))
        mock_connect.assert_called_once_with(best)


class TestIDEBridgeConnect:
    @pytest.mark.asyncio
    async def test_connect_creates_connection(self) -> None:
        bridge = IDEBridge(IDEConfig(connect_timeout=4.0))
        mock_client = AsyncMock()

        with (
            patch("autofold.ide.bridge.WebSocketTransport") as mock_transport_cls,
            patch("autofold.ide.bridge.MCPClient", return_value=mock_client),
        ):
            conn = await bridge.connect(_make_ide_info())

        assert bridge.connection is conn
        assert conn.ide_info.port == 9999
        mock_transport_cls.assert_called_once_with(
            url="ws://127.0.0.1:9999",
            auth_token="test-token",
        )
        mock_transport_cls.return_value.set_notification_handler.assert_called_once_with(
            bridge._on_notification
        )
        mock_client.connect.assert_called_once_with(timeout=4.0)

    @pytest.mark.asyncio
    async def test_connect_replaces_existing(self) -> None:
        bridge = IDEBridge(IDEConfig())
        old_conn = AsyncMock()
        bridge._connection = old_conn

        with (
            patch("autofold.ide.bridge.WebSocketTransport"),
            patch("autofold.ide.bridge.MCPClient", return_value=AsyncMock()),
        ):
            await bridge.connect(_make_ide_info())

        old_conn.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_disconnect(self) -> None:
        bridge = IDEBridge(IDEConfig())
        mock_conn = AsyncMock()
        bridge._connection = mock_conn

        await bridge.disconnect()
        await bridge.disconnect()

        mock_conn.close.assert_called_once()
        assert bridge.connection is None
        assert bridge.is_connected is False


class TestIDEBridgeReconnect:
    @pytest.mark.asyncio
    async def test_already_connected(self) -> None:
        bridge = IDEBridge(IDEConfig())
        bridge._connection = MagicMock(is_connected=True)

        assert await bridge.reconnect_if_dead() is True

    @pytest.mark.asyncio
    async def test_without_known_cwd(self) -> None:
        bridge = IDEBridge(IDEConfig())
        assert await bridge.reconnect_if_dead() is False

    @pytest.mark.asyncio
    async def test_reconnects_after_loss(self) -> None:
        bridge = IDEBridge(IDEConfig())
        dead = AsyncMock()
        dead.is_connected = False
        bridge._connection = dead
        ide_info = _make_ide_info()

        with (
            patch("autofold.ide.bridge.discover_ides", return_value=[ide_info]),
            patch.object(bridge, "connect", new_callable=AsyncMock) as mock_connect,
        ):
            assert await bridge.reconnect_if_dead(Path("/test")) is True

        dead.close.assert_called_once()
        mock_connect.assert_called_once_with(ide_info)

    @pytest.mark.asyncio
    async def test_connect_failure_reports_false(self) -> None:
        bridge = IDEBridge(IDEConfig())
        with (
            patch("autofold.ide.bridge.discover_ides", return_value=[_make_ide_info()]),
            patch.object(bridge, "connect", side_effect=OSError("refused")),
        ):
            assert await bridge.reconnect_if_dead(Path("/test")) is False


class TestNotificationRouting:
    def _bridge(self) -> tuple[IDEBridge, MagicMock]:
        bridge = IDEBridge(IDEConfig())
        manager = MagicMock()
        bridge.attach(manager)
        return bridge, manager

    def test_active_editor_changed(self) -> None:
        bridge, manager = self._bridge()

        bridge._on_notification(MCPNotification(
            "autofold/activeEditorChanged",
            {"editor": {"editorId": "e1", "uri": "file:///a.ts", "lineCount": 80}},
        ))

        manager.set_active_editor.assert_called_once_with(
            EditorState(editor_id="e1", document_id="file:///a.ts", line_count=80)
        )

    def test_active_editor_cleared(self) -> None:
        bridge, manager = self._bridge()

        bridge._on_notification(MCPNotification("autofold/activeEditorChanged", {"editor": None}))

        manager.set_active_editor.assert_called_once_with(None)

    def test_document_opened(self) -> None:
        bridge, manager = self._bridge()

        bridge._on_notification(MCPNotification("autofold/documentOpened", {"uri": "file:///a.ts"}))

        manager.set_active_editor_may_changed.assert_called_once_with()

    def test_document_closed(self) -> None:
        bridge, manager = self._bridge()

        bridge._on_notification(MCPNotification("autofold/documentClosed", {"uri": "file:///a.ts"}))

        manager.remove_processed_file.assert_called_once_with("file:///a.ts")

    def test_unknown_notification_ignored(self) -> None:
        bridge, manager = self._bridge()

        bridge._on_notification(MCPNotification("notifications/progress", {}))

        assert manager.method_calls == []

    def test_detached_drops_events(self) -> None:
        bridge, manager = self._bridge()
        bridge.attach(None)

        bridge._on_notification(MCPNotification("autofold/documentOpened", {}))

        manager.set_active_editor_may_changed.assert_not_called()
