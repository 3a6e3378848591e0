from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from autofold.ide.connection import IDEConnection
from autofold.ide.discovery import IDEInfo, discover_ides
from autofold.ide.host import EditorState
from autofold.ide.transport import WebSocketTransport
from autofold.mcp.client import MCPClient
from autofold.mcp.protocol import MCPNotification

if TYPE_CHECKING:
    from autofold.config.schema import IDEConfig
    from autofold.engine.task import TaskManager

logger = logging.getLogger(__name__)

# IDE -> autofold notifications
ACTIVE_EDITOR_CHANGED = "autofold/activeEditorChanged"
DOCUMENT_OPENED = "autofold/documentOpened"
DOCUMENT_CLOSED = "autofold/documentClosed"


def _on_active_editor_changed(manager: TaskManager, params: dict[str, Any]) -> None:
    data = params.get("editor")
    manager.set_active_editor(EditorState.from_dict(data) if data else None)


def _on_document_opened(manager: TaskManager, params: dict[str, Any]) -> None:
    # The payload may predate the editor becoming active, so look it up
    manager.set_active_editor_may_changed()


def _on_document_closed(manager: TaskManager, params: dict[str, Any]) -> None:
    uri = params.get("uri")
    if uri:
        manager.remove_processed_file(uri)


_HANDLERS: dict[str, Callable[[TaskManager, dict[str, Any]], None]] = {
    ACTIVE_EDITOR_CHANGED: _on_active_editor_changed,
    DOCUMENT_OPENED: _on_document_opened,
    DOCUMENT_CLOSED: _on_document_closed,
}


class IDEBridge:
    """Owns the IDE connection and feeds its editor events to a TaskManager.

    Nothing is connected until auto_connect() or connect() is called. Events
    arriving while no manager is attached are dropped.
    """

    def __init__(self, config: IDEConfig, lock_dir: Path | None = None) -> None:
        self._config = config
        self._lock_dir = lock_dir
        self._connection: IDEConnection | None = None
        self._manager: TaskManager | None = None
        self._workspace: Path | None = None

    async def auto_connect(self, cwd: Path) -> IDEConnection | None:
        """Connect to the IDE whose workspace best matches ``cwd``.

        Returns None when IDE integration is off or no IDE serves ``cwd``.
        """
        if not (self._config.enabled and self._config.auto_connect):
            return None
        self._workspace = cwd
        best = self._discover(cwd)
        if best is None:
            return None
        return await self.connect(best)

    async def connect(self, ide_info: IDEInfo) -> IDEConnection:
        """Open an MCP session with ``ide_info``, replacing any current one."""
        await self.disconnect()
        transport = WebSocketTransport(
            url=f"ws://{ide_info.host}:{ide_info.port}",
            auth_token=ide_info.auth_token,
        )
        transport.set_notification_handler(self._on_notification)
        client = MCPClient(transport)
        await client.connect(timeout=self._config.connect_timeout)
        self._connection = IDEConnection(client, ide_info)
        logger.info("IDE connected: %s (port %d)", ide_info.ide_name, ide_info.port)
        return self._connection

    async def disconnect(self) -> None:
        connection, self._connection = self._connection, None
        if connection is not None:
            await connection.close()

    async def reconnect_if_dead(self, cwd: Path | None = None) -> bool:
        """Re-run discovery and connect again after the link dropped.

        Returns:
            True if connected afterwards (including when it never dropped).
        """
        if self.is_connected:
            return True
        workspace = cwd or self._workspace
        if workspace is None:
            return False
        try:
            await self.disconnect()
        except Exception:
            logger.debug("Closing dead IDE connection failed", exc_info=True)
        best = self._discover(workspace)
        if best is None:
            return False
        try:
            await self.connect(best)
        except Exception:
            logger.debug("IDE reconnect failed", exc_info=True)
            return False
        logger.info("IDE reconnected after connection loss")
        return True

    def attach(self, manager: TaskManager | None) -> None:
        """Route editor events to ``manager``; None detaches."""
        self._manager = manager

    def _discover(self, cwd: Path) -> IDEInfo | None:
        ides = discover_ides(cwd, self._lock_dir)
        return ides[0] if ides else None

    def _on_notification(self, notification: MCPNotification) -> None:
        handler = _HANDLERS.get(notification.method)
        if handler is None:
            logger.debug("Ignored IDE notification: %s", notification.method)
            return
        if self._manager is None:
            logger.debug("Dropped %s: no task manager attached", notification.method)
            return
        handler(self._manager, notification.params)

    @property
    def connection(self) -> IDEConnection | None:
        return self._connection

    @property
    def is_connected(self) -> bool:
        return self._connection is not None and self._connection.is_connected
