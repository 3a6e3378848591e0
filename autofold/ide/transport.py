from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any

import websockets
from websockets.asyncio.client import ClientConnection

from autofold.mcp.protocol import MCPNotification
from autofold.mcp.transport import MCPTransport, MCPTransportError

logger = logging.getLogger(__name__)

AUTH_HEADER = "x-autofold-ide-authorization"

NotificationHandler = Callable[[MCPNotification], None]

# Queued when the listener exits so pending receive() calls fail instead of hanging
_CLOSED: dict[str, Any] = {}


class WebSocketTransport(MCPTransport):
    """WebSocket transport for the IDE MCP endpoint.

    Responses are queued for `MCPClient._call()`. Server notifications
    (editor switched, document opened or closed) go to the handler set with
    `set_notification_handler()` instead, so they arrive even while no
    request is pending.
    """

    def __init__(self, url: str, auth_token: str) -> None:
        self._url = url
        self._auth_token = auth_token
        self._ws: ClientConnection | None = None
        self._receive_queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self._listener_task: asyncio.Task[None] | None = None
        self._notification_handler: NotificationHandler | None = None

    def set_notification_handler(self, handler: NotificationHandler | None) -> None:
        self._notification_handler = handler

    async def connect(self) -> None:
        # Lifecycle is managed by connect/close, not a context manager
        self._ws = await websockets.connect(
            self._url,
            additional_headers={AUTH_HEADER: self._auth_token},
            ping_interval=30,
            ping_timeout=10,
        )
        self._listener_task = asyncio.create_task(self._listen())

    async def _listen(self) -> None:
        assert self._ws is not None
        try:
            async for data in self._ws:
                await self._dispatch(json.loads(data))
        except websockets.exceptions.ConnectionClosed:
            logger.debug("WebSocket connection closed")
        except Exception:
            logger.exception("WebSocket listener error")
        finally:
            self._receive_queue.put_nowait(_CLOSED)

    async def _dispatch(self, message: dict[str, Any]) -> None:
        if MCPNotification.is_notification(message) and self._notification_handler:
            try:
                self._notification_handler(MCPNotification.from_dict(message))
            except Exception:
                logger.exception("Notification handler failed for %s", message.get("method"))
            return
        await self._receive_queue.put(message)

    async def send(self, message: dict[str, Any]) -> None:
        assert self._ws is not None
        await self._ws.send(json.dumps(message, separators=(",", ":")))

    async def receive(self) -> dict[str, Any]:
        message = await self._receive_queue.get()
        if message is _CLOSED:
            self._receive_queue.put_nowait(_CLOSED)
            raise MCPTransportError("IDE connection closed")
        return message

    async def close(self) -> None:
        if self._listener_task:
            self._listener_task.cancel()
            self._listener_task = None
        if self._ws:
            await self._ws.close()
            self._ws = None

    @property
    def is_connected(self) -> bool:
        return (
            self._ws is not None
            and self._ws.protocol is not None
            and self._listener_task is not None
            and not self._listener_task.done()
        )
