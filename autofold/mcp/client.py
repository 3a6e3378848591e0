"""JSON-RPC client speaking just enough MCP to drive the IDE extension.

Lifecycle: ``connect()`` opens the transport and performs the
``initialize`` / ``notifications/initialized`` handshake, ``call_tool()``
issues ``tools/call`` requests, ``close()`` shuts the transport.

One request is in flight at a time. The long-running task manager and a
one-shot command may share a connection, so requests queue on a lock and each
response is matched to its request by ID.

Usage:
    transport = WebSocketTransport("ws://127.0.0.1:9999", auth_token)
    async with MCPClient(transport) as client:
        result = await client.call_tool("getActiveEditor")
"""

import asyncio
import logging
from typing import Any

from autofold.core.errors import AutoFoldError
from autofold.mcp.protocol import (
    PROTOCOL_VERSION,
    MCPClientInfo,
    MCPNotification,
    MCPServerInfo,
    MCPToolResult,
)
from autofold.mcp.transport import MCPTransport

logger = logging.getLogger(__name__)

# Stray messages tolerated while waiting for one response.
MAX_MESSAGES_TO_DISCARD: int = 100


class MCPError(AutoFoldError):
    """Protocol failure or an error response from the server.

    Attributes:
        code: JSON-RPC error code, when the server sent one.
    """

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.code = code


def _envelope(
    method: str,
    params: dict[str, Any] | None,
    request_id: int | None = None,
) -> dict[str, Any]:
    message: dict[str, Any] = {"jsonrpc": "2.0"}
    if request_id is not None:
        message["id"] = request_id
    message["method"] = method
    if params:
        message["params"] = params
    return message


def _is_stray(message: dict[str, Any]) -> bool:
    """Notifications and id-less errors answer no request of ours."""
    if MCPNotification.is_notification(message):
        return True
    return message.get("id") is None and "error" in message


class MCPClient:
    """MCP client bound to a single transport."""

    def __init__(
        self,
        transport: MCPTransport,
        client_info: MCPClientInfo | None = None,
    ):
        self._transport = transport
        self._client_info = client_info or MCPClientInfo()
        self._last_id = 0
        self._lock = asyncio.Lock()
        self._server_info: MCPServerInfo | None = None
        self._initialized = False

    async def connect(self, timeout: float = 30.0) -> None:
        """Open the transport and run the handshake.

        Args:
            timeout: Seconds allowed for both steps; 0 waits forever.

        Raises:
            MCPError: On timeout (the transport is closed first) or a failed
                handshake.
        """
        if timeout <= 0:
            await self._open()
            return
        try:
            await asyncio.wait_for(self._open(), timeout=timeout)
        except TimeoutError:
            try:
                await self._transport.close()
            except Exception as e:
                logger.warning("Failed to close transport after connect timeout: %s", e)
            raise MCPError(f"MCP connection timed out after {timeout}s") from None

    async def _open(self) -> None:
        await self._transport.connect()
        result = await self._request("initialize", {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {},
            "clientInfo": self._client_info.to_dict(),
        })
        self._server_info = MCPServerInfo.from_dict(result)
        await self._transport.send(_envelope("notifications/initialized", None))
        self._initialized = True
        logger.debug(
            "MCP session with %s %s",
            self._server_info.name,
            self._server_info.version,
        )

    async def close(self) -> None:
        self._initialized = False
        await self._transport.close()

    async def __aenter__(self) -> "MCPClient":
        await self.connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def call_tool(
        self,
        name: str,
        arguments: dict[str, Any] | None = None,
    ) -> MCPToolResult:
        """Run ``name`` on the server with ``arguments``.

        Raises:
            MCPError: If the server answers with an error.
        """
        result = await self._request("tools/call", {"name": name, "arguments": arguments or {}})
        return MCPToolResult.from_dict(result)

    async def _request(self, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        async with self._lock:
            self._last_id += 1
            request_id = self._last_id
            await self._transport.send(_envelope(method, params, request_id))
            response = await self._response_to(request_id, method)

        error = response.get("error")
        if error is not None:
            raise MCPError(error.get("message", "Unknown error"), code=error.get("code"))
        return response.get("result", {})

    async def _response_to(self, request_id: int, method: str) -> dict[str, Any]:
        """Read until the response for ``request_id`` arrives.

        Raises:
            MCPError: On a response for another request, or when more than
                MAX_MESSAGES_TO_DISCARD stray messages arrive first.
        """
        for _ in range(MAX_MESSAGES_TO_DISCARD + 1):
            message = await self._transport.receive()
            if _is_stray(message):
                logger.debug("Discarded MCP message while waiting for %s", method)
                continue
            if message.get("id") != request_id:
                raise MCPError(
                    f"Response ID mismatch: expected {request_id}, got {message.get('id')}"
                )
            return message
        raise MCPError(
            f"Received too many stray messages ({MAX_MESSAGES_TO_DISCARD + 1}) "
            f"while waiting for response to request {request_id}"
        )

    @property
    def server_info(self) -> MCPServerInfo | None:
        return self._server_info

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def is_connected(self) -> bool:
        return self._transport.is_connected
