"""Transport abstraction for MCP clients."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from autofold.core.errors import AutoFoldError


class MCPTransportError(AutoFoldError):
    """Error in MCP transport layer."""


class MCPTransport(ABC):
    """Async send/receive of JSON-RPC messages as Python dicts."""

    @abstractmethod
    async def connect(self) -> None:
        """Establish the connection."""
        ...

    @abstractmethod
    async def send(self, message: dict[str, Any]) -> None:
        """Send a JSON-RPC message."""
        ...

    @abstractmethod
    async def receive(self) -> dict[str, Any]:
        """Receive the next JSON-RPC response. Blocks until one is available."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the transport."""
        ...

    @property
    @abstractmethod
    def is_connected(self) -> bool: ...
