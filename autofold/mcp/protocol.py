"""MCP protocol types used by the IDE connection.

MCP builds on JSON-RPC 2.0. Only the pieces the IDE bridge needs are
modelled here: the initialize handshake, tool results and server
notifications.

MCP Spec: https://modelcontextprotocol.io/specification/2025-11-25
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

PROTOCOL_VERSION = "2025-11-25"


@dataclass
class MCPToolResult:
    """Result from an MCP tool invocation.

    Attributes:
        content: Content items returned by the tool (IDE tools return one text item).
        is_error: Whether the tool reported failure.
    """

    content: list[dict[str, Any]] = field(default_factory=list)
    is_error: bool = False

    def first_text(self) -> str:
        """Text of the first content item, or "" when there is none."""
        if self.content:
            return self.content[0].get("text", "")
        return ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MCPToolResult:
        return cls(
            content=data.get("content", []),
            is_error=data.get("isError", False),
        )


@dataclass
class MCPServerInfo:
    """Server information from MCP initialization."""

    name: str
    version: str
    capabilities: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MCPServerInfo:
        server_info = data.get("serverInfo", {})
        return cls(
            name=server_info.get("name", "unknown"),
            version=server_info.get("version", "unknown"),
            capabilities=data.get("capabilities", {}),
        )


@dataclass
class MCPClientInfo:
    """Client information sent during initialization."""

    name: str = "autofold"
    version: str = "0.1.0"

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "version": self.version}


@dataclass
class MCPNotification:
    """Server-initiated JSON-RPC notification (a message without ``id``)."""

    method: str
    params: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def is_notification(message: dict[str, Any]) -> bool:
        return "id" not in message and "method" in message

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MCPNotification:
        return cls(method=data["method"], params=data.get("params") or {})
