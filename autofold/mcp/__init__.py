"""Minimal MCP client used to reach the IDE extension.

Usage:
    from autofold.mcp import MCPClient

    async with MCPClient(transport) as client:
        result = await client.call_tool("getActiveEditor")
"""

from autofold.mcp.client import MCPClient, MCPError
from autofold.mcp.protocol import MCPNotification, MCPServerInfo, MCPToolResult
from autofold.mcp.transport import MCPTransport, MCPTransportError

__all__ = [
    "MCPClient",
    "MCPError",
    "MCPNotification",
    "MCPServerInfo",
    "MCPToolResult",
    "MCPTransport",
    "MCPTransportError",
]
