from autofold.ide.bridge import IDEBridge
from autofold.ide.connection import IDEConnection
from autofold.ide.discovery import IDEInfo, discover_ides
from autofold.ide.host import EditorHost, EditorState
from autofold.ide.transport import WebSocketTransport

__all__ = [
    "EditorHost",
    "EditorState",
    "IDEBridge",
    "IDEConnection",
    "IDEInfo",
    "WebSocketTransport",
    "discover_ides",
]
