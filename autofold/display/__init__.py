from autofold.display.console import get_console

__all__ = ["get_console"]
