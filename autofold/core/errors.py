"""Typed exception hierarchy for autofold."""

from __future__ import annotations


class AutoFoldError(Exception):
    """Base class for all autofold errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigError(AutoFoldError):
    """Raised for configuration issues (invalid JSON, validation failure)."""


class LoadError(AutoFoldError):
    """Base class for loading errors (config files, symbol snapshots)."""

    pass


class HostError(AutoFoldError):
    """Raised when the editor host returns something we cannot interpret."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"Host call '{operation}' failed: {reason}")
