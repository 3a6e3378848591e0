"""Types for autofold's user commands.

Commands work the same from the CLI and from IDE-triggered actions: they
return structured output and leave presentation to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class CommandResult(Enum):
    """Result status of a command execution.

    Attributes:
        SUCCESS: Command completed successfully.
        ERROR: Command failed with an error.
    """

    SUCCESS = auto()
    ERROR = auto()


@dataclass
class CommandOutput:
    """Output from a command execution.

    Attributes:
        result: The result status of the command.
        message: Human-readable message (for display).
        data: Structured data (for JSON output or further processing).
    """

    result: CommandResult
    message: str | None = None
    data: dict[str, Any] | None = None

    @classmethod
    def success(
        cls,
        message: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> CommandOutput:
        """Create a successful output."""
        return cls(result=CommandResult.SUCCESS, message=message, data=data)

    @classmethod
    def error(cls, message: str) -> CommandOutput:
        """Create an error output."""
        return cls(result=CommandResult.ERROR, message=message)

    @property
    def ok(self) -> bool:
        return self.result is CommandResult.SUCCESS
