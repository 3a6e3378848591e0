"""User commands.

Architecture:
    - protocol.py: CommandResult, CommandOutput
    - core.py: command implementations that return structured output
"""

from autofold.commands.core import cmd_debug_symbols, cmd_refold
from autofold.commands.protocol import CommandOutput, CommandResult

__all__ = [
    "CommandOutput",
    "CommandResult",
    "cmd_debug_symbols",
    "cmd_refold",
]
