from __future__ import annotations

from .builtin import build_command_table, post_command
from .context import CommandContext
from .registry import Command, CommandRegistryError, CommandTable, Help

__all__ = [
    "Command",
    "CommandContext",
    "CommandRegistryError",
    "CommandTable",
    "Help",
    "build_command_table",
    "post_command",
]
