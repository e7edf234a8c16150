"""Command table and help registry.

The table is built once at startup and only read afterwards:

    table = CommandTable()
    table.register("track", track_command, "Track a topic")
    table.set_full_help("track", TRACK_HELP)
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from ..model import User
    from .context import CommandContext

Handler: TypeAlias = "Callable[[CommandContext, User, str], Awaitable[None]]"


class CommandRegistryError(LookupError):
    """Raised when wiring code refers to a command that was never registered."""

    pass


@dataclass(slots=True)
class Help:
    """Help text for one command. ``full`` starts out equal to ``short``."""

    short: str
    full: str

    @classmethod
    def of(cls, short: str) -> Help:
        return cls(short=short, full=short)


@dataclass(frozen=True, slots=True)
class Command:
    name: str
    handler: Handler
    help: Help | None = None


class CommandTable:
    """Maps command names to handlers and their help text."""

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}

    def register(self, name: str, handler: Handler, short_help: str | None = None) -> Command:
        help_ = Help.of(short_help) if short_help is not None else None
        command = Command(name=name, handler=handler, help=help_)
        self._commands[name] = command
        return command

    def set_full_help(self, name: str, text: str) -> None:
        command = self._commands.get(name)
        if command is None or command.help is None:
            raise CommandRegistryError(f"No help registered for command {name!r}")
        command.help.full = text.strip("\n")

    def lookup(self, name: str) -> Command | None:
        return self._commands.get(name)

    def help_for(self, name: str) -> Help | None:
        command = self._commands.get(name)
        return command.help if command is not None else None

    def list_all(self) -> list[tuple[str, str]]:
        """(name, short help) for every documented command, sorted by name."""
        return [
            (name, command.help.short)
            for name, command in sorted(self._commands.items())
            if command.help is not None
        ]
