"""Chat transport boundary.

The transport (session delivery, presence, typing hints) is owned by the
host process. The command core only needs the narrow protocol below.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .model import User


@dataclass(frozen=True, slots=True)
class IncomingMessage:
    """One inbound chat message from a user's session."""

    identity: str
    text: str
    # Presence status reported with the message, if the transport tracks it
    status: str | None = None


class ChatTransport(Protocol):
    """Protocol for outbound delivery to a chat session."""

    async def deliver(self, identity: str, text: str) -> None:
        """Send text to a session. No delivery confirmation is expected."""
        ...

    async def notify_composing(self, identity: str) -> None:
        """Show a typing indicator. Best effort."""
        ...

    async def availability_changed(self, user: User) -> None:
        """Tell the transport the user's active flag changed."""
        ...


def split_command(text: str) -> tuple[str, str]:
    """Split raw input into (command token, argument).

    The first whitespace-delimited token is the command; the remainder,
    stripped, is the argument and may be empty.
    """
    parts = text.strip().split(maxsplit=1)
    if not parts:
        return "", ""
    command = parts[0]
    args = parts[1].strip() if len(parts) > 1 else ""
    return command, args
