"""Services handed to every command handler."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..gateway import UserGateway
from ..logging import get_logger
from ..model import Credentials, User
from ..queues import Task, WorkQueues
from ..settings import BotSettings
from ..social import ClientFactory, SocialClient
from ..transport import ChatTransport

if TYPE_CHECKING:
    from .registry import CommandTable

logger = get_logger(__name__)

LOGIN_REQUIRED = "I don't know your username or password.  Use twlogin to set creds."


@dataclass(slots=True)
class CommandContext:
    """Context passed to a command handler.

    Provides access to:
    - The command table (for help lookups)
    - The user state gateway
    - Outbound delivery
    - The interactive and network queues
    - The social-media client factory
    """

    table: CommandTable
    gateway: UserGateway
    transport: ChatTransport
    queues: WorkQueues
    clients: ClientFactory
    settings: BotSettings

    async def reply(self, user: User, text: str) -> None:
        await self.transport.deliver(user.identity, text)

    def client(self, credentials: Credentials | None = None) -> SocialClient:
        return self.clients(credentials)

    def interactive(
        self, label: str, user: User, run: Callable[[], Awaitable[None]]
    ) -> Task:
        return self.queues.interactive.put(label, user.identity, run)

    def network(
        self, label: str, user: User, run: Callable[[], Awaitable[None]]
    ) -> Task:
        return self.queues.network.put(label, user.identity, run)

    async def require_login(self, user: User) -> Credentials | None:
        """Return the user's credentials, replying with a login hint if absent."""
        credentials = self.gateway.credentials(user)
        if credentials is None:
            await self.reply(user, LOGIN_REQUIRED)
        return credentials
