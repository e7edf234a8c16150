"""Command dispatch and the host delivery loop."""

from __future__ import annotations

from collections.abc import AsyncIterable

import anyio

from .commands import CommandContext, CommandTable, build_command_table, post_command
from .commands.registry import Handler
from .gateway import UserGateway
from .logging import bind_dispatch_context, clear_context, get_logger
from .model import User
from .queues import WorkQueues
from .settings import BotSettings
from .social import ClientFactory
from .store import UserStore
from .transport import ChatTransport, IncomingMessage, split_command

logger = get_logger(__name__)


def unknown_command_text(command: str) -> str:
    return "\n".join(
        [
            f"I don't understand '{command}'.",
            "Send 'help' for known commands.",
            "If you intended this to be posted, see 'help autopost'",
        ]
    )


class Dispatcher:
    """Resolves input to a command and runs it for one user.

    Unknown input is posted when the user has autopost on, and answered
    with a short guidance message otherwise. Handler failures are logged
    and never escape ``dispatch``.
    """

    def __init__(self, ctx: CommandContext, *, fallback: Handler = post_command) -> None:
        self.ctx = ctx
        self._fallback = fallback

    @property
    def table(self) -> CommandTable:
        return self.ctx.table

    async def _notify_composing(self, user: User) -> None:
        try:
            await self.ctx.transport.notify_composing(user.identity)
        except Exception as e:
            logger.debug(
                "dispatch.composing_failed", identity=user.identity, error=str(e)
            )

    async def dispatch(self, user: User, command: str, arg: str) -> None:
        await self._notify_composing(user)
        name = command.lower()
        bind_dispatch_context(identity=user.identity, command=name)
        try:
            entry = self.table.lookup(name)
            if entry is not None:
                await entry.handler(self.ctx, user, arg)
            elif user.auto_post:
                logger.debug("dispatch.autopost")
                await self._fallback(self.ctx, user, f"{command} {arg}".strip())
            else:
                await self.ctx.reply(user, unknown_command_text(command))
        except Exception:
            logger.exception("dispatch.handler_failed")
        finally:
            clear_context()

    async def handle_message(self, message: IncomingMessage) -> None:
        """Load the sender's state and dispatch one inbound message."""
        command, arg = split_command(message.text)
        if not command:
            logger.debug("dispatch.empty_message", identity=message.identity)
            return
        try:
            user = await self.ctx.gateway.load(message.identity)
            if message.status is not None:
                await self.ctx.gateway.update(user, status=message.status)
        except Exception:
            logger.exception("dispatch.load_failed", identity=message.identity)
            return
        await self.dispatch(user, command, arg)


def build_dispatcher(
    *,
    store: UserStore,
    transport: ChatTransport,
    clients: ClientFactory,
    settings: BotSettings | None = None,
    queues: WorkQueues | None = None,
) -> Dispatcher:
    """Wire the command table, gateway and queues into a Dispatcher."""
    if settings is None:
        settings = BotSettings()
    if queues is None:
        queues = WorkQueues.create(
            interactive_workers=settings.interactive_workers,
            network_workers=settings.network_workers,
        )
    ctx = CommandContext(
        table=build_command_table(),
        gateway=UserGateway(store, transport),
        transport=transport,
        queues=queues,
        clients=clients,
        settings=settings,
    )
    return Dispatcher(ctx)


async def serve(
    dispatcher: Dispatcher, messages: AsyncIterable[IncomingMessage]
) -> None:
    """Dispatch messages one at a time while the queue workers run.

    Returns once the message source is exhausted and both queues have
    drained.
    """
    queues = dispatcher.ctx.queues
    async with anyio.create_task_group() as tg:
        tg.start_soon(queues.run)
        try:
            async for message in messages:
                await dispatcher.handle_message(message)
        finally:
            queues.close()
    logger.info("serve.stopped")
