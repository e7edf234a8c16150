"""Work queues for deferred command work.

Commands never wait on the social network inline. They wrap the slow part
in a Task and put it on one of two queues: the interactive queue for
local work that should stay responsive, and the network queue for calls
to the social-media service. Each queue is FIFO and served by its own
worker pool, so a stuck network call never holds up interactive work.
"""

from __future__ import annotations

import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Literal

import anyio
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

from .logging import get_logger

logger = get_logger(__name__)

QueueClass = Literal["interactive", "network"]


@dataclass(frozen=True, slots=True)
class Task:
    """One unit of deferred work, executed exactly once."""

    queue: QueueClass
    label: str
    identity: str
    run: Callable[[], Awaitable[None]]


class WorkQueue:
    """FIFO queue served by a fixed pool of workers.

    Usage:
        queue = WorkQueue("network", workers=2)

        async with anyio.create_task_group() as tg:
            tg.start_soon(queue.run)
            queue.put("post", identity, do_post)
            ...
            queue.close()
    """

    def __init__(self, name: QueueClass, *, workers: int = 1) -> None:
        if workers < 1:
            raise ValueError("workers must be >= 1")
        self.name: QueueClass = name
        self.workers = workers
        self._send: MemoryObjectSendStream[Task]
        self._receive: MemoryObjectReceiveStream[Task]
        self._send, self._receive = anyio.create_memory_object_stream(math.inf)
        self._pending = 0
        self._idle: anyio.Event | None = None

    @property
    def pending(self) -> int:
        """Tasks enqueued but not yet finished."""
        return self._pending

    def put(
        self, label: str, identity: str, run: Callable[[], Awaitable[None]]
    ) -> Task:
        """Enqueue work without blocking. Returns the queued Task."""
        task = Task(queue=self.name, label=label, identity=identity, run=run)
        self._send.send_nowait(task)
        if self._pending == 0:
            self._idle = anyio.Event()
        self._pending += 1
        logger.debug(
            "queue.enqueued", queue=self.name, task=label, identity=identity
        )
        return task

    def close(self) -> None:
        """Stop accepting work; workers exit once the backlog drains."""
        self._send.close()

    async def join(self) -> None:
        """Wait until every task enqueued so far has run."""
        if self._pending == 0 or self._idle is None:
            return
        await self._idle.wait()

    async def run(self) -> None:
        """Serve the queue until it is closed and drained."""
        async with anyio.create_task_group() as tg:
            for index in range(self.workers):
                tg.start_soon(self._worker, index)

    async def _worker(self, index: int) -> None:
        async for task in self._receive:
            await self._execute(task, index)

    async def _execute(self, task: Task, index: int) -> None:
        try:
            await task.run()
        except Exception:
            logger.exception(
                "queue.task_failed",
                queue=self.name,
                worker=index,
                task=task.label,
                identity=task.identity,
            )
        finally:
            self._pending -= 1
            if self._pending == 0 and self._idle is not None:
                self._idle.set()


@dataclass(slots=True)
class WorkQueues:
    """The interactive and network queue handles owned by the host."""

    interactive: WorkQueue
    network: WorkQueue

    @classmethod
    def create(
        cls, *, interactive_workers: int = 1, network_workers: int = 1
    ) -> WorkQueues:
        return cls(
            interactive=WorkQueue("interactive", workers=interactive_workers),
            network=WorkQueue("network", workers=network_workers),
        )

    async def run(self) -> None:
        async with anyio.create_task_group() as tg:
            tg.start_soon(self.interactive.run)
            tg.start_soon(self.network.run)

    def close(self) -> None:
        self.interactive.close()
        self.network.close()

    async def join(self) -> None:
        await self.interactive.join()
        await self.network.join()
