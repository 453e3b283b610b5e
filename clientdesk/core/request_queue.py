"""
Concurrency-limited request queue.

Every call to the hosted store goes through the process-wide ``request_queue``
so that bursts of reads and writes never put more than a handful of requests
in flight at once.
"""

import asyncio
import logging
from collections import deque
from typing import Any, Awaitable, Callable, Deque, Set, Tuple, TypeVar

from clientdesk.core.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

Operation = Callable[[], Awaitable[Any]]


class RequestQueue:
    """
    FIFO queue that runs at most ``concurrency`` operations at a time.

    After an operation finishes, its slot stays taken for ``delay`` seconds
    before the next waiting operation is dispatched. Each operation's result
    or exception is delivered to its own caller only.
    """

    def __init__(self, concurrency: int = 2, delay: float = 0.1):
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.concurrency = concurrency
        self.delay = delay
        self._queue: Deque[Tuple[Operation, asyncio.Future]] = deque()
        self._active = 0
        self._tasks: Set[asyncio.Task] = set()

    @property
    def active_count(self) -> int:
        return self._active

    @property
    def pending_count(self) -> int:
        return len(self._queue)

    async def add(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Enqueue a zero-argument coroutine function and wait for its outcome.

        Args:
            operation: Callable returning an awaitable

        Returns:
            Whatever the operation returns; its exception is re-raised here.
        """
        future = asyncio.get_running_loop().create_future()
        self._queue.append((operation, future))
        self._process_queue()
        return await future

    def _process_queue(self) -> None:
        while self._queue and self._active < self.concurrency:
            operation, future = self._queue.popleft()
            if future.cancelled():
                continue
            self._active += 1
            task = asyncio.ensure_future(self._run(operation, future))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _run(self, operation: Operation, future: asyncio.Future) -> None:
        try:
            result = await operation()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as e:
            logger.debug(f"Queued operation failed: {e}")
            if not future.done():
                future.set_exception(e)
        else:
            if not future.done():
                future.set_result(result)
        finally:
            try:
                await asyncio.sleep(self.delay)
            finally:
                self._active -= 1
                self._process_queue()


request_queue = RequestQueue(
    concurrency=settings.REQUEST_QUEUE_CONCURRENCY,
    delay=settings.REQUEST_QUEUE_DELAY_MS / 1000,
)
