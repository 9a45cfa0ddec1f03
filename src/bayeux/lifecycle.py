import asyncio
import logging
from collections.abc import Awaitable, Callable
from contextlib import suppress
from enum import Enum

from .exceptions import AlreadyRunningError

logger = logging.getLogger(__name__)

LoopFactory = Callable[[asyncio.Event], Awaitable[None]]


class PollState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class LifecycleController:
    """Starts and stops the background poll loop.

    At most one loop runs at a time. Every start creates a fresh
    cancellation event for the new loop; stop sets it exactly once. The loop
    is expected to check the event between iterations and return.

    Example:
    -------
        >>> controller = LifecycleController()
        >>> await controller.start(poll_loop.run)
        >>> controller.state
        <PollState.RUNNING: 'running'>
        >>> await controller.stop()
        True

    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._state = PollState.IDLE
        self._cancelled: asyncio.Event | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> PollState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is PollState.RUNNING

    @property
    def task(self) -> asyncio.Task[None] | None:
        """Task of the most recently started loop, finished or not."""
        return self._task

    async def start(self, loop_factory: LoopFactory) -> asyncio.Task[None]:
        """Spawn ``loop_factory(cancelled)`` as a task and return it at once.

        A loop that was stopped but is still finishing its last exchange is
        waited for inside the new task, so the new loop body never overlaps
        with the old one.

        Raises
        ------
            AlreadyRunningError: If a loop is already running

        """
        async with self._lock:
            if self._state is PollState.RUNNING:
                raise AlreadyRunningError("Poll loop already running")

            self._cancelled = asyncio.Event()
            self._state = PollState.RUNNING
            previous = self._task
            if previous is not None and previous.done():
                previous = None
            task = asyncio.create_task(
                self._run_after(previous, loop_factory, self._cancelled)
            )
            task.add_done_callback(self._handle_task_done)
            self._task = task

        logger.info("Poll loop started")
        return task

    @staticmethod
    async def _run_after(
        previous: asyncio.Task[None] | None,
        loop_factory: LoopFactory,
        cancelled: asyncio.Event,
    ) -> None:
        if previous is not None:
            # Cancelling this task cancels previous too. Its failure was
            # already logged by _handle_task_done.
            with suppress(Exception):
                await previous
        await loop_factory(cancelled)

    async def stop(self) -> bool:
        """Signal the running loop to exit after its current exchange.

        Returns
        -------
            bool: False if no loop was running

        """
        async with self._lock:
            if self._state is not PollState.RUNNING:
                return False
            assert self._cancelled is not None
            self._cancelled.set()
            self._state = PollState.IDLE

        logger.info("Poll loop stopping")
        return True

    async def join(self) -> None:
        """Wait for the most recently started loop task to finish."""
        if self._task is not None:
            with suppress(asyncio.CancelledError):
                await self._task

    async def terminate(self) -> None:
        """Stop the loop without waiting for the exchange in flight."""
        await self.stop()
        if self._task is not None and not self._task.done():
            self._task.cancel()
        await self.join()

    def _handle_task_done(self, task: asyncio.Task[None]) -> None:
        """Return to IDLE when a loop exits on its own.

        Runs on the event loop without awaiting, so it is atomic with
        respect to start() and stop().
        """
        if task is self._task and self._state is PollState.RUNNING:
            self._state = PollState.IDLE
            logger.info("Poll loop exited")

        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Poll loop failed: {exc}")
