import asyncio
import inspect
import logging

from .protocol.message import Message
from .registry import HandlerEntry, SubscriptionRegistry

logger = logging.getLogger(__name__)


class Dispatcher:
    """Delivers inbound messages to the handlers registered for their channel.

    Each handler call runs in its own task so a slow or failing handler
    cannot hold up the poll loop or the other handlers. Exceptions raised by
    a handler are logged and dropped; the message still counts as delivered.

    Args:
    ----
        registry: Where handlers are looked up

    """

    def __init__(self, registry: SubscriptionRegistry) -> None:
        self._registry = registry
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Number of handler tasks that have not finished yet."""
        return len(self._tasks)

    def dispatch(self, message: Message) -> int:
        """Schedule every handler registered on ``message.channel``.

        Must be called from inside the running event loop. Handlers start in
        registration order.

        Returns
        -------
            int: Number of handler tasks scheduled

        """
        entries = self._registry.handlers(message.channel)
        if not entries:
            logger.debug(f"No handlers for {message.channel}, message dropped")
            return 0

        for entry in entries:
            task = asyncio.create_task(self._invoke(entry, message))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        return len(entries)

    async def _invoke(self, entry: HandlerEntry, message: Message) -> None:
        try:
            result = entry.callback(message)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception(
                f"Error in subscription callback {entry.id} on {entry.channel}"
            )

    async def drain(self) -> None:
        """Wait until every scheduled handler task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
