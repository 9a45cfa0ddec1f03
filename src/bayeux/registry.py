import itertools
import logging
import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from .protocol.message import Message

logger = logging.getLogger(__name__)

Callback = Callable[[Message], Awaitable[None] | None]


@dataclass(frozen=True)
class HandlerEntry:
    """One registration of a callback on a channel.

    The id is what makes a registration removable: two entries holding the
    same callback on the same channel are still told apart.
    """

    id: int
    channel: str
    callback: Callback


class SubscriptionRegistry:
    """Maps channel names to the handlers registered on them.

    Handlers keep their registration order within a channel. All methods are
    safe to call from any task or thread; dispatch reads an immutable
    snapshot, so registrations made while a batch is being delivered apply
    from the next message on.

    Example:
    -------
        >>> registry = SubscriptionRegistry()
        >>> entry = registry.add("/foo", handler)
        >>> registry.handlers("/foo")
        (HandlerEntry(id=1, channel='/foo', callback=<function handler>),)
        >>> registry.remove(entry)
        True

    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[HandlerEntry]] = {}
        self._lock = threading.Lock()
        self._ids = itertools.count(1)

    def add(self, channel: str, callback: Callback) -> HandlerEntry:
        """Register ``callback`` on ``channel`` and return its entry."""
        with self._lock:
            entry = HandlerEntry(next(self._ids), channel, callback)
            self._handlers.setdefault(channel, []).append(entry)
        logger.debug(f"Registered handler {entry.id} on {channel}")
        return entry

    def remove(self, entry: HandlerEntry) -> bool:
        """Remove exactly ``entry``.

        Returns
        -------
            bool: False if the entry was already gone

        """
        with self._lock:
            entries = self._handlers.get(entry.channel)
            if not entries:
                return False
            remaining = [e for e in entries if e.id != entry.id]
            if len(remaining) == len(entries):
                return False
            if remaining:
                self._handlers[entry.channel] = remaining
            else:
                del self._handlers[entry.channel]
        logger.debug(f"Removed handler {entry.id} from {entry.channel}")
        return True

    def handlers(self, channel: str) -> tuple[HandlerEntry, ...]:
        """Snapshot of the entries on ``channel`` in registration order."""
        with self._lock:
            return tuple(self._handlers.get(channel, ()))

    def channels(self) -> list[str]:
        """Channels with at least one handler."""
        with self._lock:
            return list(self._handlers)

    def count(self, channel: str | None = None) -> int:
        """Number of entries on ``channel``, or in total when omitted."""
        with self._lock:
            if channel is not None:
                return len(self._handlers.get(channel, ()))
            return sum(len(entries) for entries in self._handlers.values())

    def clear(self) -> None:
        with self._lock:
            self._handlers.clear()

    def unsubscriber(self, entry: HandlerEntry) -> Callable[[], None]:
        """Build the idempotent callable that removes ``entry``."""

        def unsubscribe() -> None:
            self.remove(entry)

        return unsubscribe
