import asyncio
import logging
from contextlib import suppress

from .config import ClientConfig
from .dispatch import Dispatcher
from .session import Session

logger = logging.getLogger(__name__)


class PollLoop:
    """Long-polling loop that feeds inbound messages to the dispatcher.

    Each iteration performs one ``/meta/connect`` exchange and dispatches the
    reply batch in order. A failed exchange is logged and retried after
    ``config.retry_delay``; nothing is ever raised to the caller. The
    cancellation event is checked between iterations only, so an exchange
    in flight always runs to completion first.

    Args:
    ----
        session: Session used for the connect exchanges
        dispatcher: Receives every message of every reply batch
        config: Retry delay, poll interval and retry ceiling

    """

    def __init__(
        self,
        session: Session,
        dispatcher: Dispatcher,
        config: ClientConfig | None = None,
    ) -> None:
        self._session = session
        self._dispatcher = dispatcher
        self._config = config or ClientConfig()
        self.exchanges = 0

    async def run(self, cancelled: asyncio.Event) -> None:
        """Poll until ``cancelled`` is set or the retry ceiling is reached."""
        failures = 0
        while not cancelled.is_set():
            self.exchanges += 1
            try:
                messages = await self._session.poll()
            except Exception as e:
                failures += 1
                logger.warning(f"Polling error: {e}")
                max_retries = self._config.max_retries
                if max_retries is not None and failures >= max_retries:
                    logger.error(f"Polling stopped after {failures} failed attempts")
                    return
                await self._pause(cancelled, self._config.retry_delay)
                continue

            failures = 0
            for message in messages:
                self._dispatcher.dispatch(message)
            await self._pause(cancelled, self._config.interval)

        logger.debug("Poll loop cancelled")

    @staticmethod
    async def _pause(cancelled: asyncio.Event, delay: float) -> None:
        """Sleep ``delay`` seconds, returning early once ``cancelled`` is set."""
        if delay <= 0:
            await asyncio.sleep(0)
            return
        with suppress(asyncio.TimeoutError):
            await asyncio.wait_for(cancelled.wait(), timeout=delay)
