import asyncio
import logging

import aiohttp
from aiohttp import ClientSession, ClientTimeout

from bayeux.exceptions import TransportError

from .base import Transport

logger = logging.getLogger(__name__)


class HttpTransport(Transport):
    """HTTP POST transport.

    Every call to :meth:`send` is one POST of a JSON array to the endpoint.
    Long-polling is driven from above by repeatedly sending connect messages;
    the transport just waits for each reply.

    Attributes:
    ----------
        CONTENT_TYPE (str): Content type of every request body
        url (str): Server URL to connect to
        timeout (float, optional): Total seconds allowed per request

    Example:
    -------
        >>> transport = HttpTransport("http://server.com/bayeux")
        >>> body = await transport.send(b'[{"channel": "/meta/handshake"}]')
        >>> await transport.close()

    Note:
    ----
        - Uses aiohttp for HTTP communication
        - The session is created on first use, inside the running event loop
        - No timeout is applied unless one is given

    """

    CONTENT_TYPE = "application/json"

    def __init__(self, url: str, timeout: float | None = None) -> None:
        """Initialize HTTP transport.

        Args:
        ----
            url: The Bayeux server URL
            timeout: Total seconds allowed per request, None for no limit

        """
        super().__init__(url)
        self.timeout = timeout
        self._session: ClientSession | None = None

    def _get_session(self) -> ClientSession:
        if self._session is None or self._session.closed:
            self._session = ClientSession(timeout=ClientTimeout(total=self.timeout))
        return self._session

    async def send(self, body: bytes) -> bytes:
        """Send message batch to server using HTTP POST.

        Args:
        ----
            body: Encoded JSON array of messages

        Returns:
        -------
            bytes: Response body

        Raises:
        ------
            TransportError: On connection failure, timeout or non-2xx status

        """
        session = self._get_session()
        try:
            async with session.post(
                self.url, data=body, headers={"Content-Type": self.CONTENT_TYPE}
            ) as response:
                response.raise_for_status()
                return await response.read()
        except asyncio.TimeoutError as e:
            raise TransportError("Request timed out") from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Failed to send message: {e}") from e

    async def close(self) -> None:
        """Close the HTTP session.

        Raises
        ------
            TransportError: If the session cannot be closed

        """
        if self._session is None:
            return
        try:
            if not self._session.closed:
                await self._session.close()
        except Exception as e:
            logger.error(f"Error during HTTP transport close: {e}")
            raise TransportError(f"Failed to close: {e}") from e
        finally:
            self._session = None
        logger.debug("HTTP transport closed")
