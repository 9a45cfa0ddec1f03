import logging
from collections.abc import Callable
from types import TracebackType
from typing import Any

from .config import ClientConfig
from .dispatch import Dispatcher
from .exceptions import BayeuxError
from .extensions.base import Extension
from .lifecycle import LifecycleController, PollState
from .poller import PollLoop
from .protocol.bayeux import BayeuxProtocol
from .registry import Callback, SubscriptionRegistry
from .session import Session
from .transport.base import Transport
from .transport.http import HttpTransport

logger = logging.getLogger(__name__)


class BayeuxClient:
    """A client for the Bayeux publish-subscribe protocol over HTTP long-polling.

    The client performs the handshake, keeps the local subscription registry,
    runs a background long-poll loop that delivers messages to registered
    handlers, and publishes on behalf of the caller.

    Args:
    ----
        url: The Bayeux server endpoint (e.g., "http://server.com/bayeux")
        transport: Transport to use; an HttpTransport for ``url`` by default
        config: Retry and polling settings

    Attributes:
    ----------
        url: The Bayeux server endpoint
        client_id: Session id from the handshake, None before it
        running: Whether the poll loop is running

    Example:
    -------
        >>> async with BayeuxClient("http://server.com/bayeux") as client:
        ...     await client.handshake()
        ...     async def handler(message):
        ...         print(f"Received: {message.data}")
        ...     unsubscribe = await client.subscribe("/channel", handler)
        ...     await client.connect()
        ...     await client.publish("/channel", {"message": "Hello!"})
        ...     await client.disconnect()

    """

    def __init__(
        self,
        url: str,
        transport: Transport | None = None,
        config: ClientConfig | None = None,
    ) -> None:
        self._url = url
        self._config = config or ClientConfig()
        if transport is None:
            transport = HttpTransport(url, timeout=self._config.request_timeout)
        self._transport = transport
        self._session = Session(transport, BayeuxProtocol())
        self._registry = SubscriptionRegistry()
        self._dispatcher = Dispatcher(self._registry)
        self._poll_loop = PollLoop(self._session, self._dispatcher, self._config)
        self._lifecycle = LifecycleController()

    @property
    def url(self) -> str:
        return self._url

    @property
    def client_id(self) -> str | None:
        return self._session.client_id

    @property
    def running(self) -> bool:
        return self._lifecycle.running

    @property
    def state(self) -> PollState:
        return self._lifecycle.state

    @property
    def subscriptions(self) -> SubscriptionRegistry:
        """The local channel -> handler registry."""
        return self._registry

    async def handshake(self) -> str:
        """Perform the handshake and store the client id.

        No retry is attempted; the caller decides whether to try again.

        Returns:
        -------
            str: The client id assigned by the server

        Raises:
        ------
            HandshakeError: If the reply is empty, unsuccessful or lacks a client id
            TransportError: If the exchange fails

        """
        return await self._session.handshake()

    async def subscribe(self, channel: str, callback: Callback) -> Callable[[], None]:
        """Register a handler on a channel and subscribe to it on the server.

        The handler is registered locally before the request is sent, so it can
        receive messages slightly ahead of the server's acknowledgement. If the
        request fails the registration is kept; the raised error carries an
        ``unsubscribe`` attribute that removes it.

        Args:
        ----
            channel: The channel to subscribe to (e.g., "/foo")
            callback: Called with every message on ``channel``. Coroutine
                functions are awaited.

        Returns:
        -------
            Callable[[], None]: Removes this registration. Local only and safe
            to call more than once.

        Raises:
        ------
            SubscriptionError: If the server does not acknowledge the subscription
            TransportError: If the exchange fails
            ValueError: If channel name is invalid

        Example:
        -------
            >>> async def handler(message):
            ...     print(f"Received: {message.data}")
            >>> unsubscribe = await client.subscribe("/foo", handler)
            >>> unsubscribe()

        """
        BayeuxProtocol.validate_channel(channel)

        entry = self._registry.add(channel, callback)
        unsubscribe = self._registry.unsubscriber(entry)
        try:
            await self._session.subscribe(channel)
        except BayeuxError as e:
            e.unsubscribe = unsubscribe
            raise
        return unsubscribe

    async def publish(self, channel: str, data: dict[str, Any] | None) -> None:
        """Publish a message to a channel.

        Args:
        ----
            channel: The channel to publish to
            data: The message payload (must be JSON-serializable)

        Raises:
        ------
            ProtocolError: If the server reports failure, with its error text
            EncodingError: If data cannot be JSON serialized
            TransportError: If the exchange fails
            ValueError: If channel name is invalid

        Example:
        -------
            >>> await client.publish("/foo", {"message": "Hello!"})

        """
        BayeuxProtocol.validate_channel(channel)
        await self._session.publish(channel, data)

    async def connect(self) -> None:
        """Start the background long-poll loop and return immediately.

        Raises
        ------
            AlreadyRunningError: If the loop is already running

        """
        await self._lifecycle.start(self._poll_loop.run)

    async def disconnect(self) -> None:
        """Stop the poll loop and send the disconnect request.

        The request is sent whether or not the loop was running. An exchange
        already in flight in the loop completes, but no new one is started.

        Raises
        ------
            ProtocolError: If the server reports failure
            TransportError: If the exchange fails

        """
        await self._lifecycle.stop()
        await self._session.disconnect()

    async def close(self) -> None:
        """Cancel the poll loop, wait for running handlers and close the transport.

        Sends nothing to the server; call :meth:`disconnect` first for a
        graceful exit.
        """
        await self._lifecycle.terminate()
        await self._dispatcher.drain()
        await self._transport.close()

    def add_extension(self, extension: Extension) -> None:
        """Add an extension to the client's extension pipeline.

        Example:
        -------
            >>> client.add_extension(AuthenticationExtension("token"))

        """
        self._session.add_extension(extension)

    def remove_extension(self, extension: Extension) -> None:
        self._session.remove_extension(extension)

    async def __aenter__(self) -> "BayeuxClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()
