import logging
from typing import Any

from .exceptions import BayeuxError, SubscriptionError
from .extensions.base import Extension
from .protocol import BayeuxProtocol, Message, decode_batch, encode_batch
from .transport.base import Transport

logger = logging.getLogger(__name__)


class Session:
    """Single request/response exchanges against one Bayeux endpoint.

    The session holds the client id (through its :class:`BayeuxProtocol`),
    runs every message through the extension pipeline, and turns each
    operation into exactly one transport call. It never retries.

    Args:
    ----
        transport: Transport used for every exchange
        protocol: Protocol state, a fresh one when omitted

    Example:
    -------
        >>> session = Session(HttpTransport("http://server.com/bayeux"))
        >>> await session.handshake()
        'abc123'
        >>> await session.publish("/foo", {"msg": "hello"})

    """

    def __init__(
        self, transport: Transport, protocol: BayeuxProtocol | None = None
    ) -> None:
        self.transport = transport
        self.protocol = protocol or BayeuxProtocol()
        self._extensions: list[Extension] = []

    @property
    def client_id(self) -> str | None:
        return self.protocol.client_id

    def add_extension(self, extension: Extension) -> None:
        self._extensions.append(extension)

    def remove_extension(self, extension: Extension) -> None:
        self._extensions.remove(extension)

    async def _process_outgoing(self, message: Message) -> Message | None:
        """Run ``message`` through the extensions in registration order.

        Returns:
        -------
            Message: The processed message, or None if halted by an extension

        """
        current_message = message
        for extension in self._extensions:
            try:
                result = await extension.outgoing(current_message)
            except BayeuxError:
                raise
            except Exception as e:
                logger.error(f"Extension error processing outgoing message: {e}")
                continue
            if result is None:
                return None
            current_message = result
        return current_message

    async def _process_incoming(self, message: Message) -> Message | None:
        """Run ``message`` through the extensions in reverse order."""
        current_message = message
        for extension in reversed(self._extensions):
            try:
                result = await extension.incoming(current_message)
            except BayeuxError:
                raise
            except Exception as e:
                logger.error(f"Extension error processing incoming message: {e}")
                continue
            if result is None:
                return None
            current_message = result
        return current_message

    async def exchange(self, message: Message) -> list[Message]:
        """Send one message and return the reply batch.

        Raises:
        ------
            BayeuxError: If an extension halts the message
            EncodingError: If the message cannot be serialized
            TransportError: If the request fails or the reply is not JSON
            ProtocolError: If the reply contains something that is not a message

        """
        processed = await self._process_outgoing(message)
        if processed is None:
            raise BayeuxError(f"{message.channel} message halted by extension")

        body = encode_batch([processed])
        logger.debug(f"Sending {processed.channel}: {body!r}")
        replies = decode_batch(await self.transport.send(body))

        incoming = []
        for reply in replies:
            result = await self._process_incoming(reply)
            if result is not None:
                incoming.append(result)
        return incoming

    async def handshake(self) -> str:
        """Perform the handshake and store the client id.

        Returns:
        -------
            str: The client id assigned by the server

        Raises:
        ------
            HandshakeError: If the reply is empty, unsuccessful or has no id
            TransportError: If the exchange fails

        """
        replies = await self.exchange(self.protocol.create_handshake_message())
        client_id = self.protocol.process_handshake_response(replies)
        logger.info(f"Handshake complete, client id {client_id}")
        return client_id

    async def subscribe(self, channel: str) -> None:
        """Ask the server to deliver ``channel`` to this client.

        Raises:
        ------
            SubscriptionError: If the server does not acknowledge the subscription

        """
        replies = await self.exchange(self.protocol.create_subscribe_message(channel))
        self.protocol.validate_response(replies, "Subscription", SubscriptionError)
        logger.info(f"Subscribed to channel: {channel}")

    async def publish(self, channel: str, data: dict[str, Any] | None) -> None:
        """Publish ``data`` on ``channel``.

        Raises:
        ------
            ProtocolError: If the server reports failure; carries its error text

        """
        replies = await self.exchange(
            self.protocol.create_publish_message(channel, data)
        )
        self.protocol.validate_response(replies, "Publish")
        logger.debug(f"Published message to channel: {channel}")

    async def poll(self) -> list[Message]:
        """Perform one long-poll connect exchange and return what arrived."""
        replies = await self.exchange(self.protocol.create_connect_message())
        for reply in replies:
            if reply.is_connect and reply.successful is False:
                logger.warning(f"Connect rejected by server: {reply.error}")
        return replies

    async def disconnect(self) -> None:
        """Tell the server this client is leaving.

        Raises:
        ------
            ProtocolError: If the server reports failure

        """
        replies = await self.exchange(self.protocol.create_disconnect_message())
        self.protocol.validate_response(replies, "Disconnect")
        logger.info("Disconnected from Bayeux server")
