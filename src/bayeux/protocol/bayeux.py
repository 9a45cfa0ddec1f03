import itertools
import logging
from collections.abc import Sequence
from typing import Any

from bayeux.exceptions import HandshakeError, ProtocolError

from .message import (
    CONNECT_CHANNEL,
    DISCONNECT_CHANNEL,
    HANDSHAKE_CHANNEL,
    SUBSCRIBE_CHANNEL,
    Message,
)

logger = logging.getLogger(__name__)


class BayeuxProtocol:
    """Implements the message-level rules of the Bayeux protocol.

    This class owns the client id obtained by the handshake, builds every
    outbound message, and checks the replies. It performs no I/O.

    Attributes:
    ----------
        VERSION (str): Protocol version announced in the handshake
        CONNECTION_TYPE (str): The only supported connection type
        client_id (str): Session id from the last handshake, or None

    Example:
    -------
        >>> protocol = BayeuxProtocol()
        >>> handshake = protocol.create_handshake_message()
        >>> protocol.process_handshake_response(replies)
        >>> connect = protocol.create_connect_message()

    """

    VERSION = "1.0"
    CONNECTION_TYPE = "long-polling"

    def __init__(self) -> None:
        """Initialize protocol state."""
        self._client_id: str | None = None
        self._ids = itertools.count(1)

    @property
    def client_id(self) -> str | None:
        return self._client_id

    @property
    def is_handshaken(self) -> bool:
        """Check if a handshake has stored a client id."""
        return self._client_id is not None

    def _next_id(self) -> str:
        return str(next(self._ids))

    def create_handshake_message(self) -> Message:
        """Create handshake message. Carries no client id."""
        return Message(
            channel=HANDSHAKE_CHANNEL,
            id=self._next_id(),
            version=self.VERSION,
            supported_connection_types=[self.CONNECTION_TYPE],
        )

    def create_connect_message(self) -> Message:
        """Create the long-poll connect message."""
        return Message(
            channel=CONNECT_CHANNEL,
            id=self._next_id(),
            client_id=self._client_id,
            connection_type=self.CONNECTION_TYPE,
        )

    def create_subscribe_message(self, subscription: str) -> Message:
        """Create subscription message according to Bayeux protocol.

        Args:
        ----
            subscription: Channel to subscribe to

        Returns:
        -------
            Message: Subscribe message ready to send

        """
        return Message(
            channel=SUBSCRIBE_CHANNEL,
            id=self._next_id(),
            client_id=self._client_id,
            subscription=subscription,
        )

    def create_publish_message(
        self, channel: str, data: dict[str, Any] | None
    ) -> Message:
        """Create a publish message."""
        return Message(
            channel=channel, id=self._next_id(), client_id=self._client_id, data=data
        )

    def create_disconnect_message(self) -> Message:
        """Create disconnect message according to Bayeux protocol."""
        return Message(
            channel=DISCONNECT_CHANNEL, id=self._next_id(), client_id=self._client_id
        )

    def process_handshake_response(self, replies: Sequence[Message]) -> str:
        """Process handshake reply batch from server.

        Args:
        ----
            replies: Messages returned for the handshake request

        Returns:
        -------
            str: The client id now stored

        Raises:
        ------
            HandshakeError: If the batch is empty, the reply is unsuccessful,
                or it carries no client id

        """
        if not replies:
            raise HandshakeError("Handshake failed: empty response")

        response = replies[0]
        if response.successful is False:
            raise HandshakeError(
                f"Handshake failed: {response.error or 'Unknown error'}"
            )
        if not response.client_id:
            raise HandshakeError("No client_id in handshake response")

        self._client_id = response.client_id
        logger.debug(f"Handshake assigned client id {self._client_id}")
        return self._client_id

    def validate_response(
        self,
        replies: Sequence[Message],
        operation: str,
        error_cls: type[ProtocolError] = ProtocolError,
    ) -> Message:
        """Check that the first reply is explicitly successful.

        Args:
        ----
            replies: Messages returned for the request
            operation: Name used in the error text (e.g. "Publish")
            error_cls: ProtocolError subclass to raise

        Returns:
        -------
            Message: The successful reply

        Raises:
        ------
            ProtocolError: If there is no reply or ``successful`` is not True

        """
        if not replies:
            raise error_cls(f"{operation} failed: empty response")

        response = replies[0]
        if response.successful is not True:
            error_msg = response.error or "Unknown error"
            raise error_cls(f"{operation} failed: {error_msg}")
        return response

    def reset(self) -> None:
        """Forget the client id so a new handshake can start over."""
        self._client_id = None

    @staticmethod
    def validate_channel(channel: str) -> None:
        """Validate an application channel name.

        Raises
        ------
            ValueError: If the name is empty, lacks the leading /,
                or has empty segments

        """
        if not channel:
            raise ValueError("Channel name cannot be empty")

        if not channel.startswith("/"):
            raise ValueError("Channel name must start with /")

        if "" in channel.split("/")[1:]:
            raise ValueError("Channel segments cannot be empty")
