from dataclasses import dataclass, replace
from typing import Any

from bayeux.exceptions import ProtocolError

HANDSHAKE_CHANNEL = "/meta/handshake"
CONNECT_CHANNEL = "/meta/connect"
SUBSCRIBE_CHANNEL = "/meta/subscribe"
DISCONNECT_CHANNEL = "/meta/disconnect"

# Python attribute name -> wire field name
_WIRE_FIELDS = {
    "channel": "channel",
    "id": "id",
    "client_id": "clientId",
    "subscription": "subscription",
    "data": "data",
    "successful": "successful",
    "error": "error",
    "advice": "advice",
    "ext": "ext",
    "version": "version",
    "supported_connection_types": "supportedConnectionTypes",
    "connection_type": "connectionType",
}


@dataclass(frozen=True)
class Message:
    """A Bayeux protocol message.

    This class represents every record exchanged with the server: handshake,
    connect, subscribe, publish, disconnect requests, their replies, and the
    application messages delivered by long-polling.

    Messages are immutable. Build a new one, or use :meth:`with_ext`, to
    change a field.

    Attributes:
    ----------
        channel (str): The message channel (e.g., "/meta/handshake")
        id (str, optional): Message identifier assigned by the sender
        client_id (str, optional): Session id from the handshake
        subscription (str, optional): Channel named by a subscribe request
        data (Dict[str, Any], optional): Message payload
        successful (bool, optional): Success flag on meta replies
        error (str, optional): Error text from the server
        advice (Dict[str, Any], optional): Server advice (carried, not acted on)
        ext (Dict[str, Any], optional): Extension data
        version (str, optional): Protocol version (handshake only)
        supported_connection_types (List[str], optional): Transports offered
        connection_type (str, optional): Transport used by a connect request

    Example:
    -------
        >>> msg = Message("/chat/public", data={"text": "Hello"})
        >>> msg.to_dict()
        {'channel': '/chat/public', 'data': {'text': 'Hello'}}

    """

    channel: str
    id: str | None = None
    client_id: str | None = None
    subscription: str | None = None
    data: dict[str, Any] | None = None
    successful: bool | None = None
    error: str | None = None
    advice: dict[str, Any] | None = None
    ext: dict[str, Any] | None = None
    version: str | None = None
    supported_connection_types: list[str] | None = None
    connection_type: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Message":
        """Create a Message from its wire representation.

        Unknown fields are ignored.

        Raises:
        ------
            ProtocolError: If ``data`` is not an object, has no string channel or
                carries a non-boolean successful flag

        Example:
        -------
            >>> Message.from_dict({"channel": "/meta/connect", "clientId": "123"})
            Message(channel='/meta/connect', id=None, client_id='123', ...)

        """
        if not isinstance(data, dict):
            raise ProtocolError(f"Invalid message format: {type(data).__name__}")
        channel = data.get("channel")
        if not isinstance(channel, str):
            raise ProtocolError(f"Message has no channel: {data!r}")

        kwargs = {
            attr: data[wire]
            for attr, wire in _WIRE_FIELDS.items()
            if attr != "channel" and wire in data
        }
        successful = kwargs.get("successful")
        if successful is not None and not isinstance(successful, bool):
            raise ProtocolError(f"Invalid successful flag: {successful!r}")
        return cls(channel=channel, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire representation, leaving out absent fields."""
        return {
            wire: getattr(self, attr)
            for attr, wire in _WIRE_FIELDS.items()
            if getattr(self, attr) is not None
        }

    def with_ext(self, ext: dict[str, Any]) -> "Message":
        """Return a copy with ``ext`` merged into the existing extension data."""
        merged = dict(self.ext or {})
        merged.update(ext)
        return replace(self, ext=merged)

    @property
    def is_handshake(self) -> bool:
        return self.channel == HANDSHAKE_CHANNEL

    @property
    def is_connect(self) -> bool:
        return self.channel == CONNECT_CHANNEL

    @property
    def is_subscribe(self) -> bool:
        return self.channel == SUBSCRIBE_CHANNEL

    @property
    def is_disconnect(self) -> bool:
        return self.channel == DISCONNECT_CHANNEL

    @property
    def is_meta(self) -> bool:
        """Check if message is a meta channel message."""
        return self.channel.startswith("/meta/")

    @property
    def is_error(self) -> bool:
        """Check if message represents an error.

        Returns
        -------
            bool: True if message has error text or successful=False

        """
        return bool(self.error) or self.successful is False
