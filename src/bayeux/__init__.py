"""pybayeux - An asynchronous Python client for the Bayeux pub/sub protocol.

Basic usage:
    >>> from bayeux import BayeuxClient
    >>> client = BayeuxClient("http://your-server/bayeux")
    >>> await client.handshake()
    >>> unsubscribe = await client.subscribe("/channel", callback)
    >>> await client.connect()
"""

from .client import BayeuxClient
from .config import ClientConfig
from .exceptions import (
    AlreadyRunningError,
    AuthenticationError,
    BayeuxError,
    EncodingError,
    HandshakeError,
    ProtocolError,
    SubscriptionError,
    TransportError,
)
from .extensions.authentication import AuthenticationExtension
from .extensions.base import Extension
from .lifecycle import PollState
from .protocol import Message
from .transport import HttpTransport, Transport

__version__ = "0.1.0"
__all__ = [
    # Main client
    "BayeuxClient",
    "ClientConfig",
    "PollState",
    # Protocol
    "Message",
    # Transports
    "Transport",
    "HttpTransport",
    # Extensions
    "Extension",
    "AuthenticationExtension",
    # Exceptions
    "BayeuxError",
    "EncodingError",
    "TransportError",
    "ProtocolError",
    "HandshakeError",
    "SubscriptionError",
    "AlreadyRunningError",
    "AuthenticationError",
]
