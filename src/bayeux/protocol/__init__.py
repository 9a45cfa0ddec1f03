from .bayeux import BayeuxProtocol
from .codec import decode_batch, encode_batch
from .message import (
    CONNECT_CHANNEL,
    DISCONNECT_CHANNEL,
    HANDSHAKE_CHANNEL,
    SUBSCRIBE_CHANNEL,
    Message,
)

__all__ = [
    "BayeuxProtocol",
    "Message",
    "decode_batch",
    "encode_batch",
    "CONNECT_CHANNEL",
    "DISCONNECT_CHANNEL",
    "HANDSHAKE_CHANNEL",
    "SUBSCRIBE_CHANNEL",
]
