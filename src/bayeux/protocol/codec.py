"""JSON encoding of message batches.

Every request body is a JSON array, even for a single message, and every
response body is read back as one.
"""

import json
from collections.abc import Sequence

from bayeux.exceptions import EncodingError, TransportError

from .message import Message


def encode_batch(messages: Sequence[Message]) -> bytes:
    """Serialize messages to a JSON array.

    Raises:
    ------
        EncodingError: If a payload is not JSON serializable

    """
    try:
        return json.dumps([m.to_dict() for m in messages]).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Failed to encode message batch: {e}") from e


def decode_batch(body: bytes | str) -> list[Message]:
    """Parse a response body into messages.

    A lone JSON object is accepted as a batch of one.

    Raises:
    ------
        TransportError: If the body is not valid JSON
        ProtocolError: If an element is not a message

    """
    try:
        payload = json.loads(body)
    except (TypeError, ValueError) as e:
        raise TransportError(f"Invalid JSON response: {e}") from e

    items = payload if isinstance(payload, list) else [payload]
    return [Message.from_dict(item) for item in items]
