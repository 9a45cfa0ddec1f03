from typing import Any

from bayeux.exceptions import AuthenticationError
from bayeux.protocol import Message

from .base import Extension


class AuthenticationExtension(Extension):
    """Extension for adding authentication tokens to handshake messages.

    Args:
    ----
        token: The authentication token to use

    Example:
    -------
        >>> client = BayeuxClient("http://server.com/bayeux")
        >>> client.add_extension(AuthenticationExtension("your-auth-token"))
        >>> await client.handshake()  # Token will be added to handshake

    Note:
    ----
        The token is only sent with the handshake. The server is expected to
        tie the authentication to the client id it hands out.

    """

    def __init__(self, token: str) -> None:
        self.token = token

    async def outgoing(self, message: Message) -> Message:
        """Add the token to handshake messages as ``{"ext": {"auth": {"token": ...}}}``."""
        if message.is_handshake:
            return self.add_ext(message)
        return message

    async def incoming(self, message: Message) -> Message:
        """Raise on unsuccessful replies that carry ``ext.auth_error``.

        Raises
        ------
            AuthenticationError: If the server rejected the credentials

        """
        if not message.ext:
            return message
        if message.successful is False and message.ext.get("auth_error"):
            raise AuthenticationError(message.ext["auth_error"])
        return message

    def get_ext(self) -> dict[str, Any]:
        return {"auth": {"token": self.token}}
