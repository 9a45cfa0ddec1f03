from collections.abc import Callable


class BayeuxError(Exception):
    """Base exception class for all Bayeux client errors.

    This is the parent class for all custom exceptions raised by the client.
    Catch this to handle any Bayeux-related error.

    Attributes:
    ----------
        unsubscribe: Set on errors raised by ``subscribe`` after the handler
            was registered locally. Calling it removes that registration.

    Example:
    -------
        >>> try:
        ...     await client.handshake()
        ... except BayeuxError as e:
        ...     print(f"Bayeux error occurred: {e}")

    """

    unsubscribe: Callable[[], None] | None = None


class EncodingError(BayeuxError):
    """Outbound message batch could not be serialized to JSON.

    Raised to the caller of a direct operation. Inside the poll loop it is
    handled like any other failed exchange: logged and retried after the
    retry delay.
    """

    pass


class TransportError(BayeuxError):
    """Error in transport layer communication.

    Raised when the request/response exchange itself fails: the server is
    unreachable, returns a non-2xx status or a body that is not JSON.

    Example:
    -------
        >>> try:
        ...     await client.publish("/foo", {"msg": "hi"})
        ... except TransportError as e:
        ...     print(f"Transport error: {e}")

    """

    pass


class ProtocolError(BayeuxError):
    """Error in Bayeux protocol handling.

    Raised when a well-formed response signals failure through its
    ``successful`` flag, or lacks a field the exchange requires.
    The server's error text, when present, is part of the message.

    Example:
    -------
        >>> try:
        ...     await client.publish("/foo", data)
        ... except ProtocolError as e:
        ...     print(f"Protocol error: {e}")

    """

    pass


class HandshakeError(ProtocolError):
    """Error during protocol handshake process.

    Raised when the handshake reply is empty, unsuccessful or carries no
    client id.
    """

    pass


class SubscriptionError(ProtocolError):
    """The server did not acknowledge a subscription.

    The local handler stays registered; ``unsubscribe`` removes it.
    """

    pass


class AlreadyRunningError(BayeuxError):
    """``connect()`` was called while the poll loop is already running."""

    pass


class AuthenticationError(BayeuxError):
    """Error during client authentication.

    Raised by :class:`~bayeux.extensions.AuthenticationExtension` when the
    server rejects the credentials.

    Example:
    -------
        >>> try:
        ...     client.add_extension(AuthenticationExtension("invalid-token"))
        ...     await client.handshake()
        ... except AuthenticationError as e:
        ...     print(f"Authentication failed: {e}")

    """

    pass
