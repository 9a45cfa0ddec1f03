from abc import ABC, abstractmethod


class Transport(ABC):
    """Base class for request/response transports.

    A transport carries one encoded message batch to the server and hands
    back the raw reply body. It knows nothing about Bayeux messages; encoding,
    decoding and retries belong to the caller.

    Attributes:
    ----------
        url (str): The server endpoint

    Example:
    -------
        >>> class EchoTransport(Transport):
        ...     async def send(self, body: bytes) -> bytes:
        ...         return body
        ...
        ...     async def close(self) -> None:
        ...         pass

    Note:
    ----
        Implementations must perform exactly one request per ``send`` call
        and must not retry.

    """

    def __init__(self, url: str) -> None:
        """Initialize the transport.

        Args:
        ----
            url: The server URL requests are sent to

        """
        self.url = url

    @abstractmethod
    async def send(self, body: bytes) -> bytes:
        """Send one request body and return the response body.

        Args:
        ----
            body: A JSON array of messages, already encoded

        Returns:
        -------
            bytes: The raw response body

        Raises:
        ------
            TransportError: If the exchange cannot complete

        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release any connection resources held by the transport."""
        pass
