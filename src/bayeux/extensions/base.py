from abc import ABC, abstractmethod
from typing import Any

from bayeux.protocol import Message


class Extension(ABC):
    """Base class for Bayeux protocol extensions.

    Extensions see every message the client sends and receives. Implement
    outgoing() and incoming() to inspect or replace messages in either
    direction. Messages are immutable, so return a new one to change it.

    Example:
    -------
        >>> class LoggingExtension(Extension):
        ...     async def outgoing(self, message: Message) -> Message | None:
        ...         print(f"Sending: {message}")
        ...         return message
        ...
        ...     async def incoming(self, message: Message) -> Message | None:
        ...         print(f"Received: {message}")
        ...         return message

    """

    @abstractmethod
    async def outgoing(self, message: Message) -> Message | None:
        """Process outgoing messages before they are sent.

        Args:
        ----
            message: The message being sent

        Returns:
        -------
            Message: The message to send
            None: To abort the request

        Note:
        ----
            A BayeuxError raised here reaches the caller of the operation.
            Any other exception is logged and the message proceeds unchanged.

        """
        pass

    @abstractmethod
    async def incoming(self, message: Message) -> Message | None:
        """Process incoming messages as they are received.

        Args:
        ----
            message: The received message

        Returns:
        -------
            Message: The message to pass on
            None: To drop the message from the reply batch

        """
        pass

    def add_ext(self, message: Message) -> Message:
        """Return ``message`` with this extension's data merged into ``ext``."""
        return message.with_ext(self.get_ext())

    def get_ext(self) -> dict[str, Any]:
        """Get extension data to be included in messages.

        Override this method to provide custom extension data.
        Default implementation returns empty dict.
        """
        return {}
