from dataclasses import dataclass


@dataclass(frozen=True)
class ClientConfig:
    """Tunables for a :class:`~bayeux.client.BayeuxClient`.

    Attributes:
    ----------
        retry_delay (float): Seconds to wait after a failed poll exchange
        interval (float): Seconds to pause between successful poll exchanges
        max_retries (int, optional): Consecutive failed poll exchanges after
            which the loop gives up. None retries forever.
        request_timeout (float, optional): Total seconds per HTTP request.
            None leaves requests unbounded. Only used when the client builds
            its own :class:`~bayeux.transport.HttpTransport`.

    Example:
    -------
        >>> config = ClientConfig(retry_delay=5.0, max_retries=10)
        >>> client = BayeuxClient("http://server.com/bayeux", config=config)

    """

    retry_delay: float = 1.0
    interval: float = 0.0
    max_retries: int | None = None
    request_timeout: float | None = None

    def __post_init__(self) -> None:
        if self.retry_delay < 0:
            raise ValueError("retry_delay cannot be negative")
        if self.interval < 0:
            raise ValueError("interval cannot be negative")
        if self.max_retries is not None and self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
