"""Test base transport functionality."""

import pytest
from bayeux.transport import Transport


class EchoTransport(Transport):
    """Transport that returns the request body unchanged."""

    def __init__(self, url: str) -> None:
        super().__init__(url)
        self.closed = False

    async def send(self, body: bytes) -> bytes:
        return body

    async def close(self) -> None:
        self.closed = True


def test_transport_is_abstract():
    with pytest.raises(TypeError):
        Transport("http://example.com")


@pytest.mark.asyncio
async def test_subclass_send_and_close():
    transport = EchoTransport("http://example.com")
    assert transport.url == "http://example.com"
    assert await transport.send(b"[]") == b"[]"
    await transport.close()
    assert transport.closed
