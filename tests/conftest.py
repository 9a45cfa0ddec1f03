import asyncio
import inspect
import json
from typing import Any

import pytest
import pytest_asyncio
from bayeux import BayeuxClient, ClientConfig
from bayeux.transport import Transport


class FakeBayeuxServer:
    """In-memory Bayeux endpoint answering one request batch at a time.

    Meta requests succeed by default; ``overrides`` replaces the reply for a
    channel with a fixed batch, an exception to raise, or a callable taking
    the request message. Messages queued with ``deliver`` are returned by
    the next ``/meta/connect``.
    """

    def __init__(self) -> None:
        self.client_id = "client123"
        self.poll_delay = 0.005
        self.pending: list[dict[str, Any]] = []
        self.overrides: dict[str, Any] = {}

    def deliver(self, *messages: dict[str, Any]) -> None:
        self.pending.extend(messages)

    async def __call__(self, batch: list[dict[str, Any]]) -> Any:
        request = batch[0]
        channel = request["channel"]

        if channel in self.overrides:
            reply = self.overrides[channel]
            if isinstance(reply, BaseException):
                raise reply
            if callable(reply):
                reply = reply(request)
                if inspect.isawaitable(reply):
                    reply = await reply
            return reply

        if channel == "/meta/handshake":
            return [{"channel": channel, "clientId": self.client_id, "successful": True}]
        if channel == "/meta/connect":
            await asyncio.sleep(self.poll_delay)
            delivered, self.pending = self.pending, []
            return [{"channel": channel, "successful": True}, *delivered]
        if channel == "/meta/subscribe":
            return [
                {
                    "channel": channel,
                    "successful": True,
                    "subscription": request["subscription"],
                }
            ]
        return [{"channel": channel, "successful": True}]


class FakeTransport(Transport):
    """Transport that hands decoded request batches to a FakeBayeuxServer."""

    def __init__(self, server: FakeBayeuxServer) -> None:
        super().__init__("http://example.com/bayeux")
        self.server = server
        self.requests: list[list[dict[str, Any]]] = []
        self.closed = False

    async def send(self, body: bytes) -> bytes:
        batch = json.loads(body)
        self.requests.append(batch)
        return json.dumps(await self.server(batch)).encode()

    async def close(self) -> None:
        self.closed = True

    def sent_channels(self) -> list[str]:
        return [batch[0]["channel"] for batch in self.requests]

    def count(self, channel: str) -> int:
        return self.sent_channels().count(channel)


@pytest.fixture
def server() -> FakeBayeuxServer:
    return FakeBayeuxServer()


@pytest.fixture
def transport(server: FakeBayeuxServer) -> FakeTransport:
    return FakeTransport(server)


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(retry_delay=0.01)


@pytest_asyncio.fixture
async def client(transport: FakeTransport, config: ClientConfig):
    client = BayeuxClient(transport.url, transport=transport, config=config)
    yield client
    await client.close()


@pytest_asyncio.fixture
async def handshaken_client(client: BayeuxClient):
    await client.handshake()
    return client


@pytest.fixture
def eventually():
    """Await ``predicate()`` becoming true, failing the test after ``timeout``."""

    async def wait(predicate, timeout: float = 1.0) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                pytest.fail("Condition not met within timeout")
            await asyncio.sleep(0.005)

    return wait


# Configure pytest-asyncio
def pytest_configure(config):
    config.addinivalue_line("markers", "asyncio: mark test as async")

    # Set asyncio mode to "strict"
    config.option.asyncio_mode = "strict"
