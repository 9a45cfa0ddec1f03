"""Test HTTP transport functionality."""

import asyncio
import json
from unittest.mock import AsyncMock, Mock, patch

import pytest
import pytest_asyncio
from aiohttp import ClientError, ClientResponse, ClientSession, test_utils, web
from bayeux.exceptions import TransportError
from bayeux.transport import HttpTransport


@pytest.fixture
def mock_response():
    response = AsyncMock(spec=ClientResponse)
    response.raise_for_status = Mock()
    response.read = AsyncMock(return_value=b'[{"channel": "/test", "successful": true}]')
    return response


@pytest.fixture
def mock_session(mock_response):
    """Create a mock session with proper async context manager behavior."""
    session = AsyncMock(spec=ClientSession)
    session.closed = False

    post_context = AsyncMock()
    post_context.__aenter__ = AsyncMock(return_value=mock_response)
    post_context.__aexit__ = AsyncMock(return_value=None)
    session.post = Mock(return_value=post_context)
    session.close = AsyncMock()
    return session


@pytest.mark.asyncio
async def test_send_posts_json(mock_session):
    transport = HttpTransport("http://example.com/bayeux")
    with patch("bayeux.transport.http.ClientSession", return_value=mock_session):
        body = await transport.send(b'[{"channel": "/test"}]')

    assert body == b'[{"channel": "/test", "successful": true}]'
    mock_session.post.assert_called_once_with(
        "http://example.com/bayeux",
        data=b'[{"channel": "/test"}]',
        headers={"Content-Type": "application/json"},
    )


@pytest.mark.asyncio
async def test_session_is_reused(mock_session):
    transport = HttpTransport("http://example.com/bayeux")
    with patch(
        "bayeux.transport.http.ClientSession", return_value=mock_session
    ) as session_class:
        await transport.send(b"[]")
        await transport.send(b"[]")

    session_class.assert_called_once()
    assert mock_session.post.call_count == 2


@pytest.mark.asyncio
async def test_client_error_becomes_transport_error(mock_session):
    mock_session.post.side_effect = ClientError("Connection refused")
    transport = HttpTransport("http://example.com/bayeux")
    with patch("bayeux.transport.http.ClientSession", return_value=mock_session):
        with pytest.raises(TransportError, match="Failed to send message"):
            await transport.send(b"[]")


@pytest.mark.asyncio
async def test_timeout_becomes_transport_error(mock_session):
    mock_session.post.side_effect = asyncio.TimeoutError()
    transport = HttpTransport("http://example.com/bayeux")
    with patch("bayeux.transport.http.ClientSession", return_value=mock_session):
        with pytest.raises(TransportError, match="timed out"):
            await transport.send(b"[]")


@pytest.mark.asyncio
async def test_close(mock_session):
    transport = HttpTransport("http://example.com/bayeux")
    with patch("bayeux.transport.http.ClientSession", return_value=mock_session):
        await transport.send(b"[]")
        await transport.close()

    mock_session.close.assert_awaited_once()
    assert transport._session is None


@pytest.mark.asyncio
async def test_close_without_session():
    transport = HttpTransport("http://example.com/bayeux")
    await transport.close()


@pytest.mark.asyncio
async def test_close_failure(mock_session):
    mock_session.close.side_effect = RuntimeError("boom")
    transport = HttpTransport("http://example.com/bayeux")
    with patch("bayeux.transport.http.ClientSession", return_value=mock_session):
        await transport.send(b"[]")
        with pytest.raises(TransportError, match="Failed to close"):
            await transport.close()
    assert transport._session is None


@pytest_asyncio.fixture
async def http_server():
    """Real aiohttp server recording every request it receives."""
    received = []

    async def bayeux(request: web.Request) -> web.Response:
        received.append((request.content_type, await request.json()))
        return web.json_response(
            [{"channel": "/meta/handshake", "clientId": "abc", "successful": True}]
        )

    async def broken(request: web.Request) -> web.Response:
        return web.Response(status=500, text="Internal Server Error")

    async def slow(request: web.Request) -> web.Response:
        await asyncio.sleep(1)
        return web.json_response([])

    app = web.Application()
    app.router.add_post("/bayeux", bayeux)
    app.router.add_post("/broken", broken)
    app.router.add_post("/slow", slow)

    server = test_utils.TestServer(app)
    await server.start_server()
    try:
        yield server, received
    finally:
        await server.close()


@pytest.mark.asyncio
async def test_round_trip_against_server(http_server):
    server, received = http_server
    transport = HttpTransport(str(server.make_url("/bayeux")))
    try:
        body = await transport.send(b'[{"channel": "/meta/handshake"}]')
    finally:
        await transport.close()

    assert json.loads(body)[0]["clientId"] == "abc"
    assert received == [("application/json", [{"channel": "/meta/handshake"}])]


@pytest.mark.asyncio
async def test_http_error_status(http_server):
    server, _ = http_server
    transport = HttpTransport(str(server.make_url("/broken")))
    try:
        with pytest.raises(TransportError, match="500"):
            await transport.send(b"[]")
    finally:
        await transport.close()


@pytest.mark.asyncio
async def test_request_timeout(http_server):
    server, _ = http_server
    transport = HttpTransport(str(server.make_url("/slow")), timeout=0.05)
    try:
        with pytest.raises(TransportError):
            await transport.send(b"[]")
    finally:
        await transport.close()
