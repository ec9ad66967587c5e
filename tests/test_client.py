import json

import httpx
import pytest

from editorial.client import EditorialClient
from editorial.core.errors import ErrorKind
from tests.fixtures import EDITORIAL_PAYLOAD, INLINE_IMAGE


class Server:
    """Replays canned responses and records every request."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        resp = self.responses[min(len(self.requests), len(self.responses)) - 1]
        if isinstance(resp, Exception):
            raise resp
        return httpx.Response(resp.status_code, headers=resp.headers, content=resp.content)


def _client(server, **kw):
    http = httpx.AsyncClient(transport=httpx.MockTransport(server), base_url="http://test")
    sleeps = []

    async def sleep(delay):
        sleeps.append(delay)

    return EditorialClient(http=http, sleep=sleep, **kw), sleeps


BODY = {"images": [INLINE_IMAGE] * 3}


@pytest.mark.asyncio
async def test_success():
    server = Server(httpx.Response(200, json=EDITORIAL_PAYLOAD))
    client, sleeps = _client(server, token="tok")
    outcome = await client.generate("editorial", BODY)
    assert outcome.ok
    assert outcome.payload["profile"]["aesthetic_primary"] == "minimal_chic"
    req = server.requests[0]
    assert req.url.path == "/v1/generate/editorial"
    assert req.headers["authorization"] == "Bearer tok"
    assert json.loads(req.content) == BODY
    assert sleeps == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "second",
    [
        httpx.Response(200, json=EDITORIAL_PAYLOAD),
        httpx.Response(200, json={"error": "gateway_error", "message": "down", "debug_id": "dbg_2"}),
    ],
)
async def test_gateway_error_retried_exactly_once(second):
    server = Server(httpx.Response(200, json={"error": "gateway_error", "message": "down", "debug_id": "dbg_1"}), second)
    client, sleeps = _client(server)
    await client.generate("editorial", BODY)
    assert len(server.requests) == 2
    assert client.attempts == 2
    assert sleeps == [1.0]


@pytest.mark.asyncio
async def test_rate_limited_not_retried():
    server = Server(httpx.Response(429, json={"error": "rate_limited", "message": "calma", "retry_after": 17}))
    client, sleeps = _client(server)
    outcome = await client.generate("editorial", BODY)
    assert outcome.kind == ErrorKind.RATE_LIMITED
    assert outcome.retry_after == 17
    assert outcome.message == "calma"
    assert len(server.requests) == 1
    assert sleeps == []


@pytest.mark.asyncio
async def test_rate_limited_default_retry_after():
    server = Server(httpx.Response(429, text="slow down"))
    client, _ = _client(server)
    outcome = await client.generate("editorial", BODY)
    assert outcome.retry_after == 60


@pytest.mark.asyncio
async def test_unauthorized_not_retried():
    server = Server(httpx.Response(401, json={"detail": "nope"}))
    client, _ = _client(server)
    outcome = await client.generate("studio", {"brandRefs": ["A1", "B2"]})
    assert outcome.kind == ErrorKind.UNAUTHORIZED
    assert outcome.message == "Unauthorized access."
    assert len(server.requests) == 1


@pytest.mark.asyncio
async def test_transport_error_is_network_error():
    server = Server(httpx.ConnectError("refused"))
    client, sleeps = _client(server)
    outcome = await client.generate("editorial", BODY)
    assert outcome.kind == ErrorKind.NETWORK_ERROR
    assert len(server.requests) == 2
    assert sleeps == [1.0]


@pytest.mark.asyncio
async def test_unknown_error_kind_is_server_error():
    server = Server(httpx.Response(200, json={"error": "weird", "message": "?"}))
    client, _ = _client(server, retries=0)
    outcome = await client.generate("editorial", BODY)
    assert outcome.kind == ErrorKind.SERVER_ERROR


@pytest.mark.asyncio
async def test_missing_keys_is_incomplete_structure():
    server = Server(httpx.Response(200, json={"profile": {}}))
    client, _ = _client(server)
    outcome = await client.generate("editorial", BODY)
    assert outcome.kind == ErrorKind.INCOMPLETE_STRUCTURE
    assert len(server.requests) == 2


@pytest.mark.asyncio
async def test_policy_rejection_surfaces_verbatim():
    server = Server(httpx.Response(200, json={"error": "content_not_allowed", "message": "política", "debug_id": "dbg_9"}))
    client, _ = _client(server)
    outcome = await client.generate("editorial", BODY)
    assert outcome.kind == ErrorKind.CONTENT_NOT_ALLOWED
    assert outcome.message == "política"
    assert outcome.debug_id == "dbg_9"
    assert len(server.requests) == 1


@pytest.mark.asyncio
async def test_capsule_body():
    server = Server(httpx.Response(200, json={"error": "insufficient_items", "message": "mais peças"}))
    client, _ = _client(server)
    outcome = await client.generate_capsule("jeans", "minimal_chic")
    assert outcome.kind == ErrorKind.INSUFFICIENT_ITEMS
    assert server.requests[0].url.path == "/v1/generate/capsule"
    assert json.loads(server.requests[0].content)["owned_items_text"] == "jeans"
