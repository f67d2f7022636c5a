import json

import httpx
import pytest

from conftest import API_KEY, StubAPI, respond
from vloex import APIConnectionError, AsyncVloex, AuthenticationError, Video, VideoFailedError

pytestmark = pytest.mark.anyio


def _client(handler, **kwargs):
    stub = StubAPI(handler)
    http = httpx.AsyncClient(transport=httpx.MockTransport(stub))
    return AsyncVloex(api_key=API_KEY, http_client=http, **kwargs), http, stub


async def test_create_and_retrieve():
    def handler(request):
        if request.method == "POST":
            return httpx.Response(200, json={"job_id": "abc-123", "status": "queued"})
        return httpx.Response(
            200, json={"id": "abc-123", "status": "completed", "video_url": "https://x/y.mp4"}
        )

    client, http, stub = _client(handler)
    async with http:
        video = await client.videos.create("Hello world")
        assert video == Video(id="abc-123", status="queued")

        video = await client.videos.retrieve(video.id)
        assert video.url == "https://x/y.mp4"

    post, get = stub.requests
    assert json.loads(post.content) == {"input": "Hello world", "options": {}}
    assert post.headers["Authorization"] == f"Bearer {API_KEY}"
    assert get.url == "https://api.vloex.com/v1/jobs/abc-123/status"


async def test_401_raises_authentication_error():
    client, http, _ = _client(respond(401, {"detail": "Invalid API key"}))

    async with http:
        with pytest.raises(AuthenticationError) as exc_info:
            await client.videos.retrieve("abc-123")

    assert exc_info.value.status_code == 401


async def test_transport_error_is_wrapped():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    client, http, _ = _client(handler)

    async with http:
        with pytest.raises(APIConnectionError):
            await client.videos.create("Hello world")


async def test_wait_raises_on_failure():
    statuses = iter(["processing", "failed"])

    def handler(request):
        status = next(statuses)
        return httpx.Response(200, json={"id": "abc-123", "status": status, "error": "no voice"})

    client, http, _ = _client(handler)

    async with http:
        with pytest.raises(VideoFailedError) as exc_info:
            await client.videos.wait("abc-123", timeout=10, poll_interval=0)

    assert exc_info.value.error == "no voice"


async def test_from_journey():
    client, http, stub = _client(respond(200, {"success": True, "video_url": "https://x/j.mp4"}))

    async with http:
        result = await client.videos.from_journey(screenshots=["aGVsbG8="])

    assert result.success
    assert json.loads(stub.last.content) == {"screenshots": ["aGVsbG8="]}


async def test_owned_client_is_closed_by_context_manager():
    async with AsyncVloex(api_key=API_KEY) as client:
        inner = client._http._client
    assert inner.is_closed
