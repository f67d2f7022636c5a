import json
import logging

import httpx
import pytest

from vloex import Vloex

API_KEY = "vs_test_0123456789abcdef"


class StubAPI:
    """Collects requests and answers them from a handler function."""

    def __init__(self, handler):
        self._handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content.decode("utf-8"))


def respond(status_code=200, payload=None, **kwargs):
    """Handler that always returns the same JSON response."""

    def handler(request):
        return httpx.Response(status_code, json=payload, **kwargs)

    return handler


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def make_client():
    opened = []

    def _make(handler, **kwargs):
        stub = StubAPI(handler)
        http = httpx.Client(transport=httpx.MockTransport(stub))
        opened.append(http)
        client = Vloex(api_key=kwargs.pop("api_key", API_KEY), http_client=http, **kwargs)
        return client, stub

    yield _make
    for http in opened:
        http.close()


@pytest.fixture
def restore_sdk_logger():
    sdk_logger = logging.getLogger("vloex")
    level, handlers = sdk_logger.level, list(sdk_logger.handlers)
    yield sdk_logger
    sdk_logger.setLevel(level)
    sdk_logger.handlers[:] = handlers
