"""Internal HTTP client — not part of the public API."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from ._version import __version__
from .config import ClientConfig
from .exceptions import (
    APIConnectionError,
    APIError,
    APITimeoutError,
    AuthenticationError,
    NotFoundError,
    QuotaExceededError,
    RateLimitError,
    VloexError,
)

logger = logging.getLogger("vloex")

_GENERIC_MESSAGE = "API request failed"

_STATUS_ERRORS: dict[int, type[APIError]] = {
    401: AuthenticationError,
    402: QuotaExceededError,
    404: NotFoundError,
    429: RateLimitError,
}

_REDACTED_FIELDS = {"webhook_secret", "credentials"}


def _redact(body: Any) -> Any:
    if isinstance(body, dict):
        return {k: ("***" if k in _REDACTED_FIELDS else _redact(v)) for k, v in body.items()}
    if isinstance(body, list):
        return [_redact(item) for item in body]
    return body


class _BaseHttpClient:
    """Request building and response checking shared by the sync and async clients."""

    def __init__(self, config: ClientConfig):
        self.config = config

    def _url(self, path: str) -> str:
        return f"{self.config.base_url}{path}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": f"vloex-python/{__version__}",
        }

    @staticmethod
    def _log_request(method: str, url: str, body: Any) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s %s  body=%s", method, url, _redact(body))

    @staticmethod
    def _handle_response(response: httpx.Response) -> Any:
        logger.debug("← %s %s", response.status_code, response.request.url)
        _raise_for_status(response)
        try:
            return response.json()
        except ValueError:
            raise VloexError(
                f"Invalid JSON in response from {response.request.url} "
                f"(HTTP {response.status_code})"
            ) from None


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return

    detail: str | None = None
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        raw = data.get("detail") or data.get("message")
        if raw:
            detail = raw if isinstance(raw, str) else str(raw)

    status = response.status_code
    error_cls = _STATUS_ERRORS.get(status, APIError)
    raise error_cls(detail or _GENERIC_MESSAGE, status_code=status, detail=detail)


def _connection_error(exc: httpx.TransportError, method: str, url: str) -> APIConnectionError:
    if isinstance(exc, httpx.TimeoutException):
        return APITimeoutError(f"{method} {url} timed out: {exc}")
    return APIConnectionError(f"{method} {url} failed: {exc}")


class HttpClient(_BaseHttpClient):
    def __init__(self, config: ClientConfig, client: httpx.Client | None = None):
        super().__init__(config)
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=config.timeout)

    def get(self, path: str, **params: Any) -> Any:
        return self._request("GET", path, params=params or None)

    def post(self, path: str, json: Any = None, **params: Any) -> Any:
        return self._request("POST", path, json=json, params=params or None)

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = self._url(path)
        self._log_request(method, url, kwargs.get("json"))

        try:
            response = self._client.request(
                method, url, headers=self._headers(), timeout=self.config.timeout, **kwargs
            )
        except httpx.TransportError as exc:
            raise _connection_error(exc, method, url) from exc

        return self._handle_response(response)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()


class AsyncHttpClient(_BaseHttpClient):
    def __init__(self, config: ClientConfig, client: httpx.AsyncClient | None = None):
        super().__init__(config)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=config.timeout)

    async def get(self, path: str, **params: Any) -> Any:
        return await self._request("GET", path, params=params or None)

    async def post(self, path: str, json: Any = None, **params: Any) -> Any:
        return await self._request("POST", path, json=json, params=params or None)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = self._url(path)
        self._log_request(method, url, kwargs.get("json"))

        try:
            response = await self._client.request(
                method, url, headers=self._headers(), timeout=self.config.timeout, **kwargs
            )
        except httpx.TransportError as exc:
            raise _connection_error(exc, method, url) from exc

        return self._handle_response(response)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "AsyncHttpClient":
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.aclose()
