from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ._http import AsyncHttpClient, HttpClient
from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, ClientConfig
from .resources.videos import AsyncVideosResource, VideosResource

logger = logging.getLogger("vloex")


def _enable_debug_logging() -> None:
    sdk_logger = logging.getLogger("vloex")
    sdk_logger.setLevel(logging.DEBUG)
    if not sdk_logger.handlers:
        sdk_logger.addHandler(logging.StreamHandler())


class Vloex:
    """Synchronous client for the VLOEX video generation API.

    A video is produced asynchronously on VLOEX's side: :meth:`videos.create`
    returns at once with a queued job, and the finished URL arrives later
    through a webhook (see :mod:`vloex.webhooks`) or by polling::

        with Vloex.from_env() as client:          # reads VLOEX_API_KEY
            video = client.videos.create(
                "Release notes for v2",
                webhook_url="https://example.com/vloex-webhook",
                webhook_secret=WEBHOOK_SECRET,
            )

        # without a webhook endpoint
        with Vloex(api_key="vs_live_...") as client:
            video = client.videos.wait(client.videos.create("Hello world").id)
            print(video.url)

    Pass ``http_client`` to reuse your own :class:`httpx.Client`; the SDK
    leaves closing it to you.
    """

    videos: VideosResource
    """Video jobs: ``create``, ``retrieve``, ``wait`` and the experimental
    ``from_journey``.  See :class:`~vloex.resources.VideosResource`.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        debug: bool = False,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Args:
            api_key: Your VLOEX API key (starts with ``vs_live_`` or
                ``vs_test_``).
            base_url: Override the API base URL, e.g. for a staging
                environment. Defaults to ``https://api.vloex.com``.
            timeout: HTTP request timeout in seconds. Defaults to 60.
            debug: Set to ``True`` to enable verbose request/response
                logging via the ``vloex`` logger.
            http_client: Bring your own :class:`httpx.Client` (proxies,
                custom transports).  It is not closed by :meth:`close`.

        Raises:
            ConfigurationError: if *api_key* is empty.
        """
        self._setup(ClientConfig(api_key=api_key, base_url=base_url, timeout=timeout, debug=debug), http_client)

    def _setup(self, config: ClientConfig, http_client: Optional[httpx.Client]) -> None:
        if config.debug:
            _enable_debug_logging()
        self.config = config
        self._http = HttpClient(config, client=http_client)
        self.videos = VideosResource(self._http)

    @classmethod
    def from_config(cls, config: ClientConfig, http_client: Optional[httpx.Client] = None) -> "Vloex":
        """Build a client from an existing :class:`~vloex.ClientConfig`."""
        client = cls.__new__(cls)
        client._setup(config, http_client)
        return client

    @classmethod
    def from_env(cls, **overrides: Any) -> "Vloex":
        """Build a client from ``VLOEX_*`` environment variables.

        See :meth:`ClientConfig.from_env`.
        """
        return cls.from_config(ClientConfig.from_env(**overrides))

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._http.close()

    def __enter__(self) -> "Vloex":
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<Vloex base_url={self.config.base_url!r}>"


class AsyncVloex:
    """Async twin of :class:`Vloex` built on :class:`httpx.AsyncClient`.

    Every operation is a coroutine::

        async with AsyncVloex(api_key="vs_live_...") as client:
            video = await client.videos.create("Hello world")
            video = await client.videos.retrieve(video.id)
    """

    videos: AsyncVideosResource

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        debug: bool = False,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._setup(ClientConfig(api_key=api_key, base_url=base_url, timeout=timeout, debug=debug), http_client)

    def _setup(self, config: ClientConfig, http_client: Optional[httpx.AsyncClient]) -> None:
        if config.debug:
            _enable_debug_logging()
        self.config = config
        self._http = AsyncHttpClient(config, client=http_client)
        self.videos = AsyncVideosResource(self._http)

    @classmethod
    def from_config(
        cls, config: ClientConfig, http_client: Optional[httpx.AsyncClient] = None
    ) -> "AsyncVloex":
        client = cls.__new__(cls)
        client._setup(config, http_client)
        return client

    @classmethod
    def from_env(cls, **overrides: Any) -> "AsyncVloex":
        return cls.from_config(ClientConfig.from_env(**overrides))

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._http.aclose()

    async def __aenter__(self) -> "AsyncVloex":
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"<AsyncVloex base_url={self.config.base_url!r}>"
