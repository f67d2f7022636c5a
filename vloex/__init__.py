"""VLOEX Python SDK
================

Video generation as an API call.  Send a script, get back a job, and either
poll it or let VLOEX notify you through a webhook when the video is ready.
A job moves through four statuses, only ever forward:

``queued`` → ``processing`` → ``completed`` | ``failed``

Quick start::

    from vloex import Vloex

    with Vloex(api_key="vs_live_...") as client:
        video = client.videos.create("Hello world")
        print(video.id, video.status)        # abc-123 queued

        video = client.videos.retrieve(video.id)
        if video.is_completed:
            print(video.url)

Webhooks instead of polling::

    video = client.videos.create(
        "Hello world",
        webhook_url="https://your-app.com/api/vloex-webhook",
        webhook_secret="whsec_...",
    )

and in the receiving endpoint, check the delivery with
:func:`vloex.webhooks.verify_headers` before trusting it.

Main classes
------------

:class:`Vloex` / :class:`AsyncVloex`
    The top-level API clients (blocking and asyncio).  Create one instance
    per application and reuse it.

:class:`VideosResource` — ``client.videos``
    ``create()``, ``retrieve()``, ``wait()`` and the experimental
    ``from_journey()``.

:class:`Video`
    Immutable snapshot of a job: ``id``, ``status``, ``url``, ``error``.

:mod:`vloex.webhooks`
    Signature verification and parsing for inbound webhooks.

Exceptions
----------

All SDK exceptions inherit from :class:`VloexError`.

:class:`ConfigurationError`
    No API key, or an invalid setting.  Raised before any request is sent.

:class:`APIError`
    Any non-2xx response.  Carries ``status_code``; subclasses
    :class:`AuthenticationError` (401), :class:`QuotaExceededError` (402),
    :class:`NotFoundError` (404) and :class:`RateLimitError` (429).

:class:`APIConnectionError`
    The API could not be reached; :class:`APITimeoutError` on timeout.
"""

from . import webhooks
from ._version import __version__
from .client import AsyncVloex, Vloex
from .config import ClientConfig
from .exceptions import (
    APIConnectionError,
    APIError,
    APITimeoutError,
    AuthenticationError,
    ConfigurationError,
    NotFoundError,
    QuotaExceededError,
    RateLimitError,
    VideoFailedError,
    VloexError,
    WaitTimeout,
    WebhookPayloadError,
)
from .resources import AsyncVideosResource, JourneyAuth, JourneyPage, VideosResource
from .types import JourneyResult, Video, VideoStatus, WebhookEvent

__all__ = [
    "__version__",
    "Vloex",
    "AsyncVloex",
    "ClientConfig",
    "VideosResource",
    "AsyncVideosResource",
    "JourneyPage",
    "JourneyAuth",
    "Video",
    "VideoStatus",
    "JourneyResult",
    "WebhookEvent",
    "webhooks",
    "VloexError",
    "ConfigurationError",
    "APIError",
    "AuthenticationError",
    "QuotaExceededError",
    "NotFoundError",
    "RateLimitError",
    "APIConnectionError",
    "APITimeoutError",
    "VideoFailedError",
    "WaitTimeout",
    "WebhookPayloadError",
]
