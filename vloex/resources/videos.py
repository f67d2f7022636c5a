from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, Mapping, Optional, Sequence, Union

import anyio

from .._fields import GENERATE_REQUEST, GENERATE_RESPONSE, STATUS_RESPONSE, FieldMap
from ..exceptions import VideoFailedError, WaitTimeout
from ..types import JourneyResult, Video, VideoStatus
from .journey import AuthLike, PageLike, build_journey_body, journey_result

if TYPE_CHECKING:
    from .._http import AsyncHttpClient, HttpClient

logger = logging.getLogger("vloex")

GENERATE_PATH = "/v1/generate"
STATUS_PATH = "/v1/jobs/{video_id}/status"
JOURNEY_PATH = "/v1/journey"


def _generate_body(
    script: str,
    options: Optional[Mapping[str, Any]],
    webhook_url: Optional[str],
    webhook_secret: Optional[str],
) -> dict[str, Any]:
    if not script or not script.strip():
        raise ValueError("script must be a non-empty string.")

    body = GENERATE_REQUEST.to_wire(
        {
            "script": script,
            "webhook_url": webhook_url or None,
            "webhook_secret": webhook_secret or None,
        }
    )
    body[GENERATE_REQUEST.wire_name("options")] = dict(options or {})
    return body


def _status_path(video_id: str) -> str:
    if not video_id:
        raise ValueError("video_id must be a non-empty string.")
    return STATUS_PATH.format(video_id=video_id)


def _to_video(data: Mapping[str, Any], fields: FieldMap) -> Video:
    return Video(**fields.from_wire(data))


class _WaitState:
    """Bookkeeping shared by the sync and async ``wait`` loops."""

    def __init__(self, video_id: str, timeout: float):
        self.video_id = video_id
        self.timeout = timeout
        self.deadline = time.monotonic() + timeout
        self.last_status: Optional[str] = None

    def check(self, video: Video) -> bool:
        """Return True once *video* is finished; raise if it failed."""
        if video.status != self.last_status:
            logger.info("video=%s  status=%s", self.video_id, video.status)
            self.last_status = video.status

        if video.status == VideoStatus.COMPLETED:
            return True
        if video.status == VideoStatus.FAILED:
            raise VideoFailedError(self.video_id, video.error)
        if time.monotonic() >= self.deadline:
            raise WaitTimeout(self.video_id, self.timeout, self.last_status)
        return False


class VideosResource:
    """Accessed via ``client.videos`` — entry point for video operations."""

    def __init__(self, http: "HttpClient"):
        self._http = http

    def create(
        self,
        script: str,
        *,
        options: Optional[Mapping[str, Any]] = None,
        webhook_url: Optional[str] = None,
        webhook_secret: Optional[str] = None,
    ) -> Video:
        """Start generating a video from a text script.

        Args:
            script: The narration the video is generated from.
            options: Optional customisation, e.g. ``{"avatar": ...,
                "voice": ..., "background": ...}``.  Sent as-is.
            webhook_url: URL VLOEX will POST to when the video is done.
                See :mod:`vloex.webhooks`.
            webhook_secret: Shared secret used to sign webhook deliveries.
                Only meaningful together with *webhook_url*.

        Returns:
            A :class:`~vloex.Video`, normally in ``queued`` status.

        Raises:
            ValueError: if *script* is empty.
            APIError: on any non-2xx response.
            APIConnectionError: if the API could not be reached.
        """
        body = _generate_body(script, options, webhook_url, webhook_secret)
        logger.debug("creating video script_len=%d webhook=%s", len(script), bool(webhook_url))
        data = self._http.post(GENERATE_PATH, json=body)
        return _to_video(data, GENERATE_RESPONSE)

    def retrieve(self, video_id: str) -> Video:
        """Fetch the current status of a video job.

        Once the job is ``completed`` the returned video carries ``url``;
        once it has ``failed`` it carries ``error``.

        Raises:
            ValueError: if *video_id* is empty.
            NotFoundError: if no job with *video_id* exists.
        """
        data = self._http.get(_status_path(video_id))
        return _to_video(data, STATUS_RESPONSE)

    def wait(self, video_id: str, timeout: float = 300, poll_interval: float = 5) -> Video:
        """Block until the job completes, then return it.

        Prefer a webhook in production; this is meant for scripts and tests.

        Raises:
            VideoFailedError: if the job ends in ``failed``.
            WaitTimeout: if *timeout* seconds elapse first.
        """
        state = _WaitState(video_id, timeout)
        logger.debug("waiting for video=%s (timeout=%ss)", video_id, timeout)
        while True:
            video = self.retrieve(video_id)
            if state.check(video):
                return video
            time.sleep(poll_interval)

    def from_journey(
        self,
        *,
        screenshots: Optional[Sequence[Union[str, bytes]]] = None,
        product_url: Optional[str] = None,
        pages: Optional[Sequence[PageLike]] = None,
        auth: Optional[AuthLike] = None,
        mode: Optional[str] = None,
        goal: Optional[str] = None,
        product_context: Optional[str] = None,
        step_duration: Optional[int] = None,
        avatar_position: Optional[str] = None,
        tone: Optional[str] = None,
    ) -> JourneyResult:
        """Generate a product walkthrough from screenshots or a live URL.

        Experimental.  Three ways to drive it:

        1. ``screenshots=[...]``: images you captured yourself.
        2. ``product_url=..., pages=[...]``: VLOEX visits each page, logging
           in first when *auth* is given.
        3. ``product_url=..., mode="autonomous", goal=...``: VLOEX explores
           on its own.

        Raises:
            ValueError: if the arguments do not describe exactly one of the
                above.
        """
        body = build_journey_body(
            screenshots=screenshots,
            product_url=product_url,
            pages=pages,
            auth=auth,
            mode=mode,
            goal=goal,
            product_context=product_context,
            step_duration=step_duration,
            avatar_position=avatar_position,
            tone=tone,
        )
        data = self._http.post(JOURNEY_PATH, json=body)
        return journey_result(data)


class AsyncVideosResource:
    """Accessed via ``AsyncVloex().videos``; same operations as :class:`VideosResource`."""

    def __init__(self, http: "AsyncHttpClient"):
        self._http = http

    async def create(
        self,
        script: str,
        *,
        options: Optional[Mapping[str, Any]] = None,
        webhook_url: Optional[str] = None,
        webhook_secret: Optional[str] = None,
    ) -> Video:
        body = _generate_body(script, options, webhook_url, webhook_secret)
        logger.debug("creating video script_len=%d webhook=%s", len(script), bool(webhook_url))
        data = await self._http.post(GENERATE_PATH, json=body)
        return _to_video(data, GENERATE_RESPONSE)

    async def retrieve(self, video_id: str) -> Video:
        data = await self._http.get(_status_path(video_id))
        return _to_video(data, STATUS_RESPONSE)

    async def wait(self, video_id: str, timeout: float = 300, poll_interval: float = 5) -> Video:
        state = _WaitState(video_id, timeout)
        logger.debug("waiting for video=%s (timeout=%ss)", video_id, timeout)
        while True:
            video = await self.retrieve(video_id)
            if state.check(video):
                return video
            await anyio.sleep(poll_interval)

    async def from_journey(
        self,
        *,
        screenshots: Optional[Sequence[Union[str, bytes]]] = None,
        product_url: Optional[str] = None,
        pages: Optional[Sequence[PageLike]] = None,
        auth: Optional[AuthLike] = None,
        mode: Optional[str] = None,
        goal: Optional[str] = None,
        product_context: Optional[str] = None,
        step_duration: Optional[int] = None,
        avatar_position: Optional[str] = None,
        tone: Optional[str] = None,
    ) -> JourneyResult:
        body = build_journey_body(
            screenshots=screenshots,
            product_url=product_url,
            pages=pages,
            auth=auth,
            mode=mode,
            goal=goal,
            product_context=product_context,
            step_duration=step_duration,
            avatar_position=avatar_position,
            tone=tone,
        )
        data = await self._http.post(JOURNEY_PATH, json=body)
        return journey_result(data)
