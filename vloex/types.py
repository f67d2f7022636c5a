from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


class VideoStatus:
    """Job status values reported by the API.

    A job only moves forward: ``queued -> processing -> completed | failed``.
    The API enforces this; the SDK only observes it.
    """

    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset({VideoStatus.COMPLETED, VideoStatus.FAILED})


@dataclass(frozen=True)
class Video:
    """A video-generation job as returned by ``videos.create()`` and ``videos.retrieve()``.

    Attributes:
        id: The job identifier.
        status: One of the :class:`VideoStatus` values.
        url: Download URL of the rendered video. Only set once the job is
            ``completed``.
        error: Failure reason. Only set once the job has ``failed``.
    """

    id: str
    status: str
    url: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def is_completed(self) -> bool:
        return self.status == VideoStatus.COMPLETED

    @property
    def is_failed(self) -> bool:
        return self.status == VideoStatus.FAILED


@dataclass(frozen=True)
class JourneyResult:
    """Outcome of an experimental ``videos.from_journey()`` call."""

    success: bool
    video_url: Optional[str] = None
    duration_seconds: Optional[float] = None
    file_size_mb: Optional[float] = None
    cost: Optional[float] = None
    steps_count: Optional[int] = None
    error: Optional[str] = None
    job_id: Optional[str] = None
    status: Optional[str] = None


@dataclass(frozen=True)
class WebhookEvent:
    """A notification delivered by VLOEX to your webhook endpoint.

    ``video_url`` is set on ``video.completed`` events and ``error`` on
    ``video.failed`` events.  The full decoded body is kept in ``raw``.
    """

    event: str
    job_id: str
    video_url: Optional[str] = None
    error: Optional[str] = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def is_completed(self) -> bool:
        return self.event == "video.completed"

    @property
    def is_failed(self) -> bool:
        return self.event == "video.failed"
