class VloexError(Exception):
    """Base exception for all VLOEX SDK errors."""


class ConfigurationError(VloexError):
    """Raised when the client is constructed without a usable configuration."""


class APIConnectionError(VloexError):
    """Raised when the API could not be reached (DNS, connect, read failure)."""


class APITimeoutError(APIConnectionError):
    """Raised when a request exceeds the configured timeout."""


class APIError(VloexError):
    """Raised for any non-2xx response from the API."""

    def __init__(self, message: str, status_code: int, detail: str | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail

    @property
    def is_retryable(self) -> bool:
        """True for rate limiting (429) and server errors (5xx)."""
        return self.status_code == 429 or self.status_code >= 500

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, message={self.message!r})"


class AuthenticationError(APIError):
    """Raised when the API key is missing or invalid (401)."""


class QuotaExceededError(APIError):
    """Raised when the account has run out of video credits (402)."""


class NotFoundError(APIError):
    """Raised when the requested video job does not exist (404)."""


class RateLimitError(APIError):
    """Raised when too many requests were sent (429)."""


class VideoFailedError(VloexError):
    """Raised by ``videos.wait()`` when a job ends in the ``failed`` state."""

    def __init__(self, video_id: str, error: str | None = None):
        super().__init__(f"Video {video_id!r} failed: {error or 'unknown error'}")
        self.video_id = video_id
        self.error = error


class WaitTimeout(VloexError):
    """Raised when wait() exceeds the timeout without the job finishing."""

    def __init__(self, video_id: str, timeout: float, last_status: str | None = None):
        super().__init__(
            f"Video {video_id!r} did not finish within {timeout}s (last status {last_status!r})"
        )
        self.video_id = video_id
        self.timeout = timeout
        self.last_status = last_status


class WebhookPayloadError(VloexError):
    """Raised when a webhook body cannot be parsed into an event."""
