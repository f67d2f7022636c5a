"""Helpers for receiving VLOEX webhooks.

When a video finishes, VLOEX POSTs a JSON notification to the ``webhook_url``
given to :meth:`videos.create() <vloex.resources.VideosResource.create>`.  If a
``webhook_secret`` was supplied too, each delivery carries two headers::

    X-Vloex-Signature: sha256=<hex HMAC-SHA256 of "<timestamp>.<body>">
    X-Vloex-Timestamp: <unix seconds>

Verify them against the *raw* request body before trusting the payload::

    from vloex import webhooks

    @app.post("/api/vloex-webhook")
    def handle(request):
        body = request.get_data()
        if not webhooks.verify_headers(body, request.headers, WEBHOOK_SECRET):
            return {"error": "Invalid signature"}, 401

        event = webhooks.parse_event(body)
        if event.is_completed:
            print(f"Video {event.job_id} ready at {event.video_url}")
        return {"status": "received"}, 200

Verification never raises: a forged, stale, or malformed delivery simply
yields ``False``.
"""
from __future__ import annotations

import hashlib
import hmac
import json
import logging
import time
from typing import Any, Mapping, Optional, Union

from .exceptions import WebhookPayloadError
from .types import WebhookEvent

logger = logging.getLogger("vloex")

SIGNATURE_HEADER = "X-Vloex-Signature"
TIMESTAMP_HEADER = "X-Vloex-Timestamp"
SIGNATURE_SCHEME = "sha256"

DEFAULT_TOLERANCE = 300
"""Replay window in seconds: deliveries older or newer than this are rejected."""

EVENT_VIDEO_COMPLETED = "video.completed"
EVENT_VIDEO_FAILED = "video.failed"

_Text = Union[str, bytes]

_MAX_TIMESTAMP_DIGITS = 18
_MAX_TIMESTAMP = 10**_MAX_TIMESTAMP_DIGITS


def _to_bytes(value: _Text) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


def _to_text(value: Union[_Text, None]) -> Optional[str]:
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return value


def _parse_timestamp(timestamp: Union[_Text, int, None]) -> Optional[str]:
    """Return the timestamp as signed text, or ``None`` if it is not unix seconds."""
    if isinstance(timestamp, bool) or timestamp is None:
        return None
    if isinstance(timestamp, int):
        return str(timestamp) if 0 <= timestamp < _MAX_TIMESTAMP else None
    text = _to_text(timestamp)
    if not isinstance(text, str):
        return None
    text = text.strip()
    # at most 18 digits before int()
    if len(text) > _MAX_TIMESTAMP_DIGITS or not (text.isascii() and text.isdigit()):
        return None
    return text


def compute_signature(payload: _Text, timestamp: Union[str, int], secret: _Text) -> str:
    """Return the lowercase hex HMAC-SHA256 of ``"<timestamp>.<payload>"``."""
    message = _to_bytes(str(timestamp)) + b"." + _to_bytes(payload)
    return hmac.new(_to_bytes(secret), message, hashlib.sha256).hexdigest()


def verify_signature(
    payload: _Text,
    signature: Optional[_Text],
    timestamp: Union[_Text, int, None],
    secret: Optional[_Text],
    *,
    tolerance: int = DEFAULT_TOLERANCE,
    now: Optional[float] = None,
) -> bool:
    """Check that a webhook delivery is authentic and fresh.

    Args:
        payload: The raw request body, exactly as received.
        signature: Value of the ``X-Vloex-Signature`` header.  Anything up
            to and including the first ``=`` is treated as a scheme prefix;
            without ``=`` the whole value is the hex digest.
        timestamp: Value of the ``X-Vloex-Timestamp`` header (unix seconds).
        secret: The ``webhook_secret`` passed when the video was created.
        tolerance: Maximum allowed distance, in seconds, between *timestamp*
            and *now*.  Defaults to 300.
        now: Current unix time.  Defaults to :func:`time.time`.

    Returns:
        ``True`` only if the timestamp is inside the replay window and the
        digest matches.  Missing headers, a non-numeric timestamp and an
        empty secret all return ``False``.

    The digests are compared with :func:`hmac.compare_digest`.  It runs in
    constant time for equal-length inputs; a provided digest of the wrong
    length is rejected early, which reveals only its length.
    """
    signature = _to_text(signature)
    if payload is None or not signature or not isinstance(signature, str) or not secret:
        return False

    ts_text = _parse_timestamp(timestamp)
    if ts_text is None:
        logger.debug("webhook rejected: malformed timestamp")
        return False

    current = int(time.time() if now is None else now)
    if abs(current - int(ts_text)) > tolerance:
        logger.debug("webhook rejected: timestamp %s outside %ss window", ts_text, tolerance)
        return False

    provided = signature.split("=", 1)[1] if "=" in signature else signature
    if not provided:
        return False

    try:
        expected = compute_signature(payload, ts_text, secret)
        provided_bytes = provided.encode("utf-8")
    except UnicodeEncodeError:
        # lone surrogates in str input, e.g. from surrogateescape decoding
        logger.debug("webhook rejected: input is not encodable as UTF-8")
        return False
    return hmac.compare_digest(expected.encode("ascii"), provided_bytes)


def _header(headers: Mapping[str, Any], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is None:
        lowered = name.lower()
        for key, candidate in headers.items():
            if key.lower() == lowered:
                value = candidate
                break
    return _to_text(value)


def verify_headers(
    payload: _Text,
    headers: Mapping[str, Any],
    secret: Optional[_Text],
    *,
    tolerance: int = DEFAULT_TOLERANCE,
    now: Optional[float] = None,
) -> bool:
    """:func:`verify_signature` reading both values from a header mapping.

    Header names are matched case-insensitively, so plain dicts work as
    well as framework header objects.
    """
    return verify_signature(
        payload,
        _header(headers, SIGNATURE_HEADER),
        _header(headers, TIMESTAMP_HEADER),
        secret,
        tolerance=tolerance,
        now=now,
    )


def sign_headers(
    payload: _Text,
    secret: _Text,
    *,
    timestamp: Union[int, None] = None,
) -> dict[str, str]:
    """Build the signature headers VLOEX would send for *payload*.

    Handy for testing a webhook endpoint locally.

    Raises:
        ValueError: if *secret* is empty.
    """
    if not secret:
        raise ValueError("Cannot sign a webhook with an empty secret.")
    ts = int(time.time()) if timestamp is None else int(timestamp)
    digest = compute_signature(payload, ts, secret)
    return {
        SIGNATURE_HEADER: f"{SIGNATURE_SCHEME}={digest}",
        TIMESTAMP_HEADER: str(ts),
    }


def parse_event(payload: Union[_Text, Mapping[str, Any]]) -> WebhookEvent:
    """Decode a webhook body into a :class:`~vloex.WebhookEvent`.

    Does not check the signature; call :func:`verify_headers` first.

    Raises:
        WebhookPayloadError: if the body is not a JSON object with
            ``event`` and ``job_id`` fields.
    """
    if isinstance(payload, Mapping):
        data: Any = dict(payload)
    else:
        try:
            data = json.loads(payload)
        except (ValueError, UnicodeDecodeError) as exc:
            raise WebhookPayloadError(f"Webhook body is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise WebhookPayloadError("Webhook body must be a JSON object.")

    missing = [key for key in ("event", "job_id") if not data.get(key)]
    if missing:
        raise WebhookPayloadError(f"Webhook body is missing {', '.join(missing)}.")

    return WebhookEvent(
        event=data["event"],
        job_id=str(data["job_id"]),
        video_url=data.get("video_url"),
        error=data.get("error"),
        raw=data,
    )
