import hashlib
import hmac
import json

import pytest

from vloex import WebhookEvent, WebhookPayloadError, webhooks

SECRET = "my_secret_key_123"
NOW = 1_760_000_000
BODY = json.dumps(
    {"event": "video.completed", "job_id": "abc-123", "video_url": "https://x/y.mp4"},
    separators=(",", ":"),
)


def _sign(payload=BODY, timestamp=NOW, secret=SECRET):
    return "sha256=" + hmac.new(
        secret.encode(), f"{timestamp}.{payload}".encode(), hashlib.sha256
    ).hexdigest()


def _flip(text: str, index: int) -> str:
    char = text[index]
    replacement = "0" if char != "0" else "1"
    return text[:index] + replacement + text[index + 1 :]


def test_signed_payload_verifies():
    assert webhooks.verify_signature(BODY, _sign(), str(NOW), SECRET, now=NOW)


def test_bytes_inputs_match_text_inputs():
    assert webhooks.verify_signature(
        BODY.encode(), _sign().encode(), str(NOW).encode(), SECRET.encode(), now=NOW
    )


def test_compute_signature_matches_hmac_sha256():
    expected = hmac.new(b"k", b"123.{}", hashlib.sha256).hexdigest()
    assert webhooks.compute_signature("{}", "123", "k") == expected


def test_digest_without_prefix_is_accepted():
    digest = _sign().split("=", 1)[1]
    assert webhooks.verify_signature(BODY, digest, str(NOW), SECRET, now=NOW)


def test_integer_timestamp_is_accepted():
    assert webhooks.verify_signature(BODY, _sign(), NOW, SECRET, now=NOW)


@pytest.mark.parametrize("index", [0, len(BODY) // 2, len(BODY) - 1])
def test_tampered_payload_is_rejected(index):
    assert not webhooks.verify_signature(_flip(BODY, index), _sign(), str(NOW), SECRET, now=NOW)


@pytest.mark.parametrize("index", [0, len(SECRET) - 1])
def test_wrong_secret_is_rejected(index):
    assert not webhooks.verify_signature(BODY, _sign(), str(NOW), _flip(SECRET, index), now=NOW)


@pytest.mark.parametrize("index", [len("sha256="), len("sha256=") + 31, -1])
def test_tampered_digest_is_rejected(index):
    signature = _sign()
    index = index % len(signature)
    assert not webhooks.verify_signature(BODY, _flip(signature, index), str(NOW), SECRET, now=NOW)


def test_truncated_digest_is_rejected():
    assert not webhooks.verify_signature(BODY, _sign()[:-2], str(NOW), SECRET, now=NOW)


@pytest.mark.parametrize("skew", [301, -301, 3600, -86400])
def test_timestamp_outside_window_is_rejected(skew):
    ts = NOW + skew
    signature = _sign(timestamp=ts)
    assert not webhooks.verify_signature(BODY, signature, str(ts), SECRET, now=NOW)


@pytest.mark.parametrize("skew", [300, -300, 0])
def test_timestamp_at_window_edge_is_accepted(skew):
    ts = NOW + skew
    signature = _sign(timestamp=ts)
    assert webhooks.verify_signature(BODY, signature, str(ts), SECRET, now=NOW)


def test_custom_tolerance():
    ts = NOW - 60
    assert not webhooks.verify_signature(BODY, _sign(timestamp=ts), str(ts), SECRET, now=NOW, tolerance=30)


def test_defaults_to_wall_clock(monkeypatch):
    monkeypatch.setattr(webhooks.time, "time", lambda: NOW + 10.9)
    assert webhooks.verify_signature(BODY, _sign(), str(NOW), SECRET)


@pytest.mark.parametrize(
    "signature, timestamp, secret",
    [
        (None, str(NOW), SECRET),
        ("", str(NOW), SECRET),
        ("sha256=", str(NOW), SECRET),
        ("sha256=zz", str(NOW), SECRET),
        ("sha256=é" * 3, str(NOW), SECRET),
        ("__valid__", "not-a-number", SECRET),
        ("__valid__", "", SECRET),
        ("__valid__", None, SECRET),
        ("__valid__", "-5", SECRET),
        ("__valid__", "1.5e9", SECRET),
        ("__valid__", str(NOW), ""),
        ("__valid__", str(NOW), None),
        ("__valid__", "9" * 5000, SECRET),
        ("__valid__", "1" * 19, SECRET),
        ("sha256=\udcff", str(NOW), SECRET),
        ("__valid__", str(NOW), "\udcff"),
    ],
)
def test_malformed_input_returns_false(signature, timestamp, secret):
    if signature == "__valid__":
        signature = _sign()
    assert webhooks.verify_signature(BODY, signature, timestamp, secret, now=NOW) is False


def test_non_numeric_timestamp_is_not_treated_as_zero():
    signature = _sign(timestamp="abc")
    assert not webhooks.verify_signature(BODY, signature, "abc", SECRET, now=0)


def test_digests_are_compared_in_constant_time(monkeypatch):
    calls = []
    real = hmac.compare_digest

    def spy(a, b):
        calls.append((a, b))
        return real(a, b)

    monkeypatch.setattr(webhooks.hmac, "compare_digest", spy)

    assert webhooks.verify_signature(BODY, _sign(), str(NOW), SECRET, now=NOW)
    assert len(calls) == 1
    assert all(isinstance(arg, bytes) for arg in calls[0])


# ---------------------------------------------------------------------------
# header helpers
# ---------------------------------------------------------------------------


def test_sign_headers_round_trip_through_verify_headers():
    headers = webhooks.sign_headers(BODY, SECRET, timestamp=NOW)

    assert headers == {"X-Vloex-Signature": _sign(), "X-Vloex-Timestamp": str(NOW)}
    assert webhooks.verify_headers(BODY, headers, SECRET, now=NOW)


def test_verify_headers_is_case_insensitive():
    headers = {"x-vloex-signature": _sign(), "x-vloex-timestamp": str(NOW)}
    assert webhooks.verify_headers(BODY, headers, SECRET, now=NOW)


def test_verify_headers_missing_headers():
    assert not webhooks.verify_headers(BODY, {}, SECRET, now=NOW)


def test_sign_headers_refuses_empty_secret():
    with pytest.raises(ValueError):
        webhooks.sign_headers(BODY, "")


# ---------------------------------------------------------------------------
# parse_event
# ---------------------------------------------------------------------------


def test_parse_completed_event():
    event = webhooks.parse_event(BODY)

    assert event == WebhookEvent(event="video.completed", job_id="abc-123", video_url="https://x/y.mp4")
    assert event.is_completed
    assert event.raw["job_id"] == "abc-123"


def test_parse_failed_event_from_bytes():
    body = json.dumps({"event": "video.failed", "job_id": "abc-123", "error": "render crashed"}).encode()

    event = webhooks.parse_event(body)

    assert event.is_failed
    assert event.error == "render crashed"
    assert event.video_url is None


def test_parse_event_accepts_decoded_dict():
    event = webhooks.parse_event({"event": webhooks.EVENT_VIDEO_FAILED, "job_id": "j1"})
    assert event.event == "video.failed"


@pytest.mark.parametrize(
    "body",
    [
        "not json",
        "[1, 2, 3]",
        json.dumps({"event": "video.completed"}),
        json.dumps({"job_id": "abc-123"}),
        b"\xff\xfe",
    ],
)
def test_parse_event_rejects_bad_bodies(body):
    with pytest.raises(WebhookPayloadError):
        webhooks.parse_event(body)


def test_unencodable_payload_returns_false():
    assert webhooks.verify_signature("\udcff", _sign(), str(NOW), SECRET, now=NOW) is False


def test_unencodable_digest_with_valid_length_returns_false():
    digest = _sign().split("=", 1)[1]
    assert webhooks.verify_signature(BODY, digest[:-1] + "\udcff", str(NOW), SECRET, now=NOW) is False


def test_oversized_integer_timestamp_returns_false():
    assert webhooks.verify_signature(BODY, _sign(), 10**5000, SECRET, now=NOW) is False
