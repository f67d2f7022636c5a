from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Union

from .._fields import JOURNEY_AUTH, JOURNEY_REQUEST, JOURNEY_RESPONSE
from ..types import JourneyResult

JOURNEY_MODES = ("guided", "autonomous")


@dataclass(frozen=True)
class JourneyPage:
    """A page to visit during a guided journey, relative to ``product_url``."""

    path: str
    description: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "description": self.description}


@dataclass(frozen=True)
class JourneyAuth:
    """Login details for capturing an authenticated product.

    Attributes:
        login_url: Page holding the login form.
        credentials: Form values, e.g. ``{"email": ..., "password": ...}``.
        selectors: CSS selectors for each credential field and the submit
            button, e.g. ``{"email": "#email", "submit": "button[type=submit]"}``.
    """

    login_url: str
    credentials: Mapping[str, str] = field(default_factory=dict)
    selectors: Mapping[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return JOURNEY_AUTH.to_wire(
            {
                "login_url": self.login_url,
                "credentials": dict(self.credentials),
                "selectors": dict(self.selectors),
            }
        )


PageLike = Union[JourneyPage, Mapping[str, str]]
AuthLike = Union[JourneyAuth, Mapping[str, Any]]


def _encode_screenshot(shot: Union[str, bytes]) -> str:
    if isinstance(shot, (bytes, bytearray)):
        return base64.b64encode(bytes(shot)).decode("ascii")
    return shot


def _require(value: Mapping[str, Any], key: str, what: str) -> None:
    if not value.get(key):
        raise ValueError(f"{what} is missing `{key}`.")


def _page_dict(page: PageLike) -> dict[str, str]:
    if isinstance(page, JourneyPage):
        return page.to_dict()
    _require(page, "path", "journey page")
    return JourneyPage(path=page["path"], description=page.get("description", "")).to_dict()


def _auth_dict(auth: AuthLike) -> dict[str, Any]:
    if isinstance(auth, JourneyAuth):
        return auth.to_dict()
    _require(auth, "login_url", "journey auth")
    return JourneyAuth(
        login_url=auth["login_url"],
        credentials=auth.get("credentials") or {},
        selectors=auth.get("selectors") or {},
    ).to_dict()


def build_journey_body(
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
) -> dict[str, Any]:
    """Validate journey arguments and build the ``POST /v1/journey`` body.

    Exactly one source is allowed: either *screenshots* (base64 strings, or
    raw image bytes which are encoded here) or a *product_url* to capture.

    Raises:
        ValueError: on a missing or ambiguous source, or an invalid
            *mode* / *step_duration*.
    """
    if bool(screenshots) == bool(product_url):
        raise ValueError("Provide exactly one of `screenshots` or `product_url`.")
    if screenshots and (pages or auth or mode):
        raise ValueError("`pages`, `auth` and `mode` only apply to `product_url` journeys.")
    if mode is not None and mode not in JOURNEY_MODES:
        raise ValueError(f"mode must be one of {JOURNEY_MODES}, got {mode!r}")
    if mode == "autonomous" and pages:
        raise ValueError("Autonomous journeys pick their own pages; drop `pages`.")
    if step_duration is not None and step_duration <= 0:
        raise ValueError(f"step_duration must be positive, got {step_duration!r}")

    return JOURNEY_REQUEST.to_wire(
        {
            "screenshots": [_encode_screenshot(s) for s in screenshots] if screenshots else None,
            "product_url": product_url,
            "pages": [_page_dict(p) for p in pages] if pages else None,
            "auth": _auth_dict(auth) if auth else None,
            "mode": mode,
            "goal": goal,
            "product_context": product_context,
            "step_duration": step_duration,
            "avatar_position": avatar_position,
            "tone": tone,
        }
    )


def journey_result(data: Mapping[str, Any]) -> JourneyResult:
    fields = JOURNEY_RESPONSE.from_wire(data)
    # `success` may be absent; infer it
    if fields["success"] is None:
        fields["success"] = bool(fields["video_url"]) and not fields["error"]
    return JourneyResult(**fields)
