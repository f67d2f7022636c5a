"""Wire <-> SDK field-name tables (internal).

The API and the SDK do not agree on every field name (the script travels as
``input``, a job id may come back as ``job_id`` or ``id``, and so on).  Every
rename lives in one of the tables below and is applied exactly once, when a
request body is built or a response body is read.
"""
from __future__ import annotations

from typing import Any, Mapping, Union

from .exceptions import VloexError

_Wire = Union[str, tuple[str, ...]]


class FieldMap:
    """Bidirectional mapping between SDK attribute names and API field names.

    Each SDK name maps to one or more wire names.  When reading a response
    the wire names are tried in order and the first non-empty value wins;
    when writing a request the first wire name is used.
    """

    def __init__(self, fields: Mapping[str, _Wire]):
        self._fields: dict[str, tuple[str, ...]] = {
            name: (wire,) if isinstance(wire, str) else tuple(wire)
            for name, wire in fields.items()
        }

    def wire_name(self, name: str) -> str:
        return self._fields[name][0]

    def to_wire(self, values: Mapping[str, Any]) -> dict[str, Any]:
        """Rename SDK keys to API keys, dropping ``None`` values.

        Raises:
            KeyError: if *values* contains a key this map does not know.
        """
        out: dict[str, Any] = {}
        for name, value in values.items():
            if value is None:
                continue
            out[self.wire_name(name)] = value
        return out

    def from_wire(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Pick each SDK field from the first populated wire alias.

        Raises:
            VloexError: if *data* is not a JSON object.
        """
        if not isinstance(data, Mapping):
            raise VloexError(f"Expected a JSON object in the response, got {type(data).__name__}")
        out: dict[str, Any] = {}
        for name, aliases in self._fields.items():
            out[name] = next(
                (data[alias] for alias in aliases if data.get(alias) not in (None, "")),
                None,
            )
        return out


# POST /v1/generate
GENERATE_REQUEST = FieldMap(
    {
        "script": "input",
        "options": "options",
        "webhook_url": "webhook_url",
        "webhook_secret": "webhook_secret",
    }
)

GENERATE_RESPONSE = FieldMap(
    {
        "id": ("job_id", "id"),
        "status": "status",
        "url": "url",
        "error": "error",
    }
)

# GET /v1/jobs/{id}/status
STATUS_RESPONSE = FieldMap(
    {
        "id": ("id", "job_id"),
        "status": "status",
        "url": ("video_url", "url"),
        "error": ("error_message", "error"),
    }
)

# POST /v1/journey
JOURNEY_REQUEST = FieldMap(
    {
        "screenshots": "screenshots",
        "product_url": "product_url",
        "pages": "pages",
        "auth": "auth",
        "mode": "mode",
        "goal": "goal",
        "product_context": "product_context",
        "step_duration": "step_duration",
        "avatar_position": "avatar_position",
        "tone": "tone",
    }
)

JOURNEY_AUTH = FieldMap(
    {
        "login_url": "login_url",
        "credentials": "credentials",
        "selectors": "selectors",
    }
)

JOURNEY_RESPONSE = FieldMap(
    {
        "success": "success",
        "video_url": ("video_url", "url"),
        "duration_seconds": "duration_seconds",
        "file_size_mb": "file_size_mb",
        "cost": "cost",
        "steps_count": "steps_count",
        "error": ("error", "error_message"),
        "job_id": ("job_id", "id"),
        "status": "status",
    }
)
