"""Decoded view of a single API request-log event.

Purpose
-------
Model the server-defined payload carried inside a request-log event together
with the redacted error block attached to failed requests.

Contents
--------
* :class:`RedactedError` – six optional error fields with an explicit,
  ordered label table.
* :class:`EventPayload` – the request summary rendered per event.
* :data:`DASHBOARD_BASE_URL` – root of the dashboard deep links.

System Role
-----------
Pure data objects. Decoding mirrors the server's JSON contract: missing fields
take zero values, fields of the wrong JSON type reject the whole payload.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

DASHBOARD_BASE_URL = "https://dashboard.stripe.com"


def _string(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value


def _integer(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{key} must be an integer, got {type(value).__name__}")
    return value


def _boolean(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise TypeError(f"{key} must be a boolean, got {type(value).__name__}")
    return value


@dataclass(slots=True, frozen=True)
class RedactedError:
    """Error details attached to a failed request; empty strings mean absent."""

    type: str = ""
    charge: str = ""
    code: str = ""
    decline_code: str = ""
    message: str = ""
    param: str = ""

    def present_fields(self) -> list[tuple[str, str]]:
        """Return ``(label, value)`` pairs for non-empty fields in display order.

        Examples
        --------
        >>> RedactedError(code="card_declined").present_fields()
        [('Code', 'card_declined')]
        """

        pairs = ((label, accessor(self)) for label, accessor in ERROR_FIELD_LABELS)
        return [(label, value) for label, value in pairs if value != ""]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "RedactedError":
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise TypeError("error must be an object")
        return cls(
            type=_string(data, "type"),
            charge=_string(data, "charge"),
            code=_string(data, "code"),
            decline_code=_string(data, "decline_code"),
            message=_string(data, "message"),
            param=_string(data, "param"),
        )


ERROR_FIELD_LABELS: tuple[tuple[str, Callable[[RedactedError], str]], ...] = (
    ("Type", lambda error: error.type),
    ("Charge", lambda error: error.charge),
    ("Code", lambda error: error.code),
    ("DeclineCode", lambda error: error.decline_code),
    ("Message", lambda error: error.message),
    ("Param", lambda error: error.param),
)
# Labels are the field names shown to operators; order is the display order.


@dataclass(slots=True, frozen=True)
class EventPayload:
    """Summary of one API request as delivered by the request-log stream.

    Attributes
    ----------
    created_at:
        Epoch seconds at which the request was made.
    livemode:
        ``True`` for production traffic, ``False`` for test-mode traffic.
    method, url:
        HTTP method and request path; ``url`` may be empty.
    request_id:
        Identifier used to build the dashboard deep link.
    status:
        Integer HTTP status code.
    error:
        :class:`RedactedError` block; all fields empty for successful requests.
    """

    created_at: int = 0
    livemode: bool = False
    method: str = ""
    request_id: str = ""
    status: int = 0
    url: str = ""
    error: RedactedError = field(default_factory=RedactedError)

    def dashboard_url(self) -> str:
        """Return the dashboard deep link for this request.

        Examples
        --------
        >>> EventPayload(livemode=True, request_id="req_123").dashboard_url()
        'https://dashboard.stripe.com/logs/req_123'
        >>> EventPayload(livemode=False, request_id="req_123").dashboard_url()
        'https://dashboard.stripe.com/test/logs/req_123'
        """

        maybe_test = "" if self.livemode else "/test"
        return f"{DASHBOARD_BASE_URL}{maybe_test}/logs/{self.request_id}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EventPayload":
        """Build a payload from decoded JSON, raising ``TypeError`` on mismatched types."""

        if not isinstance(data, Mapping):
            raise TypeError("event payload must be an object")
        return cls(
            created_at=_integer(data, "created_at"),
            livemode=_boolean(data, "livemode"),
            method=_string(data, "method"),
            request_id=_string(data, "request_id"),
            status=_integer(data, "status"),
            url=_string(data, "url"),
            error=RedactedError.from_dict(data.get("error")),
        )


__all__ = ["DASHBOARD_BASE_URL", "ERROR_FIELD_LABELS", "EventPayload", "RedactedError"]
