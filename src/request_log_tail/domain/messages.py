"""Envelopes received from the request-log WebSocket."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

REQUEST_LOG_EVENT_TYPE = "request_log_event"


@dataclass(slots=True, frozen=True)
class RequestLogEvent:
    """One request-log event; ``event_payload`` is the server's raw JSON string."""

    request_log_id: str
    event_payload: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RequestLogEvent":
        request_log_id = data.get("request_log_id") or ""
        event_payload = data.get("event_payload") or ""
        if not isinstance(request_log_id, str) or not isinstance(event_payload, str):
            raise TypeError("request_log_id and event_payload must be strings")
        return cls(request_log_id=request_log_id, event_payload=event_payload)


@dataclass(slots=True, frozen=True)
class IncomingMessage:
    """Tagged envelope; only the request-log variant carries an event.

    The default instance is the zero-value envelope used when a frame cannot
    be decoded.
    """

    type: str = ""
    request_log_event: RequestLogEvent | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IncomingMessage":
        if not isinstance(data, Mapping):
            raise TypeError("message must be an object")
        message_type = data.get("type") or ""
        if not isinstance(message_type, str):
            raise TypeError("type must be a string")
        if message_type != REQUEST_LOG_EVENT_TYPE:
            return cls(type=message_type)
        return cls(type=message_type, request_log_event=RequestLogEvent.from_dict(data))


__all__ = ["IncomingMessage", "REQUEST_LOG_EVENT_TYPE", "RequestLogEvent"]
