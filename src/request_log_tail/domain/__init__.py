"""Domain value objects for request-log tailing."""

from __future__ import annotations

from .filters import FILTER_FIELDS, LogFilters
from .messages import REQUEST_LOG_EVENT_TYPE, IncomingMessage, RequestLogEvent
from .output import OutputFormat
from .payload import DASHBOARD_BASE_URL, ERROR_FIELD_LABELS, EventPayload, RedactedError
from .status import StatusClass

__all__ = [
    "DASHBOARD_BASE_URL",
    "ERROR_FIELD_LABELS",
    "EventPayload",
    "FILTER_FIELDS",
    "IncomingMessage",
    "LogFilters",
    "OutputFormat",
    "REQUEST_LOG_EVENT_TYPE",
    "RedactedError",
    "RequestLogEvent",
    "StatusClass",
]
