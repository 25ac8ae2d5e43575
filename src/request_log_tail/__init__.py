"""Live tail of API request logs delivered over a WebSocket session.

``import request_log_tail`` exposes the session API (:class:`Config`,
:class:`LogFilters`, :class:`Tailer`) and the metadata banner used by the CLI
``info`` command.
"""

from __future__ import annotations

from .__init__conf__ import summary_info
from .domain import EventPayload, LogFilters, OutputFormat, RedactedError
from .errors import ConnectionTerminatedError, RequestLogTailError
from .runtime import CancelScope, Config, InterruptSource, Tailer

__all__ = [
    "CancelScope",
    "Config",
    "ConnectionTerminatedError",
    "EventPayload",
    "InterruptSource",
    "LogFilters",
    "OutputFormat",
    "RedactedError",
    "RequestLogTailError",
    "Tailer",
    "summary_info",
]
