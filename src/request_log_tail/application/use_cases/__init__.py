"""Use cases composing the request-log pipeline."""

from __future__ import annotations

from .decode import decode_message, decode_payload
from .filter_event import SESSION_HEARTBEAT_PATH, accept
from .process_event import ProcessCallable, ProcessResult, create_process_request_log_event

__all__ = [
    "ProcessCallable",
    "ProcessResult",
    "SESSION_HEARTBEAT_PATH",
    "accept",
    "create_process_request_log_event",
    "decode_message",
    "decode_payload",
]
