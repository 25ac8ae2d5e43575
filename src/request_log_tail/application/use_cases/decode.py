"""Tolerant decoding of inbound frames and request-log payloads.

A malformed frame must never abort the stream: both helpers log at debug
level and hand back a value the pipeline can skip over. Deeply nested input
surfaces from :func:`json.loads` as :class:`RecursionError` and is treated the
same way.
"""

from __future__ import annotations

import json
import logging

from request_log_tail.domain.messages import IncomingMessage
from request_log_tail.domain.payload import EventPayload


def decode_message(raw: bytes | str, logger: logging.Logger) -> IncomingMessage:
    """Decode the outer envelope, returning the zero-value envelope on failure.

    Examples
    --------
    >>> log = logging.getLogger("doctest")
    >>> decode_message(b"not json", log) == IncomingMessage()
    True
    >>> decode_message('{"type": "request_log_event", "request_log_id": "rl_1", "event_payload": "{}"}', log).request_log_event.request_log_id
    'rl_1'
    """

    try:
        return IncomingMessage.from_dict(json.loads(raw))
    except (ValueError, TypeError, RecursionError) as exc:
        logger.debug("Received malformed message: %s", exc)
        return IncomingMessage()


def decode_payload(raw_json: str, logger: logging.Logger) -> EventPayload | None:
    """Decode a request-log payload, returning ``None`` when it is malformed."""

    try:
        return EventPayload.from_dict(json.loads(raw_json))
    except (ValueError, TypeError, RecursionError) as exc:
        logger.debug("Received malformed payload: %s", exc)
        return None


__all__ = ["decode_message", "decode_payload"]
