"""Drop request logs generated by the tool's own session traffic."""

from __future__ import annotations

import logging

from request_log_tail.domain.payload import EventPayload

SESSION_HEARTBEAT_PATH = "/v1/stripecli/sessions"


def accept(payload: EventPayload, logger: logging.Logger) -> bool:
    """Return ``False`` for the session-heartbeat request, ``True`` otherwise.

    Examples
    --------
    >>> log = logging.getLogger("doctest")
    >>> accept(EventPayload(url="/v1/charges"), log)
    True
    >>> accept(EventPayload(url=SESSION_HEARTBEAT_PATH), log)
    False
    """

    if payload.url == SESSION_HEARTBEAT_PATH:
        logger.debug("Filtering out %s from logs", SESSION_HEARTBEAT_PATH)
        return False
    return True


__all__ = ["SESSION_HEARTBEAT_PATH", "accept"]
