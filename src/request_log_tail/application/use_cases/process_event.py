"""Use case turning one inbound frame into rendered output.

Purpose
-------
Chain the decoder, the heartbeat filter, and the renderer into the
``on_message`` callback handed to the connection manager.

Contents
--------
* :func:`create_process_request_log_event` – factory returning the callback.
* :data:`ProcessResult` – diagnostic dictionary returned per frame.

System Role
-----------
Runs synchronously on the connection manager's delivery thread. Every
recoverable condition (malformed envelope, non request-log variant, malformed
payload, heartbeat traffic) is absorbed here and reported through the
diagnostic logger and the returned dictionary; nothing is raised.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from request_log_tail.application.ports.renderer import RendererPort
from request_log_tail.domain.messages import IncomingMessage
from request_log_tail.domain.output import OutputFormat

from .decode import decode_message, decode_payload
from .filter_event import accept

ProcessResult = dict[str, Any]
ProcessCallable = Callable[[bytes | str], ProcessResult]


def create_process_request_log_event(
    *,
    renderer: RendererPort,
    output_format: OutputFormat,
    logger: logging.Logger,
) -> ProcessCallable:
    """Build the ``on_message`` callback for a tailing session.

    Parameters
    ----------
    renderer:
        Adapter implementing :class:`RendererPort`.
    output_format:
        Format forwarded to the renderer for every accepted event.
    logger:
        Diagnostic logger; never the output stream.

    Returns
    -------
    Callable[[bytes | str], dict[str, Any]]
        Callback returning ``{"ok": True, "request_log_id": ...}`` for rendered
        events or ``{"ok": False, "reason": ...}`` for skipped frames.

    Examples
    --------
    >>> class Recorder:
    ...     def __init__(self):
    ...         self.urls = []
    ...     def render(self, payload, raw_payload, *, output_format):
    ...         self.urls.append(payload.url)
    >>> recorder = Recorder()
    >>> process = create_process_request_log_event(
    ...     renderer=recorder, output_format=OutputFormat.DEFAULT, logger=logging.getLogger("doctest")
    ... )
    >>> frame = '{"type": "request_log_event", "request_log_id": "rl_1", "event_payload": "{\\\\"url\\\\": \\\\"/v1/charges\\\\"}"}'
    >>> process(frame)["ok"], recorder.urls
    (True, ['/v1/charges'])
    >>> process(b"{")["reason"]
    'not_request_log'
    """

    def process(raw: bytes | str) -> ProcessResult:
        message = decode_message(raw, logger)
        return _process_incoming_message(message, renderer=renderer, output_format=output_format, logger=logger)

    return process


def _process_incoming_message(
    message: IncomingMessage,
    *,
    renderer: RendererPort,
    output_format: OutputFormat,
    logger: logging.Logger,
) -> ProcessResult:
    event = message.request_log_event
    if event is None:
        logger.debug("WebSocket specified for request logs received non-request-logs event")
        return {"ok": False, "reason": "not_request_log"}

    logger.debug("Processing request log event", extra={"request_log_id": event.request_log_id})

    payload = decode_payload(event.event_payload, logger)
    if payload is None:
        return {"ok": False, "reason": "malformed_payload", "request_log_id": event.request_log_id}

    if not accept(payload, logger):
        return {"ok": False, "reason": "filtered", "request_log_id": event.request_log_id}

    renderer.render(payload, event.event_payload, output_format=output_format)
    return {"ok": True, "request_log_id": event.request_log_id}


__all__ = ["ProcessCallable", "ProcessResult", "create_process_request_log_event"]
