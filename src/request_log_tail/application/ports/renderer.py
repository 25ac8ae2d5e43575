"""Renderer port describing how accepted events reach stdout."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from request_log_tail.domain.output import OutputFormat
from request_log_tail.domain.payload import EventPayload


@runtime_checkable
class RendererPort(Protocol):
    """Write one accepted request-log event to the output stream."""

    def render(self, payload: EventPayload, raw_payload: str, *, output_format: OutputFormat) -> None:
        """Render ``payload``; JSON mode prints ``raw_payload`` verbatim."""


__all__ = ["RendererPort"]
