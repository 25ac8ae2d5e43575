"""Port for the transient progress indicator shown while connecting."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ProgressPort(Protocol):
    """Show a spinner until the session is ready or stops."""

    def start(self, message: str) -> None:
        """Show ``message`` next to a spinner."""

    def stop(self, final_message: str | None = None) -> None:
        """Remove the spinner, optionally printing ``final_message``. Idempotent."""


__all__ = ["ProgressPort"]
