"""Spinner shown on the diagnostic console while the session connects."""

from __future__ import annotations

import threading

from rich.console import Console
from rich.status import Status

from request_log_tail.application.ports.progress import ProgressPort


class RichProgress(ProgressPort):
    """Wrap :meth:`rich.console.Console.status` behind :class:`ProgressPort`."""

    def __init__(self, *, console: Console | None = None, spinner: str = "dots") -> None:
        self._console = console if console is not None else Console(stderr=True)
        self._spinner = spinner
        self._status: Status | None = None
        self._lock = threading.Lock()

    def start(self, message: str) -> None:
        with self._lock:
            if self._status is not None:
                self._status.update(message)
                return
            self._status = self._console.status(message, spinner=self._spinner)
            self._status.start()

    def stop(self, final_message: str | None = None) -> None:
        with self._lock:
            status, self._status = self._status, None
        if status is None:
            return
        status.stop()
        if final_message:
            self._console.print(final_message, highlight=False)

    @property
    def active(self) -> bool:
        return self._status is not None


__all__ = ["RichProgress"]
