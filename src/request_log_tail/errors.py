"""Exception hierarchy shared by the tailing runtime and its adapters.

Only two outcomes of a tailing session cross the :meth:`Tailer.run` boundary:
a clean return on cancellation and :class:`ConnectionTerminatedError` when the
connection manager gives up. Decode failures and filtered events never surface
here; they are absorbed and logged by the pipeline.
"""

from __future__ import annotations


class RequestLogTailError(RuntimeError):
    """Base class for every error raised by :mod:`request_log_tail`."""


class ConnectionTerminatedError(RequestLogTailError):
    """The connection manager reported an unrecoverable failure.

    The original collaborator error is chained as ``__cause__``.
    """


class SessionAuthorizationError(RequestLogTailError):
    """Creating the CLI session over HTTP failed."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SessionAlreadyStartedError(RequestLogTailError):
    """A :class:`Tailer` was asked to run a second time."""


__all__ = [
    "ConnectionTerminatedError",
    "RequestLogTailError",
    "SessionAlreadyStartedError",
    "SessionAuthorizationError",
]
