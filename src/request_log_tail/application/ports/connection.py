"""Port describing the connection manager that feeds the pipeline.

Purpose
-------
Capture the callback contract between the dispatch loop and whichever
transport delivers request-log frames, so the loop can be exercised with an
in-memory fake.

System Role
-----------
The manager owns connection establishment, keep-alive, and reconnection. The
pipeline only relies on the guarantees listed on :class:`ConnectionManagerPort`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from request_log_tail.runtime._cancellation import CancelScope

MessageCallback = Callable[[bytes | str], object]
TerminateCallback = Callable[[BaseException], None]
ConnectCallback = Callable[[], None]


@runtime_checkable
class ConnectionManagerPort(Protocol):
    """Deliver inbound frames to the pipeline until ``scope`` is cancelled.

    Implementations must:

    * return from :meth:`run` promptly and deliver on their own thread;
    * invoke ``on_message`` serially, never overlapping two calls;
    * invoke ``on_terminate`` at most once, for unrecoverable failures only;
    * stop delivering once ``scope`` is cancelled.
    """

    def run(
        self,
        scope: "CancelScope",
        on_message: MessageCallback,
        on_terminate: TerminateCallback,
        *,
        on_connect: ConnectCallback | None = None,
    ) -> None:
        """Start delivering frames in the background."""


__all__ = ["ConnectCallback", "ConnectionManagerPort", "MessageCallback", "TerminateCallback"]
