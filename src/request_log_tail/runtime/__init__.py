"""Runtime façade: session configuration, cancellation, and the dispatch loop.

Purpose
-------
Expose the stable entry points host code uses to tail request logs
(:class:`Config`, :class:`Tailer`) together with the cancellation primitives
callers need to stop a session from the outside.

System Role
-----------
Composition boundary of the package. Inner layers (``domain``,
``application``) never import from here; adapters are only wired in
:mod:`request_log_tail.runtime._composition`.
"""

from __future__ import annotations

from ._cancellation import DEFAULT_SIGNALS, CancelScope, InterruptSource, with_signal_cancel
from ._settings import DEFAULT_API_BASE_URL, DEFAULT_WEBSOCKET_FEATURE, Config, discard_logger
from ._tailer import GETTING_READY_MESSAGE, READY_MESSAGE, Tailer

__all__ = [
    "CancelScope",
    "Config",
    "DEFAULT_API_BASE_URL",
    "DEFAULT_SIGNALS",
    "DEFAULT_WEBSOCKET_FEATURE",
    "GETTING_READY_MESSAGE",
    "InterruptSource",
    "READY_MESSAGE",
    "Tailer",
    "discard_logger",
    "with_signal_cancel",
]
