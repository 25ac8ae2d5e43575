"""Cooperative cancellation linked to process interrupt signals.

Purpose
-------
Give a tailing session one cancellation token that fires exactly once,
whether the operator presses Ctrl+C, the process receives SIGTERM, the caller
cancels a parent scope, or the connection manager reports a fatal error.

Contents
--------
* :class:`CancelScope` – level-triggered, idempotent cancellation token.
* :class:`InterruptSource` – caller-owned one-slot interrupt channel.
* :func:`with_signal_cancel` – derive a scope cancelled by the first signal.

System Role
-----------
The scope is the single source of truth observed by the dispatch loop and the
connection manager. Interrupt registration is owned by the session instead of
being process-global, so independent sessions never share a subscription.
"""

from __future__ import annotations

import logging
import queue
import signal
import threading
from collections.abc import Callable, Iterable
from types import FrameType
from typing import Any

LOGGER = logging.getLogger(__name__)

DEFAULT_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)

SignalInstaller = Callable[[int, Any], Any]


class CancelScope:
    """Cancellation token shared by the session's threads.

    Cancellation is level-triggered: once :meth:`cancel` succeeds every later
    check observes it. Only the first call takes effect.

    Examples
    --------
    >>> parent = CancelScope()
    >>> child = CancelScope(parent)
    >>> parent.cancel(), parent.cancel()
    (True, False)
    >>> child.cancelled
    True
    """

    def __init__(self, parent: "CancelScope | None" = None) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []
        if parent is not None:
            parent.add_done_callback(self.cancel)

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> bool:
        """Cancel the scope; return ``True`` only for the call that took effect."""

        with self._lock:
            if self._event.is_set():
                return False
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback()
            except Exception as exc:  # noqa: BLE001
                LOGGER.error("Cancellation callback raised; continuing", exc_info=exc)
        return True

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or ``timeout`` elapses; return :attr:`cancelled`."""

        return self._event.wait(timeout)

    def add_done_callback(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` once on cancellation, immediately if already cancelled."""

        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback()


class InterruptSource:
    """One-slot channel fed by process interrupt signals.

    :meth:`notify` is the installed signal handler. A signal arriving while
    another one is still pending is dropped; the process is already shutting
    down at that point.
    """

    def __init__(
        self,
        signals: Iterable[int] = DEFAULT_SIGNALS,
        *,
        install: SignalInstaller = signal.signal,
    ) -> None:
        self._signals = tuple(signals)
        self._install = install
        self._slot: queue.Queue[int] = queue.Queue(maxsize=1)
        self._previous: dict[int, Any] = {}
        self._lock = threading.Lock()
        self._subscribed = False

    def notify(self, signum: int, frame: FrameType | None = None) -> None:
        """Record ``signum`` unless a signal is already pending."""

        try:
            self._slot.put_nowait(signum)
        except queue.Full:
            LOGGER.debug("Signal %s dropped; another interrupt is already pending", signum)

    def subscribe(self) -> None:
        """Install :meth:`notify` for every configured signal."""

        with self._lock:
            if self._subscribed:
                return
            self._subscribed = True
            for signum in self._signals:
                try:
                    self._previous[signum] = self._install(signum, self.notify)
                except ValueError as exc:
                    # signal handlers can only be installed from the main thread
                    LOGGER.debug("Cannot subscribe to signal %s: %s", signum, exc)

    def restore(self) -> None:
        """Reinstall the handlers that were active before :meth:`subscribe`.

        Handlers that cannot be reinstalled from the calling thread stay
        pending, so a later call from the main thread completes the restore.
        """

        with self._lock:
            for signum, handler in list(self._previous.items()):
                if handler is not None:
                    try:
                        self._install(signum, handler)
                    except ValueError as exc:
                        LOGGER.debug("Cannot restore handler for signal %s yet: %s", signum, exc)
                        continue
                del self._previous[signum]
            self._subscribed = bool(self._previous)

    def wait(self, timeout: float | None = None) -> int | None:
        """Return the pending signal number, or ``None`` when ``timeout`` elapses."""

        try:
            return self._slot.get(timeout=timeout)
        except queue.Empty:
            return None


def with_signal_cancel(
    parent: CancelScope | None,
    on_cancel: Callable[[], None],
    interrupts: InterruptSource,
    *,
    poll_interval: float = 0.2,
) -> tuple[CancelScope, Callable[[], None]]:
    """Return a child scope cancelled by the first interrupt signal.

    On the first signal ``on_cancel`` runs exactly once, then the scope is
    cancelled. The returned ``cancel`` callable cancels the scope too and is
    safe to call repeatedly. The listener thread exits as soon as the scope is
    cancelled by any path, and the previous signal handlers are restored.
    """

    scope = CancelScope(parent)
    interrupts.subscribe()
    scope.add_done_callback(interrupts.restore)

    def listen() -> None:
        while not scope.cancelled:
            signum = interrupts.wait(poll_interval)
            if signum is None:
                continue
            LOGGER.debug("Received signal %s", signum)
            on_cancel()
            scope.cancel()
            return

    listener = threading.Thread(target=listen, name="request-log-tail-signals", daemon=True)
    listener.start()

    def cancel() -> None:
        scope.cancel()

    return scope, cancel


__all__ = ["CancelScope", "DEFAULT_SIGNALS", "InterruptSource", "with_signal_cancel"]
