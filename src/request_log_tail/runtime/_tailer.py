"""Dispatch loop binding one :class:`Config` to one tailing session.

Purpose
-------
Own the cancellable scope of a session, wire the connection manager's
callbacks to decode, filter, and render, and resolve exactly one terminal
outcome: a clean return on cancellation or :class:`ConnectionTerminatedError`
when the connection fails for good.

Contents
--------
* :class:`Tailer` – the session object; :meth:`Tailer.run` blocks until done.

System Role
-----------
Outermost piece of the core. The CLI constructs a :class:`Tailer` from flags
and environment; tests inject fake collaborators through the constructor.
"""

from __future__ import annotations

import logging
import queue

from request_log_tail.application.ports import ConnectionManagerPort, ProgressPort, RendererPort
from request_log_tail.application.use_cases.process_event import create_process_request_log_event
from request_log_tail.errors import ConnectionTerminatedError, SessionAlreadyStartedError

from ._cancellation import CancelScope, InterruptSource, with_signal_cancel
from ._composition import create_connection_manager, create_progress, create_renderer
from ._settings import Config

GETTING_READY_MESSAGE = "Getting ready..."
READY_MESSAGE = "Ready! You're now waiting to receive API request logs (^C to quit)"


class Tailer:
    """Run a single request-log tailing session.

    A tailer moves from idle to running inside :meth:`run` and is terminated
    once :meth:`run` returns; it cannot be restarted.

    Parameters
    ----------
    config:
        Session :class:`Config`.
    connection, renderer, progress:
        Optional collaborators; defaults are built from ``config``.
    interrupts:
        Interrupt channel owned by this session. Defaults to a fresh
        :class:`InterruptSource` for SIGINT and SIGTERM.
    poll_interval:
        Upper bound, in seconds, between checks of the cancellation scope.
    """

    def __init__(
        self,
        config: Config,
        *,
        connection: ConnectionManagerPort | None = None,
        renderer: RendererPort | None = None,
        progress: ProgressPort | None = None,
        interrupts: InterruptSource | None = None,
        poll_interval: float = 0.5,
    ) -> None:
        self._config = config
        self._log: logging.Logger = config.logger
        self._connection = connection if connection is not None else create_connection_manager(config)
        self._renderer = renderer if renderer is not None else create_renderer()
        self._progress = progress if progress is not None else create_progress()
        self._interrupts = interrupts if interrupts is not None else InterruptSource()
        self._poll_interval = poll_interval
        self._started = False

    @property
    def config(self) -> Config:
        return self._config

    def run(self, parent: CancelScope | None = None) -> None:
        """Tail request logs until interrupted, cancelled, or terminated.

        Parameters
        ----------
        parent:
            Optional caller-owned scope; cancelling it ends the session
            cleanly.

        Raises
        ------
        ConnectionTerminatedError
            When the connection manager reported a fatal error. The original
            error is chained as ``__cause__``.
        SessionAlreadyStartedError
            When called a second time on the same instance.
        """

        if self._started:
            raise SessionAlreadyStartedError("A Tailer can only run once; construct a new one to tail again")
        self._started = True

        self._progress.start(GETTING_READY_MESSAGE)
        scope, cancel = with_signal_cancel(parent, self._on_interrupt, self._interrupts)

        errors: queue.Queue[BaseException] = queue.Queue(maxsize=1)

        def on_terminate(err: BaseException) -> None:
            self._log.critical("Terminating... %s", err)
            try:
                errors.put_nowait(err)
            except queue.Full:
                self._log.debug("Ignoring additional termination error: %s", err)
            cancel()

        def on_connect() -> None:
            self._progress.stop(READY_MESSAGE)

        on_message = create_process_request_log_event(
            renderer=self._renderer,
            output_format=self._config.output_format,
            logger=self._log,
        )

        try:
            self._connection.run(scope, on_message, on_terminate, on_connect=on_connect)
            while not scope.wait(self._poll_interval):
                pass
        finally:
            cancel()
            self._interrupts.restore()
            self._progress.stop()

        try:
            err = errors.get_nowait()
        except queue.Empty:
            return None
        raise ConnectionTerminatedError(str(err) or type(err).__name__) from err

    def _on_interrupt(self) -> None:
        self._log.debug("Ctrl+C received, cleaning up...")


__all__ = ["GETTING_READY_MESSAGE", "READY_MESSAGE", "Tailer"]
