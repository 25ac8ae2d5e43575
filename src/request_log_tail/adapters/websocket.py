"""WebSocket connection manager implementing :class:`ConnectionManagerPort`.

Purpose
-------
Authorize a CLI session, hold the WebSocket open with ping/pong liveness
checks, and hand every inbound frame to the pipeline on a dedicated thread.

Contents
--------
* :class:`WebSocketConnectionManager` – background reader thread.

System Role
-----------
Owns transport concerns the dispatch loop stays out of: handshake, keep-alive,
and reconnecting after a dropped connection. Frames are delivered serially
from one thread; ``on_terminate`` fires at most once, for failures that cannot
be recovered by reconnecting (authorization errors, callback failures).
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from websockets.exceptions import WebSocketException
from websockets.sync.client import connect as websocket_connect

from request_log_tail.application.ports.connection import (
    ConnectCallback,
    ConnectionManagerPort,
    MessageCallback,
    TerminateCallback,
)
from request_log_tail.domain.filters import LogFilters

from .session import USER_AGENT, CLISession, SessionAuthorizer

if TYPE_CHECKING:
    from request_log_tail.runtime._cancellation import CancelScope

LOGGER = logging.getLogger(__name__)

DEFAULT_PONG_WAIT = 10.0
DEFAULT_WRITE_WAIT = 5.0


class _CallbackFailed(Exception):
    """Wraps an exception raised by ``on_message`` so it is not retried."""


class WebSocketConnectionManager(ConnectionManagerPort):
    """Deliver request-log frames from a WebSocket session.

    Parameters
    ----------
    authorizer:
        :class:`SessionAuthorizer` consulted before every connection attempt.
    filters:
        Server-side filters sent with the session request.
    websocket_feature:
        Feature requested for the connection.
    no_wss:
        Downgrade ``wss://`` URLs to ``ws://``.
    pong_wait:
        Seconds to wait for a pong before treating the connection as dead.
        Pings go out every nine tenths of this interval.
    write_wait:
        Seconds allowed for the opening and closing handshakes.
    connect:
        Factory compatible with :func:`websockets.sync.client.connect`.
    """

    def __init__(
        self,
        *,
        authorizer: SessionAuthorizer,
        filters: LogFilters,
        websocket_feature: str,
        no_wss: bool = False,
        logger: logging.Logger | None = None,
        pong_wait: float = DEFAULT_PONG_WAIT,
        write_wait: float = DEFAULT_WRITE_WAIT,
        poll_interval: float = 0.5,
        connect: Callable[..., Any] = websocket_connect,
    ) -> None:
        self._authorizer = authorizer
        self._filters = filters
        self._websocket_feature = websocket_feature
        self._no_wss = no_wss
        self._log = logger if logger is not None else LOGGER
        self._pong_wait = pong_wait
        self._write_wait = write_wait
        self._poll_interval = poll_interval
        self._connect = connect
        self._thread: threading.Thread | None = None

    def run(
        self,
        scope: "CancelScope",
        on_message: MessageCallback,
        on_terminate: TerminateCallback,
        *,
        on_connect: ConnectCallback | None = None,
    ) -> None:
        """Start the reader thread and return immediately."""
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("WebSocketConnectionManager is already running")
        self._thread = threading.Thread(
            target=self._serve,
            args=(scope, on_message, on_terminate, on_connect),
            name="request-log-tail-websocket",
            daemon=True,
        )
        self._thread.start()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the reader thread; return ``True`` once it has exited."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def websocket_url(self, session: CLISession) -> str:
        """Return the URL to dial for ``session``.

        Examples
        --------
        >>> manager = WebSocketConnectionManager(
        ...     authorizer=None, filters=LogFilters(), websocket_feature="request_logs", no_wss=True
        ... )
        >>> manager.websocket_url(CLISession("wss://example.test/subscribe", "ws_1", "request_logs"))
        'ws://example.test/subscribe?websocket_feature=request_logs'
        """
        url = session.websocket_url
        if self._no_wss and url.startswith("wss://"):
            url = "ws://" + url[len("wss://"):]
        separator = "&" if "?" in url else "?"
        return f"{url}{separator}websocket_feature={quote(session.websocket_authorized_feature)}"

    def _serve(
        self,
        scope: "CancelScope",
        on_message: MessageCallback,
        on_terminate: TerminateCallback,
        on_connect: ConnectCallback | None,
    ) -> None:
        try:
            while not scope.cancelled:
                session = self._authorizer.authorize(
                    websocket_feature=self._websocket_feature,
                    filters=self._filters,
                )
                try:
                    self._deliver(session, scope, on_message, on_connect)
                except (OSError, TimeoutError, WebSocketException) as exc:
                    if scope.cancelled:
                        break
                    delay = max(session.reconnect_delay, 1)
                    self._log.debug("WebSocket connection lost (%s); reconnecting in %ss", exc, delay)
                    scope.wait(delay)
        except _CallbackFailed as exc:
            self._terminate(scope, on_terminate, exc.__cause__ or exc)
        except Exception as exc:  # noqa: BLE001
            self._terminate(scope, on_terminate, exc)
        self._log.debug("WebSocket reader stopped")

    def _terminate(self, scope: "CancelScope", on_terminate: TerminateCallback, error: BaseException) -> None:
        if scope.cancelled:
            self._log.debug("Ignoring error after cancellation: %s", error)
            return
        on_terminate(error)

    def _deliver(
        self,
        session: CLISession,
        scope: "CancelScope",
        on_message: MessageCallback,
        on_connect: ConnectCallback | None,
    ) -> None:
        url = self.websocket_url(session)
        headers = {"Websocket-Id": session.websocket_id, "Accept-Encoding": "identity"}
        self._log.debug("Connecting to %s", url)
        with self._connect(
            url,
            additional_headers=headers,
            user_agent_header=USER_AGENT,
            open_timeout=self._write_wait,
            close_timeout=self._write_wait,
        ) as websocket:
            self._log.debug("Connected", extra={"websocket_id": session.websocket_id})
            if on_connect is not None:
                on_connect()
            self._read_loop(websocket, scope, on_message)

    def _read_loop(self, websocket: Any, scope: "CancelScope", on_message: MessageCallback) -> None:
        ping_period = self._pong_wait * 9 / 10
        next_ping = time.monotonic() + ping_period
        pong: threading.Event | None = None
        pong_deadline = 0.0

        while not scope.cancelled:
            now = time.monotonic()
            if pong is not None and not pong.is_set() and now >= pong_deadline:
                raise TimeoutError(f"No pong received within {self._pong_wait}s")
            if now >= next_ping:
                pong = websocket.ping()
                pong_deadline = now + self._pong_wait
                next_ping = now + ping_period

            try:
                frame = websocket.recv(timeout=self._poll_interval)
            except TimeoutError:
                continue

            try:
                on_message(frame)
            except Exception as exc:
                raise _CallbackFailed("on_message raised") from exc


__all__ = ["DEFAULT_PONG_WAIT", "DEFAULT_WRITE_WAIT", "WebSocketConnectionManager"]
