from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterable
from datetime import timezone
from typing import Any

import pytest
from rich.console import Console

from request_log_tail.adapters.console.rich_renderer import RichRequestLogRenderer
from request_log_tail.adapters.session import CLISession
from request_log_tail.adapters.websocket import WebSocketConnectionManager
from request_log_tail.application.ports import ConnectionManagerPort
from request_log_tail.application.use_cases.process_event import create_process_request_log_event
from request_log_tail.domain.filters import LogFilters
from request_log_tail.domain.output import OutputFormat
from request_log_tail.errors import SessionAuthorizationError
from request_log_tail.runtime import CancelScope
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]

_SESSION = CLISession(
    websocket_url="wss://stripecli.example.test/subscribe",
    websocket_id="ws_123",
    websocket_authorized_feature="request_logs",
    reconnect_delay=1,
)


class _FakeAuthorizer:
    def __init__(self, outcomes: Iterable[CLISession | Exception]) -> None:
        self._outcomes = list(outcomes)
        self.calls: list[dict[str, Any]] = []

    def authorize(self, **kwargs: Any) -> CLISession:
        self.calls.append(kwargs)
        outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class _FakeWebSocket:
    """Yield scripted frames, then cancel the scope once they are exhausted."""

    def __init__(self, frames: list[str], scope: CancelScope) -> None:
        self._frames = list(frames)
        self._scope = scope
        self.pings = 0

    def __enter__(self) -> "_FakeWebSocket":
        return self

    def __exit__(self, *exc: object) -> None:
        return None

    def recv(self, timeout: float | None = None) -> str:
        if self._frames:
            return self._frames.pop(0)
        self._scope.cancel()
        raise TimeoutError

    def ping(self) -> threading.Event:
        self.pings += 1
        event = threading.Event()
        event.set()
        return event


class _FakeConnect:
    def __init__(self, sockets: list[_FakeWebSocket | Exception]) -> None:
        self._sockets = sockets
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def __call__(self, url: str, **kwargs: Any) -> _FakeWebSocket:
        self.calls.append((url, kwargs))
        outcome = self._sockets.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _manager(authorizer: _FakeAuthorizer, connect: _FakeConnect, **kwargs: Any) -> WebSocketConnectionManager:
    return WebSocketConnectionManager(
        authorizer=authorizer,  # type: ignore[arg-type]
        filters=LogFilters(filter_source=("API",)),
        websocket_feature="request_logs",
        poll_interval=0.01,
        connect=connect,
        **kwargs,
    )


def _run(manager: WebSocketConnectionManager, scope: CancelScope) -> tuple[list[Any], list[BaseException], list[str]]:
    messages: list[Any] = []
    errors: list[BaseException] = []
    events: list[str] = []
    manager.run(scope, messages.append, errors.append, on_connect=lambda: events.append("connected"))
    assert manager.join(timeout=5)
    return messages, errors, events


def test_manager_satisfies_port() -> None:
    assert isinstance(_manager(_FakeAuthorizer([_SESSION]), _FakeConnect([])), ConnectionManagerPort)


def test_frames_are_delivered_serially_in_order() -> None:
    scope = CancelScope()
    connect = _FakeConnect([_FakeWebSocket(["one", "two", "three"], scope)])
    authorizer = _FakeAuthorizer([_SESSION])

    messages, errors, events = _run(_manager(authorizer, connect), scope)

    assert messages == ["one", "two", "three"]
    assert errors == []
    assert events == ["connected"]
    assert authorizer.calls == [{"websocket_feature": "request_logs", "filters": LogFilters(filter_source=("API",))}]


def test_connect_uses_authorized_feature_and_session_headers() -> None:
    scope = CancelScope()
    connect = _FakeConnect([_FakeWebSocket([], scope)])

    _run(_manager(_FakeAuthorizer([_SESSION]), connect, no_wss=True), scope)

    url, kwargs = connect.calls[0]
    assert url == "ws://stripecli.example.test/subscribe?websocket_feature=request_logs"
    assert kwargs["additional_headers"]["Websocket-Id"] == "ws_123"
    assert kwargs["open_timeout"] == 5.0


def test_authorization_failure_terminates_once() -> None:
    scope = CancelScope()
    failure = SessionAuthorizationError("Authorization failed with status 401")

    messages, errors, events = _run(_manager(_FakeAuthorizer([failure]), _FakeConnect([])), scope)

    assert errors == [failure]
    assert messages == []
    assert events == []


def test_callback_failure_terminates_with_original_error() -> None:
    scope = CancelScope()
    connect = _FakeConnect([_FakeWebSocket(["boom"], scope)])
    manager = _manager(_FakeAuthorizer([_SESSION]), connect)
    errors: list[BaseException] = []
    failure = BrokenPipeError("stdout closed")

    def on_message(frame: str) -> None:
        raise failure

    manager.run(scope, on_message, errors.append)
    assert manager.join(timeout=5)

    assert errors == [failure]


def test_dropped_connection_reconnects_after_delay() -> None:
    scope = CancelScope()
    connect = _FakeConnect([ConnectionRefusedError("refused"), _FakeWebSocket(["after-reconnect"], scope)])
    authorizer = _FakeAuthorizer([_SESSION])

    messages, errors, events = _run(_manager(authorizer, connect), scope)

    assert messages == ["after-reconnect"]
    assert errors == []
    assert len(authorizer.calls) == 2
    assert events == ["connected"]


def test_missing_pong_is_treated_as_dropped_connection() -> None:
    scope = CancelScope()

    class _SilentSocket(_FakeWebSocket):
        def recv(self, timeout: float | None = None) -> str:
            raise TimeoutError

        def ping(self) -> threading.Event:
            self.pings += 1
            return threading.Event()

    silent = _SilentSocket([], scope)
    replacement = _FakeWebSocket(["hello"], scope)
    connect = _FakeConnect([silent, replacement])

    messages, errors, _ = _run(_manager(_FakeAuthorizer([_SESSION]), connect, pong_wait=0.05), scope)

    assert silent.pings >= 1
    assert messages == ["hello"]
    assert errors == []


def test_cancelled_scope_stops_without_connecting() -> None:
    scope = CancelScope()
    scope.cancel()
    connect = _FakeConnect([])
    authorizer = _FakeAuthorizer([_SESSION])

    messages, errors, events = _run(_manager(authorizer, connect), scope)

    assert (messages, errors, events) == ([], [], [])
    assert authorizer.calls == []


def test_run_twice_while_running_is_rejected() -> None:
    scope = CancelScope()
    release = threading.Event()

    class _BlockingAuthorizer(_FakeAuthorizer):
        def authorize(self, **kwargs: Any) -> CLISession:
            release.wait(5)
            raise SessionAuthorizationError("stop")

    manager = _manager(_BlockingAuthorizer([_SESSION]), _FakeConnect([]))
    manager.run(scope, lambda frame: None, lambda err: None)
    try:
        with pytest.raises(RuntimeError, match="already running"):
            manager.run(scope, lambda frame: None, lambda err: None)
    finally:
        release.set()
        assert manager.join(timeout=5)


def _request_log_frame(url: str, *, created_at: int) -> str:
    payload = json.dumps({"created_at": created_at, "method": "GET", "url": url, "request_id": "req_1", "status": 200})
    return json.dumps({"type": "request_log_event", "request_log_id": "rl_1", "event_payload": payload})


def test_odd_events_do_not_end_the_session(record_console: Console, diagnostic_logger: logging.Logger) -> None:
    scope = CancelScope()
    frames = [
        _request_log_frame("/v1/far-future", created_at=10**13),
        "[" * 200000,
        _request_log_frame("/v1/ok", created_at=1700000000),
    ]
    connect = _FakeConnect([_FakeWebSocket(frames, scope)])
    process = create_process_request_log_event(
        renderer=RichRequestLogRenderer(console=record_console, timezone=timezone.utc),
        output_format=OutputFormat.DEFAULT,
        logger=diagnostic_logger,
    )
    manager = _manager(_FakeAuthorizer([_SESSION]), connect)
    errors: list[BaseException] = []

    manager.run(scope, process, errors.append)
    assert manager.join(timeout=5)

    assert errors == []
    assert record_console.export_text().splitlines() == [
        "10000000000000 [200] GET /v1/far-future [req_1]",
        "2023-11-14 22:13:20 [200] GET /v1/ok [req_1]",
    ]
