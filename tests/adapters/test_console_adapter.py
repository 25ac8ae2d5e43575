from __future__ import annotations

import re
from datetime import datetime, timezone
from io import StringIO

import pytest
from rich.console import Console
from rich.style import Style

from request_log_tail.adapters.console.rich_progress import RichProgress
from request_log_tail.adapters.console.rich_renderer import (
    MISSING_URL_PLACEHOLDER,
    TIME_FORMAT,
    RichRequestLogRenderer,
    format_timestamp,
)
from request_log_tail.application.ports import ProgressPort, RendererPort
from request_log_tail.domain.output import OutputFormat
from request_log_tail.domain.payload import EventPayload, RedactedError
from request_log_tail.domain.status import StatusClass
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def _payload(**overrides: object) -> EventPayload:
    values: dict[str, object] = {
        "created_at": 1700000000,
        "livemode": True,
        "method": "GET",
        "url": "/v1/charges",
        "request_id": "req_123",
        "status": 200,
    }
    values.update(overrides)
    return EventPayload(**values)  # type: ignore[arg-type]


def _links(renderer: RichRequestLogRenderer, payload: EventPayload) -> list[str]:
    text = renderer.format_summary(payload)
    return [span.style.link for span in text.spans if isinstance(span.style, Style) and span.style.link]


def _lines(console: Console) -> list[str]:
    return console.export_text().splitlines()


def test_renderer_satisfies_port(record_console: Console) -> None:
    assert isinstance(RichRequestLogRenderer(console=record_console), RendererPort)


def test_human_mode_live_payload_renders_single_summary_line(record_console: Console) -> None:
    renderer = RichRequestLogRenderer(console=record_console)
    payload = _payload()

    renderer.render(payload, "{}", output_format=OutputFormat.DEFAULT)

    expected_time = datetime.fromtimestamp(1700000000).strftime(TIME_FORMAT)
    assert _lines(record_console) == [f"{expected_time} [200] GET /v1/charges [req_123]"]
    assert _links(renderer, payload) == ["https://dashboard.stripe.com/logs/req_123"]


def test_human_mode_test_payload_links_to_test_dashboard(record_console: Console) -> None:
    renderer = RichRequestLogRenderer(console=record_console)

    links = _links(renderer, _payload(livemode=False))

    assert links == ["https://dashboard.stripe.com/test/logs/req_123"]


def test_empty_url_is_replaced_by_placeholder(record_console: Console) -> None:
    renderer = RichRequestLogRenderer(console=record_console)

    renderer.render(_payload(url=""), "{}", output_format=OutputFormat.DEFAULT)

    assert f"GET {MISSING_URL_PLACEHOLDER} [req_123]" in record_console.export_text()


def test_only_non_empty_error_fields_are_printed(record_console: Console) -> None:
    renderer = RichRequestLogRenderer(console=record_console)

    renderer.render(_payload(status=402, error=RedactedError(code="card_declined")), "{}", output_format=OutputFormat.DEFAULT)

    lines = _lines(record_console)
    assert len(lines) == 2
    assert lines[1] == "Code: card_declined"


def test_error_fields_are_printed_in_declaration_order(record_console: Console) -> None:
    renderer = RichRequestLogRenderer(console=record_console)
    error = RedactedError(param="amount", message="Invalid amount", type="invalid_request_error")

    renderer.render(_payload(status=400, error=error), "{}", output_format=OutputFormat.DEFAULT)

    assert _lines(record_console)[1:] == [
        "Type: invalid_request_error",
        "Message: Invalid amount",
        "Param: amount",
    ]


def test_summary_time_uses_configured_timezone(record_console: Console) -> None:
    renderer = RichRequestLogRenderer(console=record_console, timezone=timezone.utc)

    assert renderer.format_summary(_payload()).plain.startswith("2023-11-14 22:13:20 [200]")


@pytest.mark.parametrize(
    "created_at, expected",
    [
        (0, "1970-01-01 00:00:00"),
        (-86400, "1969-12-31 00:00:00"),
        (253402300800, "253402300800"),
        (10**13, "10000000000000"),
        (-(10**13), "-10000000000000"),
    ],
)
def test_summary_time_survives_out_of_range_timestamps(record_console: Console, created_at: int, expected: str) -> None:
    renderer = RichRequestLogRenderer(console=record_console, timezone=timezone.utc)

    renderer.render(_payload(created_at=created_at), "{}", output_format=OutputFormat.DEFAULT)

    assert _lines(record_console) == [f"{expected} [200] GET /v1/charges [req_123]"]
    assert format_timestamp(created_at, timezone.utc) == expected


def test_summary_time_defaults_to_local_zone_for_huge_timestamps() -> None:
    assert format_timestamp(10**13) == "10000000000000"
    assert format_timestamp(1700000000) == datetime.fromtimestamp(1700000000).strftime(TIME_FORMAT)


def test_json_mode_prints_raw_payload_verbatim(record_console: Console) -> None:
    renderer = RichRequestLogRenderer(console=record_console)
    raw = '{"url":"/v1/charges",  "status":200,"error":{"code":"","param":""}}'

    renderer.render(_payload(error=RedactedError(code="ignored")), raw, output_format=OutputFormat.JSON)

    assert record_console.export_text() == raw + "\n"


def test_json_mode_keeps_tabs_and_other_json_whitespace(record_console: Console) -> None:
    renderer = RichRequestLogRenderer(console=record_console)
    raw = '{"status":\t200,\n\t"url": "/v1/charges"}'

    renderer.render(_payload(), raw, output_format=OutputFormat.JSON)

    assert record_console.export_text() == raw + "\n"


def test_json_mode_colourises_without_changing_text() -> None:
    buffer = StringIO()
    console = Console(file=buffer, force_terminal=True, color_system="standard", width=40)
    renderer = RichRequestLogRenderer(console=console)
    raw = '{"status": 200, "url": "/v1/charges/with/a/rather/long/path"}'

    renderer.render(_payload(), raw, output_format=OutputFormat.JSON)

    output = buffer.getvalue()
    assert "\x1b[" in output
    assert ANSI_RE.sub("", output) == raw + "\n"


@pytest.mark.parametrize(
    "status, style",
    [(200, "bold green"), (301, "bold cyan"), (404, "bold yellow"), (500, "bold red"), (0, "bold")],
)
def test_status_is_styled_by_class(record_console: Console, status: int, style: str) -> None:
    renderer = RichRequestLogRenderer(console=record_console)
    text = renderer.format_summary(_payload(status=status))

    styles = [span.style for span in text.spans if text.plain[span.start : span.end] == str(status)]
    assert styles == [style]


def test_status_styles_accept_overrides(record_console: Console) -> None:
    renderer = RichRequestLogRenderer(console=record_console, styles={"server_error": "magenta", StatusClass.SUCCESS: "blue"})

    server = renderer.format_summary(_payload(status=503))
    success = renderer.format_summary(_payload(status=200))

    assert "magenta" in [span.style for span in server.spans]
    assert "blue" in [span.style for span in success.spans]


def test_progress_satisfies_port_and_stop_is_idempotent(record_console: Console) -> None:
    progress = RichProgress(console=record_console)
    assert isinstance(progress, ProgressPort)

    progress.start("Getting ready...")
    assert progress.active is True
    progress.stop("Ready!")
    progress.stop("Ready!")

    assert progress.active is False
    assert record_console.export_text().count("Ready!") == 1


def test_progress_stop_without_start_prints_nothing(record_console: Console) -> None:
    progress = RichProgress(console=record_console)

    progress.stop("Ready!")

    assert record_console.export_text() == ""
