"""Rich-powered renderer implementing :class:`RendererPort`.

Purpose
-------
Print accepted request-log events to stdout either as highlighted raw JSON or
as a one-line human summary followed by the non-empty error fields.

Contents
--------
* :data:`TIME_FORMAT` – wall-clock layout of the summary line.
* :data:`MISSING_URL_PLACEHOLDER` – shown when the payload carries no path.
* :class:`RichRequestLogRenderer` – adapter constructed by the composition root.
* :func:`format_timestamp` – summary time that never raises.

System Role
-----------
Primary human-facing sink. Writes are not synchronised; the connection
manager delivers events serially, so multi-line output never interleaves.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timedelta, timezone, tzinfo

from rich.console import Console
from rich.highlighter import JSONHighlighter
from rich.segment import Segments
from rich.style import Style
from rich.text import Text

from request_log_tail.application.ports.renderer import RendererPort
from request_log_tail.domain.output import OutputFormat
from request_log_tail.domain.payload import EventPayload
from request_log_tail.domain.status import StatusClass

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
MISSING_URL_PLACEHOLDER = "[View path in dashboard]"


class RichRequestLogRenderer(RendererPort):
    """Render request-log events with Rich styling and dashboard hyperlinks."""

    def __init__(
        self,
        *,
        console: Console | None = None,
        force_color: bool = False,
        no_color: bool = False,
        styles: Mapping[StatusClass | str, str] | None = None,
        timezone: tzinfo | None = None,
    ) -> None:
        """Configure the output console, colour handling, and status styles.

        ``timezone`` defaults to the local zone of the host.
        """
        if console is not None:
            self._console = console
        else:
            self._console = Console(force_terminal=True if force_color else None, no_color=no_color, highlight=False)
        self._timezone = timezone
        self._highlighter = JSONHighlighter()
        merged = {member: member.style for member in StatusClass}
        for key, value in (styles or {}).items():
            status_class = StatusClass.from_name(key) if isinstance(key, str) else key
            merged[status_class] = value
        self._style_map = merged

    def render(self, payload: EventPayload, raw_payload: str, *, output_format: OutputFormat) -> None:
        """Print one event.

        Examples
        --------
        >>> from io import StringIO
        >>> console = Console(file=StringIO(), record=True)
        >>> renderer = RichRequestLogRenderer(console=console)
        >>> renderer.render(EventPayload(), '{"status": 200}', output_format=OutputFormat.JSON)
        >>> console.export_text()
        '{"status": 200}\\n'
        """
        if output_format is OutputFormat.JSON:
            # Text.render keeps tabs; printing the Text itself would expand them to spaces.
            highlighted = self._highlighter(Text(raw_payload))
            self._console.print(Segments(highlighted.render(self._console, end="\n")), soft_wrap=True, highlight=False)
            return

        self._console.print(self.format_summary(payload), soft_wrap=True, highlight=False)
        for line in self.format_error_lines(payload):
            self._console.print(line, soft_wrap=True, highlight=False)

    def format_summary(self, payload: EventPayload) -> Text:
        """Return ``<time> [<status>] <method> <url> [<request id>]`` as styled text."""

        local_time = format_timestamp(payload.created_at, self._timezone)
        url = payload.url or MISSING_URL_PLACEHOLDER
        status_style = self._style_map[StatusClass.from_status(payload.status)]

        line = Text()
        line.append(local_time, style="dim")
        line.append(" [")
        line.append(str(payload.status), style=status_style)
        line.append(f"] {payload.method} {url} [")
        line.append(payload.request_id, style=Style(link=payload.dashboard_url()))
        line.append("]")
        return line

    @staticmethod
    def format_error_lines(payload: EventPayload) -> list[Text]:
        """Return one ``Label: value`` line per non-empty error field."""

        return [Text(f"{label}: {value}") for label, value in payload.error.present_fields()]


def format_timestamp(created_at: int, tz: tzinfo | None = None) -> str:
    """Format epoch seconds with :data:`TIME_FORMAT`, falling back to the raw number.

    Timestamps the platform clock cannot convert are computed from the epoch
    directly; values beyond the years datetime supports print as given.

    Examples
    --------
    >>> format_timestamp(1700000000, timezone.utc)
    '2023-11-14 22:13:20'
    >>> format_timestamp(10**13, timezone.utc)
    '10000000000000'
    """

    try:
        return datetime.fromtimestamp(created_at, tz=tz).strftime(TIME_FORMAT)
    except (OverflowError, OSError, ValueError):
        pass
    try:
        moment = _EPOCH + timedelta(seconds=created_at)
        return (moment.astimezone(tz) if tz is not None else moment.astimezone()).strftime(TIME_FORMAT)
    except (OverflowError, OSError, ValueError):
        return str(created_at)


__all__ = ["MISSING_URL_PLACEHOLDER", "RichRequestLogRenderer", "TIME_FORMAT", "format_timestamp"]
