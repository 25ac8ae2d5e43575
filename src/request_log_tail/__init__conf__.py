"""Static package metadata surfaced by the CLI ``info`` command.

Keeping the values in one module lets ``--version``, the ``info`` banner, and
the console-script name stay in sync without importing packaging metadata at
runtime.
"""

from __future__ import annotations

name = "request_log_tail"
title = "Live tail of API request logs over a WebSocket session"
version = "0.1.0"
homepage = "https://github.com/request-log-tail/request_log_tail"
author = "request_log_tail maintainers"
author_email = "maintainers@request-log-tail.invalid"
shell_command = "request-log-tail"


def summary_lines() -> list[str]:
    """Return the ``key: value`` rows of the metadata banner."""

    fields = (
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    )
    pad = max(len(label) for label, _ in fields)
    return [f"    {label:<{pad}} = {value}" for label, value in fields]


def summary_info() -> str:
    """Return the metadata banner terminated by a newline.

    Examples
    --------
    >>> summary_info().startswith("Info for request_log_tail:")
    True
    """

    return "\n".join([f"Info for {name}:", "", *summary_lines()]) + "\n"


__all__ = [
    "author",
    "author_email",
    "homepage",
    "name",
    "shell_command",
    "summary_info",
    "summary_lines",
    "title",
    "version",
]
