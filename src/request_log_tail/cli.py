"""Click command group exposing the ``request-log-tail`` console script.

Purpose
-------
Translate flags, environment variables, and an optional ``.env`` file into a
:class:`Config`, then run a :class:`Tailer` until the operator interrupts it.

Contents
--------
* :func:`cli` – root group with ``--version``, ``--traceback`` and
  ``--use-dotenv`` toggles.
* ``info`` / ``tail`` – subcommands.
* :func:`main` – entry point delegating exit-code handling to
  ``lib_cli_exit_tools``.

System Role
-----------
Presentation layer. Fatal connection errors surface as exceptions that
``lib_cli_exit_tools`` turns into a non-zero exit; an interrupt returns
cleanly with exit code 0.
"""

from __future__ import annotations

import os
import socket
from collections.abc import Callable, Sequence
from typing import Any

import click
import lib_cli_exit_tools

from . import __init__conf__
from . import config as tail_config
from .__init__conf__ import summary_info
from .domain import FILTER_FIELDS, LogFilters, OutputFormat
from .runtime import DEFAULT_API_BASE_URL, Config, Tailer

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
LOG_LEVEL_CHOICES = ("debug", "info", "warning", "error", "critical")

_FILTER_HELP = {
    "filter_account": "Filter request logs by account (connect_in, connect_out, self).",
    "filter_ip_address": "Filter request logs by source IP address.",
    "filter_http_method": "Filter request logs by HTTP method (GET, POST, DELETE).",
    "filter_request_path": "Filter request logs by API path, e.g. /v1/charges.",
    "filter_request_status": "Filter request logs by request status (SUCCEEDED, FAILED).",
    "filter_source": "Filter request logs by source (API, DASHBOARD).",
    "filter_status_code": "Filter request logs by status code, e.g. 200, 402.",
    "filter_status_code_type": "Filter request logs by status code class (2XX, 4XX, 5XX).",
}


def _split_values(_ctx: click.Context, _param: click.Parameter, values: tuple[str, ...]) -> tuple[str, ...]:
    """Flatten repeated and comma-separated option values.

    Examples
    --------
    >>> _split_values(None, None, ("GET,POST", " DELETE "))
    ('GET', 'POST', 'DELETE')
    """

    flattened: list[str] = []
    for value in values:
        flattened.extend(part.strip() for part in value.split(",") if part.strip())
    return tuple(flattened)


def _filter_options(func: Callable[..., Any]) -> Callable[..., Any]:
    for name in reversed(FILTER_FIELDS):
        func = click.option(
            "--" + name.replace("_", "-"),
            name,
            multiple=True,
            metavar="VALUES",
            callback=_split_values,
            help=_FILTER_HELP[name],
        )(func)
    return func


@click.group(
    help=__init__conf__.title,
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=True,
)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show the full Python traceback on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help=f"Load environment variables from the nearest .env (also via {tail_config.DOTENV_ENV_VAR}).",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool) -> None:
    """Root command; prints the metadata banner when no subcommand is given."""

    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback

    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not click.core.ParameterSource.DEFAULT:
        explicit = use_dotenv
    if tail_config.should_use_dotenv(explicit=explicit, env_value=os.getenv(tail_config.DOTENV_ENV_VAR)):
        tail_config.enable_dotenv()

    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print package metadata."""

    click.echo(summary_info(), nl=False)


@cli.command("tail", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--api-key", envvar=tail_config.API_KEY_ENV_VAR, default="", show_envvar=True, help="API key used to authorize the session.")
@click.option(
    "--api-base",
    envvar=tail_config.API_BASE_ENV_VAR,
    default=DEFAULT_API_BASE_URL,
    show_default=True,
    show_envvar=True,
    help="Base URL of the API that creates the session.",
)
@click.option(
    "--device-name",
    envvar=tail_config.DEVICE_NAME_ENV_VAR,
    default=None,
    show_envvar=True,
    help="Device name reported to the server (defaults to the hostname).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice([member.value for member in OutputFormat], case_sensitive=False),
    envvar=tail_config.FORMAT_ENV_VAR,
    default=OutputFormat.DEFAULT.value,
    show_default=True,
    help="Print a human summary per request, or the raw JSON payload.",
)
@click.option("--no-wss", is_flag=True, default=False, help="Use unencrypted ws:// instead of wss://.")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVEL_CHOICES, case_sensitive=False),
    envvar=tail_config.LOG_LEVEL_ENV_VAR,
    default="info",
    show_default=True,
    help="Level of the diagnostic messages written to stderr.",
)
@_filter_options
def cli_tail(
    *,
    api_key: str,
    api_base: str,
    device_name: str | None,
    output_format: str,
    no_wss: bool,
    log_level: str,
    **filter_values: tuple[str, ...],
) -> None:
    """Stream API request logs until interrupted with Ctrl+C."""

    logger = tail_config.configure_diagnostics(log_level)
    config = Config(
        api_base_url=api_base,
        device_name=device_name or socket.gethostname(),
        filters=LogFilters.from_mapping(filter_values),
        key=api_key,
        log=logger,
        no_wss=no_wss,
        output_format=OutputFormat.from_name(output_format),
    )
    Tailer(config).run()


def main(argv: Sequence[str] | None = None, *, restore_traceback: bool = True) -> int:
    """Run the command group and return its exit code.

    Traceback preferences changed by ``--traceback`` are restored afterwards
    so repeated in-process invocations (tests, embedding) start clean.
    """

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "main"]
