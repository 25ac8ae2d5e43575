"""Session configuration for one tailing run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from request_log_tail.domain.filters import LogFilters
from request_log_tail.domain.output import OutputFormat

DEFAULT_API_BASE_URL = "https://api.stripe.com"
DEFAULT_WEBSOCKET_FEATURE = "request_logs"
DISCARD_LOGGER_NAME = "request_log_tail.discard"


def discard_logger() -> logging.Logger:
    """Return a logger that drops every record and never propagates."""

    logger = logging.getLogger(DISCARD_LOGGER_NAME)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger


@dataclass(slots=True, frozen=True)
class Config:
    """Read-only parameters of a tailing session.

    Attributes
    ----------
    api_base_url:
        Root of the HTTP API used to create the CLI session.
    device_name:
        Name reported to the server to identify this machine.
    filters:
        :class:`LogFilters` applied server-side.
    key:
        API key used to authorize the session.
    log:
        Diagnostic logger, unrelated to the request logs themselves. ``None``
        selects a discarding logger.
    no_wss:
        Downgrade the WebSocket URL from ``wss://`` to ``ws://``.
    output_format:
        :class:`OutputFormat` used by the renderer.
    websocket_feature:
        Feature requested for the WebSocket connection.
    """

    api_base_url: str = DEFAULT_API_BASE_URL
    device_name: str = ""
    filters: LogFilters = field(default_factory=LogFilters)
    key: str = ""
    log: logging.Logger | None = None
    no_wss: bool = False
    output_format: OutputFormat = OutputFormat.DEFAULT
    websocket_feature: str = DEFAULT_WEBSOCKET_FEATURE

    def __post_init__(self) -> None:
        object.__setattr__(self, "output_format", OutputFormat.from_name(self.output_format))
        object.__setattr__(self, "api_base_url", self.api_base_url.rstrip("/"))

    @property
    def logger(self) -> logging.Logger:
        return self.log if self.log is not None else discard_logger()


__all__ = [
    "Config",
    "DEFAULT_API_BASE_URL",
    "DEFAULT_WEBSOCKET_FEATURE",
    "DISCARD_LOGGER_NAME",
    "discard_logger",
]
