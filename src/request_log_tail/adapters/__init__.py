"""Concrete adapters for console output, session authorization, and transport."""

from __future__ import annotations

from .console import MISSING_URL_PLACEHOLDER, TIME_FORMAT, RichProgress, RichRequestLogRenderer
from .session import CLISession, SessionAuthorizer
from .websocket import WebSocketConnectionManager

__all__ = [
    "CLISession",
    "MISSING_URL_PLACEHOLDER",
    "RichProgress",
    "RichRequestLogRenderer",
    "SessionAuthorizer",
    "TIME_FORMAT",
    "WebSocketConnectionManager",
]
