"""Protocols the application layer depends on."""

from __future__ import annotations

from .connection import ConnectCallback, ConnectionManagerPort, MessageCallback, TerminateCallback
from .progress import ProgressPort
from .renderer import RendererPort

__all__ = [
    "ConnectCallback",
    "ConnectionManagerPort",
    "MessageCallback",
    "ProgressPort",
    "RendererPort",
    "TerminateCallback",
]
