"""Console adapters backed by Rich."""

from __future__ import annotations

from .rich_progress import RichProgress
from .rich_renderer import MISSING_URL_PLACEHOLDER, TIME_FORMAT, RichRequestLogRenderer

__all__ = ["MISSING_URL_PLACEHOLDER", "RichProgress", "RichRequestLogRenderer", "TIME_FORMAT"]
