"""Environment and ``.env`` handling plus diagnostic logging setup.

Purpose
-------
Collect the ambient configuration of the CLI in one place: the environment
variable names it honours, optional ``.env`` loading through python-dotenv,
and the Rich-backed diagnostic logger.

Contents
--------
* ``*_ENV_VAR`` constants – environment variable names.
* :func:`should_use_dotenv` / :func:`enable_dotenv` – ``.env`` toggling.
* :func:`configure_diagnostics` – stderr logger for session diagnostics.

System Role
-----------
Read by :mod:`request_log_tail.cli` before a :class:`Config` is built.
Explicit CLI flags beat environment values; environment values beat ``.env``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from rich.console import Console
from rich.logging import RichHandler

DOTENV_ENV_VAR = "REQUEST_LOG_TAIL_USE_DOTENV"
API_KEY_ENV_VAR = "STRIPE_API_KEY"
API_BASE_ENV_VAR = "STRIPE_API_BASE"
DEVICE_NAME_ENV_VAR = "STRIPE_DEVICE_NAME"
FORMAT_ENV_VAR = "REQUEST_LOG_TAIL_FORMAT"
LOG_LEVEL_ENV_VAR = "REQUEST_LOG_TAIL_LOG_LEVEL"

DIAGNOSTIC_LOGGER_NAME = "request_log_tail.tail"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}

_DOTENV_LOADED: Path | None = None


def should_use_dotenv(*, explicit: bool | None, env_value: str | None) -> bool:
    """Decide whether to load ``.env``; an explicit flag wins over the environment.

    Examples
    --------
    >>> should_use_dotenv(explicit=None, env_value="yes")
    True
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    """

    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    normalized = env_value.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY or not normalized:
        return False
    raise ValueError(f"{DOTENV_ENV_VAR} must be a boolean flag, got {env_value!r}")


def enable_dotenv(*, search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` without overriding variables already set.

    The search walks upwards from ``search_from`` (default: the current
    working directory). Returns the loaded file, or ``None`` when none exists.
    Repeated calls reuse the first result.
    """

    global _DOTENV_LOADED
    if _DOTENV_LOADED is not None:
        return _DOTENV_LOADED

    if search_from is None:
        found = find_dotenv(usecwd=True)
        candidate = Path(found) if found else None
    else:
        candidate = _find_upwards(search_from.resolve())
    if candidate is None:
        return None

    load_dotenv(candidate, override=False)
    _DOTENV_LOADED = candidate.resolve()
    return _DOTENV_LOADED


def _find_upwards(start: Path) -> Path | None:
    for directory in (start, *start.parents):
        env_file = directory / ".env"
        if env_file.is_file():
            return env_file
    return None


def _reset_dotenv_state_for_testing() -> None:
    global _DOTENV_LOADED
    _DOTENV_LOADED = None


def configure_diagnostics(level: str | int = "info", *, console: Console | None = None) -> logging.Logger:
    """Return the diagnostic logger writing through Rich to stderr.

    Calling it again replaces the handler, so the level and console can be
    changed between sessions.
    """

    logger = logging.getLogger(DIAGNOSTIC_LOGGER_NAME)
    numeric = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level!r}")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(
        console=console if console is not None else Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setLevel(numeric)
    logger.addHandler(handler)
    logger.setLevel(numeric)
    logger.propagate = False
    return logger


__all__ = [
    "API_BASE_ENV_VAR",
    "API_KEY_ENV_VAR",
    "DEVICE_NAME_ENV_VAR",
    "DIAGNOSTIC_LOGGER_NAME",
    "DOTENV_ENV_VAR",
    "FORMAT_ENV_VAR",
    "LOG_LEVEL_ENV_VAR",
    "configure_diagnostics",
    "enable_dotenv",
    "should_use_dotenv",
]
