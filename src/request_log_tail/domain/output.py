"""Output formats understood by the renderer."""

from __future__ import annotations

from enum import Enum


class OutputFormat(Enum):
    """How accepted request-log events are written to stdout."""

    DEFAULT = "default"
    JSON = "JSON"

    @classmethod
    def from_name(cls, name: "str | OutputFormat") -> "OutputFormat":
        """Resolve ``name`` case-insensitively.

        Examples
        --------
        >>> OutputFormat.from_name("json") is OutputFormat.JSON
        True
        """

        if isinstance(name, OutputFormat):
            return name
        normalized = name.strip().upper()
        for member in cls:
            if member.value.upper() == normalized:
                return member
        raise ValueError(f"Unknown output format: {name!r}")


__all__ = ["OutputFormat"]
