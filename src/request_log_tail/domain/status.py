"""HTTP status classes used to colour the human-readable summary line."""

from __future__ import annotations

from enum import Enum


class StatusClass(Enum):
    """Bucket of an HTTP status code."""

    SUCCESS = "2xx"
    REDIRECT = "3xx"
    CLIENT_ERROR = "4xx"
    SERVER_ERROR = "5xx"
    UNKNOWN = "unknown"

    @property
    def style(self) -> str:
        """Return the default Rich style for the class."""

        return _STYLE_TABLE[self]

    @classmethod
    def from_status(cls, status: int) -> "StatusClass":
        """Classify ``status``.

        Examples
        --------
        >>> StatusClass.from_status(201)
        <StatusClass.SUCCESS: '2xx'>
        >>> StatusClass.from_status(0)
        <StatusClass.UNKNOWN: 'unknown'>
        """

        if 200 <= status < 300:
            return cls.SUCCESS
        if 300 <= status < 400:
            return cls.REDIRECT
        if 400 <= status < 500:
            return cls.CLIENT_ERROR
        if 500 <= status < 600:
            return cls.SERVER_ERROR
        return cls.UNKNOWN

    @classmethod
    def from_name(cls, name: str) -> "StatusClass":
        normalized = name.strip().upper()
        try:
            return cls[normalized]
        except KeyError:
            for member in cls:
                if member.value.upper() == normalized:
                    return member
            raise ValueError(f"Unknown status class: {name!r}") from None


_STYLE_TABLE = {
    StatusClass.SUCCESS: "bold green",
    StatusClass.REDIRECT: "bold cyan",
    StatusClass.CLIENT_ERROR: "bold yellow",
    StatusClass.SERVER_ERROR: "bold red",
    StatusClass.UNKNOWN: "bold",
}


__all__ = ["StatusClass"]
