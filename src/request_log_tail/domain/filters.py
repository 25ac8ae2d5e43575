"""User-supplied request-log filters and their wire encoding.

Purpose
-------
Capture the server-side filter dimensions a tailing session subscribes with
and serialise them into the compact JSON object sent when the session is
created.

Contents
--------
* :class:`LogFilters` – immutable filter set with :meth:`LogFilters.to_json`.
* ``FILTER_FIELDS`` – filter keys in declaration order.

System Role
-----------
Filters are applied by the server, not locally. The encoder is therefore a
pure structural transformation; values are passed through unvalidated.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, fields
from typing import Any


def _as_tuple(values: Iterable[str] | None) -> tuple[str, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(str(value) for value in values)


@dataclass(slots=True, frozen=True)
class LogFilters:
    """Immutable set of request-log filter dimensions.

    Every dimension is an ordered tuple of strings. An empty tuple imposes no
    restriction and is omitted from the encoded form.
    """

    filter_account: tuple[str, ...] = ()
    filter_ip_address: tuple[str, ...] = ()
    filter_http_method: tuple[str, ...] = ()
    filter_request_path: tuple[str, ...] = ()
    filter_request_status: tuple[str, ...] = ()
    filter_source: tuple[str, ...] = ()
    filter_status_code: tuple[str, ...] = ()
    filter_status_code_type: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for name in FILTER_FIELDS:
            object.__setattr__(self, name, _as_tuple(getattr(self, name)))

    def to_dict(self) -> dict[str, list[str]]:
        """Return the non-empty dimensions keyed by wire name, in declaration order."""

        return {name: list(getattr(self, name)) for name in FILTER_FIELDS if getattr(self, name)}

    def to_json(self) -> str:
        """Return the compact JSON encoding used as the ``filters`` session parameter.

        Examples
        --------
        >>> LogFilters().to_json()
        '{}'
        >>> LogFilters(filter_http_method=("GET",), filter_account=("self",)).to_json()
        '{"filter_account":["self"],"filter_http_method":["GET"]}'
        """

        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    def is_empty(self) -> bool:
        return not any(getattr(self, name) for name in FILTER_FIELDS)

    @classmethod
    def from_mapping(cls, values: dict[str, Any]) -> "LogFilters":
        """Build filters from a mapping, ignoring keys that are not filter dimensions."""

        return cls(**{name: _as_tuple(values.get(name)) for name in FILTER_FIELDS})


FILTER_FIELDS: tuple[str, ...] = tuple(item.name for item in fields(LogFilters))
# Declaration order doubles as the key order of the encoded JSON object.


__all__ = ["FILTER_FIELDS", "LogFilters"]
