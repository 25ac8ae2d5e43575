"""HTTP client creating the CLI session that authorizes the WebSocket.

Purpose
-------
Exchange the API key, device name, requested feature, and encoded filters for
the WebSocket URL and identifiers of a short-lived CLI session.

Contents
--------
* :class:`CLISession` – parsed session response.
* :class:`SessionAuthorizer` – ``requests``-based client.

System Role
-----------
Used by the WebSocket connection manager on every (re)connect. The request it
issues is the session heartbeat that the event filter hides from the tail.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests

from request_log_tail import __init__conf__
from request_log_tail.application.use_cases.filter_event import SESSION_HEARTBEAT_PATH
from request_log_tail.domain.filters import LogFilters
from request_log_tail.errors import SessionAuthorizationError

LOGGER = logging.getLogger(__name__)

USER_AGENT = f"{__init__conf__.name}/{__init__conf__.version}"


@dataclass(slots=True, frozen=True)
class CLISession:
    """Session returned by the API; ``reconnect_delay`` is in seconds."""

    websocket_url: str
    websocket_id: str
    websocket_authorized_feature: str
    reconnect_delay: int = 5

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CLISession":
        try:
            websocket_url = data["websocket_url"]
            websocket_id = data["websocket_id"]
            feature = data["websocket_authorized_feature"]
        except KeyError as exc:
            raise SessionAuthorizationError(f"Session response is missing {exc.args[0]!r}") from exc
        reconnect_delay = data.get("reconnect_delay") or 5
        return cls(
            websocket_url=str(websocket_url),
            websocket_id=str(websocket_id),
            websocket_authorized_feature=str(feature),
            reconnect_delay=int(reconnect_delay),
        )


class SessionAuthorizer:
    """Create CLI sessions against ``{api_base_url}/v1/stripecli/sessions``."""

    def __init__(
        self,
        *,
        api_base_url: str,
        api_key: str,
        device_name: str,
        http: requests.Session | None = None,
        timeout: float = 30.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self._url = api_base_url.rstrip("/") + SESSION_HEARTBEAT_PATH
        self._api_key = api_key
        self._device_name = device_name
        self._http = http if http is not None else requests.Session()
        self._timeout = timeout
        self._log = logger if logger is not None else LOGGER

    def authorize(self, *, websocket_feature: str, filters: LogFilters) -> CLISession:
        """Create a session and return its WebSocket coordinates.

        Raises
        ------
        SessionAuthorizationError
            When no key is configured, the request fails, the API answers with
            an error status, or the body cannot be parsed.
        """

        if not self._api_key:
            raise SessionAuthorizationError("No API key configured; pass --api-key or set STRIPE_API_KEY")

        form: dict[str, str] = {
            "device_name": self._device_name,
            "websocket_features[]": websocket_feature,
        }
        if not filters.is_empty():
            form["filters"] = filters.to_json()

        self._log.debug("Authenticating with %s", self._url, extra={"device_name": self._device_name})
        try:
            response = self._http.post(
                self._url,
                data=form,
                headers={"Authorization": f"Bearer {self._api_key}", "User-Agent": USER_AGENT},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise SessionAuthorizationError(f"Could not reach {self._url}: {exc}") from exc

        if response.status_code >= 400:
            raise SessionAuthorizationError(
                f"Authorization failed with status {response.status_code}: {_error_message(response)}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise SessionAuthorizationError("Session response is not valid JSON") from exc
        if not isinstance(body, dict):
            raise SessionAuthorizationError("Session response is not a JSON object")
        return CLISession.from_dict(body)


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or response.reason or "unknown error"
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        message = body["error"].get("message")
        if message:
            return str(message)
    return response.reason or "unknown error"


__all__ = ["CLISession", "SessionAuthorizer", "USER_AGENT"]
