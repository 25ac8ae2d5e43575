"""Default adapter wiring for a :class:`Tailer`.

Each factory turns the session :class:`Config` into one concrete adapter, so
the tailer can fall back on them for any collaborator the caller does not
inject.
"""

from __future__ import annotations

from request_log_tail.adapters import RichProgress, RichRequestLogRenderer, SessionAuthorizer, WebSocketConnectionManager
from request_log_tail.application.ports import ConnectionManagerPort, ProgressPort, RendererPort

from ._settings import Config


def create_connection_manager(config: Config) -> ConnectionManagerPort:
    """Return the WebSocket manager authorizing against ``config.api_base_url``."""

    authorizer = SessionAuthorizer(
        api_base_url=config.api_base_url,
        api_key=config.key,
        device_name=config.device_name,
        logger=config.logger,
    )
    return WebSocketConnectionManager(
        authorizer=authorizer,
        filters=config.filters,
        websocket_feature=config.websocket_feature,
        no_wss=config.no_wss,
        logger=config.logger,
    )


def create_renderer() -> RendererPort:
    return RichRequestLogRenderer()


def create_progress() -> ProgressPort:
    return RichProgress()


__all__ = ["create_connection_manager", "create_progress", "create_renderer"]
