"""Hand a compiled perch app to the pounce ASGI server."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from perch.logs import configure_logging

if TYPE_CHECKING:
    from perch.app import App


def serve(
    app: App,
    server_options: dict[str, Any],
    *,
    log_level: str,
    log_format: str,
    app_path: str | None = None,
) -> None:
    """Configure perch logging, then block in ``pounce.server.Server.run``.

    *server_options* become ``pounce.config.ServerConfig`` fields.
    *app_path* (``"module:attr"``) lets pounce re-import the app on reload.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    configure_logging(log_level, log_format)
    extra = {"app_path": app_path} if app_path is not None else {}
    Server(ServerConfig(**server_options), app, **extra).run()
