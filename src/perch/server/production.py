"""Multi-worker server for deployment; no reload."""

from __future__ import annotations

from typing import TYPE_CHECKING

from perch.server._serve import serve

if TYPE_CHECKING:
    from perch.app import App


def run_production_server(
    app: App,
    host: str = "0.0.0.0",
    port: int = 8000,
    workers: int = 0,
    *,
    log_format: str = "text",
    log_level: str = "info",
) -> None:
    """Serve *app* on *workers* processes (0 picks one per CPU).

    *log_format* and *log_level* apply to perch's loggers and pounce's own.
    """
    options = {
        "host": host,
        "port": port,
        "workers": workers,
        "log_format": log_format,
        "log_level": log_level,
    }
    serve(app, options, log_level=log_level, log_format=log_format)
