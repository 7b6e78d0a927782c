"""Single-worker development server that reloads on code changes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from perch.server._serve import serve

if TYPE_CHECKING:
    from perch.app import App


def run_dev_server(
    app: App,
    host: str,
    port: int,
    *,
    reload: bool = True,
    app_path: str | None = None,
) -> None:
    serve(
        app,
        {"host": host, "port": port, "workers": 1, "reload": reload},
        log_level=app.config.log_level,
        log_format=app.config.log_format,
        app_path=app_path,
    )
