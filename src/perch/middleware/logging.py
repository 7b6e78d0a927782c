"""Request logging: a handler wrapper and a pipeline middleware.

``log_path`` is the per-handler form: it writes the request path to the
``perch.access`` logger and then always calls the wrapped handler::

    @app.route("/foo")
    @log_path
    def foo():
        return plain_text("foo\\n")

``AccessLog`` is the app-wide form: one line per request after the
response is produced, with status and duration, in text or JSON::

    app.add_middleware(AccessLog(fmt="json"))

Both are stateless. Logging failures are handled by the stdlib logging
machinery (``Handler.handleError``) and never reach the response.
"""

import json
import logging
import time

from perch._internal.types import Handler
from perch.context import get_request
from perch.errors import HTTPError
from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.protocol import Next
from perch.middleware.wrap import unconditional

logger = logging.getLogger("perch.access")


def _log_current_path() -> None:
    logger.info("%s", get_request().path)


def log_path(handler: Handler) -> Handler:
    """Log the request path, then call *handler*."""
    return unconditional(handler, _log_current_path)


class AccessLog:
    """Pipeline middleware writing one access line per request.

    ``fmt="text"`` produces ``GET /foo 200 1.2ms``; ``fmt="json"``
    produces a JSON object with method, path, query, client, status,
    and duration_ms fields. Requests that end in an error are logged
    with the error status (500 for unexpected exceptions).
    """

    __slots__ = ("fmt", "level")

    def __init__(self, fmt: str = "text", level: int = logging.INFO) -> None:
        if fmt not in ("text", "json"):
            msg = f"Unknown access log format {fmt!r}; expected 'text' or 'json'"
            raise ValueError(msg)
        self.fmt = fmt
        self.level = level

    def format(self, request: Request, status: int, duration_ms: float) -> str:
        """Render a single access line."""
        if self.fmt == "json":
            client = request.client[0] if request.client else None
            return json.dumps(
                {
                    "method": request.method,
                    "path": request.path,
                    "query": request.query.raw.decode("latin-1"),
                    "client": client,
                    "status": status,
                    "duration_ms": round(duration_ms, 2),
                }
            )
        return f"{request.method} {request.path} {status} {duration_ms:.1f}ms"

    async def __call__(self, request: Request, next: Next) -> Response:
        start = time.perf_counter()
        status = 500
        try:
            response = await next(request)
            status = response.status
        except HTTPError as exc:
            status = exc.status
            raise
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.log(self.level, "%s", self.format(request, status, duration_ms))
        return response
