"""Shape of pipeline middleware.

Pipeline middleware sees every request, before routing::

    async def timing(request: Request, next: Next) -> Response:
        started = time.perf_counter()
        response = await next(request)
        return response.with_header("X-Elapsed", f"{time.perf_counter() - started:.4f}")

Anything callable that way qualifies, functions and objects alike. The
first middleware added to the app is the outermost. To act on a single
route instead, wrap its handler (``perch.middleware.wrap``).
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from perch.http.request import Request
from perch.http.response import Response

type Next = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    async def __call__(self, request: Request, next: Next) -> Response: ...
