"""Turn exceptions escaping the pipeline into responses."""

import inspect
import logging
import traceback
from collections.abc import Callable, Mapping
from typing import Any

from kida import Environment

from perch.errors import HTTPError
from perch.http.request import Request
from perch.http.response import TEXT_PLAIN, Response
from perch.server.negotiation import negotiate

logger = logging.getLogger("perch.server")

type ErrorHandlers = Mapping[int | type, Callable[..., Any]]


def find_error_handler(
    error_handlers: ErrorHandlers, exc: Exception, status: int
) -> Callable[..., Any] | None:
    """Most specific registered handler for *exc*.

    Exception classes are tried along the MRO, so ``@app.error(HTTPError)``
    also catches ``NotFound``; the status code is the fallback.
    """
    for cls in type(exc).__mro__:
        if cls in error_handlers:
            return error_handlers[cls]
        if cls is Exception:
            break
    return error_handlers.get(status)


async def _call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
    status: int,
    kida_env: Environment | None,
) -> Response:
    # Handlers take (), (request) or (request, exc)
    arity = len(inspect.signature(handler).parameters)
    result = handler(*(request, exc)[:arity])
    if inspect.isawaitable(result):
        result = await result
    response = negotiate(result, kida_env=kida_env)
    return response if response.status != 200 else response.with_status(status)


async def error_response(
    exc: Exception,
    request: Request,
    error_handlers: ErrorHandlers,
    kida_env: Environment | None,
    *,
    debug: bool = False,
) -> Response:
    """Response for *exc*: registered handler first, plain text otherwise.

    ``HTTPError`` keeps its status, detail and headers. Anything else is
    logged with its traceback and becomes a 500 whose body is the
    traceback in debug mode and ``Internal Server Error`` otherwise.
    """
    if isinstance(exc, HTTPError):
        status = exc.status
        logger.debug("%d %s %s: %s", status, request.method, request.path, exc.detail)
    else:
        status = 500
        logger.exception("500 %s %s", request.method, request.path)

    handler = find_error_handler(error_handlers, exc, status)
    if handler is not None:
        return await _call_error_handler(handler, request, exc, status, kida_env)

    if isinstance(exc, HTTPError):
        return Response(
            body=exc.detail or f"Error {status}",
            status=status,
            content_type=TEXT_PLAIN,
            headers=exc.headers,
        )
    body = "".join(traceback.format_exception(exc)) if debug else "Internal Server Error"
    return Response(body=body, status=500, content_type=TEXT_PLAIN)
