"""One HTTP request from ASGI scope to ASGI messages.

Order of work: build the ``Request`` and publish it in ``request_var``,
reject oversized bodies, run the middleware chain around routing and
the handler call, map any exception to a response, then send it.
"""

from collections.abc import Callable, Sequence
from typing import Any

from kida import Environment

from perch._internal.asgi import Receive, Scope, Send
from perch._internal.invoke import handler_arguments, invoke
from perch.context import request_var
from perch.errors import PayloadTooLarge
from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.protocol import Next
from perch.routing.router import Router
from perch.server.errors import error_response
from perch.server.negotiation import negotiate
from perch.server.sender import send_response


def _endpoint(router: Router, kida_env: Environment | None) -> Next:
    async def endpoint(request: Request) -> Response:
        match = router.match(request.method, request.path)
        routed = request.with_path_params(match.path_params)
        # handler wrappers see the routed request through get_request()
        request_var.set(routed)
        handler = match.route.handler
        result = await invoke(handler, **handler_arguments(handler, routed))
        return negotiate(result, kida_env=kida_env)

    return endpoint


def compose(middleware: Sequence[Callable[..., Any]], endpoint: Next) -> Next:
    """Nest *middleware* around *endpoint*, the first entry outermost."""
    call_next = endpoint
    for mw in reversed(middleware):

        async def step(request: Request, _mw: Any = mw, _next: Next = call_next) -> Response:
            return await _mw(request, _next)

        call_next = step
    return call_next


def _check_content_length(request: Request, limit: int | None) -> None:
    declared = request.content_length
    if limit is not None and declared is not None and declared > limit:
        raise PayloadTooLarge(limit)


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: Sequence[Callable[..., Any]],
    error_handlers: dict[int | type, Callable[..., Any]],
    kida_env: Environment | None = None,
    debug: bool = False,
    max_content_length: int | None = None,
) -> None:
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    token = request_var.set(request)
    try:
        _check_content_length(request, max_content_length)
        response = await compose(middleware, _endpoint(router, kida_env))(request)
    except Exception as exc:
        response = await error_response(exc, request, error_handlers, kida_env, debug=debug)
    finally:
        request_var.reset(token)

    await send_response(response, send, head=request.method == "HEAD")
