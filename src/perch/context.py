"""The request being served by the current task.

The server sets ``request_var`` before the middleware chain runs, points
it at the routed request once a route matches, and resets it when the
response is ready. Each asyncio task sees only its own request.
"""

from contextvars import ContextVar

from perch.http.request import Request

request_var: ContextVar[Request] = ContextVar("perch_request")


def get_request() -> Request:
    """Current request; ``LookupError`` when no request is being served."""
    return request_var.get()
