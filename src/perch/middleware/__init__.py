"""Code that runs around handlers.

Handler wrappers (``Handler -> Handler``) are applied to one route when it
is registered: ``log_path``, composed with ``wrap``, ``chain`` and
``before``. Pipeline middleware (``async (request, next) -> Response``)
runs around every request: ``AccessLog``.
"""

from perch.middleware.logging import AccessLog, log_path
from perch.middleware.protocol import Middleware, Next
from perch.middleware.wrap import before, chain, wrap

__all__ = [
    "AccessLog",
    "Middleware",
    "Next",
    "before",
    "chain",
    "log_path",
    "wrap",
]
