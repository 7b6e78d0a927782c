"""perch: explicit routing, handler wrappers and kida templates over ASGI.

::

    from perch import App
    from perch.http.response import plain_text
    from perch.middleware import log_path

    app = App()

    @app.route("/foo")
    @log_path
    def foo():
        return plain_text("foo\\n")

    app.run()

Public names are imported on first access.
"""

from importlib import import_module

__version__ = "0.1.0"

_EXPORTS = {
    "App": "perch.app",
    "AppConfig": "perch.config",
    "ConfigurationError": "perch.errors",
    "HTTPError": "perch.errors",
    "InlineTemplate": "perch.templating.returns",
    "MethodNotAllowed": "perch.errors",
    "Middleware": "perch.middleware.protocol",
    "Next": "perch.middleware.protocol",
    "NotFound": "perch.errors",
    "PayloadTooLarge": "perch.errors",
    "PerchError": "perch.errors",
    "Redirect": "perch.http.response",
    "Request": "perch.http.request",
    "Response": "perch.http.response",
    "RouteGroup": "perch.routing.group",
    "Template": "perch.templating.returns",
    "get_request": "perch.context",
}

__all__ = sorted(_EXPORTS)


def __getattr__(name: str) -> object:
    module = _EXPORTS.get(name)
    if module is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    return getattr(import_module(module), name)
