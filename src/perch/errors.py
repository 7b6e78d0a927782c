"""Exceptions raised by perch.

``ConfigurationError`` means the app cannot start; it surfaces while the
route table is compiled. ``HTTPError`` and its subclasses end a request
with a status code and are turned into responses by the server.
"""


class PerchError(Exception):
    """Base class of every perch exception."""


class ConfigurationError(PerchError):
    """The app's routes, templates or settings are invalid."""


class HTTPError(PerchError):
    """End the current request with *status*.

    *headers* are added to the default error response (the ``Allow``
    header of a 405, for instance). A handler registered with
    ``@app.error(status)`` or ``@app.error(ExceptionType)`` replaces the
    default response.
    """

    def __init__(
        self,
        status: int,
        detail: str = "",
        headers: tuple[tuple[str, str], ...] = (),
    ) -> None:
        super().__init__(status, detail)
        self.status = status
        self.detail = detail
        self.headers = headers

    def __str__(self) -> str:
        return f"{self.status}: {self.detail}" if self.detail else str(self.status)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status}, detail={self.detail!r})"


class NotFound(HTTPError):  # noqa: N818
    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(404, detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """The path exists but not for this method; ``Allow`` lists the ones that do."""

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow = ", ".join(sorted(allowed))
        super().__init__(
            405,
            detail or f"Method not allowed. Allowed methods: {allow}",
            (("Allow", allow),),
        )
        self.allowed = allowed


class PayloadTooLarge(HTTPError):  # noqa: N818
    """Content-Length is over ``AppConfig.max_content_length``."""

    def __init__(self, limit: int) -> None:
        super().__init__(413, f"Request body exceeds {limit} bytes")
        self.limit = limit
