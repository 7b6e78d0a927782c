"""The application object: route table owner and ASGI entry point.

An ``App`` goes through two phases. While modules are being imported it
collects routes, wrappers, middleware, error handlers, template helpers
and lifecycle hooks. The first request, lifespan startup, ``run()`` or a
read of ``routes`` compiles all of that into a ``_Compiled`` snapshot;
from then on every registration method raises ``RuntimeError``.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from kida import Environment

from perch._internal.asgi import Receive, Scope, Send
from perch._internal.invoke import invoke
from perch._internal.types import ErrorHandler, Handler, HandlerWrapper
from perch.config import AppConfig
from perch.middleware.logging import AccessLog
from perch.middleware.protocol import Middleware
from perch.routing.group import RouteGroup
from perch.routing.route import Route
from perch.routing.router import Router
from perch.server.handler import handle_request
from perch.templating.integration import create_environment, verify_templates

logger = logging.getLogger("perch.server")

_DEFAULT_METHODS = ("GET",)


@dataclass(slots=True)
class _PendingRoute:
    path: str
    handler: Handler
    methods: list[str] | None
    name: str | None
    template: str | None = None

    def to_route(self) -> Route:
        methods = self.methods or _DEFAULT_METHODS
        return Route(
            path=self.path,
            handler=self.handler,
            methods=frozenset(method.upper() for method in methods),
            name=self.name,
            template=self.template,
        )


@dataclass(frozen=True, slots=True)
class _Compiled:
    """Everything the request pipeline reads, fixed at freeze time."""

    router: Router
    middleware: tuple[Middleware, ...]
    kida_env: Environment


def _compile_router(pending: Iterable[_PendingRoute]) -> Router:
    router = Router()
    for entry in pending:
        router.add(entry.to_route())
    router.compile()
    return router


class App:
    """A perch application.

    Each app owns its routes; nothing is registered on module state, so
    several apps can live in one process (the test suite relies on it).

    The compile step is guarded by a lock with a second check inside it,
    so concurrent first requests compile exactly once.
    """

    __slots__ = (
        "_compiled",
        "_error_handlers",
        "_freeze_lock",
        "_middleware_list",
        "_pending_routes",
        "_shutdown_hooks",
        "_startup_hooks",
        "_template_filters",
        "_template_globals",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._pending_routes: list[_PendingRoute] = []
        self._middleware_list: list[Middleware] = []
        self._error_handlers: dict[int | type, ErrorHandler] = {}
        self._template_filters: dict[str, Callable[..., Any]] = {}
        self._template_globals: dict[str, Any] = {}
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._freeze_lock = threading.Lock()
        self._compiled: _Compiled | None = None

    @property
    def _frozen(self) -> bool:
        return self._compiled is not None

    @property
    def _router(self) -> Router | None:
        return self._compiled.router if self._compiled else None

    # -- Registration --

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
        template: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Decorator registering *path* for *methods* (``["GET"]`` by default).

        ``methods=["*"]`` accepts any method. *template* names the template
        the handler renders; it is looked up at compile time, so a missing
        file is a ``ConfigurationError`` instead of a failed request.
        """

        def decorator(func: Handler) -> Handler:
            self._check_not_frozen()
            self._pending_routes.append(_PendingRoute(path, func, methods, name, template))
            return func

        return decorator

    def group(self, prefix: str, *, wrappers: tuple[HandlerWrapper, ...] = ()) -> RouteGroup:
        """Routes registered on the returned group live under *prefix*.

        ::

            books = app.group("/books")

            @books.route("/{title}/page/{page}")
            def page(title: str, page: str): ...
        """
        self._check_not_frozen()
        return RouteGroup(self, prefix, wrappers)

    def error(
        self,
        code_or_exception: int | type[Exception],
    ) -> Callable[[ErrorHandler], ErrorHandler]:
        """Decorator for a handler of a status code or an exception type."""
        return self._register_into(self._error_handlers, code_or_exception)

    def add_middleware(self, middleware: Middleware) -> None:
        """Append pipeline middleware; earlier additions wrap later ones."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    def template_filter(
        self, name: str | None = None
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        return self._register_into(self._template_filters, name)

    def template_global(
        self, name: str | None = None
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        return self._register_into(self._template_globals, name)

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Run *func* (sync or async) at lifespan startup, in registration order."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    def _register_into(
        self, registry: dict[Any, Any], key: Any
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            registry[key if key is not None else func.__name__] = func
            return func

        return decorator

    # -- Introspection and serving --

    @property
    def routes(self) -> list[Route]:
        """The compiled routes in registration order (compiles the app)."""
        return self._ensure_frozen().router.routes

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Compile, then serve with the dev server if ``debug`` else production.

        Compilation happens before any socket is bound, so a bad route
        table or a missing template never reaches the server.
        """
        self._ensure_frozen()
        host = host or self.config.host
        port = port or self.config.port

        if self.config.debug:
            from perch.server.dev import run_dev_server

            run_dev_server(self, host, port, reload=True)
            return

        from perch.server.production import run_production_server

        run_production_server(
            self,
            host=host,
            port=port,
            workers=self.config.workers,
            log_format=self.config.log_format,
            log_level=self.config.log_level,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        compiled = self._ensure_frozen()
        await handle_request(
            scope,
            receive,
            send,
            router=compiled.router,
            middleware=compiled.middleware,
            error_handlers=self._error_handlers,
            kida_env=compiled.kida_env,
            debug=self.config.debug,
            max_content_length=self.config.max_content_length,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                try:
                    await self._startup()
                except Exception as exc:
                    logger.exception("Startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                try:
                    for hook in self._shutdown_hooks:
                        await invoke(hook)
                except Exception as exc:
                    logger.exception("Shutdown failed")
                    await send({"type": "lifespan.shutdown.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def _startup(self) -> None:
        self._ensure_frozen()
        for hook in self._startup_hooks:
            await invoke(hook)

    # -- Compilation --

    def _ensure_frozen(self) -> _Compiled:
        compiled = self._compiled
        if compiled is not None:
            return compiled
        with self._freeze_lock:
            if self._compiled is None:
                self._compiled = self._compile()
            return self._compiled

    def _compile(self) -> _Compiled:
        """Build the runtime snapshot. Raises before publishing anything."""
        router = _compile_router(self._pending_routes)

        middleware: list[Middleware] = list(self._middleware_list)
        if self.config.access_log:
            middleware.insert(0, AccessLog(fmt=self.config.log_format))

        kida_env = create_environment(self.config, self._template_filters, self._template_globals)
        verify_templates(kida_env, (route.template for route in router.routes if route.template))

        logger.debug("Compiled %d routes, %d middleware", len(router.routes), len(middleware))
        return _Compiled(router=router, middleware=tuple(middleware), kida_env=kida_env)

    def _check_not_frozen(self) -> None:
        if self._compiled is not None:
            msg = (
                "Cannot modify the app after it has started serving requests; "
                "register routes, middleware and hooks before app.run()."
            )
            raise RuntimeError(msg)
