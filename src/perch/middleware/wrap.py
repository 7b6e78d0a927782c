"""Handler wrappers: ``Handler -> Handler`` decoration.

A wrapper takes a route handler and returns a new handler with the same
external contract. Wrappers are applied once, at registration time, and
compose by plain function application::

    app.route("/foo")(log_path(foo))
    app.route("/bar")(wrap(bar, log_path, timed))   # log_path is outermost

Wrapped handlers keep the original signature (via ``functools.wraps``),
so path parameters and ``request`` are still injected by name.
"""

import functools
from collections.abc import Callable
from functools import reduce

from perch._internal.invoke import invoke
from perch._internal.types import Handler, HandlerWrapper


def wrap(handler: Handler, *wrappers: HandlerWrapper) -> Handler:
    """Apply *wrappers* to *handler*; the first wrapper listed is outermost."""
    return reduce(lambda inner, wrapper: wrapper(inner), reversed(wrappers), handler)


def chain(*wrappers: HandlerWrapper) -> HandlerWrapper:
    """Compose *wrappers* into a single wrapper.

    ``chain(a, b)(h)`` is ``a(b(h))``. ``chain()`` is the identity.
    """

    def composed(handler: Handler) -> Handler:
        return wrap(handler, *wrappers)

    return composed


def unconditional(handler: Handler, side_effect: Callable[[], object]) -> Handler:
    """Return *handler* preceded by *side_effect*, with the same signature.

    The wrapped handler is invoked on every call, whatever the side
    effect did. Arguments pass through untouched.
    """

    @functools.wraps(handler)
    async def wrapper(*args, **kwargs):
        side_effect()
        return await invoke(handler, *args, **kwargs)

    return wrapper


def before(side_effect: Callable[[], object]) -> HandlerWrapper:
    """Build a wrapper that runs *side_effect*, then always calls the handler.

    The side effect takes no arguments; it reads whatever it needs from
    the request context (``perch.context.get_request``).
    """

    def wrapper(handler: Handler) -> Handler:
        return unconditional(handler, side_effect)

    return wrapper
