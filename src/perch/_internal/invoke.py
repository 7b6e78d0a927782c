"""Calling user code: sync or async, with arguments picked by name."""

import inspect
from typing import Any

from perch.http.request import Request


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func*, awaiting the result when it is awaitable."""
    result = func(*args, **kwargs)
    return await result if inspect.isawaitable(result) else result


def _coerce(annotation: Any, value: str) -> Any:
    if annotation is inspect.Parameter.empty or annotation is str:
        return value
    try:
        return annotation(value)
    except (TypeError, ValueError):
        return value


def handler_arguments(handler: Any, request: Request) -> dict[str, Any]:
    """Keyword arguments for *handler* drawn from *request*.

    A parameter named ``request`` or annotated ``Request`` receives the
    request. A parameter named after a path placeholder receives its
    value, passed through the annotation when that conversion works and
    left as the captured string when it does not. Anything else is left
    to its default.
    """
    arguments: dict[str, Any] = {}
    for name, param in inspect.signature(handler, eval_str=True).parameters.items():
        if name == "request" or param.annotation is Request:
            arguments[name] = request
        elif name in request.path_params:
            arguments[name] = _coerce(param.annotation, request.path_params[name])
    return arguments
