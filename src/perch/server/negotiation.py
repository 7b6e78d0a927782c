"""From whatever a handler returned to a ``Response``.

=========================  ====================================
Handler returns            Response
=========================  ====================================
``Response``               unchanged
``Redirect``               its status, ``Location`` header
``Template``               rendered with the app environment
``InlineTemplate``         rendered from its source string
``str``                    200 ``text/html``
``bytes``                  200 ``application/octet-stream``
``dict`` / ``list``        200 ``application/json``
``None``                   204, empty
``(value, status)``        *value* negotiated, then *status*
``(value, status, dict)``  as above, plus headers
=========================  ====================================
"""

import json
from typing import Any

from kida import Environment

from perch.errors import ConfigurationError
from perch.http.response import Redirect, Response
from perch.templating.returns import InlineTemplate, Template

JSON = "application/json; charset=utf-8"
OCTET_STREAM = "application/octet-stream"


def _redirect(redirect: Redirect) -> Response:
    return Response(
        status=redirect.status,
        headers=(("Location", redirect.url), *redirect.headers),
    )


def negotiate(value: Any, *, kida_env: Environment | None = None) -> Response:
    """Convert a handler's return value, following the table above.

    Raises:
        ConfigurationError: A ``Template`` is returned but the app has no
            template environment.
        TypeError: The value has no response form.
    """
    match value:
        case Response():
            return value
        case Redirect():
            return _redirect(value)
        case Template():
            if kida_env is None:
                msg = "Returning a Template needs a template environment; set AppConfig.template_dir."
                raise ConfigurationError(msg)
            return Response(body=value.render(kida_env))
        case InlineTemplate():
            return Response(body=value.render(kida_env or Environment()))
        case str():
            return Response(body=value)
        case bytes():
            return Response(body=value, content_type=OCTET_STREAM)
        case dict() | list():
            return Response(body=json.dumps(value, default=str), content_type=JSON)
        case None:
            return Response(status=204)
        case (inner, int() as status):
            return negotiate(inner, kida_env=kida_env).with_status(status)
        case (inner, int() as status, dict() as headers):
            return negotiate(inner, kida_env=kida_env).with_status(status).with_headers(headers)
    msg = (
        f"Cannot convert {type(value).__name__} to a response; return a str, bytes, "
        "dict, list, None, Template, InlineTemplate, Response or Redirect."
    )
    raise TypeError(msg)
