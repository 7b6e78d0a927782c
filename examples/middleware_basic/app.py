"""Middleware (basic) — log every request path before the handler runs.

``log_path`` wraps a handler and returns a handler with the same
signature. The wrapper writes the path to the ``perch.access`` logger
and then always calls the wrapped handler.

Run:
    python app.py
"""

from perch import App, AppConfig
from perch.http.response import plain_text
from perch.middleware import log_path

app = App(AppConfig(host="0.0.0.0", port=80))


@app.route("/foo")
@log_path
def foo():
    return plain_text("foo\n")


@app.route("/bar")
@log_path
def bar():
    return plain_text("bar\n")


if __name__ == "__main__":
    app.run()
