"""``perch routes``: the compiled route table as aligned columns."""

import argparse

from perch.cli._resolve import load_app_or_exit
from perch.routing.route import Route

HEADER = ("METHOD", "PATH", "HANDLER")


def _row(route: Route) -> tuple[str, str, str]:
    handler = getattr(route.handler, "__qualname__", repr(route.handler))
    if route.name:
        handler += f" ({route.name})"
    return ", ".join(sorted(route.methods)), route.path, handler


def list_routes(args: argparse.Namespace) -> None:
    routes = load_app_or_exit(args.app).routes
    if not routes:
        print("No routes registered.")
        return

    rows = [_row(route) for route in routes]
    method_width = max(len(row[0]) for row in [HEADER, *rows])
    path_width = max(len(row[1]) for row in [HEADER, *rows])
    handler_width = max(len(row[2]) for row in [HEADER, *rows])

    print(f"{HEADER[0]:<{method_width}}  {HEADER[1]:<{path_width}}  {HEADER[2]}")
    print("-" * min(method_width + path_width + handler_width + 4, 80))
    for methods, path, handler in rows:
        print(f"{methods:<{method_width}}  {path:<{path_width}}  {handler}")
