"""The ``perch`` command.

::

    perch run examples.routing.app:app --host 0.0.0.0 --port 80
    perch routes examples.routing.app:app
"""

import argparse
import sys

APP_HELP = "import string, MODULE[:ATTRIBUTE]; ATTRIBUTE defaults to 'app'"


def _run(args: argparse.Namespace) -> None:
    from perch.cli._run import run_server

    run_server(args)


def _routes(args: argparse.Namespace) -> None:
    from perch.cli._routes import list_routes

    list_routes(args)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="perch",
        description="Serve or inspect a perch application.",
    )
    commands = parser.add_subparsers(dest="command")

    run = commands.add_parser("run", help="serve an app (dev server unless --production)")
    run.add_argument("app", help=APP_HELP)
    run.add_argument("--host", help="bind address (default: AppConfig.host)")
    run.add_argument("--port", type=int, help="bind port (default: AppConfig.port)")
    run.add_argument(
        "--production",
        action="store_true",
        help="multi-worker server without reload",
    )
    run.add_argument("--workers", type=int, help="production worker count, 0 for one per CPU")
    run.set_defaults(handler=_run)

    routes = commands.add_parser("routes", help="print the compiled route table")
    routes.add_argument("app", help=APP_HELP)
    routes.set_defaults(handler=_routes)
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(0)
    args.handler(args)
