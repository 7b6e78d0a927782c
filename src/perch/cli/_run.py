"""``perch run``."""

import argparse

from perch.cli._resolve import load_app_or_exit


def run_server(args: argparse.Namespace) -> None:
    """Serve ``args.app``; flags win over the app's ``AppConfig``.

    The development server (one worker, reload) runs only for apps with
    ``debug=True`` when ``--production`` is not given.
    """
    app = load_app_or_exit(args.app)
    config = app.config
    host = args.host or config.host
    port = args.port or config.port

    if config.debug and not args.production:
        from perch.server.dev import run_dev_server

        run_dev_server(app, host, port, reload=True, app_path=args.app)
        return

    from perch.server.production import run_production_server

    run_production_server(
        app,
        host=host,
        port=port,
        workers=config.workers if args.workers is None else args.workers,
        log_format=config.log_format,
        log_level=config.log_level,
    )
