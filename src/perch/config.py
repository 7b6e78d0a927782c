"""``AppConfig``: every setting an app reads, fixed when the app is created.

::

    app = App(AppConfig(host="0.0.0.0", port=80, template_dir=TEMPLATES_DIR))

There is no environment-variable layer; ``perch run`` flags override
``host``, ``port`` and ``workers``.
"""

from dataclasses import dataclass
from pathlib import Path

MEBIBYTE = 1024 * 1024


@dataclass(frozen=True, slots=True)
class AppConfig:
    host: str = "127.0.0.1"
    port: int = 8000
    # debug selects the reloading dev server and traceback bodies on 500
    debug: bool = False
    # production only; 0 means one worker per CPU
    workers: int = 0

    template_dir: str | Path = "templates"
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    # compared with the request's declared Content-Length
    max_content_length: int = 16 * MEBIBYTE

    log_level: str = "info"
    log_format: str = "text"
    access_log: bool = False
