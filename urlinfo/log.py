from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass

from rich.logging import RichHandler

LOGGER_NAME = "urlinfo"
HTTP_LOGGERS = ("httpx", "httpcore")

# Library use stays silent until the application configures logging.
logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


@dataclass(frozen=True)
class LogConfig:
    level: str = "INFO"
    no_color: bool = False
    http_level: str = "WARNING"  # httpx logs every request at INFO


def setup_logging(cfg: LogConfig) -> logging.Logger:
    """Attach one handler to the `urlinfo` logger; the root logger is left alone."""
    level = _level(cfg.level, logging.INFO)

    pkg = logging.getLogger(LOGGER_NAME)
    pkg.setLevel(level)
    pkg.propagate = False
    for h in list(pkg.handlers):
        if getattr(h, "_urlinfo", False) or isinstance(h, logging.NullHandler):
            pkg.removeHandler(h)

    force_no_color = cfg.no_color or os.getenv("NO_COLOR") is not None

    handler: logging.Handler
    if not force_no_color and sys.stderr.isatty():
        handler = RichHandler(rich_tracebacks=True, show_time=False, show_level=True, show_path=False)
        fmt = "%(message)s"
    else:
        handler = logging.StreamHandler()
        fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    handler._urlinfo = True  # type: ignore[attr-defined]
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    pkg.addHandler(handler)

    # Debugging urlinfo usually means wanting to see the requests too.
    http_level = logging.DEBUG if level <= logging.DEBUG else _level(cfg.http_level, logging.WARNING)
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)
    return pkg


def get_logger(name: str) -> logging.Logger:
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def _level(name: str, default: int) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else default
