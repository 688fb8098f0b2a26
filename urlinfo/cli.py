from __future__ import annotations

import argparse
import asyncio
import json
import time
from typing import List

from rich.console import Console
from rich.json import JSON as RichJSON

from . import __version__
from .config import load_settings
from .log import LogConfig, get_logger, setup_logging
from .resolver import resolve_many

log = get_logger(__name__)


def main(argv: List[str] | None = None) -> int:
    p = argparse.ArgumentParser(
        prog="urlinfo",
        description="Describe the web resource behind each link: reachability, mime type, title, favicon.",
    )
    p.add_argument("-V", "--version", action="version", version=f"urlinfo {__version__}")
    p.add_argument("--config", default=None, help="YAML config file (optional). Env vars override defaults.")
    p.add_argument("--timeout", type=float, default=None, help="Per-request timeout in seconds.")
    p.add_argument("--max-bytes", type=int, default=None, help="Largest body to download, in bytes.")
    p.add_argument("--log-level", default=None, help="DEBUG/INFO/WARN/ERROR (overrides env/config).")
    p.add_argument("--no-color", action="store_true", help="Disable colored logging.")
    p.add_argument("--pretty", action="store_true", help="Pretty-print results instead of one JSON object per line.")
    p.add_argument("links", nargs="+", help="Links to resolve; a missing scheme means http://.")

    args = p.parse_args(argv)
    cfg = load_settings(args.config)
    if args.timeout is not None:
        cfg.timeout_s = args.timeout
    if args.max_bytes is not None:
        cfg.max_bytes = args.max_bytes
    if args.log_level:
        cfg.log_level = args.log_level
    if args.no_color:
        cfg.no_color = True
    setup_logging(LogConfig(level=cfg.log_level, no_color=cfg.no_color))

    t0 = time.time()
    results = asyncio.run(resolve_many(args.links, settings=cfg))
    log.info("Resolved %d link(s) in %.2fs", len(results), time.time() - t0)

    console = Console() if args.pretty else None
    for status in results:
        doc = json.dumps(status.to_dict(), ensure_ascii=False)
        if console is not None:
            console.print(RichJSON(doc))
        else:
            print(doc)

    return 0 if all(s.is_web_resource for s in results) else 1


if __name__ == "__main__":
    raise SystemExit(main())
