"""urlinfo: resolve a link into a short description of the web resource behind it."""

from pathlib import Path


def _read_version() -> str:
    p = Path(__file__).resolve().parents[1] / "VERSION"
    try:
        return p.read_text(encoding="utf-8").strip()
    except OSError:
        return "0.3.0"


__version__ = _read_version()

from .model import StatusDescriptor  # noqa: E402
from .resolver import resolve, resolve_many, scrape  # noqa: E402
from .url_norm import add_http_prefix, is_valid_link  # noqa: E402

__all__ = [
    "StatusDescriptor",
    "__version__",
    "add_http_prefix",
    "is_valid_link",
    "resolve",
    "resolve_many",
    "scrape",
]
