from __future__ import annotations

import ipaddress
import re
from typing import Any
from urllib.parse import urlsplit

WEB_PREFIXES = ("http://", "https://")
WEB_SCHEMES = {"http", "https"}

# Anything outside the RFC 3986 reserved/unreserved sets, whitespace included.
_ILLEGAL_CHARS = re.compile(r"[^A-Za-z0-9:/?#\[\]@!$&'()*+,;=.\-_~%]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_HOST_LABEL = re.compile(r"^[A-Za-z0-9_-]{1,63}$")


def add_http_prefix(link: Any) -> Any:
    """Return `link` with an explicit scheme; non-strings pass through untouched."""
    if not isinstance(link, str):
        return link
    if link.startswith(WEB_PREFIXES):
        return link
    return "http://" + link


def is_valid_link(link: Any) -> bool:
    """Syntactic check for an absolute http(s) URL. Never touches the network."""
    if not isinstance(link, str) or not link:
        return False
    if _ILLEGAL_CHARS.search(link) or _BAD_ESCAPE.search(link):
        return False
    try:
        p = urlsplit(link)
        p.port  # raises ValueError on a non-numeric or out-of-range port
    except ValueError:
        return False
    if p.scheme.lower() not in WEB_SCHEMES or not p.netloc:
        return False
    return _valid_host(p.netloc, p.hostname)


def _valid_host(netloc: str, host: str | None) -> bool:
    if not host:
        return False
    if "[" in netloc.rpartition("@")[2]:
        try:
            ipaddress.IPv6Address(host)
        except ValueError:
            return False
        return True
    if host.endswith("."):
        host = host[:-1]
    return all(_HOST_LABEL.match(label) for label in host.split("."))
