from __future__ import annotations

import re
from typing import Mapping, Optional, Sequence
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup  # type: ignore

from .log import get_logger
from .model import PageMeta

log = get_logger(__name__)

# Checked in order; the first <link> whose rel matches wins.
FAVICON_RELS: Sequence[str] = ("icon", "shortcut icon")
DEFAULT_FAVICON_PATH = "/favicon.ico"

_CHARSET = re.compile(r"charset\s*=\s*[\"']?([\w.:-]+)", re.IGNORECASE)


def extract_meta(headers: Mapping[str, str], body: bytes, url: str) -> PageMeta:
    """Pull the page title and favicon URL out of an HTML body.

    `url` should be the final URL after redirects; relative hrefs and the
    default favicon are resolved against it. The title is the raw text of the
    first <title>. Broken markup gives an empty PageMeta instead of raising.
    """
    if not body:
        return PageMeta(favicon_url=default_favicon_url(url))
    try:
        soup = BeautifulSoup(body, "lxml", from_encoding=_charset_of(headers))
        tag = soup.find("title")
        title = tag.get_text() if tag is not None else None
        return PageMeta(title=title, favicon_url=_extract_favicon_url(soup, url))
    except Exception as e:
        log.debug("Could not parse HTML from %s: %s", url, e)
        return PageMeta()


def _extract_favicon_url(soup, base_url: str) -> Optional[str]:
    links = []
    for link in soup.find_all("link"):
        href = (link.get("href") or "").strip()
        if not href:
            continue
        links.append((_rel_of(link), href))

    for wanted in FAVICON_RELS:
        for rel, href in links:
            if rel == wanted:
                return urljoin(base_url, href)
    return default_favicon_url(base_url)


def default_favicon_url(url: str) -> Optional[str]:
    p = urlsplit(url)
    if p.scheme and p.netloc:
        return f"{p.scheme}://{p.netloc.rpartition('@')[2]}{DEFAULT_FAVICON_PATH}"
    return None


def _rel_of(link) -> str:
    rel = link.get("rel")
    if not rel:
        return ""
    if isinstance(rel, str):
        rel = rel.split()
    return " ".join(x.lower() for x in rel)


def _charset_of(headers: Mapping[str, str]) -> Optional[str]:
    ctype = next((v for k, v in headers.items() if k.lower() == "content-type"), None)
    if not ctype:
        return None
    m = _CHARSET.search(ctype)
    return m.group(1) if m else None
