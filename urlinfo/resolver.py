from __future__ import annotations

import asyncio
import time
from typing import Any, Callable, List, Optional, Sequence

import httpx

from .config import Settings
from .fetch import fetch, is_html_mime, is_parsable_mime, new_client
from .log import get_logger
from .meta import extract_meta
from .model import StatusDescriptor
from .url_norm import add_http_prefix, is_valid_link

log = get_logger(__name__)

Callback = Callable[[Optional[BaseException], Optional[StatusDescriptor]], Any]


async def resolve(
    link: Any,
    *,
    settings: Optional[Settings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> StatusDescriptor:
    """Describe the web resource behind `link`.

    Network failures, error statuses, oversized bodies and unparsable
    content all end up as fields of the returned descriptor. When `client`
    is omitted a client is opened for this call only.
    """
    settings = settings or Settings.from_env()
    t0 = time.time()

    url = add_http_prefix(link)
    if not is_valid_link(url):
        log.debug("Rejected invalid link: %r", link)
        return StatusDescriptor(url=url if isinstance(url, str) else None, error="invalid_link")

    if client is None:
        async with new_client(settings) as own_client:
            return await _resolve_url(own_client, url, settings, t0)
    return await _resolve_url(client, url, settings, t0)


async def _resolve_url(client: httpx.AsyncClient, url: str, settings: Settings, t0: float) -> StatusDescriptor:
    out = await fetch(
        client,
        url,
        timeout_s=settings.timeout_s,
        max_bytes=settings.max_bytes,
        deadline_s=settings.deadline_s or None,
    )
    p = out.probe
    status = StatusDescriptor(
        is_web_resource=p.reached,
        mime=p.mime,
        parsable=is_parsable_mime(p.mime),
        too_large=out.too_large,
        url=url,
        final_url=out.final_url,
        status_code=p.status,
        reachability=p.reachability,
        error=p.error or out.error,
    )

    if out.body is not None and not out.too_large and is_html_mime(p.mime):
        meta = extract_meta(out.headers, out.body, out.final_url or url)
        status.title = meta.title
        status.favicon_url = meta.favicon_url

    status.fetch_ms = int((time.time() - t0) * 1000)
    log.debug(
        "Resolved %s: web=%s status=%s mime=%s too_large=%s",
        url,
        status.is_web_resource,
        status.status_code,
        status.mime,
        status.too_large,
    )
    return status


def scrape(
    link: Any,
    callback: Callback,
    *,
    settings: Optional[Settings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> None:
    """Resolve `link` and report through `callback(error, status)`, exactly once.

    `error` is None for every ordinary outcome, failures included; it only
    carries unexpected internal exceptions, in which case `status` is None.
    Must be called outside a running event loop; async code should await
    `resolve` directly.
    """
    try:
        status = asyncio.run(resolve(link, settings=settings, client=client))
    except Exception as e:
        log.warning("Unexpected failure resolving %r: %s", link, e)
        callback(e, None)
        return
    callback(None, status)


async def resolve_many(links: Sequence[Any], *, settings: Optional[Settings] = None) -> List[StatusDescriptor]:
    """Resolve independent links concurrently over one client, keeping input order."""
    settings = settings or Settings.from_env()
    sem = asyncio.Semaphore(max(1, settings.jobs))

    async with new_client(settings) as client:

        async def _one(link: Any) -> StatusDescriptor:
            async with sem:
                return await resolve(link, settings=settings, client=client)

        return list(await asyncio.gather(*(_one(link) for link in links)))
