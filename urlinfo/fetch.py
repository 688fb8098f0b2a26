from __future__ import annotations

import asyncio
import socket
from typing import List, Mapping, Optional

import httpx

from .config import Settings
from .log import get_logger
from .model import FetchOutcome, ProbeResult, Reachability

log = get_logger(__name__)

# Resolver messages seen across libc/macOS/Windows when the socket layer is hidden.
_DNS_HINTS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "no address associated",
    "temporary failure in name resolution",
)


def new_client(settings: Settings) -> httpx.AsyncClient:
    timeout = httpx.Timeout(settings.timeout_s, connect=settings.timeout_s)
    return httpx.AsyncClient(
        follow_redirects=True,
        headers={"User-Agent": settings.user_agent},
        timeout=timeout,
    )


def mime_of(headers: Mapping[str, str]) -> Optional[str]:
    raw = headers.get("content-type")
    if not raw:
        return None
    mime = raw.split(";", 1)[0].strip().lower()
    return mime or None


def content_length_of(headers: Mapping[str, str]) -> Optional[int]:
    raw = headers.get("content-length")
    if raw is None:
        return None
    try:
        n = int(raw.strip())
    except ValueError:
        return None
    return n if n >= 0 else None


def is_parsable_mime(mime: Optional[str]) -> bool:
    return bool(mime) and not mime.startswith("application/")


def is_html_mime(mime: Optional[str]) -> bool:
    return bool(mime) and "html" in mime


async def probe(client: httpx.AsyncClient, url: str, *, timeout_s: float) -> ProbeResult:
    """HEAD the link and classify the answer. Transport errors are returned, not raised."""
    try:
        r = await client.head(url, timeout=timeout_s)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        reach = _classify_error(e)
        log.debug("Probe failed for %s (%s): %s", url, reach.value, _describe(e))
        return ProbeResult(reachability=reach, error=_describe(e))

    return ProbeResult(
        reachability=Reachability.from_status(r.status_code),
        status=r.status_code,
        final_url=str(r.url),
        mime=mime_of(r.headers),
        content_length=content_length_of(r.headers),
    )


async def fetch(
    client: httpx.AsyncClient,
    url: str,
    *,
    timeout_s: float,
    max_bytes: int,
    deadline_s: Optional[float] = None,
) -> FetchOutcome:
    """Probe `url`, then download its body only if it is eligible and fits in `max_bytes`.

    The body request is skipped when the probe got no response, when the
    declared Content-Length is over the ceiling, and when the mime type is
    missing or `application/*`. The streamed download enforces the ceiling a
    second time, since Content-Length may be absent or wrong. `deadline_s`
    bounds the whole body download; `timeout_s` only bounds each network step.
    """
    p = await probe(client, url, timeout_s=timeout_s)
    out = FetchOutcome(probe=p, final_url=p.final_url)
    if not p.reached:
        return out
    if p.content_length is not None and p.content_length > max_bytes:
        log.debug("Declared length %d of %s is over %d bytes", p.content_length, url, max_bytes)
        out.too_large = True
        return out
    if not is_parsable_mime(p.mime):
        log.debug("Not downloading %s (mime=%s)", url, p.mime)
        return out
    return await _fetch_body(client, url, out, timeout_s=timeout_s, max_bytes=max_bytes, deadline_s=deadline_s)


async def _fetch_body(
    client: httpx.AsyncClient,
    url: str,
    out: FetchOutcome,
    *,
    timeout_s: float,
    max_bytes: int,
    deadline_s: Optional[float],
) -> FetchOutcome:
    try:
        body = await asyncio.wait_for(
            _download(client, url, out, timeout_s=timeout_s, max_bytes=max_bytes),
            timeout=deadline_s,
        )
    except asyncio.TimeoutError:
        log.debug("Gave up on %s after %ss", url, deadline_s)
        out.error = f"BodyDeadlineExceeded: no complete body within {deadline_s}s"
        return out
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        log.debug("Body fetch failed for %s: %s", url, _describe(e))
        out.error = _describe(e)
        return out

    out.body = body
    return out


async def _download(
    client: httpx.AsyncClient,
    url: str,
    out: FetchOutcome,
    *,
    timeout_s: float,
    max_bytes: int,
) -> Optional[bytes]:
    chunks: List[bytes] = []
    total = 0
    async with client.stream("GET", url, timeout=timeout_s) as r:
        out.final_url = str(r.url)
        out.headers = dict(r.headers)
        declared = content_length_of(r.headers)
        if declared is not None and declared > max_bytes:
            out.too_large = True
            return None
        async for chunk in r.aiter_bytes():
            total += len(chunk)
            if total > max_bytes:
                # Leaving the block closes the stream and frees the connection.
                log.debug("Aborted %s after %d bytes (limit %d)", url, total, max_bytes)
                out.too_large = True
                return None
            chunks.append(chunk)
    return b"".join(chunks)


def _classify_error(exc: Exception) -> Reachability:
    if isinstance(exc, httpx.ConnectError) and _is_dns_failure(exc):
        return Reachability.UNRESOLVED_HOST
    return Reachability.CONNECTION_FAILURE


def _is_dns_failure(exc: BaseException) -> bool:
    seen = set()
    cur: Optional[BaseException] = exc
    while cur is not None and id(cur) not in seen:
        if isinstance(cur, socket.gaierror):
            return True
        seen.add(id(cur))
        cur = cur.__cause__ or cur.__context__
    text = str(exc).lower()
    return any(h in text for h in _DNS_HINTS)


def _describe(exc: Exception) -> str:
    msg = str(exc).strip()
    return f"{type(exc).__name__}: {msg}" if msg else type(exc).__name__
