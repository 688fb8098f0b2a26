import asyncio
import sys
from pathlib import Path

import httpx
import pytest

# Allow `import urlinfo` without installing the package.
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from urlinfo.config import Settings  # noqa: E402
from urlinfo.resolver import resolve  # noqa: E402


@pytest.fixture(autouse=True)
def _block_real_network(monkeypatch):
    """Tests must never open real sockets; use httpx.MockTransport instead."""

    async def _blocked(*_args, **_kwargs):
        raise AssertionError("Real HTTP request attempted during tests")

    monkeypatch.setattr(httpx.AsyncHTTPTransport, "handle_async_request", _blocked)


@pytest.fixture
def resolve_with():
    """Run `resolve` against a MockTransport handler and return the descriptor."""

    def _run(handler, link, **settings_kw):
        settings = Settings(**settings_kw)

        async def _go():
            transport = httpx.MockTransport(handler)
            async with httpx.AsyncClient(transport=transport, follow_redirects=True) as client:
                return await resolve(link, settings=settings, client=client)

        return asyncio.run(_go())

    return _run
