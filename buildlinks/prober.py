"""External prober: bounded-time HEAD requests against absolute URLs."""

from __future__ import annotations

import asyncio
from contextlib import AsyncExitStack
from typing import Optional

import httpx

from buildlinks.config import settings
from buildlinks.models import BrokenLink, BrokenReason, Link


def make_client() -> httpx.AsyncClient:
    """Return an :class:`httpx.AsyncClient` configured for probing.

    The client carries no timeout of its own; the only deadline is the one
    :func:`probe_external` enforces.  Callers own the client and must close
    it (``async with``).
    """
    return httpx.AsyncClient(
        headers={"User-Agent": settings.user_agent},
        timeout=None,
        follow_redirects=True,
    )


def _probe_url(href: str) -> str:
    if href.startswith("//"):
        return "https:" + href
    return href


async def probe_external(
    link: Link,
    timeout_ms: int | None = None,
    client: httpx.AsyncClient | None = None,
) -> Optional[BrokenLink]:
    """Probe *link* and return ``None`` if it is reachable.

    The whole request, redirects included, must finish within *timeout_ms*;
    otherwise it is cancelled and reported as ``timeout``.  A final status of
    400 or above, or any transport failure, is reported as ``network-error``.
    """
    if timeout_ms is None:
        timeout_ms = settings.external_timeout_ms

    async with AsyncExitStack() as stack:
        if client is None:
            client = await stack.enter_async_context(make_client())

        try:
            response = await asyncio.wait_for(
                client.head(_probe_url(link.href)),
                timeout=timeout_ms / 1000,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return BrokenLink.from_link(
                link, BrokenReason.TIMEOUT, f"Request timeout after {timeout_ms}ms"
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            return BrokenLink.from_link(
                link, BrokenReason.NETWORK_ERROR, str(exc) or type(exc).__name__
            )

    if response.status_code < 400:
        return None

    return BrokenLink.from_link(
        link,
        BrokenReason.NETWORK_ERROR,
        f"HTTP {response.status_code}: {response.reason_phrase}",
    )
