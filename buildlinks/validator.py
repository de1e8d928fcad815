"""File validator: checks every link of one document in bounded batches."""

from __future__ import annotations

import asyncio
from contextlib import AsyncExitStack
from pathlib import Path
from typing import List, Optional

import httpx

from buildlinks.config import CheckerOptions
from buildlinks.extractor import extract_links
from buildlinks.models import BrokenLink, FileReport, Link, LinkType, RedirectRule
from buildlinks.prober import make_client, probe_external
from buildlinks.resolver import resolve_internal

# Upper bound on checks in flight at once for a single document.
BATCH_SIZE = 10


def is_excluded(link: Link, exclude: List[str]) -> bool:
    """Return ``True`` if any *exclude* substring occurs in the link's href."""
    return any(pattern in link.href for pattern in exclude)


async def _check_link(
    link: Link,
    build_root: Path,
    rules: List[RedirectRule],
    options: CheckerOptions,
    client: Optional[httpx.AsyncClient],
) -> Optional[BrokenLink]:
    if is_excluded(link, options.exclude):
        return None

    if link.type is LinkType.EXTERNAL:
        if not options.check_external:
            return None
        return await probe_external(link, options.external_timeout, client)
    if link.type is LinkType.INTERNAL or link.type is LinkType.ASSET:
        return await asyncio.to_thread(resolve_internal, link, build_root, rules)
    if link.type is LinkType.ANCHOR:
        return None
    raise ValueError(f"Unhandled link type: {link.type!r}")


async def validate_file(
    path: str | Path,
    build_root: str | Path,
    rules: List[RedirectRule],
    options: CheckerOptions,
    client: httpx.AsyncClient | None = None,
) -> FileReport:
    """Extract and check every link in the document at *path*.

    Links are checked ``BATCH_SIZE`` at a time; a batch must finish before the
    next one starts.  Broken links are returned in extraction order.

    Raises:
        OSError: If the document cannot be read.
        UnicodeDecodeError: If the document is not valid UTF-8.
    """
    path = Path(path)
    build_root = Path(build_root)

    html = await asyncio.to_thread(path.read_text, encoding="utf-8")
    links = extract_links(html, str(path))
    report = FileReport(links=links)

    async with AsyncExitStack() as stack:
        if options.check_external and client is None:
            client = await stack.enter_async_context(make_client())

        for start in range(0, len(links), BATCH_SIZE):
            batch = links[start:start + BATCH_SIZE]
            results = await asyncio.gather(
                *(_check_link(link, build_root, rules, options, client) for link in batch)
            )
            report.broken_links.extend(r for r in results if r is not None)

    return report
