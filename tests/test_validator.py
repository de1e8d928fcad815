"""Tests for single-document validation: dispatch, exclusion and batching."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List
from unittest.mock import AsyncMock, patch

import pytest

from buildlinks.config import CheckerOptions
from buildlinks.models import BrokenReason, Link, LinkType
from buildlinks.validator import BATCH_SIZE, is_excluded, validate_file


def page(body: str) -> str:
    return f"<!DOCTYPE html>\n<html><head><title>Test</title></head>\n<body>\n{body}\n</body></html>\n"


_MIXED = page(
    '<a href="/exists">ok</a>'
    '<a href="/missing">broken</a>'
    '<a href="#section">anchor</a>'
    '<a href="https://example.com/">external</a>'
    '<img src="/img/missing.png" alt="gone">'
)


class TestValidateFile:
    async def test_reports_broken_internal_and_assets(self, site) -> None:
        root = site({"index.html": _MIXED, "exists.html": page("")})

        report = await validate_file(root / "index.html", root, [], CheckerOptions())

        assert len(report.links) == 5
        assert [b.href for b in report.broken_links] == ["/missing", "/img/missing.png"]
        assert {b.reason for b in report.broken_links} == {BrokenReason.NOT_FOUND}

    async def test_external_not_probed_by_default(self, site) -> None:
        root = site({"index.html": _MIXED, "exists.html": page("")})

        with patch("buildlinks.validator.probe_external", new=AsyncMock()) as probe:
            await validate_file(root / "index.html", root, [], CheckerOptions())

        probe.assert_not_called()

    async def test_external_probed_when_enabled(self, site) -> None:
        root = site({"index.html": _MIXED, "exists.html": page("")})
        options = CheckerOptions(check_external=True, external_timeout=1234)

        with patch("buildlinks.validator.probe_external", new=AsyncMock(return_value=None)) as probe:
            await validate_file(root / "index.html", root, [], options, client=object())  # type: ignore[arg-type]

        probe.assert_awaited_once()
        link, timeout, client = probe.await_args.args
        assert link.href == "https://example.com/"
        assert timeout == 1234
        assert client is not None

    async def test_exclusion_is_substring(self, site) -> None:
        root = site({"index.html": _MIXED, "exists.html": page("")})
        options = CheckerOptions(exclude=["missing.png"])

        report = await validate_file(root / "index.html", root, [], options)

        assert [b.href for b in report.broken_links] == ["/missing"]
        assert len(report.links) == 5

    async def test_anchor_links_never_checked(self, site) -> None:
        root = site({"index.html": page('<a href="#nowhere">x</a>')})

        with patch("buildlinks.validator.resolve_internal") as resolve:
            report = await validate_file(root / "index.html", root, [], CheckerOptions())

        resolve.assert_not_called()
        assert report.broken_links == []

    async def test_unreadable_file_propagates(self, site) -> None:
        root = site({})
        bad = root / "bad.html"
        bad.write_bytes(b"<html>\xff\xfe\xfa</html>")

        with pytest.raises(UnicodeDecodeError):
            await validate_file(bad, root, [], CheckerOptions())

    async def test_missing_file_propagates(self, site) -> None:
        root = site({})
        with pytest.raises(FileNotFoundError):
            await validate_file(root / "nope.html", root, [], CheckerOptions())

    async def test_batches_bound_concurrency(self, site) -> None:
        body = "".join(f'<a href="https://example.com/{i}">{i}</a>' for i in range(25))
        root = site({"index.html": page(body)})

        in_flight = 0
        peak = 0
        batches: List[int] = []

        async def fake_probe(link: Link, timeout_ms: int, client) -> None:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            batches.append(in_flight)
            in_flight -= 1
            return None

        options = CheckerOptions(check_external=True)
        with patch("buildlinks.validator.probe_external", new=fake_probe):
            report = await validate_file(root / "index.html", root, [], options, client=object())  # type: ignore[arg-type]

        assert len(report.links) == 25
        assert peak == BATCH_SIZE
        assert len(batches) == 25

    async def test_broken_links_keep_extraction_order(self, site) -> None:
        body = "".join(f'<a href="/missing-{i}">{i}</a>' for i in range(23))
        root = site({"index.html": page(body)})

        report = await validate_file(root / "index.html", root, [], CheckerOptions())

        assert [b.href for b in report.broken_links] == [f"/missing-{i}" for i in range(23)]


class TestIsExcluded:
    def test_substring_match(self) -> None:
        link = Link(href="/admin/panel", text="", source_file="/x.html", type=LinkType.INTERNAL)
        assert is_excluded(link, ["admin"])
        assert not is_excluded(link, ["*admin*"])
        assert not is_excluded(link, [])
