"""Utilities for rendering link check reports in the CLI."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from buildlinks.models import BrokenLink, LinkCheckResult


def render_summary(result: LinkCheckResult, verbose: bool = False) -> List[str]:
    """Return the headline lines of a report."""
    lines = [
        f"✅ Checked {result.total_links} links across {len(result.checked_files)} files"
    ]
    if result.skipped_files:
        lines.append(f"⚠️  Skipped {len(result.skipped_files)} files")
        if verbose:
            lines.extend(f"   - {name}" for name in result.skipped_files)
    return lines


def render_broken_links(result: LinkCheckResult, build_dir: str | Path) -> str:
    """Render broken links grouped by the file they were found in.

    Args:
        result: The aggregate check result.
        build_dir: Build root used to shorten source file paths.

    Returns:
        String representation of the report, empty when nothing is broken.
    """
    lines: List[str] = []
    root = os.path.abspath(build_dir)

    for source_file, links in result.broken_by_file().items():
        name = Path(os.path.relpath(source_file, root)).as_posix()
        lines.append("")
        lines.append(f"📄 {name}:")
        for link in links:
            lines.extend(_render_link(link))

    return "\n".join(lines)


def _render_link(link: BrokenLink) -> List[str]:
    lines = [
        f"  {_get_icon(link.type.value)} {link.href}",
        f"    [{link.reason.value}] {link.error}",
    ]
    if link.text and link.text != link.href:
        lines.append(f'    Text: "{link.text}"')
    return lines


def _get_icon(link_type: str) -> str:
    icons = {
        "internal": "🔗",
        "external": "🌐",
        "asset": "📦",
        "anchor": "⚓",
    }
    return icons.get(link_type, "❓")
