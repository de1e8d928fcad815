"""Internal resolver: checks a reference against the build output tree."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, List, Optional, Tuple
from urllib.parse import unquote

from buildlinks.config import settings
from buildlinks.models import BrokenLink, BrokenReason, Link, RedirectRule
from buildlinks.redirects import apply_redirect_rule, find_redirect_rule

INDEX_DOCUMENT = "index.html"

OUTSIDE_ROOT_ERROR = "Invalid path - outside build directory"

_EXTERNAL_PREFIXES = ("http://", "https://", "//")


def _is_external(href: str) -> bool:
    return href.startswith(_EXTERNAL_PREFIXES)


def _clean_path(href: str) -> str:
    """Strip fragment and query from *href*."""
    return href.split("#")[0].split("?")[0]


def _candidate(clean: str, link: Link, root: str) -> str:
    if clean.startswith("/"):
        joined = os.path.join(root, unquote(clean).lstrip("/"))
    else:
        source_dir = os.path.dirname(os.path.abspath(link.source_file))
        joined = os.path.join(source_dir, unquote(clean))
    return os.path.normpath(joined)


def _inside(path: str, root: str) -> bool:
    return os.path.commonpath([root, path]) == root


def _fallbacks(candidate: Path) -> Iterator[Path]:
    """Yield the locations that would satisfy *candidate*, in order."""
    yield candidate
    if candidate.name and not candidate.suffix:
        yield candidate.with_name(candidate.name + ".html")
        yield candidate / INDEX_DOCUMENT


def _exists(candidate: Path, root: str) -> bool:
    # Fallbacks derived from the root itself (e.g. <root>.html) lie outside it.
    if any(
        path.is_file() for path in _fallbacks(candidate) if _inside(str(path), root)
    ):
        return True
    return candidate.is_dir() and (candidate / INDEX_DOCUMENT).is_file()


def _follow_redirects(
    clean: str, rules: List[RedirectRule]
) -> Tuple[Optional[str], Optional[str]]:
    """Follow redirect rules starting at *clean*.

    Returns ``(path, None)`` with the final root-relative path to check on
    disk, ``(None, None)`` when a rule sends the link off-site, or
    ``(None, error)`` when following would loop.
    """
    seen = [clean]
    while clean.startswith("/") and rules:
        rule = find_redirect_rule(clean, rules)
        if rule is None:
            break

        target = apply_redirect_rule(clean, rule)
        if _is_external(target) or not target.startswith("/"):
            return None, None

        clean = _clean_path(target)
        if clean in seen or len(seen) > settings.max_redirect_depth:
            chain = " -> ".join(seen + [clean])
            return None, f"Redirect loop detected: {chain}"
        seen.append(clean)
    return clean, None


def resolve_internal(
    link: Link, build_root: str | Path, rules: List[RedirectRule]
) -> Optional[BrokenLink]:
    """Check *link* against *build_root*.

    Returns ``None`` when the reference resolves, otherwise a
    :class:`BrokenLink` with reason ``invalid`` (escapes the build root or
    loops through redirects) or ``not-found``.
    """
    href = link.href
    if _is_external(href) or href.startswith("#"):
        return None

    clean = _clean_path(href)
    if not clean:
        # Only a query or fragment: points back at the source document.
        return None

    clean, error = _follow_redirects(clean, rules)
    if error is not None:
        return BrokenLink.from_link(link, BrokenReason.INVALID, error)
    if clean is None:
        return None

    root = os.path.abspath(build_root)
    candidate = _candidate(clean, link, root)
    if not _inside(candidate, root):
        return BrokenLink.from_link(link, BrokenReason.INVALID, OUTSIDE_ROOT_ERROR)

    if _exists(Path(candidate), root):
        return None

    relative = Path(os.path.relpath(candidate, root)).as_posix()
    return BrokenLink.from_link(
        link, BrokenReason.NOT_FOUND, f"File not found: {relative}"
    )
