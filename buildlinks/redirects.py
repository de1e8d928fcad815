"""Redirect rules: parsing, matching and destination resolution.

The file format is the line-oriented ``_redirects`` style used by static
hosts::

    # comment
    /old-page        /new-page
    /blog/:slug      /posts/:slug     302
    /docs/*          /documentation/:splat

Patterns support ``:name`` parameters (one path segment) and ``*`` wildcards
(any suffix, including ``/``).  Rule order matters: the first match wins.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from buildlinks.models import RedirectRule

logger = logging.getLogger(__name__)

DEFAULT_STATUS = 301

_TOKEN = re.compile(r":[A-Za-z_]\w*|\*")
_SPLAT = ":splat"


# ---------------------------------------------------------------------------
# Parsing / loading
# ---------------------------------------------------------------------------

def parse_redirects(content: str) -> List[RedirectRule]:
    """Parse redirects file *content* into rules, preserving file order."""
    rules: List[RedirectRule] = []
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        parts = stripped.split()
        if len(parts) < 2:
            continue

        status = DEFAULT_STATUS
        if len(parts) > 2:
            try:
                status = int(parts[2])
            except ValueError:
                status = DEFAULT_STATUS

        rules.append(RedirectRule(source=parts[0], destination=parts[1], status=status))
    return rules


def load_redirects(build_root: str | Path, redirects_file: str | None = None) -> List[RedirectRule]:
    """Load the rules from *redirects_file*.

    Relative paths are taken from *build_root*.  Returns an empty list when
    no file is configured or when it cannot be read; the latter is logged as
    a warning.
    """
    if not redirects_file:
        return []

    path = Path(redirects_file)
    if not path.is_absolute():
        path = Path(build_root) / path

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read redirects file at %s: %s", path, exc)
        return []

    return parse_redirects(content)


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------

@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    parts: List[str] = []
    position = 0
    for token in _TOKEN.finditer(pattern):
        parts.append(re.escape(pattern[position:token.start()]))
        parts.append("(.*)" if token.group() == "*" else "([^/]+)")
        position = token.end()
    parts.append(re.escape(pattern[position:]))
    return re.compile("^" + "".join(parts) + "$")


def _match(path: str, pattern: str) -> Optional[re.Match[str]]:
    return _compile(pattern).match(path)


def matches_pattern(path: str, pattern: str) -> bool:
    if path == pattern:
        return True
    return _match(path, pattern) is not None


def find_redirect_rule(path: str, rules: List[RedirectRule]) -> Optional[RedirectRule]:
    """Return the first rule in *rules* whose pattern matches *path*."""
    for rule in rules:
        if matches_pattern(path, rule.source):
            return rule
    return None


def apply_redirect_rule(path: str, rule: RedirectRule) -> str:
    """Resolve the destination of *rule* for *path*, substituting captures.

    ``:name`` placeholders consume captures in order, then ``*``
    placeholders; ``:splat`` always receives the last capture.  Never raises:
    if *path* does not match, the destination is returned verbatim.
    """
    if ":" not in rule.source and "*" not in rule.source:
        return rule.destination

    match = _match(path, rule.source)
    if match is None or not match.groups():
        return rule.destination

    captures = list(match.groups())
    placeholders = [t.group() for t in _TOKEN.finditer(rule.destination)]
    params = [p for p in placeholders if p not in ("*", _SPLAT)]
    # Parameters take the leading captures, wildcards the ones after them.
    param_index = 0
    star_index = len(params)

    def _capture(index: int) -> str:
        return captures[index] if index < len(captures) else ""

    def _substitute(m: re.Match[str]) -> str:
        nonlocal param_index, star_index
        token = m.group()
        if token == _SPLAT:
            return captures[-1]
        if token == "*":
            star_index += 1
            return _capture(star_index - 1)
        param_index += 1
        return _capture(param_index - 1)

    return _TOKEN.sub(_substitute, rule.destination)
