"""Directory walker and orchestrator: checks a whole build output tree."""

from __future__ import annotations

import asyncio
import logging
import os
from contextlib import AsyncExitStack
from fnmatch import fnmatchcase
from pathlib import Path
from typing import List, Mapping, Sequence, Union

from buildlinks.config import CheckerOptions
from buildlinks.models import LinkCheckResult
from buildlinks.prober import make_client
from buildlinks.redirects import load_redirects
from buildlinks.validator import validate_file

logger = logging.getLogger(__name__)

OptionsLike = Union[CheckerOptions, Mapping[str, object], None]


def _as_options(options: OptionsLike) -> CheckerOptions:
    if options is None:
        return CheckerOptions()
    if isinstance(options, CheckerOptions):
        return options
    return CheckerOptions.from_mapping(options)


def _match_segments(parts: Sequence[str], pattern: Sequence[str]) -> bool:
    if not pattern:
        return not parts
    if pattern[0] == "**":
        return any(_match_segments(parts[i:], pattern[1:]) for i in range(len(parts) + 1))
    if not parts:
        return False
    return fnmatchcase(parts[0], pattern[0]) and _match_segments(parts[1:], pattern[1:])


def matches_include(relative: str, patterns: Sequence[str]) -> bool:
    """Return ``True`` if the POSIX *relative* path matches any glob pattern.

    Patterns are matched segment by segment: ``*`` and ``?`` never cross a
    ``/``, while a ``**`` segment spans zero or more directories.
    """
    parts = relative.split("/")
    return any(_match_segments(parts, pattern.split("/")) for pattern in patterns)


def find_documents(build_root: Path, include: Sequence[str]) -> List[Path]:
    """Recursively collect the files under *build_root* matching *include*.

    Unreadable subdirectories are logged and skipped.

    Raises:
        OSError: If *build_root* itself cannot be listed.
    """

    def _on_error(exc: OSError) -> None:
        if exc.filename is None or Path(exc.filename) == build_root:
            raise exc
        logger.warning("Could not list %s: %s", exc.filename, exc)

    documents: List[Path] = []
    for current, dirnames, filenames in os.walk(build_root, onerror=_on_error):
        dirnames.sort()
        for name in sorted(filenames):
            path = Path(current) / name
            if matches_include(path.relative_to(build_root).as_posix(), include):
                documents.append(path)
    return documents


async def check_links(build_dir: str | Path, options: OptionsLike = None) -> LinkCheckResult:
    """Check every document in *build_dir* and aggregate the results.

    A document that cannot be read or parsed is recorded under
    ``skipped_files`` and does not count towards the totals.

    Raises:
        FileNotFoundError: If *build_dir* does not exist.
        NotADirectoryError: If *build_dir* is not a directory.
    """
    opts = _as_options(options)
    root = Path(build_dir).resolve()
    if not root.exists():
        raise FileNotFoundError(f"Build directory not found: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Build path is not a directory: {root}")

    rules = load_redirects(root, opts.redirects_file)
    if opts.verbose and rules:
        logger.info("Loaded %d redirect rules from %s", len(rules), opts.redirects_file)

    documents = find_documents(root, opts.include)
    result = LinkCheckResult()

    async with AsyncExitStack() as stack:
        client = None
        if opts.check_external:
            client = await stack.enter_async_context(make_client())

        for path in documents:
            relative = path.relative_to(root).as_posix()
            try:
                report = await validate_file(path, root, rules, opts, client)
            except Exception as exc:
                result.skipped_files.append(relative)
                logger.warning("Skipped %s: %s", relative, exc)
                continue

            result.total_links += len(report.links)
            result.broken_links.extend(report.broken_links)
            result.checked_files.append(relative)
            if opts.verbose:
                logger.info("Checked %d links in %s", len(report.links), relative)

    return result


def run(build_dir: str | Path, options: OptionsLike = None) -> LinkCheckResult:
    """Synchronous entry point around :func:`check_links`."""
    return asyncio.run(check_links(build_dir, options))
