"""Data models for the link checking pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class LinkType(str, Enum):
    """How a reference was classified at extraction time."""

    INTERNAL = "internal"
    EXTERNAL = "external"
    ASSET = "asset"
    ANCHOR = "anchor"


class BrokenReason(str, Enum):
    """Why a reference failed validation."""

    NOT_FOUND = "not-found"
    NETWORK_ERROR = "network-error"
    TIMEOUT = "timeout"
    INVALID = "invalid"


@dataclass(frozen=True)
class Link:
    """A single reference discovered in a document."""

    href: str
    text: str
    source_file: str
    type: LinkType


@dataclass(frozen=True)
class BrokenLink(Link):
    """A :class:`Link` that failed validation."""

    error: str
    reason: BrokenReason

    @classmethod
    def from_link(cls, link: Link, reason: BrokenReason, error: str) -> BrokenLink:
        return cls(
            href=link.href,
            text=link.text,
            source_file=link.source_file,
            type=link.type,
            error=error,
            reason=reason,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "href": self.href,
            "text": self.text,
            "sourceFile": self.source_file,
            "type": self.type.value,
            "error": self.error,
            "reason": self.reason.value,
        }


@dataclass(frozen=True)
class RedirectRule:
    """One ``<from> <to> [<status>]`` line of a redirects file.

    ``status`` is informational; resolution never looks at it.
    """

    source: str
    destination: str
    status: int = 301


@dataclass
class FileReport:
    """Everything found in one document."""

    links: List[Link] = field(default_factory=list)
    broken_links: List[BrokenLink] = field(default_factory=list)


@dataclass
class LinkCheckResult:
    """Aggregate outcome of a whole build directory check."""

    total_links: int = 0
    broken_links: List[BrokenLink] = field(default_factory=list)
    checked_files: List[str] = field(default_factory=list)
    skipped_files: List[str] = field(default_factory=list)

    @property
    def has_broken_links(self) -> bool:
        return bool(self.broken_links)

    def broken_by_file(self) -> Dict[str, List[BrokenLink]]:
        """Group broken links by source document, preserving report order."""
        grouped: Dict[str, List[BrokenLink]] = {}
        for link in self.broken_links:
            grouped.setdefault(link.source_file, []).append(link)
        return grouped

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalLinks": self.total_links,
            "brokenLinks": [link.to_dict() for link in self.broken_links],
            "checkedFiles": list(self.checked_files),
            "skippedFiles": list(self.skipped_files),
        }
