"""Link extraction: turns one HTML document into a list of :class:`Link`."""

from __future__ import annotations

import posixpath
from typing import Dict, List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from buildlinks.models import Link, LinkType


# ---------------------------------------------------------------------------
# Match tables
# ---------------------------------------------------------------------------

_HREF = "href"
_SRC = "src"
_SRCSET = "srcset"

# tag -> attribute -> resulting link type, attributes in the order they are
# read.  ``None`` means the type comes from :func:`classify_href`.
_HREF_TYPES: Dict[str, Optional[LinkType]] = {_HREF: None}
_SRC_TYPES: Dict[str, Optional[LinkType]] = {_SRC: LinkType.ASSET}
_MEDIA_TYPES: Dict[str, Optional[LinkType]] = {_SRC: LinkType.ASSET, _SRCSET: LinkType.ASSET}

_TAG_ATTRIBUTES: Dict[str, Dict[str, Optional[LinkType]]] = {
    "a": _HREF_TYPES,
    "link": _HREF_TYPES,
    "img": _MEDIA_TYPES,
    "source": _MEDIA_TYPES,
    "script": _SRC_TYPES,
    "iframe": _SRC_TYPES,
    "video": _SRC_TYPES,
    "audio": _SRC_TYPES,
}

# Schemes that can never be resolved against the build output or probed.
_SKIPPED_SCHEMES = ("javascript:", "mailto:", "tel:", "data:", "blob:")

_EXTERNAL_PREFIXES = ("http://", "https://", "//")

ASSET_EXTENSIONS = frozenset({
    ".jpg", ".jpeg", ".png", ".gif", ".svg", ".webp", ".avif",
    ".css", ".js", ".json", ".pdf", ".zip", ".mp4", ".webm",
    ".mp3", ".wav", ".woff", ".woff2", ".ttf", ".eot", ".ico",
})


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _is_skipped(value: str) -> bool:
    return value.lower().startswith(_SKIPPED_SCHEMES)


def _parse_srcset(srcset: str) -> List[str]:
    """Return the URL of every ``srcset`` candidate, dropping descriptors."""
    urls: List[str] = []
    for candidate in srcset.split(","):
        parts = candidate.split()
        if parts:
            urls.append(parts[0])
    return urls


def _attr(element: Tag, name: str) -> str:
    value = element.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return (value or "").strip()


def _link_text(element: Tag, attribute: str, value: str) -> str:
    if attribute == _HREF:
        return element.get_text(strip=True) or _attr(element, "title") or value
    if attribute == _SRC:
        return _attr(element, "alt") or _attr(element, "title") or value
    return _attr(element, "alt") or value


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def classify_href(href: str) -> LinkType:
    """Classify an ``href`` value. First matching rule wins."""
    if href.startswith("#"):
        return LinkType.ANCHOR
    if href.startswith(_EXTERNAL_PREFIXES):
        return LinkType.EXTERNAL
    path = href.split("?")[0].split("#")[0]
    if posixpath.splitext(path)[1].lower() in ASSET_EXTENSIONS:
        return LinkType.ASSET
    return LinkType.INTERNAL


def extract_links(html: str, source_file: str) -> List[Link]:
    """Return every checkable reference in *html*, in document order.

    ``href`` values on ``<a>``/``<link>`` are classified with
    :func:`classify_href`; ``src`` and ``srcset`` values are always assets.
    Each ``srcset`` candidate yields its own link.  Duplicates are kept.
    """
    soup = BeautifulSoup(html, "html.parser")
    links: List[Link] = []

    for element in soup.find_all(list(_TAG_ATTRIBUTES)):
        for attribute, link_type in _TAG_ATTRIBUTES[element.name].items():
            value = _attr(element, attribute)
            if not value:
                continue

            urls = _parse_srcset(value) if attribute == _SRCSET else [value]
            for url in urls:
                if _is_skipped(url):
                    continue
                links.append(Link(
                    href=url,
                    text=_link_text(element, attribute, url),
                    source_file=source_file,
                    type=link_type if link_type is not None else classify_href(url),
                ))

    return links
