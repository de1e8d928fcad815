"""buildlinks — dead-link checking for static site build output."""

from buildlinks.checker import check_links, run
from buildlinks.config import CheckerOptions, settings
from buildlinks.extractor import classify_href, extract_links
from buildlinks.models import (
    BrokenLink,
    BrokenReason,
    FileReport,
    Link,
    LinkCheckResult,
    LinkType,
    RedirectRule,
)
from buildlinks.redirects import (
    apply_redirect_rule,
    find_redirect_rule,
    load_redirects,
    parse_redirects,
)
from buildlinks.validator import validate_file

__all__ = [
    "run",
    "check_links",
    "validate_file",
    "extract_links",
    "classify_href",
    "parse_redirects",
    "load_redirects",
    "find_redirect_rule",
    "apply_redirect_rule",
    "CheckerOptions",
    "settings",
    "Link",
    "BrokenLink",
    "LinkType",
    "BrokenReason",
    "RedirectRule",
    "FileReport",
    "LinkCheckResult",
]
