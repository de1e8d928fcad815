"""Centralised settings for the buildlinks checker.

Process-wide tunables are resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the working
directory (loaded automatically when this module is imported).

Per-invocation behaviour lives in :class:`CheckerOptions`, whose defaults are
applied by construction.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping

from dotenv import load_dotenv

load_dotenv(Path.cwd() / ".env", override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # External prober
    # ------------------------------------------------------------------
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "BUILDLINKS_USER_AGENT",
            "Mozilla/5.0 (compatible; buildlinks/1.0.0)",
        )
    )
    external_timeout_ms: int = field(
        default_factory=lambda: int(os.environ.get("BUILDLINKS_EXTERNAL_TIMEOUT", "5000"))
    )

    # ------------------------------------------------------------------
    # Internal resolver
    # ------------------------------------------------------------------
    max_redirect_depth: int = field(
        default_factory=lambda: int(os.environ.get("BUILDLINKS_MAX_REDIRECT_DEPTH", "10"))
    )


# Module-level singleton; import this everywhere:
#   from buildlinks.config import settings
settings = Settings()


# camelCase names accepted by :meth:`CheckerOptions.from_mapping`.
_ALIASES = {
    "checkExternal": "check_external",
    "failOnBrokenLinks": "fail_on_broken_links",
    "externalTimeout": "external_timeout",
    "redirectsFile": "redirects_file",
}


@dataclass
class CheckerOptions:
    """Options for a single :func:`buildlinks.checker.run` invocation."""

    check_external: bool = False
    # Interpreted by the caller (the CLI), never by the engine.
    fail_on_broken_links: bool = True
    exclude: list[str] = field(default_factory=list)
    include: list[str] = field(default_factory=lambda: ["**/*.html"])
    external_timeout: int = field(default_factory=lambda: settings.external_timeout_ms)
    verbose: bool = False
    # Accepted for compatibility; internal resolution does not use it.
    base: str | None = None
    redirects_file: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> CheckerOptions:
        """Build options from a plain mapping.

        Both snake_case field names and their camelCase equivalents
        (``checkExternal``, ``redirectsFile`` ...) are accepted.

        Raises:
            ValueError: If *data* contains an unknown key.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown link checker option: {key!r}")
            kwargs[name] = value
        return cls(**kwargs)
