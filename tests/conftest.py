"""Shared fixtures for building throwaway site trees on disk."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict

import pytest


@pytest.fixture()
def site(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
    """Return a factory that writes ``{relative_path: content}`` under a build root."""
    root = tmp_path / "dist"
    root.mkdir()

    def _write(files: Dict[str, str]) -> Path:
        for name, content in files.items():
            target = root / name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return root

    return _write
