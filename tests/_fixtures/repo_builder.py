"""Helper utilities for constructing temporary source trees in tests."""

from __future__ import annotations

import os
import textwrap
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Mapping

from docmaster.models import ScanResult
from docmaster.repo_scanner import RepoScanner


class RepoBuilder:
    """Utility for writing files into a throwaway tree and rescanning it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "repo"
        self.root.mkdir()
        self._scanner = RepoScanner()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the tree."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def age(self, relative: str, days: int) -> None:
        """Backdate the modification time of `relative` by `days` days."""
        moment = datetime.now(UTC) - timedelta(days=days)
        timestamp = moment.timestamp()
        os.utime(self.root / relative, (timestamp, timestamp))

    def scan(self, **kwargs: object) -> ScanResult:
        """Return a fresh inventory of the tree contents."""
        return self._scanner.scan(self.root, **kwargs)  # type: ignore[arg-type]

    def path(self) -> Path:
        """Return the tree root path."""
        return self.root


__all__ = ["RepoBuilder"]
