"""Structural presence checks for Markdown documents."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from .freshness import STAMP_PATTERN

_TITLE_PATTERN = re.compile(r"^# \S")
_SECTION_PATTERN = re.compile(r"^#{2,6} \S")
_FENCE_PREFIXES = ("```", "~~~")


@dataclass(frozen=True)
class StructureReport:
    """Headings and freshness stamp detected in a Markdown document."""

    has_title: bool
    has_sections: bool
    has_last_updated: bool

    @property
    def well_structured(self) -> bool:
        return self.has_title and self.has_sections


class MarkdownStructureChecker:
    """Checks for a title, section headings and a Last Updated stamp."""

    def check(self, markdown: str) -> StructureReport:
        has_title = False
        has_sections = False
        in_code = False
        for line in markdown.splitlines():
            stripped = line.strip()
            if stripped.startswith(_FENCE_PREFIXES):
                in_code = not in_code
                continue
            if in_code:
                continue
            if _TITLE_PATTERN.match(line):
                has_title = True
            elif _SECTION_PATTERN.match(line):
                has_sections = True
        return StructureReport(
            has_title=has_title,
            has_sections=has_sections,
            has_last_updated=STAMP_PATTERN.search(markdown) is not None,
        )

    def issues(self, markdown: str, name: str) -> List[str]:
        """Return human-readable problems for refresh reports."""
        report = self.check(markdown)
        problems: List[str] = []
        if not report.has_title:
            problems.append(f"Missing H1 header in {name}")
        if not report.has_last_updated:
            problems.append(f"Missing 'Last Updated' in {name}")
        return problems


__all__ = ["MarkdownStructureChecker", "StructureReport"]
