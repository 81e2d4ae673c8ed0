"""Freshness stamp management for scaffolded documents."""

from __future__ import annotations

import re
from datetime import date
from typing import List, Optional

from ..models import ProposedEdit

STAMP_PATTERN = re.compile(r"^> Last Updated:.*$", re.MULTILINE)
STAMP_FORMAT = "> Last Updated: {date}"


def format_stamp(day: date) -> str:
    return STAMP_FORMAT.format(date=day.isoformat())


class FreshnessStamp:
    """Reads and regenerates the ``> Last Updated:`` line of a document."""

    def current(self, markdown: str) -> Optional[str]:
        match = STAMP_PATTERN.search(markdown)
        return match.group(0) if match else None

    def apply(self, markdown: str, day: date) -> str:
        """Return ``markdown`` with every stamp set to ``day``.

        Documents without a stamp get one inserted below the first H1 (or at the
        top when there is no title).
        """
        stamp = format_stamp(day)
        if STAMP_PATTERN.search(markdown):
            return STAMP_PATTERN.sub(stamp, markdown)

        lines = markdown.splitlines()
        insert_at = 0
        for index, line in enumerate(lines):
            if line.startswith("# "):
                insert_at = index + 1
                break
        block = [stamp]
        if insert_at:
            block.insert(0, "")
        if insert_at >= len(lines) or lines[insert_at].strip():
            block.append("")
        lines[insert_at:insert_at] = block
        return "\n".join(lines).rstrip("\n") + "\n"

    def propose(self, path: str, markdown: str, day: date) -> List[ProposedEdit]:
        """Return replacements for stamps that do not already read ``day``."""
        stamp = format_stamp(day)
        edits: List[ProposedEdit] = []
        for number, line in enumerate(markdown.splitlines(), start=1):
            if STAMP_PATTERN.match(line) and line != stamp:
                edits.append(
                    ProposedEdit(
                        path=path,
                        line_number=number,
                        before=line,
                        after=stamp,
                        description="Refresh Last Updated stamp",
                    )
                )
        return edits


__all__ = ["FreshnessStamp", "STAMP_PATTERN", "format_stamp"]
