"""Append-only registry of scaffolded projects."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import List
from urllib.parse import quote, unquote

INDEX_FILENAME = "INDEX.md"
INDEX_HEADER = "# Projects Index\n\n## Active Projects\n\n"

_ENTRY_PATTERN = re.compile(
    r"^- \[(?P<name>[^\]]+)\]\(\./(?P<link>[^)]+)\) - (?P<date>\d{4}-\d{2}-\d{2})$"
)


@dataclass(frozen=True)
class IndexEntry:
    name: str
    readme: str
    created_on: date


class ProjectIndex:
    """Markdown index with one line per project; lines are only ever appended."""

    def __init__(self, path: Path) -> None:
        self.path = path

    @staticmethod
    def format_entry(name: str, day: date) -> str:
        return f"- [{name}](./{quote(name)}/README.md) - {day.isoformat()}"

    def append(self, name: str, day: date) -> str:
        entry = self.format_entry(name, day)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with self.path.open("x", encoding="utf-8") as handle:
                handle.write(INDEX_HEADER)
        except FileExistsError:
            pass
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(entry + "\n")
        return entry

    def entries(self) -> List[IndexEntry]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        entries: List[IndexEntry] = []
        for line in text.splitlines():
            match = _ENTRY_PATTERN.match(line.strip())
            if not match:
                continue
            entries.append(
                IndexEntry(
                    name=match.group("name"),
                    readme=unquote(match.group("link")),
                    created_on=date.fromisoformat(match.group("date")),
                )
            )
        return entries

    def contains(self, name: str) -> bool:
        return any(entry.name == name for entry in self.entries())


__all__ = ["INDEX_FILENAME", "INDEX_HEADER", "IndexEntry", "ProjectIndex"]
