"""Link validation helpers."""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Tuple
from urllib.parse import unquote

from ..logging import get_logger
from ..models import DOCUMENT_CATEGORIES, BrokenLink, DiscoveredFile, LinkFailure

_LINK_PATTERN = re.compile(r"\[([^\]]*)\]\(([^)]*)\)")
_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")
_FENCE_PATTERN = re.compile(r"^\s*(```|~~~)")
_CODE_SPAN_PATTERN = re.compile(r"(`+).+?\1")


class LinkValidator:
    """Resolves relative Markdown cross-references against the scanned tree."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)
        self.logger = get_logger("links")

    def validate(self, docs: Iterable[DiscoveredFile]) -> List[BrokenLink]:
        """Return broken links for every Readme or MarkdownDoc in ``docs``."""
        broken: List[BrokenLink] = []
        for doc in docs:
            if doc.category not in DOCUMENT_CATEGORIES:
                continue
            path = self.root / doc.path
            try:
                markdown = path.read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                self.logger.warning("Skipping link validation for %s: %s", doc.path, exc)
                continue
            for target, reason in self.find_broken_targets(markdown, path.parent):
                broken.append(BrokenLink(source_doc=doc.path, target_reference=target, reason=reason))

        self.logger.debug("Link validation found %d broken link(s)", len(broken))
        return broken

    def find_broken_targets(self, markdown: str, base_dir: Path) -> List[Tuple[str, LinkFailure]]:
        """Return ``(target, reason)`` pairs for unresolved relative links."""
        issues: List[Tuple[str, LinkFailure]] = []
        for target in extract_link_targets(markdown):
            cleaned = _clean_target(target)
            if cleaned is None:
                continue
            if cleaned.startswith("/"):
                candidate = self.root / cleaned.lstrip("/")
            else:
                candidate = base_dir / cleaned
            if candidate.exists():
                continue
            issues.append((target, _failure_reason(cleaned)))
        return issues


def extract_link_targets(markdown: str) -> List[str]:
    """Return raw ``[label](target)`` targets found outside code blocks and code spans."""
    targets: List[str] = []
    in_code = False
    for line in markdown.splitlines():
        if _FENCE_PATTERN.match(line):
            in_code = not in_code
            continue
        if in_code:
            continue
        for match in _LINK_PATTERN.finditer(_CODE_SPAN_PATTERN.sub("", line)):
            target = _strip_title(match.group(2).strip())
            if target:
                targets.append(target)
    return targets


def _strip_title(target: str) -> str:
    if target.startswith("<") and ">" in target:
        return target[1 : target.index(">")].strip()
    # [label](path "title")
    return target.split(" ", 1)[0].strip()


def _clean_target(target: str) -> str | None:
    if _SCHEME_PATTERN.match(target) or target.startswith("//"):
        return None
    if target.startswith("#"):
        return None
    cleaned = target.split("#", 1)[0].split("?", 1)[0]
    cleaned = unquote(cleaned).replace("\\", "/")
    if not cleaned:
        return None
    return cleaned


def _failure_reason(cleaned: str) -> LinkFailure:
    name = PurePosixPath(cleaned.rstrip("/")).name
    if cleaned.endswith("/") or not PurePosixPath(name).suffix:
        return LinkFailure.DIR_NOT_FOUND
    return LinkFailure.FILE_NOT_FOUND


__all__ = ["LinkValidator", "extract_link_targets"]
