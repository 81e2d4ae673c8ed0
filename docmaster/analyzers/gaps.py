"""Detection of missing and stale documentation artifacts."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from fnmatch import fnmatchcase
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Sequence

from ..logging import get_logger
from ..models import DiscoveredFile, FileCategory, Gap, GapKind, RequiredDoc
from .constants import DEFAULT_DOC_DIRECTORIES, DEFAULT_FRESHNESS_DAYS, DEFAULT_REQUIRED_DOCS


class GapDetector:
    """Finds required documentation that is absent or older than the threshold."""

    def __init__(
        self,
        required_docs: Sequence[RequiredDoc] | None = None,
        doc_directory_names: Sequence[str] | None = None,
        freshness_days: int = DEFAULT_FRESHNESS_DAYS,
    ) -> None:
        self.required_docs = tuple(required_docs) if required_docs is not None else DEFAULT_REQUIRED_DOCS
        names = doc_directory_names if doc_directory_names is not None else DEFAULT_DOC_DIRECTORIES
        self.doc_directory_names = tuple(names)
        self.freshness_days = freshness_days
        self.logger = get_logger("gaps")

    def detect(
        self,
        root: Path | str,
        files: Sequence[DiscoveredFile],
        *,
        directories: Iterable[str] | None = None,
        tracked: Iterable[str] | None = None,
        now: datetime | None = None,
    ) -> List[Gap]:
        """Return gaps for the scanned inventory.

        ``directories`` lists every directory seen by the scanner, relative to
        ``root``; when omitted it is derived from the file paths. Staleness is
        only evaluated for paths in ``tracked``.
        """
        gaps: List[Gap] = []
        gaps.extend(self.missing_required(files))

        if directories is None:
            directories = _parent_directories(files)
        if not self.find_doc_directories(directories):
            gaps.append(
                Gap(
                    kind=GapKind.NO_DOC_DIRECTORY,
                    detail="No dedicated documentation directory ("
                    + ", ".join(self.doc_directory_names)
                    + ")",
                )
            )

        has_source = any(file.category is FileCategory.SOURCE_CODE for file in files)
        has_api_spec = any(file.category is FileCategory.API_SPEC for file in files)
        if has_source and not has_api_spec:
            gaps.append(
                Gap(
                    kind=GapKind.NO_API_SPEC,
                    detail="Source code present but no API specification files found",
                )
            )

        if tracked is not None:
            gaps.extend(self.outdated(files, tracked, now=now))

        if gaps:
            self.logger.info("Identified %d documentation gap(s) under %s", len(gaps), root)
        else:
            self.logger.info("No gaps identified under %s", root)
        return gaps

    def missing_required(self, files: Sequence[DiscoveredFile]) -> List[Gap]:
        gaps: List[Gap] = []
        for required in self.required_docs:
            if not any(_matches_required(file.path, required) for file in files):
                gaps.append(
                    Gap(
                        kind=GapKind.MISSING_REQUIRED_DOC,
                        detail=f"No {required.name} found",
                        subject_path=required.name,
                    )
                )
        return gaps

    def outdated(
        self,
        files: Sequence[DiscoveredFile],
        tracked: Iterable[str],
        *,
        now: datetime | None = None,
    ) -> List[Gap]:
        reference = now or datetime.now(UTC)
        cutoff = reference - timedelta(days=self.freshness_days)
        tracked_set = set(tracked)
        gaps: List[Gap] = []
        for file in files:
            if file.path not in tracked_set:
                continue
            if file.modified_at < cutoff:
                age_days = (reference - file.modified_at).days
                gaps.append(
                    Gap(
                        kind=GapKind.OUTDATED,
                        detail=f"Last modified {age_days} days ago (threshold {self.freshness_days} days)",
                        subject_path=file.path,
                    )
                )
        return gaps

    def find_doc_directories(self, directories: Iterable[str]) -> List[str]:
        """Return directories whose name is a conventional documentation name."""
        names = {name.lower() for name in self.doc_directory_names}
        return [
            directory
            for directory in directories
            if directory and PurePosixPath(directory).name.lower() in names
        ]


def _matches_required(path: str, required: RequiredDoc) -> bool:
    pure = PurePosixPath(path)
    if required.root_only and len(pure.parts) != 1:
        return False
    name = pure.name.lower()
    return any(fnmatchcase(name, pattern.lower()) for pattern in required.patterns)


def _parent_directories(files: Iterable[DiscoveredFile]) -> List[str]:
    seen: set[str] = set()
    ordered: List[str] = []
    for file in files:
        parents = list(PurePosixPath(file.path).parents)
        for parent in reversed(parents):
            text = parent.as_posix()
            if text == "." or text in seen:
                continue
            seen.add(text)
            ordered.append(text)
    return ordered


__all__ = ["GapDetector"]
