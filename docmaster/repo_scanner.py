"""Repository scanning and documentation inventory building."""

from __future__ import annotations

import os
from collections import Counter
from dataclasses import dataclass
from datetime import UTC, datetime
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence, Tuple

from .analyzers.classifier import PathClassifier
from .analyzers.coverage import CoverageEstimator
from .config import DiscoveryConfig
from .logging import get_logger
from .models import DOCUMENT_CATEGORIES, DiscoveredFile, FileCategory, ScanResult
from .postproc.structure import MarkdownStructureChecker

# Artifacts docmaster writes itself; everything else is inventoried unless
# excluded through configuration.
_EXCLUDED_FILE_PATTERNS = (
    "discovery-report-*.md",
    "discovery-report-*.json",
    "update-report-*.md",
    "apply-updates.sh",
)

_SAMPLED_CATEGORIES = (FileCategory.SOURCE_CODE, FileCategory.TEST_FILE)


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or .docmaster.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def _build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def _parse_gitignore(path: Path) -> List[IgnoreRule]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError:
        return []

    rules: List[IgnoreRule] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = _build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def _load_ignore_rules(root: Path, config: DiscoveryConfig) -> List[IgnoreRule]:
    rules: List[IgnoreRule] = []
    if config.respect_gitignore:
        rules.extend(_parse_gitignore(root / ".gitignore"))
    for pattern in config.exclude_paths:
        rule = _build_ignore_rule(pattern)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def _count_lines(data: bytes) -> int:
    if not data:
        return 0
    count = data.count(b"\n")
    if not data.endswith(b"\n"):
        count += 1
    return count


class RepoScanner:
    """Walks a tree once and classifies every readable regular file."""

    def __init__(
        self,
        config: DiscoveryConfig | None = None,
        *,
        classifier: PathClassifier | None = None,
        estimator: CoverageEstimator | None = None,
        structure_checker: MarkdownStructureChecker | None = None,
    ) -> None:
        self.config = config or DiscoveryConfig()
        self.classifier = classifier or PathClassifier(self.config.source_extensions)
        self.estimator = estimator or CoverageEstimator()
        self.structure_checker = structure_checker or MarkdownStructureChecker()
        self.logger = get_logger("scanner")

    def scan(self, root: str | Path, *, sample_cap: int | None = None) -> ScanResult:
        """Return the inventory and coverage samples for ``root``."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Scan path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Scan path is not a directory: {root}")
        if not os.access(root_path, os.R_OK | os.X_OK):
            raise PermissionError(f"Scan path is not readable: {root}")

        cap = self.config.sample_cap if sample_cap is None else sample_cap
        rules = _load_ignore_rules(root_path, self.config)
        result = ScanResult(root=root_path)
        self.logger.info("Scanning %s", root_path)

        for rel_path, path in self._iter_files(root_path, rules, result):
            try:
                stat_result = path.stat()
                data = path.read_bytes()
            except OSError as exc:
                self._warn(result, f"Cannot read {rel_path}: {exc.strerror or exc}")
                continue

            category = self.classifier.classify(rel_path)
            family = None
            if category in _SAMPLED_CATEGORIES:
                family = self.classifier.language_family(rel_path)

            well_structured = None
            text = ""
            if category in DOCUMENT_CATEGORIES or category in _SAMPLED_CATEGORIES:
                text = data.decode("utf-8", errors="replace")
            if category in DOCUMENT_CATEGORIES:
                well_structured = self.structure_checker.check(text).well_structured

            discovered = DiscoveredFile(
                path=rel_path,
                category=category,
                language_family=family,
                size_lines=_count_lines(data),
                modified_at=datetime.fromtimestamp(stat_result.st_mtime, UTC),
                well_structured=well_structured,
            )
            result.files.append(discovered)
            self.logger.debug("Classified %s as %s", rel_path, category.value)

            if (
                category in _SAMPLED_CATEGORIES
                and self.estimator.supports(family)
                and len(result.coverage_samples) < cap
            ):
                result.coverage_samples.append(
                    self.estimator.estimate(text, family, file=discovered)
                )

        counts = Counter(file.category.value for file in result.files)
        self.logger.info(
            "Discovered %d files (%s); sampled %d for coverage",
            len(result.files),
            ", ".join(f"{name}={count}" for name, count in sorted(counts.items())) or "none",
            len(result.coverage_samples),
        )
        return result

    def _iter_files(
        self, root: Path, rules: Sequence[IgnoreRule], result: ScanResult
    ) -> Iterator[Tuple[str, Path]]:
        visited: set[str] = set()

        def _on_error(exc: OSError) -> None:
            location = exc.filename or "<unknown>"
            try:
                location = Path(location).relative_to(root).as_posix()
            except ValueError:
                pass
            self._warn(result, f"Cannot read {location}: {exc.strerror or exc}")

        for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error, followlinks=True):
            canonical = os.path.realpath(dirpath)
            if canonical in visited:
                self.logger.debug("Skipping already visited directory %s", dirpath)
                dirnames[:] = []
                continue
            visited.add(canonical)

            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""
            if rel_dir:
                result.directories.append(rel_dir)

            kept: List[str] = []
            for name in sorted(dirnames):
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if _should_ignore(rel_path, True, rules):
                    continue
                if os.path.realpath(os.path.join(dirpath, name)) in visited:
                    self.logger.debug("Skipping symlink cycle at %s", rel_path)
                    continue
                kept.append(name)
            dirnames[:] = kept

            for filename in sorted(filenames):
                if any(fnmatchcase(filename, pattern) for pattern in _EXCLUDED_FILE_PATTERNS):
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if _should_ignore(rel_path, False, rules):
                    continue
                path = current_dir / filename
                if not path.is_file():
                    continue
                yield rel_path, path

    def _warn(self, result: ScanResult, message: str) -> None:
        result.warnings.append(message)
        self.logger.warning(message)


__all__ = ["IgnoreRule", "RepoScanner"]
