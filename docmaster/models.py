"""Core data models shared across docmaster components."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


class FileCategory(str, Enum):
    """Documentation category assigned to every scanned file."""

    README = "readme"
    MARKDOWN_DOC = "markdown_doc"
    API_SPEC = "api_spec"
    SOURCE_CODE = "source_code"
    TEST_FILE = "test_file"
    OTHER = "other"


DOCUMENT_CATEGORIES = (FileCategory.README, FileCategory.MARKDOWN_DOC)


class GapKind(str, Enum):
    MISSING_REQUIRED_DOC = "missing_required_doc"
    NO_DOC_DIRECTORY = "no_doc_directory"
    NO_API_SPEC = "no_api_spec"
    OUTDATED = "outdated"


class LinkFailure(str, Enum):
    FILE_NOT_FOUND = "file_not_found"
    DIR_NOT_FOUND = "dir_not_found"


class ProjectState(str, Enum):
    NOT_INITIALIZED = "not_initialized"
    FRESH = "fresh"
    STALE = "stale"


@dataclass(frozen=True)
class DiscoveredFile:
    """Metadata for an individual file found during a discovery pass."""

    path: str
    category: FileCategory
    language_family: Optional[str]
    size_lines: int
    modified_at: datetime
    well_structured: Optional[bool] = None


@dataclass
class CoverageSample:
    """Inline documentation density measured for one source file."""

    file: DiscoveredFile
    comment_line_count: int
    total_line_count: int
    has_structured_doc_block: bool

    @property
    def coverage_percent(self) -> int:
        if self.total_line_count <= 0:
            return 0
        return self.comment_line_count * 100 // self.total_line_count


@dataclass
class Gap:
    """A missing or stale documentation artifact."""

    kind: GapKind
    detail: str
    subject_path: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind is GapKind.MISSING_REQUIRED_DOC and not self.subject_path:
            raise ValueError("missing_required_doc gaps must name the expected file")


@dataclass
class BrokenLink:
    """Relative cross-reference whose target does not exist."""

    source_doc: str
    target_reference: str
    reason: LinkFailure


@dataclass
class ScanResult:
    """Inventory accumulated by a single scanner pass."""

    root: Path
    files: List[DiscoveredFile] = field(default_factory=list)
    coverage_samples: List[CoverageSample] = field(default_factory=list)
    directories: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def by_category(self, *categories: FileCategory) -> List[DiscoveredFile]:
        return [file for file in self.files if file.category in categories]


@dataclass
class DiscoveryReport:
    """Aggregated outcome of one discovery pass."""

    scan_root: str
    scan_timestamp: datetime
    files: List[DiscoveredFile]
    coverage_samples: List[CoverageSample]
    gaps: List[Gap]
    broken_links: List[BrokenLink]
    recommendations: List[str]
    warnings: List[str] = field(default_factory=list)
    doc_directories: List[str] = field(default_factory=list)
    category_counts: Dict[str, int] = field(default_factory=dict)
    average_coverage: int = 0
    freshness_days: int = 30

    def files_in(self, category: FileCategory) -> List[DiscoveredFile]:
        return [file for file in self.files if file.category is category]

    def gaps_of(self, kind: GapKind) -> List[Gap]:
        return [gap for gap in self.gaps if gap.kind is kind]


@dataclass
class ProjectManifest:
    """Record of a scaffolded project."""

    name: str
    created_at: datetime
    required_docs: List[str]
    index_entry: str
    path: Optional[Path] = None
    created_files: List[str] = field(default_factory=list)
    report_path: Optional[Path] = None


@dataclass(frozen=True)
class ProposedEdit:
    """Single line change a reviewer may apply to a project document."""

    path: str
    line_number: int
    before: str
    after: str
    description: str


@dataclass
class UpdateSummary:
    """Result of refreshing an existing project."""

    project: str
    scope: str
    checked_files: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    outdated: List[str] = field(default_factory=list)
    stamped: List[str] = field(default_factory=list)
    structure_issues: List[str] = field(default_factory=list)
    broken_links: List[BrokenLink] = field(default_factory=list)
    api_spec_found: Optional[bool] = None
    proposed_edits: List[ProposedEdit] = field(default_factory=list)
    action_items: List[str] = field(default_factory=list)
    report_path: Optional[Path] = None
    script_path: Optional[Path] = None


@dataclass(frozen=True)
class RequiredDoc:
    """Documentation artifact every scanned tree is expected to carry."""

    name: str
    patterns: tuple[str, ...]
    root_only: bool = False
