"""Aggregation of scan, gap and link findings into a discovery report."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Dict, List, Sequence

from ..analyzers.constants import DEFAULT_FRESHNESS_DAYS
from ..models import (
    BrokenLink,
    CoverageSample,
    DiscoveredFile,
    DiscoveryReport,
    FileCategory,
    Gap,
    GapKind,
)

LOW_COVERAGE_THRESHOLD = 20

CATEGORY_LABELS: Dict[FileCategory, str] = {
    FileCategory.README: "README files",
    FileCategory.MARKDOWN_DOC: "Markdown documents",
    FileCategory.API_SPEC: "API specifications",
    FileCategory.SOURCE_CODE: "Source files",
    FileCategory.TEST_FILE: "Test files",
    FileCategory.OTHER: "Other files",
}


def average_coverage(samples: Sequence[CoverageSample]) -> int:
    """Floor of the mean coverage percentage over non-empty samples."""
    percentages = [sample.coverage_percent for sample in samples if sample.total_line_count > 0]
    if not percentages:
        return 0
    return sum(percentages) // len(percentages)


class ReportSynthesizer:
    """Builds the DiscoveryReport and its console summary."""

    def __init__(self, freshness_days: int = DEFAULT_FRESHNESS_DAYS) -> None:
        self.freshness_days = freshness_days

    def synthesize(
        self,
        scan_root: str,
        files: Sequence[DiscoveredFile],
        samples: Sequence[CoverageSample],
        gaps: Sequence[Gap],
        broken_links: Sequence[BrokenLink],
        *,
        timestamp: datetime | None = None,
        warnings: Sequence[str] = (),
        doc_directories: Sequence[str] = (),
    ) -> DiscoveryReport:
        counts = {category.value: 0 for category in FileCategory}
        for file in files:
            counts[file.category.value] += 1

        report = DiscoveryReport(
            scan_root=scan_root,
            scan_timestamp=timestamp or datetime.now(UTC),
            files=list(files),
            coverage_samples=list(samples),
            gaps=list(gaps),
            broken_links=list(broken_links),
            recommendations=[],
            warnings=list(warnings),
            doc_directories=list(doc_directories),
            category_counts=counts,
            average_coverage=average_coverage(samples),
            freshness_days=self.freshness_days,
        )
        report.recommendations = self.recommend(report)
        return report

    def recommend(self, report: DiscoveryReport) -> List[str]:
        recommendations: List[str] = []

        missing = [gap.subject_path for gap in report.gaps_of(GapKind.MISSING_REQUIRED_DOC)]
        if missing:
            recommendations.append(
                "Add missing required documentation: " + ", ".join(str(name) for name in missing)
            )
        if report.gaps_of(GapKind.NO_DOC_DIRECTORY):
            recommendations.append("Organize documentation in a dedicated directory such as docs/")
        if report.gaps_of(GapKind.NO_API_SPEC):
            recommendations.append(
                "Add an API specification (openapi.yaml, swagger.json or a GraphQL schema)"
            )
        outdated = report.gaps_of(GapKind.OUTDATED)
        if outdated:
            recommendations.append(
                f"Review {len(outdated)} document(s) not updated in the last {report.freshness_days} days"
            )
        if report.broken_links:
            recommendations.append(f"Fix {len(report.broken_links)} broken link(s)")
        if report.coverage_samples and report.average_coverage < LOW_COVERAGE_THRESHOLD:
            recommendations.append(
                f"Average inline documentation is {report.average_coverage}%; "
                "add doc comments or docstrings to public APIs"
            )
        unstructured = [file for file in report.files if file.well_structured is False]
        if unstructured:
            recommendations.append(
                f"Add a title and section headings to {len(unstructured)} Markdown document(s)"
            )
        if report.warnings:
            recommendations.append(
                f"Check permissions for {len(report.warnings)} unreadable path(s) skipped during the scan"
            )
        if not recommendations:
            recommendations.append("Baseline documentation is present; keep it current")
        return recommendations

    def console_summary(self, report: DiscoveryReport) -> List[str]:
        """Return terse summary lines for terminal output."""
        counts = report.category_counts
        doc_total = counts.get(FileCategory.README.value, 0) + counts.get(
            FileCategory.MARKDOWN_DOC.value, 0
        )
        lines = [
            f"Scanned {len(report.files)} files under {report.scan_root}",
            f"Documentation files: {doc_total} "
            f"({counts.get(FileCategory.README.value, 0)} README, "
            f"{counts.get(FileCategory.MARKDOWN_DOC.value, 0)} Markdown)",
            f"API specifications: {counts.get(FileCategory.API_SPEC.value, 0)}",
            f"Documentation directories: {len(report.doc_directories)}",
            f"Code files analyzed: {len(report.coverage_samples)} "
            f"(average inline documentation {report.average_coverage}%)",
            f"Gaps: {len(report.gaps)}, broken links: {len(report.broken_links)}",
        ]
        if report.warnings:
            lines.append(f"Skipped unreadable paths: {len(report.warnings)}")
        return lines


__all__ = ["CATEGORY_LABELS", "ReportSynthesizer", "average_coverage"]
