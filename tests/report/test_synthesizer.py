"""Tests for docmaster.report.synthesizer."""

from __future__ import annotations

from datetime import UTC, datetime

from docmaster.models import (
    BrokenLink,
    CoverageSample,
    DiscoveredFile,
    FileCategory,
    Gap,
    GapKind,
    LinkFailure,
)
from docmaster.report.synthesizer import ReportSynthesizer, average_coverage

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=UTC)


def _file(path: str, category: FileCategory, *, structured: bool | None = None) -> DiscoveredFile:
    return DiscoveredFile(
        path=path,
        category=category,
        language_family="Python" if category is FileCategory.SOURCE_CODE else None,
        size_lines=10,
        modified_at=NOW,
        well_structured=structured,
    )


def _sample(path: str, comments: int, total: int) -> CoverageSample:
    return CoverageSample(
        file=_file(path, FileCategory.SOURCE_CODE),
        comment_line_count=comments,
        total_line_count=total,
        has_structured_doc_block=False,
    )


def test_average_coverage_is_floor_of_mean() -> None:
    samples = [_sample("a.py", 1, 3), _sample("b.py", 1, 2)]
    # 33 and 50 average to 41.5
    assert average_coverage(samples) == 41
    assert average_coverage([]) == 0
    assert average_coverage([_sample("empty.py", 0, 0)]) == 0


def test_synthesize_counts_and_recommendations() -> None:
    files = [
        _file("README.md", FileCategory.README, structured=True),
        _file("src/a.py", FileCategory.SOURCE_CODE),
        _file("notes.md", FileCategory.MARKDOWN_DOC, structured=False),
    ]
    gaps = [
        Gap(GapKind.MISSING_REQUIRED_DOC, "No API.md found", "API.md"),
        Gap(GapKind.NO_DOC_DIRECTORY, "No dedicated documentation directory"),
        Gap(GapKind.NO_API_SPEC, "Source code present but no API specification files found"),
    ]
    links = [BrokenLink("README.md", "./nope.md", LinkFailure.FILE_NOT_FOUND)]

    report = ReportSynthesizer(freshness_days=30).synthesize(
        "/repo", files, [_sample("src/a.py", 4, 10)], gaps, links, timestamp=NOW
    )

    assert report.scan_timestamp == NOW
    assert report.category_counts["readme"] == 1
    assert report.category_counts["source_code"] == 1
    assert report.category_counts["api_spec"] == 0
    assert report.average_coverage == 40
    assert report.recommendations[0] == "Add missing required documentation: API.md"
    assert any("docs/" in item for item in report.recommendations)
    assert any("API specification" in item for item in report.recommendations)
    assert "Fix 1 broken link(s)" in report.recommendations
    assert any("1 Markdown document(s)" in item for item in report.recommendations)
    assert not any("inline documentation" in item for item in report.recommendations)


def test_low_coverage_and_warnings_are_recommended() -> None:
    report = ReportSynthesizer().synthesize(
        "/repo",
        [_file("src/a.py", FileCategory.SOURCE_CODE)],
        [_sample("src/a.py", 1, 10)],
        [],
        [],
        timestamp=NOW,
        warnings=["Cannot read private: Permission denied"],
    )
    assert any("Average inline documentation is 10%" in item for item in report.recommendations)
    assert any("1 unreadable path(s)" in item for item in report.recommendations)


def test_clean_report_has_baseline_recommendation() -> None:
    report = ReportSynthesizer().synthesize("/repo", [], [], [], [], timestamp=NOW)
    assert report.recommendations == ["Baseline documentation is present; keep it current"]


def test_console_summary_mentions_totals() -> None:
    synthesizer = ReportSynthesizer()
    report = synthesizer.synthesize(
        "/repo",
        [_file("README.md", FileCategory.README, structured=True)],
        [],
        [],
        [],
        timestamp=NOW,
    )
    lines = synthesizer.console_summary(report)
    assert lines[0] == "Scanned 1 files under /repo"
    assert "Documentation files: 1 (1 README, 0 Markdown)" in lines
    assert "Gaps: 0, broken links: 0" in lines
