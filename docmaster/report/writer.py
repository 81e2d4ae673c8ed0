"""Rendering and persistence of discovery reports."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from jinja2 import Environment

from ..artifacts import write_artifact
from ..config import REPORT_FORMATS
from ..logging import get_logger
from ..models import DiscoveryReport, FileCategory, GapKind
from ..templating import create_environment
from .synthesizer import CATEGORY_LABELS

REPORT_PREFIX = "discovery-report"
_SUFFIXES = {"markdown": ".md", "json": ".json"}


class ReportWriter:
    """Serializes a DiscoveryReport to a single timestamped artifact."""

    template_name = "discovery_report.md.j2"

    def __init__(self, env: Environment | None = None) -> None:
        self._env = env or create_environment()
        self.logger = get_logger("report")

    def render(self, report: DiscoveryReport, fmt: str = "markdown") -> str:
        if fmt not in REPORT_FORMATS:
            raise ValueError(f"Unsupported report format: {fmt}")
        if fmt == "json":
            return json.dumps(report_to_dict(report), indent=2, sort_keys=True) + "\n"
        template = self._env.get_template(self.template_name)
        return template.render(
            report=report,
            categories=FileCategory,
            gap_kinds=GapKind,
            labels=CATEGORY_LABELS,
            readmes=report.files_in(FileCategory.README),
            markdown_docs=report.files_in(FileCategory.MARKDOWN_DOC),
            api_specs=report.files_in(FileCategory.API_SPEC),
            documented_samples=[s for s in report.coverage_samples if s.has_structured_doc_block],
        )

    def write(self, report: DiscoveryReport, output_dir: Path, fmt: str = "markdown") -> Path:
        """Render fully, then write a new artifact; prior reports are left untouched."""
        content = self.render(report, fmt)
        path = write_artifact(
            Path(output_dir),
            REPORT_PREFIX,
            _SUFFIXES[fmt],
            content,
            moment=report.scan_timestamp,
        )
        self.logger.info("Discovery report written to %s", path)
        return path


def report_to_dict(report: DiscoveryReport) -> Dict[str, Any]:
    return {
        "scan_root": report.scan_root,
        "scan_timestamp": report.scan_timestamp.isoformat(),
        "summary": {
            "category_counts": dict(report.category_counts),
            "average_coverage": report.average_coverage,
            "files_total": len(report.files),
            "coverage_samples": len(report.coverage_samples),
            "doc_directories": list(report.doc_directories),
            "freshness_days": report.freshness_days,
        },
        "files": [
            {
                "path": file.path,
                "category": file.category.value,
                "language_family": file.language_family,
                "size_lines": file.size_lines,
                "modified_at": file.modified_at.isoformat(),
                "well_structured": file.well_structured,
            }
            for file in report.files
        ],
        "coverage_samples": [
            {
                "path": sample.file.path,
                "comment_line_count": sample.comment_line_count,
                "total_line_count": sample.total_line_count,
                "coverage_percent": sample.coverage_percent,
                "has_structured_doc_block": sample.has_structured_doc_block,
            }
            for sample in report.coverage_samples
        ],
        "gaps": [
            {"kind": gap.kind.value, "subject_path": gap.subject_path, "detail": gap.detail}
            for gap in report.gaps
        ],
        "broken_links": [
            {
                "source_doc": link.source_doc,
                "target_reference": link.target_reference,
                "reason": link.reason.value,
            }
            for link in report.broken_links
        ],
        "recommendations": list(report.recommendations),
        "warnings": list(report.warnings),
    }


__all__ = ["REPORT_PREFIX", "ReportWriter", "report_to_dict"]
