"""Pipeline orchestration for discover/init/update/status flows."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import List, Optional

from .analyzers.gaps import GapDetector
from .config import REPORT_FORMATS, DocMasterConfig, load_config
from .logging import get_logger
from .models import (
    DiscoveryReport,
    FileCategory,
    ProjectManifest,
    ProjectState,
    UpdateSummary,
)
from .postproc.links import LinkValidator
from .report import ReportSynthesizer, ReportWriter
from .repo_scanner import RepoScanner
from .scaffold import Scaffolder

_TRACKED_CATEGORIES = (FileCategory.README, FileCategory.MARKDOWN_DOC, FileCategory.API_SPEC)


@dataclass
class DiscoveryOutcome:
    """Result of a discovery pass."""

    report: DiscoveryReport
    path: Path
    summary: List[str] = field(default_factory=list)


class Orchestrator:
    """Coordinates the discovery pass and the scaffolding commands."""

    def __init__(
        self,
        *,
        config_path: Path | None = None,
        projects_root: Path | None = None,
        writer: ReportWriter | None = None,
    ) -> None:
        self.config_path = Path(config_path).expanduser() if config_path else None
        self.projects_root = Path(projects_root).expanduser() if projects_root else None
        self.writer = writer or ReportWriter()
        self.logger = get_logger("orchestrator")

    def run_discover(
        self,
        path: str | Path = ".",
        *,
        sample_cap: Optional[int] = None,
        freshness_days: Optional[int] = None,
        output_dir: Path | None = None,
        fmt: Optional[str] = None,
        now: datetime | None = None,
    ) -> DiscoveryOutcome:
        """Scan ``path`` and write one timestamped discovery report."""
        root = Path(path).expanduser().resolve()
        config = self._load_config(root)
        discovery = config.discovery

        cap = discovery.sample_cap if sample_cap is None else sample_cap
        if cap < 0:
            raise ValueError("Sample cap must be zero or positive")
        days = discovery.freshness_days if freshness_days is None else freshness_days
        if days < 1:
            raise ValueError("Freshness threshold must be at least one day")
        report_format = (fmt or discovery.report_format).lower()
        if report_format not in REPORT_FORMATS:
            raise ValueError(f"Unsupported report format: {report_format}")

        moment = now or datetime.now(UTC)
        self.logger.info("Starting discovery run for %s", root)
        scan = RepoScanner(discovery).scan(root, sample_cap=cap)

        detector = GapDetector(discovery.required_docs, discovery.doc_directories, days)
        tracked = [file.path for file in scan.by_category(*_TRACKED_CATEGORIES)]
        gaps = detector.detect(
            root, scan.files, directories=scan.directories, tracked=tracked, now=moment
        )
        broken_links = LinkValidator(root).validate(scan.files)

        synthesizer = ReportSynthesizer(days)
        report = synthesizer.synthesize(
            str(root),
            scan.files,
            scan.coverage_samples,
            gaps,
            broken_links,
            timestamp=moment,
            warnings=scan.warnings,
            doc_directories=detector.find_doc_directories(scan.directories),
        )
        target_dir = Path(output_dir) if output_dir else (discovery.report_dir or root)
        report_path = self.writer.write(report, target_dir, report_format)
        return DiscoveryOutcome(
            report=report, path=report_path, summary=synthesizer.console_summary(report)
        )

    def run_init(
        self,
        project_name: str,
        template_set: Optional[str] = None,
        *,
        now: datetime | None = None,
    ) -> ProjectManifest:
        config = self._load_config(Path.cwd())
        scaffolder = self._scaffolder(config)
        return scaffolder.init(project_name, template_set or config.scaffold.template_set, now=now)

    def run_update(
        self,
        project_name: str,
        scope: str = "all",
        *,
        now: datetime | None = None,
    ) -> UpdateSummary:
        scaffolder = self._scaffolder(self._load_config(Path.cwd()))
        return scaffolder.refresh(project_name, scope, now=now)

    def project_status(self, project_name: str, *, now: datetime | None = None) -> ProjectState:
        scaffolder = self._scaffolder(self._load_config(Path.cwd()))
        return scaffolder.state(project_name, now=now)

    def _load_config(self, base: Path) -> DocMasterConfig:
        config = load_config(self.config_path or base)
        if self.projects_root is not None:
            config.scaffold.projects_root = self.projects_root
        return config

    @staticmethod
    def _scaffolder(config: DocMasterConfig) -> Scaffolder:
        scaffold = config.scaffold
        return Scaffolder(
            scaffold.projects_root,
            templates_dir=scaffold.templates_dir,
            freshness_days=scaffold.freshness_days,
        )


__all__ = ["DiscoveryOutcome", "Orchestrator"]
