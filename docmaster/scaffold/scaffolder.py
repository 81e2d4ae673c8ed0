"""Project documentation scaffolding and refresh."""

from __future__ import annotations

import json
import os
import re
import shutil
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import Dict, List

from jinja2 import Environment

from ..analyzers.constants import DEFAULT_FRESHNESS_DAYS
from ..analyzers.gaps import GapDetector
from ..artifacts import write_artifact
from ..logging import get_logger
from ..models import (
    DOCUMENT_CATEGORIES,
    DiscoveredFile,
    ProjectManifest,
    ProjectState,
    UpdateSummary,
)
from ..postproc.freshness import FreshnessStamp
from ..postproc.links import LinkValidator
from ..postproc.structure import MarkdownStructureChecker
from ..repo_scanner import RepoScanner
from ..templating import create_environment
from .index import INDEX_FILENAME, ProjectIndex
from .templates import TemplateSet, load_template_set, slugify, substitute_placeholders

REFRESH_SCOPES = ("all", "api", "architecture", "readme", "guides")
DEFAULT_TEMPLATE_SET = "standard"
PROJECT_REPORT_FILENAME = "documentation-report.md"
UPDATE_SCRIPT_FILENAME = "apply-updates.sh"
METADATA_PATH = Path(".docmaster") / "project.json"
API_SPEC_CANDIDATES = ("openapi.yaml", "openapi.yml", "swagger.json", "swagger.yaml")

_PROJECT_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9 ._-]*$")


class ProjectExistsError(FileExistsError):
    """Raised when scaffolding a project whose directory already exists."""


class ProjectNotFoundError(FileNotFoundError):
    """Raised when refreshing a project that was never initialized."""


def validate_project_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned or not _PROJECT_NAME_PATTERN.match(cleaned):
        raise ValueError(
            f"Invalid project name {name!r}: use letters, digits, spaces, '.', '_' or '-'"
        )
    return cleaned


class Scaffolder:
    """Creates and refreshes per-project documentation sets."""

    def __init__(
        self,
        projects_root: Path | str,
        *,
        templates_dir: Path | None = None,
        freshness_days: int = DEFAULT_FRESHNESS_DAYS,
        env: Environment | None = None,
        scanner: RepoScanner | None = None,
    ) -> None:
        self.projects_root = Path(projects_root).expanduser()
        self.templates_dir = templates_dir
        self.freshness_days = freshness_days
        self.index = ProjectIndex(self.projects_root / INDEX_FILENAME)
        self.scanner = scanner or RepoScanner()
        self.detector = GapDetector(freshness_days=freshness_days)
        self.stamp = FreshnessStamp()
        self.structure_checker = MarkdownStructureChecker()
        self._env = env or create_environment()
        self.logger = get_logger("scaffold")

    def project_path(self, project_name: str) -> Path:
        return self.projects_root / validate_project_name(project_name)

    def load_template_set(self, name: str) -> TemplateSet:
        search = [self.templates_dir] if self.templates_dir else []
        return load_template_set(name, search)

    # ------------------------------------------------------------------
    # init

    def init(
        self,
        project_name: str,
        template_set: str = DEFAULT_TEMPLATE_SET,
        *,
        now: datetime | None = None,
    ) -> ProjectManifest:
        """Create the documentation skeleton for a new project."""
        name = validate_project_name(project_name)
        target = self.projects_root / name
        if target.exists():
            raise ProjectExistsError(f"Project documentation already exists: {target}")

        layout = self.load_template_set(template_set)
        moment = now or datetime.now(UTC)
        self.logger.info("Initializing documentation for %s using template set %s", name, layout.name)

        self.projects_root.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=f".{slugify(name) or 'project'}-", dir=self.projects_root))
        try:
            created = self._materialize(staging, layout, name, moment)
            manifest = ProjectManifest(
                name=name,
                created_at=moment,
                required_docs=list(layout.required),
                index_entry=self.index.format_entry(name, moment.date()),
                path=target,
                created_files=created,
            )
            self._write_project_report(staging, manifest, layout)
            manifest.created_files.append(PROJECT_REPORT_FILENAME)
            self._write_metadata(staging, name, layout, moment)
            os.chmod(staging, 0o755)
            if target.exists():
                raise ProjectExistsError(f"Project documentation already exists: {target}")
            os.rename(staging, target)
        except BaseException:
            shutil.rmtree(staging, ignore_errors=True)
            raise

        try:
            manifest.index_entry = self.index.append(name, moment.date())
        except OSError:
            shutil.rmtree(target, ignore_errors=True)
            raise
        manifest.report_path = target / PROJECT_REPORT_FILENAME
        self.logger.info("Added %s to %s", name, self.index.path)
        return manifest

    def _materialize(
        self, staging: Path, layout: TemplateSet, name: str, moment: datetime
    ) -> List[str]:
        for directory in layout.directories:
            (staging / directory).mkdir(parents=True, exist_ok=True)

        created: List[str] = []
        for destination, template_name in layout.files.items():
            content = substitute_placeholders(layout.read_template(template_name), name, moment.date())
            path = staging / destination
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
            created.append(destination)
            self.logger.debug("Created %s", destination)
        return created

    def _write_project_report(
        self, staging: Path, manifest: ProjectManifest, layout: TemplateSet
    ) -> None:
        template = self._env.get_template("project_report.md.j2")
        content = template.render(
            manifest=manifest,
            template_set=layout.name,
            checklist=layout.checklist,
        )
        (staging / PROJECT_REPORT_FILENAME).write_text(content, encoding="utf-8")

    def _write_metadata(
        self, staging: Path, name: str, layout: TemplateSet, moment: datetime
    ) -> None:
        path = staging / METADATA_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"name": name, "template_set": layout.name, "created_at": moment.isoformat()}
        path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")

    def _layout_for(self, project_dir: Path) -> TemplateSet:
        try:
            payload = json.loads((project_dir / METADATA_PATH).read_text(encoding="utf-8"))
        except (OSError, ValueError):
            payload = {}
        name = payload.get("template_set") if isinstance(payload, dict) else None
        return self.load_template_set(name if isinstance(name, str) and name else DEFAULT_TEMPLATE_SET)

    # ------------------------------------------------------------------
    # refresh

    def refresh(
        self,
        project_name: str,
        scope: str = "all",
        *,
        now: datetime | None = None,
    ) -> UpdateSummary:
        """Re-validate a project and regenerate stamps on outdated documents.

        Besides the ``> Last Updated:`` stamps of outdated in-scope documents,
        tracked files are left untouched; every other change is proposed in
        the update report and the generated apply script.
        """
        name = validate_project_name(project_name)
        target = self.projects_root / name
        if not target.is_dir():
            raise ProjectNotFoundError(
                f"Project documentation not found: {target}. "
                f"Run `docmaster init {name}` to initialize documentation."
            )
        scope = scope.lower()
        if scope not in REFRESH_SCOPES:
            raise ValueError(f"Unknown scope '{scope}'. Choose one of: {', '.join(REFRESH_SCOPES)}")

        layout = self._layout_for(target)
        moment = now or datetime.now(UTC)
        today = moment.date()
        self.logger.info("Updating documentation for %s (scope: %s)", name, scope)

        scan = self.scanner.scan(target, sample_cap=0)
        files: Dict[str, DiscoveredFile] = {file.path: file for file in scan.files}
        in_scope = layout.docs_for_scope(scope)
        present = [path for path in in_scope if path in files]

        summary = UpdateSummary(project=name, scope=scope)
        summary.checked_files = [file.path for file in scan.files if file.category in DOCUMENT_CATEGORIES]

        outdated = self.detector.outdated([files[path] for path in present], present, now=moment)
        summary.outdated = [str(gap.subject_path) for gap in outdated]
        for path in summary.outdated:
            try:
                restamped = self._restamp(target / path, today)
            except UnicodeDecodeError:
                self.logger.warning("%s is not UTF-8; freshness stamp not refreshed", path)
                summary.structure_issues.append(f"{path}: not UTF-8, stamp not refreshed")
                continue
            if restamped:
                summary.stamped.append(path)
                self.logger.info("Refreshed freshness stamp on %s", path)

        for path in present:
            text = (target / path).read_text(encoding="utf-8", errors="replace")
            summary.structure_issues.extend(self.structure_checker.issues(text, path))

        if scope in ("all", "api"):
            summary.api_spec_found = any(
                (target / "api" / candidate).is_file() for candidate in API_SPEC_CANDIDATES
            )

        summary.missing = [path for path in layout.required if not (target / path).is_file()]
        for path in summary.missing:
            self.logger.info("Missing: %s", path)

        docs = [file for file in scan.files if file.category in DOCUMENT_CATEGORIES]
        summary.broken_links = LinkValidator(target).validate(docs)

        for file in docs:
            text = (target / file.path).read_text(encoding="utf-8", errors="replace")
            summary.proposed_edits.extend(self.stamp.propose(file.path, text, today))

        summary.action_items = self._action_items(summary)
        summary.script_path = self._write_update_script(target, name, summary)
        summary.report_path = self._write_update_report(target, summary, moment)
        self.logger.info(
            "Update check complete: %d missing, %d outdated, %d broken link(s)",
            len(summary.missing),
            len(summary.outdated),
            len(summary.broken_links),
        )
        return summary

    def _restamp(self, path: Path, day) -> bool:
        text = path.read_text(encoding="utf-8")
        updated = self.stamp.apply(text, day)
        if updated == text:
            # Content unchanged, but the document must still leave the stale state.
            os.utime(path)
            return False
        path.write_text(updated, encoding="utf-8")
        return True

    @staticmethod
    def _action_items(summary: UpdateSummary) -> List[str]:
        items: List[str] = []
        if summary.missing:
            items.append("Create missing documentation files")
        if summary.broken_links:
            items.append("Fix broken links")
        if summary.outdated:
            items.append("Update outdated documentation")
        if summary.structure_issues:
            items.append("Add missing H1 headers and 'Last Updated' stamps")
        if summary.api_spec_found is False:
            items.append("Add an API specification next to api/API.md")
        items.extend(
            [
                "Review and update project-specific content",
                "Add examples and code snippets where missing",
                "Verify all information is current",
            ]
        )
        return items

    def _write_update_script(self, target: Path, name: str, summary: UpdateSummary) -> Path:
        template = self._env.get_template("apply_updates.sh.j2")
        content = template.render(project=name, edits=summary.proposed_edits)
        path = target / UPDATE_SCRIPT_FILENAME
        path.write_text(content, encoding="utf-8")
        path.chmod(0o755)
        return path

    def _write_update_report(self, target: Path, summary: UpdateSummary, moment: datetime) -> Path:
        template = self._env.get_template("update_report.md.j2")
        content = template.render(
            summary=summary,
            now=moment,
            freshness_days=self.freshness_days,
            script_name=UPDATE_SCRIPT_FILENAME,
        )
        return write_artifact(target, "update-report", ".md", content, moment=moment)

    # ------------------------------------------------------------------
    # state

    def state(self, project_name: str, *, now: datetime | None = None) -> ProjectState:
        target = self.project_path(project_name)
        if not target.is_dir():
            return ProjectState.NOT_INITIALIZED
        layout = self._layout_for(target)
        scan = self.scanner.scan(target, sample_cap=0)
        files = {file.path: file for file in scan.files}
        present = [path for path in layout.required if path in files]
        outdated = self.detector.outdated([files[path] for path in present], present, now=now)
        return ProjectState.STALE if outdated else ProjectState.FRESH


__all__ = [
    "DEFAULT_TEMPLATE_SET",
    "ProjectExistsError",
    "ProjectNotFoundError",
    "REFRESH_SCOPES",
    "Scaffolder",
    "validate_project_name",
]
