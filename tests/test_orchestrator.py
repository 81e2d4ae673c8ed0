"""Tests for docmaster.orchestrator."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from docmaster.models import FileCategory, GapKind, LinkFailure, ProjectState
from docmaster.orchestrator import Orchestrator
from docmaster.scaffold import ProjectExistsError, ProjectNotFoundError
from tests._fixtures.repo_builder import RepoBuilder

NOW = datetime(2024, 6, 1, 8, 0, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DOCMASTER_PROJECTS_ROOT", raising=False)


def test_discovery_scenario(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "README.md": """
            # Demo

            ## Usage

            See [the guide](./nope.md).
            """,
            # 2 of 5 lines are comments
            "src/a.py": "# one\n# two\nx = 1\ny = 2\nz = 3\n",
        }
    )

    outcome = Orchestrator().run_discover(repo_builder.path(), now=NOW)
    report = outcome.report

    assert report.category_counts[FileCategory.README.value] == 1
    assert report.category_counts[FileCategory.SOURCE_CODE.value] == 1
    assert report.category_counts[FileCategory.API_SPEC.value] == 0
    assert len(report.gaps_of(GapKind.NO_DOC_DIRECTORY)) == 1
    assert len(report.gaps_of(GapKind.NO_API_SPEC)) == 1
    assert len(report.broken_links) == 1
    assert report.broken_links[0].reason is LinkFailure.FILE_NOT_FOUND
    assert report.broken_links[0].source_doc == "README.md"
    assert report.coverage_samples[0].coverage_percent == 40
    assert report.files_in(FileCategory.README)[0].well_structured is True

    assert outcome.path.parent == repo_builder.path().resolve()
    assert outcome.path.name == "discovery-report-20240601-080000.md"
    content = outcome.path.read_text(encoding="utf-8")
    assert "- README.md: `./nope.md` (file not found)" in content


def test_rerun_keeps_previous_report(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"README.md": "# Demo\n"})
    orchestrator = Orchestrator()

    first = orchestrator.run_discover(repo_builder.path(), now=NOW)
    second = orchestrator.run_discover(repo_builder.path(), now=NOW)

    assert first.path != second.path
    assert first.path.exists()
    assert [file.path for file in first.report.files] == [file.path for file in second.report.files]


def test_discover_honours_config_and_overrides(repo_builder: RepoBuilder, tmp_path: Path) -> None:
    repo_builder.write(
        {
            ".docmaster.yml": "discovery:\n  sample_cap: 1\n  report_format: json\n  report_dir: out\n",
            "src/a.py": "x = 1\n",
            "src/b.py": "y = 2\n",
        }
    )
    orchestrator = Orchestrator()

    outcome = orchestrator.run_discover(repo_builder.path(), now=NOW)
    assert len(outcome.report.coverage_samples) == 1
    assert outcome.path.parent == repo_builder.path().resolve() / "out"
    payload = json.loads(outcome.path.read_text(encoding="utf-8"))
    assert payload["summary"]["files_total"] == 3

    override_dir = tmp_path / "reports"
    outcome = orchestrator.run_discover(
        repo_builder.path(), sample_cap=0, fmt="markdown", output_dir=override_dir, now=NOW
    )
    assert outcome.report.coverage_samples == []
    assert outcome.path.parent == override_dir
    assert outcome.path.suffix == ".md"


def test_discover_tracks_outdated_documents(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"README.md": "# Demo\n", "docs/old.md": "# Old\n", "src/a.py": "x = 1\n"})
    repo_builder.age("docs/old.md", 60)
    repo_builder.age("src/a.py", 60)

    outcome = Orchestrator().run_discover(repo_builder.path(), freshness_days=30)

    outdated = outcome.report.gaps_of(GapKind.OUTDATED)
    assert [gap.subject_path for gap in outdated] == ["docs/old.md"]
    assert any("not updated in the last 30 days" in item for item in outcome.report.recommendations)


def test_discover_rejects_bad_arguments(repo_builder: RepoBuilder) -> None:
    orchestrator = Orchestrator()
    with pytest.raises(ValueError):
        orchestrator.run_discover(repo_builder.path(), sample_cap=-1)
    with pytest.raises(ValueError):
        orchestrator.run_discover(repo_builder.path(), fmt="html")
    with pytest.raises(FileNotFoundError):
        orchestrator.run_discover(repo_builder.path() / "missing")


def test_scaffolding_commands_share_projects_root(tmp_path: Path) -> None:
    orchestrator = Orchestrator(projects_root=tmp_path / "projects")

    assert orchestrator.project_status("demo") is ProjectState.NOT_INITIALIZED
    manifest = orchestrator.run_init("demo")
    assert manifest.path == tmp_path / "projects" / "demo"
    assert orchestrator.project_status("demo") is ProjectState.FRESH

    with pytest.raises(ProjectExistsError):
        orchestrator.run_init("demo")

    summary = orchestrator.run_update("demo", "architecture")
    assert summary.scope == "architecture"
    assert summary.missing == []

    with pytest.raises(ProjectNotFoundError):
        orchestrator.run_update("other")


def test_discover_ignores_generated_update_script(tmp_path: Path) -> None:
    projects_root = tmp_path / "projects"
    orchestrator = Orchestrator(projects_root=projects_root)
    orchestrator.run_init("demo")
    summary = orchestrator.run_update("demo")
    assert summary.script_path is not None and summary.script_path.exists()

    report = orchestrator.run_discover(projects_root, now=NOW).report

    paths = [file.path for file in report.files]
    assert not any(path.endswith("apply-updates.sh") for path in paths)
    assert report.files_in(FileCategory.SOURCE_CODE) == []
    assert report.gaps_of(GapKind.NO_API_SPEC) == []


def test_projects_root_defaults_to_config_in_cwd(tmp_path: Path) -> None:
    (tmp_path / ".docmaster.yml").write_text("scaffold:\n  projects_root: team-docs\n", encoding="utf-8")

    manifest = Orchestrator().run_init("demo")

    assert manifest.path == tmp_path.resolve() / "team-docs" / "demo"
    assert (tmp_path / "team-docs" / "INDEX.md").exists()
