"""Tests for docmaster.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from docmaster.analyzers.constants import DEFAULT_REQUIRED_DOCS, DEFAULT_SOURCE_EXTENSIONS
from docmaster.config import PROJECTS_ROOT_ENV, ConfigError, DocMasterConfig, load_config
from docmaster.models import RequiredDoc


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path, environ={})

    assert isinstance(config, DocMasterConfig)
    assert config.root == tmp_path.resolve()
    assert config.discovery.sample_cap == 100
    assert config.discovery.freshness_days == 30
    assert config.discovery.source_extensions == list(DEFAULT_SOURCE_EXTENSIONS)
    assert config.discovery.required_docs == list(DEFAULT_REQUIRED_DOCS)
    assert config.discovery.exclude_paths == []
    assert config.discovery.respect_gitignore is False
    assert config.discovery.report_dir is None
    assert config.discovery.report_format == "markdown"
    assert config.scaffold.projects_root == tmp_path.resolve() / "projects"
    assert config.scaffold.templates_dir is None
    assert config.scaffold.template_set == "standard"


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".docmaster.yml"
    config_file.write_text(
        """
discovery:
  sample_cap: 10
  freshness_days: 14
  source_extensions: [py, ".go"]
  doc_directories: [docs, wiki]
  required_docs:
    - README.md
    - name: SECURITY.md
      patterns: ["security*"]
      root_only: "yes"
  exclude_paths:
    - "vendor/"
  respect_gitignore: true
  report_dir: reports
  report_format: JSON
scaffold:
  projects_root: docs/projects
  templates_dir: doc-templates
  template_set: minimal
  freshness_days: 7
""",
        encoding="utf-8",
    )

    config = load_config(config_file, environ={})
    root = tmp_path.resolve()

    assert config.discovery.sample_cap == 10
    assert config.discovery.freshness_days == 14
    assert config.discovery.source_extensions == ["py", ".go"]
    assert config.discovery.doc_directories == ["docs", "wiki"]
    assert config.discovery.required_docs == [
        RequiredDoc("README.md", ("README.md",)),
        RequiredDoc("SECURITY.md", ("security*",), root_only=True),
    ]
    assert config.discovery.exclude_paths == ["vendor/"]
    assert config.discovery.respect_gitignore is True
    assert config.discovery.report_dir == root / "reports"
    assert config.discovery.report_format == "json"
    assert config.scaffold.projects_root == root / "docs" / "projects"
    assert config.scaffold.templates_dir == root / "doc-templates"
    assert config.scaffold.template_set == "minimal"
    assert config.scaffold.freshness_days == 7


def test_environment_overrides_projects_root(tmp_path: Path) -> None:
    (tmp_path / ".docmaster.yml").write_text("scaffold:\n  projects_root: here\n", encoding="utf-8")
    override = tmp_path / "elsewhere"

    config = load_config(tmp_path, environ={PROJECTS_ROOT_ENV: str(override)})

    assert config.scaffold.projects_root == override


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".docmaster.yml").write_text("\n", encoding="utf-8")
    assert load_config(tmp_path, environ={}).discovery.sample_cap == 100


@pytest.mark.parametrize(
    "content",
    [
        "discovery: [unclosed\n",
        "- just\n- a list\n",
        "discovery:\n  sample_cap: -1\n",
        "discovery:\n  freshness_days: 0\n",
        "discovery:\n  report_format: html\n",
        "discovery:\n  required_docs: README.md\n",
        "discovery:\n  required_docs:\n    - patterns: [x]\n",
    ],
)
def test_invalid_config_raises(tmp_path: Path, content: str) -> None:
    (tmp_path / ".docmaster.yml").write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path, environ={})
