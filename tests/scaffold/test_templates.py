"""Tests for template sets, placeholder substitution and the project index."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from docmaster.scaffold import (
    ProjectIndex,
    TemplateSetError,
    TemplateSetNotFoundError,
    load_template_set,
    slugify,
    substitute_placeholders,
)

DAY = date(2024, 6, 1)


def test_slugify() -> None:
    assert slugify("My Cool_Project v2") == "my-cool-project-v2"
    assert slugify("  Already-slugged  ") == "already-slugged"


def test_substitution_is_single_pass() -> None:
    text = "# {Project Name}\nslug: {project-name}\ndate: {DATE}\n"
    result = substitute_placeholders(text, "{DATE} Tracker", DAY)
    assert result == "# {DATE} Tracker\nslug: date-tracker\ndate: 2024-06-01\n"


def test_builtin_standard_set() -> None:
    layout = load_template_set("standard")
    assert layout.directories == ["architecture", "api", "decisions", "guides", "diagrams"]
    assert "decisions/ADR-001-documentation-structure.md" in layout.files
    assert layout.files[".gitignore"] == "gitignore"
    assert layout.docs_for_scope("api") == ["api/API.md"]
    assert layout.docs_for_scope("guides") == ["CONTRIBUTING.md", "DEVELOPMENT.md", "DEPLOYMENT.md"]
    assert layout.docs_for_scope("all") == layout.required
    assert "Last Updated: {DATE}" in layout.read_template("README.md")


def test_unknown_set_raises(tmp_path: Path) -> None:
    with pytest.raises(TemplateSetNotFoundError):
        load_template_set("missing", [tmp_path])


@pytest.mark.parametrize(
    "layout",
    [
        "- not a mapping\n",
        "files: [README.md]\n",
        "files:\n  ../escape.md: README.md\n",
        "files:\n  README.md: absent.md\n",
        "files: {unclosed\n",
    ],
)
def test_malformed_layouts_raise(tmp_path: Path, layout: str) -> None:
    directory = tmp_path / "broken"
    directory.mkdir()
    (directory / "README.md").write_text("# {Project Name}\n", encoding="utf-8")
    (directory / "layout.yml").write_text(layout, encoding="utf-8")
    with pytest.raises(TemplateSetError):
        load_template_set("broken", [tmp_path])


def test_index_is_append_only(tmp_path: Path) -> None:
    index = ProjectIndex(tmp_path / "INDEX.md")
    assert index.entries() == []

    index.append("alpha", DAY)
    before = index.path.read_text(encoding="utf-8")
    index.append("beta project", DAY)
    after = index.path.read_text(encoding="utf-8")

    assert after.startswith(before)
    assert after.endswith("- [beta project](./beta%20project/README.md) - 2024-06-01\n")
    entries = index.entries()
    assert [entry.name for entry in entries] == ["alpha", "beta project"]
    assert entries[1].readme == "beta project/README.md"
    assert entries[1].created_on == DAY
