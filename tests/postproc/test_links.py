"""Tests for docmaster.postproc.links."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from docmaster.models import DiscoveredFile, FileCategory, LinkFailure
from docmaster.postproc.links import LinkValidator, extract_link_targets
from tests._fixtures.repo_builder import RepoBuilder


def _doc(path: str, category: FileCategory = FileCategory.MARKDOWN_DOC) -> DiscoveredFile:
    return DiscoveredFile(
        path=path,
        category=category,
        language_family=None,
        size_lines=1,
        modified_at=datetime(2024, 1, 1, tzinfo=UTC),
    )


def test_missing_file_yields_one_file_not_found(tmp_path: Path) -> None:
    issues = LinkValidator(tmp_path).find_broken_targets("[x](./missing.md)\n", tmp_path)
    assert issues == [("./missing.md", LinkFailure.FILE_NOT_FOUND)]


def test_absolute_urls_are_skipped(tmp_path: Path) -> None:
    markdown = "[x](https://example.com) [m](mailto:team@example.com) [p](//cdn.example.com/x.js)\n"
    assert LinkValidator(tmp_path).find_broken_targets(markdown, tmp_path) == []


def test_directory_like_targets(tmp_path: Path) -> None:
    (tmp_path / "present").mkdir()
    markdown = "[a](./present/) [b](./absent/) [c](absent-dir)\n"
    issues = LinkValidator(tmp_path).find_broken_targets(markdown, tmp_path)
    assert issues == [
        ("./absent/", LinkFailure.DIR_NOT_FOUND),
        ("absent-dir", LinkFailure.DIR_NOT_FOUND),
    ]


def test_fragments_queries_and_titles_are_stripped(tmp_path: Path) -> None:
    (tmp_path / "guide.md").write_text("# Guide\n", encoding="utf-8")
    (tmp_path / "my file.md").write_text("# Spaced\n", encoding="utf-8")
    markdown = (
        "[a](guide.md#setup) [b](guide.md?plain=1) [c](guide.md \"Guide\") "
        "[d](#local-anchor) [e](my%20file.md) [f](<my file.md>)\n"
    )
    assert LinkValidator(tmp_path).find_broken_targets(markdown, tmp_path) == []


def test_links_inside_code_fences_are_ignored() -> None:
    markdown = "```\n[x](./missing.md)\n```\n[y](./other.md)\n"
    assert extract_link_targets(markdown) == ["./other.md"]


def test_links_inside_inline_code_are_ignored(tmp_path: Path) -> None:
    markdown = "Write `[label](target)` and ``[a](`b`)`` or see [real](./other.md)\n"
    assert extract_link_targets(markdown) == ["./other.md"]

    example = "Link syntax is `[label](target)`.\n"
    assert LinkValidator(tmp_path).find_broken_targets(example, tmp_path) == []


def test_validate_resolves_relative_to_document(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "README.md": "[guide](docs/guide.md) [root](/CONTRIBUTING.md)\n",
            "docs/guide.md": "[back](../README.md) [sibling](./api.md) [root](/docs/guide.md)\n",
            "src/notes.txt": "[ignored](./missing.md)\n",
        }
    )
    docs = [
        _doc("README.md", FileCategory.README),
        _doc("docs/guide.md"),
        _doc("src/notes.txt", FileCategory.OTHER),
    ]

    broken = LinkValidator(repo_builder.path()).validate(docs)

    assert [(link.source_doc, link.target_reference, link.reason) for link in broken] == [
        ("README.md", "/CONTRIBUTING.md", LinkFailure.FILE_NOT_FOUND),
        ("docs/guide.md", "./api.md", LinkFailure.FILE_NOT_FOUND),
    ]
