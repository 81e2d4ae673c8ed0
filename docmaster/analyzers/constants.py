"""Shared defaults for classification, coverage and gap detection."""

from __future__ import annotations

from ..models import RequiredDoc

DEFAULT_SAMPLE_CAP = 100
DEFAULT_FRESHNESS_DAYS = 30

LANGUAGE_BY_SUFFIX: dict[str, str] = {
    ".py": "Python",
    ".pyi": "Python",
    ".js": "JavaScript",
    ".jsx": "JavaScript",
    ".mjs": "JavaScript",
    ".cjs": "JavaScript",
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    ".java": "Java",
    ".kt": "Kotlin",
    ".kts": "Kotlin",
    ".go": "Go",
    ".rs": "Rust",
    ".rb": "Ruby",
    ".php": "PHP",
    ".cs": "C#",
    ".c": "C",
    ".h": "C",
    ".cpp": "C++",
    ".hpp": "C++",
    ".cc": "C++",
    ".hh": "C++",
    ".swift": "Swift",
    ".m": "Objective-C",
    ".mm": "Objective-C++",
    ".scala": "Scala",
    ".r": "R",
    ".jl": "Julia",
    ".sh": "Shell",
    ".ps1": "PowerShell",
}

DEFAULT_SOURCE_EXTENSIONS: tuple[str, ...] = tuple(LANGUAGE_BY_SUFFIX)

API_SPEC_FILENAMES = frozenset(
    {"openapi.yaml", "openapi.yml", "swagger.json", "swagger.yaml"}
)
API_SPEC_SUFFIXES = frozenset({".graphql", ".gql"})

DEFAULT_DOC_DIRECTORIES: tuple[str, ...] = (
    "docs",
    "documentation",
    "doc",
    "api-docs",
    "guides",
)

DEFAULT_REQUIRED_DOCS: tuple[RequiredDoc, ...] = (
    RequiredDoc("README.md", ("readme*", "*.readme"), root_only=True),
    RequiredDoc("ARCHITECTURE.md", ("architecture*",)),
    RequiredDoc("API.md", ("api.md", "api-reference*", "api_reference*")),
    RequiredDoc("CONTRIBUTING.md", ("contributing*",)),
    RequiredDoc("CHANGELOG.md", ("changelog*", "history*")),
)


__all__ = [
    "API_SPEC_FILENAMES",
    "API_SPEC_SUFFIXES",
    "DEFAULT_DOC_DIRECTORIES",
    "DEFAULT_FRESHNESS_DAYS",
    "DEFAULT_REQUIRED_DOCS",
    "DEFAULT_SAMPLE_CAP",
    "DEFAULT_SOURCE_EXTENSIONS",
    "LANGUAGE_BY_SUFFIX",
]
