"""Path classification into documentation categories."""

from __future__ import annotations

from fnmatch import fnmatchcase
from pathlib import PurePosixPath
from typing import Iterable, Optional

from ..models import FileCategory
from .constants import (
    API_SPEC_FILENAMES,
    API_SPEC_SUFFIXES,
    DEFAULT_SOURCE_EXTENSIONS,
    LANGUAGE_BY_SUFFIX,
)

_TEST_NAME_PATTERNS = ("*.test.*", "*.spec.*", "test_*")


class PathClassifier:
    """Decides which documentation category a file path belongs to.

    Classification only looks at the file name. When several rules match, the
    first of Readme, ApiSpec, TestFile, MarkdownDoc, SourceCode wins.
    """

    def __init__(self, source_extensions: Iterable[str] | None = None) -> None:
        extensions = source_extensions if source_extensions is not None else DEFAULT_SOURCE_EXTENSIONS
        self.source_extensions = frozenset(_normalise_extension(ext) for ext in extensions)

    def classify(self, path: str, extension: str | None = None) -> FileCategory:
        name = PurePosixPath(path.replace("\\", "/")).name.lower()
        suffix = _normalise_extension(extension) if extension is not None else _suffix(name)

        if name.startswith("readme") or name.endswith(".readme"):
            return FileCategory.README
        if name in API_SPEC_FILENAMES or suffix in API_SPEC_SUFFIXES:
            return FileCategory.API_SPEC
        if any(fnmatchcase(name, pattern) for pattern in _TEST_NAME_PATTERNS):
            return FileCategory.TEST_FILE
        if suffix == ".md":
            return FileCategory.MARKDOWN_DOC
        if suffix in self.source_extensions:
            return FileCategory.SOURCE_CODE
        return FileCategory.OTHER

    def language_family(self, path: str) -> Optional[str]:
        """Return the language family for source extensions, else None."""
        suffix = _suffix(PurePosixPath(path.replace("\\", "/")).name.lower())
        if suffix not in self.source_extensions:
            return None
        return LANGUAGE_BY_SUFFIX.get(suffix)


def _suffix(name: str) -> str:
    return PurePosixPath(name).suffix.lower()


def _normalise_extension(extension: str) -> str:
    extension = extension.strip().lower()
    if extension and not extension.startswith("."):
        extension = f".{extension}"
    return extension


__all__ = ["PathClassifier"]
