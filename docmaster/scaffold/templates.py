"""Template set discovery and placeholder substitution."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, List, Sequence

import yaml

BUILTIN_SETS_DIR = Path(__file__).with_name("sets")
LAYOUT_FILENAME = "layout.yml"

_PLACEHOLDER_PATTERN = re.compile(r"\{Project Name\}|\{project-name\}|\{DATE\}")


class TemplateSetNotFoundError(FileNotFoundError):
    """Raised when no directory provides the requested template set."""


class TemplateSetError(ValueError):
    """Raised when a template set layout is malformed."""


@dataclass
class TemplateSet:
    """Directory skeleton and template files making up a documentation set."""

    name: str
    directory: Path
    directories: List[str] = field(default_factory=list)
    files: Dict[str, str] = field(default_factory=dict)
    required: List[str] = field(default_factory=list)
    scopes: Dict[str, List[str]] = field(default_factory=dict)
    checklist: List[str] = field(default_factory=list)

    def read_template(self, template_name: str) -> str:
        return (self.directory / template_name).read_text(encoding="utf-8")

    def docs_for_scope(self, scope: str) -> List[str]:
        if scope == "all":
            ordered: List[str] = list(self.required)
            for paths in self.scopes.values():
                ordered.extend(path for path in paths if path not in ordered)
            return ordered
        return list(self.scopes.get(scope, []))


def slugify(name: str) -> str:
    """Lowercase-hyphenated variant of a project name."""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def substitute_placeholders(text: str, project_name: str, day: date) -> str:
    """Replace every placeholder in a single pass over ``text``."""
    values = {
        "{Project Name}": project_name,
        "{project-name}": slugify(project_name),
        "{DATE}": day.isoformat(),
    }
    return _PLACEHOLDER_PATTERN.sub(lambda match: values[match.group(0)], text)


def load_template_set(name: str, search_dirs: Iterable[Path] | None = None) -> TemplateSet:
    """Load ``name`` from the first search directory that provides it."""
    directories = [Path(directory) for directory in (search_dirs or [])]
    directories.append(BUILTIN_SETS_DIR)
    for base in directories:
        layout_path = base / name / LAYOUT_FILENAME
        if layout_path.is_file():
            return _parse_layout(name, layout_path)
    searched = ", ".join(str(directory) for directory in directories)
    raise TemplateSetNotFoundError(f"Template set '{name}' not found (searched {searched})")


def _parse_layout(name: str, layout_path: Path) -> TemplateSet:
    try:
        data = yaml.safe_load(layout_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise TemplateSetError(f"Failed to parse {layout_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TemplateSetError(f"{layout_path} must contain a mapping")

    directory = layout_path.parent
    files = data.get("files") or {}
    if not isinstance(files, dict):
        raise TemplateSetError(f"{layout_path}: 'files' must be a mapping")

    template_set = TemplateSet(
        name=name,
        directory=directory,
        directories=[_safe_relative(item, layout_path) for item in _as_list(data.get("directories"))],
        files={
            _safe_relative(destination, layout_path): str(template)
            for destination, template in files.items()
        },
        required=[_safe_relative(item, layout_path) for item in _as_list(data.get("required"))],
        checklist=[str(item) for item in _as_list(data.get("checklist"))],
    )
    scopes = data.get("scopes") or {}
    if not isinstance(scopes, dict):
        raise TemplateSetError(f"{layout_path}: 'scopes' must be a mapping")
    template_set.scopes = {
        str(scope): [_safe_relative(item, layout_path) for item in _as_list(paths)]
        for scope, paths in scopes.items()
    }

    for template in template_set.files.values():
        if not (directory / template).is_file():
            raise TemplateSetError(f"{layout_path}: template file {template} is missing")
    return template_set


def _as_list(value: object) -> Sequence[object]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return value
    return [value]


def _safe_relative(value: object, layout_path: Path) -> str:
    pure = PurePosixPath(str(value))
    if pure.is_absolute() or ".." in pure.parts or not pure.parts:
        raise TemplateSetError(f"{layout_path}: invalid path {value!r}")
    return pure.as_posix()


__all__ = [
    "BUILTIN_SETS_DIR",
    "TemplateSet",
    "TemplateSetError",
    "TemplateSetNotFoundError",
    "load_template_set",
    "slugify",
    "substitute_placeholders",
]
