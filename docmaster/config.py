"""Configuration loading for docmaster (.docmaster.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .analyzers.constants import (
    DEFAULT_DOC_DIRECTORIES,
    DEFAULT_FRESHNESS_DAYS,
    DEFAULT_REQUIRED_DOCS,
    DEFAULT_SAMPLE_CAP,
    DEFAULT_SOURCE_EXTENSIONS,
)
from .models import RequiredDoc

CONFIG_FILENAME = ".docmaster.yml"
PROJECTS_ROOT_ENV = "DOCMASTER_PROJECTS_ROOT"
REPORT_FORMATS = ("markdown", "json")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class DiscoveryConfig:
    """Settings for the discovery pass."""

    sample_cap: int = DEFAULT_SAMPLE_CAP
    freshness_days: int = DEFAULT_FRESHNESS_DAYS
    source_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_SOURCE_EXTENSIONS))
    doc_directories: List[str] = field(default_factory=lambda: list(DEFAULT_DOC_DIRECTORIES))
    required_docs: List[RequiredDoc] = field(default_factory=lambda: list(DEFAULT_REQUIRED_DOCS))
    exclude_paths: List[str] = field(default_factory=list)
    respect_gitignore: bool = False
    report_dir: Optional[Path] = None
    report_format: str = "markdown"


@dataclass
class ScaffoldConfig:
    """Settings for project scaffolding and refresh."""

    projects_root: Path = field(default_factory=lambda: Path("projects"))
    templates_dir: Optional[Path] = None
    template_set: str = "standard"
    freshness_days: int = DEFAULT_FRESHNESS_DAYS


@dataclass
class DocMasterConfig:
    """Represents the settings defined in .docmaster.yml."""

    root: Path
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    scaffold: ScaffoldConfig = field(default_factory=ScaffoldConfig)


def load_config(config_path: Path, *, environ: Mapping[str, str] | None = None) -> DocMasterConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()
    env = os.environ if environ is None else environ

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)

    config = DocMasterConfig(
        root=root,
        discovery=_parse_discovery(_as_dict(data.get("discovery")), root),
        scaffold=_parse_scaffold(_as_dict(data.get("scaffold")), root),
    )

    env_root = env.get(PROJECTS_ROOT_ENV)
    if env_root:
        config.scaffold.projects_root = Path(env_root).expanduser()
    return config


def _parse_discovery(data: Dict[str, Any], root: Path) -> DiscoveryConfig:
    discovery = DiscoveryConfig()
    if not data:
        return discovery

    sample_cap = _as_int(data.get("sample_cap"))
    if sample_cap is not None:
        if sample_cap < 0:
            raise ConfigError("discovery.sample_cap must be zero or positive")
        discovery.sample_cap = sample_cap

    freshness = _as_int(data.get("freshness_days"))
    if freshness is not None:
        discovery.freshness_days = _validate_freshness(freshness, "discovery.freshness_days")

    if "source_extensions" in data:
        discovery.source_extensions = _as_str_list(data.get("source_extensions"))
    if "doc_directories" in data:
        discovery.doc_directories = _as_str_list(data.get("doc_directories"))
    if "required_docs" in data:
        discovery.required_docs = _parse_required_docs(data.get("required_docs"))

    discovery.exclude_paths = _as_str_list(data.get("exclude_paths"))
    discovery.respect_gitignore = bool(_as_bool(data.get("respect_gitignore")))

    report_dir = _as_str(data.get("report_dir"))
    if report_dir:
        discovery.report_dir = root / report_dir

    report_format = _as_str(data.get("report_format"))
    if report_format:
        report_format = report_format.lower()
        if report_format not in REPORT_FORMATS:
            raise ConfigError(
                f"discovery.report_format must be one of {', '.join(REPORT_FORMATS)}"
            )
        discovery.report_format = report_format
    return discovery


def _parse_scaffold(data: Dict[str, Any], root: Path) -> ScaffoldConfig:
    scaffold = ScaffoldConfig(projects_root=root / "projects")
    if not data:
        return scaffold

    projects_root = _as_str(data.get("projects_root"))
    if projects_root:
        scaffold.projects_root = root / projects_root

    templates_dir = _as_str(data.get("templates_dir"))
    if templates_dir:
        scaffold.templates_dir = root / templates_dir

    template_set = _as_str(data.get("template_set"))
    if template_set:
        scaffold.template_set = template_set

    freshness = _as_int(data.get("freshness_days"))
    if freshness is not None:
        scaffold.freshness_days = _validate_freshness(freshness, "scaffold.freshness_days")
    return scaffold


def _parse_required_docs(value: Any) -> List[RequiredDoc]:
    """Accept either a list of names or a list of ``{name, patterns, root_only}``."""
    if value is None:
        return []
    if not isinstance(value, Sequence) or isinstance(value, str):
        raise ConfigError("discovery.required_docs must be a list")

    required: List[RequiredDoc] = []
    for item in value:
        if isinstance(item, str):
            required.append(RequiredDoc(name=item, patterns=(item,)))
            continue
        entry = _as_dict(item)
        name = _as_str(entry.get("name"))
        if not name:
            raise ConfigError("Each discovery.required_docs entry needs a name")
        patterns = _as_str_list(entry.get("patterns")) or [name]
        required.append(
            RequiredDoc(
                name=name,
                patterns=tuple(patterns),
                root_only=bool(_as_bool(entry.get("root_only"))),
            )
        )
    return required


def _validate_freshness(value: int, key: str) -> int:
    if value < 1:
        raise ConfigError(f"{key} must be at least 1")
    return value


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix not in {".yml", ".yaml"}:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DiscoveryConfig",
    "DocMasterConfig",
    "PROJECTS_ROOT_ENV",
    "REPORT_FORMATS",
    "ScaffoldConfig",
    "load_config",
]
