"""Jinja2 environment shared by report and scaffold rendering."""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Iterable, List

from jinja2 import Environment, FileSystemLoader, StrictUndefined

TEMPLATES_DIR = Path(__file__).with_name("templates")


def create_environment(extra_dirs: Iterable[Path] | None = None) -> Environment:
    """Return an environment searching ``extra_dirs`` before the bundled templates."""
    directories: List[str] = []
    for directory in list(extra_dirs or []) + [TEMPLATES_DIR]:
        text = str(directory)
        if text not in directories:
            directories.append(text)
    env = Environment(
        loader=FileSystemLoader(directories),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters["isotime"] = lambda value: value.strftime("%Y-%m-%d %H:%M:%S %Z").strip()
    env.filters["shell_quote"] = shlex.quote
    return env


__all__ = ["TEMPLATES_DIR", "create_environment"]
