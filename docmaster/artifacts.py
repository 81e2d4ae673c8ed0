"""Timestamped, never-overwritten report artifacts."""

from __future__ import annotations

import itertools
from datetime import datetime
from pathlib import Path

from .logging import get_logger

_TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"

logger = get_logger("artifacts")


def timestamped_name(prefix: str, suffix: str, moment: datetime) -> str:
    return f"{prefix}-{moment.strftime(_TIMESTAMP_FORMAT)}{suffix}"


def write_artifact(
    directory: Path,
    prefix: str,
    suffix: str,
    content: str,
    *,
    moment: datetime,
) -> Path:
    """Write ``content`` to a new timestamped file inside ``directory``.

    Existing artifacts are never replaced: a clashing name gets a numeric
    suffix. A failed write removes the partial file before re-raising.
    """
    directory.mkdir(parents=True, exist_ok=True)
    stem = timestamped_name(prefix, "", moment)
    for attempt in itertools.count():
        name = f"{stem}{suffix}" if attempt == 0 else f"{stem}-{attempt}{suffix}"
        path = directory / name
        try:
            handle = path.open("x", encoding="utf-8")
        except FileExistsError:
            continue
        try:
            with handle:
                handle.write(content)
        except OSError:
            path.unlink(missing_ok=True)
            raise
        logger.debug("Wrote artifact %s", path)
        return path
    raise AssertionError("unreachable")  # pragma: no cover


__all__ = ["timestamped_name", "write_artifact"]
