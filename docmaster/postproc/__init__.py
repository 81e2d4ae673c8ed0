"""Markdown checks applied to discovered and scaffolded documents."""

from .freshness import FreshnessStamp, STAMP_PATTERN, format_stamp
from .links import LinkValidator, extract_link_targets
from .structure import MarkdownStructureChecker, StructureReport

__all__ = [
    "FreshnessStamp",
    "LinkValidator",
    "MarkdownStructureChecker",
    "STAMP_PATTERN",
    "StructureReport",
    "extract_link_targets",
    "format_stamp",
]
