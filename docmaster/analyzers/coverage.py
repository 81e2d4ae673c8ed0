"""Inline documentation coverage estimation for source files."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional

from ..models import CoverageSample, DiscoveredFile


@dataclass(frozen=True)
class CommentStyle:
    """Comment-line and doc-block conventions for a language family."""

    line_pattern: re.Pattern[str]
    doc_block_opener: Optional[re.Pattern[str]]


_C_STYLE = CommentStyle(
    line_pattern=re.compile(r"^\s*(//|/\*|\*)"),
    doc_block_opener=re.compile(r"/\*\*"),
)
_C_STYLE_TRIPLE_SLASH = CommentStyle(
    line_pattern=re.compile(r"^\s*(//|/\*|\*)"),
    doc_block_opener=re.compile(r"/\*\*|^\s*///", re.MULTILINE),
)
_HASH_STYLE = CommentStyle(
    line_pattern=re.compile(r"^\s*#"),
    doc_block_opener=None,
)

COMMENT_STYLES: Dict[str, CommentStyle] = {
    "Python": CommentStyle(
        line_pattern=re.compile(r"^\s*(#|\"\"\"|''')"),
        doc_block_opener=re.compile(r"\"\"\"|'''"),
    ),
    "JavaScript": _C_STYLE,
    "TypeScript": _C_STYLE,
    "Java": _C_STYLE,
    "Kotlin": _C_STYLE,
    "Scala": _C_STYLE,
    "Go": _C_STYLE,
    "C": _C_STYLE,
    "C++": _C_STYLE,
    "Objective-C": _C_STYLE,
    "Objective-C++": _C_STYLE,
    "PHP": CommentStyle(
        line_pattern=re.compile(r"^\s*(//|/\*|\*|#)"),
        doc_block_opener=re.compile(r"/\*\*"),
    ),
    "C#": _C_STYLE_TRIPLE_SLASH,
    "Swift": _C_STYLE_TRIPLE_SLASH,
    "Rust": CommentStyle(
        line_pattern=re.compile(r"^\s*(//|/\*|\*)"),
        doc_block_opener=re.compile(r"^\s*//[/!]|/\*\*", re.MULTILINE),
    ),
    "Ruby": CommentStyle(
        line_pattern=re.compile(r"^\s*(#|=begin|=end)"),
        doc_block_opener=re.compile(r"^=begin", re.MULTILINE),
    ),
    "R": CommentStyle(
        line_pattern=re.compile(r"^\s*#"),
        doc_block_opener=re.compile(r"^\s*#'", re.MULTILINE),
    ),
    "Julia": CommentStyle(
        line_pattern=re.compile(r"^\s*(#|\"\"\")"),
        doc_block_opener=re.compile(r"\"\"\""),
    ),
    "Shell": _HASH_STYLE,
    "PowerShell": CommentStyle(
        line_pattern=re.compile(r"^\s*(#|<#)"),
        doc_block_opener=re.compile(r"<#"),
    ),
}


class CoverageEstimator:
    """Computes comment density and doc-block presence for source text."""

    def __init__(self, styles: Dict[str, CommentStyle] | None = None) -> None:
        self.styles = styles if styles is not None else COMMENT_STYLES

    def supports(self, language_family: Optional[str]) -> bool:
        return language_family is not None and language_family in self.styles

    def estimate(
        self,
        text: str,
        language_family: Optional[str],
        *,
        file: DiscoveredFile,
    ) -> CoverageSample:
        lines = text.splitlines()
        style = self.styles.get(language_family) if language_family else None
        if style is None or not lines:
            return CoverageSample(
                file=file,
                comment_line_count=0,
                total_line_count=len(lines),
                has_structured_doc_block=False,
            )

        comment_lines = sum(1 for line in lines if style.line_pattern.match(line))
        has_doc_block = bool(style.doc_block_opener and style.doc_block_opener.search(text))
        return CoverageSample(
            file=file,
            comment_line_count=comment_lines,
            total_line_count=len(lines),
            has_structured_doc_block=has_doc_block,
        )


__all__ = ["COMMENT_STYLES", "CommentStyle", "CoverageEstimator"]
