"""Classification, coverage and gap analysis over a scanned inventory."""

from .classifier import PathClassifier
from .coverage import COMMENT_STYLES, CommentStyle, CoverageEstimator
from .gaps import GapDetector

__all__ = [
    "COMMENT_STYLES",
    "CommentStyle",
    "CoverageEstimator",
    "GapDetector",
    "PathClassifier",
]
