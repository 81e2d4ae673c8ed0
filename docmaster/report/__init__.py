"""Discovery report synthesis and persistence."""

from .synthesizer import ReportSynthesizer, average_coverage
from .writer import REPORT_PREFIX, ReportWriter, report_to_dict

__all__ = [
    "REPORT_PREFIX",
    "ReportSynthesizer",
    "ReportWriter",
    "average_coverage",
    "report_to_dict",
]
