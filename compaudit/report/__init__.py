"""Report synthesis and narrative rendering."""

from .narrative import NarrativeRenderer, SECTION_TITLES
from .synthesizer import (
    REPORT_JSON,
    REPORT_MARKDOWN,
    SUMMARY_JSON,
    ReportOutput,
    ReportSynthesizer,
    build_follow_up_plan,
    key_recommendations,
)

__all__ = [
    "NarrativeRenderer",
    "REPORT_JSON",
    "REPORT_MARKDOWN",
    "ReportOutput",
    "ReportSynthesizer",
    "SECTION_TITLES",
    "SUMMARY_JSON",
    "build_follow_up_plan",
    "key_recommendations",
]
