"""Speech result interpretation: alternative selection, numerals, records."""

from .numerals import parse_numeral
from .record_builder import (
    FIELD_LABELS,
    build_display_line,
    fill_next_open_stage,
    parse_display_line,
)
from .selector import select_alternative, score_transcript
from .session import CaptureSession

__all__ = [
    "parse_numeral",
    "select_alternative",
    "score_transcript",
    "FIELD_LABELS",
    "build_display_line",
    "parse_display_line",
    "fill_next_open_stage",
    "CaptureSession",
]
