"""Pydantic data models for speech input and stage tracking."""

from .enums import HighlightState
from .speech import Alternative, RecognitionResult, SelectedAlternative
from .stage import (
    STAGE_COLUMNS,
    CapacityInputs,
    CapacitySegment,
    StageRecord,
    WorkbookSnapshot,
    format_quantity,
    parse_quantity,
    round_volume,
)

__all__ = [
    # Enums
    "HighlightState",
    # Speech
    "Alternative",
    "RecognitionResult",
    "SelectedAlternative",
    # Stages
    "STAGE_COLUMNS",
    "StageRecord",
    "CapacityInputs",
    "CapacitySegment",
    "WorkbookSnapshot",
    "parse_quantity",
    "format_quantity",
    "round_volume",
]
