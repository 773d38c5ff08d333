"""Models for fracturing stages and wellbore capacity."""

import math
import re
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, Field

from .enums import HighlightState

# Leading numeric prefix, the way a browser's parseFloat reads cell text
_QUANTITY_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Table column titles in display order
STAGE_COLUMNS = ("料", "砂量", "砂比", "当前液量", "到达液量", "阶段液量", "压力")


def parse_quantity(text: str | None) -> float | None:
    """Parse the leading number of a free-text cell.

    Returns None for empty or unparseable text instead of raising.
    """
    if not text:
        return None
    match = _QUANTITY_PREFIX.match(text)
    if not match:
        return None
    return float(match.group(0))


def round_volume(value: float) -> float:
    """Round to one decimal with halves going away from zero.

    10.25 becomes 10.3 and -10.25 becomes -10.3. Works on the exact binary
    value of the float. Non-finite values pass through.
    """
    if not math.isfinite(value):
        return value
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def format_quantity(value: float | None) -> str:
    """Format a derived volume with one decimal, empty when absent."""
    if value is None:
        return ""
    return f"{value:.1f}"


class StageRecord(BaseModel):
    """One fracturing stage row.

    Input fields hold whatever text the operator spoke or typed; derived
    fields are owned by the volume tracking engine.
    """

    material: str = Field(default="", description="Material / fluid system")
    sand_volume: str = Field(default="", description="Sand volume")
    sand_ratio: str = Field(default="", description="Sand ratio")
    current_liquid: str = Field(default="", description="Cumulative liquid at stage start")
    pressure: str = Field(default="", description="Spoken pressure reading")

    arrival_liquid: float | None = Field(None, description="Liquid total when stage reaches bottom")
    stage_liquid: float | None = Field(None, description="Liquid pumped during this stage")
    highlight: HighlightState = Field(
        default=HighlightState.WHITE, description="Highlight relative to the benchmark"
    )

    @property
    def current_value(self) -> float | None:
        """Parsed current liquid, None when empty or unparseable."""
        if not self.current_liquid.strip():
            return None
        return parse_quantity(self.current_liquid)

    @property
    def is_open(self) -> bool:
        """Whether the row is still waiting for a voice entry."""
        return self.material.strip() == ""

    def display_row(self) -> list[str]:
        """Cell texts in STAGE_COLUMNS order."""
        return [
            self.material,
            self.sand_volume,
            self.sand_ratio,
            self.current_liquid,
            format_quantity(self.arrival_liquid),
            format_quantity(self.stage_liquid),
            self.pressure,
        ]


class CapacityInputs(BaseModel):
    """Surface and wellbore capacities in cubic meters."""

    ground_volume: float = Field(default=0.0, description="Surface manifold volume")
    wellbore_volume: float = Field(default=0.0, description="Wellbore volume")

    @property
    def total_volume(self) -> float:
        """Ground plus wellbore volume, rounded to one decimal."""
        return round_volume(self.ground_volume + self.wellbore_volume)


class CapacitySegment(BaseModel):
    """One block of the wellbore capacity display."""

    stage_index: int = Field(..., ge=0, description="Index of the source stage")
    highlight: HighlightState = Field(..., description="Highlight of the source stage")
    ratio: float = Field(..., description="Fraction of wellbore volume occupied")
    height: float = Field(..., description="Rendered height in display units")
    label: str = Field(..., description="Material/sand ratio and percent")


class WorkbookSnapshot(BaseModel):
    """Everything needed to restore a workbook."""

    title: str = Field(default="", description="Display title (well and section)")
    capacity: CapacityInputs = Field(default_factory=CapacityInputs)
    stages: list[StageRecord] = Field(default_factory=list)
