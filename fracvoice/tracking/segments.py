"""Project highlighted stages onto the wellbore capacity display."""

import structlog

from fracvoice.models import CapacityInputs, CapacitySegment, HighlightState, StageRecord
from fracvoice.tracking.engine import compute_benchmark

logger = structlog.get_logger(__name__)


def segment_ratio(
    stage: StageRecord,
    max_current: float,
    capacity: CapacityInputs,
) -> float | None:
    """Fraction of the wellbore a highlighted stage occupies.

    Returns None for stages that are not drawn.
    """
    if stage.stage_liquid is None:
        return None

    wellbore = capacity.wellbore_volume
    stage_liquid = stage.stage_liquid

    if stage.highlight == HighlightState.RED:
        arrival = stage.arrival_liquid or 0.0
        return max(0.0, (stage_liquid - (max_current - arrival)) / wellbore)

    if stage.highlight == HighlightState.YELLOW:
        current = stage.current_value or 0.0
        diff = max_current - current - capacity.ground_volume
        if diff < stage_liquid:
            return diff / wellbore
        return stage_liquid / wellbore

    if stage.highlight == HighlightState.WHITE:
        return None

    raise ValueError(f"Unhandled highlight state: {stage.highlight!r}")


def render_segments(
    stages: list[StageRecord],
    capacity: CapacityInputs,
    display_height: float,
) -> list[CapacitySegment]:
    """Build the capacity display stack from a recomputed sequence.

    Args:
        stages: Stage sequence after the engine pass.
        capacity: Ground and wellbore volumes.
        display_height: Height of the display area.

    Returns:
        Segments top to bottom; the most recent stage comes last.
    """
    if capacity.wellbore_volume <= 0:
        return []

    max_current = compute_benchmark(stages)
    segments = []

    for idx, stage in enumerate(stages):
        ratio = segment_ratio(stage, max_current, capacity)
        if ratio is None:
            continue
        label = f"{stage.material.strip()}/{stage.sand_ratio.strip()}_{ratio * 100:.1f}%"
        segments.append(
            CapacitySegment(
                stage_index=idx,
                highlight=stage.highlight,
                ratio=ratio,
                height=ratio * display_height,
                label=label,
            )
        )

    segments.reverse()
    logger.debug("segments_rendered", count=len(segments))
    return segments
