"""Volume tracking engine.

Recomputes arrival volume, stage volume and highlight for every stage from
the whole sequence. The pass is pure: it returns updated copies and never
touches the records it was given, so running it twice on the same input
yields the same output.

HIGHLIGHT RULES (applied in this order):
1. YELLOW when current liquid + ground volume <= benchmark, else WHITE
2. The last stage whose arrival volume <= benchmark becomes RED
3. Every stage but the last whose arrival + stage volume <= benchmark
   becomes WHITE again, which can undo rule 2
"""

import structlog

from fracvoice.models import CapacityInputs, HighlightState, StageRecord, round_volume

logger = structlog.get_logger(__name__)


def compute_benchmark(stages: list[StageRecord]) -> float:
    """Largest current liquid among filled stages, never below 0."""
    benchmark = 0.0
    for stage in stages:
        value = stage.current_value
        if value is not None and value > benchmark:
            benchmark = value
    return benchmark


def recompute_stages(
    stages: list[StageRecord],
    capacity: CapacityInputs,
) -> list[StageRecord]:
    """Run one full derived-value pass over the stage sequence.

    Args:
        stages: Stage sequence in operation order.
        capacity: Ground and wellbore volumes.

    Returns:
        New list of stage records with derived fields and highlight set.
    """
    updated = [stage.model_copy() for stage in stages]
    if not updated:
        return updated

    total_volume = capacity.total_volume
    ground_volume = capacity.ground_volume
    values = [stage.current_value for stage in updated]
    benchmark = compute_benchmark(updated)

    # Pass 1: derived volumes and yellow/white
    for idx, stage in enumerate(updated):
        current = values[idx]
        if current is None:
            stage.arrival_liquid = None
            stage.stage_liquid = None
            stage.highlight = HighlightState.WHITE
            continue

        stage.arrival_liquid = round_volume(total_volume + current)
        if idx < len(updated) - 1 and values[idx + 1] is not None:
            stage.stage_liquid = round_volume(values[idx + 1] - current)
        else:
            stage.stage_liquid = 0.0

        if current + ground_volume <= benchmark:
            stage.highlight = HighlightState.YELLOW
        else:
            stage.highlight = HighlightState.WHITE

    # Pass 2: most recent stage already at the benchmark turns red
    eligible = [
        idx
        for idx, stage in enumerate(updated)
        if stage.arrival_liquid is not None and stage.arrival_liquid <= benchmark
    ]
    if eligible:
        updated[eligible[-1]].highlight = HighlightState.RED

    # Pass 3: stages fully displaced by the benchmark go back to white
    for stage in updated[:-1]:
        arrival = stage.arrival_liquid or 0.0
        stage_liquid = stage.stage_liquid or 0.0
        if arrival + stage_liquid <= benchmark:
            stage.highlight = HighlightState.WHITE

    logger.debug(
        "stage_recompute_complete",
        stages=len(updated),
        benchmark=benchmark,
        total_volume=total_volume,
        red=sum(1 for s in updated if s.highlight == HighlightState.RED),
        yellow=sum(1 for s in updated if s.highlight == HighlightState.YELLOW),
    )

    return updated
