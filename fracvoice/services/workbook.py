"""Stage workbook - owns the stage sequence and runs every update.

Each trigger (recognition result, manual edit, capacity change, row
operation) runs synchronously:

    RecordBuilder (voice only) -> recompute_stages -> render_segments
    -> subscribers (persistence)

Rendering is a projection of the sequence; the sequence is the only state.
"""

from dataclasses import dataclass
from typing import Callable, Optional

import structlog

from fracvoice.config.settings import Settings, get_settings
from fracvoice.models import (
    CapacityInputs,
    CapacitySegment,
    RecognitionResult,
    StageRecord,
    WorkbookSnapshot,
)
from fracvoice.speech.record_builder import (
    build_display_line,
    fill_next_open_stage,
    parse_display_line,
)
from fracvoice.speech.session import CaptureSession
from fracvoice.tracking.engine import compute_benchmark, recompute_stages
from fracvoice.tracking.segments import render_segments
from fracvoice.tracking.wellbore import wellbore_volume

logger = structlog.get_logger(__name__)

EDITABLE_FIELDS = ("material", "sand_volume", "sand_ratio", "current_liquid", "pressure")

SnapshotCallback = Callable[[WorkbookSnapshot], None]


class WorkbookError(Exception):
    """Base error for workbook operations."""
    pass


class NoSelectionError(WorkbookError):
    """A row operation was requested without a selected row."""
    pass


class StageIndexError(WorkbookError):
    """A stage index or field name does not exist."""
    pass


class ReentrantUpdateError(WorkbookError):
    """An update was triggered while another pass was still running."""
    pass


@dataclass
class UtteranceOutcome:
    """What happened to one recognition event."""
    line: str = ""
    stage_index: Optional[int] = None
    confidence: Optional[float] = None

    @property
    def filled(self) -> bool:
        return self.stage_index is not None


class StageWorkbook:
    """The stage table of one fracturing job."""

    def __init__(
        self,
        stages: Optional[list[StageRecord]] = None,
        capacity: Optional[CapacityInputs] = None,
        title: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.title = self.settings.default_title if title is None else title
        self.capacity = capacity.model_copy() if capacity is not None else CapacityInputs()
        self.stages: list[StageRecord] = (
            [stage.model_copy() for stage in stages] if stages is not None else [StageRecord()]
        )
        self.segments: list[CapacitySegment] = []
        self.session = CaptureSession(
            threshold=self.settings.confidence_threshold,
            pressure_keyword=self.settings.pressure_keyword,
        )
        self._undo_stack: list[list[StageRecord]] = []
        self._subscribers: list[SnapshotCallback] = []
        self._updating = False
        self.refresh(notify=False)

    # =========================================================================
    # Snapshots
    # =========================================================================

    @classmethod
    def from_snapshot(
        cls,
        snapshot: WorkbookSnapshot,
        settings: Optional[Settings] = None,
    ) -> "StageWorkbook":
        """Rebuild a workbook from a stored snapshot and recompute it."""
        return cls(
            stages=snapshot.stages,
            capacity=snapshot.capacity,
            title=snapshot.title,
            settings=settings,
        )

    def snapshot(self) -> WorkbookSnapshot:
        return WorkbookSnapshot(
            title=self.title,
            capacity=self.capacity.model_copy(),
            stages=[stage.model_copy() for stage in self.stages],
        )

    def subscribe(self, callback: SnapshotCallback) -> None:
        """Register a callback that receives a snapshot after every pass."""
        self._subscribers.append(callback)

    @property
    def benchmark(self) -> float:
        return compute_benchmark(self.stages)

    # =========================================================================
    # Update pass
    # =========================================================================

    def refresh(self, notify: bool = True) -> None:
        """Recompute derived values and segments, then notify subscribers.

        Raises:
            ReentrantUpdateError: If called while a pass is running.
        """
        self._check_idle()

        self._updating = True
        try:
            self.stages = recompute_stages(self.stages, self.capacity)
            self.segments = render_segments(
                self.stages, self.capacity, self.settings.display_height
            )
            if notify:
                snapshot = self.snapshot()
                for callback in self._subscribers:
                    callback(snapshot)
        finally:
            self._updating = False

        logger.debug(
            "workbook_refreshed",
            stages=len(self.stages),
            segments=len(self.segments),
            benchmark=self.benchmark,
        )

    def _check_idle(self) -> None:
        # Called before any mutation; a rejected nested update changes nothing.
        if self._updating:
            raise ReentrantUpdateError("Workbook update already in progress")

    # =========================================================================
    # Voice input
    # =========================================================================

    def handle_recognition(self, results: list[RecognitionResult]) -> UtteranceOutcome:
        """Process one recognizer callback.

        Late callbacks (session stopped) and results without alternatives are
        no-ops. The selected transcript of every final result is joined into
        one utterance.
        """
        selections = self.session.select(results)
        if not selections:
            return UtteranceOutcome()

        text = " ".join(s.alternative.transcript.strip() for s in selections)
        confidence = max(s.alternative.confidence for s in selections)
        outcome = self.submit_transcript(text)
        outcome.confidence = confidence
        return outcome

    def submit_transcript(self, text: str) -> UtteranceOutcome:
        """Interpret an utterance and fill the next open stage with it."""
        self._check_idle()
        keyword = self.settings.pressure_keyword
        line = build_display_line(text, keyword)
        if not line:
            logger.info("utterance_empty", text=text)
            return UtteranceOutcome(line=line)

        mapping = parse_display_line(line, keyword)
        stage_index = fill_next_open_stage(self.stages, mapping, keyword)
        if stage_index is not None:
            self.refresh()
        return UtteranceOutcome(line=line, stage_index=stage_index)

    # =========================================================================
    # Manual edits
    # =========================================================================

    def edit_stage(self, index: int, field: str, value: str) -> None:
        """Set one input field of a stage and recompute."""
        self._check_idle()
        if field not in EDITABLE_FIELDS:
            raise StageIndexError(f"Unknown stage field: {field}")
        stage = self._stage_at(index)
        setattr(stage, field, value)
        self.refresh()

    def set_capacity(
        self,
        ground_volume: Optional[float] = None,
        wellbore_volume: Optional[float] = None,
    ) -> None:
        """Update either capacity input and recompute."""
        self._check_idle()
        if ground_volume is not None:
            self.capacity.ground_volume = ground_volume
        if wellbore_volume is not None:
            self.capacity.wellbore_volume = wellbore_volume
        self.refresh()

    def apply_wellbore_geometry(
        self,
        depth: float,
        outer_diameter: float,
        wall_thickness: float,
    ) -> float:
        """Set the wellbore volume from pipe geometry and return it."""
        self._check_idle()
        volume = wellbore_volume(depth, outer_diameter, wall_thickness)
        logger.info(
            "wellbore_volume_calculated",
            depth=depth,
            outer_diameter=outer_diameter,
            wall_thickness=wall_thickness,
            volume=volume,
        )
        self.set_capacity(wellbore_volume=volume)
        return volume

    def set_title(self, title: str) -> None:
        self._check_idle()
        self.title = title
        self.refresh()

    # =========================================================================
    # Row operations
    # =========================================================================

    def add_stage(self) -> int:
        """Append an empty stage and return its index."""
        self._check_idle()
        self._push_undo()
        self.stages.append(StageRecord())
        self.refresh()
        return len(self.stages) - 1

    def delete_stage(self, index: Optional[int]) -> None:
        """Delete the selected stage.

        Raises:
            NoSelectionError: If no stage is selected.
        """
        self._check_idle()
        if index is None:
            raise NoSelectionError("Select a row to delete")
        self._stage_at(index)
        self._push_undo()
        del self.stages[index]
        self.refresh()

    def undo(self) -> bool:
        """Restore the rows from before the last row operation."""
        self._check_idle()
        if not self._undo_stack:
            return False
        self.stages = self._undo_stack.pop()
        self.refresh()
        return True

    def reset(self) -> None:
        """Back to a single empty stage, no capacity and the default title."""
        self._check_idle()
        self._undo_stack.clear()
        self.stages = [StageRecord()]
        self.capacity = CapacityInputs()
        self.title = self.settings.default_title
        self.refresh()
        logger.info("workbook_reset")

    def _push_undo(self) -> None:
        self._undo_stack.append([stage.model_copy() for stage in self.stages])
        if len(self._undo_stack) > self.settings.max_undo:
            self._undo_stack.pop(0)

    def _stage_at(self, index: int) -> StageRecord:
        if index < 0 or index >= len(self.stages):
            raise StageIndexError(f"No stage at index {index}")
        return self.stages[index]
