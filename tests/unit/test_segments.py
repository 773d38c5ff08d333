"""Unit tests for the wellbore capacity display."""

import pytest

from fracvoice.models import CapacityInputs, HighlightState, StageRecord
from fracvoice.tracking.engine import recompute_stages
from fracvoice.tracking.segments import render_segments, segment_ratio
from fracvoice.tracking.wellbore import wellbore_volume


class TestRenderSegments:
    """Tests for render_segments."""

    def test_red_and_yellow_segments(self, mixed_stages, capacity_110):
        stages = recompute_stages(mixed_stages, capacity_110)

        segments = render_segments(stages, capacity_110, display_height=400.0)

        assert len(segments) == 2
        # most recent stage first in the list, rendered at the bottom last
        assert [s.stage_index for s in segments] == [1, 0]
        assert segments[0].highlight == HighlightState.YELLOW
        assert segments[0].ratio == pytest.approx(0.1)
        assert segments[0].label == "M2/0.2_10.0%"
        assert segments[1].highlight == HighlightState.RED
        assert segments[1].ratio == pytest.approx(0.9)
        assert segments[1].height == pytest.approx(360.0)
        assert segments[1].label == "M1/0.1_90.0%"

    def test_no_wellbore_volume(self, mixed_stages):
        capacity = CapacityInputs(ground_volume=10.0, wellbore_volume=0.0)
        stages = recompute_stages(mixed_stages, capacity)
        assert render_segments(stages, capacity, display_height=400.0) == []

    def test_white_stages_not_drawn(self, three_stages, capacity_50):
        stages = recompute_stages(three_stages, capacity_50)
        segments = render_segments(stages, capacity_50, display_height=100.0)
        assert [s.stage_index for s in segments] == [1]


class TestSegmentRatio:
    """Tests for segment_ratio."""

    def test_red_ratio_clamped(self):
        stage = StageRecord(
            current_liquid="50",
            arrival_liquid=100.0,
            stage_liquid=10.0,
            highlight=HighlightState.RED,
        )
        capacity = CapacityInputs(ground_volume=0.0, wellbore_volume=100.0)
        assert segment_ratio(stage, 200.0, capacity) == 0.0

    def test_yellow_capped_by_stage_volume(self):
        stage = StageRecord(
            current_liquid="200",
            arrival_liquid=310.0,
            stage_liquid=5.0,
            highlight=HighlightState.YELLOW,
        )
        capacity = CapacityInputs(ground_volume=10.0, wellbore_volume=100.0)
        # diff = 260 - 200 - 10 = 50 >= 5
        assert segment_ratio(stage, 260.0, capacity) == pytest.approx(0.05)

    def test_missing_stage_volume_skipped(self):
        stage = StageRecord(highlight=HighlightState.YELLOW)
        capacity = CapacityInputs(wellbore_volume=100.0)
        assert segment_ratio(stage, 100.0, capacity) is None

    def test_white_skipped(self):
        stage = StageRecord(current_liquid="1", stage_liquid=5.0)
        capacity = CapacityInputs(wellbore_volume=100.0)
        assert segment_ratio(stage, 100.0, capacity) is None


class TestWellboreVolume:
    """Tests for wellbore_volume."""

    def test_casing_volume(self):
        assert wellbore_volume(3000, 139.7, 7.72) == pytest.approx(36.4)

    def test_unit_pipe(self):
        assert wellbore_volume(1000, 2000, 0) == pytest.approx(3141.6)

    def test_closed_bore(self):
        assert wellbore_volume(100, 10, 5) == 0.0
        assert wellbore_volume(0, 139.7, 7.72) == 0.0
