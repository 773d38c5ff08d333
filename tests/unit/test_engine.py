"""Unit tests for the volume tracking engine."""

from fracvoice.models import CapacityInputs, HighlightState, StageRecord
from fracvoice.tracking.engine import compute_benchmark, recompute_stages

WHITE = HighlightState.WHITE
YELLOW = HighlightState.YELLOW
RED = HighlightState.RED


def stages_with(*values: str) -> list[StageRecord]:
    return [StageRecord(material=f"M{i}", current_liquid=v) for i, v in enumerate(values)]


class TestComputeBenchmark:
    """Tests for compute_benchmark."""

    def test_max_of_filled(self):
        assert compute_benchmark(stages_with("100", "", "abc", "12")) == 100.0

    def test_empty_sequence(self):
        assert compute_benchmark([]) == 0.0
        assert compute_benchmark(stages_with("", " ")) == 0.0

    def test_never_negative(self):
        assert compute_benchmark(stages_with("-5")) == 0.0


class TestRecomputeStages:
    """Tests for recompute_stages."""

    def test_arrival_and_stage_volumes(self, three_stages, capacity_50):
        result = recompute_stages(three_stages, capacity_50)

        assert [s.arrival_liquid for s in result] == [150.0, 200.0, 250.0]
        assert [s.stage_liquid for s in result] == [50.0, 50.0, 0.0]

    def test_latest_eligible_is_red(self, three_stages, capacity_50):
        result = recompute_stages(three_stages, capacity_50)

        # index 0 is yellow after pass 1, then 150 + 50 <= 200 reverts it
        assert [s.highlight for s in result] == [WHITE, RED, WHITE]

    def test_red_yellow_white(self, mixed_stages, capacity_110):
        result = recompute_stages(mixed_stages, capacity_110)

        assert [s.arrival_liquid for s in result] == [210.0, 350.0, 370.0]
        assert [s.stage_liquid for s in result] == [140.0, 20.0, 0.0]
        assert [s.highlight for s in result] == [RED, YELLOW, WHITE]

    def test_last_stage_keeps_yellow(self):
        stages = stages_with("100", "110", "120", "200")
        capacity = CapacityInputs(ground_volume=0.0, wellbore_volume=50.0)

        result = recompute_stages(stages, capacity)

        # arrivals 150, 160, 170 are eligible, index 2 goes red;
        # 150 + 10 and 160 + 10 revert the earlier ones to white
        assert [s.highlight for s in result] == [WHITE, WHITE, RED, YELLOW]

    def test_red_reverted_when_next_stage_empty(self, capacity_50):
        stages = stages_with("100", "", "200")

        result = recompute_stages(stages, capacity_50)

        # index 0 is the last eligible stage (150 <= 200) but its stage
        # volume is 0, so 150 + 0 <= 200 turns it white again
        assert result[0].arrival_liquid == 150.0
        assert result[0].highlight == WHITE

    def test_last_stage_can_be_red(self):
        capacity = CapacityInputs(ground_volume=0.0, wellbore_volume=0.0)

        result = recompute_stages(stages_with("100", "104", "105"), capacity)

        assert [s.highlight for s in result] == [WHITE, WHITE, RED]

    def test_empty_current_liquid(self, capacity_50):
        stages = stages_with("100", "", "200")

        result = recompute_stages(stages, capacity_50)

        assert result[1].arrival_liquid is None
        assert result[1].stage_liquid is None
        assert result[1].highlight == WHITE
        # next stage empty -> stage volume 0
        assert result[0].stage_liquid == 0.0
        assert [s.highlight for s in result] == [WHITE, WHITE, WHITE]

    def test_unparseable_counts_as_empty(self, capacity_50):
        result = recompute_stages(stages_with("abc", "100"), capacity_50)
        assert result[0].arrival_liquid is None
        assert result[0].highlight == WHITE
        assert result[1].arrival_liquid == 150.0

    def test_single_stage_at_benchmark(self):
        capacity = CapacityInputs(ground_volume=0.0, wellbore_volume=0.0)
        result = recompute_stages(stages_with("100"), capacity)
        assert result[0].arrival_liquid == 100.0
        assert result[0].highlight == RED

    def test_half_tenths_round_up(self):
        capacity = CapacityInputs(ground_volume=0.0, wellbore_volume=0.0)

        result = recompute_stages(stages_with("10.25"), capacity)

        # 10.3 is past the 10.25 benchmark, so the stage stays yellow
        assert result[0].arrival_liquid == 10.3
        assert result[0].highlight == YELLOW

    def test_negative_stage_volume_rounds_away_from_zero(self, capacity_50):
        result = recompute_stages(stages_with("10.5", "10.25"), capacity_50)
        assert result[0].stage_liquid == -0.3

    def test_out_of_order_input_tolerated(self, capacity_50):
        result = recompute_stages(stages_with("200", "100"), capacity_50)
        assert result[0].stage_liquid == -100.0
        assert result[1].arrival_liquid == 150.0

    def test_empty_sequence(self, capacity_50):
        assert recompute_stages([], capacity_50) == []

    def test_input_not_mutated(self, three_stages, capacity_50):
        recompute_stages(three_stages, capacity_50)
        assert all(s.arrival_liquid is None for s in three_stages)
        assert all(s.highlight == WHITE for s in three_stages)

    def test_idempotent(self, mixed_stages, capacity_110):
        once = recompute_stages(mixed_stages, capacity_110)
        twice = recompute_stages(once, capacity_110)
        assert [s.model_dump() for s in once] == [s.model_dump() for s in twice]
