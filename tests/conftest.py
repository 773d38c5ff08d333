"""Pytest configuration and fixtures."""

import pytest

from fracvoice.config.settings import Settings
from fracvoice.models import CapacityInputs, StageRecord


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the environment's state and export paths."""
    return Settings(
        confidence_threshold=0.72,
        pressure_keyword="压力",
        display_height=400.0,
        max_undo=20,
        default_title="____ 井____段压裂施工",
        state_file=str(tmp_path / "state.json"),
        export_dir=str(tmp_path / "exports"),
    )


@pytest.fixture
def sample_utterance() -> str:
    """A full spoken stage entry."""
    return "料五 砂量十二 砂比零点三 当前液量一百"


def make_stages(*values: str) -> list[StageRecord]:
    """Stages with the given current liquid texts and distinct materials."""
    return [
        StageRecord(material=f"M{i}", sand_ratio=f"0.{i}", current_liquid=value)
        for i, value in enumerate(values, 1)
    ]


@pytest.fixture
def three_stages() -> list[StageRecord]:
    """Current liquid 100 / 150 / 200."""
    return make_stages("100", "150", "200")


@pytest.fixture
def capacity_50() -> CapacityInputs:
    """Ground 20 + wellbore 30 = total 50."""
    return CapacityInputs(ground_volume=20.0, wellbore_volume=30.0)


@pytest.fixture
def mixed_stages() -> list[StageRecord]:
    """Sequence that ends up red / yellow / white with capacity_110."""
    return make_stages("100", "240", "260")


@pytest.fixture
def capacity_110() -> CapacityInputs:
    """Ground 10 + wellbore 100 = total 110."""
    return CapacityInputs(ground_volume=10.0, wellbore_volume=100.0)
