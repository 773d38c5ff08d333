"""Unit tests for the command-line interface."""

import json

import pytest
from typer.testing import CliRunner

from fracvoice.cli import app
from fracvoice.services.storage import load_snapshot

runner = CliRunner()


@pytest.fixture
def state_path(tmp_path):
    return tmp_path / "state.json"


def invoke(state_path, *args):
    return runner.invoke(app, ["--state", str(state_path), *args])


class TestCli:
    """Tests for CLI commands."""

    def test_say_fills_row(self, state_path, sample_utterance):
        result = invoke(state_path, "say", sample_utterance)

        assert result.exit_code == 0
        snapshot = load_snapshot(state_path)
        assert snapshot.stages[0].current_liquid == "100"
        assert snapshot.stages[0].material == "5"

    def test_recognize_file(self, state_path, tmp_path):
        results_path = tmp_path / "results.json"
        results_path.write_text(
            json.dumps(
                [
                    {
                        "alternatives": [
                            {"transcript": "料5", "confidence": 0.9},
                            {"transcript": "料5 砂量12 砂比0.3 当前液量80", "confidence": 0.85},
                        ]
                    }
                ]
            ),
            encoding="utf-8",
        )

        result = invoke(state_path, "recognize", str(results_path))

        assert result.exit_code == 0
        assert load_snapshot(state_path).stages[0].current_liquid == "80"

    def test_capacity_and_show(self, state_path):
        assert invoke(state_path, "capacity", "--ground", "20", "--wellbore", "30").exit_code == 0

        result = invoke(state_path, "show")

        assert result.exit_code == 0
        assert "50.0" in result.output

    def test_delete_without_row_fails(self, state_path):
        result = invoke(state_path, "delete-row")
        assert result.exit_code == 1

    def test_add_and_delete_row(self, state_path):
        assert invoke(state_path, "add-row").exit_code == 0
        assert len(load_snapshot(state_path).stages) == 2

        assert invoke(state_path, "delete-row", "2").exit_code == 0
        assert len(load_snapshot(state_path).stages) == 1

    def test_edit_unknown_field_fails(self, state_path):
        result = invoke(state_path, "edit", "1", "volume", "3")
        assert result.exit_code == 1

    def test_export(self, state_path, tmp_path, sample_utterance):
        invoke(state_path, "say", sample_utterance)

        result = invoke(state_path, "export", "--dir", str(tmp_path / "out"))

        assert result.exit_code == 0
        assert len(list((tmp_path / "out").glob("*.csv"))) == 1

    def test_reset(self, state_path, sample_utterance):
        invoke(state_path, "say", sample_utterance)

        result = invoke(state_path, "reset", "--yes")

        assert result.exit_code == 0
        assert load_snapshot(state_path).stages[0].is_open
