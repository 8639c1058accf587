"""
End-to-end tests for the harper-frames CLI.

These tests run the typer app against generated record files and verify that:
1. Each output format renders without errors
2. Frames carry one labelled field per series and attribute
3. Source and usage errors exit with a non-zero status
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from harper_frames.domain.models import Column, DataQualityWarning, Kind, WideTable
from harper_frames.main import app
from harper_frames.reporter import print_table

runner = CliRunner()


@pytest.fixture(autouse=True)
def _quiet_logs(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "ERROR")


def _distinct_times(path: Path) -> int:
    return len({r["time"] for r in json.loads(path.read_text(encoding="utf-8"))})


class TestInfoCommand:
    """Test the configuration summary."""

    def test_info_prints_effective_settings(self):
        result = runner.invoke(app, ["info"])

        assert result.exit_code == 0
        assert "key=time" in result.stdout
        assert "discriminator=series" in result.stdout

    def test_info_reflects_environment(self, monkeypatch):
        monkeypatch.setenv("FRAMES_KEY_COLUMN", "at")
        result = runner.invoke(app, ["info"])

        assert "key=at" in result.stdout


class TestProjectCommand:
    """Test projecting a generated record file."""

    def test_frame_output(self, samples_file: Path):
        result = runner.invoke(app, ["project", str(samples_file), "--format", "frame"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["status"] == "ok"
        schema = payload["frame"]["schema"]
        assert schema["refId"] == "records"
        fields = schema["fields"]
        assert fields[0]["name"] == "time"
        assert fields[0]["type"] == "time"
        assert "worker-0.utilization" in [f["name"] for f in fields]
        for field in fields[1:]:
            series = field["labels"]["series"]
            assert field["name"].startswith(f"{series}.")
        values = payload["frame"]["data"]["values"]
        assert len(values[0]) == _distinct_times(samples_file)
        assert values[0] == sorted(values[0])

    def test_records_output_with_attribute_selection(self, samples_file: Path):
        result = runner.invoke(
            app,
            ["project", str(samples_file), "-a", "utilization", "--format", "records"],
        )

        assert result.exit_code == 0, result.output
        records = json.loads(result.stdout)
        assert len(records) == _distinct_times(samples_file)
        for record in records:
            assert isinstance(record["time"], int)
            assert all(k == "time" or k.endswith(".utilization") for k in record)

    def test_unqualified_single_series(self, samples_file: Path):
        result = runner.invoke(
            app,
            ["project", str(samples_file), "-d", "", "--no-qualify", "-a", "period", "-f", "frame"],
        )

        assert result.exit_code == 0, result.output
        fields = json.loads(result.stdout)["frame"]["schema"]["fields"]
        assert [f["name"] for f in fields] == ["time", "period"]

    def test_table_output(self, samples_file: Path):
        result = runner.invoke(app, ["project", str(samples_file)])

        assert result.exit_code == 0, result.output
        assert "records.json" in result.stdout

    def test_metric_without_matches_prints_empty_table(self, samples_file: Path):
        result = runner.invoke(app, ["project", str(samples_file), "-m", "network"])

        assert result.exit_code == 0, result.output
        assert "No data in range." in result.stdout

    def test_missing_file_exits_with_error(self, tmp_path: Path):
        result = runner.invoke(app, ["project", str(tmp_path / "absent.json")])

        assert result.exit_code == 1
        assert "Query failed" in result.output

    def test_missing_key_column_exits_with_error(self, samples_file: Path):
        result = runner.invoke(app, ["project", str(samples_file), "--key", "ts"])

        assert result.exit_code == 1
        assert "key column 'ts'" in result.output

    def test_unknown_format_is_usage_error(self, samples_file: Path):
        result = runner.invoke(app, ["project", str(samples_file), "--format", "xml"])

        assert result.exit_code != 0

    def test_inverted_time_window_is_usage_error(self, samples_file: Path):
        result = runner.invoke(
            app,
            [
                "project",
                str(samples_file),
                "--from",
                "2024-01-01T00:01:00",
                "--to",
                "2024-01-01T00:00:00",
            ],
        )

        assert result.exit_code == 2
        assert isinstance(result.exception, SystemExit)
        assert "precede" in result.output

    def test_partial_time_window_is_usage_error(self, samples_file: Path):
        result = runner.invoke(
            app, ["project", str(samples_file), "--from", "2024-01-01T00:00:00"]
        )

        assert result.exit_code != 0


class TestReporter:
    """Test the rich table renderer directly."""

    def test_print_table_renders_columns_nulls_and_warnings(self):
        console = Console(record=True, width=200)
        wide = WideTable(
            key_column="ts",
            columns=[Column("ts", Kind.integer), Column("a.val", Kind.float, {"series": "a"})],
            rows=[[1, 0.5], [2, None]],
        )
        warnings = [DataQualityWarning(code="type_conflict", message="a.val [bad] at row 2")]

        print_table(wide, title="cpu", warnings=warnings, console=console)
        text = console.export_text()

        assert "a.val" in text
        assert "null" in text
        assert "[type_conflict] a.val [bad] at row 2" in text

    def test_print_table_without_columns(self):
        console = Console(record=True, width=80)
        print_table(WideTable(key_column="ts"), console=console)

        assert "No columns to display." in console.export_text()
