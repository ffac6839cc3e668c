"""Unit tests for the command line interface."""
from __future__ import annotations

import gzip
import json
from pathlib import Path

from typer.testing import CliRunner

from metric_sink.cli import SAMPLE_CONFIG, app

runner = CliRunner()

EXPECTED = "test1,tag1=value1 value=1 1257894000000000000\n"


def _input_file(tmp_path: Path) -> Path:
    path = tmp_path / "metrics.jsonl"
    row = {
        "name": "test1",
        "tags": {"tag1": "value1"},
        "fields": {"value": 1.0},
        "timestamp": 1257894000000000000,
    }
    path.write_text(json.dumps(row) + "\n", encoding="utf-8")
    return path


def test_write_to_files(tmp_path: Path) -> None:
    first, second = tmp_path / "a.out", tmp_path / "b.out.gz"
    first.write_text("cpu,cpu=cpu0 value=100 1455312810012459582\n")

    result = runner.invoke(app, ["write", str(_input_file(tmp_path)), "-f", str(first)])
    assert result.exit_code == 0, result.output
    result = runner.invoke(
        app,
        ["write", str(_input_file(tmp_path)), "-f", str(second), "--compression", "gzip"],
    )
    assert result.exit_code == 0, result.output

    assert first.read_text() == "cpu,cpu=cpu0 value=100 1455312810012459582\n" + EXPECTED
    assert gzip.decompress(second.read_bytes()).decode() == EXPECTED


def test_write_to_stdout_from_config(tmp_path: Path) -> None:
    config_file = tmp_path / "sink.yaml"
    config_file.write_text("output:\n  files: [stdout]\n")

    result = runner.invoke(
        app, ["write", str(_input_file(tmp_path)), "--config", str(config_file)]
    )

    assert result.exit_code == 0
    assert result.stdout == EXPECTED


def test_write_rejects_bad_compression_before_creating_files(tmp_path: Path) -> None:
    target = tmp_path / "never.out"
    result = runner.invoke(
        app,
        ["write", str(_input_file(tmp_path)), "-f", str(target), "--compression", "zstd", "--level", "4"],
    )
    assert result.exit_code == 1
    assert not target.exists()


def test_write_missing_input(tmp_path: Path) -> None:
    result = runner.invoke(app, ["write", str(tmp_path / "absent.jsonl")])
    assert result.exit_code == 1


def test_check_reports_plan_as_json(tmp_path: Path) -> None:
    existing = tmp_path / "existing.out"
    existing.write_text("")
    fresh = tmp_path / "fresh.out"

    result = runner.invoke(
        app,
        ["check", "-f", "stdout", "-f", str(existing), "-f", str(fresh), "--compression", "zstd", "--format", "json"],
    )

    assert result.exit_code == 0
    plans = json.loads(result.stdout)
    assert [plan["mode"] for plan in plans] == ["stream", "append", "create"]
    assert {plan["compression"] for plan in plans} == {"zstd:3"}
    assert not fresh.exists()


def test_check_table_and_invalid_level(tmp_path: Path) -> None:
    result = runner.invoke(app, ["check", "-f", str(tmp_path / "x.out")])
    assert result.exit_code == 0
    assert "create" in result.stdout

    result = runner.invoke(app, ["check", "--compression", "gzip", "--level", "12"])
    assert result.exit_code == 1


def test_sample_config() -> None:
    result = runner.invoke(app, ["sample-config"])
    assert result.exit_code == 0
    assert result.stdout == SAMPLE_CONFIG


def test_write_rejects_malformed_rows_with_exit_code(tmp_path: Path) -> None:
    source = tmp_path / "bad.jsonl"
    target = tmp_path / "out.log"
    source.write_text(json.dumps({"name": "m", "fields": [1]}) + "\n", encoding="utf-8")

    result = runner.invoke(app, ["write", str(source), "-f", str(target)])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert not target.exists()
