"""Unit tests for the configuration loader."""
from __future__ import annotations

from pathlib import Path

import pytest

from metric_sink.config import ConfigLoader, FileOutputConfig
from metric_sink.env import ENV_FILE_VARIABLE, load_env
from metric_sink.writer import WriterConfig


def test_config_loader_parses_output(tmp_path: Path) -> None:
    config_payload = """
    output:
      files: "stdout, /var/log/metrics.out"
      compression_algorithm: zstd
      compression_level: 7
      use_batch_format: true
    """
    config_file = tmp_path / "config.yaml"
    config_file.write_text(config_payload)

    loader = ConfigLoader(path=config_file)

    assert loader.model.output.files == ["stdout", "/var/log/metrics.out"]
    assert loader.writer_config() == WriterConfig(
        files=("stdout", "/var/log/metrics.out"),
        compression_algorithm="zstd",
        compression_level=7,
        use_batch_format=True,
    )


def test_config_defaults_to_stdout(tmp_path: Path) -> None:
    config_file = tmp_path / "empty.yaml"
    config_file.write_text("")

    output = ConfigLoader(path=config_file).model.output

    assert output.files == ["stdout"]
    assert output.compression_algorithm == ""
    assert output.compression_level is None


def test_config_loader_uses_env_path(tmp_path: Path, monkeypatch) -> None:
    config_file = tmp_path / "from_env.yaml"
    config_file.write_text("output:\n  files: [a.out]\n  compression_algorithm: null\n")
    monkeypatch.setenv("METRIC_SINK_CONFIG_PATH", str(config_file))

    output = ConfigLoader().model.output

    assert output.files == ["a.out"]
    assert output.compression_algorithm == ""


def test_config_loader_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        ConfigLoader(path=tmp_path / "nope.yaml")


def test_config_loader_rejects_bad_types(tmp_path: Path) -> None:
    config_file = tmp_path / "bad.yaml"
    config_file.write_text("output:\n  compression_level: fast\n")
    with pytest.raises(ValueError):
        ConfigLoader(path=config_file)


def test_compression_is_not_validated_by_the_model() -> None:
    # algorithm/level checks belong to FileWriter.init
    output = FileOutputConfig(compression_algorithm="asda", compression_level=99)
    assert output.to_writer_config().compression_algorithm == "asda"


def test_env_file_variable_points_at_dotenv(tmp_path: Path, monkeypatch) -> None:
    config_file = tmp_path / "via_dotenv.yaml"
    config_file.write_text("output:\n  files: [b.out]\n")
    env_file = tmp_path / "sink.env"
    env_file.write_text(f"METRIC_SINK_CONFIG_PATH={config_file}\n")
    monkeypatch.setenv("METRIC_SINK_CONFIG_PATH", "overridden-by-dotenv.yaml")
    monkeypatch.setenv(ENV_FILE_VARIABLE, str(env_file))

    assert load_env(override=True) is True
    assert ConfigLoader().model.output.files == ["b.out"]
