"""Pytest configuration and shared fixtures for the metric sink."""
from __future__ import annotations

import io
import itertools
from pathlib import Path

import pytest

try:
    from metric_sink.env import load_env
    from metric_sink.metric import Metric
except ImportError as exc:
    raise RuntimeError(
        "metric_sink is not importable. Activate your virtualenv and run "
        "'pip install -e .[dev]' before running pytest."
    ) from exc

# Load default runtime env first, then overlay .env.test if provided
load_env()
test_env = Path(".env.test")
if test_env.exists():
    load_env(dotenv_path=test_env, override=True)

EXISTING_LINE = "cpu,cpu=cpu0 value=100 1455312810012459582\n"


@pytest.fixture
def mock_metrics() -> list[Metric]:
    return [
        Metric(
            name="test1",
            tags={"tag1": "value1"},
            fields={"value": 1.0},
            timestamp=1257894000000000000,
        )
    ]


@pytest.fixture
def existing_file(tmp_path: Path):
    """Factory for files that already hold one line of metrics."""
    counter = itertools.count()

    def _make() -> Path:
        path = tmp_path / f"existing-{next(counter)}.out"
        path.write_text(EXISTING_LINE, encoding="utf-8")
        return path

    return _make


@pytest.fixture
def new_file(tmp_path: Path):
    """Factory for paths that do not exist yet."""
    counter = itertools.count()

    def _make() -> Path:
        return tmp_path / f"new-{next(counter)}.out"

    return _make


@pytest.fixture
def stdout_buffer() -> io.BytesIO:
    return io.BytesIO()
