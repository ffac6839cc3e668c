"""Metric records handed to the sink by upstream stages."""
from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Mapping, Union

FieldValue = Union[float, int, bool, str]


@dataclass(frozen=True)
class Metric:
    """One tagged time-series point."""

    name: str
    tags: Mapping[str, str] = field(default_factory=dict)
    fields: Mapping[str, FieldValue] = field(default_factory=dict)
    timestamp: int = 0  # nanoseconds since the epoch

    @classmethod
    def from_row(cls, row: Mapping[str, object]) -> "Metric":
        """Build a metric from a decoded JSON object."""
        if not isinstance(row, Mapping):
            raise ValueError(f"Metric row must be a JSON object, got {type(row).__name__}")
        name = row.get("name")
        if not name:
            raise ValueError("Metric row is missing 'name'")
        fields = row.get("fields") or {}
        if not isinstance(fields, Mapping):
            raise ValueError(f"Metric {name!r} fields must be an object")
        if not fields:
            raise ValueError(f"Metric {name!r} has no fields")
        tags = row.get("tags") or {}
        if not isinstance(tags, Mapping):
            raise ValueError(f"Metric {name!r} tags must be an object")
        timestamp = row.get("timestamp")
        if timestamp is None:
            timestamp = time.time_ns()
        elif isinstance(timestamp, bool) or not isinstance(timestamp, (int, float, str)):
            raise ValueError(f"Metric {name!r} has an invalid timestamp: {timestamp!r}")
        else:
            try:
                timestamp = int(timestamp)
            except (ValueError, OverflowError) as exc:
                raise ValueError(f"Metric {name!r} has an invalid timestamp: {timestamp!r}") from exc
        return cls(
            name=str(name),
            tags={str(key): str(value) for key, value in tags.items()},
            fields=dict(fields),
            timestamp=timestamp,
        )


def read_metrics(path: Path | str) -> Iterator[Metric]:
    """Yield metrics from a JSON-lines file in file order."""
    with Path(path).open("r", encoding="utf-8") as handle:
        for line in handle:
            if line.strip():
                yield Metric.from_row(json.loads(line))


__all__ = ["Metric", "FieldValue", "read_metrics"]
