"""Serializer interface and the InfluxDB line-protocol implementation."""
from __future__ import annotations

import math
from decimal import Decimal
from typing import Iterable, Protocol

from .metric import FieldValue, Metric

_MEASUREMENT_ESCAPES = str.maketrans({",": r"\,", " ": r"\ ", "\n": r"\n"})
_KEY_ESCAPES = str.maketrans({",": r"\,", "=": r"\=", " ": r"\ ", "\n": r"\n"})
_STRING_ESCAPES = str.maketrans({"\\": "\\\\", '"': '\\"'})


class Serializer(Protocol):
    """Turns metrics into newline-terminated encoded records."""

    def serialize(self, metric: Metric) -> bytes:
        """Encode a single metric."""

    def serialize_batch(self, metrics: Iterable[Metric]) -> bytes:
        """Encode an ordered batch of metrics into one buffer."""


def _format_float(value: float) -> str:
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _format_field_value(value: FieldValue) -> str | None:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return f"{value}i"
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return _format_float(value)
    if isinstance(value, str):
        return f'"{value.translate(_STRING_ESCAPES)}"'
    return None


class InfluxSerializer(Serializer):
    """InfluxDB line protocol, one line per metric."""

    def serialize(self, metric: Metric) -> bytes:
        head = metric.name.translate(_MEASUREMENT_ESCAPES)
        for key in sorted(metric.tags):
            value = metric.tags[key]
            if key == "" or value == "":
                continue
            head += f",{key.translate(_KEY_ESCAPES)}={value.translate(_KEY_ESCAPES)}"

        fields = []
        for key, value in metric.fields.items():
            encoded = _format_field_value(value)
            if encoded is None:
                # NaN/Inf and unsupported types have no line-protocol form.
                continue
            fields.append(f"{key.translate(_KEY_ESCAPES)}={encoded}")
        if not fields:
            raise ValueError(f"Metric {metric.name!r} has no serializable fields")

        line = f"{head} {','.join(fields)} {metric.timestamp}\n"
        return line.encode("utf-8")

    def serialize_batch(self, metrics: Iterable[Metric]) -> bytes:
        return b"".join(self.serialize(metric) for metric in metrics)


__all__ = ["Serializer", "InfluxSerializer"]
