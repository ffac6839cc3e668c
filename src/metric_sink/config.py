"""Typed configuration loader for the metric sink."""
from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .destination import STDOUT
from .env import load_env
from .writer import WriterConfig

load_env()


class FileOutputConfig(BaseModel):
    files: List[str] = Field(default_factory=lambda: [STDOUT])
    compression_algorithm: str = Field("", description="none, gzip or zstd")
    compression_level: Optional[int] = None
    use_batch_format: bool = False

    @field_validator("files", mode="before")
    @classmethod
    def _split_files(cls, value):
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("compression_algorithm", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        if value is None:
            return ""
        return value

    def to_writer_config(self) -> WriterConfig:
        return WriterConfig(
            files=tuple(self.files),
            compression_algorithm=self.compression_algorithm,
            compression_level=self.compression_level,
            use_batch_format=self.use_batch_format,
        )


class SinkConfig(BaseModel):
    output: FileOutputConfig = Field(default_factory=FileOutputConfig)


class ConfigLoader:
    """Loads YAML driven configuration and validates it with Pydantic."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.config_path = Path(
            path or os.getenv("METRIC_SINK_CONFIG_PATH", "config/metric_sink.yaml")
        )
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        self.model = self._parse_yaml()

    def _parse_yaml(self) -> SinkConfig:
        raw: dict
        with self.config_path.open("r", encoding="utf-8") as fp:
            raw = yaml.safe_load(fp) or {}
        try:
            return SinkConfig(**raw)
        except ValidationError as exc:
            raise ValueError(f"Invalid configuration: {exc}") from exc

    def writer_config(self) -> WriterConfig:
        return self.model.output.to_writer_config()


__all__ = [
    "ConfigLoader",
    "FileOutputConfig",
    "SinkConfig",
]
