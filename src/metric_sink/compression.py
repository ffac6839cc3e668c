"""Compression selection: validate an algorithm/level pair, then wrap a byte stream."""
from __future__ import annotations

import gzip
import zlib
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import BinaryIO, Optional

import zstandard

from .errors import ConfigurationError

GZIP_DEFAULT_LEVEL = 6  # zlib's Z_DEFAULT_COMPRESSION
GZIP_LEVELS = range(0, 10)

# Exceptions the stream wrappers can raise while writing or finalizing.
CODEC_ERRORS = (OSError, ValueError, zlib.error, zstandard.ZstdError)


class CompressionAlgorithm(str, Enum):
    NONE = "none"
    GZIP = "gzip"
    ZSTD = "zstd"


class ZstdLevel(IntEnum):
    """Speed tiers accepted for zstd."""

    FASTEST = 1
    DEFAULT = 3
    BETTER = 7
    BEST = 11


ZSTD_LEVELS = frozenset(tier.value for tier in ZstdLevel)

_ALIASES = {
    "": CompressionAlgorithm.NONE,
    "identity": CompressionAlgorithm.NONE,
}


@dataclass(frozen=True)
class CompressionSettings:
    """Validated algorithm together with its effective level."""

    algorithm: CompressionAlgorithm
    level: Optional[int] = None

    @property
    def enabled(self) -> bool:
        return self.algorithm is not CompressionAlgorithm.NONE


def parse_algorithm(name: str | None) -> CompressionAlgorithm:
    key = (name or "").strip().lower()
    if key in _ALIASES:
        return _ALIASES[key]
    try:
        return CompressionAlgorithm(key)
    except ValueError as exc:
        raise ConfigurationError(f"Unsupported compression algorithm: {name!r}") from exc


def validate_compression(algorithm: str | None, level: int | None = None) -> CompressionSettings:
    """Check an algorithm/level pair without touching any stream.

    ``None`` selects the algorithm's default level. gzip additionally treats
    ``-1`` as default and zstd treats ``0`` as default.
    """
    parsed = parse_algorithm(algorithm)
    if parsed is CompressionAlgorithm.NONE:
        return CompressionSettings(parsed)

    if parsed is CompressionAlgorithm.GZIP:
        if level is None or level == -1:
            return CompressionSettings(parsed, GZIP_DEFAULT_LEVEL)
        if level in GZIP_LEVELS:
            return CompressionSettings(parsed, int(level))
        raise ConfigurationError(
            f"Invalid gzip compression level {level}; expected -1 or 0-9"
        )

    if level is None or level == 0:
        return CompressionSettings(parsed, int(ZstdLevel.DEFAULT))
    if level in ZSTD_LEVELS:
        return CompressionSettings(parsed, int(level))
    tiers = ", ".join(f"{tier.value} ({tier.name.lower()})" for tier in ZstdLevel)
    raise ConfigurationError(
        f"Invalid zstd compression level {level}; expected one of {tiers}"
    )


def wrap_stream(raw: BinaryIO, settings: CompressionSettings) -> BinaryIO:
    """Chain a fresh compressing writer in front of ``raw``.

    Closing the returned writer finalizes the codec framing but leaves ``raw``
    open. With compression disabled ``raw`` itself is returned.
    """
    if settings.algorithm is CompressionAlgorithm.GZIP:
        return gzip.GzipFile(fileobj=raw, mode="wb", compresslevel=settings.level)
    if settings.algorithm is CompressionAlgorithm.ZSTD:
        compressor = zstandard.ZstdCompressor(level=settings.level)
        return compressor.stream_writer(raw, closefd=False)
    return raw


__all__ = [
    "CODEC_ERRORS",
    "CompressionAlgorithm",
    "CompressionSettings",
    "ZstdLevel",
    "parse_algorithm",
    "validate_compression",
    "wrap_stream",
]
