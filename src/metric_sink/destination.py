"""Destinations: one configured target with its raw sink and optional compressor."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Protocol

from .compression import CODEC_ERRORS, CompressionSettings, wrap_stream
from .errors import CloseError, ResolutionError, WriteError

STDOUT = "stdout"


class Destination(Protocol):
    """Writer chain for one configured destination name."""

    name: str

    def write(self, payload: bytes) -> None:
        """Push the full payload through the chain; raises WriteError."""

    def close(self) -> None:
        """Finalize and release the chain; raises CloseError. Idempotent."""


class FileDestination(Destination):
    """Uncompressed file opened for append."""

    def __init__(self, name: str, handle: BinaryIO) -> None:
        self.name = name
        self._handle = handle

    def write(self, payload: bytes) -> None:
        try:
            self._handle.write(payload)
            self._handle.flush()
        except (OSError, ValueError) as exc:
            raise WriteError(self.name, exc) from exc

    def close(self) -> None:
        if self._handle.closed:
            return
        try:
            self._handle.close()
        except OSError as exc:
            raise CloseError(self.name, exc) from exc


class CompressedFileDestination(Destination):
    """File with its own compressor chained directly in front of it."""

    def __init__(self, name: str, handle: BinaryIO, compressor: BinaryIO) -> None:
        self.name = name
        self._handle = handle
        self._compressor = compressor
        self._closed = False

    def write(self, payload: bytes) -> None:
        try:
            self._compressor.write(payload)
        except CODEC_ERRORS as exc:
            raise WriteError(self.name, exc) from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        error: Exception | None = None
        try:
            self._compressor.close()
        except CODEC_ERRORS as exc:
            error = exc
        try:
            self._handle.close()
        except OSError as exc:
            error = error or exc
        if error is not None:
            raise CloseError(self.name, error) from error


class StdoutDestination(Destination):
    """Process standard output; flushed on close, never closed."""

    def __init__(self, name: str, stream: BinaryIO) -> None:
        self.name = name
        self._stream = stream
        self._closed = False

    def write(self, payload: bytes) -> None:
        try:
            self._stream.write(payload)
        except (OSError, ValueError) as exc:
            raise WriteError(self.name, exc) from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._stream.flush()
        except (OSError, ValueError) as exc:
            raise CloseError(self.name, exc) from exc


class CompressedStdoutDestination(Destination):
    """Standard output behind a compressor; the compressor is closed, the stream is not."""

    def __init__(self, name: str, stream: BinaryIO, compressor: BinaryIO) -> None:
        self.name = name
        self._stream = stream
        self._compressor = compressor
        self._closed = False

    def write(self, payload: bytes) -> None:
        try:
            self._compressor.write(payload)
        except CODEC_ERRORS as exc:
            raise WriteError(self.name, exc) from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        error: Exception | None = None
        try:
            self._compressor.close()
        except CODEC_ERRORS as exc:
            error = exc
        try:
            self._stream.flush()
        except (OSError, ValueError) as exc:
            error = error or exc
        if error is not None:
            raise CloseError(self.name, error) from error


def open_destination(
    name: str, settings: CompressionSettings, stdout: BinaryIO | None = None
) -> Destination:
    """Resolve a destination name to an open writer chain.

    Existing files are appended to and missing files are created. Parent
    directories are not created.
    """
    if name == STDOUT:
        if stdout is None:
            raise ResolutionError(name, "no standard output stream available")
        if not settings.enabled:
            return StdoutDestination(name, stdout)
        try:
            compressor = wrap_stream(stdout, settings)
        except CODEC_ERRORS as exc:
            raise ResolutionError(name, exc) from exc
        return CompressedStdoutDestination(name, stdout, compressor)

    try:
        handle = Path(name).open("ab")
    except OSError as exc:
        raise ResolutionError(name, exc) from exc
    if not settings.enabled:
        return FileDestination(name, handle)
    try:
        compressor = wrap_stream(handle, settings)
    except CODEC_ERRORS as exc:
        handle.close()
        raise ResolutionError(name, exc) from exc
    return CompressedFileDestination(name, handle, compressor)


@dataclass(frozen=True)
class DestinationPlan:
    """What connecting to a destination name would do."""

    name: str
    kind: str  # stdout|file
    mode: str  # stream|append|create
    compression: str


def describe_destination(name: str, settings: CompressionSettings) -> DestinationPlan:
    compression = settings.algorithm.value
    if settings.level is not None:
        compression = f"{compression}:{settings.level}"
    if name == STDOUT:
        return DestinationPlan(name=name, kind="stdout", mode="stream", compression=compression)
    mode = "append" if Path(name).exists() else "create"
    return DestinationPlan(name=name, kind="file", mode=mode, compression=compression)


__all__ = [
    "STDOUT",
    "Destination",
    "FileDestination",
    "CompressedFileDestination",
    "StdoutDestination",
    "CompressedStdoutDestination",
    "DestinationPlan",
    "open_destination",
    "describe_destination",
]
