"""Writer manager: validate, connect, fan out serialized batches, close."""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Optional, Sequence, Tuple

from .compression import CompressionSettings, validate_compression
from .destination import STDOUT, Destination, open_destination
from .errors import (
    CloseError,
    LifecycleError,
    SerializationError,
    WriteError,
)
from .metric import Metric
from .serializer import Serializer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WriterConfig:
    """Destination names and compression settings for a FileWriter."""

    files: Tuple[str, ...] = (STDOUT,)
    compression_algorithm: str = ""
    compression_level: Optional[int] = None
    use_batch_format: bool = False


class WriterState(str, Enum):
    UNINITIALIZED = "uninitialized"
    VALIDATED = "validated"
    CONNECTED = "connected"
    CLOSED = "closed"


class FileWriter:
    """Writes serialized metric batches to every configured destination.

    Lifecycle is ``init -> connect -> write* -> close``. The writer is not
    internally synchronized; callers must not call ``write`` or ``close``
    concurrently.
    """

    def __init__(
        self,
        config: WriterConfig,
        serializer: Serializer,
        stdout: BinaryIO | None = None,
    ) -> None:
        self.config = config
        self.serializer = serializer
        self._stdout = stdout
        self._settings: CompressionSettings | None = None
        self._destinations: list[Destination] = []
        self.state = WriterState.UNINITIALIZED

    @property
    def destination_names(self) -> Tuple[str, ...]:
        return tuple(self.config.files) or (STDOUT,)

    @property
    def destinations(self) -> Tuple[Destination, ...]:
        return tuple(self._destinations)

    @property
    def compression(self) -> CompressionSettings | None:
        return self._settings

    def init(self) -> None:
        """Validate compression settings. Never touches the filesystem."""
        self._settings = validate_compression(
            self.config.compression_algorithm, self.config.compression_level
        )
        if self.state is WriterState.UNINITIALIZED:
            self.state = WriterState.VALIDATED

    def connect(self) -> None:
        """Open every destination in configured order.

        If any destination cannot be opened, the ones already opened are
        closed again and the error propagates.
        """
        if self.state is WriterState.CONNECTED:
            raise LifecycleError("Writer is already connected; close it before reconnecting")
        if self._settings is None:
            self.init()
        settings = self._settings
        names = self.destination_names
        stdout = self._resolve_stdout() if STDOUT in names else None

        opened: list[Destination] = []
        try:
            for name in names:
                opened.append(open_destination(name, settings, stdout))
                logger.info(
                    "Opened destination %s compression=%s",
                    name,
                    settings.algorithm.value,
                )
        except Exception:
            self._release(opened, reason="rollback")
            raise
        self._destinations = opened
        self.state = WriterState.CONNECTED

    def write(self, metrics: Sequence[Metric]) -> None:
        """Serialize ``metrics`` once and copy the payload to every destination.

        Every destination is attempted; the first WriteError in configured
        order is raised afterwards.
        """
        if self.state is not WriterState.CONNECTED:
            raise LifecycleError(f"Cannot write while writer is {self.state.value}")
        if not metrics:
            return
        payload = self._serialize(metrics)

        first_error: WriteError | None = None
        for destination in self._destinations:
            try:
                destination.write(payload)
            except WriteError as exc:
                logger.warning("%s", exc)
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    def close(self) -> None:
        """Finalize and release every destination. No-op unless connected."""
        if self.state is not WriterState.CONNECTED:
            return
        destinations, self._destinations = self._destinations, []
        self.state = WriterState.CLOSED
        first_error = self._release(destinations, reason="close")
        if first_error is not None:
            raise first_error

    def __enter__(self) -> "FileWriter":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.close()
        except CloseError as close_error:
            if exc_type is None:
                raise
            logger.warning("%s (while handling %s)", close_error, exc_type.__name__)

    def _serialize(self, metrics: Sequence[Metric]) -> bytes:
        try:
            if self.config.use_batch_format:
                return self.serializer.serialize_batch(metrics)
            return b"".join(self.serializer.serialize(metric) for metric in metrics)
        except Exception as exc:
            raise SerializationError(f"Could not serialize {len(metrics)} metric(s): {exc}") from exc

    def _resolve_stdout(self) -> BinaryIO:
        if self._stdout is not None:
            return self._stdout
        return sys.stdout.buffer

    @staticmethod
    def _release(destinations: Sequence[Destination], reason: str) -> CloseError | None:
        first_error: CloseError | None = None
        for destination in destinations:
            try:
                destination.close()
            except CloseError as exc:
                logger.warning("%s (%s)", exc, reason)
                if first_error is None:
                    first_error = exc
            else:
                logger.info("Closed destination %s (%s)", destination.name, reason)
        return first_error


__all__ = ["FileWriter", "WriterConfig", "WriterState"]
