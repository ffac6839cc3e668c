"""Exception hierarchy raised by the metric sink."""
from __future__ import annotations


class MetricSinkError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(MetricSinkError):
    """Unknown compression algorithm or a level the algorithm does not support."""


class LifecycleError(MetricSinkError):
    """An operation was called in a writer state that does not allow it."""


class SerializationError(MetricSinkError):
    """The serializer could not encode a metric batch."""


class DestinationError(MetricSinkError):
    """Failure tied to one configured destination."""

    action = "use"

    def __init__(self, destination: str, reason: object) -> None:
        self.destination = destination
        self.reason = reason
        super().__init__(f"Failed to {self.action} destination {destination!r}: {reason}")


class ResolutionError(DestinationError):
    """A destination path could not be opened or created."""

    action = "open"


class WriteError(DestinationError):
    """A destination's writer chain failed mid-write."""

    action = "write to"


class CloseError(DestinationError):
    """Flushing or closing a destination failed."""

    action = "close"


__all__ = [
    "MetricSinkError",
    "ConfigurationError",
    "LifecycleError",
    "SerializationError",
    "DestinationError",
    "ResolutionError",
    "WriteError",
    "CloseError",
]
