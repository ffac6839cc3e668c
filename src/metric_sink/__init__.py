"""File and stdout sink for serialized metric batches."""
from importlib.metadata import version, PackageNotFoundError

from .errors import (
    CloseError,
    ConfigurationError,
    LifecycleError,
    MetricSinkError,
    ResolutionError,
    SerializationError,
    WriteError,
)
from .metric import Metric
from .serializer import InfluxSerializer, Serializer
from .writer import FileWriter, WriterConfig, WriterState

try:
    __version__ = version("metric-sink")
except PackageNotFoundError:  # pragma: no cover - during local dev without install
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "CloseError",
    "ConfigurationError",
    "FileWriter",
    "InfluxSerializer",
    "LifecycleError",
    "Metric",
    "MetricSinkError",
    "ResolutionError",
    "SerializationError",
    "Serializer",
    "WriteError",
    "WriterConfig",
    "WriterState",
]
