"""Command line interface for the metric sink."""
import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer

from .compression import validate_compression
from .config import ConfigLoader, FileOutputConfig
from .destination import STDOUT, describe_destination
from .destination_inspect import format_plans
from .errors import MetricSinkError
from .metric import read_metrics
from .serializer import InfluxSerializer
from .writer import FileWriter

# stdout carries metric output, so logs go to stderr.
logging.basicConfig(
    level=logging.INFO,
    stream=sys.stderr,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

logger = logging.getLogger(__name__)

app = typer.Typer(help="Write metric batches to files or stdout")

SAMPLE_CONFIG = """\
output:
  ## Files to write to, "stdout" is a specially handled file.
  files:
    - stdout
    - /tmp/metrics.out

  ## Compression algorithm: "none", "gzip" or "zstd".
  # compression_algorithm: none

  ## gzip accepts -1 (default) or 0-9.
  ## zstd accepts 1 (fastest), 3 (default), 7 (better) or 11 (best).
  # compression_level: -1

  ## Serialize the whole batch at once instead of metric by metric.
  # use_batch_format: false
"""


def _resolve_output(
    config_path: Optional[str],
    files: Optional[List[str]],
    compression: Optional[str],
    level: Optional[int],
) -> FileOutputConfig:
    output = ConfigLoader(config_path).model.output if config_path else FileOutputConfig()
    overrides: dict = {}
    if files:
        overrides["files"] = list(files)
    if compression is not None:
        overrides["compression_algorithm"] = compression
    if level is not None:
        overrides["compression_level"] = level
    return output.model_copy(update=overrides)


@app.command()
def write(
    input_path: Path = typer.Argument(..., help="JSON-lines file, one metric per line"),
    config_path: Optional[str] = typer.Option(None, "--config", help="YAML configuration file"),
    files: Optional[List[str]] = typer.Option(
        None, "--file", "-f", help="Destination path or 'stdout'; repeatable"
    ),
    compression: Optional[str] = typer.Option(None, "--compression"),
    level: Optional[int] = typer.Option(None, "--level"),
) -> None:
    """Serialize metrics from INPUT_PATH and write them to every destination."""
    try:
        output = _resolve_output(config_path, files, compression, level)
        metrics = list(read_metrics(input_path))
    except (OSError, ValueError) as exc:
        typer.echo(f"Could not load input: {exc}", err=True)
        raise typer.Exit(code=1)

    writer = FileWriter(output.to_writer_config(), InfluxSerializer())
    try:
        writer.init()
        writer.connect()
        try:
            writer.write(metrics)
        finally:
            writer.close()
    except MetricSinkError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    logger.info(
        "Wrote %s metric(s) to %s destination(s)",
        len(metrics),
        len(writer.destination_names),
    )


@app.command()
def check(
    config_path: Optional[str] = typer.Option(None, "--config", help="YAML configuration file"),
    files: Optional[List[str]] = typer.Option(None, "--file", "-f"),
    compression: Optional[str] = typer.Option(None, "--compression"),
    level: Optional[int] = typer.Option(None, "--level"),
    output_format: str = typer.Option("table", "--format", help="table or json"),
) -> None:
    """Validate compression settings and show what connecting would open."""
    try:
        output = _resolve_output(config_path, files, compression, level)
        settings = validate_compression(output.compression_algorithm, output.compression_level)
    except (OSError, ValueError, MetricSinkError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    plans = [describe_destination(name, settings) for name in output.files or [STDOUT]]
    typer.echo(format_plans(plans, output_format=output_format))


@app.command("sample-config")
def sample_config() -> None:
    """Print a commented sample configuration."""
    typer.echo(SAMPLE_CONFIG, nl=False)


if __name__ == "__main__":
    app()
