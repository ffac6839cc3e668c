"""Loading of .env files ahead of configuration parsing."""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

ENV_FILE_VARIABLE = "METRIC_SINK_ENV_FILE"


def load_env(dotenv_path: str | Path | None = None, override: bool = False) -> bool:
    """Load ``dotenv_path``, else ``$METRIC_SINK_ENV_FILE``, else the nearest ``.env``.

    Returns True when a file was found and at least one variable was set.
    """
    path = dotenv_path or os.getenv(ENV_FILE_VARIABLE) or find_dotenv(usecwd=True)
    if not path:
        return False
    return load_dotenv(path, override=override)


__all__ = ["ENV_FILE_VARIABLE", "load_env"]
