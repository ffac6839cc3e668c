"""Helpers for formatting destination plans for the ``check`` command."""
from __future__ import annotations

import json
from typing import Iterable, List

from tabulate import tabulate

from .destination import DestinationPlan


def format_plans(plans: Iterable[DestinationPlan], output_format: str = "table") -> str:
    rows = list(plans)
    if not rows:
        return "No destinations configured."
    if output_format == "json":
        payload: List[dict] = [
            {
                "position": position,
                "name": row.name,
                "kind": row.kind,
                "mode": row.mode,
                "compression": row.compression,
            }
            for position, row in enumerate(rows)
        ]
        return json.dumps(payload, indent=2)

    table_data = [
        [position, row.name, row.kind, row.mode, row.compression]
        for position, row in enumerate(rows)
    ]
    headers = ["#", "name", "kind", "mode", "compression"]
    return tabulate(table_data, headers=headers, tablefmt="plain")


__all__ = ["format_plans"]
