"""Dataset loading utilities.

Tournament histories are exported as CSV (one row per tournament, the
spreadsheet headers are accepted) or as JSON, either a bare list
of rows or an object with a ``data`` list.  Rows go through
``normalise_records`` so malformed lines are skipped instead of aborting
the load.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from .records import TournamentRecord, normalise_records

logger = logging.getLogger(__name__)


def _read_csv_rows(path: Path) -> List[Dict[str, Any]]:
    df = pd.read_csv(path, skip_blank_lines=True)
    df.columns = [str(c).strip() for c in df.columns]
    return df.to_dict("records")


def _read_json_rows(path: Path) -> List[Dict[str, Any]]:
    raw = json.loads(path.read_text())
    if isinstance(raw, dict):
        raw = raw.get("data", [])
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a list of rows or an object with a 'data' list")
    return raw


def load_records(path: str | Path) -> List[TournamentRecord]:
    """Load and validate tournament records from a CSV or JSON file."""

    p = Path(path)
    suffix = p.suffix.lower()
    if suffix == ".csv":
        rows = _read_csv_rows(p)
    elif suffix == ".json":
        rows = _read_json_rows(p)
    else:
        raise ValueError(f"Unsupported dataset format: {p.suffix or p.name}")
    records = normalise_records(rows)
    logger.info("Loaded %d records from %s", len(records), p)
    return records


__all__ = ["load_records"]
