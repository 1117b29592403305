"""SQL data feed for tournament histories."""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

from sqlalchemy import create_engine, text

from ..config import get_settings
from ..core.records import TournamentRecord, normalise_records

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


def _row_to_dict(row) -> Dict[str, Any]:
    if hasattr(row, "_mapping"):
        return dict(row._mapping)
    return dict(row)


def load_records_sql(dsn: Optional[str] = None, table: Optional[str] = None) -> List[TournamentRecord]:
    """Read every row of ``table`` and return the valid tournament records.

    Column names follow the same aliases as file imports, so a table with the
    spreadsheet headers (``Data``, ``Profit``, ``Buy-In`` ...) or with the
    snake_case field names both work.
    """

    settings = get_settings()
    url = dsn or settings.db_dsn
    if not url:
        raise RuntimeError("No database URL configured; pass dsn or set TS_DB_DSN")
    table = table or settings.db_table
    if not _IDENTIFIER.match(table):
        raise ValueError(f"Invalid table name: {table!r}")

    engine = create_engine(url)
    try:
        with engine.connect() as conn:
            rows = conn.execute(text(f"SELECT * FROM {table}")).fetchall()
    finally:
        engine.dispose()
    records = normalise_records(_row_to_dict(r) for r in rows)
    logger.info("Loaded %d records from table %s", len(records), table)
    return records


__all__ = ["load_records_sql"]
