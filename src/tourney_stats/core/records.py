"""Tournament record model and ingestion validation.

Raw rows arrive from CSV files, SQL tables or JSON payloads with loosely
typed values and a mix of field names (spreadsheet exports use
Portuguese column headers).  ``TournamentRecord.from_mapping`` validates a
single row once so the aggregation code can rely on a clean shape.
Malformed rows are skipped by ``normalise_records`` rather than failing the
whole batch.
"""
from __future__ import annotations

import datetime as dt
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

import numpy as np
import pandas as pd
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

logger = logging.getLogger(__name__)

FRAME_COLUMNS = [
    "date",
    "year",
    "month",
    "profit",
    "buy_in",
    "entries",
    "prize",
    "position",
    "tournament_type",
]

_DMY = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")


class MalformedRecordError(ValueError):
    """Raised when a raw row cannot be turned into a ``TournamentRecord``."""


def parse_date_text(value: str) -> dt.date:
    """Parse ISO dates, ISO timestamps and ``DD/MM/YYYY`` strings."""

    value = value.strip()
    match = _DMY.match(value)
    if match:
        day, month, year = (int(part) for part in match.groups())
        return dt.date(year, month, day)
    if "T" in value or " " in value:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return dt.datetime.fromisoformat(value).date()
    return dt.date.fromisoformat(value)


def _is_absent(value: Any) -> bool:
    if value is None or value is pd.NaT or value is pd.NA:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float):
        return math.isnan(value)
    return False


class RawTournamentRow(BaseModel):
    """Validation schema for one raw tournament row."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, allow_inf_nan=False)

    date: dt.date = Field(validation_alias=AliasChoices("date", "data", "Data"))
    profit: float = Field(validation_alias=AliasChoices("profit", "Profit"))
    network: Optional[str] = Field(None, validation_alias=AliasChoices("network", "rede", "Rede"))
    entries: int = Field(0, ge=0, validation_alias=AliasChoices("entries", "entradas", "Entradas"))
    position: Optional[int] = Field(
        None, ge=0, validation_alias=AliasChoices("position", "posicao", "Posição", "Posicao")
    )
    prize: Optional[float] = Field(None, ge=0, validation_alias=AliasChoices("prize", "Prize"))
    buy_in: float = Field(0.0, ge=0, validation_alias=AliasChoices("buy_in", "buyIn", "Buy-In"))
    tournament_type: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            "tournament_type", "tournamentType", "tipoTorneio", "Tipo de Torneio"
        ),
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_absent(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {
                key: value.item() if isinstance(value, np.generic) else value
                for key, value in data.items()
                if not _is_absent(value)
            }
        return data

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> Any:
        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, str):
            return parse_date_text(value)
        return value

    @field_validator("position")
    @classmethod
    def _zero_position_is_absent(cls, value: Optional[int]) -> Optional[int]:
        return value or None


@dataclass(frozen=True)
class TournamentRecord:
    """One tournament result, immutable once loaded."""

    date: dt.date
    profit: float
    network: Optional[str] = None
    entries: int = 0
    position: Optional[int] = None
    prize: Optional[float] = None
    buy_in: float = 0.0
    tournament_type: Optional[str] = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "TournamentRecord":
        try:
            row = RawTournamentRow.model_validate(dict(raw))
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'row'}: {err['msg']}"
                for err in exc.errors()
            )
            raise MalformedRecordError(problems) from exc
        return cls(
            date=row.date,
            profit=row.profit,
            network=row.network,
            entries=row.entries,
            position=row.position,
            prize=row.prize,
            buy_in=row.buy_in,
            tournament_type=row.tournament_type,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "profit": self.profit,
            "network": self.network,
            "entries": self.entries,
            "position": self.position,
            "prize": self.prize,
            "buy_in": self.buy_in,
            "tournament_type": self.tournament_type,
        }


def normalise_records(rows: Iterable[TournamentRecord | Mapping[str, Any]]) -> List[TournamentRecord]:
    """Return validated records, skipping rows that cannot be parsed."""

    records: List[TournamentRecord] = []
    skipped = 0
    for idx, row in enumerate(rows):
        if isinstance(row, TournamentRecord):
            records.append(row)
            continue
        if not isinstance(row, Mapping):
            skipped += 1
            logger.warning("Skipping row %d: expected a mapping, got %s", idx, type(row).__name__)
            continue
        try:
            records.append(TournamentRecord.from_mapping(row))
        except MalformedRecordError as exc:
            skipped += 1
            logger.warning("Skipping malformed row %d: %s", idx, exc)
    if skipped:
        logger.warning("Skipped %d malformed rows out of %d", skipped, skipped + len(records))
    return records


def records_frame(records: Iterable[TournamentRecord]) -> pd.DataFrame:
    """Project records onto a DataFrame with the columns in ``FRAME_COLUMNS``."""

    rows = [
        {
            "date": r.date,
            "year": r.date.year,
            "month": r.date.month,
            "profit": float(r.profit),
            "buy_in": float(r.buy_in),
            "entries": int(r.entries),
            "prize": r.prize,
            "position": r.position,
            "tournament_type": r.tournament_type,
        }
        for r in records
    ]
    if not rows:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    return pd.DataFrame.from_records(rows, columns=FRAME_COLUMNS)


__all__ = [
    "FRAME_COLUMNS",
    "MalformedRecordError",
    "RawTournamentRow",
    "TournamentRecord",
    "normalise_records",
    "parse_date_text",
    "records_frame",
]
