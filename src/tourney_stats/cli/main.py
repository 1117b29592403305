"""Command line interface entry points."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from ..config import get_settings
from ..core.records import TournamentRecord

app = typer.Typer()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Overrides TS_LOG_LEVEL"),
) -> None:
    """Tournament statistics reports."""

    level = (log_level or get_settings().log_level).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format="%(levelname)s %(name)s: %(message)s")


def _load(records: Optional[Path], db: Optional[str], table: Optional[str]) -> List[TournamentRecord]:
    if records is not None and db is not None:
        typer.echo("Use either --records or --db, not both", err=True)
        raise typer.Exit(1)
    if records is not None:
        from ..core.dataset import load_records

        try:
            return load_records(records)
        except ValueError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(1)
    from ..datafeeds.sql_feed import load_records_sql

    try:
        return load_records_sql(db, table)
    except (RuntimeError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1)


def _emit(payload: Dict[str, Any], out: Optional[Path]) -> None:
    if out is not None:
        from ..io.artifacts import write_bundle

        write_bundle(out, payload)
    typer.echo(json.dumps(payload, separators=(",", ":")))


RecordsOpt = typer.Option(None, "--records", exists=True, file_okay=True, dir_okay=False)
DbOpt = typer.Option(None, "--db", help="SQLAlchemy URL; defaults to TS_DB_DSN")
TableOpt = typer.Option(None, "--table")
OutOpt = typer.Option(None, "--out", help="Also write the bundle to this JSON file")


@app.command("dashboard")
def dashboard(
    records: Optional[Path] = RecordsOpt,
    db: Optional[str] = DbOpt,
    table: Optional[str] = TableOpt,
    out: Optional[Path] = OutOpt,
) -> None:
    """Print the dashboard bundle."""

    from ..stats.facade import build_dashboard_bundle

    _emit(build_dashboard_bundle(_load(records, db, table)).to_dict(), out)


@app.command("dossier")
def dossier(
    records: Optional[Path] = RecordsOpt,
    db: Optional[str] = DbOpt,
    table: Optional[str] = TableOpt,
    out: Optional[Path] = OutOpt,
) -> None:
    """Print the dossier bundle with ITM and elimination-phase analyses."""

    from ..stats.facade import build_dossier_bundle

    _emit(build_dossier_bundle(_load(records, db, table)).to_dict(), out)


@app.command("monthly")
def monthly(
    records: Optional[Path] = RecordsOpt,
    db: Optional[str] = DbOpt,
    table: Optional[str] = TableOpt,
    out: Optional[Path] = OutOpt,
) -> None:
    """Print the monthly analysis bundle."""

    from ..stats.facade import build_monthly_analysis_bundle

    _emit(build_monthly_analysis_bundle(_load(records, db, table)).to_dict(), out)


@app.command("roi")
def roi(
    records: Optional[Path] = RecordsOpt,
    db: Optional[str] = DbOpt,
    table: Optional[str] = TableOpt,
    out: Optional[Path] = OutOpt,
) -> None:
    """Print overall, monthly and per-category ROI."""

    from ..stats.facade import build_roi_bundle

    _emit(build_roi_bundle(_load(records, db, table)).to_dict(), out)


@app.command("big-hits")
def big_hits(
    records: Optional[Path] = RecordsOpt,
    db: Optional[str] = DbOpt,
    table: Optional[str] = TableOpt,
    limit: int = typer.Option(20, "--limit", min=1),
    out: Optional[Path] = OutOpt,
) -> None:
    """Print the largest prizes and their yearly totals."""

    from ..stats.facade import build_big_hits_bundle

    _emit(build_big_hits_bundle(_load(records, db, table), limit=limit).to_dict(), out)


if __name__ == "__main__":
    app()
