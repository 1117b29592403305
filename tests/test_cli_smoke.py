import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

pytest.importorskip("typer")

RECORDS_PATH = Path(__file__).parent / "data" / "tournaments.csv"
PYTHONPATH = str(Path(__file__).resolve().parents[1] / "src")


def _run(*args: str) -> subprocess.CompletedProcess:
    env = {**os.environ, "PYTHONPATH": PYTHONPATH, "TS_MONTH_LOCALE": "en"}
    return subprocess.run(
        [sys.executable, "-m", "tourney_stats.cli.main", *args],
        capture_output=True,
        text=True,
        env=env,
    )


@pytest.mark.skipif(not RECORDS_PATH.exists(), reason="records file missing")
def test_cli_dashboard() -> None:
    result = _run("dashboard", "--records", str(RECORDS_PATH))
    assert result.returncode == 0
    payload = json.loads(result.stdout)
    assert payload["total_tournaments"] == 7
    assert payload["monthly_stats"][0]["month_key"] == "May/22"


@pytest.mark.skipif(not RECORDS_PATH.exists(), reason="records file missing")
def test_cli_big_hits_writes_file(tmp_path: Path) -> None:
    out = tmp_path / "hits.json"
    result = _run("big-hits", "--records", str(RECORDS_PATH), "--limit", "2", "--out", str(out))
    assert result.returncode == 0
    assert json.loads(out.read_text())["total_prize"] == 139200


def test_cli_without_source_fails() -> None:
    env_dsn = os.environ.pop("TS_DB_DSN", None)
    try:
        result = _run("monthly")
    finally:
        if env_dsn is not None:
            os.environ["TS_DB_DSN"] = env_dsn
    assert result.returncode == 1
