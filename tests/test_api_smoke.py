from pathlib import Path

import pytest

from tourney_stats.api import app
from tourney_stats.api.schemas import TaskMessage
from tourney_stats.core.dataset import load_records

DATA = Path(__file__).parent / "data"


def _rows():
    return [r.to_dict() for r in load_records(DATA / "tournaments.csv")]


def test_sync_helpers():
    rows = _rows()
    assert app.dashboard(rows)["total_tournaments"] == 7
    assert "elimination_phases" in app.dossier(rows)
    assert len(app.monthly_analysis(rows)["monthly_stats"]) == 5
    assert len(app.big_hits(rows, limit=3)["big_hits"]) == 3
    assert app.roi(rows)["total_buy_in"] == 1782
    response = app.run_task(TaskMessage(kind="big_hits", payload=rows))
    assert response.status == "completed"


def test_http_endpoints():
    pytest.importorskip("httpx")
    from fastapi.testclient import TestClient

    client = TestClient(app.fastapi_app)
    rows = _rows()
    resp = client.post("/dashboard", json=rows)
    assert resp.status_code == 200
    assert resp.json()["total_tournaments"] == 7
    resp = client.post("/big-hits?limit=1", json=rows)
    assert resp.json()["total_prize"] == 134000
    resp = client.post("/tasks", json={"kind": "dossier", "payload": rows})
    assert resp.status_code == 200
    assert resp.json()["status"] == "completed"
    resp = client.post("/tasks", json={"kind": "nope", "payload": rows})
    assert resp.status_code == 400
