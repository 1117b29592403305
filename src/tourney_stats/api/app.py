"""Synchronous bundle helpers and their FastAPI wrappers.

The helpers accept raw record lists and return plain dicts so the test suite
can call them without an HTTP client; the FastAPI application exposes the
same capabilities for the dashboard front end.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException, Query

from ..stats.facade import (
    BIG_HITS_LIMIT,
    BUNDLE_BUILDERS,
    build_big_hits_bundle,
    build_dashboard_bundle,
    build_dossier_bundle,
    build_monthly_analysis_bundle,
    build_roi_bundle,
)
from ..tasks.worker import handle_message
from . import schemas

logger = logging.getLogger(__name__)


def dashboard(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    return build_dashboard_bundle(records).to_dict()


def dossier(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    return build_dossier_bundle(records).to_dict()


def monthly_analysis(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    return build_monthly_analysis_bundle(records).to_dict()


def roi(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    return build_roi_bundle(records).to_dict()


def big_hits(records: List[Dict[str, Any]], limit: int = BIG_HITS_LIMIT) -> Dict[str, Any]:
    return build_big_hits_bundle(records, limit=limit).to_dict()


def run_task(message: schemas.TaskMessage) -> schemas.TaskResponse:
    """Run an offload message inline, exactly as a worker would."""

    return handle_message(message)


fastapi_app = FastAPI(title="Tourney Stats API", version="0.1.0")


@fastapi_app.post('/dashboard', response_model=Dict[str, Any])
def dashboard_endpoint(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Headline totals, monthly series and category breakdowns."""

    return dashboard(records)


@fastapi_app.post('/dossier', response_model=Dict[str, Any])
def dossier_endpoint(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Full report including ITM and elimination-phase analyses."""

    return dossier(records)


@fastapi_app.post('/monthly-analysis', response_model=Dict[str, Any])
def monthly_analysis_endpoint(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    return monthly_analysis(records)


@fastapi_app.post('/roi', response_model=Dict[str, Any])
def roi_endpoint(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Overall, monthly and per-category ROI."""

    return roi(records)


@fastapi_app.post('/big-hits', response_model=Dict[str, Any])
def big_hits_endpoint(
    records: List[Dict[str, Any]],
    limit: int = Query(BIG_HITS_LIMIT, ge=1, le=500),
) -> Dict[str, Any]:
    return big_hits(records, limit=limit)


@fastapi_app.post('/tasks', response_model=schemas.TaskResponse)
def task_endpoint(message: schemas.TaskMessage) -> schemas.TaskResponse:
    """Run a task message and return its response envelope."""

    if message.kind not in BUNDLE_BUILDERS:
        raise HTTPException(status_code=400, detail=f"Unknown task kind: {message.kind}")
    response = run_task(message)
    if response.status == "failed":
        logger.error("Task %s failed: %s", message.kind, response.error)
        raise HTTPException(status_code=500, detail=response.error or "Task failed")
    return response


app = fastapi_app
