"""Message and response models for the HTTP and task boundaries."""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

TaskStatus = Literal["completed", "failed", "superseded"]


class TaskMessage(BaseModel):
    """Request to build one bundle from a raw record list."""

    kind: str
    payload: List[Dict[str, Any]] = Field(default_factory=list)


class TaskResponse(BaseModel):
    """Outcome of a task: the bundle as plain data, or an error message."""

    kind: str
    status: TaskStatus
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class ErrorResponse(BaseModel):
    detail: str
