"""Utilities to turn bundles into plain data and persist them."""
from __future__ import annotations
import json
from dataclasses import fields, is_dataclass
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Dict


def to_plain(value: Any) -> Any:
    """Recursively convert dataclasses, enums and dates into JSON-ready data."""

    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


def write_bundle(path: str | Path, bundle: Any) -> Path:
    """Write a bundle (dataclass or dict) as indented JSON."""

    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    payload: Dict[str, Any] = to_plain(bundle)
    out.write_text(json.dumps(payload, indent=2))
    return out


__all__ = ["to_plain", "write_bundle"]
