"""Guarded ratio helpers shared by the aggregators."""
from __future__ import annotations

import numpy as np


def safe_ratio(numerator: float, denominator: float) -> float:
    """Return ``numerator / denominator`` or ``0.0`` when undefined."""

    if not denominator:
        return 0.0
    value = numerator / denominator
    return float(value) if np.isfinite(value) else 0.0


def pct(count: float, total: float) -> float:
    """Return ``count`` as a percentage of ``total``."""

    return safe_ratio(count, total) * 100


def roi_pct(profit: float, total_buy_in: float) -> float:
    """Return ROI in percent, ``0.0`` when nothing was invested."""

    if total_buy_in <= 0:
        return 0.0
    return safe_ratio(profit, total_buy_in) * 100


__all__ = ["safe_ratio", "pct", "roi_pct"]
