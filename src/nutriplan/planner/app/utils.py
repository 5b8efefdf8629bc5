"""Shared helpers for planner modules."""

from __future__ import annotations

import math


def normalize_name(value: str) -> str:
    """Normalize free-text names for comparison."""
    return " ".join(value.lower().split())


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves towards positive infinity instead of to the nearest even digit."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    """Round to the nearest whole number with halves rounded up."""
    return int(math.floor(value + 0.5))
