"""
Numeric helpers shared by the data model and the calculators.

Leaf module: imports nothing from the engine, so models and stats can
both depend on it.
"""

from __future__ import annotations

import math


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def clamp01(x: float) -> float:
    """Bound x to [0, 1]."""
    return max(0.0, min(1.0, x))


def finite_or_zero(x: float) -> float:
    """x as float, with nan and +/-inf mapped to 0.0."""
    x = float(x)
    return x if math.isfinite(x) else 0.0


def finite_nonneg(x: float) -> float:
    """Non-negative finite float; nan, inf and negatives become 0.0."""
    return max(0.0, finite_or_zero(x))


def round_half_up(x: float) -> int:
    """Round to nearest integer with .5 going up (Python's round() is banker's rounding)."""
    return int(math.floor(x + 0.5))
