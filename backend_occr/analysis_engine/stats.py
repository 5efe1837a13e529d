"""
Statistics primitives shared by the subscore calculators.

Clamping, logistic recency weighting, collateral riskiness and a seeded
normal generator. The generator is Mulberry32 feeding a Box-Muller
transform: same seed, same draws, on every platform, so Monte Carlo
subscores are reproducible for a fixed snapshot.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import datetime

from backend_occr.analysis_engine.models import Collateral
from backend_occr.analysis_engine.numeric import clamp, clamp01, round_half_up  # noqa: F401

RECENCY_SLOPE = 10.0
RECENCY_MIDPOINT = 0.5
SIGMA_FLOOR = 1e-9
NEUTRAL_COLLATERAL_RISK = 0.5

_MASK32 = 0xFFFFFFFF
_MULBERRY_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def logistic_recency(
    ts: datetime,
    min_ts: datetime,
    max_ts: datetime,
    *,
    slope: float = RECENCY_SLOPE,
) -> float:
    """
    Recency weight in [0, 1] for ts within the observed [min_ts, max_ts] span.

    ts is mapped linearly to x in [0, 1] over the span, then passed through
    1 / (1 + e^{-(x - 0.5) * slope}) so recent events weigh more. A
    degenerate span (single event, identical timestamps) yields exactly 0.5.
    """
    span = (max_ts - min_ts).total_seconds()
    if span <= 0:
        return 0.5
    x = (ts - min_ts).total_seconds() / span
    return 1.0 / (1.0 + math.exp(-(x - RECENCY_MIDPOINT) * slope))


def collateral_risk_ratio(collaterals: Iterable[Collateral]) -> float:
    """
    USD-weighted relative riskiness of a collateral basket, in [0, 1].

    sum(amount_k * sigma_k / sigma_max) / sum(amount_k). Returns the
    uninformed midpoint 0.5 for an empty basket or a non-positive total.
    Missing per-leg volatility is filled (0.6) when the Collateral is built.
    """
    legs = list(collaterals)
    if not legs:
        return NEUTRAL_COLLATERAL_RISK
    sigmas = [max(0.0, c.volatility) for c in legs]
    sigma_max = max(max(sigmas), SIGMA_FLOOR)
    total = sum(max(0.0, c.amount_usd) for c in legs)
    if total <= 0:
        return NEUTRAL_COLLATERAL_RISK
    weighted = sum(max(0.0, c.amount_usd) * (s / sigma_max) for c, s in zip(legs, sigmas))
    return clamp01(weighted / total)


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply."""
    return (a * b) & _MASK32


class Mulberry32:
    """Deterministic 32-bit PRNG producing uniforms in [0, 1)."""

    __slots__ = ("_state",)

    def __init__(self, seed: int) -> None:
        self._state = int(seed) & _MASK32

    def next_float(self) -> float:
        self._state = (self._state + _MULBERRY_INCREMENT) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / _TWO_POW_32


def gaussian(rng: Mulberry32) -> float:
    """One N(0, 1) draw via Box-Muller over two non-zero uniforms."""
    u = 0.0
    v = 0.0
    while u == 0.0:
        u = rng.next_float()
    while v == 0.0:
        v = rng.next_float()
    return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)


def seeded_normal(seed: int) -> float:
    """First N(0, 1) draw of a generator seeded with seed."""
    return gaussian(Mulberry32(seed))
