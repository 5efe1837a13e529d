"""
Composite OCCR score: fixed-weight aggregation and tiering.

probability = clamp01(0.35 s_h + 0.25 s_c + 0.15 (1 - s_cu) - 0.15 s_ct + 0.10 s_nc)
score = round(probability * 1000), tier A..D by configurable thresholds.
The weights are fixed: persisted scores are compared across runs.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from backend_occr.analysis_engine.models import CompositeResult, Subscores, Tier
from backend_occr.analysis_engine.stats import clamp01, round_half_up
from backend_occr.core.exceptions import ConfigError
from backend_occr.occr_logging import get_logger

logger = get_logger(__name__)

WEIGHT_HISTORICAL = 0.35
WEIGHT_CURRENT = 0.25
WEIGHT_UTILIZATION = 0.15
WEIGHT_ACTIVITY = -0.15
WEIGHT_NEW_CREDIT = 0.10

SCORE_SCALE = 1000


@dataclass(frozen=True)
class TierThresholds:
    """Inclusive upper probability bound for tiers A, B and C; above c_max is D."""

    a_max: float = 0.15
    b_max: float = 0.30
    c_max: float = 0.60

    def validate(self) -> None:
        values = (self.a_max, self.b_max, self.c_max)
        if any(not math.isfinite(v) for v in values):
            raise ConfigError(f"Tier thresholds must be finite: {values}")
        if not 0.0 <= self.a_max <= self.b_max <= self.c_max <= 1.0:
            raise ConfigError(
                f"Tier thresholds must satisfy 0 <= A <= B <= C <= 1, got "
                f"A={self.a_max} B={self.b_max} C={self.c_max}"
            )


DEFAULT_TIERS = TierThresholds()


def composite_probability(sub: Subscores) -> float:
    """Weighted composite in [0, 1]; utilization enters inverted, activity with a negative weight."""
    return clamp01(
        WEIGHT_HISTORICAL * sub.historical
        + WEIGHT_CURRENT * sub.current
        + WEIGHT_UTILIZATION * (1.0 - sub.utilization)
        + WEIGHT_ACTIVITY * sub.activity
        + WEIGHT_NEW_CREDIT * sub.new_credit
    )


def assign_tier(probability: float, thresholds: TierThresholds = DEFAULT_TIERS) -> Tier:
    """p <= a_max -> A; <= b_max -> B; <= c_max -> C; else D."""
    if probability <= thresholds.a_max:
        return Tier.A
    if probability <= thresholds.b_max:
        return Tier.B
    if probability <= thresholds.c_max:
        return Tier.C
    return Tier.D


def tier_code(tier: Tier | str) -> int:
    """Persistence encoding of a tier: A=0 .. D=3."""
    return Tier(tier).code


def compute_composite(
    sub: Subscores,
    thresholds: TierThresholds = DEFAULT_TIERS,
) -> CompositeResult:
    """Aggregate five subscores into probability, 0-1000 score and tier."""
    probability = composite_probability(sub)
    score = max(0, min(SCORE_SCALE, round_half_up(probability * SCORE_SCALE)))
    tier = assign_tier(probability, thresholds)
    logger.debug("composite_result", probability=probability, score=score, tier=tier.value)
    return CompositeResult(subscores=sub, probability=probability, score=score, tier=tier)
