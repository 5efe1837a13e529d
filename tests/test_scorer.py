"""
Tests for composite aggregation and tier assignment.
"""

from __future__ import annotations

import pytest

from backend_occr.analysis_engine.models import Subscores, Tier
from backend_occr.analysis_engine.scorer import (
    TierThresholds,
    assign_tier,
    composite_probability,
    compute_composite,
    tier_code,
)
from backend_occr.core.exceptions import ConfigError


def test_worst_case_is_one_thousand():
    sub = Subscores(historical=1.0, current=1.0, utilization=0.0, activity=-1.0, new_credit=1.0)
    result = compute_composite(sub)
    assert result.probability == pytest.approx(1.0)
    assert result.score == 1000
    assert result.tier is Tier.D
    assert result.tier_code == 3


def test_best_case_clamps_to_zero():
    sub = Subscores(historical=0.0, current=0.0, utilization=1.0, activity=1.0, new_credit=0.0)
    result = compute_composite(sub)
    assert result.probability == 0.0
    assert result.score == 0
    assert result.tier is Tier.A


def test_empty_wallet_defaults():
    """Neutral utilization alone contributes 0.15 * 2/3 = 0.1."""
    sub = Subscores(historical=0.0, current=0.0, utilization=1 / 3, activity=0.0, new_credit=0.0)
    result = compute_composite(sub)
    assert result.probability == pytest.approx(0.1)
    assert result.score == 100
    assert result.tier is Tier.A


def test_weights():
    sub = Subscores(historical=0.4, current=0.2, utilization=0.5, activity=0.2, new_credit=0.5)
    expected = 0.35 * 0.4 + 0.25 * 0.2 + 0.15 * 0.5 - 0.15 * 0.2 + 0.10 * 0.5
    assert composite_probability(sub) == pytest.approx(expected)


@pytest.mark.parametrize(
    "probability,tier",
    [
        (0.0, Tier.A),
        (0.15, Tier.A),
        (0.1500001, Tier.B),
        (0.30, Tier.B),
        (0.30001, Tier.C),
        (0.45, Tier.C),
        (0.60, Tier.C),
        (0.60001, Tier.D),
        (0.61, Tier.D),
        (1.0, Tier.D),
    ],
)
def test_tier_boundaries_are_inclusive(probability, tier):
    assert assign_tier(probability) is tier


def test_custom_thresholds():
    tiers = TierThresholds(a_max=0.05, b_max=0.10, c_max=0.20)
    assert assign_tier(0.1, tiers) is Tier.B
    assert assign_tier(0.25, tiers) is Tier.D


def test_tier_codes():
    assert [tier_code(t) for t in "ABCD"] == [0, 1, 2, 3]
    assert tier_code(Tier.C) == 2


def test_score_matches_probability():
    sub = Subscores(historical=0.5, current=0.3, utilization=0.4, activity=-0.2, new_credit=0.0)
    result = compute_composite(sub)
    assert result.score == int(result.probability * 1000 + 0.5)
    assert 0 <= result.score <= 1000


@pytest.mark.parametrize(
    "tiers",
    [
        TierThresholds(a_max=0.3, b_max=0.2, c_max=0.6),
        TierThresholds(a_max=-0.1, b_max=0.2, c_max=0.6),
        TierThresholds(a_max=0.1, b_max=0.2, c_max=1.5),
        TierThresholds(a_max=float("nan"), b_max=0.2, c_max=0.6),
    ],
)
def test_invalid_thresholds_raise(tiers):
    with pytest.raises(ConfigError):
        tiers.validate()


def test_result_to_dict_order():
    sub = Subscores(historical=0.0, current=0.0, utilization=1 / 3, activity=0.0, new_credit=0.0)
    d = compute_composite(sub).to_dict()
    assert list(d) == ["s_h", "s_c", "s_cu", "s_ct", "s_nc", "probability", "score", "tier", "tier_code"]
    assert d["tier"] == "A"
    assert d["tier_code"] == 0
