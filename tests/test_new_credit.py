"""
Tests for new-credit behaviour s_nc.
"""

from __future__ import annotations

import math
from datetime import timedelta

import pytest

from backend_occr.analysis_engine.new_credit import (
    EARLIEST_CUTOFF,
    neighbour_gaps_days,
    new_credit_risk,
    window_cutoff,
)


@pytest.fixture
def burst_loans(make_loan):
    """Two old loans, then a burst of two large loans and a small recent one."""
    return [
        make_loan("L1", 200, 1000),
        make_loan("L2", 100, 1000),
        make_loan("L3", 10, 5000),
        make_loan("L4", 9, 5000),
        make_loan("L5", 2, 1000),
    ]


def test_no_loans_is_zero(as_of):
    assert new_credit_risk([], as_of) == 0.0


def test_single_loan_is_zero(make_loan, as_of):
    """Only neighbour is a sentinel; fallback mean gap 30 days cannot be met by an infinite gap."""
    assert new_credit_risk([make_loan("L1", 1, 1000)], as_of) == 0.0


def test_no_recent_loans_is_zero(make_loan, as_of):
    loans = [make_loan("L1", 90, 1000), make_loan("L2", 60, 1000)]
    assert new_credit_risk(loans, as_of) == 0.0


def test_neighbour_gaps_follow_input_order(make_loan):
    loans = [make_loan("B", 9, 1), make_loan("A", 10, 1), make_loan("C", 2, 1)]
    assert neighbour_gaps_days(loans) == pytest.approx([1.0, 1.0, 7.0])
    assert neighbour_gaps_days([make_loan("X", 3, 1)]) == [math.inf]


def test_burst_scores_two_thirds(burst_loans, as_of):
    """Recent: L3, L4, L5. Mean amount 3666.7, mean gap 39.8 days -> L3 and L4 hit."""
    assert new_credit_risk(burst_loans, as_of) == pytest.approx(2 / 3)


def test_narrow_window(burst_loans, as_of):
    """Only L5 is recent; it equals its own mean and its 7-day gap is below 39.8."""
    assert new_credit_risk(burst_loans, as_of, window_days=5) == pytest.approx(1.0)


def test_window_boundary_is_inclusive(make_loan, as_of):
    loans = [make_loan("L1", 30, 1000), make_loan("L2", 29, 1000)]
    assert new_credit_risk(loans, as_of, window_days=30) == pytest.approx(1.0)


def test_result_depends_on_as_of(burst_loans, as_of):
    assert new_credit_risk(burst_loans, as_of + timedelta(days=365)) == 0.0


def test_window_reaching_before_year_one_covers_all_loans(burst_loans, as_of):
    """All five loans are recent; mean amount 2600 -> L3 and L4 hit."""
    assert new_credit_risk(burst_loans, as_of, window_days=1_000_000) == pytest.approx(2 / 5)


@pytest.mark.parametrize("window_days", [1e6, 1e12, float("inf")])
def test_window_cutoff_saturates(as_of, window_days):
    assert window_cutoff(as_of, window_days) == EARLIEST_CUTOFF


@pytest.mark.parametrize("window_days", [0.0, -5.0, float("nan")])
def test_empty_window_starts_at_as_of(as_of, window_days):
    assert window_cutoff(as_of, window_days) == as_of
