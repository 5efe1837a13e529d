"""
Tests for annualized volatility estimation from price series.
"""

from __future__ import annotations

import math

import pytest

from backend_occr.analysis_engine.volatility import annualized_volatility, volatility_table


def test_alternating_prices():
    prices = [100.0, 110.0] * 5 + [100.0]
    step = math.log(1.1) * math.sqrt(10 / 9)
    assert annualized_volatility(prices) == pytest.approx(step * math.sqrt(252))


def test_too_few_returns_falls_back():
    assert annualized_volatility([100.0, 101.0, 102.0]) == pytest.approx(0.6)
    assert annualized_volatility([]) == pytest.approx(0.6)
    assert annualized_volatility([100.0], fallback=0.4) == pytest.approx(0.4)


def test_invalid_prices_are_skipped():
    """Pairs touching a zero or NaN price are dropped before the return count."""
    prices = [100.0, 0.0, 100.0, float("nan"), 100.0, 101.0]
    assert annualized_volatility(prices) == pytest.approx(0.6)


def test_result_is_clamped():
    assert annualized_volatility([100.0, 200.0] * 5 + [100.0]) == pytest.approx(3.0)
    assert annualized_volatility([100.0] * 10) == pytest.approx(0.05)


def test_intraday_scaling():
    prices = [100.0, 100.1] * 20
    daily = annualized_volatility(prices, floor=0.0, cap=100.0)
    minute = annualized_volatility(prices, steps_per_day=1440, floor=0.0, cap=100.0)
    assert minute == pytest.approx(daily * math.sqrt(1440))


def test_volatility_table_upper_cases_symbols():
    table = volatility_table({"eth": [100.0, 110.0] * 5 + [100.0], "usdc": [1.0, 1.0]})
    assert set(table) == {"ETH", "USDC"}
    assert table["USDC"] == pytest.approx(0.6)
