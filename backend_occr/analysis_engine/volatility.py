"""
Annualized volatility estimation from a price series.

The engine consumes volatility however it was obtained; this helper turns
a price history (already fetched by a collaborator) into the sigma proxy
the snapshot expects. Log returns, sample standard deviation, scaled to a
252-trading-day year and clamped to a sane band.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import numpy as np

from backend_occr.analysis_engine.models import DEFAULT_VOLATILITY

TRADING_DAYS_PER_YEAR = 252
MIN_RETURNS = 3
SIGMA_FLOOR = 0.05
SIGMA_CAP = 3.0


def annualized_volatility(
    prices: Sequence[float],
    *,
    steps_per_day: float = 1.0,
    trading_days: int = TRADING_DAYS_PER_YEAR,
    fallback: float = DEFAULT_VOLATILITY,
    floor: float = SIGMA_FLOOR,
    cap: float = SIGMA_CAP,
) -> float:
    """
    Estimate annualized sigma from consecutive prices.

    Args:
        prices: Price observations in time order, evenly spaced.
        steps_per_day: Observations per day (1440 for minute bars).
        trading_days: Trading days per year for annualization.
        fallback: Returned when fewer than 3 usable log returns exist.
        floor: Lower clamp on the result.
        cap: Upper clamp on the result.

    Returns:
        sigma in [floor, cap], or fallback.
    """
    arr = np.asarray(prices, dtype=np.float64)
    if arr.size < 2:
        return fallback
    p0 = arr[:-1]
    p1 = arr[1:]
    valid = (p0 > 0) & (p1 > 0) & np.isfinite(p0) & np.isfinite(p1)
    if int(valid.sum()) < MIN_RETURNS:
        return fallback
    returns = np.log(p1[valid] / p0[valid])
    sigma_step = float(np.std(returns, ddof=1))
    sigma_annual = sigma_step * float(np.sqrt(max(1.0, steps_per_day) * trading_days))
    return float(min(cap, max(floor, sigma_annual)))


def volatility_table(
    price_history: Mapping[str, Sequence[float]],
    **kwargs,
) -> dict[str, float]:
    """Map symbol -> annualized sigma; keys are upper-cased to match snapshot symbols."""
    return {
        symbol.upper(): annualized_volatility(prices, **kwargs)
        for symbol, prices in price_history.items()
    }
