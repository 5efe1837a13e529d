"""
Historical credit risk s_h: weighted liquidation frequency.

Each past loan gets weight w = amount * (1 - r) * exposure * t where r is
the collateral risk ratio, exposure the liquidated proportion and t the
logistic recency of its open date. s_h = sum(w * liquidated) / sum(w).
A liquidation on low-volatility collateral weighs more: it says more
about the borrower than about the market.
"""

from __future__ import annotations

from collections.abc import Sequence

from backend_occr.analysis_engine.models import LoanEvent
from backend_occr.analysis_engine.stats import clamp01, collateral_risk_ratio, logistic_recency
from backend_occr.occr_logging import get_logger

logger = get_logger(__name__)

EMPTY_HISTORY_SCORE = 0.0


def loan_weight(loan: LoanEvent, recency: float) -> float:
    """w = amount * (1 - collateral risk) * exposure * recency."""
    risk = collateral_risk_ratio(loan.collaterals)
    return loan.amount_usd * (1.0 - risk) * loan.liquidated_proportion * recency


def historical_risk(loans: Sequence[LoanEvent]) -> float:
    """
    Compute s_h in [0, 1] from loan history.

    Returns EMPTY_HISTORY_SCORE (0.0) for an empty history, and 0.0 when
    every weight is zero (e.g. a single loan backed by one collateral leg,
    whose risk ratio is 1).
    """
    if not loans:
        return EMPTY_HISTORY_SCORE

    opened = [loan.opened_at for loan in loans]
    min_ts, max_ts = min(opened), max(opened)

    num = 0.0
    den = 0.0
    for loan in loans:
        w = loan_weight(loan, logistic_recency(loan.opened_at, min_ts, max_ts))
        den += w
        if loan.liquidated:
            num += w

    if den <= 0:
        logger.debug("historical_risk_zero_weight", loans=len(loans))
        return 0.0
    result = clamp01(num / den)
    logger.debug("historical_risk_result", loans=len(loans), s_h=result)
    return result
