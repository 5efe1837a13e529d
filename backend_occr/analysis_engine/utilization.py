"""
Credit utilization s_cu.

s_cu = sum((1 - L / (C * LTV)) * L) / sum(L) over loans, where C is the
loan's collateral total. Loans whose L / (C * LTV) exceeds 5 are treated
as data glitches and skipped (their amount still counts in the
denominator). With no borrowed amount at all the neutral baseline 1/3 is
returned.
"""

from __future__ import annotations

from collections.abc import Sequence

from backend_occr.analysis_engine.models import LoanEvent
from backend_occr.analysis_engine.stats import clamp01
from backend_occr.occr_logging import get_logger

logger = get_logger(__name__)

NEUTRAL_UTILIZATION = 1.0 / 3.0
MAX_UTILIZATION_RATIO = 5.0
DENOM_EPSILON = 1e-9


def credit_utilization(loans: Sequence[LoanEvent]) -> float:
    """Compute s_cu in [0, 1]; 1/3 when the total loan amount is 0."""
    total = sum(loan.amount_usd for loan in loans)
    if total <= 0:
        return NEUTRAL_UTILIZATION

    acc = 0.0
    skipped = 0
    for loan in loans:
        denom = max(loan.collateral_usd * loan.ltv_at_open, DENOM_EPSILON)
        ratio = loan.amount_usd / denom
        if ratio > MAX_UTILIZATION_RATIO:
            skipped += 1
            continue
        acc += (1.0 - ratio) * loan.amount_usd

    result = clamp01(acc / total)
    logger.debug("credit_utilization_result", loans=len(loans), skipped=skipped, s_cu=result)
    return result
