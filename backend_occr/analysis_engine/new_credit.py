"""
New credit behaviour s_nc.

Flags bursts of larger-than-typical, closely spaced new loans. Among
loans opened within the window before as_of, a loan is a hit when its
amount is at least the recent mean and its gap to the nearest
chronological neighbour (over the whole history) is at most the mean gap.
s_nc = hits / recent loans.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from backend_occr.analysis_engine.models import LoanEvent
from backend_occr.analysis_engine.stats import clamp01
from backend_occr.occr_logging import get_logger

logger = get_logger(__name__)

DEFAULT_WINDOW_DAYS = 30.0
FALLBACK_MEAN_GAP_DAYS = 30.0
SECONDS_PER_DAY = 86400
EARLIEST_CUTOFF = datetime.min.replace(tzinfo=timezone.utc)


def neighbour_gaps_days(loans: Sequence[LoanEvent]) -> list[float]:
    """
    Gap in days from each loan to its nearest chronological neighbour.

    Returned in the input order. Sequence ends use an infinite sentinel, so
    a single loan gets math.inf.
    """
    order = sorted(range(len(loans)), key=lambda i: loans[i].opened_at)
    gaps = [math.inf] * len(loans)
    for pos, idx in enumerate(order):
        current = loans[idx].opened_at
        before = math.inf
        after = math.inf
        if pos > 0:
            before = (current - loans[order[pos - 1]].opened_at).total_seconds() / SECONDS_PER_DAY
        if pos < len(order) - 1:
            after = (loans[order[pos + 1]].opened_at - current).total_seconds() / SECONDS_PER_DAY
        gaps[idx] = min(before, after)
    return gaps


def window_cutoff(as_of: datetime, window_days: float) -> datetime:
    """
    Start of the recent window.

    Windows reaching before year 1 start at EARLIEST_CUTOFF; an empty or
    NaN window starts at as_of.
    """
    if math.isnan(window_days) or window_days <= 0:
        return as_of
    try:
        return as_of - timedelta(days=window_days)
    except OverflowError:
        return EARLIEST_CUTOFF


def new_credit_risk(
    loans: Sequence[LoanEvent],
    as_of: datetime,
    *,
    window_days: float = DEFAULT_WINDOW_DAYS,
) -> float:
    """Compute s_nc in [0, 1]; 0.0 when no loan falls inside the window."""
    if not loans:
        return 0.0

    cutoff = window_cutoff(as_of, window_days)
    recent = [i for i, loan in enumerate(loans) if loan.opened_at >= cutoff]
    if not recent:
        return 0.0

    mean_amount = sum(loans[i].amount_usd for i in recent) / len(recent)

    gaps = neighbour_gaps_days(loans)
    finite = [g for g in gaps if math.isfinite(g)]
    mean_gap = sum(finite) / len(finite) if finite else FALLBACK_MEAN_GAP_DAYS

    hits = sum(
        1
        for i in recent
        if loans[i].amount_usd >= mean_amount and gaps[i] <= mean_gap
    )
    result = clamp01(hits / len(recent))
    logger.debug(
        "new_credit_result",
        recent=len(recent),
        hits=hits,
        mean_gap_days=round(mean_gap, 4),
        s_nc=result,
    )
    return result
