"""
On-chain transaction activity s_ct.

Signed, recency weighted share of transfer volume: credits count +1,
debits -1. Each amount is capped at a fraction of holdings so a single
whale transfer cannot dominate. Result in [-1, 1]; positive means recent
net inflow, which lowers composite risk.
"""

from __future__ import annotations

from collections.abc import Sequence

from backend_occr.analysis_engine.models import Transaction
from backend_occr.analysis_engine.stats import clamp, clamp01, logistic_recency
from backend_occr.occr_logging import get_logger

logger = get_logger(__name__)

DEFAULT_CAP_FRACTION = 0.02
# Holdings assumed for the cap when the caller gives no hint.
DEFAULT_HOLDINGS_HINT_USD = 1_000_000.0


def transaction_cap(cap_fraction: float, holdings_hint_usd: float | None) -> float:
    """Per-transaction USD cap: cap_fraction * max(1, holdings hint)."""
    hint = DEFAULT_HOLDINGS_HINT_USD if holdings_hint_usd is None else holdings_hint_usd
    return cap_fraction * max(1.0, hint)


def transaction_activity(
    transactions: Sequence[Transaction],
    holdings_hint_usd: float | None = None,
    *,
    cap_fraction: float = DEFAULT_CAP_FRACTION,
) -> float:
    """
    Compute s_ct in [-1, 1].

    Args:
        transactions: Wallet transfers.
        holdings_hint_usd: Current holdings used to size the per-tx cap.
        cap_fraction: Fraction of holdings a single transfer may contribute.

    Returns:
        sum(sign * capped * recency) / sum(capped), or 0.0 with no
        transactions or no capped volume.
    """
    if not transactions:
        return 0.0

    stamps = [tx.timestamp for tx in transactions]
    min_ts, max_ts = min(stamps), max(stamps)
    cap = transaction_cap(cap_fraction, holdings_hint_usd)

    num = 0.0
    den = 0.0
    for tx in transactions:
        capped = min(tx.amount_usd, cap)
        if tx.recency_weight is not None:
            recency = clamp01(tx.recency_weight)
        else:
            recency = logistic_recency(tx.timestamp, min_ts, max_ts)
        num += tx.direction.sign * capped * recency
        den += capped

    if den <= 0:
        return 0.0
    result = clamp(num / den, -1.0, 1.0)
    logger.debug("transaction_activity_result", transactions=len(transactions), cap_usd=cap, s_ct=result)
    return result
