"""
Scoring pipeline: run full wallet scoring (snapshot -> subscores -> composite).

The five calculators are pure and independent, so they run either
sequentially or on a thread pool with identical results. Inputs must be
fully assembled before this point; nothing here touches the network.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from backend_occr.analysis_engine.activity import transaction_activity
from backend_occr.analysis_engine.historical import historical_risk
from backend_occr.analysis_engine.models import CompositeResult, Subscores, WalletSnapshot
from backend_occr.analysis_engine.new_credit import new_credit_risk
from backend_occr.analysis_engine.scorer import compute_composite
from backend_occr.analysis_engine.simulation import current_risk
from backend_occr.analysis_engine.snapshot import build_snapshot
from backend_occr.analysis_engine.utilization import credit_utilization
from backend_occr.config.settings import ScoringSettings, get_settings
from backend_occr.occr_logging import bind_wallet, get_logger

logger = get_logger(__name__)

SUBSCORE_NAMES = ("historical", "current", "utilization", "activity", "new_credit")


def _short(wallet: str) -> str:
    return wallet[:16] + "..." if len(wallet) > 16 else wallet


def _calculators(
    snapshot: WalletSnapshot,
    settings: ScoringSettings,
) -> dict[str, Callable[[], float]]:
    return {
        "historical": lambda: historical_risk(snapshot.loan_history),
        "current": lambda: current_risk(
            snapshot.current_positions,
            snapshot.holdings_usd,
            trials=settings.mc_trials,
            dt=settings.horizon_years,
        ),
        "utilization": lambda: credit_utilization(snapshot.loan_history),
        "activity": lambda: transaction_activity(
            snapshot.transactions,
            snapshot.holdings_usd,
            cap_fraction=settings.tx_cap_fraction,
        ),
        "new_credit": lambda: new_credit_risk(
            snapshot.loan_history,
            snapshot.as_of,
            window_days=settings.new_credit_window_days,
        ),
    }


def compute_subscores(
    snapshot: WalletSnapshot,
    settings: ScoringSettings | None = None,
    *,
    parallel: bool | None = None,
) -> Subscores:
    """
    Evaluate the five subscores for a snapshot.

    Args:
        snapshot: Fully assembled wallet snapshot.
        settings: Scoring parameters; process settings when None.
        parallel: Run calculators on a thread pool; settings.parallel when None.

    Returns:
        Subscores (same values either way).
    """
    settings = settings or get_settings()
    use_pool = settings.parallel if parallel is None else parallel
    calculators = _calculators(snapshot, settings)

    if use_pool:
        with ThreadPoolExecutor(max_workers=len(calculators), thread_name_prefix="occr") as pool:
            futures = {name: pool.submit(fn) for name, fn in calculators.items()}
            values = {name: fut.result() for name, fut in futures.items()}
    else:
        values = {name: fn() for name, fn in calculators.items()}
    logger.debug("subscores_computed", parallel=use_pool, **values)

    return Subscores(**{name: values[name] for name in SUBSCORE_NAMES})


def score_snapshot(
    snapshot: WalletSnapshot,
    settings: ScoringSettings | None = None,
    *,
    parallel: bool | None = None,
) -> CompositeResult:
    """
    Score one wallet snapshot end to end.

    Returns a CompositeResult with the five subscores, probability, score
    (0-1000) and tier. Empty inputs resolve to documented neutral defaults.
    """
    settings = settings or get_settings()
    log = bind_wallet(_short(snapshot.address))
    log.info(
        "occr_scoring_start",
        loans=len(snapshot.loan_history),
        positions=len(snapshot.current_positions),
        transactions=len(snapshot.transactions),
    )
    subscores = compute_subscores(snapshot, settings, parallel=parallel)
    result = compute_composite(subscores, settings.tiers)
    log.info(
        "occr_scoring_done",
        probability=round(result.probability, 6),
        score=result.score,
        tier=result.tier.value,
        **subscores.to_dict(),
    )
    return result


def score_payload(
    payload: Mapping[str, Any],
    settings: ScoringSettings | None = None,
    *,
    volatility_by_symbol: Mapping[str, float] | None = None,
    parallel: bool | None = None,
) -> CompositeResult:
    """Build a snapshot from a JSON-like mapping with the settings' defaults, then score it."""
    settings = settings or get_settings()
    snapshot = build_snapshot(
        payload,
        default_volatility=settings.default_volatility,
        unliquidated_exposure=settings.unliquidated_exposure,
        volatility_by_symbol=volatility_by_symbol,
    )
    return score_snapshot(snapshot, settings, parallel=parallel)
