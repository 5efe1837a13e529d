"""
Analysis engine package: OCCR subscores and composite scoring.

Consumes an immutable wallet snapshot, computes five independent risk
subscores (historical, current/simulated, utilization, transaction
activity, new credit) and aggregates them into a probability, a 0-1000
score and an A-D tier. Pure functions; no I/O.
"""

from backend_occr.analysis_engine.models import (
    Collateral,
    CompositeResult,
    LoanEvent,
    Position,
    Subscores,
    Tier,
    Transaction,
    TxDirection,
    WalletSnapshot,
)
from backend_occr.analysis_engine.stats import (
    Mulberry32,
    clamp01,
    collateral_risk_ratio,
    gaussian,
    logistic_recency,
    seeded_normal,
)
from backend_occr.analysis_engine.historical import historical_risk
from backend_occr.analysis_engine.simulation import LossSimulation, current_risk
from backend_occr.analysis_engine.utilization import credit_utilization
from backend_occr.analysis_engine.activity import transaction_activity
from backend_occr.analysis_engine.new_credit import new_credit_risk
from backend_occr.analysis_engine.scorer import (
    TierThresholds,
    assign_tier,
    composite_probability,
    compute_composite,
    tier_code,
)
from backend_occr.analysis_engine.snapshot import build_snapshot, load_snapshot, parse_timestamp
from backend_occr.analysis_engine.volatility import annualized_volatility, volatility_table

__all__ = [
    "Collateral",
    "CompositeResult",
    "LoanEvent",
    "Position",
    "Subscores",
    "Tier",
    "Transaction",
    "TxDirection",
    "WalletSnapshot",
    "Mulberry32",
    "clamp01",
    "collateral_risk_ratio",
    "gaussian",
    "logistic_recency",
    "seeded_normal",
    "historical_risk",
    "LossSimulation",
    "current_risk",
    "credit_utilization",
    "transaction_activity",
    "new_credit_risk",
    "TierThresholds",
    "assign_tier",
    "composite_probability",
    "compute_composite",
    "tier_code",
    "build_snapshot",
    "load_snapshot",
    "parse_timestamp",
    "annualized_volatility",
    "volatility_table",
]
