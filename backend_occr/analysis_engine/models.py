"""
Data models for scoring engine input and output.

Responsibilities:
- Define the strict wallet snapshot shape consumed by the five subscore
  calculators (loans, open positions, transfers, holdings).
- Perform default filling and range normalisation once, at construction,
  so calculators never deal with missing, non-finite or out-of-range
  fields. Non-finite amounts (nan, inf) are treated as 0.
- Define the subscore and composite result structures used by the
  pipeline, the batch table and the score publisher.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from backend_occr.analysis_engine.numeric import clamp01, finite_nonneg, finite_or_zero

DEFAULT_VOLATILITY = 0.6
DEFAULT_MAX_LTV = 0.8
# Exposure fraction assumed for a loan that was never liquidated.
DEFAULT_UNLIQUIDATED_EXPOSURE = 0.2


def _as_utc(ts: datetime) -> datetime:
    """Naive datetimes are taken as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TxDirection(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"

    @property
    def sign(self) -> int:
        return 1 if self is TxDirection.CREDIT else -1


class Tier(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"

    @property
    def code(self) -> int:
        """Persistence encoding: A=0, B=1, C=2, D=3."""
        return ("A", "B", "C", "D").index(self.value)


@dataclass(frozen=True)
class Collateral:
    """One collateral leg of a loan, valued in USD at open."""

    symbol: str
    amount_usd: float
    volatility: float = DEFAULT_VOLATILITY
    """Annualized standard deviation proxy; 0.6 when unknown."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount_usd", finite_nonneg(self.amount_usd))
        object.__setattr__(self, "volatility", finite_nonneg(self.volatility))


@dataclass(frozen=True)
class LoanEvent:
    """
    One historical or currently-open credit line.

    liquidated_proportion is filled at construction when absent: 1.0 for a
    liquidated loan, DEFAULT_UNLIQUIDATED_EXPOSURE otherwise.
    """

    id: str
    opened_at: datetime
    amount_usd: float
    ltv_at_open: float
    collaterals: tuple[Collateral, ...] = ()
    closed_at: datetime | None = None
    liquidated: bool = False
    liquidated_proportion: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "opened_at", _as_utc(self.opened_at))
        if self.closed_at is not None:
            object.__setattr__(self, "closed_at", _as_utc(self.closed_at))
        object.__setattr__(self, "amount_usd", finite_nonneg(self.amount_usd))
        object.__setattr__(self, "ltv_at_open", clamp01(finite_or_zero(self.ltv_at_open)))
        object.__setattr__(self, "collaterals", tuple(self.collaterals))
        object.__setattr__(self, "liquidated", bool(self.liquidated))
        if self.liquidated_proportion is None:
            proportion = 1.0 if self.liquidated else DEFAULT_UNLIQUIDATED_EXPOSURE
        else:
            proportion = clamp01(finite_or_zero(self.liquidated_proportion))
        object.__setattr__(self, "liquidated_proportion", proportion)

    @property
    def is_open(self) -> bool:
        return self.closed_at is None

    @property
    def collateral_usd(self) -> float:
        """Total USD collateral across legs."""
        return sum(c.amount_usd for c in self.collaterals)


@dataclass(frozen=True)
class Position:
    """Open collateral/debt pair feeding the Monte Carlo loss-at-risk simulation."""

    collateral_usd: float
    debt_usd: float
    volatility: float = DEFAULT_VOLATILITY
    max_ltv: float = DEFAULT_MAX_LTV
    """Liquidation threshold LTV."""
    symbol: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "collateral_usd", finite_nonneg(self.collateral_usd))
        object.__setattr__(self, "debt_usd", finite_nonneg(self.debt_usd))
        object.__setattr__(self, "volatility", finite_nonneg(self.volatility))
        object.__setattr__(self, "max_ltv", clamp01(finite_or_zero(self.max_ltv)))


@dataclass(frozen=True)
class Transaction:
    """On-chain transfer into (credit) or out of (debit) the wallet."""

    timestamp: datetime
    amount_usd: float
    direction: TxDirection
    recency_weight: float | None = None
    """Precomputed recency in [0,1]; computed from the transaction span when None."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", _as_utc(self.timestamp))
        object.__setattr__(self, "amount_usd", finite_nonneg(self.amount_usd))
        object.__setattr__(self, "direction", TxDirection(self.direction))
        if self.recency_weight is not None:
            object.__setattr__(self, "recency_weight", clamp01(finite_or_zero(self.recency_weight)))


@dataclass(frozen=True)
class WalletSnapshot:
    """
    Immutable unit of scoring input for one wallet.

    as_of is the observation instant used as "now" by the new-credit window;
    it defaults to construction time so a built snapshot scores identically
    every time.
    """

    address: str
    loan_history: tuple[LoanEvent, ...] = ()
    current_positions: tuple[Position, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    holdings_usd: float = 0.0
    as_of: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        object.__setattr__(self, "loan_history", tuple(self.loan_history))
        object.__setattr__(self, "current_positions", tuple(self.current_positions))
        object.__setattr__(self, "transactions", tuple(self.transactions))
        object.__setattr__(self, "holdings_usd", finite_nonneg(self.holdings_usd))
        object.__setattr__(self, "as_of", _as_utc(self.as_of))


@dataclass(frozen=True)
class Subscores:
    """The five independent OCCR subscores."""

    historical: float
    """s_h in [0,1]: recency/size weighted liquidation frequency."""
    current: float
    """s_c in [0,1]: Monte Carlo probability that loss-at-risk >= holdings."""
    utilization: float
    """s_cu in [0,1]: credit utilization (1/3 when no loans)."""
    activity: float
    """s_ct in [-1,1]: signed, recency weighted transfer flow."""
    new_credit: float
    """s_nc in [0,1]: share of recent loans that are large and closely spaced."""

    def to_dict(self) -> dict[str, float]:
        return {
            "s_h": self.historical,
            "s_c": self.current,
            "s_cu": self.utilization,
            "s_ct": self.activity,
            "s_nc": self.new_credit,
        }


@dataclass(frozen=True)
class CompositeResult:
    """Composite OCCR output; lower probability means a better tier."""

    subscores: Subscores
    probability: float
    score: int
    tier: Tier

    @property
    def tier_code(self) -> int:
        return self.tier.code

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable result with stable key order."""
        out: dict[str, Any] = {
            **self.subscores.to_dict(),
            "probability": self.probability,
            "score": self.score,
            "tier": self.tier.value,
            "tier_code": self.tier_code,
        }
        return out
