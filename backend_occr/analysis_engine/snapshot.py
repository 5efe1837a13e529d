"""
Wallet snapshot assembly from JSON-like payloads.

Converts the collaborator-supplied mapping (camelCase keys as produced by
the data fetchers; snake_case accepted too) into a strict WalletSnapshot.
All default filling happens here, once: missing volatility falls back to
the per-symbol table and then to the configured default, missing maxLtv
to 0.8, missing liquidatedProportion to the exposure policy. Malformed
payloads and non-finite numbers raise SnapshotError; nothing is fetched.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from backend_occr.analysis_engine.models import (
    DEFAULT_MAX_LTV,
    DEFAULT_UNLIQUIDATED_EXPOSURE,
    DEFAULT_VOLATILITY,
    Collateral,
    LoanEvent,
    Position,
    Transaction,
    TxDirection,
    WalletSnapshot,
)
from backend_occr.core.exceptions import SnapshotError
from backend_occr.occr_logging import get_logger

logger = get_logger(__name__)

_MISSING = object()


def _get(data: Mapping[str, Any], *keys: str, default: Any = _MISSING) -> Any:
    """First present, non-None value among keys; default (or SnapshotError) otherwise."""
    if not isinstance(data, Mapping):
        raise SnapshotError(f"Expected an object holding {keys[0]!r}, got {type(data).__name__}", field=keys[0])
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    if default is _MISSING:
        raise SnapshotError(f"Missing required field {keys[0]!r}", field=keys[0])
    return default


def _number(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise SnapshotError(f"Field {field!r} must be a number, got bool", field=field)
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"Field {field!r} must be a number, got {value!r}", field=field) from e
    if not math.isfinite(number):
        raise SnapshotError(f"Field {field!r} must be finite, got {value!r}", field=field)
    return number


def parse_timestamp(value: Any, field: str = "timestamp") -> datetime:
    """
    Parse a timestamp into an aware UTC datetime.

    Accepts datetime objects, unix seconds (int/float) and ISO-8601 strings
    (trailing "Z" allowed). Naive values are taken as UTC.
    """
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, bool):
        raise SnapshotError(f"Field {field!r} must be a timestamp, got bool", field=field)
    elif isinstance(value, (int, float)):
        try:
            ts = datetime.fromtimestamp(float(value), tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise SnapshotError(f"Field {field!r} is out of range: {value!r}", field=field) from e
    elif isinstance(value, str):
        raw = value.strip()
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        try:
            ts = datetime.fromisoformat(raw)
        except ValueError as e:
            raise SnapshotError(f"Field {field!r} is not ISO-8601: {value!r}", field=field) from e
    else:
        raise SnapshotError(f"Field {field!r} must be a timestamp, got {type(value).__name__}", field=field)
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _resolve_volatility(
    raw: Any,
    symbol: str | None,
    volatility_by_symbol: Mapping[str, float],
    default_volatility: float,
    field: str,
) -> float:
    if raw is not None:
        return _number(raw, field)
    if symbol and symbol.upper() in volatility_by_symbol:
        return float(volatility_by_symbol[symbol.upper()])
    return default_volatility


def _parse_direction(data: Mapping[str, Any]) -> TxDirection:
    raw = data.get("direction")
    if raw is None and "credit" in data:
        return TxDirection.CREDIT if bool(data["credit"]) else TxDirection.DEBIT
    if raw is None:
        raise SnapshotError("Missing required field 'direction'", field="direction")
    try:
        return TxDirection(str(raw).strip().lower())
    except ValueError as e:
        raise SnapshotError(f"Unknown transaction direction {raw!r}", field="direction") from e


def build_snapshot(
    payload: Mapping[str, Any],
    *,
    default_volatility: float = DEFAULT_VOLATILITY,
    unliquidated_exposure: float = DEFAULT_UNLIQUIDATED_EXPOSURE,
    default_max_ltv: float = DEFAULT_MAX_LTV,
    volatility_by_symbol: Mapping[str, float] | None = None,
    as_of: datetime | None = None,
) -> WalletSnapshot:
    """
    Build a WalletSnapshot from a JSON-like mapping.

    Args:
        payload: Mapping with address, loanHistory, currentPositions,
            transactions, holdingsUsd and optional asOf.
        default_volatility: Sigma used when neither the payload nor
            volatility_by_symbol provides one.
        unliquidated_exposure: Exposure fraction for non-liquidated loans
            without an explicit liquidatedProportion.
        default_max_ltv: Liquidation LTV for positions without maxLtv.
        volatility_by_symbol: Optional symbol -> sigma table (upper-case keys).
        as_of: Observation instant; overrides payload asOf; defaults to now.

    Returns:
        Immutable WalletSnapshot.

    Raises:
        SnapshotError: on missing required fields or unparseable values.
    """
    if not isinstance(payload, Mapping):
        raise SnapshotError(f"Snapshot payload must be a mapping, got {type(payload).__name__}")
    sigmas = {k.upper(): float(v) for k, v in (volatility_by_symbol or {}).items()}

    address = str(_get(payload, "address", "wallet")).strip()
    if not address:
        raise SnapshotError("Field 'address' must not be empty", field="address")

    loans: list[LoanEvent] = []
    for i, raw in enumerate(_get(payload, "loanHistory", "loan_history", "loansHistory", default=[])):
        liquidated = bool(_get(raw, "liquidated", default=False))
        proportion = _get(raw, "liquidatedProportion", "liquidated_proportion", default=None)
        if proportion is None:
            proportion = 1.0 if liquidated else unliquidated_exposure
        collaterals = []
        for c in _get(raw, "collaterals", default=[]):
            symbol = str(_get(c, "symbol", default="")).strip().upper()
            collaterals.append(
                Collateral(
                    symbol=symbol,
                    amount_usd=_number(_get(c, "amountUsd", "amount_usd", "amountUSD"), "amountUsd"),
                    volatility=_resolve_volatility(
                        _get(c, "volatility", "sigma", default=None),
                        symbol,
                        sigmas,
                        default_volatility,
                        "volatility",
                    ),
                )
            )
        closed_raw = _get(raw, "closedAt", "closed_at", default=None)
        loans.append(
            LoanEvent(
                id=str(_get(raw, "id", default=f"loan-{i}")),
                opened_at=parse_timestamp(_get(raw, "openedAt", "opened_at"), "openedAt"),
                closed_at=parse_timestamp(closed_raw, "closedAt") if closed_raw is not None else None,
                amount_usd=_number(_get(raw, "amountUsd", "amount_usd", "amountUSD"), "amountUsd"),
                ltv_at_open=_number(_get(raw, "ltvAtOpen", "ltv_at_open"), "ltvAtOpen"),
                collaterals=tuple(collaterals),
                liquidated=liquidated,
                liquidated_proportion=_number(proportion, "liquidatedProportion"),
            )
        )

    positions: list[Position] = []
    for raw in _get(payload, "currentPositions", "current_positions", default=[]):
        symbol = _get(raw, "symbol", default=None)
        symbol = str(symbol).strip().upper() if symbol else None
        positions.append(
            Position(
                collateral_usd=_number(_get(raw, "collateralUsd", "collateral_usd", "collateralUSD"), "collateralUsd"),
                debt_usd=_number(_get(raw, "debtUsd", "debt_usd", "debtUSD"), "debtUsd"),
                volatility=_resolve_volatility(
                    _get(raw, "volatility", "sigma", default=None),
                    symbol,
                    sigmas,
                    default_volatility,
                    "volatility",
                ),
                max_ltv=_number(_get(raw, "maxLtv", "max_ltv", "ltvMax", default=default_max_ltv), "maxLtv"),
                symbol=symbol,
            )
        )

    transactions: list[Transaction] = []
    for raw in _get(payload, "transactions", default=[]):
        weight = _get(raw, "recencyWeight", "recency_weight", default=None)
        transactions.append(
            Transaction(
                timestamp=parse_timestamp(_get(raw, "timestamp", "ts"), "timestamp"),
                amount_usd=_number(_get(raw, "amountUsd", "amount_usd", "amountUSD"), "amountUsd"),
                direction=_parse_direction(raw),
                recency_weight=_number(weight, "recencyWeight") if weight is not None else None,
            )
        )

    holdings = _number(_get(payload, "holdingsUsd", "holdings_usd", "holdingsUSD", default=0.0), "holdingsUsd")
    if as_of is None:
        raw_as_of = _get(payload, "asOf", "as_of", default=None)
        as_of = parse_timestamp(raw_as_of, "asOf") if raw_as_of is not None else datetime.now(timezone.utc)

    snapshot = WalletSnapshot(
        address=address,
        loan_history=tuple(loans),
        current_positions=tuple(positions),
        transactions=tuple(transactions),
        holdings_usd=holdings,
        as_of=as_of,
    )
    logger.debug(
        "snapshot_built",
        wallet=address[:16] + "..." if len(address) > 16 else address,
        loans=len(loans),
        positions=len(positions),
        transactions=len(transactions),
        holdings_usd=snapshot.holdings_usd,
    )
    return snapshot


def load_snapshot(path: Path | str, **kwargs: Any) -> WalletSnapshot:
    """Read a JSON snapshot file and build it; kwargs go to build_snapshot."""
    p = Path(path)
    try:
        with open(p, encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot file {p} is not valid JSON: {e}") from e
    return build_snapshot(payload, **kwargs)
