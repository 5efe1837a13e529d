"""
Demo wallet: three past loans (one half-liquidated), two open positions
and three recent transfers. Dates are relative to as_of so the sample
always exercises the new-credit window the same way. WBTC legs carry no
volatility, so they pick up the configured default.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from backend_occr.analysis_engine.models import WalletSnapshot
from backend_occr.analysis_engine.snapshot import build_snapshot

SAMPLE_WALLET = "0x1111111111111111111111111111111111111111"


def _days_ago(as_of: datetime, days: int) -> str:
    return (as_of - timedelta(days=days)).isoformat()


def sample_payload(as_of: datetime | None = None) -> dict[str, Any]:
    """JSON-like snapshot payload (camelCase keys) anchored at as_of."""
    now = as_of or datetime.now(timezone.utc)
    return {
        "address": SAMPLE_WALLET,
        "asOf": now.isoformat(),
        "holdingsUsd": 25000,
        "loanHistory": [
            {
                "id": "L1",
                "openedAt": _days_ago(now, 120),
                "amountUsd": 5000,
                "ltvAtOpen": 0.7,
                "collaterals": [{"symbol": "ETH", "amountUsd": 8000, "volatility": 0.8}],
                "liquidated": False,
                "liquidatedProportion": 0,
            },
            {
                "id": "L2",
                "openedAt": _days_ago(now, 60),
                "amountUsd": 7000,
                "ltvAtOpen": 0.75,
                "collaterals": [
                    {"symbol": "ETH", "amountUsd": 10000, "volatility": 0.8},
                    {"symbol": "USDC", "amountUsd": 2000, "volatility": 0.05},
                ],
                "liquidated": True,
                "liquidatedProportion": 0.5,
            },
            {
                "id": "L3",
                "openedAt": _days_ago(now, 15),
                "amountUsd": 4000,
                "ltvAtOpen": 0.8,
                "collaterals": [{"symbol": "WBTC", "amountUsd": 7000}],
                "liquidated": False,
                "liquidatedProportion": 0,
            },
        ],
        "currentPositions": [
            {"symbol": "ETH", "collateralUsd": 12000, "debtUsd": 6000, "volatility": 0.8, "maxLtv": 0.78},
            {"symbol": "WBTC", "collateralUsd": 9000, "debtUsd": 4500, "maxLtv": 0.75},
        ],
        "transactions": [
            {"timestamp": _days_ago(now, 5), "amountUsd": 1500, "direction": "credit"},
            {"timestamp": _days_ago(now, 3), "amountUsd": 800, "direction": "debit"},
            {"timestamp": _days_ago(now, 1), "amountUsd": 2000, "direction": "credit"},
        ],
    }


def sample_snapshot(as_of: datetime | None = None, **kwargs: Any) -> WalletSnapshot:
    """Built WalletSnapshot for the demo wallet; kwargs go to build_snapshot."""
    return build_snapshot(sample_payload(as_of), **kwargs)
