"""
Pytest fixtures for OCCR tests: fixed observation time, small Monte Carlo
settings, and a clean settings cache per test.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from backend_occr.analysis_engine.models import Collateral, LoanEvent, WalletSnapshot
from backend_occr.config.settings import ScoringSettings, get_settings

AS_OF = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
VALID_WALLET = "0x1111111111111111111111111111111111111111"


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """get_settings() is cached per process; reset around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def as_of() -> datetime:
    return AS_OF


@pytest.fixture
def settings() -> ScoringSettings:
    """Default parameters with fewer Monte Carlo trials to keep tests fast."""
    return ScoringSettings(mc_trials=400)


@pytest.fixture
def empty_snapshot(as_of) -> WalletSnapshot:
    return WalletSnapshot(address=VALID_WALLET, holdings_usd=0.0, as_of=as_of)


@pytest.fixture
def make_loan(as_of):
    """Factory: loan opened days_ago before AS_OF with a single or custom collateral basket."""

    def _make(
        loan_id: str,
        days_ago: float,
        amount: float,
        *,
        ltv: float = 0.7,
        collaterals: tuple[Collateral, ...] | None = None,
        liquidated: bool = False,
        proportion: float | None = None,
    ) -> LoanEvent:
        if collaterals is None:
            collaterals = (Collateral("ETH", amount * 2, 0.6),)
        return LoanEvent(
            id=loan_id,
            opened_at=as_of - timedelta(days=days_ago),
            amount_usd=amount,
            ltv_at_open=ltv,
            collaterals=collaterals,
            liquidated=liquidated,
            liquidated_proportion=proportion,
        )

    return _make
