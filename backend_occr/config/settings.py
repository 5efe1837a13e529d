"""
Scoring settings and environment configuration.

Responsibilities:
- Load scoring parameters from environment variables and .env files.
- Validate them once at load time (fail fast with ConfigError) so the
  per-call hot path never has to.
- Expose a typed, immutable settings object used by the pipeline and the
  five subscore calculators.
"""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import lru_cache

from backend_occr.analysis_engine.models import DEFAULT_UNLIQUIDATED_EXPOSURE, DEFAULT_VOLATILITY
from backend_occr.analysis_engine.scorer import TierThresholds
from backend_occr.config.env import TRUTHY, load_occr_env
from backend_occr.core.exceptions import ConfigError

DEFAULT_MC_TRIALS = 2000
DEFAULT_HORIZON_DAYS = 1.0
TRADING_DAYS_PER_YEAR = 252
DEFAULT_TX_CAP_FRACTION = 0.02
DEFAULT_NEW_CREDIT_WINDOW_DAYS = 30.0
MAX_NEW_CREDIT_WINDOW_DAYS = 36500.0


@dataclass(frozen=True)
class ScoringSettings:
    """
    Scoring parameters shared by the pipeline and calculators.

    Defaults reproduce the canonical OCCR behaviour; every field can be
    overridden from the environment (see config.env) or explicitly.
    """

    mc_trials: int = DEFAULT_MC_TRIALS
    horizon_days: float = DEFAULT_HORIZON_DAYS
    tx_cap_fraction: float = DEFAULT_TX_CAP_FRACTION
    new_credit_window_days: float = DEFAULT_NEW_CREDIT_WINDOW_DAYS
    tiers: TierThresholds = field(default_factory=TierThresholds)
    default_volatility: float = DEFAULT_VOLATILITY
    unliquidated_exposure: float = DEFAULT_UNLIQUIDATED_EXPOSURE
    parallel: bool = False

    @property
    def horizon_years(self) -> float:
        """Simulation horizon in trading-year units (dt)."""
        return self.horizon_days / TRADING_DAYS_PER_YEAR

    def validate(self) -> "ScoringSettings":
        if self.mc_trials <= 0:
            raise ConfigError(f"Monte Carlo trial count must be positive, got {self.mc_trials}")
        if not math.isfinite(self.horizon_days) or self.horizon_days <= 0:
            raise ConfigError(f"Simulation horizon must be a positive number of days, got {self.horizon_days}")
        if not math.isfinite(self.tx_cap_fraction) or self.tx_cap_fraction <= 0:
            raise ConfigError(f"Transaction cap fraction must be positive, got {self.tx_cap_fraction}")
        window = self.new_credit_window_days
        if not math.isfinite(window) or not 0 < window <= MAX_NEW_CREDIT_WINDOW_DAYS:
            raise ConfigError(
                f"New-credit window must be within (0, {MAX_NEW_CREDIT_WINDOW_DAYS:g}] days, "
                f"got {window}"
            )
        if not math.isfinite(self.default_volatility) or self.default_volatility <= 0:
            raise ConfigError(f"Default volatility must be positive, got {self.default_volatility}")
        if not 0.0 <= self.unliquidated_exposure <= 1.0:
            raise ConfigError(
                f"Unliquidated exposure must be within [0, 1], got {self.unliquidated_exposure}"
            )
        self.tiers.validate()
        return self


def _read_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e


def _read_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def load_settings(env: Mapping[str, str] | None = None) -> ScoringSettings:
    """
    Build and validate ScoringSettings from an environment mapping.

    Args:
        env: Mapping of variable names to values. When None, .env is loaded
            and os.environ is used.

    Returns:
        Validated ScoringSettings.

    Raises:
        ConfigError: if any value is malformed or out of range.
    """
    if env is None:
        load_occr_env()
        env = os.environ

    tiers = TierThresholds(
        a_max=_read_float(env, "TIER_A_MAX", 0.15),
        b_max=_read_float(env, "TIER_B_MAX", 0.30),
        c_max=_read_float(env, "TIER_C_MAX", 0.60),
    )
    settings = ScoringSettings(
        mc_trials=_read_int(env, "OCCR_MC_PATHS", DEFAULT_MC_TRIALS),
        horizon_days=_read_float(env, "OCCR_MC_DT_DAYS", DEFAULT_HORIZON_DAYS),
        tx_cap_fraction=_read_float(env, "OCCR_TX_CAP_FRAC", DEFAULT_TX_CAP_FRACTION),
        new_credit_window_days=_read_float(env, "OCCR_NC_WINDOW_DAYS", DEFAULT_NEW_CREDIT_WINDOW_DAYS),
        tiers=tiers,
        default_volatility=_read_float(env, "OCCR_DEFAULT_SIGMA", DEFAULT_VOLATILITY),
        unliquidated_exposure=_read_float(env, "OCCR_UNLIQUIDATED_EXPOSURE", DEFAULT_UNLIQUIDATED_EXPOSURE),
        parallel=(env.get("OCCR_PARALLEL") or "").strip().lower() in TRUTHY,
    )
    return settings.validate()


@lru_cache(maxsize=1)
def get_settings() -> ScoringSettings:
    """Return process-wide settings loaded from the environment (cached after first call)."""
    return load_settings()
