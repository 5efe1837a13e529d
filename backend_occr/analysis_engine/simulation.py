"""
Current credit risk s_c: Monte Carlo loss-at-risk.

Estimates P(LaR >= holdings) over a short horizon. Per trial every open
position's collateral takes a lognormal shock
exp(-0.5 * sigma_step^2 + sigma_step * z), sigma_step = sigma * sqrt(dt),
and the shortfall max(0, debt - shocked_collateral * max_ltv) is summed
into the trial LaR. A trial is an exceedance when LaR >= holdings.

Trial m draws from Mulberry32(seed_base + m), one normal per position in
position order; seed_base depends only on the snapshot (not on debt).
Results are therefore identical run to run, and identical however the
trial range is split into chunks.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from backend_occr.analysis_engine.models import Position
from backend_occr.analysis_engine.stats import Mulberry32, clamp01, gaussian, round_half_up
from backend_occr.occr_logging import get_logger

logger = get_logger(__name__)

DEFAULT_TRIALS = 2000
TRADING_DAYS_PER_YEAR = 252
DEFAULT_DT = 1.0 / TRADING_DAYS_PER_YEAR
POSITION_SEED_STRIDE = 1337


def simulation_seed(positions: Sequence[Position], holdings_usd: float) -> int:
    """
    Seed base derived from the snapshot: holdings, position count and collateral sizes.

    Debt does not enter the seed: raising a debt leaves every draw
    unchanged, so s_c is non-decreasing in debt.
    """
    return (
        round_half_up(holdings_usd)
        + len(positions) * POSITION_SEED_STRIDE
        + sum(round_half_up(p.collateral_usd) for p in positions)
    )


def _sanitize_dt(dt: float) -> float:
    if math.isfinite(dt) and dt > 0:
        return dt
    return DEFAULT_DT


def trial_loss_at_risk(
    positions: Sequence[Position],
    rng: Mulberry32,
    dt: float,
) -> float:
    """Aggregate shortfall across positions for one simulated price path."""
    sqrt_dt = math.sqrt(dt)
    lar = 0.0
    for pos in positions:
        sigma_step = pos.volatility * sqrt_dt
        z = gaussian(rng)
        mult = math.exp(-0.5 * sigma_step * sigma_step + sigma_step * z)
        shocked = pos.collateral_usd * mult
        lar += max(0.0, pos.debt_usd - shocked * pos.max_ltv)
    return lar


@dataclass(frozen=True)
class LossSimulation:
    """
    Deterministic Monte Carlo run over a fixed set of positions.

    Use count_exceedances(start, stop) to evaluate any sub-range of trials;
    summing disjoint ranges equals a single full run.
    """

    positions: tuple[Position, ...]
    holdings_usd: float
    dt: float = DEFAULT_DT

    @classmethod
    def build(
        cls,
        positions: Sequence[Position],
        holdings_usd: float,
        dt: float = DEFAULT_DT,
    ) -> "LossSimulation":
        return cls(tuple(positions), max(0.0, holdings_usd), _sanitize_dt(dt))

    @property
    def seed_base(self) -> int:
        return simulation_seed(self.positions, self.holdings_usd)

    def trial_exceeds(self, trial: int, seed_base: int | None = None) -> bool:
        base = self.seed_base if seed_base is None else seed_base
        rng = Mulberry32(base + trial)
        return trial_loss_at_risk(self.positions, rng, self.dt) >= self.holdings_usd

    def count_exceedances(self, start: int, stop: int) -> int:
        base = self.seed_base
        return sum(1 for m in range(start, stop) if self.trial_exceeds(m, base))


def current_risk(
    positions: Sequence[Position],
    holdings_usd: float,
    *,
    trials: int = DEFAULT_TRIALS,
    dt: float = DEFAULT_DT,
) -> float:
    """
    Compute s_c in [0, 1] as exceedances / trials.

    Args:
        positions: Open collateral/debt pairs.
        holdings_usd: Current wallet holdings; negative values are treated as 0.
        trials: Number of independent Monte Carlo trials.
        dt: Horizon in trading-year units (1/252 = one trading day).

    Returns:
        0.0 with no positions, otherwise the exceedance frequency.
    """
    if not positions:
        return 0.0
    trials = max(1, int(trials))
    sim = LossSimulation.build(positions, holdings_usd, dt)
    exceed = sim.count_exceedances(0, trials)
    result = clamp01(exceed / trials)
    logger.debug(
        "current_risk_result",
        positions=len(positions),
        trials=trials,
        exceedances=exceed,
        s_c=result,
    )
    return result
