"""
Environment variable loading for OCCR.

- OCCR_MC_PATHS: Monte Carlo trial count (default 2000)
- OCCR_MC_DT_DAYS: simulation horizon in trading days (default 1, /252)
- OCCR_TX_CAP_FRAC: per-transaction cap as a fraction of holdings (default 0.02)
- OCCR_NC_WINDOW_DAYS: new-credit window in days (default 30)
- TIER_A_MAX / TIER_B_MAX / TIER_C_MAX: tier thresholds (0.15 / 0.30 / 0.60)
- OCCR_DEFAULT_SIGMA: volatility proxy when an asset has none (default 0.6)
- OCCR_UNLIQUIDATED_EXPOSURE: exposure fraction for loans that were not liquidated (default 0.2)
- OCCR_PARALLEL: evaluate subscores on a thread pool (default off)
- Loads .env from project root when available.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv

# Project root: config is backend_occr/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

TRUTHY = ("1", "true", "yes", "on")


def load_occr_env(path: Path | None = None) -> None:
    """Load .env from project root (or path). Safe to call multiple times; never overrides set vars."""
    env_path = path or _ENV_PATH
    if env_path.is_file():
        load_dotenv(env_path, override=False)
