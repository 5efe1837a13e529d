"""
Configuration management for the OCCR scoring engine.

Loads and validates settings from environment variables and an optional
.env file. Exposes a single source of truth for scoring parameters.
"""

from backend_occr.config.settings import (  # noqa: F401
    ScoringSettings,
    TierThresholds,
    get_settings,
    load_settings,
)

__all__ = ["ScoringSettings", "TierThresholds", "get_settings", "load_settings"]
