"""
Tests for scoring settings loaded from the environment.
"""

from __future__ import annotations

import pytest

from backend_occr.config.settings import ScoringSettings, get_settings, load_settings
from backend_occr.core.exceptions import ConfigError


def test_defaults():
    settings = load_settings({})
    assert settings == ScoringSettings()
    assert settings.mc_trials == 2000
    assert settings.horizon_years == pytest.approx(1 / 252)
    assert (settings.tiers.a_max, settings.tiers.b_max, settings.tiers.c_max) == (0.15, 0.30, 0.60)
    assert settings.parallel is False


def test_overrides():
    settings = load_settings(
        {
            "OCCR_MC_PATHS": "500",
            "OCCR_MC_DT_DAYS": "5",
            "OCCR_TX_CAP_FRAC": "0.05",
            "OCCR_NC_WINDOW_DAYS": "14",
            "TIER_A_MAX": "0.1",
            "OCCR_DEFAULT_SIGMA": "0.9",
            "OCCR_UNLIQUIDATED_EXPOSURE": "0.3",
            "OCCR_PARALLEL": "yes",
        }
    )
    assert settings.mc_trials == 500
    assert settings.horizon_years == pytest.approx(5 / 252)
    assert settings.tx_cap_fraction == pytest.approx(0.05)
    assert settings.new_credit_window_days == pytest.approx(14)
    assert settings.tiers.a_max == pytest.approx(0.1)
    assert settings.default_volatility == pytest.approx(0.9)
    assert settings.unliquidated_exposure == pytest.approx(0.3)
    assert settings.parallel is True


def test_blank_values_use_defaults():
    assert load_settings({"OCCR_MC_PATHS": "  ", "TIER_C_MAX": ""}) == ScoringSettings()


@pytest.mark.parametrize(
    "env",
    [
        {"OCCR_MC_PATHS": "many"},
        {"OCCR_MC_PATHS": "0"},
        {"OCCR_MC_DT_DAYS": "-1"},
        {"OCCR_TX_CAP_FRAC": "nan"},
        {"OCCR_NC_WINDOW_DAYS": "0"},
        {"OCCR_NC_WINDOW_DAYS": "1000000"},
        {"OCCR_NC_WINDOW_DAYS": "inf"},
        {"OCCR_DEFAULT_SIGMA": "0"},
        {"OCCR_UNLIQUIDATED_EXPOSURE": "1.5"},
        {"TIER_A_MAX": "0.5", "TIER_B_MAX": "0.3"},
    ],
)
def test_invalid_values_raise(env):
    with pytest.raises(ConfigError):
        load_settings(env)


def test_get_settings_reads_process_environment(monkeypatch):
    monkeypatch.setenv("OCCR_MC_PATHS", "123")
    assert get_settings().mc_trials == 123
    monkeypatch.setenv("OCCR_MC_PATHS", "456")
    assert get_settings().mc_trials == 123
    get_settings.cache_clear()
    assert get_settings().mc_trials == 456


def test_new_credit_window_upper_bound_is_inclusive():
    assert load_settings({"OCCR_NC_WINDOW_DAYS": "36500"}).new_credit_window_days == pytest.approx(36500)
