"""
Tests for the command line entrypoint.
"""

from __future__ import annotations

import json

import pandas as pd
import pytest

import main
from backend_occr.data.sample import SAMPLE_WALLET, sample_payload
from backend_occr.oracle.score_publisher import CsvScorePublisher


@pytest.fixture(autouse=True)
def _fast_simulation(monkeypatch):
    monkeypatch.setenv("OCCR_MC_PATHS", "100")


def test_no_input_is_an_error():
    assert main.main([]) == 1


def test_sample_run_writes_and_publishes(tmp_path, capsys):
    output = tmp_path / "occr_scores.csv"
    sink = tmp_path / "wallet_scores.csv"
    assert main.main(["--sample", "--output", str(output), "--publish", str(sink)]) == 0

    assert f"[occr] {SAMPLE_WALLET}" in capsys.readouterr().out
    df = pd.read_csv(output)
    assert list(df["wallet"]) == [SAMPLE_WALLET]
    assert CsvScorePublisher(sink).read_all() == {SAMPLE_WALLET: (int(df.loc[0, "score"]), 2)}


def test_snapshot_files(tmp_path, capsys):
    path = tmp_path / "wallet.json"
    path.write_text(json.dumps(sample_payload()), encoding="utf-8")
    assert main.main([str(path), "--parallel"]) == 0
    assert "tier=C" in capsys.readouterr().out


def test_bad_snapshot_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("[]", encoding="utf-8")
    assert main.main([str(path)]) == 1


def test_missing_snapshot_file(tmp_path):
    assert main.main([str(tmp_path / "missing.json")]) == 1


def test_invalid_config(monkeypatch):
    monkeypatch.setenv("OCCR_MC_PATHS", "zero")
    assert main.main(["--sample"]) == 1


def test_sample_uses_configured_defaults(monkeypatch):
    """--sample builds the demo wallet with the same env-driven defaults as snapshot files."""
    import backend_occr.data.sample as sample

    seen = {}
    original = sample.sample_snapshot

    def _spy(*args, **kwargs):
        seen.update(kwargs)
        return original(*args, **kwargs)

    monkeypatch.setattr(sample, "sample_snapshot", _spy)
    monkeypatch.setenv("OCCR_DEFAULT_SIGMA", "0.9")
    monkeypatch.setenv("OCCR_UNLIQUIDATED_EXPOSURE", "0.3")
    assert main.main(["--sample"]) == 0
    assert seen == {"default_volatility": 0.9, "unliquidated_exposure": 0.3}
