"""
Tests for batch scoring into a pandas results table.
"""

from __future__ import annotations

import pandas as pd

from backend_occr.analysis_engine.models import WalletSnapshot
from backend_occr.analytics.batch_scoring import RESULT_COLUMNS, score_snapshots, write_scores_csv
from backend_occr.data.sample import SAMPLE_WALLET, sample_snapshot

from conftest import VALID_WALLET


def test_one_row_per_snapshot_in_order(as_of, settings):
    other = "0x2222222222222222222222222222222222222222"
    snapshots = [sample_snapshot(as_of), WalletSnapshot(address=other, as_of=as_of)]
    df = score_snapshots(snapshots, settings)
    assert list(df.columns) == RESULT_COLUMNS
    assert list(df["wallet"]) == [SAMPLE_WALLET, other]
    assert list(df["tier"]) == ["C", "A"]
    assert list(df["tier_code"]) == [2, 0]
    assert df["score"].dtype.kind == "i"


def test_empty_batch_has_columns(settings):
    df = score_snapshots([], settings)
    assert df.empty
    assert list(df.columns) == RESULT_COLUMNS


def test_write_scores_csv(tmp_path, empty_snapshot, settings):
    df = score_snapshots([empty_snapshot], settings)
    out = tmp_path / "nested" / "scores.csv"
    assert write_scores_csv(df, out) == 1
    loaded = pd.read_csv(out)
    assert list(loaded.columns) == RESULT_COLUMNS
    assert loaded.loc[0, "wallet"] == VALID_WALLET
    assert loaded.loc[0, "score"] == 100
