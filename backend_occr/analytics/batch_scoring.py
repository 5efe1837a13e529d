"""
Batch scoring: score many wallet snapshots into one results table.

Output columns: wallet, s_h, s_c, s_cu, s_ct, s_nc, probability, score,
tier, tier_code. One row per snapshot, in input order.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pandas as pd

from backend_occr.analysis_engine.models import WalletSnapshot
from backend_occr.analytics.scoring_pipeline import score_snapshot
from backend_occr.config.settings import ScoringSettings, get_settings
from backend_occr.occr_logging import get_logger

logger = get_logger(__name__)

RESULT_COLUMNS = [
    "wallet",
    "s_h",
    "s_c",
    "s_cu",
    "s_ct",
    "s_nc",
    "probability",
    "score",
    "tier",
    "tier_code",
]


def score_snapshots(
    snapshots: Iterable[WalletSnapshot],
    settings: ScoringSettings | None = None,
    *,
    parallel: bool | None = None,
) -> pd.DataFrame:
    """Score each snapshot; return a DataFrame with RESULT_COLUMNS."""
    settings = settings or get_settings()
    rows: list[dict] = []
    for snapshot in snapshots:
        result = score_snapshot(snapshot, settings, parallel=parallel)
        rows.append({"wallet": snapshot.address, **result.to_dict()})
    df = pd.DataFrame(rows, columns=RESULT_COLUMNS)
    if not df.empty:
        df["score"] = df["score"].astype(int)
        df["tier_code"] = df["tier_code"].astype(int)
    logger.info("batch_scoring_done", rows=len(df))
    return df


def write_scores_csv(df: pd.DataFrame, path: Path | str) -> int:
    """Write the results table to CSV (parent dirs created). Returns rows written."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out, index=False, columns=RESULT_COLUMNS)
    logger.info("batch_scores_written", path=str(out), rows=len(df))
    return len(df)
