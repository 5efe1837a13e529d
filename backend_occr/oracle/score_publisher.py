"""
Publish OCCR scores to a persistence sink.

Downstream contract: publish(wallet, score 0..1000, tier_code 0..3 with
A=0 .. D=3). Writes must be idempotent: publishing the same wallet twice
leaves exactly one record holding the latest values.

CsvScorePublisher keeps a wallet_scores.csv (wallet, score, tier_code)
with upsert semantics; an on-chain publisher implements the same
protocol outside this package.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Protocol

from backend_occr.analysis_engine.models import CompositeResult
from backend_occr.occr_logging import get_logger

logger = get_logger(__name__)

CSV_FIELDS = ["wallet", "score", "tier_code"]
SCORE_MIN = 0
SCORE_MAX = 1000
TIER_CODE_MAX = 3


class ScorePublisher(Protocol):
    def publish(self, wallet: str, score: int, tier_code: int) -> None:
        ...


def _check_payload(wallet: str, score: int, tier_code: int) -> None:
    if not wallet:
        raise ValueError("wallet must not be empty")
    if not SCORE_MIN <= score <= SCORE_MAX:
        raise ValueError(f"score must be within [{SCORE_MIN}, {SCORE_MAX}], got {score}")
    if not 0 <= tier_code <= TIER_CODE_MAX:
        raise ValueError(f"tier_code must be within [0, {TIER_CODE_MAX}], got {tier_code}")


class CsvScorePublisher:
    """Upsert (wallet, score, tier_code) rows into a CSV file keyed by wallet."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def read_all(self) -> dict[str, tuple[int, int]]:
        """Return {wallet: (score, tier_code)}; empty when the file does not exist."""
        out: dict[str, tuple[int, int]] = {}
        if not self.path.exists():
            return out
        with open(self.path, newline="", encoding="utf-8") as f:
            for row in csv.DictReader(f):
                w = (row.get("wallet") or "").strip()
                if not w:
                    continue
                out[w] = (int(row["score"]), int(row["tier_code"]))
        return out

    def publish(self, wallet: str, score: int, tier_code: int) -> None:
        _check_payload(wallet, score, tier_code)
        rows = self.read_all()
        previous = rows.get(wallet)
        rows[wallet] = (int(score), int(tier_code))
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", newline="", encoding="utf-8") as f:
            w = csv.DictWriter(f, fieldnames=CSV_FIELDS)
            w.writeheader()
            for addr in sorted(rows):
                s, t = rows[addr]
                w.writerow({"wallet": addr, "score": s, "tier_code": t})
        logger.info(
            "score_published",
            wallet=wallet[:16] + "..." if len(wallet) > 16 else wallet,
            score=score,
            tier_code=tier_code,
            replaced=previous is not None,
            path=str(self.path),
        )


def publish_result(publisher: ScorePublisher, wallet: str, result: CompositeResult) -> None:
    """Send a CompositeResult through a publisher as (score, tier code)."""
    publisher.publish(wallet, result.score, result.tier_code)
