"""
Downstream score sink: hands (wallet, score, tier code) to persistence.

The engine never retries or manages write failures; publishers are
responsible for idempotent writes.
"""

from backend_occr.oracle.score_publisher import (
    CsvScorePublisher,
    ScorePublisher,
    publish_result,
)

__all__ = ["CsvScorePublisher", "ScorePublisher", "publish_result"]
