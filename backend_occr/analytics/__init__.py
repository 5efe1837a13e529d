"""
OCCR scoring pipeline.

Single entrypoint for the CLI and batch jobs: snapshot -> five subscores ->
composite result. Modules: scoring_pipeline, batch_scoring.
"""

from backend_occr.analytics.scoring_pipeline import (
    compute_subscores,
    score_payload,
    score_snapshot,
)
from backend_occr.analytics.batch_scoring import score_snapshots, write_scores_csv

__all__ = [
    "compute_subscores",
    "score_payload",
    "score_snapshot",
    "score_snapshots",
    "write_scores_csv",
]
