"""
Main entrypoint: score wallet snapshots and optionally publish the results.

Reads one or more snapshot JSON files (or the bundled demo wallet with
--sample), runs the OCCR pipeline, prints subscores, probability, score
and tier per wallet, and optionally writes a results table and upserts
(wallet, score, tier_code) into a score sink CSV.

Env: OCCR_MC_PATHS, OCCR_MC_DT_DAYS, OCCR_TX_CAP_FRAC, OCCR_NC_WINDOW_DAYS,
TIER_A_MAX, TIER_B_MAX, TIER_C_MAX, OCCR_DEFAULT_SIGMA, OCCR_PARALLEL,
LOG_LEVEL, LOG_FORMAT.

Usage:
  python main.py --sample
  python main.py wallet1.json wallet2.json --output data/occr_scores.csv --publish data/wallet_scores.csv
"""

from __future__ import annotations

import argparse
from pathlib import Path

from backend_occr.occr_logging import get_logger

logger = get_logger("main")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compute OCCR credit scores for wallet snapshots.")
    parser.add_argument("snapshots", nargs="*", type=Path, help="Snapshot JSON files")
    parser.add_argument("--sample", action="store_true", help="Score the bundled demo wallet")
    parser.add_argument("--output", type=Path, default=None, help="Write the results table to this CSV")
    parser.add_argument("--publish", type=Path, default=None, help="Upsert (wallet, score, tier_code) into this CSV")
    parser.add_argument("--parallel", action="store_true", help="Evaluate subscores on a thread pool")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Score the requested snapshots; return a process exit code."""
    args = _parse_args(argv)

    from backend_occr.analysis_engine.snapshot import load_snapshot
    from backend_occr.analytics.batch_scoring import score_snapshots, write_scores_csv
    from backend_occr.config.settings import get_settings
    from backend_occr.core.exceptions import OCCRError
    from backend_occr.data.sample import sample_snapshot
    from backend_occr.oracle.score_publisher import CsvScorePublisher

    if not args.snapshots and not args.sample:
        logger.error("main_config_error", message="Pass snapshot JSON files or --sample")
        return 1

    try:
        settings = get_settings()
        defaults = {
            "default_volatility": settings.default_volatility,
            "unliquidated_exposure": settings.unliquidated_exposure,
        }
        snapshots = [load_snapshot(path, **defaults) for path in args.snapshots]
        if args.sample:
            snapshots.append(sample_snapshot(**defaults))
        df = score_snapshots(snapshots, settings, parallel=args.parallel or None)
    except (OCCRError, OSError) as e:
        logger.error("main_scoring_failed", error=str(e), error_type=type(e).__name__)
        return 1

    for row in df.itertuples(index=False):
        print(
            f"[occr] {row.wallet} | s_h={row.s_h:.4f} s_c={row.s_c:.4f} s_cu={row.s_cu:.4f} "
            f"s_ct={row.s_ct:.4f} s_nc={row.s_nc:.4f} | prob={row.probability:.4f} "
            f"score={row.score} tier={row.tier}"
        )

    if args.output is not None:
        write_scores_csv(df, args.output)
    if args.publish is not None:
        publisher = CsvScorePublisher(args.publish)
        for row in df.itertuples(index=False):
            publisher.publish(row.wallet, int(row.score), int(row.tier_code))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
