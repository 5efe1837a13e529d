"""Bundled demo data for local runs and tests."""

from backend_occr.data.sample import SAMPLE_WALLET, sample_payload, sample_snapshot

__all__ = ["SAMPLE_WALLET", "sample_payload", "sample_snapshot"]
