"""
Application-level exceptions.

The subscore calculators never raise on in-range input; these are reserved
for configuration loading and snapshot assembly, where bad input should
fail fast before scoring starts.
"""

from __future__ import annotations


class OCCRError(Exception):
    """Base class for all Backend OCCR errors."""


class ConfigError(OCCRError):
    """Invalid scoring configuration (bad env value, thresholds out of order, ...)."""


class SnapshotError(OCCRError):
    """Malformed wallet snapshot payload (missing field, bad timestamp, unknown direction)."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field
