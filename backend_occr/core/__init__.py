"""
Core utilities: shared exceptions and cross-cutting concerns used by the
analysis engine, pipeline and publisher.
"""

from backend_occr.core.exceptions import ConfigError, OCCRError, SnapshotError

__all__ = ["OCCRError", "ConfigError", "SnapshotError"]
