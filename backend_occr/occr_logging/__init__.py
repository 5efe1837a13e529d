"""
Structured logging for Backend OCCR.

JSON logs with timestamp, wallet, event_type. Use get_logger() in all
modules for aggregation-friendly output.
"""

from backend_occr.occr_logging.logger import bind_wallet, get_logger

__all__ = ["get_logger", "bind_wallet"]
