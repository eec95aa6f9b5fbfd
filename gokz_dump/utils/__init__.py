"""
Utilities package for gokz-dump.

Exports shared helpers for logging and profiling. Keep this package free of
GOKZ-specific logic.
"""

from gokz_dump.utils.logging import configure_logging, get_logger
from gokz_dump.utils.profiler import ProfileStats, StageTimings, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "StageTimings",
    "profile_block",
]
