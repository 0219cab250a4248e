"""
Utility functions for the booth household rollup.
"""

from .timing import (
    TimingResult,
    format_duration,
    timed_operation,
)

__all__ = [
    "TimingResult",
    "format_duration",
    "timed_operation",
]
