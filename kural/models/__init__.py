"""
Data models for the booth household rollup.

Voter records are consumed from the backend; households and statistics are
derived in memory and discarded on every reload.
"""

from .voter import (
    FIELD_ALIASES,
    NormalizedVoter,
    first_present,
    normalize_voter,
    normalize_voters,
    parse_age,
    parse_int,
)
from .household import Household, SOURCE_ADDRESS, SOURCE_FAMILY_ID
from .stats import BoothStats, SurveySummary

__all__ = [
    # Voter models
    "FIELD_ALIASES",
    "NormalizedVoter",
    "first_present",
    "normalize_voter",
    "normalize_voters",
    "parse_age",
    "parse_int",

    # Household models
    "Household",
    "SOURCE_ADDRESS",
    "SOURCE_FAMILY_ID",

    # Statistics
    "BoothStats",
    "SurveySummary",
]
