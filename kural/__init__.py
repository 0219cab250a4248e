"""
Kural booth household rollup.

Groups a booth's voter roster into households and computes the
verification / survey progress figures shown to booth agents.
"""

from .grouping import HouseholdPartition, group_households
from .models import BoothStats, Household, NormalizedVoter, normalize_voter
from .rollup import compute_booth_stats

__version__ = "0.1.0"

__all__ = [
    "BoothStats",
    "Household",
    "HouseholdPartition",
    "NormalizedVoter",
    "compute_booth_stats",
    "group_households",
    "normalize_voter",
]
