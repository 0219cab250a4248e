"""
Household grouping.

Partitions a booth roster into households:

1. Voters carrying an operator-assigned ``familyId`` group by that id.
2. Everyone else groups by an address key composed from house number and
   street. Voters whose key is empty (or just ``"-"``) are not placed in any
   household; they are reported back as ``ungrouped``.

Address households get an id derived from a hash of the address key, so the
same house keeps the same id however the roster happens to be ordered.
"""

from __future__ import annotations

import hashlib
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence

from .exceptions import ValidationError
from .logger import get_logger
from .models import Household, NormalizedVoter, normalize_voters
from .models.household import SOURCE_ADDRESS, SOURCE_FAMILY_ID

logger = get_logger(__name__)

ADDRESS_FAMILY_PREFIX = "address-family-"
DEGENERATE_ADDRESS_KEY = "-"

SURVEY_FILTERS = ("all", "survey_completed", "survey_pending")


@dataclass
class HouseholdPartition:
    """Result of grouping a roster."""
    households: List[Household] = field(default_factory=list)
    ungrouped: List[NormalizedVoter] = field(default_factory=list)

    @property
    def total_families(self) -> int:
        return len(self.households)

    @property
    def grouped_voters(self) -> int:
        return sum(h.total_members for h in self.households)

    def get(self, household_id: str) -> Optional[Household]:
        for household in self.households:
            if household.id == household_id:
                return household
        return None


def address_key(voter: NormalizedVoter) -> str:
    """Compose the ``<house>-<street>`` grouping key."""
    return f"{voter.house_no}-{voter.street}".strip()


def is_groupable_address(key: str) -> bool:
    return bool(key) and key != DEGENERATE_ADDRESS_KEY


def address_household_id(key: str) -> str:
    """Stable id for an address-based household."""
    digest = hashlib.sha1(key.encode("utf-8")).hexdigest()[:12]
    return f"{ADDRESS_FAMILY_PREFIX}{digest}"


def sort_oldest_first(members: Iterable[NormalizedVoter]) -> List[NormalizedVoter]:
    # sorted() is stable, so equal ages keep roster order
    return sorted(members, key=lambda m: m.age, reverse=True)


def group_households(records: Optional[Sequence[Any]]) -> HouseholdPartition:
    """
    Group a roster into households.

    Args:
        records: Raw voter mappings or NormalizedVoter instances

    Returns:
        HouseholdPartition with familyId households first, then address
        households, each in first-seen order
    """
    voters = normalize_voters(records)

    by_family_id: dict[str, list[NormalizedVoter]] = defaultdict(list)
    by_address: dict[str, list[NormalizedVoter]] = defaultdict(list)
    ungrouped: list[NormalizedVoter] = []

    for voter in voters:
        if voter.family_id:
            by_family_id[voter.family_id].append(voter)
            continue

        key = address_key(voter)
        if is_groupable_address(key):
            by_address[key].append(voter)
        else:
            ungrouped.append(voter)

    households = [
        Household(
            id=family_id,
            members=sort_oldest_first(members),
            source=SOURCE_FAMILY_ID,
            address_key=address_key(members[0]),
        )
        for family_id, members in by_family_id.items()
    ]
    households.extend(
        Household(
            id=address_household_id(key),
            members=sort_oldest_first(members),
            source=SOURCE_ADDRESS,
            address_key=key,
        )
        for key, members in by_address.items()
    )

    logger.debug(
        f"Grouped {len(voters)} voters: {len(by_family_id)} mapped families, "
        f"{len(by_address)} address families, {len(ungrouped)} ungrouped"
    )
    return HouseholdPartition(households=households, ungrouped=ungrouped)


def members_at_address(records: Optional[Sequence[Any]], key: str) -> List[NormalizedVoter]:
    """All voters whose address key equals ``key``, oldest first."""
    voters = normalize_voters(records)
    return sort_oldest_first(v for v in voters if address_key(v) == key)


def search_households(households: Iterable[Household], query: str) -> List[Household]:
    """Case-insensitive match on head-of-family name or address."""
    needle = (query or "").lower()
    return [
        h for h in households
        if needle in h.head_name.lower() or needle in h.display_address.lower()
    ]


def filter_households(households: Iterable[Household], survey_filter: str = "all") -> List[Household]:
    """Filter households by survey status."""
    if survey_filter not in SURVEY_FILTERS:
        raise ValidationError(
            f"Unknown survey filter: {survey_filter}",
            field_name="survey_filter",
            field_value=survey_filter,
            expected=", ".join(SURVEY_FILTERS),
        )
    households = list(households)
    if survey_filter == "survey_completed":
        return [h for h in households if h.survey_completed]
    if survey_filter == "survey_pending":
        return [h for h in households if not h.survey_completed]
    return households


def validate_family_mapping(family_id: str, voter_ids: Sequence[str]) -> str:
    """
    Check a manual family mapping request.

    Returns:
        The trimmed family id
    """
    family_id = (family_id or "").strip()
    if not family_id:
        raise ValidationError("Please enter a Family ID", field_name="family_id")
    unique_ids = list(dict.fromkeys(v for v in voter_ids if v))
    if len(unique_ids) < 2:
        raise ValidationError(
            "Please select at least 2 voters to create a family",
            field_name="voter_ids",
            field_value=len(unique_ids),
            expected=">= 2",
        )
    return family_id
