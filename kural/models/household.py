"""
Household model.

A household is derived, never persisted: it is rebuilt from the currently
loaded voter list every time the roster is (re)fetched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from .voter import NormalizedVoter, UNKNOWN_NAME

SOURCE_FAMILY_ID = "family_id"
SOURCE_ADDRESS = "address"


@dataclass
class Household:
    """
    A group of voters sharing an operator-assigned familyId or an address.

    ``members`` is ordered oldest first; the first member is the head.
    """

    id: str
    members: List[NormalizedVoter] = field(default_factory=list)
    source: str = SOURCE_ADDRESS
    address_key: str = ""

    @property
    def head_of_family(self) -> Optional[NormalizedVoter]:
        return self.members[0] if self.members else None

    @property
    def head_name(self) -> str:
        head = self.head_of_family
        return head.name if head and head.name else UNKNOWN_NAME

    @property
    def total_members(self) -> int:
        return len(self.members)

    @property
    def verified_members(self) -> int:
        return sum(1 for m in self.members if m.verified)

    @property
    def surveyed_members(self) -> int:
        return sum(1 for m in self.members if m.surveyed)

    @property
    def verification_percent(self) -> int:
        """Verified share of members, rounded for display."""
        if self.total_members == 0:
            return 0
        # Round half up like the mobile client, not banker's rounding
        return int(self.verified_members * 100 / self.total_members + 0.5)

    @property
    def is_fully_verified(self) -> bool:
        return self.verified_members == self.total_members

    @property
    def survey_completed(self) -> bool:
        return self.total_members > 0 and self.surveyed_members == self.total_members

    @property
    def display_address(self) -> str:
        """"<house>, <street>" of the head, falling back to the household id."""
        head = self.head_of_family
        if head is None:
            return self.id
        address = head.house_no
        if head.street:
            address = f"{address}, {head.street}"
        return address or self.id

    @property
    def phone(self) -> str:
        """First member mobile number, if any."""
        for member in self.members:
            if member.mobile:
                return member.mobile
        return ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "source": self.source,
            "address": self.display_address,
            "headOfFamily": self.head_name,
            "totalMembers": self.total_members,
            "verifiedMembers": self.verified_members,
            "verificationPercent": self.verification_percent,
            "fullyVerified": self.is_fully_verified,
            "surveyCompleted": self.survey_completed,
            "phone": self.phone,
            "members": [m.to_dict() for m in self.members],
        }
