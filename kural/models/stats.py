"""
Booth statistics models.

Aggregate figures shown on the dashboard and reports views.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any


@dataclass
class SurveySummary:
    """Survey form figures for one booth."""
    total_forms: int = 0
    active_forms: int = 0
    responses_submitted: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class BoothStats:
    """
    Global statistics for a booth roster.

    All counts default to zero so an empty or failed load renders as zeros.
    """

    total_voters: int = 0
    total_families: int = 0
    verified_voters: int = 0
    surveys_completed: int = 0
    visits_pending: int = 0

    male_voters: int = 0
    female_voters: int = 0
    others_voters: int = 0
    age_60_plus: int = 0  # 60-79
    age_80_plus: int = 0

    ungrouped_voters: int = 0

    @property
    def verification_percent(self) -> int:
        if self.total_voters == 0:
            return 0
        return int(self.verified_voters * 100 / self.total_voters + 0.5)

    @property
    def below_60(self) -> int:
        return max(0, self.total_voters - self.age_60_plus - self.age_80_plus)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase shape consumed by the views."""
        return {
            "totalVoters": self.total_voters,
            "totalFamilies": self.total_families,
            "verifiedVoters": self.verified_voters,
            "surveysCompleted": self.surveys_completed,
            "visitsPending": self.visits_pending,
            "maleVoters": self.male_voters,
            "femaleVoters": self.female_voters,
            "othersVoters": self.others_voters,
            "age60Plus": self.age_60_plus,
            "age80Plus": self.age_80_plus,
            "ungroupedVoters": self.ungrouped_voters,
        }

    def summary_str(self) -> str:
        """Generate a human-readable summary string."""
        lines = [
            f"  Voters: {self.total_voters} (verified: {self.verified_voters}, {self.verification_percent}%)",
            f"  Families: {self.total_families} (ungrouped voters: {self.ungrouped_voters})",
            f"  Surveys completed: {self.surveys_completed}, visits pending: {self.visits_pending}",
            f"  Male/Female/Other: {self.male_voters}/{self.female_voters}/{self.others_voters}",
            f"  Age 60-79: {self.age_60_plus}, 80+: {self.age_80_plus}",
        ]
        return "\n".join(lines)
