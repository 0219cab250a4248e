"""
Progress rollup over a booth roster.

Turns the loaded voter list (and its household partition) into the figures
shown on the dashboard and reports views. Every function here is pure and
total: ``None`` or empty inputs give zeroed results, never an exception.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from .grouping import HouseholdPartition, group_households
from .logger import get_logger
from .models import BoothStats, Household, NormalizedVoter, SurveySummary, normalize_voters, parse_int
from .models.voter import first_present

logger = get_logger(__name__)

BOOTH_ID_ALIASES = ("boothid", "boothId", "booth_id", "booth")


def count_verified(voters: Sequence[NormalizedVoter]) -> int:
    return sum(1 for v in voters if v.verified)


def count_surveyed(voters: Sequence[NormalizedVoter]) -> int:
    return sum(1 for v in voters if v.surveyed)


def count_gender(voters: Sequence[NormalizedVoter], bucket: str) -> int:
    return sum(1 for v in voters if v.gender_bucket == bucket)


def count_age_band(voters: Sequence[NormalizedVoter], low: int, high: Optional[int] = None) -> int:
    """Voters with ``low <= age`` and, when given, ``age < high``."""
    return sum(1 for v in voters if v.age >= low and (high is None or v.age < high))


def visits_pending(total_voters: int, active_survey_forms: int, surveys_completed: int) -> int:
    """Every voter should answer every active form once; what is left to do."""
    return max(0, total_voters * active_survey_forms - surveys_completed)


def compute_booth_stats(
    voters: Optional[Sequence[Any]],
    partition: Optional[HouseholdPartition] = None,
    active_survey_forms: int = 0,
    total_voters: Optional[int] = None,
    surveys_completed: Optional[int] = None,
) -> BoothStats:
    """
    Compute global statistics for a booth.

    Args:
        voters: Full booth roster (raw or normalized); None counts as empty
        partition: Household partition of ``voters`` (grouped here if omitted)
        active_survey_forms: Number of currently active survey forms
        total_voters: Server-reported roster size, when paginated
        surveys_completed: Measured completion count; defaults to the number
            of voters flagged ``surveyed``

    Returns:
        BoothStats
    """
    normalized = normalize_voters(voters)
    if partition is None:
        partition = group_households(normalized)

    if total_voters is None or total_voters < 0:
        total_voters = len(normalized)
    if surveys_completed is None or surveys_completed < 0:
        surveys_completed = count_surveyed(normalized)
    active_survey_forms = max(0, active_survey_forms or 0)

    stats = BoothStats(
        total_voters=total_voters,
        total_families=partition.total_families,
        verified_voters=count_verified(normalized),
        surveys_completed=surveys_completed,
        visits_pending=visits_pending(total_voters, active_survey_forms, surveys_completed),
        male_voters=count_gender(normalized, "male"),
        female_voters=count_gender(normalized, "female"),
        others_voters=count_gender(normalized, "other"),
        age_60_plus=count_age_band(normalized, 60, 80),
        age_80_plus=count_age_band(normalized, 80),
        ungrouped_voters=len(partition.ungrouped),
    )
    logger.debug(f"Booth stats: {stats.to_dict()}")
    return stats


def summarize_survey_forms(forms: Optional[Iterable[Any]], booth_id: Optional[str] = None) -> SurveySummary:
    """
    Summarize survey forms for a booth.

    Forms tag their booth under several keys; with no ``booth_id`` every
    form counts.
    """
    booth_forms = [f for f in (forms or []) if isinstance(f, Mapping)]
    if booth_id:
        booth_forms = [
            f for f in booth_forms
            if str(first_present(f, BOOTH_ID_ALIASES)) == str(booth_id)
        ]

    active = [f for f in booth_forms if str(f.get("status") or "").lower() == "active"]
    responses = sum(parse_int(f.get("responseCount")) for f in booth_forms)

    return SurveySummary(
        total_forms=len(booth_forms),
        active_forms=len(active),
        responses_submitted=responses,
    )


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def count_verified_since(voters: Optional[Sequence[Any]], since: datetime) -> int:
    """Verified voters whose ``verifiedAt`` is at or after ``since`` (naive means UTC)."""
    if since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)
    count = 0
    for voter in normalize_voters(voters):
        if not voter.verified:
            continue
        verified_at = _parse_timestamp(voter.verified_at)
        if verified_at is not None and verified_at >= since:
            count += 1
    return count


def household_progress(households: Iterable[Household]) -> List[dict[str, Any]]:
    """Per-household verification rows for display."""
    return [
        {
            "id": h.id,
            "head": h.head_name,
            "address": h.display_address,
            "verified": h.verified_members,
            "total": h.total_members,
            "percent": h.verification_percent,
            "fully_verified": h.is_fully_verified,
        }
        for h in households
    ]
