"""
CSV export of booth households.

One row per member, grouped by household, so the sheet can be printed or
sorted by house in a spreadsheet.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from .logger import get_logger
from .models import Household, NormalizedVoter

logger = get_logger(__name__)

EXPORT_COLUMNS = [
    "household_id",
    "household_source",
    "head_of_family",
    "address",
    "member_no",
    "name",
    "epic_no",
    "age",
    "gender",
    "mobile",
    "verified",
    "surveyed",
]


def households_frame(
    households: Iterable[Household],
    ungrouped: Optional[Iterable[NormalizedVoter]] = None,
) -> pd.DataFrame:
    """
    Flatten households into a member-per-row DataFrame.

    Ungrouped voters, when given, are appended with an empty household id.
    """
    rows = []
    for household in households:
        for idx, member in enumerate(household.members, start=1):
            rows.append({
                "household_id": household.id,
                "household_source": household.source,
                "head_of_family": household.head_name,
                "address": household.display_address,
                "member_no": idx,
                "name": member.name,
                "epic_no": member.voter_id,
                "age": member.age,
                "gender": member.gender,
                "mobile": member.mobile,
                "verified": member.verified,
                "surveyed": member.surveyed,
            })

    for member in ungrouped or []:
        rows.append({
            "household_id": "",
            "household_source": "",
            "head_of_family": "",
            "address": "",
            "member_no": 0,
            "name": member.name,
            "epic_no": member.voter_id,
            "age": member.age,
            "gender": member.gender,
            "mobile": member.mobile,
            "verified": member.verified,
            "surveyed": member.surveyed,
        })

    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def write_households_csv(
    households: Iterable[Household],
    out_dir: Path,
    booth_id: str,
    ungrouped: Optional[Iterable[NormalizedVoter]] = None,
) -> Path:
    """
    Write ``households_<booth>.csv`` into ``out_dir``.

    Returns:
        Path of the written file
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    csv_path = out_dir / f"households_{booth_id}.csv"

    df = households_frame(households, ungrouped)
    df.to_csv(csv_path, index=False, encoding="utf-8")

    logger.info(f"Household CSV ({len(df)} rows) written to {csv_path}")
    return csv_path
