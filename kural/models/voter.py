"""
Voter data models.

Voter records arrive from the backend under several historical schemas
(imported roll CSVs, the mobile app's own documents, manual entries), so the
same concept can live under different keys. Every logical field is resolved
through one ordered alias table and a single generic lookup.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence


# Ordered candidate keys per logical field. Dotted keys walk nested mappings.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("name.english", "Name", "name"),
    "age": ("age", "Age"),
    "house_no": ("Address-House no", "HouseNo", "Door_No", "Door_no", "door_no"),
    "street": ("Address-Street", "Street", "Anubhag_name", "address"),
    "gender": ("gender", "Gender", "Sex", "sex"),
    "mobile": ("mobile", "Mobile No", "Mobile"),
    "voter_id": ("voterID", "EPIC No", "Number"),
}

UNKNOWN_NAME = "Unknown"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _is_present(value: Any) -> bool:
    return value is not None and value != ""


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _lookup(record: Mapping[str, Any], key: str) -> Any:
    """Fetch a possibly dotted key, returning None when any step is missing."""
    if key in record:
        return record[key]
    if "." not in key:
        return None
    current: Any = record
    for part in key.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return None
        current = current[part]
    return current


def first_present(
    record: Any,
    candidate_keys: Sequence[str],
    default: Any = "",
    accept: Callable[[Any], bool] = _is_present,
) -> Any:
    """
    Return the value of the first candidate key that holds a usable value.

    Args:
        record: Raw voter mapping (anything else resolves to ``default``)
        candidate_keys: Keys in priority order
        default: Value returned when no candidate matches
        accept: Predicate deciding whether a value counts as present

    Returns:
        The first accepted value, or ``default``
    """
    if not isinstance(record, Mapping):
        return default
    for key in candidate_keys:
        value = _lookup(record, key)
        if accept(value):
            return value
    return default


def parse_int(value: Any) -> int:
    """
    Parse a number the way the mobile client does: leading integer or 0.

    >>> parse_int("42 yrs")
    42
    >>> parse_int("abc")
    0
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return 0
        return int(value)
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def parse_age(value: Any) -> int:
    """Age as an integer; unparseable or missing ages count as 0."""
    return parse_int(value)


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


@dataclass
class NormalizedVoter:
    """
    Canonical view of a raw voter record.

    The raw mapping is kept so callers can still reach fields that have no
    canonical accessor (relation names, dynamic survey fields, ...).
    """

    record_id: str = ""
    voter_id: str = ""
    name: str = UNKNOWN_NAME
    age: int = 0
    gender: str = ""
    house_no: str = ""
    street: str = ""
    mobile: str = ""
    family_id: str = ""
    verified: bool = False
    surveyed: bool = False
    verified_at: Optional[str] = None

    raw: Any = field(default=None, repr=False, compare=False)

    @property
    def gender_bucket(self) -> str:
        """Collapse gender spellings into male / female / other ("" when missing)."""
        value = self.gender.lower()
        if value in ("male", "m"):
            return "male"
        if value in ("female", "f"):
            return "female"
        if value:
            return "other"
        return ""

    @property
    def has_address(self) -> bool:
        return bool(self.house_no or self.street)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for display / export."""
        return {
            "record_id": self.record_id,
            "voter_id": self.voter_id,
            "name": self.name,
            "age": self.age,
            "gender": self.gender,
            "house_no": self.house_no,
            "street": self.street,
            "mobile": self.mobile,
            "family_id": self.family_id,
            "verified": self.verified,
            "surveyed": self.surveyed,
        }


def normalize_voter(record: Any) -> NormalizedVoter:
    """
    Resolve a raw voter record into a NormalizedVoter.

    Pure and total: missing or malformed fields degrade to defaults and
    non-mapping inputs produce an empty voter.
    """
    if not isinstance(record, Mapping):
        return NormalizedVoter(raw=record)

    family_id = record.get("familyId")
    verified_at = record.get("verifiedAt")

    return NormalizedVoter(
        record_id=_as_text(first_present(record, ("_id", "id"))),
        voter_id=_as_text(first_present(record, FIELD_ALIASES["voter_id"])),
        name=first_present(record, FIELD_ALIASES["name"], UNKNOWN_NAME, accept=_is_text),
        age=parse_age(first_present(record, FIELD_ALIASES["age"], None)),
        gender=_as_text(first_present(record, FIELD_ALIASES["gender"])),
        house_no=_as_text(first_present(record, FIELD_ALIASES["house_no"])),
        street=_as_text(first_present(record, FIELD_ALIASES["street"])),
        mobile=_as_text(first_present(record, FIELD_ALIASES["mobile"])),
        family_id=_as_text(family_id) if _is_present(family_id) else "",
        verified=record.get("verified") is True or record.get("status") == "verified",
        surveyed=record.get("surveyed") is True,
        verified_at=_as_text(verified_at) if _is_present(verified_at) else None,
        raw=record,
    )


def normalize_voters(records: Optional[Sequence[Any]]) -> list[NormalizedVoter]:
    """Normalize a sequence of records; ``None`` is treated as empty."""
    if not records:
        return []
    return [r if isinstance(r, NormalizedVoter) else normalize_voter(r) for r in records]
