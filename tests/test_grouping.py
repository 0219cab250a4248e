import random

import pytest

from kural.exceptions import ValidationError
from kural.grouping import (
    address_household_id,
    address_key,
    filter_households,
    group_households,
    members_at_address,
    search_households,
    validate_family_mapping,
)
from kural.models import normalize_voter


def test_family_id_households_group_together():
    partition = group_households([{"familyId": "F1", "age": 40}, {"familyId": "F1", "age": 10}])

    assert len(partition.households) == 1
    household = partition.households[0]
    assert household.id == "F1"
    assert household.total_members == 2
    assert household.head_of_family.age == 40


def test_address_households_group_together():
    partition = group_households([
        {"Door_No": "12", "Street": "Main", "age": 30},
        {"Door_No": "12", "Street": "Main", "age": 5},
    ])

    assert len(partition.households) == 1
    household = partition.households[0]
    assert household.id.startswith("address-family-")
    assert household.address_key == "12-Main"
    assert household.total_members == 2


def test_degenerate_address_is_ungrouped():
    partition = group_households([{"Door_No": "", "Street": "", "age": 20}])

    assert partition.households == []
    assert partition.total_families == 0
    assert len(partition.ungrouped) == 1


def test_explicit_family_id_wins_over_address():
    partition = group_households([
        {"familyId": "F9", "Door_No": "1", "Street": "North"},
        {"familyId": "F9", "Door_No": "77", "Street": "South"},
    ])
    assert [h.id for h in partition.households] == ["F9"]
    assert partition.households[0].total_members == 2


def test_family_households_come_before_address_households(booth_voters):
    partition = group_households(booth_voters)

    assert [h.source for h in partition.households] == ["family_id", "address"]
    assert partition.households[0].id == "F-7"
    assert partition.total_families == 2
    assert [v.record_id for v in partition.ungrouped] == ["v6"]


def test_single_member_household_is_valid():
    partition = group_households([{"Door_No": "3", "Street": "Lake View"}])
    assert partition.households[0].total_members == 1


def test_head_is_oldest_with_ties_in_roster_order():
    partition = group_households([
        {"_id": "a", "familyId": "F", "age": 50},
        {"_id": "b", "familyId": "F", "age": 70},
        {"_id": "c", "familyId": "F", "age": 70},
        {"_id": "d", "familyId": "F", "age": "x"},
    ])
    members = partition.households[0].members
    assert [m.record_id for m in members] == ["b", "c", "a", "d"]
    assert partition.households[0].head_of_family.record_id == "b"


def test_total_families_counts_distinct_ids_and_addresses():
    voters = [
        {"familyId": "F1"}, {"familyId": "F1"}, {"familyId": "F2"},
        {"Door_No": "1", "Street": "A"}, {"Door_No": "1", "Street": "A"},
        {"Door_No": "2", "Street": "A"},
        {"Door_No": "", "Street": ""},
    ]
    partition = group_households(voters)
    assert partition.total_families == 4
    assert partition.grouped_voters == 6
    assert partition.grouped_voters + len(partition.ungrouped) == len(voters)


def test_grouping_properties_hold_on_random_rosters():
    rng = random.Random(7)
    for _ in range(25):
        voters = []
        for _ in range(rng.randint(0, 40)):
            voter = {"age": rng.choice([rng.randint(18, 99), "", None, "abc"])}
            if rng.random() < 0.3:
                voter["familyId"] = rng.choice(["F1", "F2", "F3"])
            voter[rng.choice(["Door_No", "HouseNo", "door_no"])] = rng.choice(["", "1", "2", "3"])
            voter[rng.choice(["Street", "Anubhag_name"])] = rng.choice(["", "East", "West"])
            voter["verified"] = rng.random() < 0.5
            voters.append(voter)

        partition = group_households(voters)
        assert sum(h.total_members for h in partition.households) <= len(voters)
        for household in partition.households:
            assert household.head_of_family.age == max(m.age for m in household.members)
            assert household.verified_members <= household.total_members

        again = group_households(voters)
        assert [h.id for h in again.households] == [h.id for h in partition.households]
        assert [[m.raw for m in h.members] for h in again.households] == \
            [[m.raw for m in h.members] for h in partition.households]


def test_address_ids_survive_reordering(booth_voters):
    forward = {h.id: {m.record_id for m in h.members} for h in group_households(booth_voters).households}
    backward = {h.id: {m.record_id for m in h.members} for h in group_households(booth_voters[::-1]).households}
    assert forward == backward
    assert address_household_id("12-Main Road") in forward


def test_address_key_trims_whitespace():
    assert address_key(normalize_voter({"Door_No": " 5", "Street": "Main "})) == "5-Main"
    assert address_key(normalize_voter({})) == "-"


def test_members_at_address(booth_voters):
    members = members_at_address(booth_voters, "12-Main Road")
    assert [m.record_id for m in members] == ["v1", "v2", "v3"]
    assert members_at_address(booth_voters, "nowhere") == []


def test_search_households(booth_voters):
    households = group_households(booth_voters).households
    assert [h.id for h in search_households(households, "murugan")] == [households[1].id]
    assert [h.id for h in search_households(households, "TEMPLE")] == ["F-7"]
    assert len(search_households(households, "")) == 2


def test_filter_households_by_survey_status():
    households = group_households([
        {"familyId": "done", "surveyed": True},
        {"familyId": "done", "surveyed": True},
        {"familyId": "half", "surveyed": True},
        {"familyId": "half"},
    ]).households

    assert [h.id for h in filter_households(households, "survey_completed")] == ["done"]
    assert [h.id for h in filter_households(households, "survey_pending")] == ["half"]
    assert len(filter_households(households, "all")) == 2
    with pytest.raises(ValidationError):
        filter_households(households, "bogus")


def test_validate_family_mapping():
    assert validate_family_mapping("  F-12 ", ["a", "b"]) == "F-12"
    with pytest.raises(ValidationError):
        validate_family_mapping("   ", ["a", "b"])
    with pytest.raises(ValidationError):
        validate_family_mapping("F-12", ["a"])
    with pytest.raises(ValidationError):
        validate_family_mapping("F-12", ["a", "a"])
