import pytest

from kural.models import FIELD_ALIASES, first_present, normalize_voter, parse_age


def test_empty_record_defaults():
    voter = normalize_voter({})
    assert voter.name == "Unknown"
    assert voter.age == 0
    assert voter.verified is False
    assert voter.surveyed is False
    assert voter.house_no == ""
    assert voter.street == ""


@pytest.mark.parametrize("raw", [None, 42, "voter", [], ["a", "b"]])
def test_non_mapping_inputs_do_not_raise(raw):
    voter = normalize_voter(raw)
    assert voter.name == "Unknown"
    assert voter.age == 0
    assert voter.verified is False


def test_name_resolution_order():
    assert normalize_voter({"name": {"english": "Ravi"}, "Name": "RAVI K"}).name == "Ravi"
    assert normalize_voter({"name": {"tamil": "ரவி"}, "Name": "RAVI K"}).name == "RAVI K"
    assert normalize_voter({"name": "ravi"}).name == "ravi"
    # A nested name without an English value is not a usable string
    assert normalize_voter({"name": {"tamil": "ரவி"}}).name == "Unknown"


def test_age_resolution_and_parsing():
    assert normalize_voter({"age": "45", "Age": "50"}).age == 45
    assert normalize_voter({"Age": 50}).age == 50
    assert normalize_voter({"age": "", "Age": "33"}).age == 33
    assert normalize_voter({"age": "n/a"}).age == 0
    assert normalize_voter({"age": "42 yrs"}).age == 42
    assert normalize_voter({"age": 38.9}).age == 38


@pytest.mark.parametrize("value, expected", [
    (None, 0),
    (True, 0),
    ("", 0),
    ("  7", 7),
    ("-3", -3),
    (float("nan"), 0),
    ({"years": 3}, 0),
])
def test_parse_age_edge_cases(value, expected):
    assert parse_age(value) == expected


def test_house_number_resolution_order():
    record = {"HouseNo": "2", "Door_No": "3", "door_no": "5"}
    assert normalize_voter(record).house_no == "2"
    assert normalize_voter({"Door_no": "4", "door_no": "5"}).house_no == "4"
    assert normalize_voter({"Address-House no": "1", "HouseNo": "2"}).house_no == "1"
    assert normalize_voter({"Door_No": 12}).house_no == "12"


def test_street_resolution_order():
    assert normalize_voter({"Street": "Main", "address": "x"}).street == "Main"
    assert normalize_voter({"Anubhag_name": "Ward 9", "address": "x"}).street == "Ward 9"
    assert normalize_voter({"address": "Old Lane"}).street == "Old Lane"


def test_verified_flag():
    assert normalize_voter({"verified": True}).verified is True
    assert normalize_voter({"status": "verified"}).verified is True
    assert normalize_voter({"status": "pending"}).verified is False
    # Only the boolean counts, not truthy strings
    assert normalize_voter({"verified": "true"}).verified is False


def test_gender_buckets():
    assert normalize_voter({"gender": "Male"}).gender_bucket == "male"
    assert normalize_voter({"Sex": "F"}).gender_bucket == "female"
    assert normalize_voter({"sex": "TG"}).gender_bucket == "other"
    # Surrounding whitespace is not trimmed
    assert normalize_voter({"gender": " male"}).gender_bucket == "other"
    assert normalize_voter({}).gender_bucket == ""


def test_first_present_skips_empty_values():
    record = {"mobile": "", "Mobile No": None, "Mobile": "99999"}
    assert first_present(record, FIELD_ALIASES["mobile"]) == "99999"
    assert first_present(record, ("missing",), default="x") == "x"
    assert first_present("not a mapping", ("a",), default=0) == 0


def test_identity_fields(booth_voters):
    voter = normalize_voter(booth_voters[3])
    assert voter.record_id == "v4"
    assert voter.voter_id == "TNB7654321"
    assert voter.family_id == "F-7"
    assert voter.raw is booth_voters[3]
