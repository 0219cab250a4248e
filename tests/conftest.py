import os

import pytest

# Keep test runs from writing log files
os.environ.setdefault("LOG_TO_FILE", "0")


@pytest.fixture
def booth_voters():
    return [
        {"_id": "v1", "voterID": "TNA1234567", "name": {"english": "Murugan", "tamil": "முருகன்"},
         "age": "62", "gender": "Male", "Door_No": "12", "Street": "Main Road", "verified": True,
         "surveyed": True, "mobile": "9876543210"},
        {"_id": "v2", "voterID": "TNA1234568", "Name": "Lakshmi", "Age": 57, "Sex": "F",
         "Door_No": "12", "Street": "Main Road", "status": "verified"},
        {"_id": "v3", "voterID": "TNA1234569", "Name": "Kalaivani", "age": 24, "gender": "female",
         "Door_No": "12", "Street": "Main Road"},
        {"_id": "v4", "EPIC No": "TNB7654321", "Name": "Rangaraj", "age": 85, "gender": "M",
         "familyId": "F-7", "Address-House no": "4", "Address-Street": "Temple St", "surveyed": True},
        {"_id": "v5", "Name": "Selvi", "age": 81, "gender": "female", "familyId": "F-7",
         "Door_no": "9", "Anubhag_name": "Ward 9", "verified": True},
        {"_id": "v6", "Name": "Anbu", "age": "70", "gender": "TG"},
    ]
