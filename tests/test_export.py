import pandas as pd

from kural.export import EXPORT_COLUMNS, households_frame, write_households_csv
from kural.grouping import group_households


def test_households_frame_has_one_row_per_member(booth_voters):
    partition = group_households(booth_voters)
    df = households_frame(partition.households)

    assert list(df.columns) == EXPORT_COLUMNS
    assert len(df) == 5
    assert df.iloc[0]["household_id"] == "F-7"
    assert df.iloc[0]["name"] == "Rangaraj"
    assert list(df[df["household_id"] == "F-7"]["member_no"]) == [1, 2]


def test_ungrouped_voters_are_appended(booth_voters):
    partition = group_households(booth_voters)
    df = households_frame(partition.households, partition.ungrouped)

    assert len(df) == 6
    assert df.iloc[-1]["household_id"] == ""
    assert df.iloc[-1]["name"] == "Anbu"


def test_empty_frame_keeps_columns():
    df = households_frame([])
    assert df.empty
    assert list(df.columns) == EXPORT_COLUMNS


def test_write_households_csv(tmp_path, booth_voters):
    partition = group_households(booth_voters)
    path = write_households_csv(partition.households, tmp_path / "out", "5")

    assert path.name == "households_5.csv"
    written = pd.read_csv(path, dtype=str, keep_default_na=False)
    assert len(written) == 5
    assert set(written["household_id"]) == {"F-7", partition.households[1].id}
