import io

import pandas as pd
import pytest

from src.billing_system.billing_system.attendance.importer import frame_to_rows, read_attendance_sheet
from src.billing_system.billing_system.attendance.normalizer import normalize_attendance
from src.billing_system.billing_system.core.exceptions import ValidationError


def test_csv_sheet_feeds_normalizer():
    csv = io.StringIO("Name,Present Day,Overtime Days,Total Day\nRamesh,26,0,30\nSuresh,24,2,30\n,10,,\n")

    rows = read_attendance_sheet(csv, suffix=".csv")
    result = normalize_attendance(rows)

    assert [r.name for r in result.records] == ["Ramesh", "Suresh"]
    assert result.records[1].overtime_days == 2
    assert len(result.skipped) == 1


def test_frame_to_rows_maps_aliases_and_blanks():
    df = pd.DataFrame({"Employee Name": ["A"], "present_days": [12], "Absent Day": [None]})

    rows = frame_to_rows(df)

    assert rows == [{"name": "A", "present_days": 12, "absent_days": None}]


def test_unsupported_file_type_is_rejected():
    with pytest.raises(ValidationError) as exc:
        read_attendance_sheet(io.BytesIO(b""), suffix=".pdf")
    assert exc.value.field == "file"
