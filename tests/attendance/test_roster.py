from src.billing_system.billing_system.attendance.model import AttendanceRecord
from src.billing_system.billing_system.attendance.roster import find_unknown_names, normalize_name


def test_normalize_name_collapses_whitespace_and_case():
    assert normalize_name("  Ramesh   KUMAR ") == "ramesh kumar"


def test_unknown_names_are_reported_only():
    records = [
        AttendanceRecord(name="Ramesh  Kumar", present_days=26),
        AttendanceRecord(name="Stranger", present_days=3),
    ]

    warnings = find_unknown_names(records, ["ramesh kumar", "Suresh Patel"])

    assert [w.name for w in warnings] == ["Stranger"]


def test_empty_roster_gives_no_warnings():
    assert find_unknown_names([AttendanceRecord(name="A", present_days=1)], []) == []
