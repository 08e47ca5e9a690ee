from src.billing_system.billing_system.attendance.normalizer import (
    AttendanceNormalizer,
    coerce_day_count,
    normalize_attendance,
)


def test_normalizer_trims_names_and_coerces_days():
    result = normalize_attendance(
        [
            {"name": "  Ramesh Kumar ", "present_day": "26", "overtime_days": 1.9},
            {"name": "Suresh", "presentDays": 24, "total_day": 30, "absent_day": "6"},
        ]
    )

    assert [r.name for r in result.records] == ["Ramesh Kumar", "Suresh"]
    assert result.records[0].present_days == 26
    assert result.records[0].overtime_days == 1
    assert result.records[1].overtime_days == 0
    assert result.records[1].total_days == 30
    assert result.records[1].absent_days == 6
    assert result.skipped == []


def test_rows_without_name_are_skipped_and_reported():
    result = normalize_attendance(
        [
            {"name": "A", "present_day": 10},
            {"name": "   ", "present_day": 12},
            {"present_day": 5},
            {"name": "B", "present_day": 3},
        ]
    )

    assert [r.name for r in result.records] == ["A", "B"]
    assert [(s.index, s.field) for s in result.skipped] == [(1, "name"), (2, "name")]
    assert result.skipped[0].raw["present_day"] == 12


def test_non_mapping_row_is_skipped():
    result = normalize_attendance([["A", 10], {"name": "B", "present_day": 1}])

    assert len(result.records) == 1
    assert result.skipped[0].field == "row"


def test_clamps_to_period_length_when_known():
    normalizer = AttendanceNormalizer(days_in_period=30)
    result = normalizer.normalize([{"name": "A", "present_day": 45, "overtime_days": 31}])

    assert result.records[0].present_days == 30
    assert result.records[0].overtime_days == 30


def test_only_clamps_at_zero_without_period_length():
    result = normalize_attendance([{"name": "A", "present_day": 45, "overtime_days": -3}])

    assert result.records[0].present_days == 45
    assert result.records[0].overtime_days == 0


def test_present_and_overtime_are_not_cross_checked_against_total():
    result = normalize_attendance([{"name": "A", "present_day": 28, "overtime_days": 5, "total_day": 26}])

    rec = result.records[0]
    assert (rec.present_days, rec.overtime_days, rec.total_days) == (28, 5, 26)


def test_coerce_day_count_handles_junk():
    assert coerce_day_count(None) == 0
    assert coerce_day_count("") == 0
    assert coerce_day_count("abc") == 0
    assert coerce_day_count(float("nan")) == 0
    assert coerce_day_count(True) == 0
    assert coerce_day_count("1,200") == 1200
    assert coerce_day_count("-4") == 0


def test_totals_on_normalized_batch():
    result = normalize_attendance(
        [{"name": "A", "present_day": 26}, {"name": "B", "present_day": 24, "overtime_days": 2}]
    )

    assert result.total_present_days == 50
    assert result.total_overtime_days == 2
