from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from .model import AttendanceRecord, NormalizedAttendance, SkippedRow

# Extraction output is not consistent about key names.
NAME_KEYS = ("name", "employee_name", "employeeName")
PRESENT_KEYS = ("present_days", "presentDays", "present_day", "present")
OVERTIME_KEYS = ("overtime_days", "overtimeDays", "overtime_day", "ot_days")
TOTAL_KEYS = ("total_days", "totalDays", "total_day")
ABSENT_KEYS = ("absent_days", "absentDays", "absent_day")


def _pick(row: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for k in keys:
        if k in row and row[k] is not None:
            return row[k]
    return None


def coerce_day_count(value: Any) -> int:
    """Best-effort conversion of an extracted day count to an int >= 0.

    Unparseable values count as 0, the same as an empty cell in the editor.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "")
        if not text:
            return 0
        try:
            number = float(text)
        except ValueError:
            return 0
    if math.isnan(number) or math.isinf(number):
        return 0
    return max(int(number), 0)


def _optional_day_count(value: Any) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return coerce_day_count(value)


@dataclass
class AttendanceNormalizer:
    """Validate and coerce raw attendance rows (skip-and-report).

    When ``days_in_period`` is known, present and overtime days are clamped
    to ``[0, days_in_period]``; otherwise they are only clamped at 0.
    """

    days_in_period: Optional[int] = None

    def _clamp(self, days: int) -> int:
        if self.days_in_period is not None:
            return min(days, max(int(self.days_in_period), 0))
        return days

    def normalize(self, rows: Iterable[Mapping[str, Any]]) -> NormalizedAttendance:
        records: list[AttendanceRecord] = []
        skipped: list[SkippedRow] = []

        for index, row in enumerate(rows):
            if not isinstance(row, Mapping):
                skipped.append(SkippedRow(index=index, field="row", reason="row is not a mapping"))
                continue

            raw_name = _pick(row, NAME_KEYS)
            name = str(raw_name).strip() if raw_name is not None else ""
            if not name:
                skipped.append(SkippedRow(index=index, field="name", reason="name is empty", raw=dict(row)))
                continue

            records.append(
                AttendanceRecord(
                    name=name,
                    present_days=self._clamp(coerce_day_count(_pick(row, PRESENT_KEYS))),
                    overtime_days=self._clamp(coerce_day_count(_pick(row, OVERTIME_KEYS))),
                    total_days=_optional_day_count(_pick(row, TOTAL_KEYS)),
                    absent_days=_optional_day_count(_pick(row, ABSENT_KEYS)),
                )
            )

        return NormalizedAttendance(records=records, skipped=skipped)


def normalize_attendance(
    rows: Iterable[Mapping[str, Any]], *, days_in_period: Optional[int] = None
) -> NormalizedAttendance:
    return AttendanceNormalizer(days_in_period=days_in_period).normalize(rows)
