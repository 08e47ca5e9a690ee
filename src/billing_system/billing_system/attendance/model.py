from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """One employee's attendance for a billing period.

    ``total_days`` and ``absent_days`` are informational only; invoice money
    is computed from ``present_days`` and ``overtime_days``.
    """

    name: str
    present_days: int
    overtime_days: int = 0
    total_days: Optional[int] = None
    absent_days: Optional[int] = None


@dataclass(frozen=True)
class SkippedRow:
    index: int
    field: str
    reason: str
    raw: dict = field(default_factory=dict)


@dataclass(frozen=True)
class NormalizedAttendance:
    records: list[AttendanceRecord]
    skipped: list[SkippedRow]

    @property
    def total_present_days(self) -> int:
        return sum(r.present_days for r in self.records)

    @property
    def total_overtime_days(self) -> int:
        return sum(r.overtime_days for r in self.records)
