from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from .model import AttendanceRecord

_WS = re.compile(r"\s+")


def normalize_name(name: str) -> str:
    """Trim, lowercase and collapse inner whitespace."""
    return _WS.sub(" ", (name or "").strip().lower())


@dataclass(frozen=True)
class RosterWarning:
    name: str
    message: str


def find_unknown_names(records: Iterable[AttendanceRecord], roster_names: Iterable[str]) -> list[RosterWarning]:
    """Report extracted names missing from the company roster.

    Advisory only: callers show these next to the row, calculation is not
    affected. An empty roster produces no warnings.
    """
    known = {normalize_name(n) for n in roster_names if n}
    if not known:
        return []

    warnings: list[RosterWarning] = []
    for rec in records:
        if normalize_name(rec.name) not in known:
            warnings.append(RosterWarning(name=rec.name, message="not found in company employee list"))
    return warnings
