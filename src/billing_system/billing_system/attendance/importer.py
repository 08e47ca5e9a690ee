from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Union

import pandas as pd

from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = {".xlsx", ".xls", ".csv"}

COLUMN_ALIASES = {
    "name": "name",
    "employee": "name",
    "employee_name": "name",
    "present_day": "present_days",
    "present_days": "present_days",
    "present": "present_days",
    "overtime_day": "overtime_days",
    "overtime_days": "overtime_days",
    "ot_days": "overtime_days",
    "total_day": "total_days",
    "total_days": "total_days",
    "absent_day": "absent_days",
    "absent_days": "absent_days",
}


def _canonical_column(col: object) -> str:
    key = str(col).strip().lower().replace(" ", "_").replace("-", "_")
    return COLUMN_ALIASES.get(key, key)


def frame_to_rows(df: pd.DataFrame) -> list[dict]:
    """Turn an attendance sheet into raw rows for the normalizer.

    Blank cells become None; unknown columns pass through untouched.
    """
    df = df.rename(columns=_canonical_column)
    df = df.dropna(how="all")
    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict(orient="records")


def read_attendance_sheet(source: Union[str, Path, IO], *, suffix: str | None = None) -> list[dict]:
    """Read an Excel/CSV attendance sheet into raw rows."""
    if suffix is None:
        if isinstance(source, (str, Path)):
            suffix = Path(source).suffix
        else:
            suffix = Path(getattr(source, "name", "")).suffix
    suffix = (suffix or "").lower()

    if suffix not in SUPPORTED_SUFFIXES:
        raise ValidationError("file", f"unsupported attendance file type {suffix or '(none)'}")

    if suffix == ".csv":
        df = pd.read_csv(source)
    else:
        df = pd.read_excel(source)

    rows = frame_to_rows(df)
    logger.debug("Read %d attendance rows from %s sheet", len(rows), suffix)
    return rows
