from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...attendance.model import AttendanceRecord
from ..model import InvoiceBreakdown, RateConfig


class InvoiceCalculator(ABC):
    """Calculator interface (Strategy Pattern for invoice pricing)."""

    @abstractmethod
    def compute(self, records: Sequence[AttendanceRecord], rates: RateConfig) -> InvoiceBreakdown:
        raise NotImplementedError
