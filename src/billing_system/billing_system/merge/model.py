from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..invoices.model import BillDetails, CompanyRef


@dataclass(frozen=True)
class MergedEmployeeRow:
    name: str
    present_days: int
    salary: Optional[Decimal]
    source_company: str
    source_invoice_id: str
    source_invoice_number: str


@dataclass(frozen=True)
class MergedInvoice:
    """Consolidated invoice over two or more sources.

    ``merged_id`` is None until the repository has stored it.
    """

    invoice_number: str
    source_invoice_ids: tuple[str, ...]
    merged_companies: tuple[CompanyRef, ...]
    bill_details: BillDetails
    employees: tuple[MergedEmployeeRow, ...]
    created_at: Optional[datetime]
    notes: Optional[str] = None
    merged_id: Optional[str] = None

    is_merged = True

    def with_id(self, merged_id: str) -> "MergedInvoice":
        return replace(self, merged_id=str(merged_id))


@dataclass(frozen=True)
class SourceSummary:
    invoice_id: str
    invoice_number: str
    company: str
    total_amount: Decimal


@dataclass(frozen=True)
class MergeResult:
    merged: MergedInvoice
    sources: list[SourceSummary]


@dataclass(frozen=True)
class SelectionSummary:
    count: int
    total_amount: Decimal


@dataclass(frozen=True)
class StatusBucket:
    key: str
    count: int
    amount: Decimal


@dataclass(frozen=True)
class CompanyBucket:
    company_id: str
    company: str
    count: int
    amount: Decimal


@dataclass(frozen=True)
class InvoiceStats:
    total_invoices: int
    total_amount: Decimal
    merged_count: int
    regular_count: int
    by_status: tuple[StatusBucket, ...] = ()
    by_payment_status: tuple[StatusBucket, ...] = ()
    by_company: tuple[CompanyBucket, ...] = ()
    recent_merged: tuple[MergedInvoice, ...] = ()
