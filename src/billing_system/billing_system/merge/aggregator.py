from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ..core.constants import MERGED_INVOICE_PREFIX, MIN_MERGE_SOURCES
from ..core.exceptions import MergeError
from ..invoices.model import BillDetails, CompanyRef, RegularInvoice
from .model import MergedEmployeeRow, MergedInvoice, SelectionSummary, SourceSummary

ZERO = Decimal("0")

SUMMED_FIELDS = ("base_amount", "service_charge", "pf_amount", "esic_amount", "gst_amount", "total_amount")


def _distinct_sources(sources: Sequence[RegularInvoice]) -> list[RegularInvoice]:
    seen: set[str] = set()
    out: list[RegularInvoice] = []
    for inv in sources:
        if inv.invoice_id in seen:
            continue
        seen.add(inv.invoice_id)
        out.append(inv)
    return out


def _sum_bill_details(sources: Iterable[RegularInvoice]) -> BillDetails:
    totals = {name: ZERO for name in SUMMED_FIELDS}
    for inv in sources:
        for name in SUMMED_FIELDS:
            value = getattr(inv.bill_details, name)
            totals[name] += value if value is not None else ZERO
    return BillDetails(**totals)


def _merged_companies(sources: Iterable[RegularInvoice]) -> tuple[CompanyRef, ...]:
    by_id: dict[str, CompanyRef] = {}
    for inv in sources:
        by_id.setdefault(inv.company.company_id, inv.company)
    return tuple(by_id.values())


def _employee_rows(sources: Iterable[RegularInvoice]) -> tuple[MergedEmployeeRow, ...]:
    # Straight concatenation: the same person billed on two sources stays twice.
    rows: list[MergedEmployeeRow] = []
    for inv in sources:
        for emp in inv.employees:
            rows.append(
                MergedEmployeeRow(
                    name=emp.name,
                    present_days=emp.present_days,
                    salary=emp.salary,
                    source_company=inv.company.name,
                    source_invoice_id=inv.invoice_id,
                    source_invoice_number=inv.invoice_number,
                )
            )
    return tuple(rows)


def merged_invoice_number(created_at: datetime, source_count: int) -> str:
    return f"{MERGED_INVOICE_PREFIX}-{created_at:%Y%m%d%H%M%S}-{source_count}"


def merge_invoices(
    sources: Sequence[RegularInvoice],
    notes: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
) -> MergedInvoice:
    """Combine issued invoices into one consolidated record.

    Pure: sources are only read, and nothing is persisted here. Repeated ids
    are counted once.
    """
    distinct = _distinct_sources(sources)
    if len(distinct) < MIN_MERGE_SOURCES:
        raise MergeError(
            "min-two-required",
            f"select at least {MIN_MERGE_SOURCES} distinct invoices to merge (got {len(distinct)})",
        )

    created_at = now or datetime.now()
    return MergedInvoice(
        invoice_number=merged_invoice_number(created_at, len(distinct)),
        source_invoice_ids=tuple(inv.invoice_id for inv in distinct),
        merged_companies=_merged_companies(distinct),
        bill_details=_sum_bill_details(distinct),
        employees=_employee_rows(distinct),
        created_at=created_at,
        notes=(notes or "").strip() or None,
    )


def summarize_sources(sources: Iterable[RegularInvoice]) -> list[SourceSummary]:
    return [
        SourceSummary(
            invoice_id=inv.invoice_id,
            invoice_number=inv.invoice_number,
            company=inv.company.name,
            total_amount=inv.bill_details.total_amount,
        )
        for inv in sources
    ]


def selection_summary(invoices: Iterable[RegularInvoice]) -> SelectionSummary:
    items = list(invoices)
    return SelectionSummary(
        count=len(items),
        total_amount=sum((inv.bill_details.total_amount for inv in items), ZERO),
    )
