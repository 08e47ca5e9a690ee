from __future__ import annotations

import io
import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

import pandas as pd

from ..core.constants import DEFAULT_LIST_LIMIT, MIN_MERGE_SOURCES, RECENT_MERGED_LIMIT
from ..core.exceptions import MergeError, NotFoundError, PersistenceError
from ..invoices.model import RegularInvoice
from ..invoices.repository import InvoiceRepository
from .aggregator import merge_invoices, selection_summary, summarize_sources
from .model import InvoiceStats, MergedInvoice, MergeResult, SelectionSummary

logger = logging.getLogger(__name__)


def _distinct_ids(invoice_ids: Iterable[str]) -> list[str]:
    out: list[str] = []
    for raw in invoice_ids:
        v = str(raw).strip()
        if v and v not in out:
            out.append(v)
    return out


class MergeService:
    def __init__(self, invoices: InvoiceRepository):
        self._invoices = invoices

    def list_candidates(
        self,
        *,
        company_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[RegularInvoice]:
        return self._invoices.list_available_for_merge(
            company_id=company_id, start_date=start_date, end_date=end_date, limit=limit
        )

    def _resolve(self, invoice_ids: Sequence[str]) -> list[RegularInvoice]:
        sources: list[RegularInvoice] = []
        for invoice_id in invoice_ids:
            inv = self._invoices.get_by_id(invoice_id)
            if not inv:
                raise MergeError("unresolved-source", f"invoice {invoice_id} could not be found")
            sources.append(inv)
        return sources

    def summarize_selection(self, invoice_ids: Iterable[str]) -> SelectionSummary:
        return selection_summary(self._resolve(_distinct_ids(invoice_ids)))

    def merge(self, invoice_ids: Iterable[str], notes: Optional[str] = None, *, now: Optional[datetime] = None) -> MergeResult:
        ids = _distinct_ids(invoice_ids)
        if len(ids) < MIN_MERGE_SOURCES:
            raise MergeError(
                "min-two-required",
                f"select at least {MIN_MERGE_SOURCES} distinct invoices to merge (got {len(ids)})",
            )

        sources = self._resolve(ids)
        merged = merge_invoices(sources, notes, now=now)
        try:
            merged_id = self._invoices.persist_merged(merged)
        except PersistenceError:
            logger.error("Storing merged invoice %s failed", merged.invoice_number)
            raise

        merged = merged.with_id(merged_id)
        logger.info(
            "Merged %d invoices into %s (id=%s, total %s)",
            len(ids),
            merged.invoice_number,
            merged_id,
            merged.bill_details.total_amount,
        )
        return MergeResult(merged=merged, sources=summarize_sources(sources))

    def get_merged(self, merged_id: str) -> MergedInvoice:
        merged = self._invoices.get_merged_by_id(str(merged_id))
        if not merged:
            raise NotFoundError(f"merged invoice {merged_id} not found")
        return merged

    def list_merged(self, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[MergedInvoice]:
        return self._invoices.list_merged(limit=limit)

    def delete_merged(self, merged_id: str) -> None:
        if not self._invoices.delete_merged(str(merged_id)):
            raise NotFoundError(f"merged invoice {merged_id} not found")
        logger.info("Deleted merged invoice %s", merged_id)

    def stats(self) -> InvoiceStats:
        stats = self._invoices.get_stats()
        return replace(stats, recent_merged=tuple(self._invoices.list_merged(limit=RECENT_MERGED_LIMIT)))

    def export_employees_xlsx(self, merged_id: str) -> bytes:
        merged = self.get_merged(merged_id)
        df = pd.DataFrame(
            [
                {
                    "Name": e.name,
                    "Present Days": e.present_days,
                    "Salary": float(e.salary) if e.salary is not None else None,
                    "Company": e.source_company,
                    "Source Invoice": e.source_invoice_number,
                }
                for e in merged.employees
            ],
            columns=["Name", "Present Days", "Salary", "Company", "Source Invoice"],
        )
        out = io.BytesIO()
        with pd.ExcelWriter(out, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name=merged.invoice_number[:31])
        return out.getvalue()
