from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..merge.model import InvoiceStats, MergedInvoice
from ..core.enums import InvoiceStatus, PaymentStatus
from .model import CompanyInvoiceStats, InvoicePage, InvoiceSnapshot, RegularInvoice


class InvoiceRepository(Protocol):
    # Regular invoices
    def persist_invoice(self, snapshot: InvoiceSnapshot) -> str:
        raise NotImplementedError

    def get_by_id(self, invoice_id: str) -> Optional[RegularInvoice]:
        raise NotImplementedError

    def list_company_invoices(
        self,
        company_id: str,
        *,
        status: Optional[InvoiceStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        page: int = 1,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> InvoicePage:
        raise NotImplementedError

    def update_status(
        self,
        invoice_id: str,
        *,
        status: Optional[InvoiceStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
    ) -> bool:
        """False when no regular invoice has this id."""

        raise NotImplementedError

    def delete_invoice(self, invoice_id: str) -> bool:
        """Regular invoices only; merged invoices that used it keep their own copy."""

        raise NotImplementedError

    def get_company_stats(self, company_id: str) -> CompanyInvoiceStats:
        raise NotImplementedError

    def list_available_for_merge(
        self,
        *,
        company_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[RegularInvoice]:
        """Non-merged invoices only. Invoices already used as a merge source stay listed."""

        raise NotImplementedError

    # Merged invoices
    def persist_merged(self, merged: MergedInvoice) -> str:
        """Store the merged record with all its rows atomically."""

        raise NotImplementedError

    def get_merged_by_id(self, merged_id: str) -> Optional[MergedInvoice]:
        raise NotImplementedError

    def list_merged(self, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[MergedInvoice]:
        raise NotImplementedError

    def delete_merged(self, merged_id: str) -> bool:
        """Remove the merged record only; never touches its sources."""

        raise NotImplementedError

    def get_stats(self) -> InvoiceStats:
        raise NotImplementedError
