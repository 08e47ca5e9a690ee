from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional, Union

from ..attendance.model import AttendanceRecord, SkippedRow
from ..attendance.normalizer import AttendanceNormalizer
from ..attendance.roster import RosterWarning, find_unknown_names
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import InvoiceStatus, PaymentStatus
from ..core.exceptions import NotFoundError, ValidationError
from .calculator.base import InvoiceCalculator
from .calculator.statutory_calculator import StatutoryInvoiceCalculator
from .model import (
    CompanyInvoiceStats,
    ExtractedEmployee,
    InvoiceBreakdown,
    InvoicePage,
    InvoiceSnapshot,
    RateConfig,
    RegularInvoice,
)
from .repository import InvoiceRepository

logger = logging.getLogger(__name__)

RatesInput = Union[RateConfig, Mapping[str, Any]]


@dataclass(frozen=True)
class InvoicePreview:
    records: list[AttendanceRecord]
    breakdown: InvoiceBreakdown
    skipped: list[SkippedRow]
    roster_warnings: list[RosterWarning]
    rates: RateConfig


class InvoiceService:
    def __init__(
        self,
        invoices: InvoiceRepository,
        *,
        calculator: Optional[InvoiceCalculator] = None,
        rate_defaults: Optional[Mapping[str, Any]] = None,
    ):
        self._invoices = invoices
        self._calculator = calculator or StatutoryInvoiceCalculator()
        self._rate_defaults = dict(rate_defaults or {})

    def build_rates(self, rates: RatesInput) -> RateConfig:
        if isinstance(rates, RateConfig):
            return rates.validate()
        return RateConfig.from_mapping(rates, defaults=self._rate_defaults).validate()

    def preview(
        self,
        rows: Iterable[Mapping[str, Any]],
        rates: RatesInput,
        *,
        days_in_period: Optional[int] = None,
        roster_names: Iterable[str] = (),
    ) -> InvoicePreview:
        rate_config = self.build_rates(rates)
        normalized = AttendanceNormalizer(days_in_period=days_in_period).normalize(rows)
        for s in normalized.skipped:
            logger.warning("Skipped attendance row %d (%s): %s", s.index, s.field, s.reason)

        breakdown = self._calculator.compute(normalized.records, rate_config)
        return InvoicePreview(
            records=normalized.records,
            breakdown=breakdown,
            skipped=normalized.skipped,
            roster_warnings=find_unknown_names(normalized.records, roster_names),
            rates=rate_config,
        )

    def create_invoice(
        self,
        *,
        company_id: str,
        rows: Iterable[Mapping[str, Any]],
        rates: RatesInput,
        days_in_period: Optional[int] = None,
        invoice_number: Optional[str] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> str:
        company_id = require_non_empty(company_id or "", "company_id")

        preview = self.preview(rows, rates, days_in_period=days_in_period)
        if not preview.records:
            raise ValidationError("records", "no valid attendance rows to invoice")

        now = now or datetime.now()
        per_day = preview.rates.per_day_rate
        snapshot = InvoiceSnapshot(
            company_id=company_id,
            invoice_number=invoice_number or f"INV-{now:%Y%m%d%H%M%S}",
            breakdown=preview.breakdown,
            rate_config=preview.rates,
            employees=tuple(
                ExtractedEmployee(name=r.name, present_days=r.present_days, salary=r.present_days * per_day)
                for r in preview.records
            ),
            notes=(notes or "").strip() or None,
            metadata={"totalEmployees": len(preview.records), "perDayRate": float(per_day)},
        )
        invoice_id = self._invoices.persist_invoice(snapshot)
        logger.info(
            "Created invoice %s for company %s: grand total %s", snapshot.invoice_number, company_id, preview.breakdown.grand_total
        )
        return invoice_id

    def get_invoice(self, invoice_id: str) -> RegularInvoice:
        inv = self._invoices.get_by_id(str(invoice_id))
        if not inv:
            raise NotFoundError(f"invoice {invoice_id} not found")
        return inv

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
        company_id = require_non_empty(company_id or "", "company_id")
        return self._invoices.list_company_invoices(
            company_id, status=status, start_date=start_date, end_date=end_date, page=page, limit=limit
        )

    def update_invoice(
        self,
        invoice_id: str,
        *,
        status: Optional[InvoiceStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
    ) -> RegularInvoice:
        if status is None and payment_status is None:
            raise ValidationError("status", "nothing to update: give status or payment_status")
        if not self._invoices.update_status(str(invoice_id), status=status, payment_status=payment_status):
            raise NotFoundError(f"invoice {invoice_id} not found")
        logger.info("Invoice %s updated (status=%s, payment_status=%s)", invoice_id, status, payment_status)
        return self.get_invoice(invoice_id)

    def delete_invoice(self, invoice_id: str) -> None:
        if not self._invoices.delete_invoice(str(invoice_id)):
            raise NotFoundError(f"invoice {invoice_id} not found")
        logger.info("Deleted invoice %s", invoice_id)

    def company_stats(self, company_id: str) -> CompanyInvoiceStats:
        return self._invoices.get_company_stats(require_non_empty(company_id or "", "company_id"))
