from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..common.money import to_decimal
from ..common.validators import require_non_negative, require_positive
from ..core.constants import (
    DEFAULT_CGST_RATE_PCT,
    DEFAULT_ESIC_RATE_PCT,
    DEFAULT_PF_RATE_PCT,
    DEFAULT_SGST_RATE_PCT,
)
from ..core.enums import GstPayer, InvoiceStatus, PaymentStatus
from ..core.exceptions import ValidationError

ZERO = Decimal("0")

RATE_KEY_ALIASES = {
    "perDayRate": "per_day_rate",
    "perDay": "per_day_rate",
    "overtimeRate": "overtime_rate",
    "serviceChargeRate": "service_charge_rate_pct",
    "serviceChargeRatePct": "service_charge_rate_pct",
    "bonusRate": "bonus_rate_pct",
    "bonusRatePct": "bonus_rate_pct",
    "pfRatePct": "pf_rate_pct",
    "esicRatePct": "esic_rate_pct",
    "cgstRatePct": "cgst_rate_pct",
    "sgstRatePct": "sgst_rate_pct",
    "gstPaidBy": "gst_payer",
    "gstPayer": "gst_payer",
}

RATE_FIELDS = (
    "per_day_rate",
    "overtime_rate",
    "service_charge_rate_pct",
    "bonus_rate_pct",
    "pf_rate_pct",
    "esic_rate_pct",
    "cgst_rate_pct",
    "sgst_rate_pct",
)


@dataclass(frozen=True)
class RateConfig:
    """Billing-period-wide rates. Percentages are plain numbers (13 = 13%)."""

    per_day_rate: Decimal
    overtime_rate: Decimal = ZERO
    service_charge_rate_pct: Decimal = ZERO
    bonus_rate_pct: Decimal = ZERO
    pf_rate_pct: Decimal = DEFAULT_PF_RATE_PCT
    esic_rate_pct: Decimal = DEFAULT_ESIC_RATE_PCT
    cgst_rate_pct: Decimal = DEFAULT_CGST_RATE_PCT
    sgst_rate_pct: Decimal = DEFAULT_SGST_RATE_PCT
    gst_payer: GstPayer = GstPayer.SERVICE_PROVIDER

    def __post_init__(self):
        # Floats and numeric strings become Decimal here.
        try:
            for name in RATE_FIELDS:
                object.__setattr__(self, name, to_decimal(getattr(self, name)))
            if not isinstance(self.gst_payer, GstPayer):
                object.__setattr__(self, "gst_payer", GstPayer.parse(str(self.gst_payer)))
        except (ValueError, TypeError) as exc:
            raise ValidationError("rate", str(exc)) from exc

    def validate(self) -> "RateConfig":
        require_positive(self.per_day_rate, "per_day_rate", error_field="rate")
        require_non_negative(self.overtime_rate, "overtime_rate", error_field="rate")
        for name in RATE_FIELDS[2:]:
            require_non_negative(getattr(self, name), name, error_field="rate")
        return self

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, defaults: Optional[Mapping[str, Any]] = None) -> "RateConfig":
        """Build from a JSON-ish payload; missing keys fall back to ``defaults``.

        Accepts both snake_case and the camelCase names used by the web client.
        """
        values: dict[str, Any] = {}
        for source in (defaults or {}, data):
            for key, value in source.items():
                if value is not None:
                    values[RATE_KEY_ALIASES.get(key, key)] = value

        try:
            config = cls(
                per_day_rate=to_decimal(values.get("per_day_rate")),
                overtime_rate=to_decimal(values.get("overtime_rate")),
                service_charge_rate_pct=to_decimal(values.get("service_charge_rate_pct")),
                bonus_rate_pct=to_decimal(values.get("bonus_rate_pct")),
                pf_rate_pct=to_decimal(values.get("pf_rate_pct"), default=DEFAULT_PF_RATE_PCT),
                esic_rate_pct=to_decimal(values.get("esic_rate_pct"), default=DEFAULT_ESIC_RATE_PCT),
                cgst_rate_pct=to_decimal(values.get("cgst_rate_pct"), default=DEFAULT_CGST_RATE_PCT),
                sgst_rate_pct=to_decimal(values.get("sgst_rate_pct"), default=DEFAULT_SGST_RATE_PCT),
                gst_payer=GstPayer.parse(str(values.get("gst_payer", GstPayer.SERVICE_PROVIDER.value))),
            )
        except (ValueError, TypeError) as exc:
            raise ValidationError("rate", str(exc)) from exc
        return config


@dataclass(frozen=True)
class InvoiceBreakdown:
    """Result of one calculation. Never persisted as-is."""

    total_present_days: int
    total_overtime_days: int
    base_total: Decimal
    overtime_amount: Decimal
    pre_statutory_total: Decimal
    pf_amount: Decimal
    esic_amount: Decimal
    bonus_amount: Decimal
    sub_total: Decimal
    service_charge_amount: Decimal
    total_before_tax: Decimal
    cgst_amount: Decimal
    sgst_amount: Decimal
    grand_total: Decimal
    grand_total_words: str
    gst_payer: GstPayer

    @property
    def gst_amount(self) -> Decimal:
        return self.cgst_amount + self.sgst_amount

    @property
    def gst_included(self) -> bool:
        return self.gst_payer == GstPayer.SERVICE_PROVIDER


@dataclass(frozen=True)
class CompanyRef:
    company_id: str
    name: str
    location: Optional[str] = None


@dataclass(frozen=True)
class BillDetails:
    """Money fields as stored on an issued invoice; sub-fields may be absent."""

    total_amount: Decimal
    base_amount: Optional[Decimal] = None
    service_charge: Optional[Decimal] = None
    pf_amount: Optional[Decimal] = None
    esic_amount: Optional[Decimal] = None
    gst_amount: Optional[Decimal] = None

    @classmethod
    def from_breakdown(cls, breakdown: InvoiceBreakdown) -> "BillDetails":
        return cls(
            total_amount=breakdown.grand_total,
            base_amount=breakdown.base_total,
            service_charge=breakdown.service_charge_amount,
            pf_amount=breakdown.pf_amount,
            esic_amount=breakdown.esic_amount,
            gst_amount=breakdown.gst_amount if breakdown.gst_included else ZERO,
        )


@dataclass(frozen=True)
class ExtractedEmployee:
    name: str
    present_days: int
    salary: Optional[Decimal] = None


@dataclass(frozen=True)
class RegularInvoice:
    """A persisted, non-merged invoice."""

    invoice_id: str
    invoice_number: str
    company: CompanyRef
    bill_details: BillDetails
    employees: tuple[ExtractedEmployee, ...] = ()
    status: InvoiceStatus = InvoiceStatus.DRAFT
    payment_status: PaymentStatus = PaymentStatus.PENDING
    created_at: Optional[datetime] = None

    is_merged = False


@dataclass(frozen=True)
class InvoiceSnapshot:
    """What gets stored when the user confirms "create invoice"."""

    company_id: str
    invoice_number: str
    breakdown: InvoiceBreakdown
    rate_config: RateConfig
    employees: tuple[ExtractedEmployee, ...] = ()
    status: InvoiceStatus = InvoiceStatus.DRAFT
    notes: Optional[str] = None
    metadata: dict = field(default_factory=dict)


@dataclass(frozen=True)
class InvoicePage:
    invoices: list[RegularInvoice]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        if self.limit <= 0:
            return 0
        return (self.total + self.limit - 1) // self.limit


@dataclass(frozen=True)
class CompanyInvoiceStats:
    """Per-company dashboard figures. ``pending_amount`` is everything not fully paid."""

    total_invoices: int
    total_amount: Decimal
    paid_amount: Decimal
    pending_amount: Decimal
    draft_invoices: int
    sent_invoices: int
    paid_invoices: int
