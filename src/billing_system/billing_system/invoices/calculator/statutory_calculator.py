from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from ...attendance.model import AttendanceRecord
from ...common.money import round_half_up
from ...core.enums import GstPayer
from ...core.exceptions import ValidationError
from ..model import InvoiceBreakdown, RateConfig
from ..words import to_words
from .base import InvoiceCalculator

HUNDRED = Decimal("100")


def _pct(amount: Decimal, rate_pct: Decimal) -> Decimal:
    return amount * rate_pct / HUNDRED


class StatutoryInvoiceCalculator(InvoiceCalculator):
    """Man-day billing with PF/ESIC/bonus, service charge and GST.

    Only ``sub_total`` and ``grand_total`` are rounded; every other amount
    keeps full precision so the two rounding points see unrounded inputs.
    CGST/SGST are always computed but only added to the grand total when the
    service provider pays GST.
    """

    def compute(self, records: Sequence[AttendanceRecord], rates: RateConfig) -> InvoiceBreakdown:
        rates.validate()

        for rec in records:
            if rec.present_days < 0:
                raise ValidationError("present_days", f"present_days of {rec.name!r} must not be negative")
            if rec.overtime_days < 0:
                raise ValidationError("overtime_days", f"overtime_days of {rec.name!r} must not be negative")

        total_present_days = sum(r.present_days for r in records)
        total_overtime_days = sum(r.overtime_days for r in records)

        base_total = total_present_days * rates.per_day_rate
        overtime_amount = total_overtime_days * rates.overtime_rate
        pre_statutory_total = base_total + overtime_amount

        pf_amount = _pct(pre_statutory_total, rates.pf_rate_pct)
        esic_amount = _pct(pre_statutory_total, rates.esic_rate_pct)
        bonus_amount = _pct(pre_statutory_total, rates.bonus_rate_pct)
        sub_total = round_half_up(pre_statutory_total + pf_amount + esic_amount + bonus_amount)

        service_charge_amount = _pct(sub_total, rates.service_charge_rate_pct)
        total_before_tax = sub_total + service_charge_amount

        cgst_amount = _pct(total_before_tax, rates.cgst_rate_pct)
        sgst_amount = _pct(total_before_tax, rates.sgst_rate_pct)

        if rates.gst_payer == GstPayer.SERVICE_PROVIDER:
            grand_total = round_half_up(total_before_tax + cgst_amount + sgst_amount)
        else:
            grand_total = round_half_up(total_before_tax)

        return InvoiceBreakdown(
            total_present_days=total_present_days,
            total_overtime_days=total_overtime_days,
            base_total=base_total,
            overtime_amount=overtime_amount,
            pre_statutory_total=pre_statutory_total,
            pf_amount=pf_amount,
            esic_amount=esic_amount,
            bonus_amount=bonus_amount,
            sub_total=sub_total,
            service_charge_amount=service_charge_amount,
            total_before_tax=total_before_tax,
            cgst_amount=cgst_amount,
            sgst_amount=sgst_amount,
            grand_total=grand_total,
            grand_total_words=to_words(grand_total),
            gst_payer=rates.gst_payer,
        )


def compute_invoice(records: Sequence[AttendanceRecord], rates: RateConfig) -> InvoiceBreakdown:
    return StatutoryInvoiceCalculator().compute(records, rates)
