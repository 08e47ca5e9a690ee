"""JSON-ready dicts for breakdowns and invoices (camelCase, as the web client reads them)."""

from __future__ import annotations

from dataclasses import asdict
from decimal import Decimal
from typing import Optional

from ..attendance.model import SkippedRow
from ..attendance.roster import RosterWarning
from ..core.constants import JSON_MONEY_PLACES
from ..merge.model import InvoiceStats, MergedInvoice, MergeResult, SelectionSummary, SourceSummary, StatusBucket
from .model import BillDetails, CompanyInvoiceStats, CompanyRef, InvoiceBreakdown, InvoicePage, RateConfig, RegularInvoice


def money(value: Optional[Decimal]) -> Optional[float]:
    if value is None:
        return None
    return round(float(value), JSON_MONEY_PLACES)


def breakdown_to_dict(b: InvoiceBreakdown) -> dict:
    return {
        "totalPresentDays": b.total_present_days,
        "totalOvertimeDays": b.total_overtime_days,
        "baseTotal": money(b.base_total),
        "overtimeAmount": money(b.overtime_amount),
        "preStatutoryTotal": money(b.pre_statutory_total),
        "pfAmount": money(b.pf_amount),
        "esicAmount": money(b.esic_amount),
        "bonusAmount": money(b.bonus_amount),
        "subTotal": money(b.sub_total),
        "serviceChargeAmount": money(b.service_charge_amount),
        "totalBeforeTax": money(b.total_before_tax),
        "cgstAmount": money(b.cgst_amount),
        "sgstAmount": money(b.sgst_amount),
        "grandTotal": money(b.grand_total),
        "grandTotalWords": b.grand_total_words,
        "gstPaidBy": b.gst_payer.value,
    }


def rate_config_to_dict(r: RateConfig) -> dict:
    return {
        "perDayRate": money(r.per_day_rate),
        "overtimeRate": money(r.overtime_rate),
        "serviceChargeRatePct": float(r.service_charge_rate_pct),
        "bonusRatePct": float(r.bonus_rate_pct),
        "pfRatePct": float(r.pf_rate_pct),
        "esicRatePct": float(r.esic_rate_pct),
        "cgstRatePct": float(r.cgst_rate_pct),
        "sgstRatePct": float(r.sgst_rate_pct),
        "gstPaidBy": r.gst_payer.value,
    }


def bill_details_to_dict(d: BillDetails) -> dict:
    return {
        "baseAmount": money(d.base_amount),
        "serviceCharge": money(d.service_charge),
        "pfAmount": money(d.pf_amount),
        "esicAmount": money(d.esic_amount),
        "gstAmount": money(d.gst_amount),
        "totalAmount": money(d.total_amount),
    }


def company_to_dict(c: CompanyRef) -> dict:
    return {"companyId": c.company_id, "name": c.name, "location": c.location}


def regular_invoice_to_dict(inv: RegularInvoice) -> dict:
    return {
        "id": inv.invoice_id,
        "invoiceNumber": inv.invoice_number,
        "isMerged": False,
        "company": company_to_dict(inv.company),
        "billDetails": bill_details_to_dict(inv.bill_details),
        "employeeCount": len(inv.employees),
        "status": inv.status.value,
        "paymentStatus": inv.payment_status.value,
        "createdAt": inv.created_at.isoformat() if inv.created_at else None,
    }


def merged_invoice_to_dict(m: MergedInvoice) -> dict:
    return {
        "id": m.merged_id,
        "invoiceNumber": m.invoice_number,
        "isMerged": True,
        "sourceInvoiceIds": list(m.source_invoice_ids),
        "mergedCompanies": [company_to_dict(c) for c in m.merged_companies],
        "billDetails": bill_details_to_dict(m.bill_details),
        "employees": [
            {
                "name": e.name,
                "presentDays": e.present_days,
                "salary": money(e.salary),
                "sourceCompany": e.source_company,
                "sourceInvoiceId": e.source_invoice_id,
                "sourceInvoiceNumber": e.source_invoice_number,
            }
            for e in m.employees
        ],
        "notes": m.notes,
        "createdAt": m.created_at.isoformat() if m.created_at else None,
    }


def source_summary_to_dict(s: SourceSummary) -> dict:
    return {
        "id": s.invoice_id,
        "invoiceNumber": s.invoice_number,
        "company": s.company,
        "totalAmount": money(s.total_amount),
    }


def merge_result_to_dict(result: MergeResult) -> dict:
    return {
        "mergedInvoice": merged_invoice_to_dict(result.merged),
        "sourceInvoiceSummary": [source_summary_to_dict(s) for s in result.sources],
    }


def selection_summary_to_dict(s: SelectionSummary) -> dict:
    return {"count": s.count, "totalAmount": money(s.total_amount)}


def _bucket_to_dict(b: StatusBucket, key_name: str) -> dict:
    return {key_name: b.key, "count": b.count, "amount": money(b.amount)}


def stats_to_dict(s: InvoiceStats) -> dict:
    return {
        "overall": {
            "totalInvoices": s.total_invoices,
            "totalAmount": money(s.total_amount),
            "mergedCount": s.merged_count,
            "regularCount": s.regular_count,
        },
        "byStatus": [_bucket_to_dict(b, "status") for b in s.by_status],
        "byPaymentStatus": [_bucket_to_dict(b, "paymentStatus") for b in s.by_payment_status],
        "byCompany": [
            {"companyId": c.company_id, "company": c.company, "count": c.count, "amount": money(c.amount)}
            for c in s.by_company
        ],
        "recentMerged": [merged_invoice_to_dict(m) for m in s.recent_merged],
    }


def invoice_page_to_dict(p: InvoicePage) -> dict:
    return {
        "invoices": [regular_invoice_to_dict(i) for i in p.invoices],
        "pagination": {"total": p.total, "pages": p.pages, "page": p.page, "limit": p.limit},
    }


def company_stats_to_dict(s: CompanyInvoiceStats) -> dict:
    return {
        "totalInvoices": s.total_invoices,
        "totalAmount": money(s.total_amount),
        "paidAmount": money(s.paid_amount),
        "pendingAmount": money(s.pending_amount),
        "draftInvoices": s.draft_invoices,
        "sentInvoices": s.sent_invoices,
        "paidInvoices": s.paid_invoices,
    }


def skipped_row_to_dict(s: SkippedRow) -> dict:
    return {"index": s.index, "field": s.field, "reason": s.reason}


def roster_warning_to_dict(w: RosterWarning) -> dict:
    return asdict(w)
