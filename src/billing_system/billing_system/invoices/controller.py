from __future__ import annotations

import logging
from pathlib import Path

from flask import Flask, request

from ..attendance.importer import read_attendance_sheet
from ..common.responses import domain_error_response, fail, ok
from ..container import Container
from ..common.validators import parse_choice, parse_date, parse_int
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import InvoiceStatus, PaymentStatus
from ..core.exceptions import DomainError
from .serialization import (
    breakdown_to_dict,
    company_stats_to_dict,
    invoice_page_to_dict,
    rate_config_to_dict,
    regular_invoice_to_dict,
    roster_warning_to_dict,
    skipped_row_to_dict,
)

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.invoice_service

    @app.route("/api/invoices/preview", methods=["POST"], endpoint="invoice_preview")
    def invoice_preview():
        data = request.get_json(silent=True) or {}
        try:
            preview = service.preview(
                data.get("rows") or [],
                data.get("rates") or {},
                days_in_period=parse_int(data.get("daysInPeriod"), "daysInPeriod", default=None),
                roster_names=data.get("rosterNames") or [],
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Invoice preview failed")
            return fail("System error while calculating invoice", 500)

        return ok(
            {
                "breakdown": breakdown_to_dict(preview.breakdown),
                "rates": rate_config_to_dict(preview.rates),
                "employeeCount": len(preview.records),
                "skipped": [skipped_row_to_dict(s) for s in preview.skipped],
                "rosterWarnings": [roster_warning_to_dict(w) for w in preview.roster_warnings],
            }
        )

    @app.route("/api/invoices", methods=["POST"], endpoint="invoice_create")
    def invoice_create():
        data = request.get_json(silent=True) or {}
        try:
            invoice_id = service.create_invoice(
                company_id=str(data.get("companyId") or ""),
                rows=data.get("rows") or [],
                rates=data.get("rates") or {},
                days_in_period=parse_int(data.get("daysInPeriod"), "daysInPeriod", default=None),
                invoice_number=data.get("invoiceNumber"),
                notes=data.get("notes"),
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Invoice creation failed")
            return fail("System error while creating invoice", 500)
        return ok({"id": invoice_id}, 201)

    @app.route("/api/invoices/import", methods=["POST"], endpoint="invoice_import")
    def invoice_import():
        upload = request.files.get("file")
        if not upload or not upload.filename:
            return fail("file: attendance file is required", 400, field="file")
        try:
            rows = read_attendance_sheet(upload.stream, suffix=Path(upload.filename).suffix)
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Reading attendance file %s failed", upload.filename)
            return fail("Could not read attendance file", 400, field="file")
        return ok({"rows": rows})

    @app.route("/api/invoices/<invoice_id>", methods=["GET"], endpoint="invoice_detail")
    def invoice_detail(invoice_id: str):
        try:
            inv = service.get_invoice(invoice_id)
        except DomainError as e:
            return domain_error_response(e)
        return ok(regular_invoice_to_dict(inv))

    @app.route("/api/invoices/<invoice_id>", methods=["PUT"], endpoint="invoice_update")
    def invoice_update(invoice_id: str):
        data = request.get_json(silent=True) or {}
        try:
            inv = service.update_invoice(
                invoice_id,
                status=parse_choice(InvoiceStatus, data.get("status"), "status"),
                payment_status=parse_choice(PaymentStatus, data.get("paymentStatus"), "paymentStatus"),
            )
        except DomainError as e:
            return domain_error_response(e)
        return ok(regular_invoice_to_dict(inv))

    @app.route("/api/invoices/<invoice_id>", methods=["DELETE"], endpoint="invoice_delete")
    def invoice_delete(invoice_id: str):
        try:
            service.delete_invoice(invoice_id)
        except DomainError as e:
            return domain_error_response(e)
        return ok({"id": invoice_id})

    @app.route("/api/invoices/company/<company_id>", methods=["GET"], endpoint="company_invoices")
    def company_invoices(company_id: str):
        args = request.args
        try:
            page = service.list_company_invoices(
                company_id,
                status=parse_choice(InvoiceStatus, args.get("status"), "status"),
                start_date=parse_date(args.get("startDate"), "startDate"),
                end_date=parse_date(args.get("endDate"), "endDate"),
                page=parse_int(args.get("page"), "page", default=1),
                limit=parse_int(args.get("limit"), "limit", default=DEFAULT_LIST_LIMIT),
            )
        except DomainError as e:
            return domain_error_response(e)
        return ok(invoice_page_to_dict(page))

    @app.route("/api/invoices/stats/<company_id>", methods=["GET"], endpoint="company_invoice_stats")
    def company_invoice_stats(company_id: str):
        try:
            stats = service.company_stats(company_id)
        except DomainError as e:
            return domain_error_response(e)
        return ok(company_stats_to_dict(stats))
