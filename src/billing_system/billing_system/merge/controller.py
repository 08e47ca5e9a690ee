from __future__ import annotations

import io
import logging

from flask import Flask, request, send_file

from ..common.responses import domain_error_response, fail, ok
from ..common.validators import parse_date, parse_int
from ..container import Container
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.exceptions import DomainError
from ..invoices.serialization import (
    merge_result_to_dict,
    merged_invoice_to_dict,
    regular_invoice_to_dict,
    selection_summary_to_dict,
    stats_to_dict,
)

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.merge_service

    def _limit() -> int:
        return parse_int(request.args.get("limit"), "limit", default=DEFAULT_LIST_LIMIT)

    @app.route("/api/admin/invoices/available-for-merge", methods=["GET"], endpoint="merge_candidates")
    def merge_candidates():
        try:
            invoices = service.list_candidates(
                company_id=request.args.get("companyId") or None,
                start_date=parse_date(request.args.get("startDate"), "startDate"),
                end_date=parse_date(request.args.get("endDate"), "endDate"),
                limit=_limit(),
            )
        except DomainError as e:
            return domain_error_response(e)
        return ok({"invoices": [regular_invoice_to_dict(i) for i in invoices]})

    @app.route("/api/admin/invoices/merge/summary", methods=["POST"], endpoint="merge_summary")
    def merge_summary():
        data = request.get_json(silent=True) or {}
        try:
            summary = service.summarize_selection(data.get("invoiceIds") or [])
        except DomainError as e:
            return domain_error_response(e)
        return ok(selection_summary_to_dict(summary))

    @app.route("/api/admin/invoices/merge", methods=["POST"], endpoint="merge_create")
    def merge_create():
        data = request.get_json(silent=True) or {}
        try:
            result = service.merge(data.get("invoiceIds") or [], data.get("notes"))
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Merging invoices failed")
            return fail("System error while merging invoices", 500)
        return ok(merge_result_to_dict(result), 201)

    @app.route("/api/admin/invoices/merged", methods=["GET"], endpoint="merged_list")
    def merged_list():
        try:
            merged = service.list_merged(limit=_limit())
        except DomainError as e:
            return domain_error_response(e)
        return ok({"invoices": [merged_invoice_to_dict(m) for m in merged]})

    @app.route("/api/admin/invoices/merged/<merged_id>", methods=["GET"], endpoint="merged_detail")
    def merged_detail(merged_id: str):
        try:
            merged = service.get_merged(merged_id)
        except DomainError as e:
            return domain_error_response(e)
        return ok(merged_invoice_to_dict(merged))

    @app.route("/api/admin/invoices/merged/<merged_id>", methods=["DELETE"], endpoint="merged_delete")
    def merged_delete(merged_id: str):
        try:
            service.delete_merged(merged_id)
        except DomainError as e:
            return domain_error_response(e)
        return ok({"id": merged_id})

    @app.route("/api/admin/invoices/merged/<merged_id>/export", methods=["GET"], endpoint="merged_export")
    def merged_export(merged_id: str):
        try:
            content = service.export_employees_xlsx(merged_id)
        except DomainError as e:
            return domain_error_response(e)
        return send_file(
            io.BytesIO(content),
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            as_attachment=True,
            download_name=f"merged-invoice-{merged_id}.xlsx",
        )

    @app.route("/api/admin/invoices/stats", methods=["GET"], endpoint="invoice_stats")
    def invoice_stats():
        try:
            stats = service.stats()
        except DomainError as e:
            return domain_error_response(e)
        return ok(stats_to_dict(stats))
