from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

import pytest
from flask import Flask

from src.billing_system.billing_system.core.exceptions import PersistenceError
from src.billing_system.billing_system.invoices import controller as invoice_controller
from src.billing_system.billing_system.invoices.model import (
    BillDetails,
    CompanyInvoiceStats,
    CompanyRef,
    InvoicePage,
    RegularInvoice,
)
from src.billing_system.billing_system.invoices.service import InvoiceService
from src.billing_system.billing_system.merge import controller as merge_controller
from src.billing_system.billing_system.merge.model import CompanyBucket, InvoiceStats, StatusBucket
from src.billing_system.billing_system.merge.service import MergeService


class FakeRepo:
    def __init__(self):
        self.invoices = {
            "1": RegularInvoice("1", "INV-1", CompanyRef("c-1", "Acme Mills"), BillDetails(Decimal("10000"))),
            "2": RegularInvoice("2", "INV-2", CompanyRef("c-2", "Beta Steel"), BillDetails(Decimal("15000"))),
        }
        self.merged = {}
        self.snapshots = []
        self.fail_persist = False

    def persist_invoice(self, snapshot):
        self.snapshots.append(snapshot)
        return "10"

    def get_by_id(self, invoice_id):
        return self.invoices.get(invoice_id)

    def list_available_for_merge(self, *, company_id=None, start_date=None, end_date=None, limit=50):
        return list(self.invoices.values())[:limit]

    def persist_merged(self, merged):
        if self.fail_persist:
            raise PersistenceError("connection lost")
        self.merged["50"] = merged.with_id("50")
        return "50"

    def get_merged_by_id(self, merged_id):
        return self.merged.get(merged_id)

    def list_merged(self, *, limit=50):
        return list(self.merged.values())

    def delete_merged(self, merged_id):
        return self.merged.pop(merged_id, None) is not None

    def get_stats(self):
        return InvoiceStats(
            total_invoices=2,
            total_amount=Decimal("25000"),
            merged_count=0,
            regular_count=2,
            by_status=(StatusBucket("draft", 2, Decimal("25000")),),
            by_company=(CompanyBucket("c-1", "Acme Mills", 1, Decimal("10000")),),
        )

    def update_status(self, invoice_id, *, status=None, payment_status=None):
        inv = self.invoices.get(invoice_id)
        if inv is None:
            return False
        self.invoices[invoice_id] = replace(
            inv, status=status or inv.status, payment_status=payment_status or inv.payment_status
        )
        return True

    def delete_invoice(self, invoice_id):
        return self.invoices.pop(invoice_id, None) is not None

    def list_company_invoices(self, company_id, *, status=None, start_date=None, end_date=None, page=1, limit=50):
        items = [i for i in self.invoices.values() if i.company.company_id == company_id]
        return InvoicePage(invoices=items, total=len(items), page=page, limit=limit)

    def get_company_stats(self, company_id):
        return CompanyInvoiceStats(1, Decimal("10000"), Decimal("0"), Decimal("10000"), 1, 0, 0)


class FakeContainer:
    def __init__(self, repo):
        self.invoice_service = InvoiceService(repo, rate_defaults={"per_day_rate": "466", "service_charge_rate_pct": "7"})
        self.merge_service = MergeService(repo)


@pytest.fixture
def repo():
    return FakeRepo()


@pytest.fixture
def client(repo):
    app = Flask(__name__)
    container = FakeContainer(repo)
    invoice_controller.register(app, container)
    merge_controller.register(app, container)
    return app.test_client()


ROWS = [
    {"name": "Ramesh", "presentDays": 26},
    {"name": "Suresh", "presentDays": 24, "overtimeDays": 2},
    {"name": "Anil", "presentDays": 26},
]


def test_preview_returns_breakdown(client):
    res = client.post("/api/invoices/preview", json={"rows": ROWS, "rates": {"overtimeRate": 500}})

    body = res.get_json()
    assert res.status_code == 200
    assert body["success"] is True
    assert body["data"]["breakdown"]["grandTotal"] == 53451
    assert body["data"]["breakdown"]["grandTotalWords"].endswith("RUPEES ONLY")
    assert body["data"]["employeeCount"] == 3


def test_preview_rejects_bad_rate(client):
    res = client.post("/api/invoices/preview", json={"rows": ROWS, "rates": {"perDayRate": 0}})

    body = res.get_json()
    assert res.status_code == 400
    assert body["success"] is False
    assert body["field"] == "rate"


def test_create_invoice(client, repo):
    res = client.post("/api/invoices", json={"companyId": "c-1", "rows": ROWS})

    assert res.status_code == 201
    assert res.get_json()["data"]["id"] == "10"
    assert repo.snapshots[0].company_id == "c-1"


def test_create_invoice_without_company(client):
    res = client.post("/api/invoices", json={"rows": ROWS})

    assert res.status_code == 400
    assert res.get_json()["field"] == "company_id"


def test_unknown_invoice_is_404(client):
    assert client.get("/api/invoices/999").status_code == 404


def test_merge_and_delete(client, repo):
    res = client.post("/api/admin/invoices/merge", json={"invoiceIds": ["1", "2"], "notes": "october"})

    data = res.get_json()["data"]
    assert res.status_code == 201
    assert data["mergedInvoice"]["id"] == "50"
    assert data["mergedInvoice"]["billDetails"]["totalAmount"] == 25000
    assert [s["invoiceNumber"] for s in data["sourceInvoiceSummary"]] == ["INV-1", "INV-2"]

    assert client.delete("/api/admin/invoices/merged/50").status_code == 200
    assert client.get("/api/admin/invoices/merged/50").status_code == 404
    assert set(repo.invoices) == {"1", "2"}


def test_merge_needs_two_invoices(client):
    res = client.post("/api/admin/invoices/merge", json={"invoiceIds": ["1"]})

    assert res.status_code == 400
    assert res.get_json()["reason"] == "min-two-required"


def test_merge_persistence_failure_is_500(client, repo):
    repo.fail_persist = True

    res = client.post("/api/admin/invoices/merge", json={"invoiceIds": ["1", "2"]})

    assert res.status_code == 500
    assert res.get_json()["success"] is False
    assert repo.merged == {}


def test_candidates_and_stats(client):
    candidates = client.get("/api/admin/invoices/available-for-merge").get_json()["data"]["invoices"]
    stats = client.get("/api/admin/invoices/stats").get_json()["data"]

    assert [c["id"] for c in candidates] == ["1", "2"]
    assert stats["overall"] == {"totalInvoices": 2, "totalAmount": 25000.0, "mergedCount": 0, "regularCount": 2}
    assert stats["byStatus"] == [{"status": "draft", "count": 2, "amount": 25000.0}]
    assert stats["byCompany"][0]["company"] == "Acme Mills"
    assert stats["recentMerged"] == []


def test_candidates_bad_date(client):
    res = client.get("/api/admin/invoices/available-for-merge?startDate=01-10-2026")

    assert res.status_code == 400


def test_merge_summary(client):
    res = client.post("/api/admin/invoices/merge/summary", json={"invoiceIds": ["1", "2"]})

    assert res.get_json()["data"] == {"count": 2, "totalAmount": 25000.0}


def test_bad_limit_names_the_field(client):
    for url in ("/api/admin/invoices/merged?limit=x", "/api/admin/invoices/available-for-merge?limit=x"):
        res = client.get(url)

        assert res.status_code == 400
        assert res.get_json()["field"] == "limit"


def test_bad_date_names_the_field(client):
    res = client.get("/api/admin/invoices/available-for-merge?endDate=2026/10/01")

    assert res.get_json()["field"] == "endDate"


def test_bad_days_in_period_is_400(client):
    res = client.post("/api/invoices/preview", json={"rows": ROWS, "daysInPeriod": "thirty"})

    assert res.status_code == 400
    assert res.get_json()["field"] == "daysInPeriod"


def test_unknown_merged_id_is_404(client):
    assert client.get("/api/admin/invoices/merged/abc").status_code == 404
    assert client.delete("/api/admin/invoices/merged/abc").status_code == 404


def test_update_invoice_status(client, repo):
    res = client.put("/api/invoices/1", json={"status": "sent", "paymentStatus": "partial"})

    data = res.get_json()["data"]
    assert res.status_code == 200
    assert data["status"] == "sent"
    assert data["paymentStatus"] == "partial"


def test_update_invoice_rejects_unknown_status(client):
    res = client.put("/api/invoices/1", json={"status": "archived"})

    assert res.status_code == 400
    assert res.get_json()["field"] == "status"


def test_delete_invoice(client, repo):
    assert client.delete("/api/invoices/2").status_code == 200
    assert "2" not in repo.invoices
    assert client.delete("/api/invoices/2").status_code == 404


def test_company_invoices_and_stats(client):
    listing = client.get("/api/invoices/company/c-1?page=1&limit=10").get_json()["data"]
    stats = client.get("/api/invoices/stats/c-1").get_json()["data"]

    assert [i["id"] for i in listing["invoices"]] == ["1"]
    assert listing["pagination"] == {"total": 1, "pages": 1, "page": 1, "limit": 10}
    assert stats["pendingAmount"] == 10000.0
    assert stats["draftInvoices"] == 1


def test_company_invoices_bad_page(client):
    res = client.get("/api/invoices/company/c-1?page=0")

    assert res.status_code == 400
    assert res.get_json()["field"] == "page"
