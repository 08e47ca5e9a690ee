from __future__ import annotations

import json
import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import InvoiceStatus, PaymentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from ..merge.model import CompanyBucket, InvoiceStats, MergedEmployeeRow, MergedInvoice, StatusBucket
from .model import (
    BillDetails,
    CompanyInvoiceStats,
    CompanyRef,
    ExtractedEmployee,
    InvoicePage,
    InvoiceSnapshot,
    RegularInvoice,
)
from .repository import InvoiceRepository
from .serialization import breakdown_to_dict, rate_config_to_dict

logger = logging.getLogger(__name__)

_INVOICE_COLUMNS = """
    i.invoice_id, i.invoice_number, i.company_id, i.is_merged, i.status, i.payment_status,
    i.base_amount, i.service_charge, i.pf_amount, i.esic_amount, i.gst_amount, i.total_amount,
    i.notes, i.created_at,
    c.name AS company_name, c.location AS company_location
"""


def _row_id(value) -> Optional[int]:
    """Primary keys are integers; anything else cannot match a row."""
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def _bill_details(r: dict) -> BillDetails:
    return BillDetails(
        total_amount=as_decimal(r["total_amount"]) or Decimal("0"),
        base_amount=as_decimal(r.get("base_amount")),
        service_charge=as_decimal(r.get("service_charge")),
        pf_amount=as_decimal(r.get("pf_amount")),
        esic_amount=as_decimal(r.get("esic_amount")),
        gst_amount=as_decimal(r.get("gst_amount")),
    )


def _bucket(r: dict) -> StatusBucket:
    return StatusBucket(key=str(r["bucket"]), count=int(r["count"]), amount=as_decimal(r["amount"]) or Decimal("0"))


def _regular(r: dict, employees: Sequence[dict] = ()) -> RegularInvoice:
    company_id = str(r.get("company_id") or "")
    return RegularInvoice(
        invoice_id=str(r["invoice_id"]),
        invoice_number=r["invoice_number"],
        company=CompanyRef(
            company_id=company_id,
            name=r.get("company_name") or company_id,
            location=r.get("company_location"),
        ),
        bill_details=_bill_details(r),
        employees=tuple(
            ExtractedEmployee(name=e["name"], present_days=int(e["present_days"]), salary=as_decimal(e.get("salary")))
            for e in employees
        ),
        status=InvoiceStatus(r["status"]),
        payment_status=PaymentStatus(r["payment_status"]),
        created_at=r.get("created_at"),
    )


class MySQLInvoiceRepository(InvoiceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Regular invoices --------
    def persist_invoice(self, snapshot: InvoiceSnapshot) -> str:
        b = snapshot.breakdown
        details = BillDetails.from_breakdown(b)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO invoices(
                    invoice_number, company_id, is_merged, status,
                    base_amount, service_charge, pf_amount, esic_amount, gst_amount, total_amount,
                    gst_paid_by, service_charge_rate, per_day_rate,
                    total_present_days, total_employees, calculated_values, notes
                )
                VALUES(%s,%s,0,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    snapshot.invoice_number,
                    snapshot.company_id,
                    snapshot.status.value,
                    details.base_amount,
                    details.service_charge,
                    details.pf_amount,
                    details.esic_amount,
                    details.gst_amount,
                    details.total_amount,
                    b.gst_payer.value,
                    snapshot.rate_config.service_charge_rate_pct,
                    snapshot.rate_config.per_day_rate,
                    b.total_present_days,
                    len(snapshot.employees),
                    json.dumps(
                        {
                            **breakdown_to_dict(b),
                            "rates": rate_config_to_dict(snapshot.rate_config),
                            **snapshot.metadata,
                        }
                    ),
                    snapshot.notes,
                ),
            )
            invoice_id = int(cur.lastrowid)
            rows = [
                (invoice_id, pos, e.name, e.present_days, e.salary, None, None, None)
                for pos, e in enumerate(snapshot.employees)
            ]
            self._insert_employees(cur, rows)

        logger.info("Stored invoice %s (id=%s)", snapshot.invoice_number, invoice_id)
        return str(invoice_id)

    def get_by_id(self, invoice_id: str) -> Optional[RegularInvoice]:
        row_id = _row_id(invoice_id)
        if row_id is None:
            return None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_INVOICE_COLUMNS}
                FROM invoices i
                LEFT JOIN companies c ON c.company_id = i.company_id
                WHERE i.invoice_id=%s AND i.is_merged=0
                """,
                (row_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return _regular(r, self._employee_rows(cur, int(r["invoice_id"])))

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
        clauses = ["i.is_merged=0", "i.company_id=%s"]
        params: list[object] = [company_id]

        if status is not None:
            clauses.append("i.status=%s")
            params.append(status.value)
        if start_date is not None:
            clauses.append("DATE(i.created_at) >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("DATE(i.created_at) <= %s")
            params.append(end_date)

        where = " AND ".join(clauses)
        page = max(int(page), 1)
        limit = max(int(limit), 1)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM invoices i WHERE {where}", tuple(params))
            total = int((fetchone(cur) or {}).get("total") or 0)

            cur.execute(
                f"""
                SELECT {_INVOICE_COLUMNS}
                FROM invoices i
                LEFT JOIN companies c ON c.company_id = i.company_id
                WHERE {where}
                ORDER BY i.created_at DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [limit, (page - 1) * limit]),
            )
            invoices = [_regular(r) for r in fetchall(cur)]

        return InvoicePage(invoices=invoices, total=total, page=page, limit=limit)

    def update_status(
        self,
        invoice_id: str,
        *,
        status: Optional[InvoiceStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
    ) -> bool:
        row_id = _row_id(invoice_id)
        if row_id is None:
            return False

        sets: list[str] = []
        params: list[object] = []
        if status is not None:
            sets.append("status=%s")
            params.append(status.value)
        if payment_status is not None:
            sets.append("payment_status=%s")
            params.append(payment_status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT invoice_id FROM invoices WHERE invoice_id=%s AND is_merged=0", (row_id,))
            if fetchone(cur) is None:
                return False
            if sets:
                cur.execute(
                    f"UPDATE invoices SET {', '.join(sets)} WHERE invoice_id=%s AND is_merged=0",
                    tuple(params + [row_id]),
                )
        return True

    def delete_invoice(self, invoice_id: str) -> bool:
        row_id = _row_id(invoice_id)
        if row_id is None:
            return False
        # Merged invoices carry their own summed amounts and employee rows.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM invoices WHERE invoice_id=%s AND is_merged=0", (row_id,))
            return cur.rowcount > 0

    def get_company_stats(self, company_id: str) -> CompanyInvoiceStats:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS total_invoices,
                       COALESCE(SUM(total_amount), 0) AS total_amount,
                       COALESCE(SUM(CASE WHEN payment_status='paid' THEN total_amount ELSE 0 END), 0) AS paid_amount,
                       COALESCE(SUM(CASE WHEN payment_status<>'paid' THEN total_amount ELSE 0 END), 0) AS pending_amount,
                       COALESCE(SUM(status='draft'), 0) AS draft_invoices,
                       COALESCE(SUM(status='sent'), 0) AS sent_invoices,
                       COALESCE(SUM(status='paid'), 0) AS paid_invoices
                FROM invoices
                WHERE company_id=%s AND is_merged=0
                """,
                (company_id,),
            )
            r = fetchone(cur) or {}
            return CompanyInvoiceStats(
                total_invoices=int(r.get("total_invoices") or 0),
                total_amount=as_decimal(r.get("total_amount")) or Decimal("0"),
                paid_amount=as_decimal(r.get("paid_amount")) or Decimal("0"),
                pending_amount=as_decimal(r.get("pending_amount")) or Decimal("0"),
                draft_invoices=int(r.get("draft_invoices") or 0),
                sent_invoices=int(r.get("sent_invoices") or 0),
                paid_invoices=int(r.get("paid_invoices") or 0),
            )

    def list_available_for_merge(
        self,
        *,
        company_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[RegularInvoice]:
        clauses = ["i.is_merged=0"]
        params: list[object] = []

        if company_id:
            clauses.append("i.company_id=%s")
            params.append(company_id)
        if start_date is not None:
            clauses.append("DATE(i.created_at) >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("DATE(i.created_at) <= %s")
            params.append(end_date)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_INVOICE_COLUMNS}
                FROM invoices i
                LEFT JOIN companies c ON c.company_id = i.company_id
                WHERE {where}
                ORDER BY i.created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_regular(r) for r in fetchall(cur)]

    # -------- Merged invoices --------
    def persist_merged(self, merged: MergedInvoice) -> str:
        d = merged.bill_details
        # Everything below shares one transaction: all rows or none.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO invoices(
                    invoice_number, company_id, is_merged, status,
                    base_amount, service_charge, pf_amount, esic_amount, gst_amount, total_amount,
                    total_employees, notes, created_at
                )
                VALUES(%s,NULL,1,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    merged.invoice_number,
                    InvoiceStatus.DRAFT.value,
                    d.base_amount,
                    d.service_charge,
                    d.pf_amount,
                    d.esic_amount,
                    d.gst_amount,
                    d.total_amount,
                    len(merged.employees),
                    merged.notes,
                    merged.created_at,
                ),
            )
            merged_id = int(cur.lastrowid)

            cur.executemany(
                "INSERT INTO merged_invoice_sources(merged_invoice_id, source_invoice_id, position) VALUES(%s,%s,%s)",
                [(merged_id, int(src), pos) for pos, src in enumerate(merged.source_invoice_ids)],
            )
            cur.executemany(
                "INSERT INTO merged_invoice_companies(merged_invoice_id, company_id, name, location) VALUES(%s,%s,%s,%s)",
                [(merged_id, c.company_id, c.name, c.location) for c in merged.merged_companies],
            )
            self._insert_employees(
                cur,
                [
                    (
                        merged_id,
                        pos,
                        e.name,
                        e.present_days,
                        e.salary,
                        e.source_company,
                        int(e.source_invoice_id),
                        e.source_invoice_number,
                    )
                    for pos, e in enumerate(merged.employees)
                ],
            )

        logger.info("Stored merged invoice %s (id=%s)", merged.invoice_number, merged_id)
        return str(merged_id)

    def get_merged_by_id(self, merged_id: str) -> Optional[MergedInvoice]:
        row_id = _row_id(merged_id)
        if row_id is None:
            return None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_INVOICE_COLUMNS}
                FROM invoices i
                LEFT JOIN companies c ON c.company_id = i.company_id
                WHERE i.invoice_id=%s AND i.is_merged=1
                """,
                (row_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return self._load_merged(cur, r)

    def list_merged(self, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[MergedInvoice]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_INVOICE_COLUMNS}
                FROM invoices i
                LEFT JOIN companies c ON c.company_id = i.company_id
                WHERE i.is_merged=1
                ORDER BY i.created_at DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            rows = fetchall(cur)
            return [self._load_merged(cur, r) for r in rows]

    def delete_merged(self, merged_id: str) -> bool:
        row_id = _row_id(merged_id)
        if row_id is None:
            return False
        # Child rows go with the merged invoice (ON DELETE CASCADE); sources are separate rows.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM invoices WHERE invoice_id=%s AND is_merged=1", (row_id,))
            return cur.rowcount > 0

    def get_stats(self) -> InvoiceStats:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS total_invoices,
                       COALESCE(SUM(total_amount), 0) AS total_amount,
                       COALESCE(SUM(is_merged = 1), 0) AS merged_count,
                       COALESCE(SUM(is_merged = 0), 0) AS regular_count
                FROM invoices
                """
            )
            r = fetchone(cur) or {}

            cur.execute(
                """
                SELECT status AS bucket, COUNT(*) AS count, COALESCE(SUM(total_amount), 0) AS amount
                FROM invoices GROUP BY status ORDER BY status
                """
            )
            by_status = tuple(_bucket(b) for b in fetchall(cur))

            cur.execute(
                """
                SELECT payment_status AS bucket, COUNT(*) AS count, COALESCE(SUM(total_amount), 0) AS amount
                FROM invoices GROUP BY payment_status ORDER BY payment_status
                """
            )
            by_payment_status = tuple(_bucket(b) for b in fetchall(cur))

            cur.execute(
                """
                SELECT i.company_id, MAX(c.name) AS company, COUNT(*) AS count,
                       COALESCE(SUM(i.total_amount), 0) AS amount
                FROM invoices i
                LEFT JOIN companies c ON c.company_id = i.company_id
                WHERE i.is_merged=0
                GROUP BY i.company_id
                ORDER BY amount DESC
                """
            )
            by_company = tuple(
                CompanyBucket(
                    company_id=str(b["company_id"]),
                    company=b.get("company") or str(b["company_id"]),
                    count=int(b["count"]),
                    amount=as_decimal(b["amount"]) or Decimal("0"),
                )
                for b in fetchall(cur)
            )

            return InvoiceStats(
                total_invoices=int(r.get("total_invoices") or 0),
                total_amount=as_decimal(r.get("total_amount")) or Decimal("0"),
                merged_count=int(r.get("merged_count") or 0),
                regular_count=int(r.get("regular_count") or 0),
                by_status=by_status,
                by_payment_status=by_payment_status,
                by_company=by_company,
            )

    # -------- helpers --------
    @staticmethod
    def _insert_employees(cur, rows: list[tuple]) -> None:
        if not rows:
            return
        cur.executemany(
            """
            INSERT INTO invoice_employees(
                invoice_id, position, name, present_days, salary,
                source_company, source_invoice_id, source_invoice_number
            )
            VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
            """,
            rows,
        )

    @staticmethod
    def _employee_rows(cur, invoice_id: int) -> list[dict]:
        cur.execute(
            """
            SELECT name, present_days, salary, source_company, source_invoice_id, source_invoice_number
            FROM invoice_employees
            WHERE invoice_id=%s
            ORDER BY position
            """,
            (invoice_id,),
        )
        return fetchall(cur)

    def _load_merged(self, cur, r: dict) -> MergedInvoice:
        merged_id = int(r["invoice_id"])

        cur.execute(
            "SELECT source_invoice_id FROM merged_invoice_sources WHERE merged_invoice_id=%s ORDER BY position",
            (merged_id,),
        )
        source_ids = tuple(str(s["source_invoice_id"]) for s in fetchall(cur))

        cur.execute(
            "SELECT company_id, name, location FROM merged_invoice_companies WHERE merged_invoice_id=%s",
            (merged_id,),
        )
        companies = tuple(CompanyRef(company_id=c["company_id"], name=c["name"], location=c.get("location")) for c in fetchall(cur))

        employees = tuple(
            MergedEmployeeRow(
                name=e["name"],
                present_days=int(e["present_days"]),
                salary=as_decimal(e.get("salary")),
                source_company=e.get("source_company") or "",
                source_invoice_id=str(e.get("source_invoice_id") or ""),
                source_invoice_number=e.get("source_invoice_number") or "",
            )
            for e in self._employee_rows(cur, merged_id)
        )

        return MergedInvoice(
            invoice_number=r["invoice_number"],
            source_invoice_ids=source_ids,
            merged_companies=companies,
            bill_details=_bill_details(r),
            employees=employees,
            created_at=r.get("created_at"),
            notes=r.get("notes"),
            merged_id=str(merged_id),
        )
