from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .database.connection import DBConfig, DatabaseConnection
from .invoices.mysql_invoice_repository import MySQLInvoiceRepository
from .invoices.service import InvoiceService
from .merge.service import MergeService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    invoices_repo: MySQLInvoiceRepository

    invoice_service: InvoiceService
    merge_service: MergeService


def build_container(*, db_config: dict, rate_defaults: Optional[Mapping[str, Any]] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    invoices_repo = MySQLInvoiceRepository(conn)

    invoice_service = InvoiceService(invoices_repo, rate_defaults=rate_defaults)
    merge_service = MergeService(invoices_repo)

    return Container(
        conn=conn,
        invoices_repo=invoices_repo,
        invoice_service=invoice_service,
        merge_service=merge_service,
    )
