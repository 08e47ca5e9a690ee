from __future__ import annotations

from enum import Enum


class GstPayer(str, Enum):
    """Which party bears GST on an invoice."""

    SERVICE_PROVIDER = "service-provider"
    PRINCIPAL_EMPLOYER = "principal-employer"

    @classmethod
    def parse(cls, value: str) -> "GstPayer":
        v = (value or "").strip().lower()
        # Legacy payloads name the provider directly.
        if v in {"ashapuri", "service_provider", "serviceprovider"}:
            return cls.SERVICE_PROVIDER
        if v in {"principal_employer", "principalemployer"}:
            return cls.PRINCIPAL_EMPLOYER
        return cls(v)


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
