from decimal import Decimal

import pytest

from src.billing_system.billing_system.attendance.model import AttendanceRecord
from src.billing_system.billing_system.core.enums import GstPayer
from src.billing_system.billing_system.core.exceptions import ValidationError
from src.billing_system.billing_system.invoices.calculator.statutory_calculator import compute_invoice
from src.billing_system.billing_system.invoices.model import RateConfig


def test_statutory_defaults():
    rates = RateConfig(per_day_rate=Decimal("466"))

    assert rates.pf_rate_pct == Decimal("13")
    assert rates.esic_rate_pct == Decimal("3.25")
    assert rates.cgst_rate_pct == Decimal("9")
    assert rates.sgst_rate_pct == Decimal("9")
    assert rates.overtime_rate == 0
    assert rates.bonus_rate_pct == 0
    assert rates.gst_payer == GstPayer.SERVICE_PROVIDER


def test_from_mapping_reads_client_names_and_overrides_defaults():
    rates = RateConfig.from_mapping(
        {"perDayRate": 500, "serviceChargeRate": 5, "gstPaidBy": "principal-employer"},
        defaults={"per_day_rate": "466", "service_charge_rate_pct": "7", "overtime_rate": "300"},
    )

    assert rates.per_day_rate == Decimal("500")
    assert rates.service_charge_rate_pct == Decimal("5")
    assert rates.overtime_rate == Decimal("300")
    assert rates.gst_payer == GstPayer.PRINCIPAL_EMPLOYER


def test_from_mapping_keeps_float_precision():
    rates = RateConfig.from_mapping({"per_day_rate": 466.1, "esicRatePct": 3.25})

    assert rates.per_day_rate == Decimal("466.1")
    assert rates.esic_rate_pct == Decimal("3.25")


def test_legacy_provider_name_maps_to_service_provider():
    rates = RateConfig.from_mapping({"per_day_rate": 1, "gstPaidBy": "ashapuri"})
    assert rates.gst_payer == GstPayer.SERVICE_PROVIDER


def test_from_mapping_rejects_garbage():
    with pytest.raises(ValidationError) as exc:
        RateConfig.from_mapping({"per_day_rate": "abc"})
    assert exc.value.field == "rate"

    with pytest.raises(ValidationError):
        RateConfig.from_mapping({"per_day_rate": 1, "gst_payer": "nobody"})


def test_missing_per_day_rate_fails_validation():
    with pytest.raises(ValidationError) as exc:
        RateConfig.from_mapping({}).validate()
    assert "per_day_rate" in str(exc.value)


def test_direct_construction_coerces_numbers():
    rates = RateConfig(per_day_rate=466.5, service_charge_rate_pct="7", gst_payer="ashapuri")

    assert rates.per_day_rate == Decimal("466.5")
    assert rates.service_charge_rate_pct == Decimal("7")
    assert rates.gst_payer == GstPayer.SERVICE_PROVIDER

    breakdown = compute_invoice([AttendanceRecord("Ramesh", 2)], rates)
    assert breakdown.base_total == Decimal("933.0")


def test_direct_construction_rejects_non_numbers():
    with pytest.raises(ValidationError) as exc:
        RateConfig(per_day_rate="four hundred")
    assert exc.value.field == "rate"
