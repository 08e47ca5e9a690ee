from decimal import Decimal

import pytest

from src.billing_system.billing_system.attendance.model import AttendanceRecord
from src.billing_system.billing_system.common.money import round_half_up
from src.billing_system.billing_system.core.enums import GstPayer
from src.billing_system.billing_system.core.exceptions import ValidationError
from src.billing_system.billing_system.invoices.calculator.statutory_calculator import (
    StatutoryInvoiceCalculator,
    compute_invoice,
)
from src.billing_system.billing_system.invoices.model import RateConfig
from src.billing_system.billing_system.invoices.words import to_words

MONEY_FIELDS = (
    "base_total",
    "overtime_amount",
    "pre_statutory_total",
    "pf_amount",
    "esic_amount",
    "bonus_amount",
    "sub_total",
    "service_charge_amount",
    "total_before_tax",
    "cgst_amount",
    "sgst_amount",
    "grand_total",
)


def _records():
    return [
        AttendanceRecord(name="Ramesh", present_days=26, overtime_days=0),
        AttendanceRecord(name="Suresh", present_days=24, overtime_days=2),
        AttendanceRecord(name="Anil", present_days=26, overtime_days=0),
    ]


def _rates(**overrides):
    values = dict(
        per_day_rate=Decimal("466"),
        overtime_rate=Decimal("500"),
        service_charge_rate_pct=Decimal("7"),
        bonus_rate_pct=Decimal("0"),
        gst_payer=GstPayer.SERVICE_PROVIDER,
    )
    values.update(overrides)
    return RateConfig(**values)


def test_three_guard_scenario_follows_formula():
    rates = _rates()
    b = compute_invoice(_records(), rates)

    assert b.total_present_days == 76
    assert b.total_overtime_days == 2
    assert b.base_total == 76 * Decimal("466") == Decimal("35416")
    assert b.overtime_amount == 2 * Decimal("500")

    pre = b.base_total + b.overtime_amount
    assert b.pre_statutory_total == pre
    assert b.pf_amount == pre * rates.pf_rate_pct / 100
    assert b.esic_amount == pre * rates.esic_rate_pct / 100
    assert b.bonus_amount == 0

    sub_total = round_half_up(pre + b.pf_amount + b.esic_amount + b.bonus_amount)
    assert b.sub_total == sub_total
    assert b.service_charge_amount == sub_total * Decimal("7") / 100
    assert b.total_before_tax == sub_total + b.service_charge_amount
    assert b.cgst_amount == b.total_before_tax * Decimal("9") / 100
    assert b.sgst_amount == b.cgst_amount
    assert b.grand_total == round_half_up(b.total_before_tax + b.cgst_amount + b.sgst_amount)
    assert b.grand_total_words == to_words(b.grand_total)


def test_three_guard_scenario_values():
    b = compute_invoice(_records(), _rates())

    assert b.pf_amount == Decimal("4734.08")
    assert b.esic_amount == Decimal("1183.52")
    assert b.sub_total == Decimal("42334")
    assert b.service_charge_amount == Decimal("2963.38")
    assert b.total_before_tax == Decimal("45297.38")
    assert b.grand_total == Decimal("53451")
    assert b.grand_total_words == "FIFTY THREE THOUSAND FOUR HUNDRED FIFTY ONE RUPEES ONLY"


def test_intermediate_amounts_stay_unrounded():
    b = compute_invoice(_records(), _rates())

    # 45297.38 * 9% has four decimals; it must not be rounded on its own.
    assert b.cgst_amount == Decimal("4076.7642")
    assert b.sgst_amount == Decimal("4076.7642")
    assert b.service_charge_amount != round_half_up(b.service_charge_amount)


def test_principal_employer_excludes_gst_from_grand_total():
    b = compute_invoice(_records(), _rates(gst_payer=GstPayer.PRINCIPAL_EMPLOYER))

    assert b.grand_total == round_half_up(b.total_before_tax) == Decimal("45297")
    # Still computed for display.
    assert b.cgst_amount == Decimal("4076.7642")
    assert b.gst_included is False


def test_sub_total_rounds_half_up():
    # 40 days x 1 x (1 + 13% + 3.25%) = 46.5 exactly
    rates = RateConfig(per_day_rate=Decimal("1"))
    b = compute_invoice([AttendanceRecord(name="A", present_days=40)], rates)

    assert b.pre_statutory_total + b.pf_amount + b.esic_amount == Decimal("46.5")
    assert b.sub_total == Decimal("47")


def test_bonus_is_added_before_first_rounding():
    b = compute_invoice(_records(), _rates(bonus_rate_pct=Decimal("8.33")))

    assert b.bonus_amount == b.pre_statutory_total * Decimal("8.33") / 100
    assert b.sub_total == round_half_up(b.pre_statutory_total + b.pf_amount + b.esic_amount + b.bonus_amount)


def test_zero_attendance_gives_all_zero_breakdown():
    records = [AttendanceRecord(name="A", present_days=0), AttendanceRecord(name="B", present_days=0)]
    b = compute_invoice(records, _rates())

    for name in MONEY_FIELDS:
        assert getattr(b, name) == 0, name
    assert b.grand_total_words == "ZERO RUPEES ONLY"


def test_empty_records_is_not_an_error():
    b = compute_invoice([], _rates())

    assert b.grand_total == 0
    assert b.total_present_days == 0
    assert b.grand_total_words == "ZERO RUPEES ONLY"


def test_same_inputs_same_breakdown():
    calc = StatutoryInvoiceCalculator()
    records = _records()
    rates = _rates()

    first = calc.compute(records, rates)
    second = calc.compute(records, rates)

    assert first == second
    assert records == _records()


@pytest.mark.parametrize("per_day", [Decimal("0"), Decimal("-466")])
def test_non_positive_per_day_rate_is_rejected(per_day):
    with pytest.raises(ValidationError) as exc:
        compute_invoice(_records(), _rates(per_day_rate=per_day))
    assert exc.value.field == "rate"
    assert "per_day_rate" in str(exc.value)


@pytest.mark.parametrize(
    "field_name",
    ["service_charge_rate_pct", "bonus_rate_pct", "pf_rate_pct", "esic_rate_pct", "cgst_rate_pct", "sgst_rate_pct"],
)
def test_negative_percentage_is_rejected(field_name):
    with pytest.raises(ValidationError) as exc:
        compute_invoice(_records(), _rates(**{field_name: Decimal("-1")}))
    assert exc.value.field == "rate"
    assert field_name in str(exc.value)


def test_negative_days_on_unnormalized_record_are_rejected():
    with pytest.raises(ValidationError) as exc:
        compute_invoice([AttendanceRecord(name="A", present_days=-1)], _rates())
    assert exc.value.field == "present_days"
