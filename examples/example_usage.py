"""Example: price an attendance sheet without Flask or a database.

Shows the calculation core used directly: normalize rows, compute, print.
"""

from decimal import Decimal

from src.billing_system.billing_system.attendance.normalizer import normalize_attendance
from src.billing_system.billing_system.invoices.calculator.statutory_calculator import compute_invoice
from src.billing_system.billing_system.invoices.model import RateConfig
from src.billing_system.billing_system.invoices.serialization import breakdown_to_dict


def main():
    rows = [
        {"name": "Ramesh Kumar", "present_day": 26},
        {"name": "Suresh Patel", "present_day": 24, "overtime_days": 2},
        {"name": "Anil Sharma", "present_day": 26},
        {"name": "", "present_day": 20},
    ]
    normalized = normalize_attendance(rows, days_in_period=30)
    for s in normalized.skipped:
        print(f"skipped row {s.index}: {s.reason}")

    rates = RateConfig(per_day_rate=Decimal("466"), overtime_rate=Decimal("500"), service_charge_rate_pct=Decimal("7"))
    print(breakdown_to_dict(compute_invoice(normalized.records, rates)))


if __name__ == "__main__":
    main()
