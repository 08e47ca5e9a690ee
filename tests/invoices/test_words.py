from decimal import Decimal

import pytest

from src.billing_system.billing_system.invoices.words import to_words


@pytest.mark.parametrize(
    "amount, expected",
    [
        (0, "ZERO RUPEES ONLY"),
        (7, "SEVEN RUPEES ONLY"),
        (15, "FIFTEEN RUPEES ONLY"),
        (20, "TWENTY RUPEES ONLY"),
        (101, "ONE HUNDRED ONE RUPEES ONLY"),
        (1000, "ONE THOUSAND RUPEES ONLY"),
        (53451, "FIFTY THREE THOUSAND FOUR HUNDRED FIFTY ONE RUPEES ONLY"),
        (100000, "ONE LAKH RUPEES ONLY"),
        (250000, "TWO LAKH FIFTY THOUSAND RUPEES ONLY"),
        (
            12345678,
            "ONE CRORE TWENTY THREE LAKH FORTY FIVE THOUSAND SIX HUNDRED SEVENTY EIGHT RUPEES ONLY",
        ),
        (1_000_000_000, "ONE HUNDRED CRORE RUPEES ONLY"),
    ],
)
def test_to_words_indian_grouping(amount, expected):
    assert to_words(amount) == expected


def test_to_words_accepts_whole_decimal():
    assert to_words(Decimal("45297")) == "FORTY FIVE THOUSAND TWO HUNDRED NINETY SEVEN RUPEES ONLY"


def test_to_words_never_uses_western_grouping():
    assert "THOUSAND" not in to_words(100000)
    assert "MILLION" not in to_words(1_000_000)
    assert to_words(1_000_000) == "TEN LAKH RUPEES ONLY"


def test_to_words_rejects_negative_and_fractional():
    with pytest.raises(ValueError):
        to_words(-1)
    with pytest.raises(ValueError):
        to_words(Decimal("10.5"))
