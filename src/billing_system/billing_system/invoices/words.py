"""Amount in words, Indian numbering (Thousand, Lakh, Crore)."""

from __future__ import annotations

from decimal import Decimal
from typing import Union

UNITS = ["", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine"]
TEENS = [
    "Ten",
    "Eleven",
    "Twelve",
    "Thirteen",
    "Fourteen",
    "Fifteen",
    "Sixteen",
    "Seventeen",
    "Eighteen",
    "Nineteen",
]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

CRORE = 10_000_000
LAKH = 100_000
THOUSAND = 1_000


def _below_thousand(n: int) -> str:
    if n == 0:
        return ""
    if n < 10:
        return UNITS[n]
    if n < 20:
        return TEENS[n - 10]
    if n < 100:
        return f"{TENS[n // 10]} {UNITS[n % 10]}".strip()
    return f"{UNITS[n // 100]} Hundred {_below_thousand(n % 100)}".strip()


def _indian_words(n: int) -> str:
    crore, rest = divmod(n, CRORE)
    lakh, rest = divmod(rest, LAKH)
    thousand, rest = divmod(rest, THOUSAND)

    parts: list[str] = []
    if crore:
        # Anything above 99 crore is itself spelled in Indian grouping.
        parts.append(f"{_indian_words(crore)} Crore")
    if lakh:
        parts.append(f"{_below_thousand(lakh)} Lakh")
    if thousand:
        parts.append(f"{_below_thousand(thousand)} Thousand")
    if rest:
        parts.append(_below_thousand(rest))
    return " ".join(parts)


def to_words(amount: Union[int, Decimal]) -> str:
    """Render a whole, non-negative amount, e.g. ``100000`` -> ``"ONE LAKH RUPEES ONLY"``."""
    n = int(amount)
    if n != amount:
        raise ValueError(f"Amount must be a whole number: {amount!r}")
    if n < 0:
        raise ValueError(f"Amount must not be negative: {amount!r}")

    words = "Zero" if n == 0 else _indian_words(n)
    return f"{words} Rupees Only".upper()
