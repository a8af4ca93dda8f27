"""Tests for price formatting."""

from decimal import Decimal

import pytest

from app.core.pricing import format_price, to_money


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal("9"), "$9.00"),
        (Decimal("4.5"), "$4.50"),
        (0, "$0.00"),
        (1234.5, "$1,234.50"),
        ("1000000", "$1,000,000.00"),
        (Decimal("-1.5"), "-$1.50"),
        (Decimal("2.345"), "$2.35"),
    ],
)
def test_format_price_usd(amount, expected):
    assert format_price(amount) == expected


def test_format_price_other_currencies():
    assert format_price(Decimal("3"), "EUR") == "€3.00"
    assert format_price(Decimal("3"), "chf") == "CHF 3.00"


def test_to_money_rounds_half_up_to_cents():
    assert to_money("0.125") == Decimal("0.13")
    assert to_money(0.1 + 0.2) == Decimal("0.30")
