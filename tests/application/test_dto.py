"""Unit tests for display formatting."""

from decimal import Decimal

from pricebook.application.dto import format_amount, format_margin


def test_known_currency_uses_symbol():
    assert format_amount(Decimal("12.5")) == "€12.50"
    assert format_amount(Decimal("3"), "usd") == "$3.00"


def test_other_currency_uses_code():
    assert format_amount(Decimal("7.1"), "CHF") == "7.10 CHF"


def test_margin():
    assert format_margin(None) == "-"
    assert format_margin(Decimal("12.50")) == "12.5%"
