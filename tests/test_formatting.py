from datetime import date
from decimal import Decimal

import pytest

from payroll_engine.formatting import format_currency, format_zmk, generate_pay_period, parse_currency


def test_format_zmk_uses_kwacha_symbol_and_two_decimals():
    assert format_zmk(1234.5) == "K1,234.50"
    assert format_zmk(0) == "K0.00"
    assert format_zmk(Decimal("1149.6")) == "K1,149.60"


def test_negative_amounts_keep_sign_before_symbol():
    assert format_zmk(-4060) == "-K4,060.00"


def test_format_rounds_half_up():
    assert format_zmk(Decimal("0.005")) == "K0.01"
    assert format_zmk(Decimal("1234.565")) == "K1,234.57"


def test_format_currency_follows_locale_conventions():
    assert format_currency(1234.5, locale="en-US", currency="USD") == "$1,234.50"
    assert format_currency(1234.5, locale="de-DE", currency="EUR") == "1.234,50\u00a0€"
    assert format_currency(1234567.891, locale="fr-FR", currency="EUR") == "1\u202f234\u202f567,89\u00a0€"


def test_unknown_locale_and_currency_fall_back():
    assert format_currency(10, locale="sw-KE", currency="ZMW") == "K10.00"
    assert format_currency(10, locale="en_ZM", currency="xyz") == "XYZ\u00a010.00"


def test_non_finite_amounts_are_rejected():
    with pytest.raises(ValueError):
        format_zmk(float("nan"))


def test_parse_currency_reverses_format():
    assert parse_currency("K8,074.00") == Decimal("8074.00")
    assert parse_currency("-K4,060.00") == Decimal("-4060.00")
    assert parse_currency("1.234,50\u00a0€", locale="de-DE", currency="EUR") == Decimal("1234.50")


def test_parse_currency_rejects_garbage():
    with pytest.raises(ValueError):
        parse_currency("about ten kwacha")


def test_generate_pay_period_is_year_and_month():
    assert generate_pay_period(date(2025, 3, 9)) == "2025-03"
    assert len(generate_pay_period()) == 7
