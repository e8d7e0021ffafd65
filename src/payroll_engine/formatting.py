from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional

from .money import ZERO, quantize_money, to_decimal

NARROW_NBSP = "\u202f"
NBSP = "\u00a0"


@dataclass(frozen=True)
class LocaleConventions:
    group: str = ","
    decimal: str = "."
    symbol_first: bool = True
    symbol_space: bool = False


LOCALES: Dict[str, LocaleConventions] = {
    "en": LocaleConventions(),
    "en-ZM": LocaleConventions(),
    "en-US": LocaleConventions(),
    "en-GB": LocaleConventions(),
    "de": LocaleConventions(group=".", decimal=",", symbol_first=False, symbol_space=True),
    "de-DE": LocaleConventions(group=".", decimal=",", symbol_first=False, symbol_space=True),
    "fr": LocaleConventions(group=NARROW_NBSP, decimal=",", symbol_first=False, symbol_space=True),
    "fr-FR": LocaleConventions(group=NARROW_NBSP, decimal=",", symbol_first=False, symbol_space=True),
}

CURRENCY_SYMBOLS = {
    "ZMW": "K",
    "USD": "$",
    "GBP": "£",
    "EUR": "€",
    "ZAR": "R",
}


def locale_conventions(locale: str) -> LocaleConventions:
    normalized = locale.replace("_", "-")
    if normalized in LOCALES:
        return LOCALES[normalized]
    language = normalized.split("-", 1)[0]
    return LOCALES.get(language, LOCALES["en"])


def _symbol(currency: str) -> tuple[str, bool]:
    code = currency.upper()
    if code in CURRENCY_SYMBOLS:
        return CURRENCY_SYMBOLS[code], False
    # ISO codes always get a separating space
    return code, True


def format_currency(amount, locale: str = "en-ZM", currency: str = "ZMW") -> str:
    value = quantize_money(to_decimal(amount))
    if not value.is_finite():
        raise ValueError(f"Cannot format non-finite amount {amount!r}")

    conventions = locale_conventions(locale)
    symbol, force_space = _symbol(currency)
    sign = "-" if value < ZERO else ""
    digits = f"{abs(value):,.2f}"
    integer_part, fraction = digits.split(".")
    number = integer_part.replace(",", conventions.group) + conventions.decimal + fraction

    space = NBSP if (conventions.symbol_space or force_space) else ""
    if conventions.symbol_first:
        return f"{sign}{symbol}{space}{number}"
    return f"{sign}{number}{space}{symbol}"


def format_zmk(amount) -> str:
    return format_currency(amount, locale="en-ZM", currency="ZMW")


def parse_currency(text: str, locale: str = "en-ZM", currency: str = "ZMW") -> Decimal:
    """Read back a string produced by ``format_currency``."""
    conventions = locale_conventions(locale)
    symbol, _ = _symbol(currency)
    cleaned = text.strip().replace(symbol, "")
    for space in (NBSP, NARROW_NBSP, " "):
        cleaned = cleaned.replace(space, "")
    if conventions.group.strip():
        cleaned = cleaned.replace(conventions.group, "")
    cleaned = cleaned.replace(conventions.decimal, ".")
    try:
        return Decimal(cleaned)
    except InvalidOperation as exc:
        raise ValueError(f"Cannot parse {text!r} as {currency} for locale {locale}") from exc


def generate_pay_period(day: Optional[date] = None) -> str:
    day = day or date.today()
    return f"{day.year}-{day.month:02d}"
