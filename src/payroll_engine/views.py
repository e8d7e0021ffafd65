from __future__ import annotations

from typing import List

from .formatting import format_currency
from .models import PayrollResult
from .tax_tables import TaxConfiguration


def _percent(rate) -> str:
    return f"{rate * 100:.2f}".rstrip("0").rstrip(".") + "%"


def format_payslip(result: PayrollResult, locale: str = "en-ZM", currency: str = "ZMW", period: str | None = None) -> str:
    def money(value) -> str:
        return format_currency(value, locale=locale, currency=currency)

    title = f"Payslip {period}" if period else "Payslip"
    rows: List[str] = [title, "Earnings"]
    earnings = [
        ("Basic pay", result.basic_pay),
        ("Allowances", result.allowances),
        ("Bonuses", result.bonuses),
        ("Gratuity", result.gratuity),
        ("Overtime", result.overtime_pay),
        ("Additions", result.total_additions),
    ]
    for label, value in earnings:
        if value or label == "Basic pay":
            rows.append(f"  {label:<28}{money(value):>16}")
    rows.append(f"  {'Gross pay':<28}{money(result.gross_pay):>16}")

    rows.append("Deductions")
    ss = result.breakdown.social_security
    capped = " (capped)" if ss.was_capped else ""
    deductions = [
        ("Before gross", result.deductions_before_gross),
        (f"NAPSA {_percent(ss.rate_applied)}{capped}", result.social_security),
        (f"NHIS {_percent(result.breakdown.health_levy.rate_applied)}", result.health_levy),
        ("PAYE", result.tax),
        ("Loans", result.loans),
        ("Other deductions", result.other_deductions),
    ]
    for label, value in deductions:
        if value or label == "PAYE":
            rows.append(f"  {label:<28}{money(value):>16}")
    for detail in result.breakdown.tax_brackets:
        rows.append(
            f"    band {detail.bracket_index + 1} @ {_percent(detail.rate_applied):<6} on {money(detail.amount_taxed)} = {money(detail.tax)}"
        )
    rows.append(f"  {'Total deductions':<28}{money(result.total_deductions):>16}")
    rows.append(f"{'Net pay':<30}{money(result.net_pay):>16}")
    return "\n".join(rows)


def format_configuration(config: TaxConfiguration, locale: str = "en-ZM", currency: str = "ZMW") -> str:
    rows = [
        "Tax configuration",
        f"NAPSA: {_percent(config.contribution_rate)} capped at {format_currency(config.contribution_cap, locale, currency)}",
        f"NHIS: {_percent(config.health_levy_rate)} of basic pay",
        "PAYE bands:",
    ]
    for index, bracket in enumerate(config.brackets, start=1):
        lower = format_currency(bracket.lower_bound, locale, currency)
        upper = "and above" if bracket.upper_bound is None else f"to {format_currency(bracket.upper_bound, locale, currency)}"
        rows.append(f"  {index}. {lower} {upper} @ {_percent(bracket.rate)}")
    rows.append(
        f"Working time: {config.working_days_per_month} days x {config.working_hours_per_day} hours, "
        f"overtime {config.overtime_multiplier}x"
    )
    return "\n".join(rows)
