from __future__ import annotations

from decimal import Decimal
from typing import Optional

from .models import OvertimeInput
from .money import ZERO, to_decimal
from .tax_tables import TaxConfiguration

DEFAULT_OVERTIME_MULTIPLIER = Decimal("1.5")


def overtime_pay(regular_hours, regular_rate, overtime_hours, overtime_multiplier=DEFAULT_OVERTIME_MULTIPLIER) -> Decimal:
    """Regular hours at the base rate plus overtime hours at the premium rate.

    Negative hours are not rejected here; callers validate timesheets first.
    """
    rate = to_decimal(regular_rate)
    return (
        to_decimal(regular_hours) * rate
        + to_decimal(overtime_hours) * rate * to_decimal(overtime_multiplier)
    )


def hourly_rate(monthly_pay, config: TaxConfiguration) -> Decimal:
    hours_per_month = Decimal(config.working_days_per_month) * config.working_hours_per_day
    return to_decimal(monthly_pay) / hours_per_month


def overtime_earnings(overtime: Optional[OvertimeInput], basic_pay: Decimal, config: TaxConfiguration) -> Decimal:
    if overtime is None:
        return ZERO
    rate = overtime.hourly_rate if overtime.hourly_rate is not None else hourly_rate(basic_pay, config)
    multiplier = overtime.multiplier if overtime.multiplier is not None else config.overtime_multiplier
    return overtime_pay(overtime.regular_hours, rate, overtime.overtime_hours, multiplier)
