from decimal import Decimal

from payroll_engine.models import OvertimeInput
from payroll_engine.overtime import hourly_rate, overtime_earnings, overtime_pay
from payroll_engine.tax_tables import TaxConfiguration, default_configuration


def test_overtime_pay_combines_regular_and_premium_hours():
    assert overtime_pay(160, 10, 10) == Decimal("1750.0")


def test_overtime_pay_uses_given_multiplier():
    assert overtime_pay(0, 20, 5, 2) == Decimal("200")


def test_negative_hours_are_not_validated():
    assert overtime_pay(-8, 10, 0) == Decimal("-80")


def test_hourly_rate_uses_standard_working_time():
    assert hourly_rate(22000, default_configuration()) == Decimal("125")


def test_overtime_earnings_without_input_is_zero():
    assert overtime_earnings(None, Decimal("5000"), default_configuration()) == 0


def test_overtime_earnings_reads_multiplier_from_configuration():
    base = default_configuration()
    config = TaxConfiguration(
        contribution_rate=base.contribution_rate,
        contribution_cap=base.contribution_cap,
        health_levy_rate=base.health_levy_rate,
        brackets=base.brackets,
        working_days_per_month=20,
        working_hours_per_day=10,
        overtime_multiplier=2,
    )

    earnings = overtime_earnings(OvertimeInput(overtime_hours=3), Decimal("20000"), config)

    assert earnings == Decimal("600")
