from decimal import Decimal

from payroll_engine.calculator import PayrollCalculator
from payroll_engine.models import AdHocAdjustment, PayrollInputs
from payroll_engine.tax_tables import default_configuration
from payroll_engine.wizard import EmployeePayrollRequest, PreviewWizard


def build_wizard() -> PreviewWizard:
    return PreviewWizard(PayrollCalculator(default_configuration()))


def test_preview_wizard_aggregates_totals():
    requests = [
        EmployeePayrollRequest(employee_id="emp1", inputs=PayrollInputs(basic_pay=5000)),
        EmployeePayrollRequest(employee_id="emp2", inputs=PayrollInputs(basic_pay=10000)),
    ]

    totals = build_wizard().preview(requests)

    assert set(totals.employees) == {"emp1", "emp2"}
    assert totals.gross_pay == Decimal("15000")
    assert totals.tax == Decimal("1326")
    assert totals.social_security == Decimal("750")
    assert totals.health_levy == Decimal("150")
    assert totals.total_net_pay == Decimal("12774")
    assert totals.warnings == {}
    assert totals.skipped == []


def test_malformed_record_does_not_block_the_batch():
    requests = [
        EmployeePayrollRequest(employee_id="emp1", inputs=PayrollInputs(basic_pay=5000)),
        EmployeePayrollRequest(employee_id="emp2", inputs=PayrollInputs(basic_pay=float("nan"))),
        EmployeePayrollRequest(
            employee_id="emp3",
            inputs=PayrollInputs(basic_pay=1000, adjustments=[AdHocAdjustment(amount=5000, applies_before_gross=True)]),
        ),
    ]

    totals = build_wizard().preview(requests)

    assert totals.skipped == ["emp2"]
    assert "basic pay must be a finite number" in totals.warnings["emp2"]
    assert set(totals.employees) == {"emp1", "emp3"}
    assert totals.negative_net_pay == ["emp3"]
    assert totals.gross_pay == Decimal("6000")
    assert totals.total_net_pay == Decimal("640")


def test_salary_warnings_are_reported_per_employee():
    requests = [
        EmployeePayrollRequest(employee_id="hourly", inputs=PayrollInputs(basic_pay=75), pay_basis="hourly"),
    ]

    totals = build_wizard().preview(requests)

    assert totals.warnings == {"hourly": ("Hourly rate seems too high",)}
    assert "hourly" in totals.employees
