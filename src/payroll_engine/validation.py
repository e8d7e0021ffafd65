"""Advisory checks run before a calculation.

Nothing here raises for a suspicious value: unpaid leave legitimately produces
zero pay, so callers get warnings to surface for review instead.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import List, Tuple

from .models import PayrollInputs
from .money import ZERO, to_decimal


class PayBasis(str, Enum):
    HOURLY = "hourly"
    MONTHLY = "monthly"
    CONTRACT = "contract"


PLAUSIBLE_MAXIMUMS = {
    PayBasis.HOURLY: (Decimal("50"), "Hourly rate seems too high"),
    PayBasis.MONTHLY: (Decimal("50000"), "Monthly salary seems too high"),
    PayBasis.CONTRACT: (Decimal("100000"), "Contract amount seems too high"),
}


@dataclass(frozen=True)
class SalaryValidation:
    is_valid: bool
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class InputValidation:
    warnings: Tuple[str, ...] = ()
    computable: bool = True

    @property
    def is_clean(self) -> bool:
        return not self.warnings


def validate_salary(salary, pay_basis: str) -> SalaryValidation:
    warnings: List[str] = []
    try:
        amount = to_decimal(salary)
    except ValueError:
        return SalaryValidation(is_valid=False, warnings=(f"Salary {salary!r} is not a number",))

    if not amount.is_finite():
        return SalaryValidation(is_valid=False, warnings=("Salary must be a finite number",))

    if amount <= ZERO:
        warnings.append("Salary must be greater than 0")

    try:
        basis = PayBasis(pay_basis)
    except ValueError:
        warnings.append(f"Unknown pay basis '{pay_basis}'")
    else:
        maximum, message = PLAUSIBLE_MAXIMUMS[basis]
        if amount > maximum:
            warnings.append(message)

    return SalaryValidation(is_valid=not warnings, warnings=tuple(warnings))


def validate_inputs(inputs: PayrollInputs) -> InputValidation:
    warnings: List[str] = []
    computable = True

    for name, value in inputs.money_fields():
        label = name.replace("_", " ")
        if not value.is_finite():
            warnings.append(f"{label} must be a finite number")
            computable = False
        elif value < ZERO:
            warnings.append(f"{label} is negative")

    for position, adjustment in enumerate(inputs.adjustments, start=1):
        label = adjustment.name or f"adjustment {position}"
        if adjustment.is_missing_value:
            warnings.append(f"{label} has no value and will be ignored")
            continue
        value = adjustment.percentage if adjustment.is_percentage else adjustment.amount
        if not value.is_finite():
            warnings.append(f"{label} must be a finite number")
            computable = False
        elif adjustment.is_percentage and not ZERO <= value <= 1:
            warnings.append(f"{label} percentage should be a fraction between 0 and 1")
        elif value < ZERO:
            warnings.append(f"{label} is negative")

    overtime = inputs.overtime
    if overtime is not None:
        hours = [overtime.regular_hours, overtime.overtime_hours]
        rates = [v for v in (overtime.hourly_rate, overtime.multiplier) if v is not None]
        if not all(v.is_finite() for v in hours + rates):
            warnings.append("overtime values must be finite numbers")
            computable = False
        elif any(v < ZERO for v in hours):
            warnings.append("overtime hours are negative")

    return InputValidation(warnings=tuple(warnings), computable=computable)
