from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Tuple

from .calculator import PayrollCalculator
from .logging import get_logger
from .models import PayrollInputs, PayrollResult
from .money import ZERO, quantize_money
from .validation import PayBasis, validate_inputs, validate_salary

logger = get_logger(__name__)


@dataclass
class EmployeePayrollRequest:
    employee_id: str
    inputs: PayrollInputs
    pay_basis: str = PayBasis.MONTHLY.value


@dataclass
class PreviewTotals:
    employees: Dict[str, PayrollResult]
    warnings: Dict[str, Tuple[str, ...]]
    skipped: List[str]
    gross_pay: Decimal
    tax: Decimal
    social_security: Decimal
    health_levy: Decimal
    total_net_pay: Decimal
    negative_net_pay: List[str] = field(default_factory=list)


class PreviewWizard:
    """Runs a set of employees through the calculator before a pay run.

    A record with unusable numbers is skipped and reported; the rest of the
    batch is still computed.
    """

    def __init__(self, calculator: PayrollCalculator):
        self.calculator = calculator

    def preview(self, requests: List[EmployeePayrollRequest]) -> PreviewTotals:
        employee_results: Dict[str, PayrollResult] = {}
        warnings: Dict[str, Tuple[str, ...]] = {}
        skipped: List[str] = []
        negative: List[str] = []
        total_gross = total_tax = total_ss = total_levy = total_net = ZERO

        for request in requests:
            checked = validate_inputs(request.inputs)
            salary = validate_salary(request.inputs.basic_pay, request.pay_basis)
            messages = checked.warnings + tuple(w for w in salary.warnings if w not in checked.warnings)
            if messages:
                warnings[request.employee_id] = messages

            if not checked.computable:
                skipped.append(request.employee_id)
                logger.warning("preview_record_skipped", employee_id=request.employee_id, warnings=list(messages))
                continue

            result = self.calculator.calculate(request.inputs)
            employee_results[request.employee_id] = result
            total_gross += result.gross_pay
            total_tax += result.tax
            total_ss += result.social_security
            total_levy += result.health_levy
            total_net += result.net_pay
            if result.net_pay < ZERO:
                negative.append(request.employee_id)

        logger.info(
            "preview_complete",
            employees=len(employee_results),
            skipped=len(skipped),
            flagged=len(warnings),
        )

        return PreviewTotals(
            employees=employee_results,
            warnings=warnings,
            skipped=skipped,
            gross_pay=quantize_money(total_gross),
            tax=quantize_money(total_tax),
            social_security=quantize_money(total_ss),
            health_levy=quantize_money(total_levy),
            total_net_pay=quantize_money(total_net),
            negative_net_pay=negative,
        )
