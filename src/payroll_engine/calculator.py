from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from functools import reduce
from typing import Iterable, Optional

from .contributions import capped_contribution, flat_contribution
from .logging import get_logger
from .models import (
    AdHocAdjustment,
    AdjustmentPhase,
    BracketDetail,
    ContributionDetail,
    PayrollBreakdown,
    PayrollInputs,
    PayrollResult,
)
from .money import ZERO, quantize_money
from .overtime import overtime_earnings
from .tax import TaxComputation, compute_tax
from .tax_tables import TaxConfiguration, default_configuration

logger = get_logger(__name__)


@dataclass(frozen=True)
class _PhaseTotal:
    basis: Decimal
    total: Decimal = ZERO


def _fold_phase(adjustments: Iterable[AdHocAdjustment], basis: Decimal, compounding: bool = False) -> Decimal:
    """Sum a phase's adjustments in input order.

    With ``compounding`` each value is added to the basis seen by the next
    line, so a later percentage addition includes earlier additions.
    """

    def step(acc: _PhaseTotal, adjustment: AdHocAdjustment) -> _PhaseTotal:
        value = adjustment.compute_value(acc.basis)
        return _PhaseTotal(
            basis=acc.basis + value if compounding else acc.basis,
            total=acc.total + value,
        )

    return reduce(step, adjustments, _PhaseTotal(basis=basis)).total


def _rounded_contribution(detail: ContributionDetail) -> ContributionDetail:
    return ContributionDetail(
        amount=quantize_money(detail.amount),
        rate_applied=detail.rate_applied,
        was_capped=detail.was_capped,
    )


def _rounded_brackets(computation: TaxComputation) -> tuple:
    return tuple(
        BracketDetail(
            bracket_index=d.bracket_index,
            rate_applied=d.rate_applied,
            amount_taxed=quantize_money(d.amount_taxed),
            tax=quantize_money(d.tax),
        )
        for d in computation.per_bracket
    )


class PayrollCalculator:
    """Computes one employee's payslip for one pay period.

    The configuration is captured at construction and never modified, so a
    single calculator can be shared across threads.
    """

    def __init__(self, config: Optional[TaxConfiguration] = None):
        self.config = config or default_configuration()

    def calculate(self, inputs: PayrollInputs) -> PayrollResult:
        config = self.config
        additions = [a for a in inputs.adjustments if a.is_addition]
        before_gross = [a for a in inputs.adjustments if a.phase is AdjustmentPhase.BEFORE_GROSS]
        before_tax = [a for a in inputs.adjustments if a.phase is AdjustmentPhase.BEFORE_TAX]
        after_tax = [a for a in inputs.adjustments if a.phase is AdjustmentPhase.AFTER_TAX]

        overtime = overtime_earnings(inputs.overtime, inputs.basic_pay, config)
        base_gross = inputs.basic_pay + inputs.allowances + inputs.bonuses + inputs.gratuity + overtime

        total_additions = _fold_phase(additions, base_gross, compounding=True)
        gross_pay = base_gross + total_additions

        deductions_before_gross = _fold_phase(before_gross, gross_pay)
        taxable_income = gross_pay - deductions_before_gross

        social_security = capped_contribution(gross_pay, config.contribution_rate, config.contribution_cap)
        health_levy = flat_contribution(inputs.basic_pay, config.health_levy_rate)

        paye = compute_tax(taxable_income, config.brackets)

        deductions_before_tax = social_security.amount + health_levy.amount + _fold_phase(before_tax, gross_pay)
        other_deductions = inputs.other_deductions + _fold_phase(after_tax, gross_pay)

        total_deductions = (
            deductions_before_gross
            + deductions_before_tax
            + paye.total_tax
            + inputs.loans
            + other_deductions
        )
        net_pay = gross_pay - total_deductions

        logger.debug(
            "payroll_calculated",
            gross_pay=str(quantize_money(gross_pay)),
            tax=str(quantize_money(paye.total_tax)),
            net_pay=str(quantize_money(net_pay)),
            adjustments=len(inputs.adjustments),
        )

        return PayrollResult(
            basic_pay=quantize_money(inputs.basic_pay),
            allowances=quantize_money(inputs.allowances),
            bonuses=quantize_money(inputs.bonuses),
            gratuity=quantize_money(inputs.gratuity),
            overtime_pay=quantize_money(overtime),
            total_additions=quantize_money(total_additions),
            gross_pay=quantize_money(gross_pay),
            deductions_before_gross=quantize_money(deductions_before_gross),
            taxable_income=quantize_money(taxable_income),
            social_security=quantize_money(social_security.amount),
            health_levy=quantize_money(health_levy.amount),
            deductions_before_tax=quantize_money(deductions_before_tax),
            tax=quantize_money(paye.total_tax),
            loans=quantize_money(inputs.loans),
            other_deductions=quantize_money(other_deductions),
            total_deductions=quantize_money(total_deductions),
            net_pay=quantize_money(net_pay),
            breakdown=PayrollBreakdown(
                tax_brackets=_rounded_brackets(paye),
                social_security=_rounded_contribution(social_security),
                health_levy=_rounded_contribution(health_levy),
            ),
        )


def calculate(inputs: PayrollInputs, config: Optional[TaxConfiguration] = None) -> PayrollResult:
    return PayrollCalculator(config).calculate(inputs)
