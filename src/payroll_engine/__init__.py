"""Payroll computation engine: gross pay, NAPSA, NHIS, PAYE and net pay."""

__version__ = "0.1.0"

from .calculator import PayrollCalculator, calculate
from .contributions import capped_contribution, flat_contribution
from .errors import ConfigurationError, PayrollEngineError
from .formatting import format_currency, format_zmk, generate_pay_period, parse_currency
from .models import (
    AdHocAdjustment,
    AdjustmentKind,
    AdjustmentPhase,
    BracketDetail,
    ContributionDetail,
    OvertimeInput,
    PayrollBreakdown,
    PayrollInputs,
    PayrollResult,
)
from .overtime import hourly_rate, overtime_pay
from .permissions import can_access
from .tax import TaxComputation, compute_tax
from .tax_tables import TaxBracket, TaxConfiguration, default_configuration, load_tax_configuration
from .validation import InputValidation, PayBasis, SalaryValidation, validate_inputs, validate_salary

__all__ = [
    "PayrollCalculator",
    "calculate",
    "capped_contribution",
    "flat_contribution",
    "ConfigurationError",
    "PayrollEngineError",
    "format_currency",
    "format_zmk",
    "generate_pay_period",
    "parse_currency",
    "AdHocAdjustment",
    "AdjustmentKind",
    "AdjustmentPhase",
    "BracketDetail",
    "ContributionDetail",
    "OvertimeInput",
    "PayrollBreakdown",
    "PayrollInputs",
    "PayrollResult",
    "hourly_rate",
    "overtime_pay",
    "can_access",
    "TaxComputation",
    "compute_tax",
    "TaxBracket",
    "TaxConfiguration",
    "default_configuration",
    "load_tax_configuration",
    "InputValidation",
    "PayBasis",
    "SalaryValidation",
    "validate_inputs",
    "validate_salary",
]
