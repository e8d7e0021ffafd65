from __future__ import annotations

from dataclasses import asdict, dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from .money import ZERO, to_decimal


class AdjustmentKind(str, Enum):
    DEDUCTION = "deduction"
    ADDITION = "addition"


class AdjustmentPhase(str, Enum):
    BEFORE_GROSS = "before_gross"
    BEFORE_TAX = "before_tax"
    AFTER_TAX = "after_tax"


@dataclass(frozen=True)
class AdHocAdjustment:
    """A per-employee custom deduction or addition line.

    ``percentage`` is a fraction of gross pay (0.10 is 10%). A line whose
    selected value is missing contributes nothing.
    """

    kind: AdjustmentKind = AdjustmentKind.DEDUCTION
    amount: Optional[Decimal] = None
    percentage: Optional[Decimal] = None
    is_percentage: bool = False
    applies_before_gross: bool = False
    applies_before_tax: bool = False
    name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", AdjustmentKind(self.kind))
        if self.amount is not None:
            object.__setattr__(self, "amount", to_decimal(self.amount))
        if self.percentage is not None:
            object.__setattr__(self, "percentage", to_decimal(self.percentage))

    @property
    def is_addition(self) -> bool:
        return self.kind is AdjustmentKind.ADDITION

    @property
    def phase(self) -> Optional[AdjustmentPhase]:
        if self.is_addition:
            return None
        if self.applies_before_gross:
            return AdjustmentPhase.BEFORE_GROSS
        if self.applies_before_tax:
            return AdjustmentPhase.BEFORE_TAX
        return AdjustmentPhase.AFTER_TAX

    @property
    def is_missing_value(self) -> bool:
        if self.is_percentage:
            return self.percentage is None
        return self.amount is None

    def compute_value(self, basis: Decimal) -> Decimal:
        if self.is_percentage:
            if self.percentage is None:
                return ZERO
            return basis * self.percentage
        if self.amount is None:
            return ZERO
        return self.amount


@dataclass(frozen=True)
class OvertimeInput:
    overtime_hours: Decimal
    hourly_rate: Optional[Decimal] = None
    regular_hours: Decimal = ZERO
    multiplier: Optional[Decimal] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "overtime_hours", to_decimal(self.overtime_hours))
        object.__setattr__(self, "regular_hours", to_decimal(self.regular_hours))
        if self.hourly_rate is not None:
            object.__setattr__(self, "hourly_rate", to_decimal(self.hourly_rate))
        if self.multiplier is not None:
            object.__setattr__(self, "multiplier", to_decimal(self.multiplier))


MONEY_FIELDS = ("basic_pay", "allowances", "bonuses", "gratuity", "loans", "other_deductions")


@dataclass(frozen=True)
class PayrollInputs:
    basic_pay: Decimal
    allowances: Decimal = ZERO
    bonuses: Decimal = ZERO
    gratuity: Decimal = ZERO
    loans: Decimal = ZERO
    other_deductions: Decimal = ZERO
    adjustments: Tuple[AdHocAdjustment, ...] = ()
    overtime: Optional[OvertimeInput] = None

    def __post_init__(self) -> None:
        for name in MONEY_FIELDS:
            object.__setattr__(self, name, to_decimal(getattr(self, name)))
        object.__setattr__(self, "adjustments", tuple(self.adjustments))

    def money_fields(self) -> Iterable[Tuple[str, Decimal]]:
        return ((name, getattr(self, name)) for name in MONEY_FIELDS)


@dataclass(frozen=True)
class BracketDetail:
    bracket_index: int
    rate_applied: Decimal
    amount_taxed: Decimal
    tax: Decimal


@dataclass(frozen=True)
class ContributionDetail:
    amount: Decimal
    rate_applied: Decimal
    was_capped: bool = False


@dataclass(frozen=True)
class PayrollBreakdown:
    tax_brackets: Tuple[BracketDetail, ...]
    social_security: ContributionDetail
    health_levy: ContributionDetail


@dataclass(frozen=True)
class PayrollResult:
    basic_pay: Decimal
    allowances: Decimal
    bonuses: Decimal
    gratuity: Decimal
    overtime_pay: Decimal
    total_additions: Decimal
    gross_pay: Decimal
    deductions_before_gross: Decimal
    taxable_income: Decimal
    social_security: Decimal
    health_levy: Decimal
    deductions_before_tax: Decimal
    tax: Decimal
    loans: Decimal
    other_deductions: Decimal
    total_deductions: Decimal
    net_pay: Decimal
    breakdown: PayrollBreakdown = field(repr=False)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)
