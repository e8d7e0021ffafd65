from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Sequence, Tuple

from .models import BracketDetail
from .money import ZERO, clamp_non_negative, to_decimal
from .tax_tables import TaxBracket


@dataclass(frozen=True)
class TaxComputation:
    total_tax: Decimal
    per_bracket: Tuple[BracketDetail, ...]


def compute_tax(taxable_income, brackets: Sequence[TaxBracket]) -> TaxComputation:
    """Apply a progressive schedule to ``taxable_income``.

    Negative income is taxed as zero. Brackets after the one that exhausts the
    income are left out of ``per_bracket``. Values are not rounded.
    """
    remaining = clamp_non_negative(to_decimal(taxable_income))
    total_tax = ZERO
    details: List[BracketDetail] = []

    for index, bracket in enumerate(brackets):
        if remaining <= ZERO:
            break
        width = bracket.width
        taxable_in_bracket = remaining if width is None else min(remaining, width)
        if taxable_in_bracket <= ZERO:
            continue
        tax_in_bracket = taxable_in_bracket * bracket.rate
        total_tax += tax_in_bracket
        details.append(
            BracketDetail(
                bracket_index=index,
                rate_applied=bracket.rate,
                amount_taxed=taxable_in_bracket,
                tax=tax_in_bracket,
            )
        )
        remaining -= taxable_in_bracket

    return TaxComputation(total_tax=total_tax, per_bracket=tuple(details))
