"""Statutory contributions.

The capped contribution (NAPSA) is charged on gross pay; the flat levy
(NHIS) is charged on basic pay only.
"""
from __future__ import annotations

from .models import ContributionDetail
from .money import clamp_non_negative, to_decimal


def capped_contribution(base, rate, cap) -> ContributionDetail:
    rate = to_decimal(rate)
    cap = to_decimal(cap)
    amount = min(clamp_non_negative(to_decimal(base)) * rate, cap)
    return ContributionDetail(amount=amount, rate_applied=rate, was_capped=amount == cap)


def flat_contribution(base, rate) -> ContributionDetail:
    rate = to_decimal(rate)
    amount = clamp_non_negative(to_decimal(base)) * rate
    return ContributionDetail(amount=amount, rate_applied=rate, was_capped=False)
