# src/ubisim/tax.py
"""Progressive bracket integration and effective tax rates."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from ubisim.entities import PopulationCohort, TaxPolicy
from ubisim.helpers import ZERO


def personal_income_tax(income: Decimal, tax: TaxPolicy) -> Decimal:
    """
    Annual personal income tax on *income*.

    Each bracket taxes the slice of income between its threshold and the
    next bracket's threshold (the last bracket is open-ended)::

        PIT = Σ_k rate_k · max(0, min(income, threshold_{k+1}) − threshold_k)
    """
    if income <= 0:
        return ZERO
    owed = ZERO
    brackets = tax.brackets
    for k, bracket in enumerate(brackets):
        if income <= bracket.threshold:
            break
        upper = brackets[k + 1].threshold if k + 1 < len(brackets) else income
        owed += (min(income, upper) - bracket.threshold) * bracket.rate
    return owed


def effective_tax_rate(income: Decimal, tax: TaxPolicy) -> Decimal:
    """Personal income tax as a share of *income* (0 for non-positive income)."""
    if income <= 0:
        return ZERO
    return personal_income_tax(income, tax) / income


def avg_effective_tax_rate(
    cohorts: Sequence[PopulationCohort], tax: TaxPolicy
) -> Decimal:
    """Population-weighted mean effective tax rate across *cohorts*."""
    total = sum((c.adults for c in cohorts), 0)
    if total <= 0:
        return ZERO
    weighted = sum(
        (effective_tax_rate(c.income, tax) * c.adults for c in cohorts), ZERO
    )
    return weighted / total
