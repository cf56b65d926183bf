# src/ubisim/systems/business.py
"""
Business-sector update: margins, revenue, profit, corporate tax, investment.

Firm counts are held stable; entry and exit rates are computed and
reported but not applied to the counts.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal

from ubisim.entities import (
    BusinessEcosystem,
    FinancialSector,
    FirmSizeCategory,
    TaxPolicy,
    UbiProgram,
)
from ubisim.helpers import ZERO, clamp
from ubisim.logging import DEEP_DEBUG, getLogger

log = getLogger(__name__)

BASE_MARGINS = {
    "Small": Decimal("0.06"),
    "Medium": Decimal("0.08"),
    "Large": Decimal("0.10"),
}
DEFAULT_MARGIN = Decimal("0.08")

# Scale category revenue up to national-account magnitudes
REVENUE_SCALE = {
    "Small": Decimal(6),
    "Medium": Decimal(12),
    "Large": Decimal(20),
}

MARGIN_RAW_BOUNDS = (Decimal("0.02"), Decimal("0.15"))
MARGIN_BOUNDS = (Decimal("0.03"), Decimal("0.25"))
MAX_MONTHLY_REVENUE = Decimal("5e12")
MAX_MONTHLY_PROFIT = Decimal("1e12")
MAX_CORPORATE_TAX = Decimal("1.5e12")

INVESTMENT_RATE_BOUNDS = (Decimal("0.05"), Decimal("0.40"))
BASE_INVESTMENT_RATE = Decimal("0.2")

UBI_PRODUCTIVITY_THRESHOLD = Decimal(600)
UBI_PRODUCTIVITY_BOOST = Decimal("0.0008")
PRODUCTIVITY_BOUNDS = (Decimal("-0.005"), Decimal("0.025"))


@dataclass(slots=True, frozen=True)
class BusinessOutcome:
    business: BusinessEcosystem
    investment: Decimal
    profit: Decimal
    corporate_tax: Decimal
    entry_rates: dict[str, Decimal]
    exit_rates: dict[str, Decimal]


def profit_margin(
    category: str, unemployment: Decimal, price_level: Decimal
) -> Decimal:
    margin = BASE_MARGINS.get(category, DEFAULT_MARGIN)
    margin += unemployment * Decimal("0.2") + (price_level - 1) * Decimal("0.1")
    return clamp(clamp(margin, *MARGIN_RAW_BOUNDS), *MARGIN_BOUNDS)


def monthly_revenue(firms: FirmSizeCategory, ubi: UbiProgram) -> Decimal:
    """Scaled monthly revenue of a size category, with the UBI demand boost."""
    scale = REVENUE_SCALE.get(firms.name, Decimal(1))
    revenue = firms.count * firms.avg_revenue * scale / 12
    if ubi.monthly_amount > 0:
        revenue *= 1 + ubi.monthly_amount / 1000 * Decimal("0.02")
    return min(MAX_MONTHLY_REVENUE, revenue)


def investment_rate(
    firms: FirmSizeCategory, interest_rate: Decimal, financial: FinancialSector
) -> Decimal:
    """
    Share of after-tax profit reinvested.

    Falls with the annualized deviation of the policy rate from its
    baseline (small firms twice as sensitive) and rises with lending
    capacity.
    """
    sensitivity = Decimal("-1.0") if firms.name == "Small" else Decimal("-0.5")
    rate_gap = (interest_rate - financial.monthly_base_rate) * 12
    rate = (
        BASE_INVESTMENT_RATE
        + sensitivity * rate_gap
        + (financial.lending_capacity - 1) * Decimal("0.2")
    )
    return clamp(rate, *INVESTMENT_RATE_BOUNDS)


def entry_exit_rates(
    firms: FirmSizeCategory, margin: Decimal, advanced: bool
) -> tuple[Decimal, Decimal]:
    """Monthly (entry, exit) rates for one size category."""
    if not advanced:
        exit_rate = Decimal("0.005") if margin < Decimal("0.05") else Decimal("0.002")
        entry_rate = Decimal("0.004") if margin > Decimal("0.10") else Decimal("0.001")
        return entry_rate, exit_rate

    distress = ZERO
    if margin < Decimal("0.05"):
        distress = (Decimal("0.05") - margin) * firms.exit_sensitivity * Decimal("0.5")
    exit_rate = clamp(Decimal("0.001") + distress, ZERO, Decimal("0.02"))

    barrier = max(Decimal(1), firms.entry_barrier)
    entry_rate = Decimal("0.002") / barrier + max(ZERO, margin - Decimal("0.08"))
    return clamp(entry_rate, ZERO, Decimal("0.01")), exit_rate


def update_business(
    business: BusinessEcosystem,
    *,
    unemployment: Decimal,
    price_level: Decimal,
    interest_rate: Decimal,
    financial: FinancialSector,
    tax: TaxPolicy,
    ubi: UbiProgram,
    advanced: bool,
) -> BusinessOutcome:
    """
    One month of the business sector, category by category.

    Returns
    -------
    BusinessOutcome
        The updated ecosystem (productivity growth only; counts unchanged),
        total investment, profit and corporate tax (capped at $1.5T), and the
        per-category entry/exit rates.
    """
    investment = ZERO
    profit_total = ZERO
    corporate_tax = ZERO
    entry_rates: dict[str, Decimal] = {}
    exit_rates: dict[str, Decimal] = {}
    categories = []

    for firms in business.categories:
        margin = profit_margin(firms.name, unemployment, price_level)
        revenue = monthly_revenue(firms, ubi)
        profit = clamp(revenue * margin, ZERO, MAX_MONTHLY_PROFIT)
        firm_tax = profit * tax.corporate
        after_tax = profit - firm_tax

        investment += after_tax * investment_rate(firms, interest_rate, financial)
        profit_total += profit
        corporate_tax += firm_tax

        entry, exit_ = entry_exit_rates(firms, margin, advanced)
        entry_rates[firms.name] = entry
        exit_rates[firms.name] = exit_

        growth = firms.productivity_growth
        if ubi.monthly_amount > UBI_PRODUCTIVITY_THRESHOLD:
            growth += UBI_PRODUCTIVITY_BOOST
        categories.append(
            replace(firms, productivity_growth=clamp(growth, *PRODUCTIVITY_BOUNDS))
        )

        if log.isEnabledFor(DEEP_DEBUG):
            log.deep(
                f"    {firms.name}: firms={firms.count:,} margin={margin:.4f} "
                f"revenue={revenue / Decimal('1e9'):.1f}B "
                f"profit={profit / Decimal('1e9'):.1f}B "
                f"tax={firm_tax / Decimal('1e9'):.1f}B"
            )

    corporate_tax = clamp(corporate_tax, ZERO, MAX_CORPORATE_TAX)
    log.debug(
        f"  Business: profit={profit_total / Decimal('1e9'):.1f}B "
        f"corp tax={corporate_tax / Decimal('1e9'):.1f}B "
        f"(rate {tax.corporate:.4f}) investment={investment / Decimal('1e9'):.1f}B"
    )
    return BusinessOutcome(
        business=replace(business, categories=tuple(categories)),
        investment=investment,
        profit=profit_total,
        corporate_tax=corporate_tax,
        entry_rates=entry_rates,
        exit_rates=exit_rates,
    )
