# src/ubisim/entities.py
"""
Immutable value definitions for the simulated economy.

Every entity is a frozen, slotted dataclass so templates built once by
:func:`ubisim.economy.build_economy` can be shared freely. Aggregates that
evolve month to month (cohort headcounts, the business ecosystem, the
regional economy) are updated by building new instances with
:func:`dataclasses.replace`; the ``clone_*`` helpers give each run its own
working copy so no scenario aliases another's template state.

All monetary fields and rates are :class:`~decimal.Decimal`.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from decimal import Decimal

from ubisim.typing import Populations

# PIT bracket rates may never exceed this after calibration scaling
MAX_BRACKET_RATE = Decimal("0.65")


# Tax policy
# ---------------------------------------------------------------------------
@dataclass(slots=True, frozen=True)
class TaxBracket:
    """One marginal bracket: income above *threshold* is taxed at *rate*."""

    threshold: Decimal
    rate: Decimal


@dataclass(slots=True, frozen=True)
class TaxPolicy:
    """
    Progressive personal income tax plus flat scalar rates.

    Parameters
    ----------
    brackets : tuple of TaxBracket
        Sorted by strictly increasing threshold; the first starts at 0.
    vat : Decimal
        Value-added tax rate on consumption.
    corporate : Decimal
        Corporate tax rate on firm profit.
    capital_gains : Decimal
        Tax rate on realised capital gains.
    property : Decimal
        Annual tax rate on imputed property value.
    wealth : Decimal
        Annual tax rate on income above $1M (wealth proxy).

    Raises
    ------
    ValueError
        If the bracket schedule is malformed or any rate is out of range.
    """

    brackets: tuple[TaxBracket, ...]
    vat: Decimal
    corporate: Decimal
    capital_gains: Decimal
    property: Decimal
    wealth: Decimal

    def __post_init__(self) -> None:
        if not self.brackets:
            raise ValueError("TaxPolicy needs at least one bracket")
        if self.brackets[0].threshold != 0:
            raise ValueError(
                f"first bracket must start at 0, got {self.brackets[0].threshold}"
            )
        for lower, upper in zip(self.brackets, self.brackets[1:]):
            if upper.threshold <= lower.threshold:
                raise ValueError(
                    "bracket thresholds must be strictly increasing "
                    f"({lower.threshold} then {upper.threshold})"
                )
        for bracket in self.brackets:
            if not 0 <= bracket.rate <= MAX_BRACKET_RATE:
                raise ValueError(
                    f"bracket rate must be within [0, {MAX_BRACKET_RATE}], "
                    f"got {bracket.rate}"
                )
        for name in ("vat", "corporate", "capital_gains", "property", "wealth"):
            value = getattr(self, name)
            if not 0 <= value <= 1:
                raise ValueError(f"{name} rate must be within [0, 1], got {value}")

    def rescaled(
        self, pit_scale: Decimal, corporate: Decimal, vat: Decimal
    ) -> TaxPolicy:
        """
        Return a policy with every bracket rate multiplied by *pit_scale*
        (each capped at 65%) and the corporate and VAT rates replaced.
        """
        brackets = tuple(
            TaxBracket(b.threshold, min(MAX_BRACKET_RATE, b.rate * pit_scale))
            for b in self.brackets
        )
        return replace(self, brackets=brackets, corporate=corporate, vat=vat)


# Households
# ---------------------------------------------------------------------------
@dataclass(slots=True, frozen=True)
class PopulationCohort:
    """A named income/demographic bucket of adults."""

    name: str
    income: Decimal  # average annual income
    savings_rate: Decimal
    adults: int
    participation: Decimal
    ubi_mpc: Decimal  # share of UBI income spent
    avoidance: Decimal
    mobility: Decimal
    median_age: int
    education: Decimal  # 0..1
    region: str


def clone_cohorts(cohorts: Iterable[PopulationCohort]) -> tuple[PopulationCohort, ...]:
    """Private working copy of a cohort table."""
    return tuple(replace(c) for c in cohorts)


def with_populations(
    cohorts: Sequence[PopulationCohort], populations: Populations
) -> tuple[PopulationCohort, ...]:
    """Return *cohorts* with headcounts replaced, order preserved."""
    if len(cohorts) != len(populations):
        raise ValueError(
            f"expected {len(cohorts)} populations, got {len(populations)}"
        )
    return tuple(
        replace(c, adults=int(n)) for c, n in zip(cohorts, populations, strict=True)
    )


# Firms
# ---------------------------------------------------------------------------
@dataclass(slots=True, frozen=True)
class FirmSizeCategory:
    """Aggregate of all firms of one size class (Small, Medium, Large)."""

    name: str
    count: int
    avg_employees: int
    avg_revenue: Decimal  # annual, per firm
    entry_barrier: Decimal
    exit_sensitivity: Decimal
    productivity_growth: Decimal
    wage_flexibility: Decimal
    innovation: Decimal


@dataclass(slots=True, frozen=True)
class BusinessEcosystem:
    categories: tuple[FirmSizeCategory, ...]
    network_effect: Decimal
    spillover: Decimal
    global_competition: Decimal
    supply_chain_resilience: Decimal

    def category(self, name: str) -> FirmSizeCategory:
        """Look up a size category by name."""
        for cat in self.categories:
            if cat.name == name:
                return cat
        raise KeyError(name)

    def count(self, name: str) -> int:
        """Firm count of *name*, 0 when the category is absent."""
        for cat in self.categories:
            if cat.name == name:
                return cat.count
        return 0


def clone_business(business: BusinessEcosystem) -> BusinessEcosystem:
    """Private working copy of a business ecosystem."""
    return replace(business, categories=tuple(replace(c) for c in business.categories))


# Markets and sectors
# ---------------------------------------------------------------------------
@dataclass(slots=True, frozen=True)
class LaborMarket:
    base_unemployment: Decimal
    search_friction: Decimal  # months
    skill_mismatch: Decimal
    wage_stickiness_down: Decimal
    wage_stickiness_up: Decimal
    union_coverage: Decimal
    regional_wage_gaps: tuple[tuple[str, Decimal], ...] = ()


@dataclass(slots=True, frozen=True)
class FinancialSector:
    base_interest_rate: Decimal  # annual
    credit_spread: Decimal
    credit_elasticity: Decimal
    savings_elasticity: Decimal
    asset_price_level: Decimal
    lending_capacity: Decimal
    stability: Decimal

    @property
    def monthly_base_rate(self) -> Decimal:
        return self.base_interest_rate / 12


@dataclass(slots=True, frozen=True)
class TradeSector:
    exports: Decimal  # monthly
    imports: Decimal  # monthly
    export_elasticity: Decimal
    import_elasticity: Decimal
    exchange_rate: Decimal
    foreign_demand_growth: Decimal  # annual
    agreement_effect: Decimal


@dataclass(slots=True, frozen=True)
class RegionData:
    name: str
    population_share: Decimal
    productivity: Decimal
    cost_of_living: Decimal
    unemployment_rate: Decimal
    housing_cost: Decimal
    local_tax_rate: Decimal
    amenity: Decimal


@dataclass(slots=True, frozen=True)
class RegionalEconomy:
    regions: tuple[RegionData, ...]
    labor_mobility: Decimal
    capital_mobility: Decimal
    regional_multiplier: Decimal
    transport_cost: Decimal

    def region(self, name: str) -> RegionData:
        for reg in self.regions:
            if reg.name == name:
                return reg
        raise KeyError(name)


def clone_regional(regional: RegionalEconomy) -> RegionalEconomy:
    """Private working copy of a regional economy."""
    return replace(regional, regions=tuple(replace(r) for r in regional.regions))


@dataclass(slots=True, frozen=True)
class GovernmentSector:
    baseline_spending: Decimal  # monthly, excluding UBI
    unemployment_benefit_rate: Decimal
    social_security: Decimal
    public_investment_rate: Decimal
    debt_to_gdp: Decimal
    stabilizer_strength: Decimal


@dataclass(slots=True, frozen=True)
class UbiProgram:
    """Monthly per-adult transfer, optionally phased out above a threshold."""

    monthly_amount: Decimal
    child_bonus: Decimal = Decimal(0)
    means_tested: bool = False
    phase_out_threshold: Decimal = Decimal(0)
    phase_out_rate: Decimal = Decimal(0)

    def __post_init__(self) -> None:
        if self.monthly_amount < 0:
            raise ValueError(
                f"UBI amount must be non-negative, got {self.monthly_amount}"
            )


@dataclass(slots=True, frozen=True)
class EconomyParams:
    baseline_monthly_gdp: Decimal
    price_adjustment_speed: Decimal
    wage_response: Decimal
    productivity_growth: Decimal  # monthly trend
    inflation_persistence: Decimal
    expectation_adaptation: Decimal
    monetary_rule_strength: Decimal


@dataclass(slots=True, frozen=True)
class EmigrationParams:
    base_probability: Decimal  # monthly
    tax_sensitivity: Decimal
    ubi_attraction: Decimal
    quality_of_life: Decimal
    network_effect: Decimal
    reentry_rate: Decimal


__all__ = [
    "BusinessEcosystem",
    "EconomyParams",
    "EmigrationParams",
    "FinancialSector",
    "FirmSizeCategory",
    "GovernmentSector",
    "LaborMarket",
    "MAX_BRACKET_RATE",
    "PopulationCohort",
    "RegionData",
    "RegionalEconomy",
    "TaxBracket",
    "TaxPolicy",
    "TradeSector",
    "UbiProgram",
    "clone_business",
    "clone_cohorts",
    "clone_regional",
    "with_populations",
]
