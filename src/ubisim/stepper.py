# src/ubisim/stepper.py
"""
Month stepper.

:func:`step_month` advances the economy by one month. It runs the
sub-updates of :mod:`ubisim.systems` in a fixed order, each one reading
what the earlier ones produced this month, and returns the new
:class:`MonthState` together with the month's :class:`MonthResult`.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from numpy.random import Generator

from ubisim.economy import Economy
from ubisim.entities import (
    BusinessEcosystem,
    PopulationCohort,
    RegionalEconomy,
    TaxPolicy,
    UbiProgram,
    clone_business,
    clone_cohorts,
    clone_regional,
)
from ubisim.helpers import ONE, ZERO, clamp
from ubisim.logging import getLogger
from ubisim.results import MonthResult
from ubisim.systems import (
    update_business,
    update_finance,
    update_government,
    update_households,
    update_labor_market,
    update_migration,
    update_prices,
    update_regions,
    update_trade,
)
from ubisim.tax import avg_effective_tax_rate

__all__ = ["MonthState", "initial_state", "step_month"]

log = getLogger(__name__)

UNEMPLOYMENT_BOUNDS = (Decimal("0.02"), Decimal("0.15"))
DEFAULT_PARTICIPATION = Decimal("0.65")


@dataclass(slots=True, frozen=True)
class MonthState:
    """State threaded from one month into the next."""

    price_level: Decimal
    unemployment: Decimal
    interest_rate: Decimal  # monthly
    exchange_rate: Decimal
    asset_price: Decimal
    debt: Decimal
    cumulative_inflation: Decimal
    business: BusinessEcosystem
    cohorts: tuple[PopulationCohort, ...]
    regional: RegionalEconomy


def initial_state(economy: Economy) -> MonthState:
    """
    Month-zero state with private copies of the mutable aggregates.

    Debt starts at debt-to-GDP times annualized baseline GDP.
    """
    return MonthState(
        price_level=ONE,
        unemployment=economy.labor.base_unemployment,
        interest_rate=economy.financial.monthly_base_rate,
        exchange_rate=ONE,
        asset_price=ONE,
        debt=economy.government.debt_to_gdp
        * economy.params.baseline_monthly_gdp
        * 12,
        cumulative_inflation=ONE,
        business=clone_business(economy.business),
        cohorts=clone_cohorts(economy.cohorts),
        regional=clone_regional(economy.regional),
    )


def _participation(cohorts: tuple[PopulationCohort, ...]) -> Decimal:
    total = sum(c.adults for c in cohorts)
    if total <= 0:
        return DEFAULT_PARTICIPATION
    return sum((c.participation * c.adults for c in cohorts), ZERO) / total


def _average_wage(cohorts: tuple[PopulationCohort, ...], growth: Decimal) -> Decimal:
    if not cohorts:
        return ZERO
    mean_income = sum((c.income for c in cohorts), ZERO) / len(cohorts)
    return mean_income * (1 + growth) / 12


def step_month(
    state: MonthState,
    *,
    economy: Economy,
    tax: TaxPolicy,
    ubi: UbiProgram,
    month: int,
    stochastic: bool,
    advanced: bool,
    rng: Generator,
) -> tuple[MonthState, MonthResult]:
    """
    Advance the economy by one month.

    Parameters
    ----------
    state : MonthState
        State at the end of the previous month.
    economy : Economy
        Immutable parameter bundles.
    tax : TaxPolicy
        Tax policy in force.
    ubi : UbiProgram
        UBI program in force.
    month : int
        1-based month index.
    stochastic : bool
        Draw migration counts and asset-price noise from *rng*.
    advanced : bool
        Use the enhanced behavioral paths.
    rng : numpy.random.Generator
        Random source; untouched in deterministic mode.

    Returns
    -------
    tuple of (MonthState, MonthResult)
    """
    log.debug(f"Month {month}")

    # 1. labor
    labor = update_labor_market(
        state.unemployment,
        labor=economy.labor,
        cohorts=state.cohorts,
        ubi=ubi,
        avg_etr=avg_effective_tax_rate(state.cohorts, tax),
        trend_growth=economy.params.productivity_growth,
    )
    unemployment = clamp(labor.unemployment, *UNEMPLOYMENT_BOUNDS)

    # 2. firms
    firms = update_business(
        state.business,
        unemployment=unemployment,
        price_level=state.price_level,
        interest_rate=state.interest_rate,
        financial=economy.financial,
        tax=tax,
        ubi=ubi,
        advanced=advanced,
    )

    # 3. households
    households = update_households(
        state.cohorts,
        tax=tax,
        ubi=ubi,
        unemployment=unemployment,
        wage_growth=labor.wage_growth,
        price_level=state.price_level,
        asset_price=state.asset_price,
        advanced=advanced,
    )

    # 4. aggregation and prices
    prices = update_prices(
        consumption=households.consumption,
        investment=firms.investment,
        government_spending=economy.government.baseline_spending,
        trade=economy.trade,
        price_level=state.price_level,
        exchange_rate=state.exchange_rate,
        cumulative_inflation=state.cumulative_inflation,
        month=month,
        params=economy.params,
    )

    # 5. finance
    finance = update_finance(
        interest_rate=state.interest_rate,
        inflation=prices.inflation,
        cumulative_inflation=prices.cumulative_inflation,
        unemployment=unemployment,
        output_gap=prices.output_gap,
        asset_price=state.asset_price,
        financial=economy.financial,
        stochastic=stochastic,
        advanced=advanced,
        rng=rng,
    )

    # 6. trade
    trade = update_trade(
        economy.trade,
        price_level=prices.price_level,
        nominal_gdp=prices.nominal_gdp,
        exchange_rate=state.exchange_rate,
        advanced=advanced,
    )

    # 7. migration
    migration = update_migration(
        state.cohorts,
        tax=tax,
        ubi=ubi,
        unemployment=unemployment,
        params=economy.emigration,
        stochastic=stochastic,
        rng=rng,
    )

    # 8. government and regions
    ledger = update_government(
        tax_lines=(
            households.personal_income_tax,
            households.vat,
            firms.corporate_tax,
            households.capital_gains_tax,
            households.property_tax,
            households.wealth_tax,
        ),
        ubi_outlays=households.ubi_outlays,
        government=economy.government,
        debt=state.debt,
    )
    regional = state.regional
    if advanced:
        regional = update_regions(regional, unemployment)

    cohorts = migration.cohorts
    gross_income = sum((c.income / 12 * c.adults for c in cohorts), ZERO)

    result = MonthResult(
        month=month,
        price_level=prices.price_level,
        nominal_gdp=prices.nominal_gdp,
        real_gdp=prices.real_gdp,
        unemployment_rate=unemployment,
        interest_rate=finance.interest_rate,
        exchange_rate=trade.exchange_rate,
        personal_income_tax=households.personal_income_tax,
        vat=households.vat,
        corp_tax=firms.corporate_tax,
        capital_gains_tax=households.capital_gains_tax,
        property_tax=households.property_tax,
        wealth_tax=households.wealth_tax,
        ubi_outlays=households.ubi_outlays,
        other_gov_spending=economy.government.baseline_spending,
        government_debt=ledger.debt,
        emigrants=migration.emigrants,
        immigrants=migration.immigrants,
        remaining_taxpayers=sum(c.adults for c in cohorts),
        avg_etr=avg_effective_tax_rate(cohorts, tax),
        firm_counts={c.name: c.count for c in firms.business.categories},
        total_investment=firms.investment,
        corporate_profit=firms.profit,
        total_capacity=prices.total_capacity,
        avg_wage=_average_wage(cohorts, labor.wage_growth),
        labor_force_participation=_participation(cohorts),
        exports=trade.exports,
        imports=trade.imports,
        total_savings=max(ZERO, gross_income - households.consumption),
        total_consumption=households.consumption,
        asset_price_index=finance.asset_price,
        credit_growth=finance.credit_growth,
        inflation=prices.inflation,
        output_gap=prices.output_gap,
        wage_growth=labor.wage_growth,
        firm_entry_rates=firms.entry_rates,
        firm_exit_rates=firms.exit_rates,
        regional_unemployment=(
            {r.name: r.unemployment_rate for r in regional.regions} if advanced else {}
        ),
    )

    new_state = MonthState(
        price_level=prices.price_level,
        unemployment=unemployment,
        interest_rate=finance.interest_rate,
        exchange_rate=trade.exchange_rate,
        asset_price=finance.asset_price,
        debt=ledger.debt,
        cumulative_inflation=prices.cumulative_inflation,
        business=firms.business,
        cohorts=cohorts,
        regional=regional,
    )
    return new_state, result
