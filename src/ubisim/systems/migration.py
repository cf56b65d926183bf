# src/ubisim/systems/migration.py
"""
Emigration and immigration per cohort.

High earners respond to effective tax rates above tier-specific
thresholds; UBI makes staying (and arriving) more attractive; high
unemployment pushes people out. Counts are binomial draws in stochastic
mode and rounded expectations otherwise.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from numpy.random import Generator

from ubisim.entities import (
    EmigrationParams,
    PopulationCohort,
    TaxPolicy,
    UbiProgram,
    with_populations,
)
from ubisim.helpers import ZERO, binomial_expected, binomial_sample, clamp
from ubisim.logging import DEEP_DEBUG, getLogger
from ubisim.tax import effective_tax_rate

log = getLogger(__name__)

MAX_EMIGRATION_PROB = Decimal("0.004")  # monthly
FLOOR_SHARE = Decimal("0.2")  # of the cohort's baseline probability
ATTRACTION_CAP = Decimal("0.6")
IMMIGRATION_SHARE = Decimal("0.15")
IMMIGRATION_POOL_SHARE = Decimal("0.01")
MIN_POPULATION = 100

# (income above, ETR threshold, sensitivity), checked top down
TAX_PRESSURE_TIERS = (
    (Decimal(500_000), Decimal("0.15"), Decimal(3)),
    (Decimal(200_000), Decimal("0.25"), Decimal(2)),
    (Decimal(100_000), Decimal("0.35"), Decimal(1)),
)
BASE_TIER = (Decimal("0.45"), Decimal("0.5"))


@dataclass(slots=True, frozen=True)
class MigrationOutcome:
    cohorts: tuple[PopulationCohort, ...]
    emigrants: int
    immigrants: int


def tax_pressure(income: Decimal, etr: Decimal, params: EmigrationParams) -> Decimal:
    """Emigration pressure from the effective tax rate of one cohort."""
    threshold, sensitivity = BASE_TIER
    for floor, tier_threshold, tier_sensitivity in TAX_PRESSURE_TIERS:
        if income > floor:
            threshold, sensitivity = tier_threshold, tier_sensitivity
            break
    pressure = max(ZERO, etr - threshold) * sensitivity
    if etr > Decimal("0.3"):
        pressure += (etr - Decimal("0.3")) * params.tax_sensitivity
    return pressure


def ubi_attraction(
    income: Decimal, ubi: UbiProgram, params: EmigrationParams
) -> Decimal:
    if ubi.monthly_amount <= 0:
        return ZERO
    ratio = ubi.monthly_amount * 12 / max(Decimal(25_000), income)
    return min(ATTRACTION_CAP, ratio * params.ubi_attraction * Decimal("0.8"))


def emigration_probability(
    cohort: PopulationCohort,
    *,
    tax: TaxPolicy,
    ubi: UbiProgram,
    unemployment: Decimal,
    params: EmigrationParams,
) -> Decimal:
    """Monthly emigration probability, floored at 20% of baseline, capped at 0.4%."""
    baseline = params.base_probability * cohort.mobility
    etr = effective_tax_rate(cohort.income, tax)
    pressure = tax_pressure(cohort.income, etr, params)
    attraction = ubi_attraction(cohort.income, ubi, params)
    unemployment_push = max(ZERO, unemployment - Decimal("0.05")) * Decimal("0.3")

    floor = baseline * FLOOR_SHARE
    prob = max(floor, baseline + pressure - attraction + unemployment_push)
    return clamp(prob, floor, MAX_EMIGRATION_PROB)


def immigration_probability(
    cohort: PopulationCohort, ubi: UbiProgram, params: EmigrationParams
) -> Decimal:
    baseline = params.base_probability * cohort.mobility
    attraction = ubi_attraction(cohort.income, ubi, params)
    return baseline * IMMIGRATION_SHARE * (1 + attraction * Decimal("0.4"))


def update_migration(
    cohorts: Sequence[PopulationCohort],
    *,
    tax: TaxPolicy,
    ubi: UbiProgram,
    unemployment: Decimal,
    params: EmigrationParams,
    stochastic: bool,
    rng: Generator,
) -> MigrationOutcome:
    """
    Move people in and out of every cohort.

    Immigrants are drawn from a pool of 1% of the cohort's size. New
    populations never fall below 100.
    """
    populations = []
    emigrants_total = 0
    immigrants_total = 0

    for cohort in cohorts:
        out_prob = emigration_probability(
            cohort, tax=tax, ubi=ubi, unemployment=unemployment, params=params
        )
        in_prob = immigration_probability(cohort, ubi, params)
        pool = int(cohort.adults * IMMIGRATION_POOL_SHARE)

        if stochastic:
            leaving = binomial_sample(cohort.adults, out_prob, rng)
            arriving = binomial_sample(pool, in_prob, rng)
        else:
            leaving = binomial_expected(cohort.adults, out_prob)
            arriving = binomial_expected(pool, in_prob)

        populations.append(max(MIN_POPULATION, cohort.adults - leaving + arriving))
        emigrants_total += leaving
        immigrants_total += arriving

        if log.isEnabledFor(DEEP_DEBUG):
            log.deep(
                f"    {cohort.name}: p_out={out_prob:.6f} p_in={in_prob:.7f} "
                f"-{leaving:,} +{arriving:,}"
            )

    log.debug(f"  Migration: emigrants={emigrants_total:,} immigrants={immigrants_total:,}")
    return MigrationOutcome(
        cohorts=with_populations(cohorts, populations),
        emigrants=emigrants_total,
        immigrants=immigrants_total,
    )
