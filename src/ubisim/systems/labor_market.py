# src/ubisim/systems/labor_market.py
"""
Labor-market update: sluggish unemployment adjustment and Phillips wages.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from ubisim.entities import LaborMarket, PopulationCohort, UbiProgram
from ubisim.helpers import ZERO, clamp
from ubisim.logging import getLogger

log = getLogger(__name__)

STRUCTURAL_BOUNDS = (Decimal("0.035"), Decimal("0.065"))
TARGET_BOUNDS = (Decimal("0.035"), Decimal("0.09"))
UBI_EFFECT_CAP = Decimal("0.04")
TAX_EFFECT_BOUNDS = (Decimal("-0.002"), Decimal("0.010"))

ADJUSTMENT_SPEED = Decimal("0.04")  # share of the gap closed per month
MIN_STEP = Decimal("0.001")
PHILLIPS_SLOPE = Decimal("0.05")
WAGE_GROWTH_INNER = (Decimal("-0.003"), Decimal("0.006"))
WAGE_GROWTH_BOUNDS = (Decimal("-0.03"), Decimal("0.04"))


@dataclass(slots=True, frozen=True)
class LaborOutcome:
    unemployment: Decimal
    structural_rate: Decimal
    target_rate: Decimal
    wage_growth: Decimal


def structural_unemployment(labor: LaborMarket) -> Decimal:
    """``u* = base + 0.5·mismatch − 0.05·union coverage`` within [3.5%, 6.5%]."""
    rate = (
        labor.base_unemployment
        + Decimal("0.5") * labor.skill_mismatch
        - Decimal("0.05") * labor.union_coverage
    )
    return clamp(rate, *STRUCTURAL_BOUNDS)


def median_income(cohorts: Sequence[PopulationCohort]) -> Decimal:
    """Income of the middle cohort after sorting by income."""
    if not cohorts:
        return ZERO
    ordered = sorted(c.income for c in cohorts)
    return ordered[len(ordered) // 2]


def ubi_unemployment_effect(
    ubi: UbiProgram, cohorts: Sequence[PopulationCohort]
) -> Decimal:
    """Upward pressure on unemployment from the annual UBI / median income ratio."""
    if ubi.monthly_amount <= 0:
        return ZERO
    median = median_income(cohorts)
    if median <= 0:
        return ZERO
    ratio = ubi.monthly_amount * 12 / median
    return clamp(ratio * Decimal("0.03"), ZERO, UBI_EFFECT_CAP)


def tax_unemployment_effect(avg_etr: Decimal) -> Decimal:
    return clamp(Decimal("0.05") * (avg_etr - Decimal("0.25")), *TAX_EFFECT_BOUNDS)


def wage_growth(
    unemployment: Decimal, structural_rate: Decimal, trend_growth: Decimal
) -> Decimal:
    """Monthly wage growth from trend productivity and the unemployment gap."""
    growth = trend_growth - PHILLIPS_SLOPE * (unemployment - structural_rate)
    return clamp(clamp(growth, *WAGE_GROWTH_INNER), *WAGE_GROWTH_BOUNDS)


def update_labor_market(
    unemployment: Decimal,
    *,
    labor: LaborMarket,
    cohorts: Sequence[PopulationCohort],
    ubi: UbiProgram,
    avg_etr: Decimal,
    trend_growth: Decimal,
) -> LaborOutcome:
    """
    Move unemployment toward its target and derive wage growth.

    The rate closes 4% of the gap to target each month, but always moves
    at least 0.1 pp toward it, so it never jumps straight to target.

    Parameters
    ----------
    unemployment : Decimal
        Current unemployment rate.
    labor : LaborMarket
        Structural labor parameters.
    cohorts : sequence of PopulationCohort
        Current cohort table (for the median income).
    ubi : UbiProgram
        Active UBI program.
    avg_etr : Decimal
        Population-weighted effective tax rate.
    trend_growth : Decimal
        Monthly trend productivity growth.

    Returns
    -------
    LaborOutcome
        New (unclamped) unemployment, structural and target rates, and
        monthly wage growth.
    """
    u_star = structural_unemployment(labor)
    ubi_effect = ubi_unemployment_effect(ubi, cohorts)
    tax_effect = tax_unemployment_effect(avg_etr)
    target = clamp(u_star + ubi_effect + tax_effect, *TARGET_BOUNDS)

    new_rate = unemployment + ADJUSTMENT_SPEED * (target - unemployment)
    if abs(new_rate - unemployment) < MIN_STEP and target != unemployment:
        step = MIN_STEP if target > unemployment else -MIN_STEP
        new_rate = unemployment + step

    growth = wage_growth(new_rate, u_star, trend_growth)

    log.debug(
        f"  Labor: u*={u_star:.4f} target={target:.4f} "
        f"(ubi {ubi_effect:+.4f}, tax {tax_effect:+.4f}) "
        f"u {unemployment:.4f} → {new_rate:.4f}, wage growth {growth:+.4%}"
    )
    return LaborOutcome(
        unemployment=new_rate,
        structural_rate=u_star,
        target_rate=target,
        wage_growth=growth,
    )
