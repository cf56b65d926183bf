"""
Scenario Suite
==============

Predefined UBI scenarios and the calibrate-then-simulate driver.

Every scenario of a suite starts from a fresh generator seeded with the
same seed, so all scenarios share one stochastic trajectory.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from numpy.random import Generator

from ubisim import Economy, SimulationResults, TaxPolicy, new_rng, run_simulation
from ubisim.logging import getLogger

from .calibrator import ConvergenceInfo, calibrate
from .config import CalibrationSettings

log = getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Scenario:
    """A named UBI level and its annualized net fiscal target."""

    name: str
    ubi: Decimal
    target_net: Decimal


SCENARIOS: tuple[Scenario, ...] = (
    Scenario("Baseline_NoUBI", Decimal(0), Decimal(0)),
    Scenario("UBI_600_Balanced", Decimal(600), Decimal(0)),
    Scenario("UBI_1000_Balanced", Decimal(1000), Decimal(0)),
    Scenario("UBI_1200_Balanced", Decimal(1200), Decimal(0)),
    Scenario("UBI_1500_DeficitOK", Decimal(1500), Decimal("-200e9")),
    Scenario("UBI_800_Surplus", Decimal(800), Decimal("100e9")),
)


@dataclass(slots=True, frozen=True)
class ScenarioSummary:
    """One row of the scenario summary table."""

    name: str
    months: int
    ubi: Decimal
    net_fiscal_position: Decimal
    pit_scale: Decimal
    corp_rate: Decimal
    vat_rate: Decimal
    total_taxes: Decimal
    total_ubi: Decimal
    total_other_spending: Decimal
    total_emigrants: int
    total_immigrants: int
    final_taxpayers: int
    avg_unemployment: Decimal
    final_price_level: Decimal
    final_interest_rate: Decimal
    final_firms: int
    avg_trade_balance: Decimal
    converged: bool
    calibration_rounds: int
    final_gap: Decimal | None


@dataclass(slots=True, frozen=True)
class ScenarioRun:
    scenario: Scenario
    tax: TaxPolicy
    convergence: ConvergenceInfo
    results: SimulationResults
    summary: ScenarioSummary


def summarize(
    name: str,
    ubi: Decimal,
    tax: TaxPolicy,
    results: SimulationResults,
    convergence: ConvergenceInfo,
) -> ScenarioSummary:
    """Cumulative, averaged and final figures of one calibrated run."""
    final = results.final
    return ScenarioSummary(
        name=name,
        months=len(results),
        ubi=ubi,
        net_fiscal_position=results.net_fiscal_position,
        pit_scale=convergence.pit_scale,
        corp_rate=tax.corporate,
        vat_rate=tax.vat,
        total_taxes=results.total_taxes,
        total_ubi=results.total_ubi,
        total_other_spending=results.total_other_spending,
        total_emigrants=results.total_emigrants,
        total_immigrants=results.total_immigrants,
        final_taxpayers=final.remaining_taxpayers,
        avg_unemployment=results.avg_unemployment,
        final_price_level=final.price_level,
        final_interest_rate=final.interest_rate,
        final_firms=final.total_firms,
        avg_trade_balance=results.avg_trade_balance,
        converged=convergence.converged,
        calibration_rounds=convergence.rounds,
        final_gap=convergence.final_gap,
    )


def run_scenario(
    scenario: Scenario,
    economy: Economy,
    *,
    months: int,
    stochastic: bool,
    advanced: bool,
    rng: Generator,
    settings: CalibrationSettings | None = None,
) -> ScenarioRun:
    """
    Calibrate taxes for *scenario*, then simulate once under the result.

    The final simulation continues drawing from *rng* after the
    calibration, on a fresh copy of the template economy.
    """
    ubi = economy.ubi(scenario.ubi)
    tax, info = calibrate(
        months,
        economy,
        ubi,
        economy.tax,
        scenario.target_net,
        stochastic=stochastic,
        advanced=advanced,
        rng=rng,
        settings=settings,
    )
    results = run_simulation(
        months, economy, ubi, tax, stochastic=stochastic, advanced=advanced, rng=rng
    )
    return ScenarioRun(
        scenario=scenario,
        tax=tax,
        convergence=info,
        results=results,
        summary=summarize(scenario.name, ubi.monthly_amount, tax, results, info),
    )


def run_suite(
    economy: Economy,
    *,
    months: int,
    stochastic: bool,
    advanced: bool,
    seed: int | None,
    settings: CalibrationSettings | None = None,
    scenarios: Sequence[Scenario] = SCENARIOS,
) -> list[ScenarioRun]:
    """Run every scenario, reseeding the random source before each one."""
    runs = []
    for scenario in scenarios:
        log.info(f"{'=' * 50}")
        log.info(f"Running: {scenario.name}")
        log.info(f"{'=' * 50}")
        runs.append(
            run_scenario(
                scenario,
                economy,
                months=months,
                stochastic=stochastic,
                advanced=advanced,
                rng=new_rng(seed),
                settings=settings,
            )
        )
    return runs
