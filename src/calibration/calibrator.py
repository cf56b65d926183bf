"""
Tax Calibrator
==============

Round-based search that tunes the corporate rate, then (while the gap is
still large) the PIT scale and the VAT rate, until a scenario's net fiscal
position lands within tolerance of its target.

Each round:

1. grid + bisection over the corporate rate;
2. re-simulate and measure the gap; stop if within tolerance;
3. if the gap exceeds 5x tolerance (first 10 rounds only): PIT scale grid
   with a stability penalty, re-simulate, and if the gap still exceeds 3x
   tolerance, grid + bisection over the VAT rate;
4. three consecutive rounds whose gap barely moved end the calibration.

Any failure inside a round ends the calibration with the rates found so far.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from numpy.random import Generator

from ubisim import Economy, TaxPolicy, UbiProgram
from ubisim.helpers import ONE
from ubisim.logging import getLogger

from .config import CalibrationSettings
from .evaluator import FiscalEvaluator, RateProbe
from .search import grid_bisect_search, pit_scale_search

log = getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ConvergenceInfo:
    """
    Outcome of a calibration.

    ``final_gap`` is the last gap measured (None if no round completed its
    first measurement); ``rounds`` counts rounds started.
    """

    rounds: int
    final_gap: Decimal | None
    pit_scale: Decimal
    corp_rate: Decimal
    vat_rate: Decimal
    converged: bool


def _billions(x: Decimal) -> str:
    return f"${x / Decimal('1e9'):,.2f}B"


def calibrate(
    months: int,
    economy: Economy,
    ubi: UbiProgram,
    base_tax: TaxPolicy,
    target_net: Decimal,
    *,
    stochastic: bool,
    advanced: bool,
    rng: Generator,
    settings: CalibrationSettings | None = None,
) -> tuple[TaxPolicy, ConvergenceInfo]:
    """
    Calibrate *base_tax* so the run's net fiscal position meets *target_net*.

    Parameters
    ----------
    months : int
        Horizon of every simulation.
    economy : Economy
        Template economy.
    ubi : UbiProgram
        UBI program being financed.
    base_tax : TaxPolicy
        Starting policy; its corporate and VAT rates seed the search and its
        brackets are the ones scaled.
    target_net : Decimal
        Annualized net fiscal target; scaled by ``months / 12``.
    stochastic, advanced : bool
        Simulation mode flags.
    rng : numpy.random.Generator
        Random source for every simulation the calibration runs.
    settings : CalibrationSettings, optional
        Search constants (defaults if omitted).

    Returns
    -------
    tuple of (TaxPolicy, ConvergenceInfo)
        Policy built from the last (PIT scale, corporate, VAT) triple, with
        bracket rates capped at 65%, and the convergence report.
    """
    settings = settings or CalibrationSettings()
    tolerance = settings.scaled_tolerance(months)
    target = target_net * months / 12
    evaluator = FiscalEvaluator(
        months=months,
        economy=economy,
        ubi=ubi,
        base_tax=base_tax,
        stochastic=stochastic,
        advanced=advanced,
    )

    pit_scale, corp_rate, vat_rate = ONE, base_tax.corporate, base_tax.vat
    last_gap: Decimal | None = None
    stagnant = 0
    converged = False
    rounds = 0

    log.info(
        f"Calibrating UBI=${ubi.monthly_amount} target={_billions(target)} "
        f"tolerance={_billions(tolerance)}"
    )

    for round_no in range(1, settings.max_rounds + 1):
        rounds = round_no
        log.info(f"--- Calibration round {round_no}/{settings.max_rounds} ---")
        try:
            corp_rate = grid_bisect_search(
                RateProbe(evaluator, "corporate", pit_scale=pit_scale, vat=vat_rate),
                bounds=settings.corp_bounds,
                intervals=settings.corp_grid_intervals,
                radius=settings.corp_radius,
                ceiling=settings.corp_ceiling,
                target=target,
                tolerance=tolerance,
                precision=settings.corp_precision,
                max_iterations=settings.bisection_iterations,
                initial_best=settings.corp_bounds[0],
                rng=rng,
                min_width=settings.corp_min_width,
                bisection_ceiling=False,
                n_workers=settings.n_workers,
            ).value

            net = evaluator.net(pit_scale, corp_rate, vat_rate, rng)
            gap = abs(net - target)
            log.info(
                f"Round {round_no}: gap={_billions(gap)} corp={corp_rate:.2%} "
                f"PIT={pit_scale:.3f} VAT={vat_rate:.2%} net={_billions(net)}"
            )

            if gap <= tolerance:
                converged = True
                last_gap = gap
                log.info(f"Calibration converged in {round_no} rounds")
                break

            if (
                gap > settings.pit_gap_factor * tolerance
                and round_no <= settings.pit_round_limit
            ):
                pit_scale = pit_scale_search(
                    RateProbe(evaluator, "pit_scale", corporate=corp_rate, vat=vat_rate),
                    bounds=settings.pit_bounds,
                    points=settings.pit_grid_points,
                    penalty=settings.pit_penalty,
                    target=target,
                    rng=rng,
                    n_workers=settings.n_workers,
                ).value
                net = evaluator.net(pit_scale, corp_rate, vat_rate, rng)
                gap = abs(net - target)
                log.info(f"After PIT search: gap={_billions(gap)} PIT={pit_scale:.3f}")

                if gap > settings.vat_gap_factor * tolerance:
                    lower, upper = settings.vat_bounds
                    vat_rate = grid_bisect_search(
                        RateProbe(
                            evaluator, "vat", pit_scale=pit_scale, corporate=corp_rate
                        ),
                        bounds=settings.vat_bounds,
                        intervals=settings.vat_grid_intervals,
                        radius=settings.vat_radius,
                        ceiling=settings.vat_ceiling,
                        target=target,
                        tolerance=tolerance,
                        precision=settings.vat_precision,
                        max_iterations=settings.bisection_iterations,
                        initial_best=(lower + upper) / 2,
                        rng=rng,
                        n_workers=settings.n_workers,
                    ).value
                    log.info(f"After VAT search: VAT={vat_rate:.2%}")

            if (
                last_gap is not None
                and abs(gap - last_gap) < settings.stagnation_factor * tolerance
            ):
                stagnant += 1
                if stagnant >= settings.stagnation_rounds:
                    last_gap = gap
                    log.info("Calibration stagnated, stopping early")
                    break
            else:
                stagnant = 0
            last_gap = gap

        except Exception as exc:  # noqa: BLE001
            log.error(f"Calibration round {round_no} failed: {exc}", exc_info=True)
            break

    info = ConvergenceInfo(
        rounds=rounds,
        final_gap=last_gap,
        pit_scale=pit_scale,
        corp_rate=corp_rate,
        vat_rate=vat_rate,
        converged=converged,
    )
    if converged:
        log.info(
            f"Calibration complete: corp={corp_rate:.2%} PIT={pit_scale:.3f} "
            f"VAT={vat_rate:.2%}"
        )
    else:
        log.warning(
            f"Calibration did not converge to {_billions(tolerance)} after "
            f"{rounds} rounds (final gap {last_gap})"
        )
    return evaluator.policy(pit_scale, corp_rate, vat_rate), info
