"""
One-Dimensional Searches
========================

Search routines the calibrator runs on a single tax lever.

:func:`grid_bisect_search`
    Coarse grid over the whole interval, then bisection in a bracket around
    the best grid point. Used for the corporate and VAT rates.
:func:`pit_scale_search`
    Grid over PIT scales minimizing the fiscal gap plus a quadratic penalty
    for moving away from 1.0.

Coarse grids evaluate each point with its own child generator spawned from
the caller's generator, so a grid gives the same answer whether it runs
sequentially or in a process pool. Bisection is sequential and draws from
the caller's generator directly.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from decimal import Decimal

from numpy.random import Generator

from ubisim.helpers import ONE
from ubisim.logging import getLogger
from ubisim.simulation import SimulationError
from ubisim.typing import Money, Rng

log = getLogger(__name__)

Probe = Callable[[Money, Rng], Money]


@dataclass(slots=True, frozen=True)
class SearchResult:
    """Best value found, its fiscal gap (None if every candidate failed)."""

    value: Decimal
    gap: Decimal | None
    evaluations: int


def grid_points(lower: Decimal, upper: Decimal, intervals: int) -> list[Decimal]:
    """``intervals + 1`` evenly spaced points from *lower* to *upper*."""
    return [lower + (upper - lower) * i / intervals for i in range(intervals + 1)]


def _probe_point(probe: Probe, value: Decimal, rng: Generator) -> Decimal | None:
    """Evaluate one candidate; a failed simulation yields None."""
    try:
        return probe(value, rng)
    except SimulationError as exc:
        log.debug(f"    candidate {value:.6f} failed: {exc}")
        return None


def evaluate_grid(
    probe: Probe,
    points: Sequence[Decimal],
    rng: Generator,
    n_workers: int = 1,
) -> list[Decimal | None]:
    """
    Evaluate *probe* at every point.

    Parameters
    ----------
    probe : callable
        ``probe(value, rng) -> net``. Must be picklable when
        ``n_workers > 1``.
    points : sequence of Decimal
        Candidate values.
    rng : numpy.random.Generator
        Parent generator; one child is spawned per point.
    n_workers : int
        Worker processes (1 = evaluate in this process).

    Returns
    -------
    list
        Net fiscal position per point, in *points* order; None where the
        simulation failed.
    """
    children = rng.spawn(len(points))

    if n_workers <= 1 or len(points) <= 1:
        return [_probe_point(probe, p, child) for p, child in zip(points, children)]

    nets: list[Decimal | None] = [None] * len(points)
    with ProcessPoolExecutor(max_workers=n_workers) as executor:
        futures = {
            executor.submit(_probe_point, probe, p, child): i
            for i, (p, child) in enumerate(zip(points, children))
        }
        for future in as_completed(futures):
            nets[futures[future]] = future.result()
    return nets


def grid_bisect_search(
    probe: Probe,
    *,
    bounds: tuple[Decimal, Decimal],
    intervals: int,
    radius: Decimal,
    ceiling: Decimal,
    target: Decimal,
    tolerance: Decimal,
    precision: Decimal,
    max_iterations: int,
    initial_best: Decimal,
    rng: Generator,
    min_width: Decimal | None = None,
    bisection_ceiling: bool = True,
    n_workers: int = 1,
) -> SearchResult:
    """
    Find the lever value whose net fiscal position is closest to *target*.

    Parameters
    ----------
    probe : callable
        ``probe(value, rng) -> net``; net must increase with the lever.
    bounds : tuple of Decimal
        Search interval.
    intervals : int
        The coarse grid has ``intervals + 1`` points.
    radius : Decimal
        Half-width of the bisection bracket as a share of the interval.
    ceiling : Decimal
        Grid points with ``|net| > ceiling`` are unstable and never become
        the best point.
    target, tolerance : Decimal
        Bisection stops as soon as a candidate is within *tolerance* of
        *target*.
    precision : Decimal
        Bisection stops once an evaluation leaves the bracket narrower
        than this.
    max_iterations : int
        Cap on bisection steps.
    initial_best : Decimal
        Returned when no candidate is stable.
    rng : numpy.random.Generator
        Random source.
    min_width : Decimal, optional
        If given, bisection stops before evaluating a bracket narrower
        than this.
    bisection_ceiling : bool
        Also reject unstable bisection midpoints. When False the ceiling
        only screens the coarse grid.
    n_workers : int
        Processes for the coarse grid.

    Returns
    -------
    SearchResult
    """
    lower, upper = bounds
    best, best_gap = initial_best, None

    points = grid_points(lower, upper, intervals)
    for value, net in zip(points, evaluate_grid(probe, points, rng, n_workers)):
        if net is None or abs(net) > ceiling:
            log.debug(f"    grid {value:.4f}: rejected as unstable")
            continue
        gap = abs(net - target)
        log.debug(f"    grid {value:.4f}: net={net:,.0f} gap={gap:,.0f}")
        if best_gap is None or gap < best_gap:
            best, best_gap = value, gap
    evaluations = len(points)

    span = (upper - lower) * radius
    lo, hi = max(lower, best - span), min(upper, best + span)

    for _ in range(max_iterations):
        if min_width is not None and hi - lo < min_width:
            break
        mid = (lo + hi) / 2
        net = _probe_point(probe, mid, rng)
        evaluations += 1

        if net is None or (bisection_ceiling and abs(net) > ceiling):
            # shrink toward the best stable point
            if mid > best:
                hi = (hi + best) / 2
            else:
                lo = (lo + best) / 2
        else:
            gap = abs(net - target)
            if best_gap is None or gap < best_gap:
                best, best_gap = mid, gap
            if gap <= tolerance:
                break
            if net > target:
                hi = mid
            else:
                lo = mid

        if hi - lo < precision:
            break

    log.debug(f"    best {best:.6f} after {evaluations} runs (gap={best_gap})")
    return SearchResult(value=best, gap=best_gap, evaluations=evaluations)


def pit_scale_search(
    probe: Probe,
    *,
    bounds: tuple[Decimal, Decimal],
    points: int,
    penalty: Decimal,
    target: Decimal,
    rng: Generator,
    n_workers: int = 1,
) -> SearchResult:
    """
    Grid search over PIT scales with a stability bias.

    Each scale *s* scores ``|net - target| + penalty * (s - 1)²``; the
    lowest score wins, so the scale stays near 1.0 unless the fiscal gain
    outweighs the penalty. Failed candidates are skipped; if all fail the
    scale is left at 1.0.
    """
    lower, upper = bounds
    scales = grid_points(lower, upper, points - 1)
    best, best_score, best_gap = ONE, None, None

    for scale, net in zip(scales, evaluate_grid(probe, scales, rng, n_workers)):
        if net is None:
            continue
        gap = abs(net - target)
        score = gap + penalty * (scale - 1) ** 2
        if best_score is None or score < best_score:
            best, best_score, best_gap = scale, score, gap

    log.debug(f"    PIT scale {best:.4f} (gap={best_gap})")
    return SearchResult(value=best, gap=best_gap, evaluations=len(scales))
