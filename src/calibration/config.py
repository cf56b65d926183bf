"""
Calibration Configuration
=========================

Search bounds, grid sizes and stopping rules of the tax calibrator.

Every constant lives on :class:`CalibrationSettings`; the ``calibration``
section of the run configuration may override any of them by name.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from decimal import Decimal
from typing import Any

from ubisim.helpers import to_decimal

# ==============================================================================
# SEARCH SPACE
# ==============================================================================

CORP_RATE_BOUNDS = (Decimal("0.05"), Decimal("0.50"))
PIT_SCALE_BOUNDS = (Decimal("0.85"), Decimal("1.15"))
VAT_RATE_BOUNDS = (Decimal("0.02"), Decimal("0.12"))

# Annualized; scaled by months / 12 for other horizons
CONVERGENCE_TOLERANCE = Decimal(100_000_000)
MAX_CALIBRATION_ROUNDS = 15


@dataclass(slots=True, frozen=True)
class CalibrationSettings:
    """
    Tunable constants of the tax calibrator.

    Parameters
    ----------
    max_rounds : int
        Calibration rounds before giving up.
    tolerance : Decimal
        Annualized gap at which calibration has converged.
    corp_bounds, pit_bounds, vat_bounds : tuple of Decimal
        Search interval of each lever.
    corp_grid_intervals, vat_grid_intervals : int
        Coarse grid of ``intervals + 1`` evenly spaced points.
    pit_grid_points : int
        Number of PIT scales tried, both bounds included.
    corp_radius, vat_radius : Decimal
        Half-width of the bisection bracket as a share of the search range.
    corp_ceiling, vat_ceiling : Decimal
        Candidates whose |net| exceeds this are treated as unstable.
    bisection_iterations : int
        Maximum bisection steps per search.
    corp_precision, vat_precision : Decimal
        Bisection stops once an evaluation leaves the bracket narrower than
        this.
    corp_min_width : Decimal
        Corporate bisection stops before evaluating a narrower bracket.
    pit_penalty : Decimal
        Weight of ``(scale - 1)²`` added to the PIT gap.
    pit_gap_factor, vat_gap_factor : Decimal
        The PIT (VAT) search runs only while the gap exceeds this multiple
        of the tolerance.
    pit_round_limit : int
        Last round in which PIT and VAT may be searched.
    stagnation_factor : Decimal
        A round whose gap moved less than this multiple of the tolerance
        counts as stagnant.
    stagnation_rounds : int
        Consecutive stagnant rounds that stop the calibration.
    n_workers : int
        Processes evaluating coarse-grid points (1 = sequential).
    """

    max_rounds: int = MAX_CALIBRATION_ROUNDS
    tolerance: Decimal = CONVERGENCE_TOLERANCE
    corp_bounds: tuple[Decimal, Decimal] = CORP_RATE_BOUNDS
    pit_bounds: tuple[Decimal, Decimal] = PIT_SCALE_BOUNDS
    vat_bounds: tuple[Decimal, Decimal] = VAT_RATE_BOUNDS
    corp_grid_intervals: int = 10
    vat_grid_intervals: int = 20
    pit_grid_points: int = 20
    corp_radius: Decimal = Decimal("0.2")
    vat_radius: Decimal = Decimal("0.1")
    corp_ceiling: Decimal = Decimal("50e12")
    vat_ceiling: Decimal = Decimal("20e12")
    bisection_iterations: int = 100
    corp_precision: Decimal = Decimal("0.005")
    vat_precision: Decimal = Decimal("0.001")
    corp_min_width: Decimal = Decimal("0.0001")
    pit_penalty: Decimal = Decimal("1e9")
    pit_gap_factor: Decimal = Decimal(5)
    vat_gap_factor: Decimal = Decimal(3)
    pit_round_limit: int = 10
    stagnation_factor: Decimal = Decimal("0.1")
    stagnation_rounds: int = 3
    n_workers: int = 1

    def __post_init__(self) -> None:
        if self.max_rounds < 1:
            raise ValueError(f"max_rounds must be >= 1, got {self.max_rounds}")
        if self.tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {self.tolerance}")
        for name in ("corp_bounds", "pit_bounds", "vat_bounds"):
            lo, hi = getattr(self, name)
            if not lo < hi:
                raise ValueError(f"{name} must satisfy lower < upper, got {(lo, hi)}")
        for name in ("corp_grid_intervals", "vat_grid_intervals", "n_workers"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1, got {getattr(self, name)}")
        if self.pit_grid_points < 2:
            raise ValueError(
                f"pit_grid_points must be >= 2, got {self.pit_grid_points}"
            )

    def scaled_tolerance(self, months: int) -> Decimal:
        """Tolerance for a run of *months* months."""
        return self.tolerance * months / 12

    def with_workers(self, n_workers: int) -> CalibrationSettings:
        return replace(self, n_workers=n_workers)

    @classmethod
    def from_mapping(cls, overrides: Mapping[str, Any] | None) -> CalibrationSettings:
        """
        Build settings from a ``calibration`` config section.

        Unknown keys raise ``ValueError``; numbers are converted to the
        field's type.
        """
        if not overrides:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ValueError(f"unknown calibration settings: {', '.join(unknown)}")

        defaults = cls()
        kwargs: dict[str, Any] = {}
        for name, value in overrides.items():
            default = getattr(defaults, name)
            if isinstance(default, tuple):
                lo, hi = value
                kwargs[name] = (to_decimal(lo), to_decimal(hi))
            elif isinstance(default, Decimal):
                kwargs[name] = to_decimal(value)
            else:
                kwargs[name] = int(value)
        return cls(**kwargs)
