"""
Configuration dataclass for run parameters.

This module defines the RunConfig dataclass, which groups every setting
of a simulation or calibration run in one immutable object. RunConfig
instances are created by Simulation.init() after merging defaults, user
config, and kwargs.

Design Notes
------------
- Immutable (frozen=True) to prevent accidental modification
- Memory-efficient (slots=True)
- Simple dataclass, no methods - validation happens in ConfigValidator

See Also
--------
ConfigValidator : Centralized validation for configuration parameters
ubisim.simulation.Simulation.init : Creates RunConfig from merged parameters
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


@dataclass(slots=True, frozen=True)
class RunConfig:
    """
    Immutable configuration for one run.

    Parameters
    ----------
    months : int
        Number of simulated months (>= 1).
    ubi : Decimal or None
        Monthly per-adult UBI. None means "run the predefined scenario
        suite" when consumed by the command-line interface.
    target_net : Decimal
        Annualized net fiscal target for calibration (signed dollars).
    stochastic : bool
        Draw migration counts and asset-price noise from the RNG instead of
        using expectations.
    advanced : bool
        Enable the enhanced household, finance, trade and regional models.
    seed : int or None
        Seed for the run's random source.
    n_workers : int
        Worker processes for calibration grid evaluation (1 = sequential).
    output_dir : str
        Directory for scenario-suite CSV output.
    csv_path : str, optional
        Monthly CSV destination for a single-scenario run.
    summary_path : str, optional
        Summary CSV destination for a single-scenario run.
    logging : dict
        Logging configuration (``default_level``, ``systems``).
    calibration : dict
        Overrides for :class:`calibration.config.CalibrationSettings`.
    """

    months: int
    ubi: Decimal | None
    target_net: Decimal
    stochastic: bool
    advanced: bool
    seed: int | None
    n_workers: int = 1
    output_dir: str = "enhanced_out"
    csv_path: str | None = None
    summary_path: str | None = None
    logging: dict[str, Any] = field(default_factory=dict)
    calibration: dict[str, Any] = field(default_factory=dict)
