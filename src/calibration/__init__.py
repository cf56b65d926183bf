"""
UBI Tax Calibration Package
===========================

This package calibrates tax policy so that a UBI scenario's cumulative net
fiscal position meets a target, and runs the predefined scenario suite.

Usage
-----
Run from the command line::

    python -m calibration --ubi 1000      # single calibrated scenario
    python -m calibration                 # six-scenario suite

Or use programmatically::

    from calibration import calibrate, CalibrationSettings
    from ubisim import load_economy, new_rng

    economy = load_economy()
    tax, info = calibrate(
        12, economy, economy.ubi(1000), economy.tax, Decimal(0),
        stochastic=False, advanced=True, rng=new_rng(42),
    )
"""

from __future__ import annotations

# Calibrator
from .calibrator import ConvergenceInfo, calibrate

# Configuration
from .config import (
    CONVERGENCE_TOLERANCE,
    CORP_RATE_BOUNDS,
    MAX_CALIBRATION_ROUNDS,
    PIT_SCALE_BOUNDS,
    VAT_RATE_BOUNDS,
    CalibrationSettings,
)

# Evaluators
from .evaluator import FiscalEvaluator, RateProbe

# Scenario suite
from .scenarios import (
    SCENARIOS,
    Scenario,
    ScenarioRun,
    ScenarioSummary,
    run_scenario,
    run_suite,
    summarize,
)

# Searches
from .search import SearchResult, evaluate_grid, grid_bisect_search, pit_scale_search

__all__ = [
    "CONVERGENCE_TOLERANCE",
    "CORP_RATE_BOUNDS",
    "MAX_CALIBRATION_ROUNDS",
    "PIT_SCALE_BOUNDS",
    "SCENARIOS",
    "VAT_RATE_BOUNDS",
    "CalibrationSettings",
    "ConvergenceInfo",
    "FiscalEvaluator",
    "RateProbe",
    "Scenario",
    "ScenarioRun",
    "ScenarioSummary",
    "SearchResult",
    "calibrate",
    "evaluate_grid",
    "grid_bisect_search",
    "pit_scale_search",
    "run_scenario",
    "run_suite",
    "summarize",
]
