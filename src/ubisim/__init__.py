"""
ubisim - Month-by-month UBI Fiscal Simulator
============================================

ubisim simulates the fiscal and real-economy effects of a Universal Basic
Income program one month at a time: labor market, firms, households,
prices, finance, trade, migration and the government ledger, in that order.
All money and rates are ``decimal.Decimal`` and every aggregate is bounded,
so runs are reproducible and never overflow.

Quick Start
-----------
Simulate one year under the base tax policy:

>>> import ubisim as us
>>> sim = us.Simulation.init(ubi=1000, stochastic=False)
>>> results = sim.run()
>>> print(f"Net fiscal position: {results.net_fiscal_position / 10**9:.1f}B")

Functional API with an explicit economy and random source:

>>> economy = us.load_economy()
>>> results = us.run_simulation(
...     12,
...     economy,
...     economy.ubi(1000),
...     economy.tax,
...     stochastic=True,
...     advanced=True,
...     rng=us.new_rng(42),
... )
>>> df = results.to_dataframe()  # requires pandas

Public API
----------
Simulation
    Configured simulation facade (defaults → YAML → kwargs).
run_simulation
    Run N months for a given tax policy and UBI program.
step_month, initial_state, MonthState
    The single-month transition and its state.
MonthResult, SimulationResults
    Per-month record and the ordered run results.
Economy, load_economy, build_economy
    Cohort table, base tax policy and parameter bundles.
TaxPolicy, TaxBracket, UbiProgram
    Policy levers.
new_rng
    The only constructor of random sources.

See Also
--------
calibration : Tax calibrator, scenario suite and command-line interface.

Notes
-----
- Time scale: 1 step = 1 month; interest rates are monthly.
- Configuration precedence: defaults.yml → user config → kwargs
"""

from __future__ import annotations

__version__: str = "0.3.0"

from . import logging  # noqa: E402 (circular-safe)
from .economy import Economy, build_economy, load_economy
from .entities import (
    PopulationCohort,
    TaxBracket,
    TaxPolicy,
    UbiProgram,
)
from .helpers import new_rng
from .results import MonthResult, SimulationResults
from .simulation import Simulation, SimulationError, run_simulation
from .stepper import MonthState, initial_state, step_month

__all__ = [
    "Economy",
    "MonthResult",
    "MonthState",
    "PopulationCohort",
    "Simulation",
    "SimulationError",
    "SimulationResults",
    "TaxBracket",
    "TaxPolicy",
    "UbiProgram",
    "__version__",
    "build_economy",
    "initial_state",
    "load_economy",
    "logging",
    "new_rng",
    "run_simulation",
    "step_month",
]
