# src/ubisim/simulation.py
"""
Simulation runner.

:func:`run_simulation` is the functional core: it threads a
:class:`~ubisim.stepper.MonthState` through :func:`~ubisim.stepper.step_month`
for every month and collects the results. :class:`Simulation` wraps it with
the configuration layer (defaults, user YAML, keyword overrides).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Mapping

from numpy.random import Generator

from ubisim.config import ConfigValidator, RunConfig, merged_config
from ubisim.economy import Economy, build_economy
from ubisim.entities import TaxPolicy, UbiProgram
from ubisim.helpers import ZERO, new_rng, to_decimal
from ubisim.logging import configure_logging, getLogger
from ubisim.results import MonthResult, SimulationResults
from ubisim.stepper import initial_state, step_month

__all__ = ["Simulation", "SimulationError", "run_simulation"]

log = getLogger(__name__)


class SimulationError(RuntimeError):
    """A month could not be computed."""

    def __init__(self, month: int, message: str) -> None:
        super().__init__(f"month {month}: {message}")
        self.month = month


def run_simulation(
    months: int,
    economy: Economy,
    ubi: UbiProgram,
    tax: TaxPolicy,
    *,
    stochastic: bool,
    advanced: bool,
    rng: Generator,
) -> SimulationResults:
    """
    Simulate *months* months under *tax* and *ubi*.

    Parameters
    ----------
    months : int
        Horizon, at least 1.
    economy : Economy
        Template economy; never modified, the run works on private copies.
    ubi : UbiProgram
        UBI program in force for the whole run.
    tax : TaxPolicy
        Tax policy in force for the whole run.
    stochastic : bool
        Sample migration and asset noise from *rng*.
    advanced : bool
        Use the enhanced behavioral paths.
    rng : numpy.random.Generator
        Random source, consumed in month order.

    Returns
    -------
    SimulationResults
        One :class:`MonthResult` per month, in order.

    Raises
    ------
    ValueError
        If *months* is less than 1.
    SimulationError
        If a month fails with an arithmetic error.
    """
    if months < 1:
        raise ValueError(f"months must be >= 1, got {months}")

    state = initial_state(economy)
    collected: list[MonthResult] = []
    for month in range(1, months + 1):
        try:
            state, result = step_month(
                state,
                economy=economy,
                tax=tax,
                ubi=ubi,
                month=month,
                stochastic=stochastic,
                advanced=advanced,
                rng=rng,
            )
        except ArithmeticError as exc:
            raise SimulationError(month, f"{type(exc).__name__}: {exc}") from exc
        collected.append(result)

    results = SimulationResults(collected)
    log.debug(
        f"Simulated {months} months: net={results.net_fiscal_position / Decimal('1e9'):+.2f}B"
    )
    return results


@dataclass(slots=True)
class Simulation:
    """
    Configured simulation: run settings, economy and random source.

    Examples
    --------
    >>> sim = Simulation.init(months=12, ubi=1000, stochastic=False)
    >>> results = sim.run()
    >>> results.final.price_level
    """

    config: RunConfig
    economy: Economy
    rng: Generator

    # Constructor
    # ---------------------------------------------------------------------
    @classmethod
    def init(
        cls,
        config: str | Path | Mapping[str, Any] | None = None,
        **overrides: Any,  # anything here wins last
    ) -> Simulation:
        """
        Build a Simulation.

        Order of precedence (later overrides earlier):

            1. package defaults  (ubisim/defaults.yml)
            2. *config*  (Path / str / Mapping / None)
            3. explicit keyword arguments (**overrides)
        """
        cfg = merged_config(config, **overrides)
        ConfigValidator.validate_config(cfg)
        configure_logging(cfg.get("logging") or {})

        economy = build_economy(cfg.pop("economy"))

        seed_val = cfg.get("seed")
        rng = new_rng(seed_val)

        ubi = cfg.get("ubi")
        run_config = RunConfig(
            months=int(cfg["months"]),
            ubi=None if ubi is None else to_decimal(ubi),
            target_net=to_decimal(cfg.get("target_net", 0)),
            stochastic=bool(cfg["stochastic"]),
            advanced=bool(cfg["advanced"]),
            seed=seed_val,
            n_workers=int(cfg.get("n_workers", 1)),
            output_dir=str(cfg.get("output_dir", "enhanced_out")),
            csv_path=cfg.get("csv_path"),
            summary_path=cfg.get("summary_path"),
            logging=dict(cfg.get("logging") or {}),
            calibration=dict(cfg.get("calibration") or {}),
        )
        log.info(
            f"Simulation configured: months={run_config.months} "
            f"ubi={run_config.ubi} stochastic={run_config.stochastic} "
            f"advanced={run_config.advanced} seed={run_config.seed}"
        )
        return cls(config=run_config, economy=economy, rng=rng)

    # public API
    # ---------------------------------------------------------------------
    def ubi_program(self, amount: Decimal | int | float | None = None) -> UbiProgram:
        """UBI program for *amount*, or the configured amount (0 if unset)."""
        if amount is None:
            amount = self.config.ubi if self.config.ubi is not None else ZERO
        return self.economy.ubi(amount)

    def run(
        self,
        tax: TaxPolicy | None = None,
        ubi: Decimal | int | float | None = None,
        months: int | None = None,
    ) -> SimulationResults:
        """
        Simulate under *tax* (default: the economy's base policy).

        Draws come from the simulation's own generator, so consecutive
        calls continue the same random stream.
        """
        return run_simulation(
            months if months is not None else self.config.months,
            self.economy,
            self.ubi_program(ubi),
            tax if tax is not None else self.economy.tax,
            stochastic=self.config.stochastic,
            advanced=self.config.advanced,
            rng=self.rng,
        )
