"""
Fiscal Evaluators
=================

Pure evaluators the searches call: a candidate value in, the run's net
fiscal position out. Both classes are plain frozen dataclasses closed over
immutable inputs, so they pickle cleanly into worker processes.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

from numpy.random import Generator

from ubisim import Economy, TaxPolicy, UbiProgram, run_simulation
from ubisim.helpers import ONE

Lever = Literal["corporate", "pit_scale", "vat"]


@dataclass(slots=True, frozen=True)
class FiscalEvaluator:
    """
    Runs the full simulation for one (PIT scale, corporate, VAT) triple.

    Parameters
    ----------
    months : int
        Horizon of every run.
    economy : Economy
        Template economy (never modified).
    ubi : UbiProgram
        UBI program under calibration.
    base_tax : TaxPolicy
        Policy whose brackets are scaled and whose scalar rates are kept.
    stochastic, advanced : bool
        Simulation mode flags.
    """

    months: int
    economy: Economy
    ubi: UbiProgram
    base_tax: TaxPolicy
    stochastic: bool
    advanced: bool

    def policy(self, pit_scale: Decimal, corporate: Decimal, vat: Decimal) -> TaxPolicy:
        return self.base_tax.rescaled(pit_scale, corporate, vat)

    def net(
        self,
        pit_scale: Decimal,
        corporate: Decimal,
        vat: Decimal,
        rng: Generator,
    ) -> Decimal:
        """Net fiscal position over the horizon under the given levers."""
        results = run_simulation(
            self.months,
            self.economy,
            self.ubi,
            self.policy(pit_scale, corporate, vat),
            stochastic=self.stochastic,
            advanced=self.advanced,
            rng=rng,
        )
        return results.net_fiscal_position


@dataclass(slots=True, frozen=True)
class RateProbe:
    """
    One-lever view of a :class:`FiscalEvaluator`.

    Calling the probe with a candidate value varies *lever* and keeps the
    other two at the values fixed here.

    Examples
    --------
    >>> probe = RateProbe(evaluator, "corporate", pit_scale=ONE, corporate=r, vat=v)
    >>> probe(Decimal("0.25"), rng)
    """

    evaluator: FiscalEvaluator
    lever: Lever
    pit_scale: Decimal = ONE
    corporate: Decimal = Decimal(0)
    vat: Decimal = Decimal(0)

    def __call__(self, value: Decimal, rng: Generator) -> Decimal:
        levers = {"pit_scale": self.pit_scale, "corporate": self.corporate, "vat": self.vat}
        levers[self.lever] = value
        return self.evaluator.net(
            levers["pit_scale"], levers["corporate"], levers["vat"], rng
        )
