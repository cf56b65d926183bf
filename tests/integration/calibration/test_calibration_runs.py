"""Calibration against full simulations of the default economy.

Each calibration runs hundreds of simulations, so these are marked slow.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from calibration import CalibrationSettings, calibrate, run_scenario
from calibration.scenarios import Scenario
from ubisim import new_rng

D = Decimal


def _calibrate(economy, *, months, target, ubi=1000):
    return calibrate(
        months,
        economy,
        economy.ubi(D(ubi)),
        economy.tax,
        D(target),
        stochastic=False,
        advanced=True,
        rng=new_rng(42),
    )


@pytest.mark.slow
class TestBalancedBudget:
    def test_ubi_1000_balances(self, economy):
        """A $1000 UBI can be financed within $100M over one year."""
        settings = CalibrationSettings()
        tax, info = _calibrate(economy, months=12, target="0")
        assert info.converged
        assert info.rounds <= settings.max_rounds
        assert info.final_gap <= D(100_000_000)
        assert settings.corp_bounds[0] <= info.corp_rate <= settings.corp_bounds[1]
        assert settings.pit_bounds[0] <= info.pit_scale <= settings.pit_bounds[1]
        assert all(b.rate <= D("0.65") for b in tax.brackets)

    def test_calibrated_policy_reproduces_gap(self, economy):
        run = run_scenario(
            Scenario("UBI_1000", D(1000), D(0)),
            economy,
            months=12,
            stochastic=False,
            advanced=True,
            rng=new_rng(42),
        )
        assert run.convergence.converged
        assert abs(run.results.net_fiscal_position) <= D(100_000_000)


@pytest.mark.slow
class TestUnreachableTarget:
    def test_gives_up_at_upper_corporate_bound(self, economy):
        settings = CalibrationSettings()
        _, info = _calibrate(economy, months=3, target="1e18")
        assert not info.converged
        assert info.rounds <= settings.max_rounds
        assert D("0.49") <= info.corp_rate <= settings.corp_bounds[1]
        assert settings.vat_bounds[0] <= info.vat_rate <= settings.vat_bounds[1]
