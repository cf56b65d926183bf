"""Tests for the simulation runner and the Simulation facade."""

from decimal import Decimal

import pytest

from ubisim import Simulation, SimulationError, new_rng, run_simulation
from ubisim.simulation import SimulationError as _Err

D = Decimal


class TestRunSimulation:
    def test_one_result_per_month(self, economy, rng):
        results = run_simulation(
            3,
            economy,
            economy.ubi(0),
            economy.tax,
            stochastic=False,
            advanced=True,
            rng=rng,
        )
        assert [m.month for m in results] == [1, 2, 3]

    def test_months_must_be_positive(self, economy, rng):
        with pytest.raises(ValueError, match="months must be >= 1"):
            run_simulation(
                0,
                economy,
                economy.ubi(0),
                economy.tax,
                stochastic=False,
                advanced=True,
                rng=rng,
            )

    def test_template_economy_is_not_modified(self, economy):
        before = economy.cohorts
        run_simulation(
            2,
            economy,
            economy.ubi(3000),
            economy.tax,
            stochastic=True,
            advanced=True,
            rng=new_rng(1),
        )
        assert economy.cohorts == before

    def test_arithmetic_failure_becomes_simulation_error(
        self, economy, rng, monkeypatch
    ):
        """A month that cannot be computed reports its index."""
        import ubisim.simulation as simulation_module

        calls = {"n": 0}
        real_step = simulation_module.step_month

        def failing_step(state, **kwargs):
            calls["n"] += 1
            if calls["n"] == 2:
                raise ZeroDivisionError("division by zero")
            return real_step(state, **kwargs)

        monkeypatch.setattr(simulation_module, "step_month", failing_step)
        with pytest.raises(SimulationError, match="month 2") as info:
            run_simulation(
                3,
                economy,
                economy.ubi(0),
                economy.tax,
                stochastic=False,
                advanced=True,
                rng=rng,
            )
        assert info.value.month == 2
        assert isinstance(info.value.__cause__, ZeroDivisionError)

    def test_simulation_error_is_runtime_error(self):
        assert issubclass(_Err, RuntimeError)


class TestSimulationFacade:
    def test_run_uses_configured_ubi(self):
        sim = Simulation.init(months=2, ubi=1000, stochastic=False)
        results = sim.run()
        assert len(results) == 2
        assert results.total_ubi > 0

    def test_run_overrides(self):
        sim = Simulation.init(months=6, ubi=1000, stochastic=False)
        results = sim.run(ubi=0, months=1)
        assert len(results) == 1
        assert results.total_ubi == 0

    def test_ubi_program_defaults_to_zero_without_ubi(self):
        sim = Simulation.init()
        assert sim.ubi_program().monthly_amount == 0
        assert sim.ubi_program(600).monthly_amount == D(600)

    def test_custom_tax(self):
        sim = Simulation.init(months=1, stochastic=False)
        base = sim.run()
        heavier = sim.run(tax=sim.economy.tax.rescaled(D(1), D("0.4"), D("0.05")))
        assert heavier.final.corp_tax > base.final.corp_tax

    def test_consecutive_runs_continue_stream(self):
        """Two stochastic runs on one Simulation draw different numbers."""
        sim = Simulation.init(months=2, ubi=1000, stochastic=True, seed=3)
        first = sim.run()
        second = sim.run()
        fresh = Simulation.init(months=2, ubi=1000, stochastic=True, seed=3).run()
        assert first == fresh
        assert [m.asset_price_index for m in first] != [
            m.asset_price_index for m in second
        ]
