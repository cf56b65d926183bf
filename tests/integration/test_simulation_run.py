"""End-to-end runs of the month stepper on the default economy."""

from __future__ import annotations

from decimal import Decimal

import pytest

from ubisim import Simulation, new_rng, run_simulation
from ubisim.stepper import UNEMPLOYMENT_BOUNDS, initial_state
from ubisim.systems.finance import MONTHLY_RATE_BOUNDS
from ubisim.systems.prices import GDP_BOUNDS, PRICE_BOUNDS

D = Decimal

MODES = [
    pytest.param(True, True, id="stochastic-advanced"),
    pytest.param(False, True, id="deterministic-advanced"),
    pytest.param(True, False, id="stochastic-simple"),
    pytest.param(False, False, id="deterministic-simple"),
]


def _run(economy, *, months=12, ubi=1000, stochastic=True, advanced=True, seed=42):
    return run_simulation(
        months,
        economy,
        economy.ubi(D(ubi)),
        economy.tax,
        stochastic=stochastic,
        advanced=advanced,
        rng=new_rng(seed),
    )


class TestBounds:
    @pytest.mark.parametrize(("stochastic", "advanced"), MODES)
    @pytest.mark.parametrize("ubi", [0, 1000, 1500])
    def test_every_month_in_bounds(self, economy, stochastic, advanced, ubi):
        results = _run(economy, ubi=ubi, stochastic=stochastic, advanced=advanced)
        assert [m.month for m in results] == list(range(1, 13))
        for m in results:
            assert PRICE_BOUNDS[0] <= m.price_level <= PRICE_BOUNDS[1]
            assert UNEMPLOYMENT_BOUNDS[0] <= m.unemployment_rate <= UNEMPLOYMENT_BOUNDS[1]
            assert MONTHLY_RATE_BOUNDS[0] <= m.interest_rate <= MONTHLY_RATE_BOUNDS[1]
            assert GDP_BOUNDS[0] <= m.nominal_gdp <= GDP_BOUNDS[1]


class TestDeterminism:
    @pytest.mark.parametrize(("stochastic", "advanced"), MODES)
    def test_same_seed_same_run(self, economy, stochastic, advanced):
        a = _run(economy, stochastic=stochastic, advanced=advanced, seed=5)
        b = _run(economy, stochastic=stochastic, advanced=advanced, seed=5)
        assert a == b
        assert a.to_records() == b.to_records()

    def test_deterministic_mode_ignores_seed(self, economy):
        assert _run(economy, stochastic=False, seed=1) == _run(
            economy, stochastic=False, seed=2
        )

    def test_stochastic_mode_uses_seed(self, economy):
        a = _run(economy, seed=1)
        b = _run(economy, seed=2)
        assert [m.emigrants for m in a] != [m.emigrants for m in b]

    def test_facade_matches_functional_api(self, economy):
        sim = Simulation.init(months=6, ubi=1000, seed=9, stochastic=True)
        assert sim.run() == _run(economy, months=6, seed=9)


class TestDerivedFields:
    def test_totals_and_balances(self, economy):
        for m in _run(economy):
            assert m.total_taxes == (
                m.personal_income_tax
                + m.vat
                + m.corp_tax
                + m.capital_gains_tax
                + m.property_tax
            )
            assert m.trade_balance == m.exports - m.imports
            assert m.net_fiscal_position == (
                m.total_taxes - m.ubi_outlays - m.other_gov_spending
            )

    def test_wealth_tax_collected_from_top_cohort(self, economy):
        results = _run(economy)
        assert any(m.wealth_tax > 0 for m in results)

    def test_no_ubi_no_outlays(self, economy):
        assert all(m.ubi_outlays == 0 for m in _run(economy, ubi=0))

    def test_firm_counts_static(self, economy):
        results = _run(economy)
        assert {m.total_firms for m in results} == {results[0].total_firms}


class TestPopulation:
    @pytest.mark.parametrize("stochastic", [True, False])
    def test_taxpayers_follow_migration(self, economy, stochastic):
        results = _run(economy, stochastic=stochastic)
        previous = economy.total_adults
        for m in results:
            assert m.remaining_taxpayers == previous - m.emigrants + m.immigrants
            previous = m.remaining_taxpayers

    def test_template_economy_reused(self, economy):
        before = economy.total_adults
        _run(economy, months=3)
        assert economy.total_adults == before
        assert _run(economy, months=3) == _run(economy, months=3)


class TestFiscalDirection:
    def test_ubi_worsens_net_position(self, economy):
        without = _run(economy, ubi=0, stochastic=False)
        with_ubi = _run(economy, ubi=1000, stochastic=False)
        assert with_ubi.net_fiscal_position < without.net_fiscal_position

    def test_debt_moves_with_net_position(self, economy):
        results = _run(economy, ubi=1500, stochastic=False)
        assert results.final.government_debt > initial_state(economy).debt
