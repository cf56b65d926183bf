"""Tests for calibration.scenarios module."""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

import pytest

import calibration.calibrator as calibrator_mod
from calibration.scenarios import SCENARIOS, Scenario, run_scenario, run_suite
from tests.helpers.probes import LinearEvaluator
from ubisim import new_rng

D = Decimal


@pytest.fixture(autouse=True)
def fast_calibration(monkeypatch):
    monkeypatch.setattr(calibrator_mod, "FiscalEvaluator", LinearEvaluator)


class TestScenarioTable:
    def test_predefined_scenarios(self):
        assert [(s.name, s.ubi, s.target_net) for s in SCENARIOS] == [
            ("Baseline_NoUBI", 0, 0),
            ("UBI_600_Balanced", 600, 0),
            ("UBI_1000_Balanced", 1000, 0),
            ("UBI_1200_Balanced", 1200, 0),
            ("UBI_1500_DeficitOK", 1500, D("-200e9")),
            ("UBI_800_Surplus", 800, D("100e9")),
        ]


class TestRunScenario:
    def test_summary_matches_results(self, economy):
        run = run_scenario(
            Scenario("UBI_1000", D(1000), D(0)),
            economy,
            months=2,
            stochastic=False,
            advanced=True,
            rng=new_rng(1),
        )
        s, results = run.summary, run.results
        assert len(results) == 2
        assert s.months == 2
        assert s.ubi == D(1000)
        assert s.net_fiscal_position == results.net_fiscal_position
        assert s.total_taxes == results.total_taxes
        assert s.total_ubi == results.total_ubi
        assert results[0].ubi_outlays == D(1000) * economy.total_adults
        assert s.final_taxpayers == results.final.remaining_taxpayers
        assert s.final_firms == results.final.total_firms
        assert s.corp_rate == run.tax.corporate == run.convergence.corp_rate
        assert s.converged is True
        assert s.calibration_rounds == 1

    def test_template_economy_untouched(self, economy):
        before = economy.cohorts
        run_scenario(
            SCENARIOS[2], economy, months=1, stochastic=True, advanced=True, rng=new_rng(2)
        )
        assert economy.cohorts == before


class TestRunSuite:
    def test_every_scenario_reseeded(self, economy):
        twins = (Scenario("A", D(1000), D(0)), Scenario("B", D(1000), D(0)))
        runs = run_suite(
            economy,
            months=2,
            stochastic=True,
            advanced=True,
            seed=7,
            scenarios=twins,
        )
        assert [r.scenario.name for r in runs] == ["A", "B"]
        assert runs[0].results == runs[1].results
        assert replace(runs[1].summary, name="A") == runs[0].summary
