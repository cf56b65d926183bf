"""Tests for building the economy bundle from configuration."""

import copy
from decimal import Decimal

import pytest

from ubisim import build_economy, load_economy
from ubisim.config import package_defaults

D = Decimal


@pytest.fixture
def raw():
    return copy.deepcopy(package_defaults()["economy"])


class TestBuildEconomy:
    def test_cohorts_partition_population(self, economy):
        assert len(economy.cohorts) == 7
        # shares multiply 260M exactly
        assert economy.total_adults == 260_000_000
        assert economy.cohorts[0].adults == 52_000_000
        assert economy.cohorts[-1].adults == 2_600_000

    def test_yaml_floats_are_exact_decimals(self, economy):
        assert economy.tax.vat == D("0.05")
        assert economy.financial.base_interest_rate == D("0.025")
        assert economy.cohorts[2].income == D(65000)

    def test_monthly_base_rate(self, economy):
        assert economy.financial.monthly_base_rate == D("0.025") / 12

    def test_ubi_template(self, economy):
        ubi = economy.ubi(1000)
        assert ubi.monthly_amount == D(1000)
        assert ubi.child_bonus == D(200)
        assert not ubi.means_tested
        assert economy.ubi_template.monthly_amount == 0

    def test_regional_wage_gaps(self, economy):
        assert dict(economy.labor.regional_wage_gaps)["Northeast"] == D("1.15")

    def test_shares_must_sum_to_one(self, raw):
        raw["cohorts"][0]["share"] = 0.5
        with pytest.raises(ValueError, match="shares must sum to 1.0"):
            build_economy(raw)

    def test_missing_parameter(self, raw):
        del raw["financial"]["stability"]
        with pytest.raises(ValueError, match="missing economy parameters: stability"):
            build_economy(raw)

    def test_no_cohorts(self, raw):
        raw["cohorts"] = []
        with pytest.raises(ValueError, match="at least one cohort"):
            build_economy(raw)

    def test_malformed_brackets(self, raw):
        raw["tax"]["brackets"] = [[1000, 0.1]]
        with pytest.raises(ValueError, match="must start at 0"):
            build_economy(raw)


class TestLoadEconomy:
    def test_overrides_patch_defaults(self):
        economy = load_economy({"government": {"baseline_spending": 1}})
        assert economy.government.baseline_spending == 1
        assert economy.government.debt_to_gdp == D("1.20")

    def test_default_matches_fixture(self, economy):
        assert load_economy() == economy
