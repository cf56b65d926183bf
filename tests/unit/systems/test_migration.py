# tests/unit/systems/test_migration.py
"""
Migration unit tests.
"""

from __future__ import annotations

from decimal import Decimal

from tests.helpers.factories import mock_cohort, mock_emigration, mock_tax, mock_ubi
from ubisim.helpers import new_rng
from ubisim.systems.migration import (
    ATTRACTION_CAP,
    MAX_EMIGRATION_PROB,
    MIN_POPULATION,
    emigration_probability,
    immigration_probability,
    tax_pressure,
    ubi_attraction,
    update_migration,
)

D = Decimal


def _prob(cohort, *, ubi=0, unemployment="0.045"):
    return emigration_probability(
        cohort,
        tax=mock_tax(),
        ubi=mock_ubi(ubi),
        unemployment=D(unemployment),
        params=mock_emigration(),
    )


def _migrate(cohorts, *, ubi=0, stochastic=False, rng=None):
    return update_migration(
        cohorts,
        tax=mock_tax(),
        ubi=mock_ubi(ubi),
        unemployment=D("0.045"),
        params=mock_emigration(),
        stochastic=stochastic,
        rng=rng or new_rng(0),
    )


class TestTaxPressure:
    def test_top_tier(self):
        assert tax_pressure(D(600_000), D("0.2"), mock_emigration()) == D("0.15")

    def test_upper_middle_tier_with_excess_over_thirty_percent(self):
        # (0.40 - 0.35) * 1 + (0.40 - 0.30) * 0.006
        assert tax_pressure(D(150_000), D("0.40"), mock_emigration()) == D("0.0506")

    def test_base_tier_below_threshold(self):
        assert tax_pressure(D(50_000), D("0.2"), mock_emigration()) == 0


class TestUbiAttraction:
    def test_none_without_ubi(self):
        assert ubi_attraction(D(65000), mock_ubi(0), mock_emigration()) == 0

    def test_low_income_uses_floor(self):
        # 12000 / 25000 * 0.8 * 0.8
        assert ubi_attraction(D(10000), mock_ubi(1000), mock_emigration()) == D(
            "0.3072"
        )

    def test_capped(self):
        assert ubi_attraction(D(10000), mock_ubi(10000), mock_emigration()) == (
            ATTRACTION_CAP
        )


class TestProbabilities:
    def test_baseline(self):
        # 0.0001 * 0.25 mobility
        assert _prob(mock_cohort()) == D("0.000025")

    def test_high_earners_hit_cap(self):
        assert _prob(mock_cohort(income=D(600_000))) == MAX_EMIGRATION_PROB

    def test_ubi_floors_probability(self):
        assert _prob(mock_cohort(), ubi=10000) == D("0.000005")

    def test_unemployment_push(self):
        assert _prob(mock_cohort(), unemployment="0.06") == D("0.003025")

    def test_immigration_without_ubi(self):
        assert immigration_probability(
            mock_cohort(), mock_ubi(0), mock_emigration()
        ) == D("0.00000375")

    def test_ubi_attracts_immigrants(self):
        base = immigration_probability(mock_cohort(), mock_ubi(0), mock_emigration())
        with_ubi = immigration_probability(
            mock_cohort(), mock_ubi(1000), mock_emigration()
        )
        assert with_ubi > base


class TestUpdateMigration:
    def test_expected_counts(self):
        out = _migrate((mock_cohort(),))
        assert out.emigrants == 25
        assert out.immigrants == 0
        assert out.cohorts[0].adults == 999_975

    def test_population_accounting(self):
        cohorts = (
            mock_cohort(name="Low", income=D(20000), adults=3_000_000),
            mock_cohort(name="Top", income=D(600_000), adults=200_000),
        )
        out = _migrate(cohorts, ubi=1000, stochastic=True, rng=new_rng(11))
        old = sum(c.adults for c in cohorts)
        new = sum(c.adults for c in out.cohorts)
        assert new == old - out.emigrants + out.immigrants
        assert [c.name for c in out.cohorts] == ["Low", "Top"]

    def test_minimum_population(self):
        out = _migrate((mock_cohort(adults=50),))
        assert out.cohorts[0].adults == MIN_POPULATION

    def test_deterministic_mode_draws_nothing(self):
        rng = new_rng(2)
        _migrate((mock_cohort(),), rng=rng)
        assert rng.random() == new_rng(2).random()

    def test_stochastic_is_seeded(self):
        cohorts = (mock_cohort(income=D(600_000), adults=500_000),)
        a = _migrate(cohorts, stochastic=True, rng=new_rng(8))
        b = _migrate(cohorts, stochastic=True, rng=new_rng(8))
        assert a == b
        assert 0 < a.emigrants <= 500_000 * MAX_EMIGRATION_PROB * 2
