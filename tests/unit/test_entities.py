"""Tests for the immutable entity dataclasses."""

from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

from tests.helpers.factories import mock_cohort, mock_firms, mock_tax
from ubisim.entities import (
    MAX_BRACKET_RATE,
    BusinessEcosystem,
    TaxBracket,
    TaxPolicy,
    UbiProgram,
    clone_business,
    clone_cohorts,
    clone_regional,
    with_populations,
)

D = Decimal


class TestTaxPolicy:
    """Construction checks of the bracket schedule and scalar rates."""

    def test_default_schedule_is_valid(self):
        tax = mock_tax()
        assert tax.brackets[0].threshold == 0
        assert len(tax.brackets) == 6

    def test_empty_brackets_rejected(self):
        with pytest.raises(ValueError, match="at least one bracket"):
            mock_tax(brackets=())

    def test_first_bracket_must_start_at_zero(self):
        with pytest.raises(ValueError, match="must start at 0"):
            mock_tax(brackets=(TaxBracket(D(100), D("0.1")),))

    def test_thresholds_strictly_increasing(self):
        brackets = (
            TaxBracket(D(0), D(0)),
            TaxBracket(D(50000), D("0.2")),
            TaxBracket(D(50000), D("0.3")),
        )
        with pytest.raises(ValueError, match="strictly increasing"):
            mock_tax(brackets=brackets)

    def test_bracket_rate_above_cap_rejected(self):
        brackets = (TaxBracket(D(0), D("0.70")),)
        with pytest.raises(ValueError, match="bracket rate"):
            mock_tax(brackets=brackets)

    @pytest.mark.parametrize("field", ["vat", "corporate", "wealth"])
    def test_scalar_rate_out_of_range(self, field):
        with pytest.raises(ValueError, match=f"{field} rate"):
            mock_tax(**{field: D("1.5")})

    def test_frozen(self):
        tax = mock_tax()
        with pytest.raises(FrozenInstanceError):
            tax.vat = D("0.1")  # type: ignore[misc]

    def test_rescaled_scales_brackets_and_replaces_rates(self):
        tax = mock_tax()
        scaled = tax.rescaled(D("1.1"), D("0.3"), D("0.07"))
        assert scaled.corporate == D("0.3")
        assert scaled.vat == D("0.07")
        assert scaled.capital_gains == tax.capital_gains
        for old, new in zip(tax.brackets, scaled.brackets):
            assert new.threshold == old.threshold
            assert new.rate == old.rate * D("1.1")

    def test_rescaled_caps_bracket_rates(self):
        """Scaling never pushes a bracket above 65%."""
        scaled = mock_tax().rescaled(D(2), D("0.25"), D("0.05"))
        assert max(b.rate for b in scaled.brackets) == MAX_BRACKET_RATE

    def test_rescaled_leaves_original_untouched(self):
        tax = mock_tax()
        tax.rescaled(D("0.9"), D("0.1"), D("0.1"))
        assert tax == mock_tax()


class TestUbiProgram:
    def test_negative_amount_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            UbiProgram(monthly_amount=D(-1))

    def test_defaults(self):
        ubi = UbiProgram(monthly_amount=D(1000))
        assert not ubi.means_tested
        assert ubi.child_bonus == 0


class TestClones:
    """Clones are equal to their source but never the same objects."""

    def test_clone_cohorts(self):
        cohorts = (mock_cohort(name="A"), mock_cohort(name="B"))
        copy = clone_cohorts(cohorts)
        assert copy == cohorts
        assert all(a is not b for a, b in zip(copy, cohorts))

    def test_clone_business(self):
        business = BusinessEcosystem(
            categories=(mock_firms("Small"), mock_firms("Large", count=8000)),
            network_effect=D("0.15"),
            spillover=D("0.02"),
            global_competition=D("0.3"),
            supply_chain_resilience=D("0.75"),
        )
        copy = clone_business(business)
        assert copy == business
        assert copy.categories[0] is not business.categories[0]

    def test_clone_regional(self, economy):
        copy = clone_regional(economy.regional)
        assert copy == economy.regional
        assert copy.regions[0] is not economy.regional.regions[0]


class TestWithPopulations:
    def test_replaces_headcounts_in_order(self):
        cohorts = (mock_cohort(name="A", adults=10), mock_cohort(name="B", adults=20))
        updated = with_populations(cohorts, [11, 19])
        assert [c.adults for c in updated] == [11, 19]
        assert [c.name for c in updated] == ["A", "B"]
        assert [c.adults for c in cohorts] == [10, 20]

    def test_length_mismatch(self):
        with pytest.raises(ValueError, match="expected 1 populations"):
            with_populations((mock_cohort(),), [1, 2])


class TestBusinessLookup:
    def test_count_and_category(self, economy):
        business = economy.business
        assert business.count("Small") == 6_000_000
        assert business.category("Large").avg_employees == 1200

    def test_missing_category(self, economy):
        assert economy.business.count("Huge") == 0
        with pytest.raises(KeyError):
            economy.business.category("Huge")

    def test_region_lookup(self, economy):
        assert economy.regional.region("West").productivity == D("1.20")
