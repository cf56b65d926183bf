"""Tests for the month stepper and its state."""

from decimal import Decimal

from ubisim import initial_state, new_rng, step_month
from ubisim.stepper import UNEMPLOYMENT_BOUNDS

D = Decimal


def _step(economy, state, *, ubi=0, month=1, stochastic=False, advanced=True, seed=0):
    return step_month(
        state,
        economy=economy,
        tax=economy.tax,
        ubi=economy.ubi(ubi),
        month=month,
        stochastic=stochastic,
        advanced=advanced,
        rng=new_rng(seed),
    )


class TestInitialState:
    def test_month_zero_values(self, economy):
        state = initial_state(economy)
        assert state.price_level == 1
        assert state.exchange_rate == 1
        assert state.asset_price == 1
        assert state.cumulative_inflation == 1
        assert state.unemployment == D("0.045")
        assert state.interest_rate == D("0.025") / 12

    def test_debt_from_debt_to_gdp(self, economy):
        state = initial_state(economy)
        assert state.debt == D("1.20") * D("1.5e12") * 12

    def test_private_copies(self, economy):
        state = initial_state(economy)
        assert state.cohorts == economy.cohorts
        assert state.cohorts[0] is not economy.cohorts[0]
        assert state.business.categories[0] is not economy.business.categories[0]


class TestStepMonth:
    def test_state_threads_forward(self, economy):
        state = initial_state(economy)
        new_state, result = _step(economy, state, ubi=1000)
        assert new_state.price_level == result.price_level
        assert new_state.interest_rate == result.interest_rate
        assert new_state.exchange_rate == result.exchange_rate
        assert new_state.debt == result.government_debt
        assert new_state.unemployment == result.unemployment_rate

    def test_unemployment_clamped(self, economy):
        state = initial_state(economy)
        for month in range(1, 4):
            state, result = _step(economy, state, ubi=3000, month=month)
            lo, hi = UNEMPLOYMENT_BOUNDS
            assert lo <= result.unemployment_rate <= hi

    def test_taxpayers_match_new_cohorts(self, economy):
        state = initial_state(economy)
        new_state, result = _step(economy, state, ubi=1000)
        assert result.remaining_taxpayers == sum(c.adults for c in new_state.cohorts)

    def test_other_spending_is_baseline(self, economy):
        _, result = _step(economy, initial_state(economy))
        assert result.other_gov_spending == economy.government.baseline_spending

    def test_firm_counts_unchanged(self, economy):
        """Entry and exit rates are reported, not applied."""
        _, result = _step(economy, initial_state(economy), ubi=1000)
        assert result.firm_counts == {"Small": 6_000_000, "Medium": 300_000, "Large": 8000}
        assert set(result.firm_entry_rates) == {"Small", "Medium", "Large"}
        assert set(result.firm_exit_rates) == {"Small", "Medium", "Large"}

    def test_regions_only_in_advanced_mode(self, economy):
        _, advanced = _step(economy, initial_state(economy), advanced=True)
        _, simple = _step(economy, initial_state(economy), advanced=False)
        assert set(advanced.regional_unemployment) == {
            "Northeast",
            "Midwest",
            "South",
            "West",
        }
        assert simple.regional_unemployment == {}

    def test_deterministic_mode_ignores_rng(self, economy):
        state = initial_state(economy)
        _, a = _step(economy, state, ubi=1000, seed=1)
        _, b = _step(economy, state, ubi=1000, seed=2)
        assert a == b

    def test_ubi_outlays_scale_with_population(self, economy):
        state = initial_state(economy)
        _, result = _step(economy, state, ubi=1000)
        assert result.ubi_outlays == D(1000) * economy.total_adults

    def test_savings_non_negative(self, economy):
        _, result = _step(economy, initial_state(economy), ubi=3000)
        assert result.total_savings >= 0

    def test_savings_use_post_migration_population(self, economy):
        state = initial_state(economy)
        new_state, result = _step(economy, state, ubi=1000)
        assert new_state.cohorts != state.cohorts
        income = sum((c.income / 12 * c.adults for c in new_state.cohorts), D(0))
        assert result.total_savings == max(D(0), income - result.total_consumption)
