# tests/unit/systems/test_business.py
"""
Business-sector system unit tests.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from tests.helpers.factories import mock_financial, mock_firms, mock_tax, mock_ubi
from ubisim.systems.business import (
    MARGIN_BOUNDS,
    MAX_CORPORATE_TAX,
    entry_exit_rates,
    investment_rate,
    monthly_revenue,
    profit_margin,
    update_business,
)

D = Decimal


def _run(economy, *, corporate="0.25", ubi=0, unemployment="0.045", advanced=True):
    return update_business(
        economy.business,
        unemployment=D(unemployment),
        price_level=D(1),
        interest_rate=economy.financial.monthly_base_rate,
        financial=economy.financial,
        tax=mock_tax(corporate=D(corporate)),
        ubi=mock_ubi(ubi),
        advanced=advanced,
    )


class TestMargins:
    def test_base_margin_plus_cycle(self):
        # 0.06 + 0.045 * 0.2
        assert profit_margin("Small", D("0.045"), D(1)) == D("0.069")
        assert profit_margin("Large", D("0.045"), D(1)) == D("0.109")

    def test_unknown_category_uses_default(self):
        assert profit_margin("Other", D(0), D(1)) == D("0.08")

    @pytest.mark.parametrize(
        ("u", "p"), [(D("0.15"), D("1.5")), (D(0), D("0.8")), (D("0.02"), D(1))]
    )
    def test_margin_bounds(self, u, p):
        for name in ("Small", "Medium", "Large"):
            margin = profit_margin(name, u, p)
            assert MARGIN_BOUNDS[0] <= margin <= D("0.15")


class TestRevenueAndInvestment:
    def test_scaled_monthly_revenue(self):
        # 6M firms * 250k * 6 / 12
        assert monthly_revenue(mock_firms("Small"), mock_ubi(0)) == D("7.5e11")

    def test_ubi_demand_boost(self):
        base = monthly_revenue(mock_firms("Small"), mock_ubi(0))
        boosted = monthly_revenue(mock_firms("Small"), mock_ubi(1000))
        assert boosted == base * D("1.02")

    def test_revenue_capped(self):
        firms = mock_firms("Large", count=10**9, avg_revenue=D("1e9"))
        assert monthly_revenue(firms, mock_ubi(0)) == D("5e12")

    def test_investment_rate_at_baseline(self):
        fin = mock_financial()
        assert investment_rate(mock_firms("Small"), fin.monthly_base_rate, fin) == D(
            "0.2"
        )

    def test_small_firms_twice_as_rate_sensitive(self):
        fin = mock_financial()
        rate = fin.monthly_base_rate + D("0.01") / 12
        small = investment_rate(mock_firms("Small"), rate, fin)
        large = investment_rate(mock_firms("Large"), rate, fin)
        assert D("0.2") - small == pytest.approx(2 * (D("0.2") - large))
        assert small < large < D("0.2")


class TestEntryExit:
    def test_simple_mode_thresholds(self):
        firms = mock_firms("Small")
        assert entry_exit_rates(firms, D("0.04"), False) == (D("0.001"), D("0.005"))
        assert entry_exit_rates(firms, D("0.12"), False) == (D("0.004"), D("0.002"))

    def test_advanced_distress_raises_exit(self):
        firms = mock_firms("Small", exit_sensitivity=D(2), entry_barrier=D(2))
        entry, exit_ = entry_exit_rates(firms, D("0.04"), True)
        # 0.001 + (0.05 - 0.04) * 2 * 0.5
        assert exit_ == D("0.011")
        assert entry == D("0.001")

    def test_advanced_rates_bounded(self):
        firms = mock_firms("Small", exit_sensitivity=D(100), entry_barrier=D(0))
        entry, exit_ = entry_exit_rates(firms, D("0.03"), True)
        assert exit_ == D("0.02")
        entry, _ = entry_exit_rates(firms, D("0.25"), True)
        assert entry == D("0.01")


class TestUpdateBusiness:
    def test_corporate_tax_is_rate_times_profit(self, economy):
        out = _run(economy)
        assert out.corporate_tax == pytest.approx(out.profit * D("0.25"))

    def test_corporate_tax_increases_with_rate(self, economy):
        taxes = [_run(economy, corporate=r).corporate_tax for r in ("0.05", "0.25", "0.5")]
        assert taxes == sorted(taxes)
        assert taxes[0] < taxes[-1]

    def test_corporate_tax_capped(self, economy):
        out = _run(economy, corporate="1")
        assert out.corporate_tax <= MAX_CORPORATE_TAX

    def test_counts_unchanged(self, economy):
        out = _run(economy, ubi=1000)
        assert out.business.count("Small") == economy.business.count("Small")
        assert set(out.entry_rates) == {"Small", "Medium", "Large"}

    def test_ubi_productivity_boost(self, economy):
        before = economy.business.category("Small").productivity_growth
        assert _run(economy, ubi=600).business.category(
            "Small"
        ).productivity_growth == before
        assert _run(economy, ubi=1000).business.category(
            "Small"
        ).productivity_growth == before + D("0.0008")

    def test_investment_positive(self, economy):
        out = _run(economy)
        assert 0 < out.investment < out.profit
