"""Unit tests for MonthResult and SimulationResults."""

from decimal import Decimal

import pandas as pd
import pytest

from tests.helpers.factories import mock_month
from ubisim.results import MONTHLY_COLUMNS, SimulationResults

D = Decimal


class TestMonthResult:
    def test_total_taxes_excludes_wealth_tax(self):
        m = mock_month(
            personal_income_tax=D(1),
            vat=D(2),
            corp_tax=D(3),
            capital_gains_tax=D(4),
            property_tax=D(5),
            wealth_tax=D(1000),
        )
        assert m.total_taxes == D(15)

    def test_net_fiscal_position(self):
        m = mock_month()
        assert m.net_fiscal_position == m.total_taxes - m.ubi_outlays - m.other_gov_spending

    def test_trade_balance(self):
        m = mock_month(exports=D("80e9"), imports=D("95e9"))
        assert m.trade_balance == D("-15e9")

    def test_firm_counts(self):
        m = mock_month()
        assert m.small_firms == 6_000_000
        assert m.medium_firms == 300_000
        assert m.large_firms == 8000
        assert m.total_firms == 6_308_000

    def test_missing_category_counts_zero(self):
        m = mock_month(firm_counts={"Small": 5})
        assert m.large_firms == 0
        assert m.total_firms == 5

    def test_mappings_are_read_only(self):
        counts = {"Small": 5}
        m = mock_month(firm_counts=counts, regional_unemployment={"West": D("0.05")})
        counts["Small"] = 6
        assert m.small_firms == 5
        with pytest.raises(TypeError):
            m.firm_counts["Small"] = 7
        with pytest.raises(TypeError):
            m.regional_unemployment["West"] = D(1)

    def test_hashable(self):
        a, b = mock_month(), mock_month()
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1


class TestSimulationResults:
    """Tests for the ordered results sequence."""

    @pytest.fixture
    def results(self):
        return SimulationResults(
            [
                mock_month(1, unemployment_rate=D("0.04"), emigrants=10, immigrants=1),
                mock_month(2, unemployment_rate=D("0.05"), emigrants=20, immigrants=2),
                mock_month(3, unemployment_rate=D("0.06"), emigrants=30, immigrants=3),
            ]
        )

    def test_sequence_protocol(self, results):
        assert len(results) == 3
        assert results[0].month == 1
        assert [m.month for m in results] == [1, 2, 3]
        assert results.final.month == 3

    def test_slice_returns_results(self, results):
        head = results[:2]
        assert isinstance(head, SimulationResults)
        assert len(head) == 2

    def test_empty_final_raises(self):
        with pytest.raises(IndexError, match="no months simulated"):
            SimulationResults().final

    def test_equality(self, results):
        assert results == SimulationResults(list(results))
        assert results != results[:1]

    def test_aggregates(self, results):
        assert results.total_emigrants == 60
        assert results.total_immigrants == 6
        assert results.avg_unemployment == D("0.05")
        assert results.total_taxes == sum(m.total_taxes for m in results)
        assert results.total_other_spending == D("975e9")

    def test_net_is_sum_of_monthly_nets(self, results):
        assert results.net_fiscal_position == sum(
            (m.net_fiscal_position for m in results), D(0)
        )
        assert results.net_fiscal_position == (
            results.total_taxes - results.total_ubi - results.total_other_spending
        )

    def test_empty_averages_are_zero(self):
        empty = SimulationResults()
        assert empty.avg_unemployment == 0
        assert empty.avg_trade_balance == 0
        assert empty.net_fiscal_position == 0

    def test_to_records_columns(self, results):
        records = results.to_records()
        assert len(records) == 3
        assert list(records[0]) == [c for c, _ in MONTHLY_COLUMNS]
        assert records[0]["Net"] == results[0].net_fiscal_position
        assert records[0]["SmallFirms"] == 6_000_000

    def test_monthly_columns_are_complete(self):
        assert len(MONTHLY_COLUMNS) == 36
        assert MONTHLY_COLUMNS[0] == ("Month", "month")
        assert MONTHLY_COLUMNS[-1] == ("CreditGrowth", "credit_growth")

    def test_to_dataframe(self, results):
        df = results.to_dataframe()
        assert isinstance(df, pd.DataFrame)
        assert df.index.name == "Month"
        assert list(df.index) == [1, 2, 3]
        assert df["UnemploymentRate"].tolist() == pytest.approx([0.04, 0.05, 0.06])
        assert len(df.columns) == 35
