"""
Simulation results container for ubisim.

This module provides the immutable :class:`MonthResult` record emitted by
the month stepper and the :class:`SimulationResults` sequence returned by
a run, with fiscal aggregates and export to pandas DataFrames.

Note: pandas is an optional dependency. It is only required for
:meth:`SimulationResults.to_dataframe`.
Install with: pip install ubisim[pandas] or pip install pandas
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, overload

from ubisim.helpers import ZERO

if TYPE_CHECKING:  # pragma: no cover
    from pandas import DataFrame


def _import_pandas() -> Any:
    """
    Lazily import pandas with helpful error message if not installed.

    Raises
    ------
    ImportError
        If pandas is not installed.
    """
    try:
        import pandas as pd

        return pd
    except ImportError:  # pragma: no cover
        raise ImportError(
            "pandas is required for DataFrame export methods. "
            "Install it with: pip install pandas"
        ) from None


_MAPPING_FIELDS = (
    "firm_counts",
    "firm_entry_rates",
    "firm_exit_rates",
    "regional_unemployment",
)


@dataclass(slots=True, frozen=True)
class MonthResult:
    """
    One simulated month.

    ``total_taxes``, ``trade_balance`` and ``net_fiscal_position`` are
    derived from the stored fields and never stored themselves. The wealth
    tax is booked as government revenue but is not part of ``total_taxes``.
    """

    month: int
    price_level: Decimal
    nominal_gdp: Decimal
    real_gdp: Decimal
    unemployment_rate: Decimal
    interest_rate: Decimal  # monthly
    exchange_rate: Decimal
    personal_income_tax: Decimal
    vat: Decimal
    corp_tax: Decimal
    capital_gains_tax: Decimal
    property_tax: Decimal
    wealth_tax: Decimal
    ubi_outlays: Decimal
    other_gov_spending: Decimal
    government_debt: Decimal
    emigrants: int
    immigrants: int
    remaining_taxpayers: int
    avg_etr: Decimal
    firm_counts: Mapping[str, int] = field(hash=False)
    total_investment: Decimal
    corporate_profit: Decimal
    total_capacity: Decimal
    avg_wage: Decimal
    labor_force_participation: Decimal
    exports: Decimal
    imports: Decimal
    total_savings: Decimal
    total_consumption: Decimal
    asset_price_index: Decimal
    credit_growth: Decimal
    inflation: Decimal = ZERO
    output_gap: Decimal = ZERO
    wage_growth: Decimal = ZERO
    firm_entry_rates: Mapping[str, Decimal] = field(default_factory=dict, hash=False)
    firm_exit_rates: Mapping[str, Decimal] = field(default_factory=dict, hash=False)
    regional_unemployment: Mapping[str, Decimal] = field(
        default_factory=dict, hash=False
    )

    def __post_init__(self) -> None:
        # read-only views
        for name in _MAPPING_FIELDS:
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    @property
    def total_taxes(self) -> Decimal:
        return (
            self.personal_income_tax
            + self.vat
            + self.corp_tax
            + self.capital_gains_tax
            + self.property_tax
        )

    @property
    def trade_balance(self) -> Decimal:
        return self.exports - self.imports

    @property
    def net_fiscal_position(self) -> Decimal:
        return self.total_taxes - self.ubi_outlays - self.other_gov_spending

    @property
    def small_firms(self) -> int:
        return self.firm_counts.get("Small", 0)

    @property
    def medium_firms(self) -> int:
        return self.firm_counts.get("Medium", 0)

    @property
    def large_firms(self) -> int:
        return self.firm_counts.get("Large", 0)

    @property
    def total_firms(self) -> int:
        return sum(self.firm_counts.values())


# (column, attribute) pairs of the monthly table
MONTHLY_COLUMNS: tuple[tuple[str, str], ...] = (
    ("Month", "month"),
    ("PriceLevel", "price_level"),
    ("NominalGDP", "nominal_gdp"),
    ("RealGDP", "real_gdp"),
    ("UnemploymentRate", "unemployment_rate"),
    ("InterestRate", "interest_rate"),
    ("ExchangeRate", "exchange_rate"),
    ("PersonalIncomeTax", "personal_income_tax"),
    ("VAT", "vat"),
    ("CorpTax", "corp_tax"),
    ("CapitalGainsTax", "capital_gains_tax"),
    ("PropertyTax", "property_tax"),
    ("TotalTaxes", "total_taxes"),
    ("UBIOutlays", "ubi_outlays"),
    ("OtherGovSpending", "other_gov_spending"),
    ("GovernmentDebt", "government_debt"),
    ("Net", "net_fiscal_position"),
    ("Emigrants", "emigrants"),
    ("Immigrants", "immigrants"),
    ("RemainingTaxpayers", "remaining_taxpayers"),
    ("AvgETR", "avg_etr"),
    ("SmallFirms", "small_firms"),
    ("MediumFirms", "medium_firms"),
    ("LargeFirms", "large_firms"),
    ("TotalInvestment", "total_investment"),
    ("CorporateProfit", "corporate_profit"),
    ("TotalCapacity", "total_capacity"),
    ("AvgWage", "avg_wage"),
    ("LaborForceParticipation", "labor_force_participation"),
    ("Exports", "exports"),
    ("Imports", "imports"),
    ("TradeBalance", "trade_balance"),
    ("TotalSavings", "total_savings"),
    ("TotalConsumption", "total_consumption"),
    ("AssetPriceIndex", "asset_price_index"),
    ("CreditGrowth", "credit_growth"),
)


class SimulationResults(Sequence[MonthResult]):
    """
    Ordered, immutable sequence of :class:`MonthResult`.

    Examples
    --------
    >>> results = run_simulation(12, economy, economy.ubi(1000), economy.tax)
    >>> results.net_fiscal_position  # summed over the horizon
    >>> df = results.to_dataframe()
    """

    __slots__ = ("_months",)

    def __init__(self, months: Sequence[MonthResult] = ()) -> None:
        self._months: tuple[MonthResult, ...] = tuple(months)

    @overload
    def __getitem__(self, index: int) -> MonthResult: ...

    @overload
    def __getitem__(self, index: slice) -> SimulationResults: ...

    def __getitem__(self, index: int | slice) -> MonthResult | SimulationResults:
        if isinstance(index, slice):
            return SimulationResults(self._months[index])
        return self._months[index]

    def __len__(self) -> int:
        return len(self._months)

    def __iter__(self) -> Iterator[MonthResult]:
        return iter(self._months)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SimulationResults):
            return NotImplemented
        return self._months == other._months

    def __hash__(self) -> int:
        return hash(len(self._months))

    def __repr__(self) -> str:
        return f"SimulationResults(months={len(self._months)})"

    # aggregates
    # -----------------------------------------------------------------------
    def _sum(self, attr: str) -> Decimal:
        return sum((getattr(m, attr) for m in self._months), ZERO)

    @property
    def final(self) -> MonthResult:
        if not self._months:
            raise IndexError("no months simulated")
        return self._months[-1]

    @property
    def net_fiscal_position(self) -> Decimal:
        """Total taxes minus UBI outlays minus other spending, over all months."""
        return self._sum("net_fiscal_position")

    @property
    def total_taxes(self) -> Decimal:
        return self._sum("total_taxes")

    @property
    def total_ubi(self) -> Decimal:
        return self._sum("ubi_outlays")

    @property
    def total_other_spending(self) -> Decimal:
        return self._sum("other_gov_spending")

    @property
    def total_emigrants(self) -> int:
        return sum(m.emigrants for m in self._months)

    @property
    def total_immigrants(self) -> int:
        return sum(m.immigrants for m in self._months)

    @property
    def avg_unemployment(self) -> Decimal:
        if not self._months:
            return ZERO
        return self._sum("unemployment_rate") / len(self._months)

    @property
    def avg_trade_balance(self) -> Decimal:
        if not self._months:
            return ZERO
        return self._sum("trade_balance") / len(self._months)

    # export
    # -----------------------------------------------------------------------
    def to_records(self) -> list[dict[str, Any]]:
        """One dict per month keyed by the monthly-table column names."""
        return [
            {column: getattr(m, attr) for column, attr in MONTHLY_COLUMNS}
            for m in self._months
        ]

    def to_dataframe(self) -> DataFrame:
        """
        Export the monthly table to a pandas DataFrame indexed by month.

        Decimal amounts are converted to float for analysis; use
        :meth:`to_records` where exact values matter.
        """
        pd = _import_pandas()
        rows = [
            {k: float(v) if isinstance(v, Decimal) else v for k, v in row.items()}
            for row in self.to_records()
        ]
        df = pd.DataFrame(rows, columns=[c for c, _ in MONTHLY_COLUMNS])
        return df.set_index("Month")
