# src/ubisim/systems/prices.py
"""
Aggregation and pricing: GDP, output gap, inflation, price level.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ubisim.entities import EconomyParams, TradeSector
from ubisim.helpers import ONE, ZERO, clamp, safe_add
from ubisim.logging import getLogger

log = getLogger(__name__)

NET_EXPORT_LIMIT = Decimal("200e9")
GDP_CEILING = Decimal("5e12")
GDP_BOUNDS = (Decimal("1e12"), Decimal("4e12"))
CAPACITY_BOUNDS = (Decimal("0.7"), Decimal("1.3"))
OUTPUT_GAP_LIMIT = Decimal("0.3")
PRICE_FLOOR = Decimal("0.8")
PRICE_BOUNDS = (PRICE_FLOOR, Decimal("1.5"))

TREND_INFLATION = Decimal("0.02") / 12
PHILLIPS_COEFFICIENT = Decimal("0.1") / 100
PERSISTENCE_WEIGHT = Decimal("0.1")
INFLATION_LIMIT = Decimal("0.005")  # monthly


@dataclass(slots=True, frozen=True)
class PriceOutcome:
    net_exports: Decimal
    nominal_gdp: Decimal
    real_gdp: Decimal
    total_capacity: Decimal
    output_gap: Decimal
    inflation: Decimal
    price_level: Decimal
    cumulative_inflation: Decimal


def competitiveness(price_level: Decimal, exchange_rate: Decimal) -> Decimal:
    """Inverse real exchange rate; 1.0 at parity."""
    return ONE / max(Decimal("0.5"), price_level * exchange_rate)


def net_exports(
    trade: TradeSector, price_level: Decimal, exchange_rate: Decimal
) -> Decimal:
    """Exports minus imports at the current competitiveness, within ±$200B."""
    delta = competitiveness(price_level, exchange_rate) - 1
    exports = trade.exports * (1 + trade.export_elasticity * delta)
    imports = trade.imports * (1 - trade.import_elasticity * delta)
    return clamp(exports - imports, -NET_EXPORT_LIMIT, NET_EXPORT_LIMIT)


def monthly_inflation(
    output_gap: Decimal,
    cumulative_inflation: Decimal,
    month: int,
    params: EconomyParams,
) -> Decimal:
    """
    Trend + Phillips term + persistence of inflation since month 1,
    clamped to ±0.5% per month.
    """
    persistence = ZERO
    if month > 1:
        persistence = (cumulative_inflation - 1) / month
    inflation = (
        TREND_INFLATION
        + output_gap * PHILLIPS_COEFFICIENT
        + persistence * params.inflation_persistence * PERSISTENCE_WEIGHT
    )
    return clamp(inflation, -INFLATION_LIMIT, INFLATION_LIMIT)


def update_prices(
    *,
    consumption: Decimal,
    investment: Decimal,
    government_spending: Decimal,
    trade: TradeSector,
    price_level: Decimal,
    exchange_rate: Decimal,
    cumulative_inflation: Decimal,
    month: int,
    params: EconomyParams,
) -> PriceOutcome:
    """
    Aggregate demand into GDP and move the price level.

    Nominal GDP is accumulated with :func:`safe_add` under a $5T ceiling
    and then held to [$1T, $4T]. Productive capacity is constant while
    firm counts are static.
    """
    nx = net_exports(trade, price_level, exchange_rate)

    nominal = safe_add(consumption, investment, GDP_CEILING)
    nominal = safe_add(nominal, government_spending, GDP_CEILING)
    nominal = safe_add(nominal, nx, GDP_CEILING)
    nominal = clamp(nominal, *GDP_BOUNDS)

    real = nominal / max(PRICE_FLOOR, price_level)
    capacity = clamp(ONE, *CAPACITY_BOUNDS)
    potential = max(ONE, params.baseline_monthly_gdp * capacity)
    gap = clamp(real / potential - 1, -OUTPUT_GAP_LIMIT, OUTPUT_GAP_LIMIT)

    inflation = monthly_inflation(gap, cumulative_inflation, month, params)
    new_price = clamp(max(PRICE_FLOOR, price_level * (1 + inflation)), *PRICE_BOUNDS)
    cumulative = cumulative_inflation * (1 + inflation)

    log.debug(
        f"  Prices: GDP={nominal / Decimal('1e12'):.3f}T gap={gap:+.4f} "
        f"π={inflation:+.5f} P {price_level:.4f} → {new_price:.4f}"
    )
    return PriceOutcome(
        net_exports=nx,
        nominal_gdp=nominal,
        real_gdp=real,
        total_capacity=capacity,
        output_gap=gap,
        inflation=inflation,
        price_level=new_price,
        cumulative_inflation=cumulative,
    )
