# src/ubisim/systems/trade.py
"""International trade flows and the exchange rate."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ubisim.entities import TradeSector
from ubisim.helpers import clamp
from ubisim.logging import getLogger
from ubisim.systems.prices import competitiveness

log = getLogger(__name__)

REFERENCE_GDP = Decimal("1.5e12")
FX_SENSITIVITY = Decimal("5e-12")
FX_STEP_LIMIT = Decimal("0.005")


@dataclass(slots=True, frozen=True)
class TradeOutcome:
    exports: Decimal
    imports: Decimal
    exchange_rate: Decimal

    @property
    def balance(self) -> Decimal:
        return self.exports - self.imports


def update_trade(
    trade: TradeSector,
    *,
    price_level: Decimal,
    nominal_gdp: Decimal,
    exchange_rate: Decimal,
    advanced: bool,
) -> TradeOutcome:
    """
    Monthly exports, imports and the new exchange rate.

    Simple mode freezes both flows at their baseline and leaves the
    exchange rate unchanged. Advanced mode lets exports respond to
    competitiveness and foreign demand growth, imports to domestic demand
    and competitiveness, and moves the exchange rate by at most 0.5% in
    the direction of the trade balance.
    """
    if not advanced:
        return TradeOutcome(trade.exports, trade.imports, exchange_rate)

    delta = competitiveness(price_level, exchange_rate) - 1
    exports = trade.exports * (1 + trade.export_elasticity * delta)
    exports *= 1 + trade.foreign_demand_growth / 12

    demand = nominal_gdp / REFERENCE_GDP - 1
    imports = (
        trade.imports
        * (1 + Decimal("0.5") * demand)
        * (1 - trade.import_elasticity * delta)
    )

    step = clamp((exports - imports) * FX_SENSITIVITY, -FX_STEP_LIMIT, FX_STEP_LIMIT)
    new_rate = exchange_rate * (1 + step)

    log.debug(
        f"  Trade: X={exports / Decimal('1e9'):.1f}B M={imports / Decimal('1e9'):.1f}B "
        f"fx {exchange_rate:.4f} → {new_rate:.4f}"
    )
    return TradeOutcome(exports, imports, new_rate)
