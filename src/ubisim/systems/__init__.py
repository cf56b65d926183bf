"""
Monthly sub-updates of the economy, in the order the stepper runs them.

1. labor_market  - unemployment and wage growth
2. business      - margins, profit, corporate tax, investment
3. households    - cohort incomes, consumption and tax lines
4. prices        - GDP, output gap, inflation, price level
5. finance       - policy rate, asset prices, credit growth
6. trade         - exports, imports, exchange rate
7. migration     - emigration and immigration per cohort
8. government    - fiscal ledger and regional unemployment
"""

from ubisim.systems.business import update_business
from ubisim.systems.finance import update_finance
from ubisim.systems.government import update_government, update_regions
from ubisim.systems.households import update_households
from ubisim.systems.labor_market import update_labor_market
from ubisim.systems.migration import update_migration
from ubisim.systems.prices import update_prices
from ubisim.systems.trade import update_trade

__all__ = [
    "update_business",
    "update_finance",
    "update_government",
    "update_households",
    "update_labor_market",
    "update_migration",
    "update_prices",
    "update_regions",
    "update_trade",
]
