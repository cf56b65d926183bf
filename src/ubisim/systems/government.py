# src/ubisim/systems/government.py
"""Government ledger and regional unemployment spread."""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal

from ubisim.entities import GovernmentSector, RegionalEconomy
from ubisim.helpers import ZERO, clamp
from ubisim.logging import getLogger

log = getLogger(__name__)

MAX_REVENUE = Decimal("1e12")
NET_POSITION_LIMIT = Decimal("500e9")
DEBT_BOUNDS = (ZERO, Decimal("30e12"))


@dataclass(slots=True, frozen=True)
class LedgerOutcome:
    revenue: Decimal
    net_position: Decimal
    debt: Decimal


def update_government(
    *,
    tax_lines: tuple[Decimal, ...],
    ubi_outlays: Decimal,
    government: GovernmentSector,
    debt: Decimal,
) -> LedgerOutcome:
    """
    Book one month of revenue and spending against the debt stock.

    Revenue (every household tax line plus corporate tax) is held to
    [0, $1T]; the net position to ±$500B; a surplus pays debt down and a
    deficit adds to it, within [0, $30T].
    """
    revenue = clamp(sum(tax_lines, ZERO), ZERO, MAX_REVENUE)
    net = revenue - ubi_outlays - government.baseline_spending
    net = clamp(net, -NET_POSITION_LIMIT, NET_POSITION_LIMIT)
    new_debt = clamp(debt - net, *DEBT_BOUNDS)

    log.debug(
        f"  Government: revenue={revenue / Decimal('1e9'):.1f}B "
        f"net={net / Decimal('1e9'):+.1f}B debt={new_debt / Decimal('1e12'):.3f}T"
    )
    return LedgerOutcome(revenue=revenue, net_position=net, debt=new_debt)


def regional_unemployment(national: Decimal, productivity: Decimal) -> Decimal:
    """Spread around the national rate, within 70%-130% of it."""
    rate = national * (Decimal("0.8") + Decimal("0.4") * (2 - productivity))
    return clamp(rate, national * Decimal("0.7"), national * Decimal("1.3"))


def update_regions(regional: RegionalEconomy, unemployment: Decimal) -> RegionalEconomy:
    """Recompute every region's unemployment from the national rate."""
    return replace(
        regional,
        regions=tuple(
            replace(
                r, unemployment_rate=regional_unemployment(unemployment, r.productivity)
            )
            for r in regional.regions
        ),
    )
