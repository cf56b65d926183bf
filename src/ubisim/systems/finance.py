# src/ubisim/systems/finance.py
"""
Financial markets: policy rate, asset prices and credit growth.

The interest rate is carried as a monthly figure throughout; the
financial sector's baseline is annual and converted on use.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from numpy.random import Generator

from ubisim.entities import FinancialSector
from ubisim.helpers import clamp, to_decimal
from ubisim.logging import getLogger

log = getLogger(__name__)

NATURAL_RATE = Decimal("0.025")
INFLATION_TARGET = Decimal("0.02")
UNEMPLOYMENT_TARGET = Decimal("0.045")
INFLATION_GAP_WEIGHT = Decimal("2.0")
UNEMPLOYMENT_GAP_WEIGHT = Decimal("1.0")
OUTPUT_GAP_WEIGHT = Decimal("0.5")

ANNUAL_RATE_BOUNDS = (Decimal("0.01"), Decimal("0.12"))
MONTHLY_RATE_BOUNDS = (Decimal("0.01") / 12, Decimal("0.12") / 12)
RATE_SMOOTHING = Decimal("0.7")  # weight on the previous rate

ASSET_GROWTH_LIMIT = Decimal("0.03")
ASSET_NOISE = Decimal("0.01")
ASSET_BOUNDS = (Decimal("0.7"), Decimal("1.5"))
CREDIT_INNER = (Decimal("-0.06"), Decimal("0.10"))
CREDIT_BOUNDS = (Decimal("-0.1"), Decimal("0.2"))


@dataclass(slots=True, frozen=True)
class FinanceOutcome:
    interest_rate: Decimal  # monthly, within MONTHLY_RATE_BOUNDS
    asset_price: Decimal
    credit_growth: Decimal


def annualized_inflation(inflation: Decimal, cumulative_inflation: Decimal) -> Decimal:
    """Inflation from cumulative price drift, or monthly × 12 before any drift."""
    if cumulative_inflation > 1:
        return (cumulative_inflation - 1) * 4
    return inflation * 12


def taylor_rate(
    annual_inflation: Decimal, unemployment: Decimal, output_gap: Decimal
) -> Decimal:
    """Annual Taylor-rule target within [1%, 12%]."""
    rate = (
        NATURAL_RATE
        + annual_inflation
        + INFLATION_GAP_WEIGHT * (annual_inflation - INFLATION_TARGET)
        - UNEMPLOYMENT_GAP_WEIGHT * (unemployment - UNEMPLOYMENT_TARGET)
        + OUTPUT_GAP_WEIGHT * output_gap
    )
    return clamp(rate, *ANNUAL_RATE_BOUNDS)


def update_finance(
    *,
    interest_rate: Decimal,
    inflation: Decimal,
    cumulative_inflation: Decimal,
    unemployment: Decimal,
    output_gap: Decimal,
    asset_price: Decimal,
    financial: FinancialSector,
    stochastic: bool,
    advanced: bool,
    rng: Generator,
) -> FinanceOutcome:
    """
    One month of monetary policy and asset markets.

    Advanced mode follows a Taylor rule with 30% partial adjustment; asset
    prices react to rate changes and the output gap (plus ±0.5% uniform
    noise when stochastic); credit growth falls as the rate rises above
    baseline. Simple mode nudges the rate toward baseline plus 1.5×
    inflation and grows assets and credit at fixed rates. Results are
    clamped to the runner's bounds in both modes.
    """
    base = financial.monthly_base_rate

    if advanced:
        target = taylor_rate(
            annualized_inflation(inflation, cumulative_inflation),
            unemployment,
            output_gap,
        )
        new_rate = interest_rate * RATE_SMOOTHING + target / 12 * (1 - RATE_SMOOTHING)
        new_rate = clamp(new_rate, *MONTHLY_RATE_BOUNDS)

        growth = Decimal("-0.6") * (new_rate - interest_rate) * 12
        growth += Decimal("0.3") * output_gap
        if stochastic:
            growth += ASSET_NOISE * (to_decimal(rng.random()) - Decimal("0.5"))
        growth = clamp(growth, -ASSET_GROWTH_LIMIT, ASSET_GROWTH_LIMIT)
        new_asset = asset_price * (1 + growth)

        credit = Decimal("0.02") - Decimal("2.5") * (new_rate - base) * 12
        credit = clamp(credit, *CREDIT_INNER)
    else:
        target = base + Decimal("1.5") * inflation
        new_rate = interest_rate * Decimal("0.8") + target * Decimal("0.2")
        new_asset = asset_price * Decimal("1.002")
        credit = Decimal("0.02")

    outcome = FinanceOutcome(
        interest_rate=clamp(new_rate, *MONTHLY_RATE_BOUNDS),
        asset_price=clamp(new_asset, *ASSET_BOUNDS),
        credit_growth=clamp(credit, *CREDIT_BOUNDS),
    )
    log.debug(
        f"  Finance: r {interest_rate * 12:.4%} → {outcome.interest_rate * 12:.4%} "
        f"(annualized), assets={outcome.asset_price:.4f} "
        f"credit={outcome.credit_growth:+.4f}"
    )
    return outcome
