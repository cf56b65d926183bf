# src/ubisim/economy.py
"""
Economy builder.

Turns the ``economy`` section of the merged configuration (see
``ubisim/defaults.yml``) into the immutable :class:`Economy` bundle: the
cohort table, base tax policy, UBI program template and the parameter
bundles of every subsystem. Numbers are converted with
:func:`~ubisim.helpers.to_decimal` so ``0.1`` in YAML is exactly
``Decimal("0.1")``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from decimal import Decimal
from pathlib import Path
from typing import Any

from ubisim.config.loader import deep_merge, package_defaults, read_yaml
from ubisim.entities import (
    BusinessEcosystem,
    EconomyParams,
    EmigrationParams,
    FinancialSector,
    FirmSizeCategory,
    GovernmentSector,
    LaborMarket,
    PopulationCohort,
    RegionalEconomy,
    RegionData,
    TaxBracket,
    TaxPolicy,
    TradeSector,
    UbiProgram,
)
from ubisim.helpers import to_decimal
from ubisim.logging import getLogger

__all__ = ["Economy", "build_economy", "load_economy"]

log = getLogger(__name__)

# Cohort shares must partition the adult population
_SHARE_TOLERANCE = Decimal("1e-9")


@dataclass(slots=True, frozen=True)
class Economy:
    """Everything a run needs besides the tax policy and UBI amount."""

    cohorts: tuple[PopulationCohort, ...]
    tax: TaxPolicy
    ubi_template: UbiProgram
    labor: LaborMarket
    business: BusinessEcosystem
    financial: FinancialSector
    trade: TradeSector
    regional: RegionalEconomy
    government: GovernmentSector
    params: EconomyParams
    emigration: EmigrationParams

    @property
    def total_adults(self) -> int:
        return sum(c.adults for c in self.cohorts)

    def ubi(self, monthly_amount: Decimal | int | float | str) -> UbiProgram:
        """UBI program with the template's rules and *monthly_amount*."""
        return replace(self.ubi_template, monthly_amount=to_decimal(monthly_amount))


# section builders
# ---------------------------------------------------------------------------
def _decimals(section: Mapping[str, Any], *names: str) -> dict[str, Decimal]:
    missing = [n for n in names if n not in section]
    if missing:
        raise ValueError(f"missing economy parameters: {', '.join(missing)}")
    return {n: to_decimal(section[n]) for n in names}


def _build_cohorts(raw: Mapping[str, Any]) -> tuple[PopulationCohort, ...]:
    total = int(raw["total_adults"])
    rows = raw["cohorts"]
    if not rows:
        raise ValueError("economy needs at least one cohort")

    share_sum = sum((to_decimal(r["share"]) for r in rows), Decimal(0))
    if abs(share_sum - 1) > _SHARE_TOLERANCE:
        raise ValueError(f"cohort shares must sum to 1.0, got {share_sum}")

    cohorts = []
    for r in rows:
        fields = _decimals(
            r,
            "income",
            "savings_rate",
            "participation",
            "ubi_mpc",
            "avoidance",
            "mobility",
            "education",
        )
        cohorts.append(
            PopulationCohort(
                name=str(r["name"]),
                adults=int(total * to_decimal(r["share"])),
                median_age=int(r["median_age"]),
                region=str(r["region"]),
                **fields,
            )
        )
    return tuple(cohorts)


def _build_tax(raw: Mapping[str, Any]) -> TaxPolicy:
    brackets = tuple(
        TaxBracket(to_decimal(threshold), to_decimal(rate))
        for threshold, rate in raw["brackets"]
    )
    return TaxPolicy(
        brackets=brackets,
        **_decimals(raw, "vat", "corporate", "capital_gains", "property", "wealth"),
    )


def _build_business(raw: Mapping[str, Any]) -> BusinessEcosystem:
    categories = tuple(
        FirmSizeCategory(
            name=str(c["name"]),
            count=int(c["count"]),
            avg_employees=int(c["avg_employees"]),
            **_decimals(
                c,
                "avg_revenue",
                "entry_barrier",
                "exit_sensitivity",
                "productivity_growth",
                "wage_flexibility",
                "innovation",
            ),
        )
        for c in raw["categories"]
    )
    return BusinessEcosystem(
        categories=categories,
        **_decimals(
            raw,
            "network_effect",
            "spillover",
            "global_competition",
            "supply_chain_resilience",
        ),
    )


def _build_regional(raw: Mapping[str, Any]) -> RegionalEconomy:
    regions = tuple(
        RegionData(
            name=str(r["name"]),
            **_decimals(
                r,
                "population_share",
                "productivity",
                "cost_of_living",
                "unemployment_rate",
                "housing_cost",
                "local_tax_rate",
                "amenity",
            ),
        )
        for r in raw["regions"]
    )
    return RegionalEconomy(
        regions=regions,
        **_decimals(
            raw,
            "labor_mobility",
            "capital_mobility",
            "regional_multiplier",
            "transport_cost",
        ),
    )


def _build_labor(raw: Mapping[str, Any]) -> LaborMarket:
    gaps = tuple(
        (str(name), to_decimal(gap))
        for name, gap in dict(raw.get("regional_wage_gaps") or {}).items()
    )
    return LaborMarket(
        regional_wage_gaps=gaps,
        **_decimals(
            raw,
            "base_unemployment",
            "search_friction",
            "skill_mismatch",
            "wage_stickiness_down",
            "wage_stickiness_up",
            "union_coverage",
        ),
    )


def _build_ubi_template(raw: Mapping[str, Any]) -> UbiProgram:
    return UbiProgram(
        monthly_amount=Decimal(0),
        child_bonus=to_decimal(raw.get("child_bonus", 0)),
        means_tested=bool(raw.get("means_tested", False)),
        phase_out_threshold=to_decimal(raw.get("phase_out_threshold", 0)),
        phase_out_rate=to_decimal(raw.get("phase_out_rate", 0)),
    )


def build_economy(raw: Mapping[str, Any]) -> Economy:
    """
    Build the immutable economy bundle from an ``economy`` config section.

    Parameters
    ----------
    raw : Mapping
        Section shaped like ``economy`` in ``ubisim/defaults.yml``.

    Returns
    -------
    Economy

    Raises
    ------
    ValueError
        If a parameter is missing, cohort shares do not sum to 1, or the
        tax schedule is malformed.
    """
    economy = Economy(
        cohorts=_build_cohorts(raw),
        tax=_build_tax(raw["tax"]),
        ubi_template=_build_ubi_template(raw.get("ubi_program") or {}),
        labor=_build_labor(raw["labor"]),
        business=_build_business(raw["business"]),
        financial=FinancialSector(
            **_decimals(
                raw["financial"],
                "base_interest_rate",
                "credit_spread",
                "credit_elasticity",
                "savings_elasticity",
                "asset_price_level",
                "lending_capacity",
                "stability",
            )
        ),
        trade=TradeSector(
            **_decimals(
                raw["trade"],
                "exports",
                "imports",
                "export_elasticity",
                "import_elasticity",
                "exchange_rate",
                "foreign_demand_growth",
                "agreement_effect",
            )
        ),
        regional=_build_regional(raw["regional"]),
        government=GovernmentSector(
            **_decimals(
                raw["government"],
                "baseline_spending",
                "unemployment_benefit_rate",
                "social_security",
                "public_investment_rate",
                "debt_to_gdp",
                "stabilizer_strength",
            )
        ),
        params=EconomyParams(
            **_decimals(
                raw["params"],
                "baseline_monthly_gdp",
                "price_adjustment_speed",
                "wage_response",
                "productivity_growth",
                "inflation_persistence",
                "expectation_adaptation",
                "monetary_rule_strength",
            )
        ),
        emigration=EmigrationParams(
            **_decimals(
                raw["emigration"],
                "base_probability",
                "tax_sensitivity",
                "ubi_attraction",
                "quality_of_life",
                "network_effect",
                "reentry_rate",
            )
        ),
    )
    log.debug(
        f"Economy built: {len(economy.cohorts)} cohorts, "
        f"{economy.total_adults:,} adults, "
        f"{len(economy.business.categories)} firm size categories"
    )
    return economy


def load_economy(
    overrides: str | Path | Mapping[str, Any] | None = None,
) -> Economy:
    """Build the packaged default economy, optionally patched by *overrides*."""
    raw = package_defaults()["economy"]
    return build_economy(deep_merge(raw, read_yaml(overrides)))
