# src/ubisim/systems/households.py
"""
Household responses, cohort by cohort.

Per cohort the module derives employment, the UBI work disincentive,
adjusted income, the UBI payment, personal income tax, consumption and
the consumption / capital / property / wealth tax lines. Every per-cohort
amount is clamped before being scaled to the cohort (or its active
workforce) with the overflow-safe helpers and summed.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from ubisim.entities import PopulationCohort, TaxPolicy, UbiProgram
from ubisim.helpers import ZERO, clamp, safe_add, safe_multiply
from ubisim.logging import DEEP_DEBUG, getLogger
from ubisim.tax import effective_tax_rate, personal_income_tax

log = getLogger(__name__)

MAX_INCOME = Decimal("50e6")
MIN_INCOME = Decimal(5000)
MAX_CONSUMPTION = Decimal("5e6")
MAX_TAX = Decimal("25e6")
MAX_TOTAL = Decimal("5e14")
MAX_UBI_PAYMENT = Decimal(10000)

MAX_WORK_DISINCENTIVE = Decimal("0.30")
_DISINCENTIVE_CORE_CAP = Decimal("0.25")
_UBI_CONSIDERED_CAP = Decimal(3000)

MAX_VAT_RATE = Decimal("0.3")
CAPITAL_GAINS_MIN_INCOME = Decimal(75000)
WEALTH_TAX_MIN_INCOME = Decimal(1_000_000)


@dataclass(slots=True, frozen=True)
class CohortFlows:
    """Per-person monthly amounts for one cohort (before scaling)."""

    name: str
    active_workers: int
    work_disincentive: Decimal
    adjusted_income: Decimal  # annual
    ubi_payment: Decimal
    personal_income_tax: Decimal
    consumption: Decimal
    vat: Decimal
    capital_gains_tax: Decimal
    property_tax: Decimal
    wealth_tax: Decimal


@dataclass(slots=True, frozen=True)
class HouseholdOutcome:
    """Economy-wide monthly totals of the household sector."""

    consumption: Decimal
    personal_income_tax: Decimal
    vat: Decimal
    capital_gains_tax: Decimal
    property_tax: Decimal
    wealth_tax: Decimal
    ubi_outlays: Decimal
    cohorts: tuple[CohortFlows, ...]


def employment_rate(unemployment: Decimal, education: Decimal) -> Decimal:
    """Less-educated cohorts feel unemployment more; floored at 50%."""
    return max(Decimal("0.5"), 1 - unemployment * (2 - education))


def active_workers(cohort: PopulationCohort, unemployment: Decimal) -> int:
    rate = employment_rate(unemployment, cohort.education)
    return int(cohort.adults * cohort.participation * rate)


def work_disincentive(
    cohort: PopulationCohort, ubi: UbiProgram, tax: TaxPolicy, advanced: bool
) -> Decimal:
    """
    Share of work effort withdrawn because of UBI, within [0, 0.30].

    Zero in simple mode. Otherwise grows with the UBI-to-earnings ratio,
    is amplified for older (median age > 55) and less-educated cohorts,
    and adds a small tax-rate component.
    """
    if not advanced:
        return ZERO
    monthly_income = max(Decimal(1000), cohort.income / 12)
    ubi_amount = min(_UBI_CONSIDERED_CAP, ubi.monthly_amount)
    base = min(Decimal("0.10"), ubi_amount / monthly_income * Decimal("0.15"))
    if cohort.median_age > 55:
        base *= Decimal("1.2")
    if cohort.education < Decimal("0.5"):
        base *= Decimal("1.1")

    etr = clamp(effective_tax_rate(cohort.income, tax), ZERO, Decimal("0.6"))
    total = clamp(base + etr * Decimal("0.05"), ZERO, _DISINCENTIVE_CORE_CAP)
    return clamp(total, ZERO, MAX_WORK_DISINCENTIVE)


def adjusted_income(
    cohort: PopulationCohort, wage_growth: Decimal, disincentive: Decimal
) -> Decimal:
    growth = clamp(wage_growth, Decimal("-0.2"), Decimal("0.5"))
    income = cohort.income * (1 + growth) * (1 - disincentive)
    return clamp(income, MIN_INCOME, MAX_INCOME)


def ubi_payment(ubi: UbiProgram, annual_income: Decimal) -> Decimal:
    """Flat monthly payment, phased out above the threshold when means-tested."""
    payment = ubi.monthly_amount
    if ubi.means_tested and annual_income > ubi.phase_out_threshold:
        reduction = (annual_income - ubi.phase_out_threshold) * ubi.phase_out_rate / 12
        payment = max(ZERO, payment - reduction)
    return clamp(payment, ZERO, MAX_UBI_PAYMENT)


def consumption(
    cohort: PopulationCohort,
    *,
    after_tax: Decimal,
    earned: Decimal,
    ubi_income: Decimal,
    price_level: Decimal,
    asset_price: Decimal,
    unemployment: Decimal,
    advanced: bool,
) -> Decimal:
    """
    Monthly per-person consumption.

    Simple mode spends a flat share of after-tax income. Advanced mode
    spends earned and UBI income at different propensities, adds an
    asset-price wealth effect and a precautionary-saving drag, applies a
    price elasticity, and never drops below 30% of after-tax income.
    """
    if not advanced:
        return max(ZERO, after_tax * (1 - cohort.savings_rate))

    base = earned * (1 - cohort.savings_rate) + ubi_income * min(
        Decimal(1), cohort.ubi_mpc
    )
    wealth_effect = (asset_price - 1) * Decimal("0.01") * cohort.income / 12
    if cohort.income > 100_000:
        wealth_effect *= Decimal("1.5")
    precautionary = -unemployment * Decimal("0.2") * after_tax

    elasticity = Decimal("-0.1") if cohort.income < 50_000 else Decimal("-0.2")
    price_adjustment = 1 + elasticity * (price_level - 1)

    spent = (base + wealth_effect + precautionary) * price_adjustment
    return max(after_tax * Decimal("0.3"), spent)


def capital_gains_tax(
    cohort: PopulationCohort, asset_price: Decimal, rate: Decimal
) -> Decimal:
    if cohort.income < CAPITAL_GAINS_MIN_INCOME:
        return ZERO
    holdings = (cohort.income - 50_000) * Decimal("1.5")
    gains = holdings * max(ZERO, asset_price - 1) / 12
    return gains * rate


def property_tax(cohort: PopulationCohort, rate: Decimal) -> Decimal:
    value = min(Decimal(1_000_000), cohort.income * Decimal("2.5"))
    if cohort.income < 25_000:
        value *= Decimal("0.3")
    return value * rate / 12


def wealth_tax(
    cohort: PopulationCohort, income: Decimal, rate: Decimal
) -> Decimal:
    if cohort.income < WEALTH_TAX_MIN_INCOME:
        return ZERO
    return max(ZERO, income - WEALTH_TAX_MIN_INCOME) * rate / 12


def cohort_flows(
    cohort: PopulationCohort,
    *,
    tax: TaxPolicy,
    ubi: UbiProgram,
    unemployment: Decimal,
    wage_growth: Decimal,
    price_level: Decimal,
    asset_price: Decimal,
    advanced: bool,
) -> CohortFlows:
    """Per-person monthly flows of one cohort, each clamped to its cap."""
    workers = active_workers(cohort, unemployment)
    disincentive = work_disincentive(cohort, ubi, tax, advanced)
    income = adjusted_income(cohort, wage_growth, disincentive)
    earned = income / 12

    payment = ubi_payment(ubi, income)
    pit = clamp(personal_income_tax(income, tax) / 12, ZERO, MAX_TAX)
    after_tax = max(ZERO, earned - pit + payment)

    spent = consumption(
        cohort,
        after_tax=after_tax,
        earned=earned,
        ubi_income=payment,
        price_level=price_level,
        asset_price=asset_price,
        unemployment=unemployment,
        advanced=advanced,
    )
    spent = clamp(spent, ZERO, MAX_CONSUMPTION)
    vat = clamp(spent * clamp(tax.vat, ZERO, MAX_VAT_RATE), ZERO, MAX_TAX)

    return CohortFlows(
        name=cohort.name,
        active_workers=workers,
        work_disincentive=disincentive,
        adjusted_income=income,
        ubi_payment=payment,
        personal_income_tax=pit,
        consumption=spent,
        vat=vat,
        capital_gains_tax=clamp(
            capital_gains_tax(cohort, asset_price, tax.capital_gains), ZERO, MAX_TAX
        ),
        property_tax=clamp(property_tax(cohort, tax.property), ZERO, MAX_TAX),
        wealth_tax=clamp(wealth_tax(cohort, income, tax.wealth), ZERO, MAX_TAX),
    )


def update_households(
    cohorts: Sequence[PopulationCohort],
    *,
    tax: TaxPolicy,
    ubi: UbiProgram,
    unemployment: Decimal,
    wage_growth: Decimal,
    price_level: Decimal,
    asset_price: Decimal,
    advanced: bool,
) -> HouseholdOutcome:
    """
    Aggregate household flows over all cohorts.

    Consumption, PIT and VAT scale with the cohort's active workers; UBI,
    capital-gains, property and wealth taxes scale with its whole adult
    population. Cohorts with no adults are skipped.
    """
    totals = dict.fromkeys(
        (
            "consumption",
            "personal_income_tax",
            "vat",
            "capital_gains_tax",
            "property_tax",
            "wealth_tax",
            "ubi_outlays",
        ),
        ZERO,
    )

    def add(key: str, per_person: Decimal, people: int) -> None:
        contrib = safe_multiply(per_person, Decimal(people), MAX_TOTAL)
        totals[key] = safe_add(totals[key], contrib, MAX_TOTAL)

    flows = []
    for cohort in cohorts:
        if cohort.adults <= 0:
            continue
        f = cohort_flows(
            cohort,
            tax=tax,
            ubi=ubi,
            unemployment=unemployment,
            wage_growth=wage_growth,
            price_level=price_level,
            asset_price=asset_price,
            advanced=advanced,
        )
        flows.append(f)

        add("consumption", f.consumption, f.active_workers)
        add("personal_income_tax", f.personal_income_tax, f.active_workers)
        add("vat", f.vat, f.active_workers)
        add("ubi_outlays", f.ubi_payment, cohort.adults)
        add("capital_gains_tax", f.capital_gains_tax, cohort.adults)
        add("property_tax", f.property_tax, cohort.adults)
        add("wealth_tax", f.wealth_tax, cohort.adults)

        if log.isEnabledFor(DEEP_DEBUG):
            log.deep(
                f"    {cohort.name}: workers={f.active_workers:,} "
                f"wd={f.work_disincentive:.4f} income={f.adjusted_income:.0f} "
                f"ubi={f.ubi_payment:.0f} pit={f.personal_income_tax:.0f} "
                f"c={f.consumption:.0f}"
            )

    log.debug(
        f"  Households: consumption={totals['consumption'] / Decimal('1e9'):.1f}B "
        f"PIT={totals['personal_income_tax'] / Decimal('1e9'):.1f}B "
        f"VAT={totals['vat'] / Decimal('1e9'):.1f}B "
        f"UBI={totals['ubi_outlays'] / Decimal('1e9'):.1f}B"
    )
    return HouseholdOutcome(cohorts=tuple(flows), **totals)
