"""Console and markdown reports for calibrated scenarios.

The console summary shows the first and last six months of a run and the
cumulative fiscal figures; the markdown report tabulates a whole suite.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from pathlib import Path

from ubisim import MonthResult, SimulationResults

from calibration.calibrator import ConvergenceInfo
from calibration.scenarios import ScenarioRun

_BILLION = Decimal("1e9")
_TRILLION = Decimal("1e12")


def _preview(results: SimulationResults, head: int = 6, tail: int = 6) -> list[MonthResult]:
    months = list(results)
    if len(months) <= head + tail:
        return months
    return months[:head] + months[-tail:]


def print_convergence(info: ConvergenceInfo) -> None:
    """Print the calibration outcome."""
    print("\n[Calibration Results]")
    status = "Converged" if info.converged else "Did not converge"
    print(f"{status} after {info.rounds} rounds")
    gap = "n/a" if info.final_gap is None else f"${info.final_gap:,.0f}"
    print(f"Final gap: {gap}")
    print(f"PIT Scale: {info.pit_scale:.3f}")
    print(f"Corp Rate: {info.corp_rate:.1%}")
    print(f"VAT Rate:  {info.vat_rate:.1%}")


def print_summary(results: SimulationResults) -> None:
    """Print a month table and the cumulative fiscal figures of a run."""
    print(f"\n=== UBI Simulation Results ({len(results)} months) ===")
    print(
        "Month | Price | RealGDP | Unemp% | IntRate | PIT($B) | VAT($B) | "
        "Corp($B) | UBI($B) | Net($B) | Firms(M) | Trade($B)"
    )
    for r in _preview(results):
        print(
            f"{r.month:5d} | {r.price_level:5.2f} | "
            f"{r.real_gdp / _TRILLION:6.1f}T | "
            f"{r.unemployment_rate:6.1%} | {r.interest_rate:7.2%} | "
            f"{r.personal_income_tax / _BILLION:7.0f} | {r.vat / _BILLION:7.0f} | "
            f"{r.corp_tax / _BILLION:8.0f} | {r.ubi_outlays / _BILLION:7.0f} | "
            f"{r.net_fiscal_position / _BILLION:7.0f} | "
            f"{Decimal(r.total_firms) / 1_000_000:8.1f} | "
            f"{r.trade_balance / _BILLION:9.0f}"
        )

    final = results.final
    print("\n--- Summary Statistics ---")
    print(f"Total tax revenue:     ${results.total_taxes:,.0f}")
    print(f"Total UBI outlays:     ${results.total_ubi:,.0f}")
    print(f"Other gov spending:    ${results.total_other_spending:,.0f}")
    print(f"Net fiscal position:   ${results.net_fiscal_position:,.0f}")
    print(f"Final unemployment:    {final.unemployment_rate:.1%}")
    print(f"Final price level:     {final.price_level:.3f}")
    print(f"Final interest rate:   {final.interest_rate:.2%} (monthly)")
    print(f"Total emigrants:       {results.total_emigrants:,}")
    print(f"Total immigrants:      {results.total_immigrants:,}")


def generate_suite_report(runs: Sequence[ScenarioRun], path: Path) -> None:
    """Generate markdown report for a scenario suite.

    Parameters
    ----------
    runs : sequence of ScenarioRun
        Calibrated scenarios, in the order they ran.
    path : Path
        Output path for the markdown report.
    """
    lines = [
        "# UBI Scenario Suite Report",
        "",
        f"**Scenarios:** {len(runs)}",
        f"**Converged:** {sum(r.convergence.converged for r in runs)}/{len(runs)}",
        "",
        "## Calibrated Policies",
        "",
        "| Scenario | UBI | Target ($B) | Net ($B) | Corp | PIT scale | VAT "
        "| Rounds | Converged |",
        "|----------|-----|-------------|----------|------|-----------|-----"
        "|--------|-----------|",
    ]
    for run in runs:
        s = run.summary
        lines.append(
            f"| {s.name} | {s.ubi} | {run.scenario.target_net / _BILLION:,.0f} "
            f"| {s.net_fiscal_position / _BILLION:,.1f} | {s.corp_rate:.2%} "
            f"| {s.pit_scale:.3f} | {s.vat_rate:.2%} | {s.calibration_rounds} "
            f"| {'yes' if s.converged else 'no'} |"
        )

    lines.extend(
        [
            "",
            "## Economy",
            "",
            "| Scenario | Avg unemployment | Final price | Emigrants | Immigrants "
            "| Final taxpayers |",
            "|----------|------------------|-------------|-----------|------------"
            "|-----------------|",
        ]
    )
    for run in runs:
        s = run.summary
        lines.append(
            f"| {s.name} | {s.avg_unemployment:.2%} | {s.final_price_level:.4f} "
            f"| {s.total_emigrants:,} | {s.total_immigrants:,} "
            f"| {s.final_taxpayers:,} |"
        )

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n")
