"""Command-line interface for the UBI fiscal simulator.

Thin dispatch layer: parses arguments, builds the configured simulation,
delegates to the scenario driver, writes CSVs via io.py and prints reports
via reporting.py.

Usage:
    # Calibrate and simulate one UBI level
    python -m calibration --ubi 1000 --months 12 --csv out/ubi1000.csv

    # Deficit target, deterministic run
    python -m calibration --ubi 1500 --target-net -200e9 --no-stochastic

    # Run the six-scenario suite into enhanced_out/
    python -m calibration
"""

from __future__ import annotations

import argparse
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from ubisim import Simulation

from calibration.config import CalibrationSettings
from calibration.io import SUMMARY_FILENAME, write_monthly_csv, write_summary_csv
from calibration.reporting import (
    generate_suite_report,
    print_convergence,
    print_summary,
)
from calibration.scenarios import Scenario, run_scenario, run_suite


def _decimal_arg(text: str) -> Decimal:
    try:
        value = Decimal(text)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from None
    if not value.is_finite():
        raise argparse.ArgumentTypeError(f"not a finite number: {text!r}")
    return value


def build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="ubisim",
        description="UBI fiscal simulator with automatic tax calibration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Single calibrated scenario with monthly CSV
  ubisim --ubi 1000 --csv out/ubi1000.csv

  # Deficit target, two-year horizon, deterministic migration
  ubisim --ubi 1500 --months 24 --target-net -200e9 --no-stochastic

  # Full scenario suite with 4 worker processes
  ubisim -j 4 --output-dir enhanced_out
        """,
    )
    parser.add_argument(
        "--ubi",
        type=_decimal_arg,
        default=None,
        help="Monthly UBI per adult; omit to run the scenario suite",
    )
    parser.add_argument(
        "--months",
        type=int,
        default=None,
        help="Simulation months (default: 12)",
    )
    parser.add_argument(
        "--target-net",
        type=_decimal_arg,
        default=None,
        help="Annualized net fiscal target in dollars (default: 0)",
    )
    parser.add_argument(
        "--stochastic",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Sample migration and asset noise (default: on)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (default: 42)",
    )
    parser.add_argument(
        "--advanced",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Enhanced behavioral models (default: on)",
    )

    # Output
    parser.add_argument(
        "--csv",
        type=str,
        default=None,
        help="Monthly CSV path (single scenario)",
    )
    parser.add_argument(
        "--summary",
        type=str,
        default=None,
        help="Summary CSV path (single scenario)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Output directory of the scenario suite (default: enhanced_out)",
    )

    # Execution
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML file overriding run, calibration or economy settings",
    )
    parser.add_argument(
        "-j",
        "--workers",
        type=int,
        default=None,
        help="Worker processes for calibration grids (default: 1)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default=None,
        choices=["DEEP", "DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )
    return parser


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Map parsed arguments onto configuration keys, skipping unset ones."""
    mapping = {
        "ubi": args.ubi,
        "months": args.months,
        "target_net": args.target_net,
        "stochastic": args.stochastic,
        "seed": args.seed,
        "advanced": args.advanced,
        "csv_path": args.csv,
        "summary_path": args.summary,
        "output_dir": args.output_dir,
        "n_workers": args.workers,
    }
    overrides = {k: v for k, v in mapping.items() if v is not None}
    if args.log_level is not None:
        overrides["logging"] = {"default_level": args.log_level}
    return overrides


def run_single(sim: Simulation, settings: CalibrationSettings) -> None:
    """Calibrate and simulate the configured UBI level."""
    cfg = sim.config
    if cfg.ubi is None:
        raise ValueError(
            "run_single needs a ubi amount; omit it to run the scenario suite"
        )
    print("\n=== UBI Simulation ===")
    print(f"UBI: ${cfg.ubi}/month, Target Net: ${cfg.target_net:,.0f}")
    print(f"Advanced Mode: {cfg.advanced}, Stochastic: {cfg.stochastic}")

    run = run_scenario(
        Scenario(f"UBI_{cfg.ubi}", cfg.ubi, cfg.target_net),
        sim.economy,
        months=cfg.months,
        stochastic=cfg.stochastic,
        advanced=cfg.advanced,
        rng=sim.rng,
        settings=settings,
    )
    print_convergence(run.convergence)
    print_summary(run.results)

    if cfg.csv_path:
        path = write_monthly_csv(run.results, cfg.csv_path)
        print(f"\nMonthly CSV written to: {path}")
    if cfg.summary_path:
        path = write_summary_csv([run.summary], cfg.summary_path)
        print(f"Summary CSV written to: {path}")


def run_suite_mode(sim: Simulation, settings: CalibrationSettings) -> None:
    """Run the predefined scenarios and write every CSV into output_dir."""
    cfg = sim.config
    out_dir = Path(cfg.output_dir)
    runs = run_suite(
        sim.economy,
        months=cfg.months,
        stochastic=cfg.stochastic,
        advanced=cfg.advanced,
        seed=cfg.seed,
        settings=settings,
    )
    for run in runs:
        print(f"\n{'=' * 50}\n{run.scenario.name}\n{'=' * 50}")
        print_convergence(run.convergence)
        print_summary(run.results)
        write_monthly_csv(run.results, out_dir / f"{run.scenario.name}_monthly.csv")

    write_summary_csv([r.summary for r in runs], out_dir / SUMMARY_FILENAME)
    generate_suite_report(runs, out_dir / "suite_report.md")
    print(f"\nAll results written to {out_dir}/")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the ubisim CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        sim = Simulation.init(args.config, **_overrides(args))
        settings = CalibrationSettings.from_mapping(sim.config.calibration)
        settings = settings.with_workers(sim.config.n_workers)
    except (ValueError, TypeError, OSError) as exc:
        parser.error(str(exc))

    if sim.config.ubi is not None:
        run_single(sim, settings)
    else:
        run_suite_mode(sim, settings)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
