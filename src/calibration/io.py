"""CSV serialization of monthly results and scenario summaries.

Monetary columns are written with every digit the Decimal carries, so a
row's ``Net`` equals ``TotalTaxes - UBIOutlays - OtherGovSpending`` exactly
when read back as Decimals. Rates and indices use fixed decimals.
"""

from __future__ import annotations

import csv
from collections.abc import Iterable, Sequence
from decimal import Decimal
from pathlib import Path
from typing import Any

from ubisim import SimulationResults
from ubisim.results import MONTHLY_COLUMNS

from calibration.scenarios import ScenarioSummary

# Default output directory of the scenario suite
OUTPUT_DIR = Path("enhanced_out")
SUMMARY_FILENAME = "enhanced_scenario_summary.csv"

# Fixed-decimal columns; everything else is written in full
_MONTHLY_DIGITS = {
    "PriceLevel": 4,
    "UnemploymentRate": 4,
    "InterestRate": 4,
    "ExchangeRate": 4,
    "AvgETR": 6,
    "TotalCapacity": 4,
    "LaborForceParticipation": 4,
    "AssetPriceIndex": 4,
    "CreditGrowth": 4,
}

SUMMARY_COLUMNS: tuple[tuple[str, str], ...] = (
    ("Scenario", "name"),
    ("Months", "months"),
    ("UBI", "ubi"),
    ("NetFiscalPosition", "net_fiscal_position"),
    ("PITScale", "pit_scale"),
    ("CorpRate", "corp_rate"),
    ("VATRate", "vat_rate"),
    ("TotalTaxes", "total_taxes"),
    ("TotalUBI", "total_ubi"),
    ("TotalOtherSpending", "total_other_spending"),
    ("TotalEmigrants", "total_emigrants"),
    ("TotalImmigrants", "total_immigrants"),
    ("FinalTaxpayers", "final_taxpayers"),
    ("AvgUnemployment", "avg_unemployment"),
    ("FinalPriceLevel", "final_price_level"),
    ("FinalInterestRate", "final_interest_rate"),
    ("FinalFirms", "final_firms"),
    ("AvgTradeBalance", "avg_trade_balance"),
    ("Converged", "converged"),
    ("CalibrationRounds", "calibration_rounds"),
    ("FinalGap", "final_gap"),
)

_SUMMARY_DIGITS = {
    "PITScale": 4,
    "CorpRate": 4,
    "VATRate": 4,
    "AvgUnemployment": 4,
    "FinalPriceLevel": 4,
    "FinalInterestRate": 4,
}


def format_value(value: Any, digits: int | None = None) -> str:
    """Render one CSV cell."""
    if value is None:
        return ""
    if isinstance(value, Decimal):
        if digits is not None:
            return f"{value:.{digits}f}"
        return format(value, "f")
    return str(value)


def _write_rows(
    path: Path,
    header: Sequence[str],
    rows: Iterable[Sequence[str]],
) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        writer.writerows(rows)
    return path


def write_monthly_csv(results: SimulationResults, path: Path | str) -> Path:
    """Write one row per month; returns the path written."""
    header = [column for column, _ in MONTHLY_COLUMNS]
    rows = (
        [
            format_value(record[column], _MONTHLY_DIGITS.get(column))
            for column in header
        ]
        for record in results.to_records()
    )
    return _write_rows(Path(path), header, rows)


def write_summary_csv(
    summaries: Iterable[ScenarioSummary], path: Path | str
) -> Path:
    """Write one row per scenario; returns the path written."""
    header = [column for column, _ in SUMMARY_COLUMNS]
    rows = (
        [
            format_value(getattr(s, attr), _SUMMARY_DIGITS.get(column))
            for column, attr in SUMMARY_COLUMNS
        ]
        for s in summaries
    )
    return _write_rows(Path(path), header, rows)


def read_csv(path: Path | str) -> list[dict[str, str]]:
    """Read a CSV written by this module back as a list of row dicts."""
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))
