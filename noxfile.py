#!/usr/bin/env -S uv run --script
# /// script
# dependencies = ["nox"]
# ///
"""Nox sessions for ubisim.

Run `nox -l` to list all available sessions. ``smoke`` and ``suite`` run
the ``ubisim`` command itself; extra arguments after ``--`` are passed on,
e.g. ``nox -s smoke -- --ubi 1500 --target-net -200e9``.
"""

from __future__ import annotations

import nox

nox.needs_version = ">=2024.3.2"
nox.options.default_venv_backend = "uv|virtualenv"
nox.options.sessions = ["lint", "tests_quick"]

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]
DEFAULT_PYTHON = "3.12"

SOURCES = ("src", "tests", "noxfile.py")
OUTPUT_DIR = "build/results"


@nox.session(python=DEFAULT_PYTHON)
def lint(session: nox.Session) -> None:
    """ruff format check, ruff lint and mypy over both packages."""
    session.install("-e", ".[lint]")
    session.run("ruff", "format", "--check", *SOURCES)
    session.run("ruff", "check", *SOURCES)
    session.run("mypy")


@nox.session(python=DEFAULT_PYTHON)
def format(session: nox.Session) -> None:
    session.install("-e", ".[lint]")
    session.run("ruff", "format", *SOURCES)
    session.run("ruff", "check", "--fix", *SOURCES)


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Full suite, calibrations against real simulations included."""
    session.install("-e", ".[test]")
    session.run("pytest", *session.posargs)


@nox.session(python=DEFAULT_PYTHON)
def tests_quick(session: nox.Session) -> None:
    """Unit tests only: no calibration runs, no hypothesis invariants."""
    session.install("-e", ".[test]")
    session.run(
        "pytest", "-m", "not slow and not calibration and not invariants",
        *session.posargs,
    )


@nox.session(python=DEFAULT_PYTHON)
def calibration(session: nox.Session) -> None:
    """Only the tax calibrations against full simulations."""
    session.install("-e", ".[test]")
    session.run("pytest", "-m", "calibration", *session.posargs)


@nox.session(python=DEFAULT_PYTHON)
def coverage(session: nox.Session) -> None:
    """Coverage of both packages; DEBUG logging so every log line executes."""
    session.install("-e", ".[test]")
    session.run(
        "pytest",
        "--cov=src/ubisim",
        "--cov=src/calibration",
        "--cov-report=term-missing",
        "--cov-report=html",
        *session.posargs,
        env={"COVERAGE_RUN": "true"},
    )


@nox.session(python=DEFAULT_PYTHON)
def smoke(session: nox.Session) -> None:
    """Calibrate a $1000 UBI over three deterministic months."""
    session.install("-e", ".")
    session.run(
        "ubisim",
        "--ubi", "1000",
        "--months", "3",
        "--no-stochastic",
        "--csv", f"{OUTPUT_DIR}/smoke_monthly.csv",
        "--summary", f"{OUTPUT_DIR}/smoke_summary.csv",
        *session.posargs,
    )


@nox.session(python=DEFAULT_PYTHON)
def suite(session: nox.Session) -> None:
    """Run every predefined scenario and write the CSVs and report."""
    session.install("-e", ".")
    session.run(
        "ubisim", "--output-dir", OUTPUT_DIR, "--workers", "4", *session.posargs
    )


if __name__ == "__main__":
    nox.main()
