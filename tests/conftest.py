"""Pytest configuration and fixtures for ubisim tests."""

import os

import pytest

from ubisim import Economy, load_economy, logging, new_rng


@pytest.fixture(scope="session")
def economy() -> Economy:
    """The packaged default economy (immutable, safe to share)."""
    return load_economy()


@pytest.fixture
def rng():
    """A freshly seeded random source."""
    return new_rng(42)


@pytest.fixture(autouse=True)
def mute_ubisim_logs(caplog):
    # Optimize log level based on context:
    # - CI coverage run: DEBUG to execute all logging for accurate coverage
    # - All other runs: ERROR for faster tests
    if os.environ.get("COVERAGE_RUN") == "true":
        level = logging.DEBUG
    else:
        level = logging.ERROR

    # Set both caplog level (for capture) and actual logger level
    for name in ("ubisim", "calibration"):
        caplog.set_level(level, logger=name)
        logging.getLogger(name).setLevel(level)
