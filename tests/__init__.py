# tests/__init__.py

from tests.helpers.factories import (
    mock_cohort,
    mock_month,
    mock_tax,
    mock_ubi,
)

__all__ = [
    "mock_cohort",
    "mock_month",
    "mock_tax",
    "mock_ubi",
]
