"""
Type aliases for ubisim.

All monetary amounts and rates are carried as :class:`decimal.Decimal`
so that multi-trillion sums compared against a $100M tolerance do not
drift. Population counts are plain integers.
"""

from collections.abc import Sequence
from decimal import Decimal
from typing import TypeAlias

from numpy.random import Generator

Money: TypeAlias = Decimal
"""Monetary amount in dollars."""

Rate: TypeAlias = Decimal
"""Dimensionless rate or share (0.05 means 5%)."""

Populations: TypeAlias = Sequence[int]
"""Adult headcount per cohort, in cohort order."""

Rng: TypeAlias = Generator
"""Explicit random source threaded through every stochastic call."""

__all__ = ["Money", "Rate", "Populations", "Rng"]
