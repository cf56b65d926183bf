# src/ubisim/helpers.py
"""
Bounded arithmetic utilities shared by every subsystem.

Every monetary aggregate in the engine is a population-weighted sum that
could otherwise run away under degenerate parameter combinations found by
the calibration search; these helpers keep magnitudes inside fixed
ceilings instead of detecting overflow after the fact.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import TypeVar

import numpy as np
from numpy.random import Generator, default_rng

ZERO = Decimal(0)
ONE = Decimal(1)

# Maximum plausible probability for one Bernoulli trial
_P_MAX = 0.999999
# Exact Bernoulli summation up to this many trials
_EXACT_LIMIT = 1000

T = TypeVar("T", int, Decimal)


def new_rng(seed: int | None = None) -> Generator:
    """Return a fresh random source; the only place RNG handles are made."""
    return default_rng(seed)


def to_decimal(value: object) -> Decimal:
    """
    Convert a YAML/CLI number to :class:`Decimal` without binary noise.

    ``0.1`` becomes ``Decimal("0.1")`` rather than the exact double.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise TypeError(f"cannot convert {type(value).__name__} to Decimal")
    return Decimal(str(value))


def clamp(value: T, lo: T, hi: T) -> T:
    """Return *value* limited to ``[lo, hi]``."""
    if value < lo:
        return lo
    if value > hi:
        return hi
    return value


def safe_add(a: Decimal, b: Decimal, ceiling: Decimal) -> Decimal:
    """
    Add two amounts without letting the result exceed ``±ceiling``.

    Same-sign operands are checked against the ceiling before adding.
    """
    if a > 0 and b > 0 and a > ceiling - b:
        return ceiling
    if a < 0 and b < 0 and a < -ceiling - b:
        return -ceiling
    return clamp(a + b, -ceiling, ceiling)


def safe_multiply(a: Decimal, b: Decimal, ceiling: Decimal) -> Decimal:
    """
    Sign-correct product of *a* and *b* with magnitude capped at *ceiling*.

    Either operand being zero short-circuits to zero.
    """
    if a == 0 or b == 0:
        return ZERO
    negative = (a < 0) != (b < 0)
    abs_a, abs_b = abs(a), abs(b)
    if abs_a > ceiling / abs_b:
        magnitude = ceiling
    else:
        magnitude = min(abs_a * abs_b, ceiling)
    return -magnitude if negative else magnitude


def binomial_expected(n: int, p: Decimal) -> int:
    """Deterministic count ``round(n * clamp(p, 0, 1))`` (half to even)."""
    if n <= 0:
        return 0
    return int(round(Decimal(n) * clamp(p, ZERO, ONE)))


def sample_standard_normal(rng: Generator) -> float:
    """One standard normal draw via the Box–Muller transform."""
    u1 = 1.0 - rng.random()
    u2 = 1.0 - rng.random()
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


def binomial_sample(n: int, p: Decimal, rng: Generator) -> int:
    """
    Draw a Binomial(n, p) count.

    Exact Bernoulli summation for ``n <= 1000``; above that a normal
    approximation with mean ``np`` and variance ``np(1-p)``, rounded and
    clamped to ``[0, n]``.
    """
    if n <= 0:
        return 0
    prob = min(max(float(p), 0.0), _P_MAX)
    if prob == 0.0:
        return 0
    if n <= _EXACT_LIMIT:
        return int(np.count_nonzero(rng.random(n) < prob))

    mean = n * prob
    std = math.sqrt(n * prob * (1.0 - prob))
    draw = round(mean + std * sample_standard_normal(rng))
    return clamp(int(draw), 0, n)
