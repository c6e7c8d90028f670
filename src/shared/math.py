"""Mathematical utilities for the range slider value model."""

from __future__ import annotations

import math
from enum import Enum, auto


# Quotients this close to an integer are treated as that integer, so that
# 0.3 / 0.1 == 2.9999999999999996 counts as exactly three steps.
STEP_TOLERANCE = 1e-9


class RoundingRule(Enum):
    """Direction used when snapping a value onto a step multiple."""

    DOWN = auto()  # Toward negative infinity
    UP = auto()  # Toward positive infinity
    NEAREST = auto()  # Nearest multiple, ties away from zero


def round_half_away_from_zero(value: float) -> float:
    """
    Round to the nearest integer, resolving ties away from zero.

    Python's built-in ``round`` uses banker's rounding, which would make
    ``round(0.5) == 0`` and ``round(1.5) == 2``.

    Example:
        >>> round_half_away_from_zero(2.5)
        3.0
        >>> round_half_away_from_zero(-2.5)
        -3.0
    """
    return math.copysign(math.floor(abs(value) + 0.5), value)


def round_to_step(value: float, step: float, rule: RoundingRule = RoundingRule.NEAREST) -> float:
    """
    Snap ``value`` onto a multiple of ``step``.

    Parameters
    ----------
    value : float
        Value to quantize
    step : float
        Positive quantization granularity
    rule : RoundingRule
        Direction to round in when ``value`` is not already a multiple

    Returns
    -------
    float
        The chosen multiple of ``step``
    """
    quotient = value / step
    nearest = round_half_away_from_zero(quotient)
    if math.isclose(quotient, nearest, rel_tol=STEP_TOLERANCE, abs_tol=STEP_TOLERANCE):
        return nearest * step

    if rule is RoundingRule.DOWN:
        return math.floor(quotient) * step
    if rule is RoundingRule.UP:
        return math.ceil(quotient) * step
    return nearest * step


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp ``value`` into ``[lower, upper]``."""
    return max(lower, min(value, upper))
