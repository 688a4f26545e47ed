"""
Rounding helpers shared by the target and estimation equations.

Python's built-in round() uses banker's rounding (2.5 -> 2). Every target in
this package rounds halves upward (2.5 -> 3, -2.5 -> -2) so that values match
those already stored by the product.
"""

import math


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves toward positive infinity.

    Args:
        value: Number to round

    Returns:
        Rounded integer
    """
    # floor(value + 0.5) misrounds 0.49999999999999994 to 1
    whole = math.floor(value)
    return int(whole + 1 if value - whole >= 0.5 else whole)


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))
