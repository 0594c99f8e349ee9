"""
Rounding helpers for displayed figures.

Python's ``round`` sends halves to the nearest even number; figures shown to
administrators round halves up instead (12.5% -> 13%).
"""
import math


def round_half_up(value: float) -> int:
    """
    Round a non-negative number to the nearest integer, halves up.

    Args:
        value: Number to round

    Returns:
        int: Rounded value
    """
    return math.floor(value + 0.5)


def percentage(part: int, total: int) -> int:
    """
    Share of ``part`` in ``total`` as a whole percentage.

    Args:
        part: Count for one answer or group
        total: Count for the whole question

    Returns:
        int: Percentage rounded halves up, 0 when ``total`` is 0
    """
    if total <= 0:
        return 0
    return round_half_up(part * 100 / total)
