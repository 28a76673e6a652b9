"""Small numeric helpers shared by the objective and reward maths."""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero on the positive side.

    Python's ``round`` uses banker's rounding (``round(2.5) == 2``); economy
    numbers are expected to round 2.5 up to 3.
    """
    return math.floor(value + 0.5)

