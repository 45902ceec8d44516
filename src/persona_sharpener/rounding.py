"""Score rounding helpers shared by the scoring modules."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (62.5 -> 63).

    The built-in ``round`` rounds halves to even.
    """
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    """Round a score and clamp it into [0, 100]. Non-finite input scores 0."""
    if not math.isfinite(value):
        return 0
    return max(0, min(100, round_half_up(value)))
