"""Small numeric helpers shared by agent initialization and commuting."""

from __future__ import annotations

import math
import random


def rand_int_in_range(low: int, high: int, rng: random.Random) -> int:
    """Uniform integer in [low, high); returns low for an empty range."""
    if high <= low:
        return low
    return rng.randrange(low, high)


def rand_float_in_range(low: float, high: float, rng: random.Random) -> float:
    return low + rng.random() * (high - low)


def euclidean_distance(x1: int, y1: int, x2: int, y2: int) -> float:
    return math.hypot(x2 - x1, y2 - y1)
