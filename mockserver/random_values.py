import math
import random


def random_number(start: float, end: float) -> float:
    """Return a uniform random float in [start, end)."""
    return random.random() * (end - start) + start


def random_int(start: int, end: int) -> int:
    """
    Return a random integer in [start, end].

    Draws over [start, end + 0.99) and floors, so `end` is reachable.
    Caller must ensure start <= end.
    """
    return math.floor(random_number(start, end + 0.99))
