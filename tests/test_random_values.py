"""
test_random_values.py - Uniform random helpers

INVARIANTS:
    random_number(a, b) ∈ [a, b)
    random_int(a, b)    ∈ [a, b], integral
"""

import random

from hypothesis import given, settings
from hypothesis import strategies as st

from mockserver.random_values import random_int, random_number


class TestRandomNumber:

    @given(st.integers(min_value=-10**6, max_value=10**6), st.integers(min_value=1, max_value=10**6))
    @settings(max_examples=100)
    def test_within_half_open_range(self, start, width):
        value = random_number(start, start + width)
        assert start <= value <= start + width

    def test_degenerate_range_returns_start(self):
        assert random_number(5, 5) == 5


class TestRandomInt:

    @given(st.integers(min_value=-1000, max_value=1000), st.integers(min_value=0, max_value=1000))
    @settings(max_examples=100)
    def test_within_closed_range(self, start, width):
        value = random_int(start, start + width)
        assert isinstance(value, int)
        assert start <= value <= start + width

    def test_both_bounds_reachable(self):
        random.seed(7)
        seen = {random_int(1, 3) for _ in range(500)}
        assert seen == {1, 2, 3}

    def test_single_value_range(self):
        assert all(random_int(4, 4) == 4 for _ in range(50))
