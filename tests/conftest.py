# tests/conftest.py
"""
Shared program images and helpers for the intcode test suite.
"""

import pytest

from intcode import BIGINT, INT32, INT64, Machine


# ── Program images ───────────────────────────────────────────────

# (initial image, memory after running to the end)
ADD_MUL_PROGRAMS = [
    ([1, 9, 10, 3, 2, 3, 11, 0, 99, 30, 40, 50],
     [3500, 9, 10, 70, 2, 3, 11, 0, 99, 30, 40, 50]),
    ([1, 0, 0, 0, 99], [2, 0, 0, 0, 99]),
    ([2, 3, 0, 3, 99], [2, 3, 0, 6, 99]),
    ([2, 4, 4, 5, 99, 0], [2, 4, 4, 5, 99, 9801]),
    ([1, 1, 1, 4, 99, 5, 6, 0, 99], [30, 1, 1, 4, 2, 5, 6, 0, 99]),
]

ECHO = [3, 0, 4, 0, 99]

QUINE = [109, 1, 204, -1, 1001, 100, 1, 100, 1008, 100, 16, 101, 1006, 101, 0, 99]

# 999 below 8, 1000 at 8, 1001 above
COMPARE_TO_EIGHT = [
    3, 21, 1008, 21, 8, 20, 1005, 20, 22, 107, 8, 21, 20, 1006, 20, 31,
    1106, 0, 36, 98, 0, 0, 1002, 21, 125, 20, 4, 20, 1105, 1, 46, 104,
    999, 1105, 1, 46, 1101, 1000, 1, 20, 4, 20, 1105, 1, 46, 98, 99,
]

AMPLIFIER = [3, 15, 3, 16, 1002, 16, 10, 16, 1, 16, 15, 15, 4, 15, 99, 0, 0]

FEEDBACK_AMPLIFIER = [
    3, 26, 1001, 26, -4, 26, 3, 27, 1002, 27, 2, 27, 1, 27, 26,
    27, 4, 27, 1001, 28, -1, 28, 1005, 28, 6, 99, 0, 0, 5,
]

# Reads x then y; outputs 1 when x >= 2*y + 3, else 0.  Straight-line code
# (no jumps), so it runs over the symbolic domain.
BOUNDARY = [
    3, 23,                  # x  -> [23]
    3, 24,                  # y  -> [24]
    1002, 24, 2, 25,        # [25] = y * 2
    1001, 25, 3, 25,        # [25] = [25] + 3
    7, 23, 25, 26,          # [26] = x < [25]
    1008, 26, 0, 27,        # [27] = [26] == 0
    4, 27,
    99,
    0, 0, 0, 0, 0,
]


def boundary_reference(x, y):
    return 1 if x >= 2 * y + 3 else 0


# ── Helpers ──────────────────────────────────────────────────────

def run(image, inputs=(), domain=INT64):
    """Run ``image`` to the end and return its outputs."""
    return Machine(image, domain).execute_to_end(inputs)


def find_upper_boundary(known_good, predicate):
    """Smallest n > known_good with ``predicate(n)`` false.

    ``predicate`` must be true up to some point and false after it.
    Doubles until it overshoots, then bisects.
    """
    if known_good == 0:
        if not predicate(1):
            return 1
        known_good = 1
    upper_false = 2 * known_good
    while predicate(upper_false):
        upper_false *= 2
    lower_true = known_good
    while lower_true + 1 < upper_false:
        mid = (upper_false - lower_true) // 2 + lower_true
        if predicate(mid):
            lower_true = mid
        else:
            upper_false = mid
    return upper_false


# ── Fixtures ─────────────────────────────────────────────────────

@pytest.fixture(params=[INT32, INT64, BIGINT], ids=lambda d: d.name)
def concrete_domain(request):
    return request.param


@pytest.fixture
def echo_machine():
    return Machine(ECHO, INT64)
