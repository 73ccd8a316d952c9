import random

import pytest

from decfp import Decimal128


# -----------------------------
# Shared helpers
# -----------------------------

SEED = 20260101


@pytest.fixture
def rng():
    """A seeded generator, so property sweeps are reproducible."""
    return random.Random(SEED)


def _digits(rng, lo, hi):
    return ''.join(rng.choice('0123456789') for _ in range(rng.randint(lo, hi)))


@pytest.fixture
def random_literal(rng):
    """Plain decimal literals with up to 10 integer and 10 fractional digits.

    Small enough that sums and products of two of them never need rounding
    to more than 34 digits as integers.
    """
    def make():
        sign = rng.choice(['', '-', '+'])
        integer = _digits(rng, 1, 10)
        fraction = _digits(rng, 0, 10)
        if fraction:
            return sign + integer + '.' + fraction
        return sign + integer
    return make


@pytest.fixture
def random_decimal(random_literal):
    def make():
        return Decimal128(random_literal())
    return make
