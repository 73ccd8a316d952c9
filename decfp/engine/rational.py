"""Exact rational arithmetic, implemented with GMP as a backend.

Rationals are used as the lossless intermediate form of decimal arithmetic:
finite operands are lifted to exact fractions, combined, and then rendered
back to a bounded number of decimal digits.
"""


import gmpy2 as gmp

from . import utils


# helpful constants we don't need to constantly redefine
_mpz_10 = gmp.mpz(10)

def _pow10(k):
    return _mpz_10 ** k

def _ge_pow10(num, den, k):
    """Is num / den >= 10**k? (num, den > 0)"""
    if k >= 0:
        return num >= den * _pow10(k)
    else:
        return num * _pow10(-k) >= den


class Rat(object):
    """Exact fraction numerator / denominator. Never modified after creation."""

    _q = gmp.mpq(0)

    @property
    def numerator(self):
        """Signed numerator, in lowest terms."""
        return int(self._q.numerator)

    @property
    def denominator(self):
        """Positive denominator, in lowest terms."""
        return int(self._q.denominator)

    def __init__(self, numerator=0, denominator=1):
        if denominator == 0:
            raise ZeroDivisionError('zero denominator for {}'.format(repr(numerator)))
        self._q = gmp.mpq(numerator, denominator)

    @classmethod
    def _from_mpq(cls, q):
        r = cls.__new__(cls)
        r._q = q
        return r

    @classmethod
    def scaled(cls, c, tens):
        """The exact value c * 10**tens."""
        if tens >= 0:
            return cls._from_mpq(gmp.mpq(c * _pow10(tens)))
        else:
            return cls._from_mpq(gmp.mpq(c, _pow10(-tens)))

    def __repr__(self):
        return '{}({}, {})'.format(type(self).__name__, repr(self.numerator), repr(self.denominator))

    def __str__(self):
        if self._q.denominator == 1:
            return str(self._q.numerator)
        return '{}/{}'.format(self._q.numerator, self._q.denominator)

    def __float__(self):
        # int / int is correctly rounded; raises OverflowError past the float range
        return int(self._q.numerator) / int(self._q.denominator)

    def __eq__(self, other):
        if not isinstance(other, Rat):
            return NotImplemented
        return self._q == other._q

    def __hash__(self):
        return hash(self._q)

    def is_zero(self):
        return self._q == 0

    def is_integer(self):
        return self._q.denominator == 1

    def sign(self):
        return (self._q > 0) - (self._q < 0)

    # arithmetic; every operation returns a new rational

    def add(self, other):
        return Rat._from_mpq(self._q + other._q)

    def sub(self, other):
        return Rat._from_mpq(self._q - other._q)

    def mul(self, other):
        return Rat._from_mpq(self._q * other._q)

    def div(self, other):
        if other._q == 0:
            raise ZeroDivisionError('division of {} by zero'.format(str(self)))
        return Rat._from_mpq(self._q / other._q)

    def neg(self):
        return Rat._from_mpq(-self._q)

    def abs(self):
        return Rat._from_mpq(abs(self._q))

    def floor(self):
        """Largest integer not greater than this value."""
        return Rat._from_mpq(gmp.mpq(gmp.f_div(self._q.numerator, self._q.denominator)))

    def cmp(self, other):
        """Total order: -1, 0 or 1. Compares by cross-multiplication, so it is always exact."""
        lhs = self._q.numerator * other._q.denominator
        rhs = other._q.numerator * self._q.denominator
        return (lhs > rhs) - (lhs < rhs)

    def to_integer_string(self):
        """Exact decimal string of an integral value.
        GMP has no limit on the number of digits it will convert.
        """
        if self._q.denominator != 1:
            raise utils.InvalidArgumentError('{} is not an integer'.format(str(self)))
        return str(self._q.numerator)

    def to_decimal_places(self, n):
        """Render this value as a decimal string with exactly n significant digits,
        truncating toward zero. Returns the string and an inexact flag, which is True
        if any nonzero digits were cut off. Zero renders as '0'.
        """
        if n < 1:
            raise utils.InvalidArgumentError('cannot render {} with {} significant digits'
                                             .format(str(self), repr(n)))

        num = abs(self._q.numerator)
        den = self._q.denominator
        if num == 0:
            return '0', False

        sign = '-' if self._q < 0 else ''

        # find k such that 10**(k-1) <= num / den < 10**k;
        # comparing digit counts is off by at most one
        k = len(str(num)) - len(str(den))
        if _ge_pow10(num, den, k):
            k += 1

        shift = n - k
        if shift >= 0:
            c, rem = gmp.f_divmod(num * _pow10(shift), den)
        else:
            c, rem = gmp.f_divmod(num, den * _pow10(-shift))

        s = str(c)
        tens = k - n
        if tens >= 0:
            text = s + ('0' * tens)
        elif len(s) <= -tens:
            text = '0.' + ('0' * -(len(s) + tens)) + s
        else:
            text = s[:tens] + '.' + s[tens:]

        return sign + text, rem != 0
