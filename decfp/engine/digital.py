"""Universal representation for digital numbers (in base 10)"""

import typing

import gmpy2 as gmp

from . import utils
from .ops import RM
from .rational import Rat


# Deciding digit when nothing nonzero was discarded; never stored in a sequence.
NO_DIGIT = -1

Digits = typing.Tuple[int, ...]


def _to_digits(x) -> Digits:
    if isinstance(x, str):
        if x.strip('0123456789'):
            raise ValueError('not a digit string: {}'.format(repr(x)))
        return tuple(ord(ch) - 48 for ch in x)
    digits = tuple(x)
    for d in digits:
        if not (isinstance(d, int) and 0 <= d <= 9):
            raise ValueError('not a digit: {}'.format(repr(d)))
    return digits

def _digits_to_int(digits: typing.Sequence[int]) -> int:
    if not digits:
        return 0
    return gmp.mpz(''.join(str(d) for d in digits))

def _carry(digits: typing.List[int]) -> typing.List[int]:
    """Propagate a digit-or-ten in the last place leftward, in place.
    A carry out of the most significant digit adds a new leading 1.
    """
    i = len(digits) - 1
    while digits[i] == 10:
        digits[i] = 0
        if i == 0:
            digits.insert(0, 1)
            break
        i -= 1
        digits[i] += 1
    return digits


class DigitSequence(object):

    # the magnitude is the integer digits, then a point, then the fractional digits;
    # the integer part never has leading zeros, the fractional part never has trailing zeros
    _integer : Digits = ()
    _fraction : Digits = ()

    # there is no sign: it is stored by the owning number

    @property
    def integer(self):
        """Digits of the integer part, most significant first. Empty for magnitudes below one."""
        return self._integer

    @property
    def fraction(self):
        """Digits of the fractional part, most significant first."""
        return self._fraction

    @property
    def significand(self):
        """The significant digits as a string, without a point.
        Leading and trailing zeros are removed, so zero has the empty significand.
        The magnitude is exactly int(significand) * 10**(exponent - significant_digits).
        """
        return ''.join(str(d) for d in self._integer + self._fraction).strip('0')

    @property
    def significant_digits(self):
        """Number of digits in the significand; 0 for zero."""
        return len(self.significand)

    @property
    def exponent(self):
        """Length of the integer part, or for magnitudes below one,
        minus the number of zeros between the point and the first nonzero digit.
        Equivalently, the magnitude is 0.ddd... * 10**exponent. Zero has exponent 0.
        """
        if self._integer:
            return len(self._integer)
        for i, d in enumerate(self._fraction):
            if d != 0:
                return -i
        return 0

    def is_zero(self):
        return not (self._integer or self._fraction)

    def is_integer(self):
        """Is there nothing after the point?"""
        return not self._fraction

    def __init__(self, integer='', fraction=''):
        """Create a new digit sequence from the digits of the integer and fractional parts,
        given as strings or as sequences of ints. Extra leading and trailing zeros are dropped.
        """
        i = _to_digits(integer)
        f = _to_digits(fraction)

        start = 0
        while start < len(i) and i[start] == 0:
            start += 1
        end = len(f)
        while end > 0 and f[end - 1] == 0:
            end -= 1

        self._integer = i[start:]
        self._fraction = f[:end]

    @classmethod
    def from_scaled(cls, c, tens):
        """The digit sequence for the magnitude c * 10**tens, c >= 0."""
        if c < 0:
            raise ValueError('cannot create a digit sequence for negative c={}'.format(repr(c)))
        s = str(c)
        if tens >= 0:
            return cls(s + ('0' * tens), '')
        elif len(s) <= -tens:
            return cls('', ('0' * -(len(s) + tens)) + s)
        else:
            return cls(s[:tens], s[tens:])

    def __repr__(self):
        return '{}(integer={}, fraction={})'.format(
            type(self).__name__,
            repr(''.join(str(d) for d in self._integer)),
            repr(''.join(str(d) for d in self._fraction)),
        )

    def __str__(self):
        if self._integer:
            s = ''.join(str(d) for d in self._integer)
        else:
            s = '0'
        if self._fraction:
            s += '.' + ''.join(str(d) for d in self._fraction)
        return s

    def __eq__(self, other):
        if not isinstance(other, DigitSequence):
            return NotImplemented
        return self._integer == other._integer and self._fraction == other._fraction

    def __hash__(self):
        return hash((self._integer, self._fraction))

    def integer_part(self):
        """Drop the fractional part."""
        return type(self)(self._integer, '')

    def to_rational(self):
        """The exact magnitude, as significand * 10**(exponent - significant_digits)."""
        significand = self.significand
        return Rat.scaled(_digits_to_int(_to_digits(significand)),
                          self.exponent - len(significand))

    # Rounding is broken up the same way for every mode:
    #  - split the digits into the kept digits and the discarded tail
    #  - decide on the last kept digit with the rounding table
    #  - propagate any carry and rebuild the sequence

    @staticmethod
    def round_digit(d, r, rm, negative=False):
        """Round the kept digit d, given the deciding digit r (the first discarded digit),
        the rounding mode rm, and the sign of the number being rounded.
        Returns a digit-or-ten: d, or d + 1 (10 means a carry into the next place).
        If r is NO_DIGIT, nothing was discarded and d is always kept.
        """
        if not (0 <= d <= 9 and (0 <= r <= 9 or r == NO_DIGIT)):
            raise ValueError('cannot round digit {} with deciding digit {}'.format(repr(d), repr(r)))

        if r == NO_DIGIT:
            up = False
        elif rm is RM.CEILING:
            up = not negative
        elif rm is RM.FLOOR:
            up = negative
        elif rm is RM.EXPAND:
            up = True
        elif rm is RM.TRUNCATE:
            up = False
        elif rm is RM.HALF_EXPAND:
            up = r >= 5
        elif rm is RM.HALF_CEILING:
            up = r > 5 or (r == 5 and not negative)
        elif rm is RM.HALF_FLOOR:
            up = r > 5 or (r == 5 and negative)
        elif rm is RM.HALF_TRUNCATE:
            up = r > 5
        elif rm is RM.HALF_EVEN:
            up = r > 5 or (r == 5 and d % 2 == 1)
        else:
            raise utils.InvalidArgumentError('unknown rounding mode: {}'.format(repr(rm)))

        if up:
            return d + 1
        else:
            return d

    @classmethod
    def _round_kept(cls, kept, discarded, rm, negative):
        if any(discarded):
            r = discarded[0]
            if r == 5 and any(discarded[1:]):
                # above the halfway point
                r = 6
        else:
            r = NO_DIGIT

        digits = list(kept) or [0]
        digits[-1] = cls.round_digit(digits[-1], r, rm, negative)
        return _carry(digits)

    def round_places(self, n, rm=RM.HALF_EVEN, negative=False):
        """Round to at most n digits after the point."""
        if n < 0:
            raise utils.InvalidArgumentError('cannot round to {} places'.format(repr(n)))
        if len(self._fraction) <= n:
            return self

        kept = self._integer + self._fraction[:n]
        digits = self._round_kept(kept, self._fraction[n:], rm, negative)
        return type(self).from_scaled(_digits_to_int(digits), -n)

    def round_significant(self, p, rm=RM.HALF_EVEN, negative=False):
        """Round to at most p significant digits."""
        if p < 1:
            raise utils.InvalidArgumentError('cannot round to {} significant digits'.format(repr(p)))
        significand = _to_digits(self.significand)
        if len(significand) <= p:
            return self

        digits = self._round_kept(significand[:p], significand[p:], rm, negative)
        return type(self).from_scaled(_digits_to_int(digits), self.exponent - p)

    def increment_places(self, n):
        """Keep n digits after the point, adding one in the last kept place
        whenever anything is cut off, however small.
        """
        if n < 0:
            raise utils.InvalidArgumentError('cannot keep {} places'.format(repr(n)))
        if len(self._fraction) <= n:
            return self

        digits = list(self._integer + self._fraction[:n]) or [0]
        digits[-1] += 1
        return type(self).from_scaled(_digits_to_int(_carry(digits)), -n)
