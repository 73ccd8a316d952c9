"""Emulated IEEE 754-2008 decimal floating-point arithmetic.

A Decimal128 is NaN, a signed infinity, or a signed finite magnitude held as a
DigitSequence. Arithmetic between finite values is computed exactly with
rationals, then rendered back to digits and parsed again, so every result
passes through the same rounding and validation as a literal.
"""

import logging
import math
import re
import typing
from enum import IntEnum, unique

import gmpy2 as gmp

from ..engine import utils
from ..engine import limits
from ..engine.digital import DigitSequence
from ..engine.ops import OP
from .evalctx import DecimalCtx, decimal_ctx, rounding_mode


logger = logging.getLogger(__name__)


@unique
class Kind(IntEnum):
    FINITE = 0
    INFINITE = 1
    NAN = 2


# Literal grammars, tried in order; each is compiled once.
_digit_groups = r'[0-9]+(?:_[0-9]+)*'

_nan_re = re.compile(r'([+-]?)nan', re.IGNORECASE)
_inf_re = re.compile(r'([+-]?)inf(?:inity)?', re.IGNORECASE)
#                       1       2              3                   4
_exp_re = re.compile(r'([+-]?)([1-9][0-9]*)(?:\.([0-9]+))?[eE]([+-]?[1-9][0-9]*)')
#                       1          2                         3                4
_dec_re = re.compile(r'([+-]?)(?:(' + _digit_groups + r')(?:\.(' + _digit_groups + r'))?|\.(' + _digit_groups + r'))')


def _parse_nan(m, ctx):
    return Kind.NAN, m.group(1) == '-', None

def _parse_inf(m, ctx):
    return Kind.INFINITE, m.group(1) == '-', None

def _parse_exp(m, ctx):
    """The exponent places the point within the mantissa's digits: dddEe is
    0.ddd * 10**e for e > 0 and 0.ddd * 10**(e + 1) for e < 0.
    """
    sign, lead, frac, e = m.groups()
    digits = lead + (frac or '')
    e = int(e)

    # the leading digit is nonzero, so the exponent of the result is known up front;
    # rounding can only move it up by one, so anything farther out is rejected before
    # building a huge string of zeros
    exp = e + 1 if e < 0 else e
    if exp > ctx.emax or exp < ctx.emin - 1:
        raise utils.ExponentError('exponent {} of {} is outside of [{}, {}]'
                                  .format(exp, m.group(0), ctx.emin, ctx.emax))

    if e < 0:
        integer, fraction = '', ('0' * (-e - 1)) + digits
    elif e == 0:
        integer, fraction = lead, frac or ''
    elif e >= len(digits):
        integer, fraction = digits + ('0' * (e - len(digits))), ''
    else:
        integer, fraction = digits[:e], digits[e:]

    return Kind.FINITE, sign == '-', DigitSequence(integer, fraction)

def _parse_dec(m, ctx):
    sign, integer, fraction, only_fraction = m.groups()
    if integer is None:
        integer, fraction = '', only_fraction
    integer = integer.replace('_', '')
    fraction = (fraction or '').replace('_', '')
    return Kind.FINITE, sign == '-', DigitSequence(integer, fraction)

_grammars = (
    (_nan_re, _parse_nan),
    (_inf_re, _parse_inf),
    (_exp_re, _parse_exp),
    (_dec_re, _parse_dec),
)

def _classify(s, ctx):
    for regex, parse in _grammars:
        m = regex.fullmatch(s)
        if m is not None:
            return parse(m, ctx)
    raise utils.FormatError('invalid decimal literal {}'.format(repr(s)))


def _check_digits(digits, negative, ctx, literal=None):
    """Round a finite magnitude to the context and check the format limits.
    Non-integers with too many digits are rounded; integers are rejected.
    """
    if not digits.is_integer() and digits.significant_digits > ctx.p:
        rounded = digits.round_significant(ctx.p, ctx.rm, negative)
        logger.debug('rounded %s to %d significant digits: %s', literal or str(digits), ctx.p, str(rounded))
        digits = rounded

    exp = digits.exponent
    if not ctx.exponent_in_range(exp):
        raise utils.ExponentError('exponent {} of {} is outside of [{}, {}]'
                                  .format(exp, literal or str(digits), ctx.emin, ctx.emax))

    if digits.is_integer() and digits.significant_digits > ctx.p:
        raise utils.PrecisionError('integer {} has {} significant digits, more than {}'
                                   .format(literal or str(digits), digits.significant_digits, ctx.p))

    return digits


class Decimal128(object):

    _kind : Kind = Kind.FINITE
    _negative : bool = False
    # only finite values have digits
    _digits : typing.Optional[DigitSequence] = DigitSequence()

    _ctx : DecimalCtx = decimal_ctx(*limits.DECIMAL128)

    @property
    def ctx(self):
        """The context this value was created in.
        If a computation takes place between two values, then it will either
        use a provided context (which will be recorded on the result) or the
        widest of the parent contexts if none is provided.
        """
        return self._ctx

    @property
    def kind(self):
        return self._kind

    @property
    def negative(self):
        """The sign bit - is this value negative? NaN and zeros carry a sign too."""
        return self._negative

    @property
    def isnan(self):
        """Is this value NaN?"""
        return self._kind is Kind.NAN

    @property
    def isinf(self):
        """Is this value infinite?"""
        return self._kind is Kind.INFINITE

    @property
    def isfinite(self):
        """Is this value a finite real number, i.e. not an infinity or NaN?"""
        return self._kind is Kind.FINITE

    @property
    def digits(self):
        """The unsigned magnitude as a DigitSequence, or None for infinities and NaN."""
        return self._digits

    def __init__(self, x=None, ctx=None):
        """Create a new decimal from a string literal, an int, or another decimal.
        Raises FormatError for text that is not a literal, ExponentError if the
        exponent is out of range, and PrecisionError for integers that need too many
        digits. Non-integers with too many digits are rounded to the context's precision.
        """
        if ctx is None:
            if isinstance(x, Decimal128):
                ctx = x.ctx
            else:
                ctx = type(self)._ctx

        if x is None:
            kind, negative, digits = Kind.FINITE, False, DigitSequence()
            literal = '0'
        elif isinstance(x, Decimal128):
            kind, negative, digits = x._kind, x._negative, x._digits
            literal = x.to_string()
        elif isinstance(x, bool):
            raise TypeError('cannot convert {} to {}'.format(repr(x), type(self).__name__))
        elif isinstance(x, int):
            # str() of a Python int is limited in length; GMP is not
            literal = str(gmp.mpz(x))
            kind, negative, digits = _classify(literal, ctx)
        elif isinstance(x, str):
            literal = x
            kind, negative, digits = _classify(literal, ctx)
        else:
            raise TypeError('cannot convert {} to {}'.format(repr(x), type(self).__name__))

        if kind is Kind.FINITE:
            digits = _check_digits(digits, negative, ctx, literal=literal)

        self._kind = kind
        self._negative = negative
        self._digits = digits
        self._ctx = decimal_ctx(ctx.p, ctx.emax, rm=ctx.rm, round_rm=ctx.round_rm)

    @classmethod
    def _make(cls, kind, negative, digits, ctx):
        x = cls.__new__(cls)
        x._kind = kind
        x._negative = negative
        x._digits = digits if kind is Kind.FINITE else None
        x._ctx = ctx
        return x

    @classmethod
    def _nan(cls, ctx):
        return cls._make(Kind.NAN, False, None, ctx)

    @classmethod
    def _inf(cls, negative, ctx):
        return cls._make(Kind.INFINITE, negative, None, ctx)

    @classmethod
    def _zero(cls, negative, ctx):
        return cls._make(Kind.FINITE, negative, DigitSequence(), ctx)

    @classmethod
    def _from_digits(cls, negative, digits, ctx):
        return cls._make(Kind.FINITE, negative, _check_digits(digits, negative, ctx), ctx)

    @classmethod
    def _from_rational(cls, r, ctx):
        """Lower an exact result back to a decimal in ctx.
        Integers are rendered exactly. Anything else is rendered with one guard digit
        past the precision, plus a sticky 1 if the rendering was inexact, so that
        parsing performs a single correct rounding.
        """
        if r.is_integer():
            return cls(r.to_integer_string(), ctx=ctx)

        text, inexact = r.to_decimal_places(ctx.p + limits.GUARD_DIGITS)
        if inexact:
            if '.' not in text:
                text += '.'
            text += '1'
            logger.debug('inexact result %s rendered as %s', str(r), text)
        return cls(text, ctx=ctx)

    @classmethod
    def _select_context(cls, *args, ctx=None):
        if ctx is not None:
            return decimal_ctx(ctx.p, ctx.emax, rm=ctx.rm, round_rm=ctx.round_rm)
        else:
            p = max((x.ctx.p for x in args if isinstance(x, cls)))
            emax = max((x.ctx.emax for x in args if isinstance(x, cls)))
            # rounding modes follow the left operand
            first = args[0].ctx
            return decimal_ctx(p, emax, rm=first.rm, round_rm=first.round_rm)

    def _coerce(self, other):
        if isinstance(other, Decimal128):
            return other
        return type(self)(other, ctx=self.ctx)

    def _special(self, op, other, result):
        logger.debug('%s(%s, %s) resolved to %s without arithmetic',
                     op.name, self.to_string(), other.to_string(), result.to_string())
        return result

    def __repr__(self):
        return '{}({})'.format(type(self).__name__, repr(self.to_string()))

    def __str__(self):
        return self.to_string()

    # rendering

    def to_string(self):
        """Plain notation: -?[0-9]+(.[0-9]+)?, NaN, Infinity or -Infinity."""
        if self.isnan:
            return 'NaN'
        elif self.isinf:
            return '-Infinity' if self._negative else 'Infinity'
        else:
            return ('-' if self._negative else '') + str(self._digits)

    def to_exponential_string(self):
        """The significand and the digit-sequence exponent, as in 1234E2 for 12.34.
        Below one the exponent is one less, 12E-3 for 0.0012, so that every
        nonzero result parses back to the same value.
        """
        if not self.isfinite:
            return self.to_string()
        exp = self._digits.exponent
        if not (self._digits.integer or self._digits.is_zero()):
            exp -= 1
        return '{}{}E{:d}'.format('-' if self._negative else '',
                                  self._digits.significand or '0',
                                  exp)

    # predicates

    def is_zero(self):
        return self.isfinite and self._digits.is_zero()

    def is_integer(self):
        return self.isfinite and self._digits.is_integer()

    def signbit(self):
        return self._negative

    def to_rational(self):
        """The exact signed value of a finite decimal."""
        if not self.isfinite:
            raise utils.InvalidArgumentError('{} has no rational value'.format(self.to_string()))
        r = self._digits.to_rational()
        if self._negative:
            return r.neg()
        else:
            return r

    # comparison

    def cmp(self, other):
        """Compare to another decimal. The ordering returned is:
            -1 iff self < other
             0 iff self = other
             1 iff self > other
          None iff self and other are unordered
        """
        other = self._coerce(other)

        if self.isnan or other.isnan:
            return None

        if self.isinf:
            if other.isinf and self.negative == other.negative:
                return 0
            elif self.negative:
                return -1
            else:
                return 1
        elif other.isinf:
            if other.negative:
                return 1
            else:
                return -1

        return self.to_rational().cmp(other.to_rational())

    def _is_operand(self, other):
        return isinstance(other, Decimal128) or (isinstance(other, int) and not isinstance(other, bool))

    def __lt__(self, other):
        if not self._is_operand(other):
            return NotImplemented
        order = self.cmp(other)
        return order is not None and order < 0

    def __le__(self, other):
        if not self._is_operand(other):
            return NotImplemented
        order = self.cmp(other)
        return order is not None and order <= 0

    def __eq__(self, other):
        if not self._is_operand(other):
            return NotImplemented
        order = self.cmp(other)
        return order is not None and order == 0

    def __ne__(self, other):
        if not self._is_operand(other):
            return NotImplemented
        order = self.cmp(other)
        return order is None or order != 0

    def __ge__(self, other):
        if not self._is_operand(other):
            return NotImplemented
        order = self.cmp(other)
        return order is not None and order >= 0

    def __gt__(self, other):
        if not self._is_operand(other):
            return NotImplemented
        order = self.cmp(other)
        return order is not None and order > 0

    def __hash__(self):
        if self.isnan:
            return hash('NaN')
        elif self.isinf:
            return hash(-math.inf if self._negative else math.inf)
        else:
            return hash(self.to_rational())

    # arithmetic

    def add(self, other, ctx=None):
        other = self._coerce(other)
        ctx = self._select_context(self, other, ctx=ctx)

        if self.isnan or other.isnan:
            return self._special(OP.add, other, self._nan(ctx))
        if self.isinf:
            if other.isinf and self.negative != other.negative:
                return self._special(OP.add, other, self._nan(ctx))
            return self._special(OP.add, other, self._inf(self.negative, ctx))
        if other.isinf:
            return self._special(OP.add, other, self._inf(other.negative, ctx))

        result = self._from_rational(self.to_rational().add(other.to_rational()), ctx)
        if result.is_zero():
            return self._zero(self.negative and other.negative, ctx)
        return result

    def subtract(self, other, ctx=None):
        other = self._coerce(other)
        ctx = self._select_context(self, other, ctx=ctx)

        if self.isnan or other.isnan:
            return self._special(OP.sub, other, self._nan(ctx))
        if self.isinf:
            if other.isinf and self.negative == other.negative:
                return self._special(OP.sub, other, self._nan(ctx))
            return self._special(OP.sub, other, self._inf(self.negative, ctx))
        if other.isinf:
            return self._special(OP.sub, other, self._inf(not other.negative, ctx))

        result = self._from_rational(self.to_rational().sub(other.to_rational()), ctx)
        if result.is_zero():
            return self._zero(self.negative and not other.negative, ctx)
        return result

    def multiply(self, other, ctx=None):
        other = self._coerce(other)
        ctx = self._select_context(self, other, ctx=ctx)
        negative = self.negative != other.negative

        if self.isnan or other.isnan:
            return self._special(OP.mul, other, self._nan(ctx))
        if self.isinf or other.isinf:
            if self.is_zero() or other.is_zero():
                return self._special(OP.mul, other, self._nan(ctx))
            return self._special(OP.mul, other, self._inf(negative, ctx))

        result = self._from_rational(self.to_rational().mul(other.to_rational()), ctx)
        if result.is_zero():
            return self._zero(negative, ctx)
        return result

    def divide(self, other, ctx=None):
        other = self._coerce(other)
        ctx = self._select_context(self, other, ctx=ctx)
        negative = self.negative != other.negative

        if self.isnan or other.isnan or other.is_zero():
            return self._special(OP.div, other, self._nan(ctx))
        if self.isinf:
            if other.isinf:
                return self._special(OP.div, other, self._nan(ctx))
            return self._special(OP.div, other, self._inf(negative, ctx))
        if other.isinf:
            return self._special(OP.div, other, self._zero(negative, ctx))

        result = self._from_rational(self.to_rational().div(other.to_rational()), ctx)
        if result.is_zero():
            return self._zero(negative, ctx)
        return result

    sub = subtract
    mul = multiply
    div = divide

    def remainder(self, other, ctx=None):
        """The remainder of division by |other|, which is never negative:
        self - |other| * floor(self / |other|).
        """
        other = self._coerce(other)
        ctx = self._select_context(self, other, ctx=ctx)

        if self.isnan or other.isnan or self.isinf or other.is_zero():
            return self._special(OP.remainder, other, self._nan(ctx))
        if other.isinf:
            return self._special(OP.remainder, other, type(self)(self, ctx=ctx))

        x = self.to_rational()
        modulus = other.to_rational().abs()
        return self._from_rational(x.sub(modulus.mul(x.div(modulus).floor())), ctx)

    def reciprocal(self, ctx=None):
        return type(self)(1, ctx=self.ctx).divide(self, ctx=ctx)

    def pow(self, other, ctx=None):
        """Raise to an integer power by repeated multiplication.
        Negative powers are the reciprocal of the positive power.
        """
        other = self._coerce(other)
        ctx = self._select_context(self, other, ctx=ctx)

        if self.isnan or other.isnan:
            return self._special(OP.pow, other, self._nan(ctx))
        if not other.is_integer():
            raise utils.InvalidArgumentError('exponent {} is not an integer'.format(other.to_string()))

        if other.negative and not other.is_zero():
            return self.pow(other.negate(), ctx=ctx).reciprocal(ctx=ctx)

        result = type(self)(1, ctx=ctx)
        for _ in range(int(other)):
            result = result.multiply(self, ctx=ctx)
        return result

    # sign manipulation

    def abs(self):
        return self._make(self._kind, False, self._digits, self.ctx)

    def negate(self):
        return self._make(self._kind, not self._negative, self._digits, self.ctx)

    neg = negate

    # rounding to integers and places

    def truncate(self):
        """Drop the fractional part, toward zero. Keeps the sign, so -0.5 truncates to -0."""
        if not self.isfinite:
            return self
        return self._from_digits(self._negative, self._digits.integer_part(), self.ctx)

    def ceil(self):
        if not self.isfinite or self.is_integer():
            return self
        if self._negative:
            return self.truncate()
        return self._from_digits(False, self._digits.increment_places(0), self.ctx)

    def floor(self):
        """Largest integer not greater than this value, so -1.5 floors to -2."""
        if not self.isfinite or self.is_integer():
            return self
        if self._negative:
            return self._from_digits(True, self._digits.increment_places(0), self.ctx)
        return self.truncate()

    def to_decimal_places(self, n):
        """Keep n digits after the point. If anything is cut off, the last kept digit
        goes up by one, however small the cut-off part was: 3.335 and 3.331 both give 3.34.
        """
        if not utils.is_count(n):
            raise utils.InvalidArgumentError('number of decimal places must be a non-negative integer, got {}'
                                             .format(repr(n)))
        if not self.isfinite:
            return self
        return self._from_digits(self._negative, self._digits.increment_places(int(n)), self.ctx)

    def round(self, n=0, rm=None):
        """Round to n digits after the point, with rounding mode rm
        (an RM or a mode name; the context's round_rm, half-expand, by default).
        """
        if not utils.is_count(n, limit=utils.MAX_SAFE_INTEGER):
            raise utils.InvalidArgumentError('number of decimal places must be a non-negative safe integer, got {}'
                                             .format(repr(n)))
        if rm is None:
            rm = self.ctx.round_rm
        else:
            rm = rounding_mode(rm)

        if not self.isfinite:
            return self
        return self._from_digits(self._negative, self._digits.round_places(int(n), rm, self._negative), self.ctx)

    # Python number protocol

    def __bool__(self):
        return not self.is_zero()

    def __int__(self):
        if self.isnan:
            raise ValueError('cannot convert NaN to integer')
        elif self.isinf:
            raise OverflowError('cannot convert {} to integer'.format(self.to_string()))
        i = self._digits.integer_part().to_rational().numerator
        if self._negative:
            return -i
        else:
            return i

    def __float__(self):
        if self.isnan:
            return math.nan
        elif self.isinf:
            return -math.inf if self._negative else math.inf
        return math.copysign(float(self._digits.to_rational()), -1.0 if self._negative else 1.0)

    def __neg__(self):
        return self.negate()

    def __pos__(self):
        return self

    def __abs__(self):
        return self.abs()

    def __add__(self, other):
        if not self._is_operand(other):
            return NotImplemented
        return self.add(other)

    def __radd__(self, other):
        if not self._is_operand(other):
            return NotImplemented
        return self._coerce(other).add(self)

    def __sub__(self, other):
        if not self._is_operand(other):
            return NotImplemented
        return self.subtract(other)

    def __rsub__(self, other):
        if not self._is_operand(other):
            return NotImplemented
        return self._coerce(other).subtract(self)

    def __mul__(self, other):
        if not self._is_operand(other):
            return NotImplemented
        return self.multiply(other)

    def __rmul__(self, other):
        if not self._is_operand(other):
            return NotImplemented
        return self._coerce(other).multiply(self)

    def __truediv__(self, other):
        if not self._is_operand(other):
            return NotImplemented
        return self.divide(other)

    def __rtruediv__(self, other):
        if not self._is_operand(other):
            return NotImplemented
        return self._coerce(other).divide(self)

    def __mod__(self, other):
        if not self._is_operand(other):
            return NotImplemented
        return self.remainder(other)

    def __rmod__(self, other):
        if not self._is_operand(other):
            return NotImplemented
        return self._coerce(other).remainder(self)

    def __pow__(self, other):
        if not self._is_operand(other):
            return NotImplemented
        return self.pow(other)
