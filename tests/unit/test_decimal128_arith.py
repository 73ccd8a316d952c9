import logging
import math
from fractions import Fraction

import pytest

from decfp import Decimal128, DecimalCtx, RM
from decfp.engine.utils import ExponentError, InvalidArgumentError, PrecisionError


def D(x) -> Decimal128:
    return Decimal128(x)


def _fraction(x: Decimal128) -> Fraction:
    r = x.to_rational()
    return Fraction(r.numerator, r.denominator)


# -----------------------------
# Worked examples
# -----------------------------

@pytest.mark.parametrize(
    "a,op,b,expected",
    [
        ("1.1", "add", "2.2", "3.3"),
        ("0.1", "add", "0.2", "0.3"),
        ("10", "divide", "4", "2.5"),
        ("-7", "remainder", "3", "2"),
        ("7", "remainder", "-3", "1"),
        ("-7.5", "remainder", "2", "0.5"),
        ("2", "pow", "10", "1024"),
        ("2", "pow", "-2", "0.25"),
        ("5", "multiply", "-2", "-10"),
        ("1.5", "subtract", "-2", "3.5"),
        ("1", "divide", "3", "0." + "3" * 34),
        ("2", "divide", "3", "0." + "6" * 33 + "7"),
        ("1", "divide", "8", "0.125"),
        ("12345678901234567890", "multiply", "0.1", "1234567890123456789"),
    ],
)
def test_examples(a, op, b, expected):
    result = getattr(D(a), op)(D(b))
    print(f"[{op}] {a} , {b} -> {result}")
    assert result.to_string() == expected


def test_short_names():
    assert D('3').sub(D('1')).to_string() == '2'
    assert D('3').mul(D('2')).to_string() == '6'
    assert D('3').div(D('2')).to_string() == '1.5'


def test_string_operands_are_coerced():
    assert D('10').divide('4').to_string() == '2.5'
    assert D('1.5').add(2).to_string() == '3.5'


def test_inexact_result_rounds_once():
    a = D('0.' + '1' * 33 + '2')
    # the 35th digit of the sum is a 5 with nothing after it: a tie, kept even
    assert a.add(D('5E-35')).to_string() == '0.' + '1' * 33 + '2'
    # a 5 followed by anything nonzero is past the tie
    assert a.add(D('5.000001E-35')).to_string() == '0.' + '1' * 33 + '3'


def test_division_rounds_to_nearest():
    x = D('1').divide(D('1.' + '0' * 33 + '2'))
    assert _fraction(x) == Fraction(int('9' * 33 + '8'), 10 ** 34)


def test_integer_result_too_wide():
    assert D('9' * 34).add(1).to_string() == '1' + '0' * 34
    with pytest.raises(PrecisionError):
        D('9' * 34).add(2)


def test_overflow_and_underflow():
    with pytest.raises(ExponentError):
        D('1E6144').multiply(10)
    with pytest.raises(ExponentError):
        D('1E-6144').divide(10)


def test_inexact_lowering_is_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger='decfp.arithmetic.decimal128'):
        D('1').divide(D('3'))
    assert 'inexact' in caplog.text


# -----------------------------
# Special values
# -----------------------------

@pytest.mark.parametrize("op", ["add", "subtract", "multiply", "divide", "remainder", "pow"])
def test_nan_absorbs(op):
    assert getattr(D('NaN'), op)(D('1')).isnan
    assert getattr(D('1'), op)(D('NaN')).isnan
    assert getattr(D('NaN'), op)(D('NaN')).isnan


@pytest.mark.parametrize(
    "a,op,b,expected",
    [
        ("inf", "add", "inf", "Infinity"),
        ("inf", "add", "-inf", "NaN"),
        ("inf", "add", "1", "Infinity"),
        ("1", "add", "-inf", "-Infinity"),
        ("inf", "subtract", "inf", "NaN"),
        ("inf", "subtract", "-inf", "Infinity"),
        ("1", "subtract", "inf", "-Infinity"),
        ("-inf", "subtract", "1", "-Infinity"),
        ("inf", "multiply", "-2", "-Infinity"),
        ("inf", "multiply", "0", "NaN"),
        ("0", "multiply", "-inf", "NaN"),
        ("-inf", "multiply", "-inf", "Infinity"),
        ("inf", "divide", "inf", "NaN"),
        ("-inf", "divide", "2", "-Infinity"),
        ("1", "divide", "inf", "0"),
        ("-1", "divide", "inf", "-0"),
        ("1", "divide", "0", "NaN"),
        ("0", "divide", "0", "NaN"),
        ("inf", "divide", "0", "NaN"),
        ("inf", "remainder", "1", "NaN"),
        ("1.5", "remainder", "inf", "1.5"),
        ("1", "remainder", "0", "NaN"),
    ],
)
def test_special_values(a, op, b, expected):
    result = getattr(D(a), op)(D(b))
    print(f"[special] {a} {op} {b} -> {result}")
    assert result.to_string() == expected


def test_special_values_are_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger='decfp.arithmetic.decimal128'):
        D('1').divide(D('0'))
    assert 'div' in caplog.text


@pytest.mark.parametrize(
    "a,op,b,expected",
    [
        ("-0", "add", "-0", "-0"),
        ("-0", "add", "0", "0"),
        ("1", "add", "-1", "0"),
        ("-1", "add", "1", "0"),
        ("-0", "subtract", "0", "-0"),
        ("0", "subtract", "0", "0"),
        ("-2", "multiply", "0", "-0"),
        ("-0", "multiply", "-3", "0"),
        ("0", "divide", "-5", "-0"),
    ],
)
def test_signed_zero(a, op, b, expected):
    assert getattr(D(a), op)(D(b)).to_string() == expected


# -----------------------------
# Algebraic properties
# -----------------------------

def test_commutative(random_decimal):
    for _ in range(200):
        a, b = random_decimal(), random_decimal()
        assert a.add(b).to_string() == b.add(a).to_string()
        assert a.multiply(b).to_string() == b.multiply(a).to_string()


def test_additive_identity(random_decimal):
    for _ in range(200):
        a = random_decimal()
        assert a.add(D('0')) == a
        assert a.subtract(a).is_zero()


def test_round_trip(random_literal):
    for _ in range(200):
        a = D(random_literal())
        b = D(a.to_string())
        assert a.cmp(b) == 0
        assert b.to_string() == a.to_string()


def test_sums_are_exact(random_decimal):
    for _ in range(200):
        a, b = random_decimal(), random_decimal()
        assert _fraction(a.add(b)) == _fraction(a) + _fraction(b)


# -----------------------------
# Rounding
# -----------------------------

@pytest.mark.parametrize(
    "rm,positive,negative",
    [
        (RM.CEILING,       "3", "-2"),
        (RM.FLOOR,         "2", "-3"),
        (RM.EXPAND,        "3", "-3"),
        (RM.TRUNCATE,      "2", "-2"),
        (RM.HALF_EVEN,     "2", "-2"),
        (RM.HALF_EXPAND,   "3", "-3"),
        (RM.HALF_CEILING,  "3", "-2"),
        (RM.HALF_FLOOR,    "2", "-3"),
        (RM.HALF_TRUNCATE, "2", "-2"),
    ],
)
def test_round_tie_all_modes(rm, positive, negative):
    assert D('2.5').round(0, rm).to_string() == positive
    assert D('-2.5').round(0, rm).to_string() == negative


def test_round_defaults_and_names():
    assert D('2.5').round().to_string() == '3'
    assert D('2.45').round(1).to_string() == '2.5'
    assert D('1.5').round(0, 'bankers').to_string() == '2'
    assert D('0.5').round(0, 'bankers').to_string() == '0'
    assert D('1.25').round(5).to_string() == '1.25'
    assert D('9.95').round(1).to_string() == '10'
    assert D('2.5').round(2.0).to_string() == '2.5'
    assert D('-inf').round(2).to_string() == '-Infinity'


def test_round_mode_from_context():
    ctx = DecimalCtx(props={'round': 'half-even'})
    assert D('2.5').round().to_string() == '3'
    assert Decimal128('2.5', ctx=ctx).round().to_string() == '2'


def test_round_mode_survives_arithmetic():
    x = Decimal128('2.5', ctx=DecimalCtx(round_rm='half-even'))
    for y in (x + 0, 0 + x, x * 1, x.subtract(D('0'))):
        print(f"[round_rm] {y} carries {y.ctx.round_rm.name}")
        assert y.ctx.round_rm is RM.HALF_EVEN
        assert y.round().to_string() == '2'


@pytest.mark.parametrize(
    "n,rm",
    [(-1, None), (2 ** 53, None), (1.5, None), (True, None), ("2", None), (0, "sideways")],
)
def test_round_bad_arguments(n, rm):
    with pytest.raises(InvalidArgumentError):
        D('2.5').round(n, rm)


@pytest.mark.parametrize(
    "text,n,expected",
    [
        ("3.335", 2, "3.34"),
        ("3.331", 2, "3.34"),
        ("-3.331", 2, "-3.34"),
        ("3.3", 2, "3.3"),
        ("9.999", 2, "10"),
        ("0.0001", 0, "1"),
        ("NaN", 2, "NaN"),
    ],
)
def test_to_decimal_places(text, n, expected):
    assert D(text).to_decimal_places(n).to_string() == expected


@pytest.mark.parametrize("n", [-1, 1.5, "1", None])
def test_to_decimal_places_bad_count(n):
    with pytest.raises(InvalidArgumentError):
        D('1.5').to_decimal_places(n)


@pytest.mark.parametrize(
    "text,floor,ceil,trunc",
    [
        ("-1.5", "-2", "-1", "-1"),
        ("1.5", "1", "2", "1"),
        ("-0.5", "-1", "-0", "-0"),
        ("0.5", "0", "1", "0"),
        ("3", "3", "3", "3"),
        ("-2.7", "-3", "-2", "-2"),
        ("0." + "9" * 34, "0", "1", "0"),
        ("inf", "Infinity", "Infinity", "Infinity"),
    ],
)
def test_floor_ceil_truncate(text, floor, ceil, trunc):
    x = D(text)
    assert x.floor().to_string() == floor
    assert x.ceil().to_string() == ceil
    assert x.truncate().to_string() == trunc


# -----------------------------
# Unary operations
# -----------------------------

def test_abs_and_negate():
    assert D('-1.5').abs().to_string() == '1.5'
    assert D('0').negate().to_string() == '-0'
    assert D('-inf').neg().to_string() == 'Infinity'
    nan = D('NaN').negate()
    assert nan.isnan and nan.signbit()


@pytest.mark.parametrize(
    "text,expected",
    [("4", "0.25"), ("-8", "-0.125"), ("0", "NaN"), ("inf", "0"), ("-inf", "-0")],
)
def test_reciprocal(text, expected):
    assert D(text).reciprocal().to_string() == expected


@pytest.mark.parametrize(
    "base,exponent,expected",
    [
        ("2", "0", "1"),
        ("-2", "3", "-8"),
        ("0", "0", "1"),
        ("10", "-2", "0.01"),
        ("1.5", "2", "2.25"),
        ("inf", "2", "Infinity"),
        ("0", "-1", "NaN"),
        ("NaN", "0.5", "NaN"),
    ],
)
def test_pow(base, exponent, expected):
    assert D(base).pow(D(exponent)).to_string() == expected


@pytest.mark.parametrize("exponent", ["0.5", "inf", "-inf"])
def test_pow_non_integer_exponent(exponent):
    with pytest.raises(InvalidArgumentError):
        D('2').pow(D(exponent))


# -----------------------------
# Comparison
# -----------------------------

@pytest.mark.parametrize(
    "a,b,expected",
    [
        ("1", "2", -1),
        ("2", "1", 1),
        ("-0", "0", 0),
        ("0.10", "0.1", 0),
        ("NaN", "1", None),
        ("1", "NaN", None),
        ("inf", "inf", 0),
        ("-inf", "inf", -1),
        ("inf", "1E100", 1),
        ("1", "-inf", 1),
        ("-1E-100", "-1E-101", -1),
    ],
)
def test_cmp(a, b, expected):
    assert D(a).cmp(D(b)) == expected


def test_nan_is_unordered():
    nan = D('NaN')
    assert not nan == nan
    assert nan != nan
    assert not nan < D('1')
    assert not nan >= D('1')


def test_comparison_operators():
    assert D('1.5') < D('2')
    assert D('2') <= 2
    assert D('2') == 2
    assert D('-3') > -4
    assert D('2') >= D('2.0')
    assert D('1') != D('1.1')
    assert (D('1') == '1') is False
    assert (D('1') == 1.0) is False


# -----------------------------
# Python protocol
# -----------------------------

def test_operators():
    assert D('1.5') + 1 == D('2.5')
    assert 1 + D('1.5') == D('2.5')
    assert D('5') - 7 == -2
    assert 7 - D('5') == 2
    assert D('1.5') * 2 == 3
    assert 10 / D('4') == D('2.5')
    assert D('-7') % 3 == 2
    assert 7 % D('3') == 1
    assert D('2') ** 10 == 1024
    assert -D('1') == -1
    assert +D('1') == 1
    assert abs(D('-3')) == 3


def test_float_operands_rejected():
    with pytest.raises(TypeError):
        D('1') + 1.5
    with pytest.raises(TypeError):
        1.5 * D('1')


@pytest.mark.parametrize("op", ["__add__", "__sub__", "__mul__", "__truediv__", "__mod__", "__pow__", "__lt__"])
def test_operators_take_ints_not_strings(op):
    # named methods coerce text; operators leave it to Python
    assert getattr(D('2'), op)('2') is NotImplemented
    assert getattr(D('2'), op)(2) is not NotImplemented


def test_string_operand_needs_named_method():
    with pytest.raises(TypeError):
        D('1') + '2'
    assert D('1').add('2') == 3


def test_hash():
    assert hash(D('1.50')) == hash(D('1.5'))
    assert hash(D('2')) == hash(2)
    assert hash(D('-0')) == hash(D('0'))
    assert len({D('1'), D('1.0'), D('-1'), D('inf')}) == 3


def test_int_and_float():
    assert int(D('-2.7')) == -2
    assert int(D('1E100')) == 10 ** 99
    assert float(D('0.1')) == 0.1
    assert math.copysign(1.0, float(D('-0'))) == -1.0
    assert math.isnan(float(D('NaN')))
    assert float(D('-inf')) == -math.inf
    with pytest.raises(ValueError):
        int(D('NaN'))
    with pytest.raises(OverflowError):
        int(D('inf'))


def test_bool():
    assert not D('0')
    assert not D('-0')
    assert D('0.1')
    assert D('NaN')


def test_predicates():
    assert D('-0').is_zero() and D('-0').signbit()
    assert D('12').is_integer()
    assert not D('1.2').is_integer()
    assert not D('inf').is_integer()
    assert _fraction(D('-1.25')) == Fraction(-5, 4)
    with pytest.raises(InvalidArgumentError):
        D('inf').to_rational()


# -----------------------------
# Contexts
# -----------------------------

def test_widest_context_wins():
    narrow = Decimal128('1', ctx=DecimalCtx(props={'precision': 'decimal32'}))
    result = narrow.divide(D('3'))
    assert result.ctx.p == 34
    assert result.to_string() == '0.' + '3' * 34


def test_explicit_context():
    ctx = DecimalCtx(props={'precision': 'decimal32'})
    result = D('1').divide(D('3'), ctx=ctx)
    assert result.to_string() == '0.3333333'
    assert result.ctx.p == 7
