"""General utilities, such as exception classes."""

import typing

# decfp-specific exceptions

class DecfpError(Exception):
    """Base decfp error."""

class FormatError(DecfpError, ValueError):
    """Text that is not a decimal, exponential, infinity or NaN literal."""

class PrecisionError(DecfpError, ArithmeticError):
    """An exact integer that needs more significant digits than the format has."""

class ExponentError(DecfpError, ArithmeticError):
    """An exponent outside of the range of the format."""

class InvalidArgumentError(DecfpError, ValueError):
    """A bad parameter, such as a negative digit count or an unknown rounding mode."""


# Useful things

MAX_SAFE_INTEGER = (1 << 53) - 1

def is_count(n: typing.Any, limit: typing.Optional[int] = None) -> bool:
    """Is n usable as a non-negative digit count?
    Integral floats are accepted; bools are not.
    """
    if isinstance(n, bool):
        return False
    if isinstance(n, float):
        if not n.is_integer():
            return False
        n = int(n)
    if not isinstance(n, int):
        return False
    return n >= 0 and (limit is None or n <= limit)
