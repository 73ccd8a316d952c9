"""Format constants for IEEE 754-2008 decimal interchange formats."""

#: decimal128 carries 34 significant digits.
MAX_SIGNIFICANT_DIGITS: int = 34

#: Allowed range of the digit-sequence exponent for decimal128.
EXPONENT_MAX: int = 6144
EXPONENT_MIN: int = 1 - EXPONENT_MAX

#: Extra digits carried when lowering an exact result back to digits.
GUARD_DIGITS: int = 1

#: Other interchange formats, as (digits, emax).
DECIMAL32 = (7, 96)
DECIMAL64 = (16, 384)
DECIMAL128 = (MAX_SIGNIFICANT_DIGITS, EXPONENT_MAX)
