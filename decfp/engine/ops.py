"""Standard operation codes and rounding modes for decimal arithmetic."""

from enum import IntEnum, unique

@unique
class RM(IntEnum):
    CEILING = 0
    FLOOR = 1
    EXPAND = 2
    TRUNCATE = 3
    HALF_EVEN = 4
    HALF_EXPAND = 5
    HALF_CEILING = 6
    HALF_FLOOR = 7
    HALF_TRUNCATE = 8

@unique
class OP(IntEnum):
    add = 0
    sub = 1
    mul = 2
    div = 3
    remainder = 4
    pow = 5
