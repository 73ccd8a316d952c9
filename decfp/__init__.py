from .engine import utils, ops, limits, digital, rational
from .arithmetic import evalctx, decimal128

Decimal128 = decimal128.Decimal128
DecimalCtx = evalctx.DecimalCtx
decimal_ctx = evalctx.decimal_ctx
RM = ops.RM

DigitSequence = digital.DigitSequence
Rat = rational.Rat

DecfpError = utils.DecfpError
FormatError = utils.FormatError
PrecisionError = utils.PrecisionError
ExponentError = utils.ExponentError
InvalidArgumentError = utils.InvalidArgumentError
