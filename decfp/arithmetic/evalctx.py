"""Evaluation context information for decimal arithmetic."""

from ..engine import utils
from ..engine import limits
from ..engine.ops import RM


decimal32_synonyms = {'decimal32', 'dec32', '_decimal32', 'float32d'}
decimal64_synonyms = {'decimal64', 'dec64', '_decimal64', 'float64d'}
decimal128_synonyms = {'decimal128', 'dec128', '_decimal128', 'float128d', 'quaddecimal'}

CEILING_synonyms = {'ceiling', 'ceil', 'rtp', 'topositive', 'roundtopositive', 'towardpositive', 'roundtowardpositive'}
FLOOR_synonyms = {'floor', 'rtn', 'tonegative', 'roundtonegative', 'towardnegative', 'roundtowardnegative'}
EXPAND_synonyms = {'expand', 'raz', 'up', 'away', 'awayzero', 'roundawayzero', 'awayfromzero'}
TRUNCATE_synonyms = {'truncate', 'trunc', 'rtz', 'down', 'tozero', 'roundtozero', 'towardzero', 'roundtowardzero'}
HALF_EVEN_synonyms = {'halfeven', 'rne', 'bankers', 'nearesteven', 'roundnearesteven', 'nearesttiestoeven', 'roundnearesttiestoeven'}
HALF_EXPAND_synonyms = {'halfexpand', 'rna', 'halfup', 'nearestaway', 'roundnearestaway', 'nearesttiestoaway', 'roundnearesttiestoaway'}
HALF_CEILING_synonyms = {'halfceiling', 'halfceil', 'nearestpositive', 'nearesttiestopositive'}
HALF_FLOOR_synonyms = {'halffloor', 'nearestnegative', 'nearesttiestonegative'}
HALF_TRUNCATE_synonyms = {'halftruncate', 'halftrunc', 'halfdown', 'nearestzero', 'nearesttiestozero'}


DECIMAL_pemax = {}
DECIMAL_pemax.update((k, limits.DECIMAL32) for k in decimal32_synonyms)
DECIMAL_pemax.update((k, limits.DECIMAL64) for k in decimal64_synonyms)
DECIMAL_pemax.update((k, limits.DECIMAL128) for k in decimal128_synonyms)

DECIMAL_rm = {}
DECIMAL_rm.update((k, RM.CEILING) for k in CEILING_synonyms)
DECIMAL_rm.update((k, RM.FLOOR) for k in FLOOR_synonyms)
DECIMAL_rm.update((k, RM.EXPAND) for k in EXPAND_synonyms)
DECIMAL_rm.update((k, RM.TRUNCATE) for k in TRUNCATE_synonyms)
DECIMAL_rm.update((k, RM.HALF_EVEN) for k in HALF_EVEN_synonyms)
DECIMAL_rm.update((k, RM.HALF_EXPAND) for k in HALF_EXPAND_synonyms)
DECIMAL_rm.update((k, RM.HALF_CEILING) for k in HALF_CEILING_synonyms)
DECIMAL_rm.update((k, RM.HALF_FLOOR) for k in HALF_FLOOR_synonyms)
DECIMAL_rm.update((k, RM.HALF_TRUNCATE) for k in HALF_TRUNCATE_synonyms)


def _canonical_name(s):
    return ''.join(ch for ch in str(s).lower() if ch not in '-_ ')

def rounding_mode(rm):
    """Look up a rounding mode, given as an RM or by name.
    Names are matched without case, dashes, underscores or spaces,
    so 'half-even', 'HALF_EVEN' and 'halfEven' are all RM.HALF_EVEN.
    """
    if isinstance(rm, RM):
        return rm
    if isinstance(rm, str):
        try:
            return DECIMAL_rm[_canonical_name(rm)]
        except KeyError:
            pass
    raise utils.InvalidArgumentError('unsupported rounding mode {}'.format(repr(rm)))


class DecimalCtx(object):
    """Context for IEEE 754-2008 decimal arithmetic.

    p is the number of significant digits, and the digit-sequence exponent
    of every finite value must lie in [emin, emax], with emin = 1 - emax.
    rm is used to round inexact values to p digits when they are created,
    and round_rm is the default mode for explicit rounding to decimal places.
    """

    p = limits.MAX_SIGNIFICANT_DIGITS
    emax = limits.EXPONENT_MAX
    emin = limits.EXPONENT_MIN
    rm = RM.HALF_EVEN
    round_rm = RM.HALF_EXPAND

    def __init__(self, props=None, p=None, emax=None, rm=None, round_rm=None):
        self.p = type(self).p
        self.emax = type(self).emax
        self.emin = type(self).emin
        self.rm = type(self).rm
        self.round_rm = type(self).round_rm

        self.props = {}
        if props:
            self._update_props(props)

        # arguments are allowed to override properties
        if p is not None:
            self._set_format(p, emax if emax is not None else self.emax)
        elif emax is not None:
            self._set_format(self.p, emax)
        if rm is not None:
            self.rm = rounding_mode(rm)
        if round_rm is not None:
            self.round_rm = rounding_mode(round_rm)

    def _set_format(self, p, emax):
        if not utils.is_count(p) or p < 1:
            raise utils.InvalidArgumentError('precision must be a positive digit count, got {}'.format(repr(p)))
        if not utils.is_count(emax) or emax < 1:
            raise utils.InvalidArgumentError('emax must be positive, got {}'.format(repr(emax)))
        self.p = int(p)
        self.emax = int(emax)
        self.emin = 1 - self.emax

    def _update_props(self, props):
        if 'round' in props:
            self.round_rm = rounding_mode(props['round'])

        if 'precision' in props:
            prec = props['precision']
            try:
                p, emax = DECIMAL_pemax[_canonical_name(prec)]
            except KeyError:
                raise utils.InvalidArgumentError('unsupported decimal precision {}'.format(repr(prec)))
            self._set_format(p, emax)

        self.props.update(props)

    def __repr__(self):
        args = ['p=' + repr(self.p), 'emax=' + repr(self.emax),
                'rm=' + str(self.rm), 'round_rm=' + str(self.round_rm)]
        if len(self.props) > 0:
            args.append('props=' + repr(self.props))
        return '{}({})'.format(type(self).__name__, ', '.join(args))

    def __str__(self):
        return '\n'.join([
            type(self).__name__ + ':',
            '    p: ' + str(self.p),
            '    emin: ' + str(self.emin),
            '    emax: ' + str(self.emax),
            '    rm: ' + self.rm.name,
            '    round_rm: ' + self.round_rm.name,
        ])

    def let(self, props=None):
        """Create a new context, updated with any provided properties."""
        cls = type(self)
        newctx = cls.__new__(cls)
        newctx.p = self.p
        newctx.emax = self.emax
        newctx.emin = self.emin
        newctx.rm = self.rm
        newctx.round_rm = self.round_rm
        newctx.props = self.props.copy()
        if props:
            newctx._update_props(props)
        return newctx

    def exponent_in_range(self, exp):
        return self.emin <= exp <= self.emax


used_ctxs = {}
def decimal_ctx(p, emax, rm=RM.HALF_EVEN, round_rm=RM.HALF_EXPAND):
    try:
        return used_ctxs[(p, emax, rm, round_rm)]
    except KeyError:
        ctx = DecimalCtx(p=p, emax=emax, rm=rm, round_rm=round_rm)
        used_ctxs[(p, emax, rm, round_rm)] = ctx
        return ctx
