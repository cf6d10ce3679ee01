"""
Trigonometric rules.

Angles on the 15 degree lattice (pi/12 multiples in radians) have exact
values built from sqrt(2), sqrt(3) and sqrt(6); in symbolic mode those are
returned as expressions. Numeric evaluation goes through ``math`` and is
rounded to the mode's precision.
"""

import logging
import math
from fractions import Fraction
from functools import lru_cache
from typing import Optional, Tuple

from . import algebra
from . import numbers as num
from .config import AngleUnit, CalcMode
from .expr import PI, Op, Sqrt, Var

logger = logging.getLogger(__name__)

DEG = Var("deg")
RAD = Var("rad")

_ANGLE_UNITS = {DEG: AngleUnit.DEGREES, RAD: AngleUnit.RADIANS}


# =============================================================================
# EXACT VALUES
# =============================================================================

@lru_cache(maxsize=1)
def _tables():
    """First-quadrant values at 0, 15, ..., 90 degrees; None marks a pole."""
    s2, s3, s6 = Sqrt(2), Sqrt(3), Sqrt(6)
    half = Fraction(1, 2)
    sin = [
        0,
        algebra.div(algebra.sub(s6, s2), 4),
        half,
        algebra.div(s2, 2),
        algebra.div(s3, 2),
        algebra.div(algebra.add(s6, s2), 4),
        1,
    ]
    csc = [
        None,
        algebra.add(s6, s2),
        2,
        s2,
        algebra.div(algebra.mul(2, s3), 3),
        algebra.sub(s6, s2),
        1,
    ]
    tan = [
        0,
        algebra.sub(2, s3),
        algebra.div(s3, 3),
        1,
        s3,
        algebra.add(2, s3),
        None,
    ]
    return {"sin": sin, "csc": csc, "tan": tan, "cot": list(reversed(tan))}


def _quarter_wave(table, k: int):
    """Value of a period-360 odd function (sin, csc) at k * 15 degrees."""
    k %= 24
    if k <= 6:
        v = table[k]
    elif k <= 12:
        v = table[12 - k]
    elif k <= 18:
        v = table[k - 12]
        return None if v is None else algebra.neg(v)
    else:
        v = table[24 - k]
        return None if v is None else algebra.neg(v)
    return v


def _half_wave(table, k: int):
    """Value of a period-180 odd function (tan, cot) at k * 15 degrees."""
    k %= 12
    if k <= 6:
        return table[k]
    v = table[12 - k]
    return None if v is None else algebra.neg(v)


def exact_value(op: Op, k: int):
    """Exact value of op at k * 15 degrees, or None at a pole."""
    t = _tables()
    if op == Op.SIN:
        return _quarter_wave(t["sin"], k)
    if op == Op.COS:
        return _quarter_wave(t["sin"], k + 6)
    if op == Op.CSC:
        return _quarter_wave(t["csc"], k)
    if op == Op.SEC:
        return _quarter_wave(t["csc"], k + 6)
    if op == Op.TAN:
        return _half_wave(t["tan"], k)
    if op == Op.COT:
        return _half_wave(t["cot"], k)
    raise ValueError(f"not a trigonometric operator: {op}")


# =============================================================================
# ARGUMENT ANALYSIS
# =============================================================================

def split_angle(arg) -> Optional[Tuple[object, bool, Optional[AngleUnit]]]:
    """
    Decompose an argument as coef [* pi] [* deg|rad].

    Returns (coef, has_pi, unit) with unit None when no explicit angle unit
    is present, or None for anything else.
    """
    if num.is_number(arg):
        return (arg, False, None) if num.is_real(arg) else None
    terms = algebra.as_terms(arg)
    if len(terms) != 1:
        return None
    coef, mono = terms[0]
    if not num.is_real(coef):
        return None
    has_pi, unit = False, None
    for base, e in mono:
        if not (num.is_integer(e) and e == 1):
            return None
        if base == PI and not has_pi:
            has_pi = True
        elif base in _ANGLE_UNITS and unit is None:
            unit = _ANGLE_UNITS[base]
        else:
            return None
    return coef, has_pi, unit


def _lattice_index(coef, has_pi: bool, unit: AngleUnit) -> Optional[int]:
    if not num.is_real(coef):
        return None
    value = num.to_fraction(coef)
    if unit == AngleUnit.DEGREES:
        if has_pi:
            return None
        steps = value / 15
    else:
        if not has_pi:
            return 0 if value == 0 else None
        steps = value * 12
    return steps.numerator if steps.denominator == 1 else None


def _numeric(op: Op, coef, has_pi: bool, unit: AngleUnit, prec: int):
    k = _lattice_index(coef, has_pi, unit)
    if k is not None:
        exact = exact_value(op, k)
        if exact is None:
            return None
        if num.is_rational(exact):
            return num.to_float(exact, prec)

    x = num.to_python_float(coef)
    if has_pi:
        x *= math.pi
    if unit == AngleUnit.DEGREES:
        x = math.radians(x)
    s, c = math.sin(x), math.cos(x)
    values = {
        Op.SIN: lambda: s,
        Op.COS: lambda: c,
        Op.TAN: lambda: s / c,
        Op.COT: lambda: c / s,
        Op.SEC: lambda: 1 / c,
        Op.CSC: lambda: 1 / s,
    }
    try:
        return num.Float.from_float(values[op](), prec)
    except ZeroDivisionError:
        return None


# =============================================================================
# RULE ENTRY POINT
# =============================================================================

def simplify_trig(op: Op, arg, mode: CalcMode):
    """
    Value of op(arg) under the given mode, or None to leave it unevaluated.

    An explicit deg/rad factor in the argument overrides the mode's angle
    unit. Float arguments are always evaluated numerically. Otherwise
    symbolic mode gives exact lattice values and leaves everything else
    alone, while numeric mode evaluates plain numeric arguments only.
    """
    parts = split_angle(arg)
    if parts is None:
        return None
    coef, has_pi, unit = parts
    unit = unit or mode.angle_unit

    if isinstance(coef, num.Float):
        return _numeric(op, coef, has_pi, unit, mode.precision)

    if mode.symbolic:
        k = _lattice_index(coef, has_pi, unit)
        if k is None:
            return None
        value = exact_value(op, k)
        if value is not None:
            logger.debug("trig lattice hit: %s at %d * 15 deg", op.name.lower(), k)
        return value

    if has_pi:
        return None
    return _numeric(op, coef, has_pi, unit, mode.precision)
