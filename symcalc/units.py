"""
Unit System
===========

Units are plain symbols whose names appear in the unit table (optionally
behind an SI prefix: km, cm, ms, mg, ...). Each unit has a scale relative
to the base units m, g, s, A, K, mol, cd and rad, and a dimension vector.

A unit-bearing expression is a product of a magnitude and unit factors:
``3 * m``, ``9.8 * m / s^2``, ``45 * deg``.
"""

import logging
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from . import algebra
from . import numbers as num
from .config import CalcMode
from .errors import IncompatibleUnits
from .expr import PI, Expr, Mul, Op, Var, numberp, substitute_all, walk
from .numbers import Float
from .simplify import simplify

logger = logging.getLogger(__name__)

# Dimension vector order
DIMENSIONS = ("length", "mass", "time", "current", "temperature",
              "amount", "luminosity", "angle")

Dims = Tuple[object, ...]


def _dims(**powers) -> Dims:
    return tuple(powers.get(d, 0) for d in DIMENSIONS)


NO_DIMS = _dims()

# name -> (scale relative to base units, dimensions, takes SI prefixes)
UNITS: Dict[str, Tuple[object, Dims, bool]] = {
    # Base
    "m": (1, _dims(length=1), True),
    "g": (1, _dims(mass=1), True),
    "s": (1, _dims(time=1), True),
    "A": (1, _dims(current=1), True),
    "K": (1, _dims(temperature=1), True),
    "mol": (1, _dims(amount=1), True),
    "cd": (1, _dims(luminosity=1), True),
    "rad": (1, _dims(angle=1), True),
    "deg": (algebra.div(PI, 180), _dims(angle=1), False),

    # Length
    "in": (Float(254, -4), _dims(length=1), False),
    "ft": (Float(3048, -4), _dims(length=1), False),
    "yd": (Float(9144, -4), _dims(length=1), False),
    "mi": (Float(1609344, -3), _dims(length=1), False),

    # Volume and mass
    "L": (Float(1, -3), _dims(length=3), True),
    "lb": (Float(45359237, -5), _dims(mass=1), False),

    # Time
    "min": (60, _dims(time=1), False),
    "hr": (3600, _dims(time=1), False),
    "day": (86400, _dims(time=1), False),
    "wk": (604800, _dims(time=1), False),

    # Derived (mass base is the gram, so one newton is 1000 g m / s^2)
    "N": (1000, _dims(mass=1, length=1, time=-2), True),
    "J": (1000, _dims(mass=1, length=2, time=-2), True),
    "W": (1000, _dims(mass=1, length=2, time=-3), True),
    "Pa": (1000, _dims(mass=1, length=-1, time=-2), True),
    "Hz": (1, _dims(time=-1), True),
}

PREFIXES = {
    "Y": 24, "Z": 21, "E": 18, "P": 15, "T": 12, "G": 9, "M": 6,
    "k": 3, "h": 2, "D": 1,
    "d": -1, "c": -2, "m": -3, "u": -6, "n": -9, "p": -12,
    "f": -15, "a": -18, "z": -21, "y": -24,
}


# =============================================================================
# TABLE LOOKUP
# =============================================================================

@lru_cache(maxsize=1024)
def unit_definition(name: str) -> Optional[Tuple[object, Dims]]:
    """(scale, dimensions) of a unit name, prefixed or not; None if not a unit."""
    if name in UNITS:
        scale, dims, _ = UNITS[name]
        return scale, dims
    prefix, base = name[:1], name[1:]
    if prefix in PREFIXES and base in UNITS and UNITS[base][2]:
        scale, dims, _ = UNITS[base]
        return algebra.mul(num.pow_int(10, PREFIXES[prefix]), scale), dims
    return None


def is_unit(e) -> bool:
    return isinstance(e, Var) and unit_definition(e.name) is not None


def _scale_dims(dims: Dims, k) -> Dims:
    return tuple(num.mul(d, k) for d in dims)


def _add_dims(a: Dims, b: Dims) -> Dims:
    return tuple(num.add(x, y) for x, y in zip(a, b))


# =============================================================================
# UNIT FACTORS
# =============================================================================

def _unit_powers(e) -> Dict[Var, object]:
    """
    Unit symbols of a product and their net exponents, in order of
    appearance. Only the first term of a sum is looked at.
    """
    powers: Dict[Var, object] = {}

    def visit(node, k):
        if isinstance(node, Var):
            if is_unit(node):
                powers[node] = num.add(powers.get(node, 0), k)
            return
        if not isinstance(node, Expr):
            return
        if node.op == Op.MUL:
            visit(node.args[0], k)
            visit(node.args[1], k)
        elif node.op == Op.DIV:
            visit(node.args[0], k)
            visit(node.args[1], num.neg(k))
        elif node.op == Op.NEG:
            visit(node.args[0], k)
        elif node.op in (Op.ADD, Op.SUB):
            visit(node.args[0], k)
        elif node.op == Op.POW and num.is_rational(node.args[1]):
            visit(node.args[0], num.mul(k, node.args[1]))

    visit(e, 1)
    return {u: k for u, k in powers.items() if not num.is_zero(k)}


def extract_units(e):
    """
    The unit part of an expression, magnitude replaced by 1.

    Units of the same dimension are merged into the first one that appears,
    with their relative scale folded into the coefficient as a Float:
    m * cm gives 0.01 * m^2.
    """
    merged: Dict[Var, object] = {}
    coef = 1
    for u, k in _unit_powers(e).items():
        scale, dims = unit_definition(u.name)
        target = next((t for t in merged if unit_definition(t.name)[1] == dims), None)
        if target is None:
            merged[u] = k
            continue
        ratio = algebra.div(scale, unit_definition(target.name)[0])
        if numberp(ratio):
            ratio = num.to_float(ratio)
        coef = algebra.mul(coef, algebra.power(ratio, k))
        merged[target] = num.add(merged[target], k)

    result = coef
    for u, k in merged.items():
        if not num.is_zero(k):
            result = algebra.mul(result, algebra.power(u, k))
    return result


def remove_units(e, mode: Optional[CalcMode] = None):
    """The magnitude of an expression: every unit symbol replaced by 1."""
    units = {v: 1 for v in walk(e) if is_unit(v)}
    return simplify(substitute_all(e, units), mode)


def unit_scale(units) -> Tuple[object, Dims]:
    """Total scale and dimensions of a product of units (numeric factors allowed)."""
    scale, dims = 1, NO_DIMS
    terms = algebra.as_terms(units)
    if len(terms) != 1:
        raise IncompatibleUnits(f"{units} is not a product of units")
    coef, mono = terms[0]
    scale = coef
    for base, k in mono:
        if not (is_unit(base) and num.is_rational(k)):
            raise IncompatibleUnits(f"{base} is not a unit")
        s, d = unit_definition(base.name)
        scale = algebra.mul(scale, algebra.power(s, k))
        dims = _add_dims(dims, _scale_dims(d, k))
    return scale, dims


def _addends(e, sign=1):
    """Top-level terms of a sum with their signs."""
    if isinstance(e, Expr) and e.op == Op.ADD:
        yield from _addends(e.args[0], sign)
        yield from _addends(e.args[1], sign)
    elif isinstance(e, Expr) and e.op == Op.SUB:
        yield from _addends(e.args[0], sign)
        yield from _addends(e.args[1], -sign)
    else:
        yield e, sign


def _magnitude_in(e, old_units, new_units, mode: Optional[CalcMode]):
    old_scale, old_dims = unit_scale(old_units)
    new_scale, new_dims = unit_scale(new_units)
    if old_dims != new_dims:
        raise IncompatibleUnits(f"Cannot convert {old_units} to {new_units}")
    ratio = algebra.div(old_scale, new_scale)
    logger.debug("convert %s: %s -> %s, ratio %s", e, old_units, new_units, ratio)
    return simplify(Mul(remove_units(e, mode), ratio), mode)


def _sum_magnitude(parts, new_units, mode: Optional[CalcMode]):
    # Each term carries its own units
    total = 0
    for term, sign in parts:
        m = _magnitude_in(term, extract_units(term), new_units, mode)
        total = algebra.add(total, m if sign > 0 else algebra.neg(m))
    return simplify(total, mode)


def convert_units(e, old_units, new_units, mode: Optional[CalcMode] = None):
    """
    Express e in new_units.

    old_units=None means the units of e itself, found by extract_units();
    the terms of a sum are converted one by one, so 1 m + 50 cm is 150 cm.
    The result is magnitude * scale-ratio (simplified) times new_units; the
    outer product is left as is, so 0 m converts to 0 * cm.
    """
    if old_units is None:
        parts = list(_addends(e))
        if len(parts) > 1:
            return Mul(_sum_magnitude(parts, new_units, mode), new_units)
        old_units = extract_units(e)
    return Mul(_magnitude_in(e, old_units, new_units, mode), new_units)


def _unit_part(units):
    """extract_units() result without its folded coefficient."""
    terms = algebra.as_terms(units)
    if len(terms) != 1:
        return units
    result = 1
    for base, k in terms[0][1]:
        result = algebra.mul(result, algebra.power(base, k))
    return result


def simplify_units(e, mode: Optional[CalcMode] = None):
    """Magnitude times the merged unit part, simplified: m * cm -> 0.01 * m^2."""
    parts = list(_addends(e))
    if len(parts) > 1:
        target = _unit_part(extract_units(e))
        if not numberp(target):
            return simplify(Mul(_sum_magnitude(parts, target, mode), target), mode)
    return simplify(Mul(remove_units(e, mode), extract_units(e)), mode)


def unit_symbols(e) -> List[Var]:
    """Distinct unit symbols in an expression, in order of appearance."""
    out: List[Var] = []
    for v in walk(e):
        if is_unit(v) and v not in out:
            out.append(v)
    return out


def is_unitless(e) -> bool:
    return numberp(e) or not unit_symbols(e)
