"""
Arithmetic normalization
========================

Rewrites +, -, *, /, ^ and negation trees into one canonical shape:

1. Sums are flattened and like terms collected (2*x + x -> 3 * x)
2. Products are flattened; equal bases merge their exponents (x*x -> x^2)
3. Numbers fold into a single coefficient per term
4. A numeric coefficient is distributed over a lone sum factor
5. Square roots of integers are combined and rationalized
   (sqrt(2) * sqrt(3) -> sqrt(6), 1/sqrt(2) -> sqrt(2) / 2)
6. Terms are ordered by descending degree, then by text, constants last;
   negative terms after the first are written as subtraction

The output depends only on the value of the input tree, so normalizing a
normalized tree returns it unchanged. Operands are expected to be
simplified already; this module does not look inside function calls.
"""

import logging
from fractions import Fraction
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from . import numbers as num
from .errors import NotConverted
from .expr import (
    ARITHMETIC_OPS, Add, Div, Expr, Mul, Neg, Op, Pow, Sqrt, Sub, Var,
    numberp, walk,
)
from .formatting import format_expr

logger = logging.getLogger(__name__)

# (base, exponent) pairs sorted by base
Monomial = Tuple[Tuple[object, object], ...]


# =============================================================================
# ORDERING
# =============================================================================

@lru_cache(maxsize=8192)
def sort_key(e) -> str:
    """Total, deterministic order on expressions (text, then variable idents)."""
    idents = ",".join(v.ident for v in walk(e) if isinstance(v, Var))
    return format_expr(e) + "\0" + idents


def _has_var(e) -> bool:
    return any(isinstance(v, Var) for v in walk(e))


def _degree(mono: Monomial) -> Fraction:
    total = Fraction(0)
    for base, e in mono:
        if not _has_var(base):
            continue
        total += num.to_fraction(e) if num.is_real(e) else 1
    return total


def _mono_key(mono: Monomial) -> tuple:
    return tuple((sort_key(b), sort_key(e)) for b, e in mono)


def _term_order(item) -> tuple:
    mono, _ = item
    return (not mono, -_degree(mono), _mono_key(mono))


# =============================================================================
# EXPONENT HELPERS
# =============================================================================

def _exp_add(a, b):
    if numberp(a) and numberp(b):
        return num.add(a, b)
    return normalize(Add(a, b))


def _exp_scale(e, k: int):
    if k == 1:
        return e
    if numberp(e):
        return num.mul(e, k)
    return normalize(Mul(k, e))


def _is_sum(e) -> bool:
    return isinstance(e, Expr) and e.op in (Op.ADD, Op.SUB)


def _is_sqrt_atom(e) -> bool:
    return (isinstance(e, Expr) and e.op == Op.SQRT
            and num.is_integer(e.args[0]) and e.args[0] > 1)


# =============================================================================
# COLLECTION
# =============================================================================

def _collect_sum(e) -> Dict[Monomial, object]:
    terms: Dict[Monomial, object] = {}
    _add_into(terms, e, 1)
    return terms


def _add_term(terms, mono: Monomial, coef):
    if mono in terms:
        terms[mono] = num.add(terms[mono], coef)
    else:
        terms[mono] = coef


def _add_into(terms, e, scale):
    if isinstance(e, Expr) and e.op == Op.ADD:
        _add_into(terms, e.args[0], scale)
        _add_into(terms, e.args[1], scale)
        return
    if isinstance(e, Expr) and e.op == Op.SUB:
        _add_into(terms, e.args[0], scale)
        _add_into(terms, e.args[1], num.neg(scale))
        return
    if isinstance(e, Expr) and e.op == Op.NEG:
        _add_into(terms, e.args[0], num.neg(scale))
        return
    if isinstance(e, num.Date):
        current = terms.get((), 0)
        if num.is_one(scale):
            terms[()] = num.add(current, e)
        elif num.is_one(num.neg(scale)):
            terms[()] = num.sub(current, e)
        else:
            raise NotConverted(e, "plain number")
        return

    coef, mono = collect_product(e)
    coef = num.mul(coef, scale)
    if len(mono) == 1 and mono[0][1] == 1 and _is_sum(mono[0][0]):
        _add_into(terms, mono[0][0], coef)
        return
    _add_term(terms, mono, coef)


def collect_product(e) -> Tuple[object, Monomial]:
    """Split a single term into (numeric coefficient, sorted monomial)."""
    powers: Dict[object, object] = {}
    coef = _mul_into(powers, e, 1, 1)
    return _finish_product(coef, powers)


def _raise_power(powers, base, exp):
    if base in powers:
        powers[base] = _exp_add(powers[base], exp)
    else:
        powers[base] = exp


def _mul_into(powers, e, exp: int, coef):
    if numberp(e):
        return num.mul(coef, num.pow_int(e, exp))

    if not isinstance(e, Expr):
        _raise_power(powers, e, exp)
        return coef

    if e.op == Op.MUL:
        coef = _mul_into(powers, e.args[0], exp, coef)
        return _mul_into(powers, e.args[1], exp, coef)
    if e.op == Op.DIV:
        coef = _mul_into(powers, e.args[0], exp, coef)
        return _mul_into(powers, e.args[1], -exp, coef)
    if e.op == Op.NEG:
        coef = num.mul(coef, num.pow_int(-1, exp))
        return _mul_into(powers, e.args[0], exp, coef)
    if e.op == Op.POW:
        return _mul_power(powers, e, exp, coef)
    if _is_sum(e):
        terms = [(m, c) for m, c in _collect_sum(e).items() if not num.is_zero(c)]
        if not terms:
            return num.mul(coef, num.pow_int(0, exp))
        if len(terms) == 1:
            mono, c = terms[0]
            coef = num.mul(coef, num.pow_int(c, exp))
            for base, ex in mono:
                _raise_power(powers, base, _exp_scale(ex, exp))
            return coef
        _raise_power(powers, build_sum(dict(terms)), exp)
        return coef

    _raise_power(powers, e, exp)
    return coef


def _mul_power(powers, e: Expr, exp: int, coef):
    base, n = e.args
    if num.is_integer(n):
        return _mul_into(powers, base, exp * n, coef)
    if numberp(base):
        if num.is_one(base) and num.is_rational(base):
            return coef
        if (isinstance(n, Fraction) and n.denominator == 2
                and num.is_rational(base) and base > 0):
            return _mul_into(powers, sqrt_expr(base), exp * n.numerator, coef)
        if num.is_real(n) and num.is_real(base) and not num.is_negative(base) \
                and (isinstance(n, num.Float) or isinstance(base, num.Float)):
            value = num.to_python_float(base) ** num.to_python_float(n)
            return num.mul(coef, num.pow_int(num.Float.from_float(value), exp))
        _raise_power(powers, e, exp)
        return coef
    _raise_power(powers, base, _exp_scale(n, exp))
    return coef


def _finish_product(coef, powers) -> Tuple[object, Monomial]:
    factors = []
    radicand = 1
    for base, e in powers.items():
        if numberp(e) and num.is_zero(e):
            continue
        if _is_sqrt_atom(base) and num.is_integer(e):
            q, r = divmod(e, 2)
            coef = num.mul(coef, num.pow_int(base.args[0], q))
            if r:
                radicand *= base.args[0]
            continue
        factors.append((base, e))
    if radicand != 1:
        outer, inner = num.sqrt_exact(radicand)
        coef = num.mul(coef, outer)
        if inner != 1:
            factors.append((Sqrt(inner), 1))
    if num.is_zero(coef):
        return coef, ()
    factors.sort(key=lambda be: sort_key(be[0]))
    return coef, tuple(factors)


# =============================================================================
# REBUILD
# =============================================================================

def _product(factors: List) -> Optional[object]:
    result = None
    for f in factors:
        result = f if result is None else Mul(result, f)
    return result


def _factor(base, e):
    if num.is_integer(e) and e == 1:
        return base
    return Pow(base, e)


def term_expr(coef, mono: Monomial):
    """Expression for coef * monomial, with negative powers as a denominator."""
    if not mono:
        return coef
    top = [_factor(b, e) for b, e in mono if not (num.is_real(e) and num.is_negative(e))]
    bottom = [_factor(b, num.neg(e)) for b, e in mono if num.is_real(e) and num.is_negative(e)]

    if isinstance(coef, Fraction):
        cn, cd = coef.numerator, coef.denominator
    else:
        cn, cd = coef, 1

    negate = num.is_integer(cn) and cn == -1
    if negate:
        cn = 1
    if not (num.is_integer(cn) and cn == 1):
        top.insert(0, cn)
    if cd != 1:
        bottom.insert(0, cd)

    result = _product(top)
    if result is None:
        result = 1
    if bottom:
        result = Div(result, _product(bottom))
    return Neg(result) if negate else result


def build_sum(terms: Dict[Monomial, object]):
    """Canonical expression for collected terms."""
    items = [(m, c) for m, c in terms.items() if not num.is_zero(c)]
    if not items:
        return terms.get((), 0)
    items.sort(key=_term_order)

    result = None
    for mono, c in items:
        if result is None:
            result = term_expr(c, mono)
        elif num.is_negative(c):
            result = Sub(result, term_expr(num.neg(c), mono))
        else:
            result = Add(result, term_expr(c, mono))
    return result


def normalize(e):
    """Canonical form of an arithmetic tree whose operands are already simplified."""
    if not isinstance(e, Expr) or e.op not in ARITHMETIC_OPS:
        return e
    return build_sum(_collect_sum(e))


def as_terms(e) -> List[Tuple[object, Monomial]]:
    """Nonzero (coefficient, monomial) terms of an expression."""
    return [(c, m) for m, c in _collect_sum(e).items() if not num.is_zero(c)]


# =============================================================================
# SQUARE ROOTS
# =============================================================================

def sqrt_expr(x, prec: int = num.DEFAULT_PRECISION):
    """
    sqrt of a Number: exact and canonical for rationals (sqrt(8) -> 2 * sqrt(2),
    sqrt(1:2) -> sqrt(2) / 2), numeric for Floats, unevaluated otherwise.
    """
    if num.is_rational(x):
        if x < 0:
            value = num.sqrt_value(x, prec)
            if num.is_exact(value):
                return value
            return Sqrt(x)
        fr = Fraction(x)
        outer, inner = num.sqrt_exact(fr.numerator * fr.denominator)
        coef = num.make_fraction(outer, fr.denominator)
        if inner == 1:
            return coef
        return term_expr(coef, ((Sqrt(inner), 1),))
    if isinstance(x, num.Float):
        return num.sqrt_value(x, prec)
    return Sqrt(x)


# =============================================================================
# ARITHMETIC ON EXPRESSIONS
# =============================================================================

def add(a, b):
    if numberp(a) and numberp(b):
        return num.add(a, b)
    return normalize(Add(a, b))


def sub(a, b):
    if numberp(a) and numberp(b):
        return num.sub(a, b)
    return normalize(Sub(a, b))


def mul(a, b):
    if numberp(a) and numberp(b):
        return num.mul(a, b)
    return normalize(Mul(a, b))


def div(a, b):
    if numberp(a) and numberp(b):
        return num.div(a, b)
    return normalize(Div(a, b))


def neg(a):
    if numberp(a):
        return num.neg(a)
    return normalize(Neg(a))


def power(a, n):
    return normalize(Pow(a, n))


def is_zero(e) -> bool:
    return numberp(e) and num.is_zero(e)
