"""
Polynomial arithmetic over expressions.

Polynomials are held as dictionaries from exponent (or exponent tuple for
several variables) to a coefficient expression free of those variables,
the same shape the quadratic collector uses for ``{power: coefficient}``.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from . import algebra
from . import numbers as num
from .errors import CalcError, DivisionByZero, MalformedInput
from .expr import Expr, Op, Pow, Var, free_of, variables
from .formatting import format_expr

logger = logging.getLogger(__name__)

# Roots closer than this are one root; imaginary parts below it are zero
ROOT_TOLERANCE = 1e-9


class NotPolynomial(CalcError):
    """Expression is not a polynomial in the requested variables."""


# =============================================================================
# COLLECTION
# =============================================================================

def _merge(target: Dict, source: Dict, scale=1):
    for k, c in source.items():
        c = algebra.mul(c, scale) if not (num.is_integer(scale) and scale == 1) else c
        target[k] = algebra.add(target[k], c) if k in target else c


def _product(a: Dict, b: Dict) -> Dict:
    out: Dict = {}
    for ka, ca in a.items():
        for kb, cb in b.items():
            k = tuple(x + y for x, y in zip(ka, kb))
            c = algebra.mul(ca, cb)
            out[k] = algebra.add(out[k], c) if k in out else c
    return out


def _prune(terms: Dict) -> Dict:
    return {k: c for k, c in terms.items() if not algebra.is_zero(c)}


def collect_monomials(expr, unknowns: Sequence[Var]) -> Dict[Tuple[int, ...], object]:
    """
    Coefficients of expr as a polynomial in the unknowns.

    Keys are exponent tuples in unknowns order; values are expressions
    free of every unknown. Raises NotPolynomial otherwise.
    """
    unknowns = list(unknowns)
    zero = (0,) * len(unknowns)

    def collect(node) -> Dict:
        if all(free_of(node, u) for u in unknowns):
            return {zero: node}
        if isinstance(node, Var):
            i = unknowns.index(node)
            return {tuple(1 if j == i else 0 for j in range(len(unknowns))): 1}
        if not isinstance(node, Expr):
            raise NotPolynomial(node)

        if node.op == Op.ADD:
            out = collect(node.args[0])
            _merge(out, collect(node.args[1]))
            return out
        if node.op == Op.SUB:
            out = collect(node.args[0])
            _merge(out, collect(node.args[1]), -1)
            return out
        if node.op == Op.NEG:
            out: Dict = {}
            _merge(out, collect(node.args[0]), -1)
            return out
        if node.op == Op.MUL:
            return _product(collect(node.args[0]), collect(node.args[1]))
        if node.op == Op.DIV:
            den = node.args[1]
            if not all(free_of(den, u) for u in unknowns):
                raise NotPolynomial(node)
            return {k: algebra.div(c, den) for k, c in collect(node.args[0]).items()}
        if node.op == Op.POW:
            n = node.args[1]
            if not (num.is_integer(n) and n >= 0):
                raise NotPolynomial(node)
            base = collect(node.args[0])
            out = {zero: 1}
            for _ in range(n):
                out = _product(out, base)
            return out
        raise NotPolynomial(node)

    return _prune(collect(expr))


def collect_terms(expr, var: Var) -> Dict[int, object]:
    """Coefficients of expr as a polynomial in one variable: {power: coefficient}."""
    return {k[0]: c for k, c in collect_monomials(expr, [var]).items()}


def from_terms(terms: Dict[int, object], var: Var):
    """Canonical expression for a {power: coefficient} polynomial."""
    result = 0
    for k in sorted(terms, reverse=True):
        result = algebra.add(result, algebra.mul(terms[k], Pow(var, k) if k != 1 else var))
    return result


def degree(terms: Dict[int, object]) -> int:
    """Degree of a collected polynomial; -1 for the zero polynomial."""
    return max(terms) if terms else -1


# =============================================================================
# DIVISION
# =============================================================================

def _division_variable(a, b, var: Optional[Var]) -> Optional[Var]:
    if var is not None:
        if not isinstance(var, Var):
            raise MalformedInput(f"polynomial variable must be a symbol, got {var!r}")
        return var
    found = variables(a)
    found += [v for v in variables(b) if v not in found]
    if len(found) > 1:
        names = ", ".join(v.name for v in found)
        raise MalformedInput(f"ambiguous polynomial variable among {names}")
    return found[0] if found else None


def divide_terms(num_terms: Dict[int, object], den_terms: Dict[int, object]):
    """Long division of collected polynomials: (quotient terms, remainder terms)."""
    if not den_terms:
        raise DivisionByZero("Division by zero polynomial")
    top = degree(den_terms)
    lead = den_terms[top]
    quotient: Dict[int, object] = {}
    remainder = dict(num_terms)
    while remainder and degree(remainder) >= top:
        k = degree(remainder)
        c = algebra.div(remainder[k], lead)
        quotient[k - top] = c
        for j, dc in den_terms.items():
            key = j + k - top
            remainder[key] = algebra.sub(remainder.get(key, 0), algebra.mul(c, dc))
        del remainder[k]
        remainder = _prune(remainder)
    return quotient, remainder


def poly_div(dividend, divisor, var: Optional[Var] = None):
    """
    Divide two univariate polynomials.

    Returns (quotient, remainder) with dividend == quotient*divisor + remainder
    and deg(remainder) < deg(divisor). The variable is inferred when exactly
    one free variable appears in the operands.
    """
    var = _division_variable(dividend, divisor, var)
    if var is None:
        return algebra.div(dividend, divisor), 0
    q, r = divide_terms(collect_terms(dividend, var), collect_terms(divisor, var))
    quotient, remainder = from_terms(q, var), from_terms(r, var)
    logger.debug("poly_div: quotient %s, remainder %s", quotient, remainder)
    return quotient, remainder


def poly_rem(dividend, divisor, var: Optional[Var] = None):
    return poly_div(dividend, divisor, var)[1]


def poly_gcd(a, b, var: Optional[Var] = None):
    """Monic greatest common divisor of two univariate polynomials."""
    var = _division_variable(a, b, var)
    if var is None:
        if num.is_rational(a) and num.is_rational(b):
            return num.gcd_values(a, b)
        raise NotPolynomial(a)
    ta, tb = collect_terms(a, var), collect_terms(b, var)
    while tb:
        ta, tb = tb, divide_terms(ta, tb)[1]
    if not ta:
        return 0
    lead = ta[degree(ta)]
    return from_terms({k: algebra.div(c, lead) for k, c in ta.items()}, var)


def format_division_log(quotient, remainder) -> str:
    """The two-line side log of a division: "pdiv <quotient>" then "prem <remainder>"."""
    return f"pdiv {format_expr(quotient)}\nprem {format_expr(remainder)}\n"


# =============================================================================
# REAL ROOTS
# =============================================================================

def real_roots(terms: Dict[int, object], prec: int = num.DEFAULT_PRECISION) -> List[object]:
    """
    Distinct real roots of a univariate polynomial with Number coefficients.

    Exact for degree <= 2 with exact coefficients (irrational roots come back
    as sqrt expressions); higher degrees use numpy.roots and return Floats.
    Exact polynomials are reduced to their square-free part first, so a
    repeated root is found once.
    The zero polynomial raises ValueError.
    """
    terms = _prune(terms)
    if not terms:
        raise ValueError("zero polynomial has every number as a root")
    if not all(num.is_real(c) for c in terms.values()):
        raise NotPolynomial(terms)

    roots: List[object] = []
    low = min(terms)
    if low > 0:
        roots.append(0)
        terms = {k - low: c for k, c in terms.items()}

    deg = degree(terms)
    if deg > 2 and all(num.is_exact(c) for c in terms.values()):
        terms = _square_free(terms)
        deg = degree(terms)
    if deg == 1:
        roots.append(num.div(num.neg(terms.get(0, 0)), terms[1], prec))
    elif deg == 2:
        roots.extend(_quadratic_roots(terms.get(0, 0), terms.get(1, 0), terms[2], prec))
    elif deg > 2:
        roots.extend(_numeric_roots(terms, deg, prec))
    return roots


def _square_free(terms: Dict[int, object]) -> Dict[int, object]:
    """p / gcd(p, p'): the same roots, each one simple."""
    g = terms
    h = {k - 1: algebra.mul(k, c) for k, c in terms.items() if k > 0}
    while h:
        g, h = h, divide_terms(g, h)[1]
    if degree(g) < 1:
        return terms
    return divide_terms(terms, g)[0]


def _quadratic_roots(c, b, a, prec: int) -> List[object]:
    disc = num.sub(num.mul(b, b, prec), num.mul(4, num.mul(a, c, prec), prec), prec)
    if num.is_negative(disc):
        return []
    two_a = num.mul(2, a, prec)
    if num.is_zero(disc):
        return [num.div(num.neg(b), two_a, prec)]
    root = algebra.sqrt_expr(disc, prec)
    lo = algebra.div(algebra.sub(num.neg(b), root), two_a)
    hi = algebra.div(algebra.add(num.neg(b), root), two_a)
    return [hi, lo] if num.is_negative(a) else [lo, hi]


def _numeric_roots(terms: Dict[int, object], deg: int, prec: int) -> List[object]:
    coeffs = [num.to_python_float(terms.get(k, 0)) for k in range(deg, -1, -1)]
    found: List[float] = []
    for r in np.roots(coeffs):
        if abs(r.imag) > ROOT_TOLERANCE * max(1.0, abs(r.real)):
            continue
        x = float(r.real)
        if all(abs(x - y) > ROOT_TOLERANCE * max(1.0, abs(y)) for y in found):
            found.append(x)
    return [num.Float.from_float(x, prec) for x in sorted(found)]
