"""
Mode-sensitive rewrite engine.

Children are simplified before their parent, then one rule per operator
is applied. Arithmetic goes through algebra.normalize, trigonometry through
trig.simplify_trig; the remaining named functions evaluate when their
arguments are concrete enough and are otherwise left as they are.
"""

import logging
from typing import Optional

from . import algebra
from . import combinatorics
from . import dates
from . import linalg
from . import numbers as num
from . import poly
from . import solver
from .config import CalcMode, DEFAULT_MODE
from .errors import MalformedInput
from .expr import (
    ARITHMETIC_OPS, TRIG_OPS, Abs, Expr, Op, Var,
    equal_expr, is_vec, numberp, substitute,
)
from .trig import simplify_trig

logger = logging.getLogger(__name__)


class Simplifier:
    """Simplify expressions under a fixed CalcMode."""

    def __init__(self, mode: Optional[CalcMode] = None):
        self.mode = mode or DEFAULT_MODE
        self._rules = {
            Op.SQRT: self._sqrt,
            Op.ABS: self._abs,
            Op.GCD: self._gcd,
            Op.DET: self._det,
            Op.CHOOSE: self._combinatorics,
            Op.FACT: self._combinatorics,
            Op.PERM: self._combinatorics,
            Op.PDIV: self._poly,
            Op.PREM: self._poly,
            Op.PGCD: self._poly,
            Op.JULIAN: self._julian,
            Op.DATE: self._date,
            Op.YEAR: self._date_part,
            Op.MONTH: self._date_part,
            Op.DAY: self._date_part,
            Op.WEEKDAY: self._date_part,
            Op.YEARDAY: self._date_part,
        }
        for op in ARITHMETIC_OPS:
            self._rules[op] = self._arithmetic
        for op in TRIG_OPS:
            self._rules[op] = self._trig

    def simplify(self, expr):
        if not isinstance(expr, Expr):
            return expr
        if expr.op == Op.SUM:
            return self._sum(expr)
        if expr.op == Op.SOLVE:
            return self._solve(expr)
        expr = expr.with_args(self.simplify(a) for a in expr.args)
        rule = self._rules.get(expr.op)
        return rule(expr) if rule else expr

    __call__ = simplify

    # -------------------------------------------------------------------------
    # Arithmetic and elementary functions
    # -------------------------------------------------------------------------

    def _arithmetic(self, expr: Expr):
        return algebra.normalize(expr)

    def _trig(self, expr: Expr):
        value = simplify_trig(expr.op, expr.args[0], self.mode)
        return expr if value is None else value

    def _sqrt(self, expr: Expr):
        x = expr.args[0]
        if num.is_real(x):
            return algebra.sqrt_expr(x, self.mode.precision)
        return expr

    def _abs(self, expr: Expr):
        x = expr.args[0]
        if numberp(x):
            return num.abs_value(x, self.mode.precision)
        if isinstance(x, Expr) and x.op == Op.NEG:
            return self._abs(Abs(x.args[0]))
        if isinstance(x, Expr) and x.op == Op.ABS:
            return x
        return expr

    def _gcd(self, expr: Expr):
        a, b = expr.args
        if num.is_rational(a) and num.is_rational(b):
            return num.gcd_values(a, b)
        if algebra.is_zero(a):
            return self._abs(Abs(b))
        if algebra.is_zero(b):
            return self._abs(Abs(a))
        for x in (a, b):
            if num.is_rational(x) and abs(x) == 1:
                return 1
        if equal_expr(a, b):
            return self._abs(Abs(a))
        return expr

    # -------------------------------------------------------------------------
    # Sums and solving
    # -------------------------------------------------------------------------

    def _sum(self, expr: Expr):
        body, var, lo, hi = expr.args
        if not isinstance(var, Var):
            raise MalformedInput(f"sum index must be a variable, got {var!r}")
        body = self.simplify(body)
        lo, hi = self.simplify(lo), self.simplify(hi)
        if not (num.is_integer(lo) and num.is_integer(hi)):
            return expr.with_args((body, var, lo, hi))
        if hi >= lo:
            return self._expand_sum(body, var, lo, hi)
        if hi == lo - 1:
            return 0
        return algebra.neg(self._expand_sum(body, var, hi + 1, lo - 1))

    def _expand_sum(self, body, var: Var, lo: int, hi: int):
        logger.debug("expanding sum over %s = %d..%d", var, lo, hi)
        total = 0
        for i in range(lo, hi + 1):
            total = algebra.add(total, self.simplify(substitute(body, var, i)))
        return total

    def _solve(self, expr: Expr):
        system, unknowns = (self.simplify(a) for a in expr.args)
        return solver.solve(system, unknowns, mode=self.mode, simplify=self.simplify)

    # -------------------------------------------------------------------------
    # Matrices, polynomials, combinatorics
    # -------------------------------------------------------------------------

    def _det(self, expr: Expr):
        m = expr.args[0]
        if numberp(m) or is_vec(m):
            return linalg.det(m, self.mode.precision)
        return expr

    def _combinatorics(self, expr: Expr):
        if not all(numberp(a) for a in expr.args):
            return expr
        prec = self.mode.precision
        if expr.op == Op.FACT:
            return combinatorics.factorial(expr.args[0])
        if expr.op == Op.PERM:
            return combinatorics.permutations(*expr.args, prec=prec)
        return combinatorics.choose(*expr.args, prec=prec)

    def _poly(self, expr: Expr):
        a, b = expr.args[:2]
        var = expr.args[2] if len(expr.args) == 3 else None
        try:
            if expr.op == Op.PGCD:
                return poly.poly_gcd(a, b, var)
            quotient, remainder = poly.poly_div(a, b, var)
        except poly.NotPolynomial:
            return expr
        return quotient if expr.op == Op.PDIV else remainder

    # -------------------------------------------------------------------------
    # Dates
    # -------------------------------------------------------------------------

    def _julian(self, expr: Expr):
        x = expr.args[0]
        if isinstance(x, num.Date):
            return dates.julian_day_number(x)
        if num.is_integer(x):
            return dates.date_from_julian_day(x)
        return expr

    def _date(self, expr: Expr):
        if all(num.is_integer(a) for a in expr.args):
            return dates.make_date(*expr.args)
        return expr

    def _date_part(self, expr: Expr):
        d = expr.args[0]
        if not isinstance(d, num.Date):
            return expr
        if expr.op == Op.WEEKDAY:
            return dates.weekday(d)
        if expr.op == Op.YEARDAY:
            return dates.year_day(d)
        year, month, day = dates.date_to_gregorian(d)
        return {Op.YEAR: year, Op.MONTH: month, Op.DAY: day}[expr.op]


def simplify(expr, mode: Optional[CalcMode] = None):
    """Simplify an expression under the given mode (defaults apply when None)."""
    return Simplifier(mode).simplify(expr)
