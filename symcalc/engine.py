"""
Main MathEngine class - unified interface for all operations.
"""

import logging
from typing import List, Optional, Tuple, Union

from . import combinatorics, linalg, numbers as num, units
from .config import CalcMode
from .expr import Expr, Gcd
from .formatting import format_expr, format_number
from .parser import MathParser
from .poly import format_division_log, poly_div
from .simplify import Simplifier
from .solver import LinearSolver, SolveResult, solve

logger = logging.getLogger(__name__)


class MathEngine:
    """
    Unified interface to the calculator core.

    Usage:
        engine = MathEngine(CalcMode(symbolic=True))

        engine.simplify("sin(pi/4 rad)")                # sqrt(2) / 2
        engine.solve("[x + y = 3, 2x - 3y = -4]", "[x, y]")
        engine.poly_div("2 x^3 + 1", "x^2 + 2 x")       # 2 * x - 4
        engine.trail                                    # ["pdiv 2 * x - 4\\nprem 8 * x + 1\\n"]
        engine.convert_units("3 m", None, "cm")         # 300 * cm

    Text arguments are parsed first; expression trees pass through as is.
    """

    def __init__(self, mode: Optional[CalcMode] = None):
        self.parser = MathParser()
        self.mode = mode or CalcMode()
        self.trail: List[str] = []

    @property
    def simplifier(self) -> Simplifier:
        return Simplifier(self.mode)

    def set_mode(self, **changes) -> CalcMode:
        """Replace mode flags (angle_unit, symbolic, radix, grouping, ...)."""
        mode = self.mode.replace(**changes)
        for warning in mode.validate():
            logger.warning("Mode: %s", warning)
        self.mode = mode
        return mode

    def _expr(self, x):
        return self.parser.parse(x) if isinstance(x, str) else x

    def parse(self, text: str):
        """Parse string to expression tree."""
        return self.parser.parse(text)

    def simplify(self, expr):
        return self.simplifier.simplify(self._expr(expr))

    # -------------------------------------------------------------------------
    # Solving and algebra
    # -------------------------------------------------------------------------

    def solve(self, system, unknowns):
        """Solution vec, or the unevaluated solve(...) call when unsolvable."""
        mode = self.mode
        return solve(self._expr(system), self._expr(unknowns),
                     mode=mode, simplify=Simplifier(mode).simplify)

    def solve_system(self, equations, unknowns) -> SolveResult:
        """Tagged result for a list of equations and a list of unknowns."""
        equations = [self.simplify(e) for e in equations]
        unknowns = [self._expr(u) for u in unknowns]
        return LinearSolver(self.mode).solve_system(equations, unknowns)

    def poly_div(self, dividend, divisor, var=None):
        """Quotient of a polynomial division; the division log goes to the trail."""
        quotient, remainder = self.poly_div_rem(dividend, divisor, var)
        self.trail.append(format_division_log(quotient, remainder))
        return quotient

    def poly_div_rem(self, dividend, divisor, var=None) -> Tuple[object, object]:
        var = self._expr(var) if var is not None else None
        return poly_div(self.simplify(dividend), self.simplify(divisor), var)

    def det(self, matrix):
        return linalg.det(self.simplify(matrix), self.mode.precision)

    def gcd(self, a, b):
        return self.simplifier.simplify(Gcd(self._expr(a), self._expr(b)))

    def choose(self, n, k):
        return combinatorics.choose(self._expr(n), self._expr(k), self.mode.precision)

    # -------------------------------------------------------------------------
    # Units
    # -------------------------------------------------------------------------

    def extract_units(self, expr):
        return units.extract_units(self._expr(expr))

    def remove_units(self, expr):
        return units.remove_units(self._expr(expr), self.mode)

    def convert_units(self, expr, old_units, new_units):
        old_units = self._expr(old_units) if old_units is not None else None
        return units.convert_units(self._expr(expr), old_units, self._expr(new_units), self.mode)

    def simplify_units(self, expr):
        return units.simplify_units(self._expr(expr), self.mode)

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    def format_number(self, n, radix: Optional[int] = None,
                      grouped: Optional[bool] = None) -> str:
        m = self.mode
        return format_number(
            num.check_number(n),
            m.radix if radix is None else radix,
            m.grouping if grouped is None else grouped,
            m.group_char,
            m.precision,
        )

    def format_expr(self, expr: Union[Expr, object]) -> str:
        return format_expr(expr, self.mode)
