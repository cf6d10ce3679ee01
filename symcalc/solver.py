"""
Equation solving.

LinearSolver works on a list of equations and a list of unknowns:

1. Each equation becomes a residual lhs - rhs, simplified
2. Residuals linear in the remaining unknowns go through Gauss-Jordan
   elimination; fully determined pivots become bindings
3. Bindings are substituted into the other residuals; a residual left
   polynomial in a single unknown with exactly one distinct real root
   binds that unknown too
4. Steps 2-3 repeat until nothing new is learned

The outcome is a SolveResult; the expression-level solve() turns a
failure back into the unevaluated solve(...) call.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from . import algebra
from .config import CalcMode, DEFAULT_MODE
from .errors import DimensionMismatch, MalformedInput
from .expr import (
    Eq, Expr, Op, Solve, Var, Vec, free_of, is_vec, substitute_all,
)
from .poly import NotPolynomial, collect_monomials, collect_terms, real_roots

logger = logging.getLogger(__name__)


class SolveStatus(Enum):
    SOLVED = "solved"
    INCONSISTENT = "inconsistent"
    UNDERDETERMINED = "underdetermined"


@dataclass
class SolveResult:
    """Outcome of solving a system: a status plus whatever bindings were found."""
    status: SolveStatus
    unknowns: List[Var] = field(default_factory=list)
    bindings: Dict[Var, object] = field(default_factory=dict)

    @property
    def solved(self) -> bool:
        return self.status == SolveStatus.SOLVED

    def as_expr(self) -> Expr:
        """vec of eq(unknown, value) in unknowns order."""
        if not self.solved:
            raise ValueError(f"system is {self.status.value}, no solution vector")
        return Vec(*(Eq(u, self.bindings[u]) for u in self.unknowns))


class _Inconsistent(Exception):
    pass


class LinearSolver:
    """Solve systems of linear equations, with substitution into nonlinear ones."""

    def __init__(self, mode: Optional[CalcMode] = None,
                 simplify: Optional[Callable] = None):
        self.mode = mode or DEFAULT_MODE
        if simplify is None:
            from .simplify import Simplifier
            simplify = Simplifier(self.mode).simplify
        self._simplify = simplify

    def solve_system(self, equations: Sequence, unknowns: Sequence) -> SolveResult:
        equations, unknowns = list(equations), list(unknowns)
        if len(equations) != len(unknowns):
            raise DimensionMismatch(
                f"{len(equations)} equations for {len(unknowns)} unknowns")
        for u in unknowns:
            if not isinstance(u, Var):
                raise MalformedInput(f"unknown must be a symbol, got {u!r}")

        residuals = [self._residual(eq) for eq in equations]
        bindings: Dict[Var, object] = {}
        try:
            while True:
                learned = self._linear_pass(residuals, unknowns, bindings)
                learned |= self._nonlinear_pass(residuals, unknowns, bindings)
                if not learned:
                    break
        except _Inconsistent:
            logger.debug("solve: inconsistent system %s", equations)
            return SolveResult(SolveStatus.INCONSISTENT, unknowns, bindings)

        if len(bindings) < len(unknowns):
            logger.debug("solve: underdetermined, bound %s", list(bindings))
            return SolveResult(SolveStatus.UNDERDETERMINED, unknowns, bindings)
        ordered = {u: bindings[u] for u in unknowns}
        logger.debug("solve: solved %s", ordered)
        return SolveResult(SolveStatus.SOLVED, unknowns, ordered)

    def solve(self, equation, unknown: Var) -> SolveResult:
        """Solve a single equation for a single unknown."""
        return self.solve_system([equation], [unknown])

    # -------------------------------------------------------------------------

    def _residual(self, equation):
        if isinstance(equation, Expr) and equation.op == Op.EQ:
            return self._simplify(algebra.sub(*equation.args))
        return self._simplify(equation)

    def _pending(self, residuals, unknowns, bindings):
        """Residuals with bindings substituted, paired with their open unknowns."""
        out = []
        for r in residuals:
            r = self._simplify(substitute_all(r, bindings)) if bindings else r
            open_vars = [u for u in unknowns if u not in bindings and not free_of(r, u)]
            if not open_vars:
                if not algebra.is_zero(r):
                    raise _Inconsistent(r)
                continue
            out.append((r, open_vars))
        return out

    def _linear_pass(self, residuals, unknowns, bindings) -> bool:
        columns = [u for u in unknowns if u not in bindings]
        rows = []
        for r, open_vars in self._pending(residuals, unknowns, bindings):
            try:
                terms = collect_monomials(r, columns)
            except NotPolynomial:
                continue
            if all(sum(k) <= 1 for k in terms):
                rows.append(terms)
        if not rows:
            return False

        n = len(columns)
        a = np.empty((len(rows), n + 1), dtype=object)
        for i, terms in enumerate(rows):
            for j in range(n):
                a[i, j] = terms.get(tuple(1 if c == j else 0 for c in range(n)), 0)
            a[i, n] = algebra.neg(terms.get((0,) * n, 0))

        pivots = self._gauss_jordan(a)
        learned = False
        for row, col in pivots:
            if all(algebra.is_zero(a[row, j]) for j in range(n) if j != col):
                bindings[columns[col]] = a[row, n]
                learned = True
        return learned

    @staticmethod
    def _gauss_jordan(a: np.ndarray):
        n_rows, n_cols = a.shape[0], a.shape[1] - 1
        pivots = []
        row = 0
        for col in range(n_cols):
            if row == n_rows:
                break
            pivot = next((i for i in range(row, n_rows) if not algebra.is_zero(a[i, col])), None)
            if pivot is None:
                continue
            if pivot != row:
                a[[row, pivot]] = a[[pivot, row]]
            lead = a[row, col]
            for j in range(n_cols + 1):
                a[row, j] = algebra.div(a[row, j], lead)
            for i in range(n_rows):
                if i == row or algebra.is_zero(a[i, col]):
                    continue
                f = a[i, col]
                for j in range(n_cols + 1):
                    a[i, j] = algebra.sub(a[i, j], algebra.mul(f, a[row, j]))
            pivots.append((row, col))
            row += 1

        for i in range(row, n_rows):
            if not algebra.is_zero(a[i, n_cols]):
                raise _Inconsistent(a[i, n_cols])
        return pivots

    def _nonlinear_pass(self, residuals, unknowns, bindings) -> bool:
        for r, open_vars in self._pending(residuals, unknowns, bindings):
            if len(open_vars) != 1:
                continue
            u = open_vars[0]
            try:
                terms = collect_terms(r, u)
                roots = real_roots(terms, self.mode.precision)
            except (NotPolynomial, ValueError):
                continue
            if not roots:
                raise _Inconsistent(r)
            # One binding per pass; the rest are re-read after substitution
            if len(roots) == 1:
                bindings[u] = roots[0]
                return True
        return False


def solve(system, unknowns, mode: Optional[CalcMode] = None,
          simplify: Optional[Callable] = None):
    """
    Solve a vec of equations for a vec of unknowns.

    Returns the vec of eq(unknown, value) forms, a single eq when both
    arguments were single items, or the unevaluated solve(system, unknowns)
    call when there is no unique solution.
    """
    equations = list(system.args) if is_vec(system) else [system]
    variables = list(unknowns.args) if is_vec(unknowns) else [unknowns]
    result = LinearSolver(mode, simplify).solve_system(equations, variables)
    if not result.solved:
        return Solve(system, unknowns)
    if not is_vec(system) and not is_vec(unknowns):
        return result.as_expr().args[0]
    return result.as_expr()
