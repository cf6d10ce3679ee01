"""
Tests for LinearSolver and solve()
"""

from fractions import Fraction

import pytest
import sympy

from symcalc.errors import DimensionMismatch, MalformedInput
from symcalc.expr import Div, Eq, Op, Var, Vec, equal_expr
from symcalc.parser import parse
from symcalc.simplify import simplify
from symcalc.solver import LinearSolver, SolveResult, SolveStatus, solve


def solve_text(system: str, unknowns: str):
    return solve(simplify(parse(system)), parse(unknowns))


class TestLinearSystems:
    """Tests for uniquely solvable linear systems"""

    def test_two_by_two(self, x, y) -> None:
        result = solve_text("[x + y = 3, 2x - 3y = -4]", "[x, y]")
        assert result == Vec(Eq(x, 1), Eq(y, 2))

    def test_single_equation_gives_single_eq(self, x) -> None:
        assert solve_text("2 x + 3 = 11", "x") == Eq(x, 4)

    def test_fractional_solution(self, x) -> None:
        assert solve_text("3 x = 1", "x") == Eq(x, Fraction(1, 3))

    def test_symbolic_coefficients(self, x) -> None:
        a, b = Var("a"), Var("b")
        assert solve_text("a x = b", "x") == Eq(x, Div(b, a))

    def test_bindings_in_unknowns_order(self, x, y) -> None:
        result = solve_text("[y = 2, x + y = 5]", "[x, y]")
        assert result == Vec(Eq(x, 3), Eq(y, 2))

    def test_against_sympy(self) -> None:
        """3x3 integer system matches sympy.linsolve"""
        text = "[2x + y - z = 8, -3x - y + 2z = -11, -2x + y + 2z = -3]"
        result = solve_text(text, "[x, y, z]")

        sx, sy, sz = sympy.symbols("x y z")
        expected, = sympy.linsolve([
            2 * sx + sy - sz - 8,
            -3 * sx - sy + 2 * sz + 11,
            -2 * sx + sy + 2 * sz + 3,
        ], [sx, sy, sz])
        got = [eq.args[1] for eq in result.args]
        assert got == [int(v) for v in expected]


class TestNonlinear:
    """Tests for substitution into nonlinear residuals"""

    def test_unique_root_after_substitution(self, x, y) -> None:
        result = solve_text("[x = 3, x + 4 y^2 = 3]", "[x, y]")
        assert result == Vec(Eq(x, 3), Eq(y, 0))

    def test_repeated_root_of_higher_degree(self, x, y) -> None:
        # (y - 1)^2 (y^2 + 1) has the single real root 1
        result = solve_text("[x = 1, x + (y - 1)^2 * (y^2 + 1) = 1]", "[x, y]")
        assert result.op == Op.VEC
        assert equal_expr(result, Vec(Eq(x, 1), Eq(y, 1)))

    def test_two_roots_not_solved(self) -> None:
        result = solve_text("x^2 = 4", "x")
        assert result.op == Op.SOLVE


class TestFailures:
    """Tests for systems without a unique solution"""

    def test_inconsistent_returns_unevaluated(self) -> None:
        system = simplify(parse("[x + y = 1, x + y = 2]"))
        unknowns = parse("[x, y]")
        result = solve(system, unknowns)
        assert result.op == Op.SOLVE
        assert result.args == (system, unknowns)

    def test_underdetermined_returns_unevaluated(self) -> None:
        assert solve_text("[x + y = 1, 2x + 2y = 2]", "[x, y]").op == Op.SOLVE

    def test_count_mismatch(self) -> None:
        with pytest.raises(DimensionMismatch):
            solve_text("[x = 1]", "[x, y]")

    def test_unknown_must_be_symbol(self) -> None:
        with pytest.raises(MalformedInput):
            solve(parse("x = 1"), 3)


class TestSolveResult:
    """Tests for the tagged SolveResult"""

    def test_status_solved(self, x, y) -> None:
        result = LinearSolver().solve_system(
            [parse("x + y = 3"), parse("x - y = 1")], [x, y])
        assert result.status == SolveStatus.SOLVED
        assert result.solved
        assert result.bindings == {x: 2, y: 1}

    def test_status_inconsistent(self, x) -> None:
        result = LinearSolver().solve(parse("0 x = 1"), x)
        assert result.status == SolveStatus.INCONSISTENT

    def test_status_underdetermined(self, x, y) -> None:
        result = LinearSolver().solve_system(
            [parse("x + y = 1"), parse("2 x + 2 y = 2")], [x, y])
        assert result.status == SolveStatus.UNDERDETERMINED
        assert not result.solved

    def test_partial_bindings_kept(self, x, y) -> None:
        z = Var("z")
        result = LinearSolver().solve_system(
            [parse("z = 4"), parse("x + y = 1"), parse("2 x + 2 y = 2")], [x, y, z])
        assert result.status == SolveStatus.UNDERDETERMINED
        assert result.bindings == {z: 4}

    def test_as_expr_requires_solution(self) -> None:
        with pytest.raises(ValueError):
            SolveResult(SolveStatus.INCONSISTENT).as_expr()

    def test_as_expr(self, x) -> None:
        result = SolveResult(SolveStatus.SOLVED, [x], {x: 5})
        assert equal_expr(result.as_expr(), Vec(Eq(x, 5)))
