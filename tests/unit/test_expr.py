"""
Tests for the expression model
"""

import pytest

from symcalc.errors import MalformedInput, NotConverted
from symcalc.expr import (
    Add, Const, Expr, Matrix, Mul, Op, Sum, Var, Vec,
    equal_expr, free_of, is_matrix, is_vec, substitute, variables, walk,
)
from symcalc.numbers import Float


class TestNodes:
    """Tests for Var and Expr construction"""

    def test_var_identity_by_ident(self) -> None:
        assert Var("x") == Var("x")
        assert Var("x", "local-1") != Var("x")

    def test_operands_coerced(self) -> None:
        e = Add("x", 2.5)
        assert e.args == (Var("x"), Float(25, -1))

    def test_arity_checked(self) -> None:
        with pytest.raises(MalformedInput):
            Expr(Op.ADD, (1,))

    def test_const_rejects_bool(self) -> None:
        with pytest.raises(NotConverted):
            Const(True)

    def test_const_from_text(self) -> None:
        assert Const("42") == 42
        assert Const("4.5") == Float(45, -1)

    def test_with_args_unchanged_returns_self(self, x) -> None:
        e = Add(x, 1)
        assert e.with_args(e.args) is e

    def test_matrix_predicates(self) -> None:
        m = Matrix([[1, 2], [3, 4]])
        assert is_vec(m)
        assert is_matrix(m)
        assert not is_matrix(Vec(1, 2))
        assert not is_matrix(Vec())


class TestEquality:
    """Tests for equal_expr"""

    def test_numbers_by_value(self) -> None:
        assert equal_expr(10, Float(1, 1))
        assert equal_expr(Add("x", 10), Add("x", Float(10)))

    def test_order_matters(self, x) -> None:
        assert not equal_expr(Add(x, 1), Add(1, x))

    def test_operator_matters(self, x) -> None:
        assert not equal_expr(Add(x, 1), Mul(x, 1))


class TestTraversal:
    """Tests for walk, substitute and variables"""

    def test_walk_preorder(self, x) -> None:
        assert list(walk(Add(x, 1))) == [Add(x, 1), x, 1]

    def test_substitute(self, x, y) -> None:
        assert substitute(Add(x, y), x, 3) == Add(3, y)

    def test_sum_index_is_bound(self, x) -> None:
        k = Var("k")
        e = Sum(Mul(k, x), k, 1, k)
        assert variables(e) == [x, k]
        assert substitute(e, k, 5) == Sum(Mul(k, x), k, 1, 5)

    def test_variables_in_order(self, x, y) -> None:
        assert variables(Add(Mul(y, x), y)) == [y, x]

    def test_free_of(self, x, y) -> None:
        assert free_of(Add(y, 1), x)
        assert not free_of(Add(x, 1), x)
