"""
Tests for binomial coefficients, factorials and permutations
"""

import math
from fractions import Fraction

import pytest
import sympy

from symcalc.combinatorics import choose, factorial, falling_factorial, permutations
from symcalc.errors import NotConverted, UnsupportedArguments
from symcalc.numbers import Complex, Float


def kronenburg(n: int, k: int) -> Fraction:
    """Reference value of the extended binomial coefficient."""
    def falling(x, j):
        out = Fraction(1)
        for i in range(j):
            out *= x - i
        return out

    if k >= 0:
        return falling(n, k) / math.factorial(k)
    if n < 0 and k <= n:
        return falling(n, n - k) / math.factorial(n - k)
    return Fraction(0)


class TestChoose:
    """Tests for choose"""

    @pytest.mark.parametrize("n,k,expected", [
        (5, 2, 10),
        (5, 0, 1),
        (5, 5, 1),
        (5, 7, 0),
        (5, -1, 0),
        (0, 0, 1),
        (-3, 2, 6),
        (-1, 3, -1),
        (-2, -3, -2),
        (-3, -1, 0),
    ])
    def test_integers(self, n: int, k: int, expected: int) -> None:
        assert choose(n, k) == expected

    def test_kronenburg_grid(self) -> None:
        for n in range(-6, 7):
            for k in range(-6, 7):
                assert choose(n, k) == kronenburg(n, k), (n, k)

    def test_against_sympy(self) -> None:
        for n in range(-6, 7):
            for k in range(0, 7):
                assert choose(n, k) == int(sympy.binomial(n, k)), (n, k)

    def test_big_values_exact(self) -> None:
        assert choose(100, 50) == math.comb(100, 50)

    def test_rational_n(self) -> None:
        assert choose(Fraction(1, 2), 2) == Fraction(-1, 8)

    def test_float_n(self) -> None:
        assert choose(Float(25, -1), 2) == Float(1875, -3)

    def test_non_integer_k(self) -> None:
        with pytest.raises(UnsupportedArguments):
            choose(5, Fraction(1, 2))

    def test_negative_k_with_fractional_n(self) -> None:
        with pytest.raises(UnsupportedArguments):
            choose(Fraction(1, 2), -1)

    def test_complex_n(self) -> None:
        with pytest.raises(UnsupportedArguments):
            choose(Complex(1, 1), 2)

    def test_not_a_number(self) -> None:
        with pytest.raises(NotConverted):
            choose("5", 2)


class TestFactorialAndPermutations:
    """Tests for factorial, permutations and falling_factorial"""

    def test_factorial(self) -> None:
        assert factorial(0) == 1
        assert factorial(5) == 120

    def test_factorial_negative(self) -> None:
        with pytest.raises(UnsupportedArguments):
            factorial(-1)

    def test_factorial_fraction(self) -> None:
        with pytest.raises(UnsupportedArguments):
            factorial(Fraction(1, 2))

    def test_permutations(self) -> None:
        assert permutations(5, 2) == 20
        assert permutations(5, 0) == 1
        assert permutations(3, 5) == 0

    def test_permutations_negative_k(self) -> None:
        with pytest.raises(UnsupportedArguments):
            permutations(5, -1)

    def test_falling_factorial(self) -> None:
        assert falling_factorial(Fraction(1, 2), 3) == Fraction(3, 8)
