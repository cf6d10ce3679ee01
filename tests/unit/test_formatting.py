"""
Tests for number and expression rendering
"""

from fractions import Fraction

import pytest

from symcalc.config import CalcMode
from symcalc.dates import make_date
from symcalc.errors import NotConverted
from symcalc.expr import Add, Div, Eq, Mul, Neg, Pow, Sin, Sqrt, Sub, Var, Vec
from symcalc.formatting import format_expr, format_number, group_digits
from symcalc.numbers import Complex, Float


class TestFormatNumber:
    """Tests for format_number"""

    @pytest.mark.parametrize("value,radix,expected", [
        (255, 16, "16#FF"),
        (12345678901, 16, "16#2DFDC1C35"),
        (-5, 2, "-2#101"),
        (42, 10, "42"),
        (Fraction(1, 2), 10, "1:2"),
        (Fraction(-3, 4), 10, "-3:4"),
    ])
    def test_exact_numbers(self, value, radix: int, expected: str) -> None:
        assert format_number(value, radix) == expected

    def test_grouping_radix_10(self) -> None:
        assert format_number(1234567, grouped=True) == "1,234,567"

    def test_grouping_other_radix(self) -> None:
        assert format_number(12345678901, 16, grouped=True) == "16#2,DFDC,1C35"

    def test_grouping_custom_separator(self) -> None:
        assert format_number(1234567, grouped=True, group_char=" ") == "1 234 567"

    def test_short_number_not_grouped(self) -> None:
        assert format_number(123, grouped=True) == "123"

    def test_floats(self) -> None:
        assert format_number(Float(5, -1)) == "0.5"
        assert format_number(Float(15, 2)) == "1500."
        assert format_number(Float(-25, -1)) == "-2.5"
        assert format_number(Float(0)) == "0."

    def test_tiny_float_scientific(self) -> None:
        assert format_number(Float(1, -5)) == "1e-5"
        assert format_number(Float(15, -6)) == "1.5e-5"

    def test_float_in_radix_16(self) -> None:
        assert format_number(Float(5, -1), 16) == "16#0.8"

    def test_radix_float_rounds_last_place(self) -> None:
        # 0.1 is 0.19999... in hex
        assert format_number(Float(1, -1), 16) == "16#0.199999999A"

    def test_radix_float_rounding_carries(self) -> None:
        assert format_number(Float(99, -2), 2, prec=1) == "2#1."

    def test_complex(self) -> None:
        assert format_number(Complex(1, 2)) == "(1, 2)"

    def test_date(self) -> None:
        assert format_number(make_date(2000, 1, 1)) == "<Sat Jan 1, 2000>"

    def test_bad_radix(self) -> None:
        with pytest.raises(ValueError):
            format_number(10, 37)

    def test_not_a_number(self) -> None:
        with pytest.raises(NotConverted):
            format_number("12")


class TestGroupDigits:
    """Tests for group_digits"""

    def test_groups_from_right(self) -> None:
        assert group_digits("1234567", 3) == "1,234,567"
        assert group_digits("123456", 3) == "123,456"

    def test_size_zero_is_identity(self) -> None:
        assert group_digits("1234567", 0) == "1234567"


class TestFormatExpr:
    """Tests for format_expr and minimal parenthesization"""

    def test_binary_operators(self) -> None:
        x, y = Var("x"), Var("y")
        assert format_expr(Sub(Mul(2, x), 4)) == "2 * x - 4"
        assert format_expr(Add(Mul(8, x), 1)) == "8 * x + 1"
        assert format_expr(Div(Sqrt(2), 2)) == "sqrt(2) / 2"

    def test_negated_factor_wrapped(self) -> None:
        x, y = Var("x"), Var("y")
        assert format_expr(Mul(x, Neg(y))) == "x * (-y)"

    def test_power_of_power(self) -> None:
        x = Var("x")
        assert format_expr(Pow(Pow(x, 2), 3)) == "(x^2)^3"
        assert format_expr(Pow(x, Pow(2, 3))) == "x^2^3"

    def test_negated_sum(self) -> None:
        x = Var("x")
        assert format_expr(Neg(Add(x, 1))) == "-(x + 1)"

    def test_right_operand_of_subtraction(self) -> None:
        x, y, z = Var("x"), Var("y"), Var("z")
        assert format_expr(Sub(x, Sub(y, z))) == "x - (y - z)"
        assert format_expr(Sub(Sub(x, y), z)) == "x - y - z"

    def test_vector_of_equations(self) -> None:
        x, y = Var("x"), Var("y")
        assert format_expr(Vec(Eq(x, 1), Eq(y, 2))) == "[x = 1, y = 2]"

    def test_function_call(self) -> None:
        assert format_expr(Sin(Mul(45, Var("deg")))) == "sin(45 * deg)"

    def test_negative_number_operand(self) -> None:
        x = Var("x")
        assert format_expr(Add(x, -3)) == "x + (-3)"

    def test_mode_radix(self) -> None:
        mode = CalcMode(radix=16)
        assert format_expr(Add(Var("x"), 255), mode) == "x + 16#FF"
