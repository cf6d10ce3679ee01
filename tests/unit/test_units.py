"""
Tests for the unit system
"""

from fractions import Fraction

import pytest

from symcalc.errors import IncompatibleUnits
from symcalc.expr import PI, Div, Mul, Pow, Var, equal_expr
from symcalc.numbers import Float
from symcalc.parser import parse
from symcalc.units import (
    convert_units, extract_units, is_unit, is_unitless, remove_units,
    simplify_units, unit_definition, unit_scale, unit_symbols,
)

m, cm, s, rad = Var("m"), Var("cm"), Var("s"), Var("rad")


class TestUnitTable:
    """Tests for unit lookup"""

    def test_base_unit(self) -> None:
        assert unit_definition("m")[0] == 1

    def test_prefixes_are_exact(self) -> None:
        assert unit_definition("cm")[0] == Fraction(1, 100)
        assert unit_definition("km")[0] == 1000
        assert unit_definition("ms")[0] == Fraction(1, 1000)

    def test_same_dimensions_through_prefix(self) -> None:
        assert unit_definition("km")[1] == unit_definition("m")[1]

    def test_unprefixable_unit(self) -> None:
        assert unit_definition("kdeg") is None
        assert unit_definition("kft") is None

    def test_full_names_win_over_prefixes(self) -> None:
        # "min" is minutes, not milli-inches
        assert unit_definition("min")[0] == 60

    def test_is_unit(self) -> None:
        assert is_unit(m)
        assert is_unit(Var("km"))
        assert not is_unit(Var("x"))
        assert not is_unit(3)


class TestExtractUnits:
    """Tests for extract_units and remove_units"""

    def test_single_unit(self) -> None:
        assert extract_units(parse("3 m")) == m

    def test_quotient(self) -> None:
        assert extract_units(parse("9.8 m / s^2")) == Div(m, Pow(s, 2))

    def test_same_dimension_merged_into_first(self) -> None:
        assert extract_units(parse("m * cm")) == Mul(Float(1, -2), Pow(m, 2))

    def test_units_of_sum_from_first_term(self) -> None:
        assert extract_units(parse("3 m + 2 m")) == m

    def test_no_units(self) -> None:
        assert extract_units(parse("2 x")) == 1

    def test_remove_units(self) -> None:
        assert remove_units(parse("9.8 m / s^2")) == Float(98, -1)
        assert remove_units(parse("3 x m")) == Mul(3, Var("x"))

    def test_simplify_units(self) -> None:
        assert simplify_units(parse("m * cm")) == Mul(Float(1, -2), Pow(m, 2))

    def test_simplify_units_of_mixed_sum(self) -> None:
        assert simplify_units(parse("1 m + 50 cm")) == Div(Mul(3, m), 2)


class TestUnitScale:
    """Tests for unit_scale"""

    def test_derived_unit(self) -> None:
        scale, dims = unit_scale(parse("N"))
        assert scale == 1000
        assert dims == unit_scale(parse("kg m / s^2"))[1]

    def test_not_a_product_of_units(self) -> None:
        with pytest.raises(IncompatibleUnits):
            unit_scale(parse("m + s"))
        with pytest.raises(IncompatibleUnits):
            unit_scale(parse("x m"))


class TestConvertUnits:
    """Tests for convert_units"""

    def test_prefix_conversion(self) -> None:
        assert convert_units(parse("3 m"), None, cm) == Mul(300, cm)
        assert convert_units(parse("5 km"), None, m) == Mul(5000, m)

    def test_zero_keeps_unit_product(self) -> None:
        assert convert_units(parse("0 m"), None, cm) == Mul(0, cm)

    def test_time(self) -> None:
        minute = Var("min")
        assert convert_units(parse("2 hr"), None, minute) == Mul(120, minute)

    def test_imperial_float_scale(self) -> None:
        inch = Var("in")
        result = convert_units(parse("1 ft"), None, inch)
        assert result.args[1] == inch
        assert equal_expr(result.args[0], 12)

    def test_degrees_to_radians(self) -> None:
        assert convert_units(parse("90 deg"), None, rad) == Mul(Div(PI, 2), rad)

    def test_explicit_old_units(self) -> None:
        assert convert_units(parse("3"), m, cm) == Mul(300, cm)

    def test_compound_units(self) -> None:
        result = convert_units(parse("36 km / hr"), None, parse("m / s"))
        assert result == Mul(10, Div(m, s))

    def test_sum_of_mixed_units(self) -> None:
        assert convert_units(parse("1 m + 50 cm"), None, cm) == Mul(150, cm)
        assert convert_units(parse("2 m - 50 cm"), None, m) == Mul(Fraction(3, 2), m)

    def test_sum_with_incompatible_term(self) -> None:
        with pytest.raises(IncompatibleUnits):
            convert_units(parse("1 m + 2 s"), None, m)

    def test_incompatible(self) -> None:
        with pytest.raises(IncompatibleUnits):
            convert_units(parse("3 m"), None, s)

    def test_incompatible_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            convert_units(parse("3 kg"), None, parse("m^2"))


class TestUnitSymbols:
    """Tests for unit_symbols and is_unitless"""

    def test_order_of_appearance(self) -> None:
        assert unit_symbols(parse("9.8 m / s^2")) == [m, s]

    def test_unitless(self) -> None:
        assert is_unitless(parse("x + 1"))
        assert is_unitless(5)
        assert not is_unitless(parse("3 m"))
