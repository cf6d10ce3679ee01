"""Shared fixtures for symcalc tests."""

import pytest

from symcalc import AngleUnit, CalcMode, MathEngine, Var


@pytest.fixture
def x():
    return Var("x")


@pytest.fixture
def y():
    return Var("y")


@pytest.fixture
def a():
    return Var("a")


@pytest.fixture
def symbolic_rad():
    return CalcMode(angle_unit=AngleUnit.RADIANS, symbolic=True)


@pytest.fixture
def numeric_rad():
    return CalcMode(angle_unit=AngleUnit.RADIANS, symbolic=False)


@pytest.fixture
def symbolic_deg():
    return CalcMode(angle_unit=AngleUnit.DEGREES, symbolic=True)


@pytest.fixture
def engine():
    return MathEngine()
