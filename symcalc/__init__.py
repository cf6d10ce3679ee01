"""
symcalc
=======
Symbolic calculator core: numeric tower, expression simplifier, units,
linear solver, polynomial division, determinants, calendar arithmetic
and generalized binomial coefficients.

Usage:
    from symcalc import MathEngine, CalcMode, simplify, parse

    # Quick simplify with default mode (degrees, numeric)
    simplify(parse("sin(30)"))                      # 0.5

    # Symbolic mode, radians
    mode = CalcMode(angle_unit=AngleUnit.RADIANS, symbolic=True)
    simplify(parse("tan(pi/3)"), mode)              # sqrt(3)

    # Full engine
    engine = MathEngine(mode)
    engine.solve("[x + y = 3, 2x - 3y = -4]", "[x, y]")   # [x = 1, y = 2]
    engine.poly_div("2 x^3 + 1", "x^2 + 2 x")             # 2 * x - 4
"""

import logging

from .config import AngleUnit, CalcMode, DEFAULT_MODE
from .errors import (
    CalcError, DivisionByZero, DimensionMismatch, UnsupportedArguments,
    NotConverted, IncompatibleUnits, MalformedInput,
)
from .numbers import (
    Float, Complex, Date,
    make_fraction, make_complex, to_float, num_equal,
)
from .expr import (
    # Expression system
    Op, Var, Expr, PI,
    Const, Add, Sub, Mul, Div, Pow, Neg, Eq, Vec, Matrix,
    Sin, Cos, Tan, Cot, Sec, Csc, Sqrt, Abs,
    Gcd, Det, Choose, Fact, Perm, Sum, Solve, Julian, Pdiv, Prem,
    numberp, equal_expr, substitute, variables,
)
from .formatting import format_number, format_expr
from .parser import MathParser
from .simplify import Simplifier, simplify
from .units import extract_units, remove_units, convert_units, simplify_units
from .solver import LinearSolver, SolveResult, SolveStatus
from .poly import poly_div, poly_rem, poly_gcd, format_division_log
from .linalg import det
from .dates import (
    absolute_from_gregorian, date_to_gregorian,
    absolute_from_julian, date_to_julian,
    julian_day_number, date_from_julian_day, make_date,
)
from .combinatorics import choose, factorial, permutations
from .engine import MathEngine

logging.getLogger(__name__).addHandler(logging.NullHandler())


def configure_logging(level=logging.INFO):
    """Send symcalc log records to stderr at the given level."""
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )
    logging.getLogger(__name__).setLevel(level)


# Convenience functions
_default_engine = None

def get_engine():
    """Get or create default engine."""
    global _default_engine
    if _default_engine is None:
        _default_engine = MathEngine()
    return _default_engine

def parse(text):
    """Parse string to expression tree."""
    return get_engine().parse(text)

def solve(system, unknowns):
    """Solve a vec of equations for a vec of unknowns."""
    return get_engine().solve(system, unknowns)

def gcd(a, b):
    """gcd of two numbers or expressions."""
    return get_engine().gcd(a, b)

__version__ = "1.0.0"
__all__ = [
    # Mode and errors
    'AngleUnit', 'CalcMode', 'DEFAULT_MODE',
    'CalcError', 'DivisionByZero', 'DimensionMismatch', 'UnsupportedArguments',
    'NotConverted', 'IncompatibleUnits', 'MalformedInput',

    # Numbers
    'Float', 'Complex', 'Date',
    'make_fraction', 'make_complex', 'to_float', 'num_equal',

    # Expressions
    'Op', 'Var', 'Expr', 'PI',
    'Const', 'Add', 'Sub', 'Mul', 'Div', 'Pow', 'Neg', 'Eq', 'Vec', 'Matrix',
    'Sin', 'Cos', 'Tan', 'Cot', 'Sec', 'Csc', 'Sqrt', 'Abs',
    'Gcd', 'Det', 'Choose', 'Fact', 'Perm', 'Sum', 'Solve', 'Julian', 'Pdiv', 'Prem',
    'numberp', 'equal_expr', 'substitute', 'variables',

    # Classes
    'MathParser', 'Simplifier', 'LinearSolver', 'SolveResult', 'SolveStatus',
    'MathEngine',

    # Functions
    'format_number', 'format_expr', 'simplify',
    'extract_units', 'remove_units', 'convert_units', 'simplify_units',
    'poly_div', 'poly_rem', 'poly_gcd', 'format_division_log', 'det',
    'absolute_from_gregorian', 'date_to_gregorian',
    'absolute_from_julian', 'date_to_julian',
    'julian_day_number', 'date_from_julian_day', 'make_date',
    'choose', 'factorial', 'permutations',
    'parse', 'solve', 'gcd', 'get_engine', 'configure_logging',
]
