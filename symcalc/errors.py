"""
Error taxonomy for the calculator core.

Every error derives from CalcError and from the closest builtin exception,
so hosts can catch either. "No solution" from the solver is not an error:
see solver.SolveResult.
"""


class CalcError(Exception):
    """Base class for all calculator core errors."""
    pass


class DivisionByZero(CalcError, ZeroDivisionError):
    """Fraction with zero denominator, or division by a zero Number."""
    pass


class DimensionMismatch(CalcError, ValueError):
    """Non-square or ragged matrix, or mismatched equation/unknown counts."""
    pass


class UnsupportedArguments(CalcError, ValueError):
    """Argument combination outside a function's supported domain."""
    pass


class NotConverted(CalcError, TypeError):
    """A value outside the numeric variants where a Number is required."""

    def __init__(self, value, context: str = "number"):
        self.value = value
        super().__init__(f"Cannot use {value!r} as a {context}")


class IncompatibleUnits(CalcError, ValueError):
    """Unit conversion between different physical dimensions."""
    pass


class MalformedInput(CalcError, ValueError):
    """Unparseable text or structurally invalid call arguments."""
    pass
