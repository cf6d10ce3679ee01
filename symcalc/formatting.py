"""
Text rendering for numbers and expressions.

format_number() renders a single Number in any radix 2..36 with optional
digit grouping; format_expr() renders a whole expression tree in the
calculator's normal language ("2 * x - 4", "sqrt(2) / 2", "[x = 1, y = 2]").
"""

import math
from fractions import Fraction
from typing import Optional, Tuple

from .config import CalcMode, DEFAULT_MODE
from .expr import Expr, FUNCTION_NAMES, Op, Var
from .numbers import (
    DEFAULT_PRECISION, Complex, Date, Float, is_negative, is_number, to_fraction,
)
from .errors import NotConverted

DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

WEEKDAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

# Positional float display window, in digits before the decimal point
_SCI_LOW = -3


# =============================================================================
# NUMBERS
# =============================================================================

def int_to_digits(n: int, radix: int = 10) -> str:
    """Digits of a nonnegative integer in the given radix."""
    if n == 0:
        return "0"
    out = []
    while n:
        n, d = divmod(n, radix)
        out.append(DIGITS[d])
    return "".join(reversed(out))


def group_digits(digits: str, size: int, sep: str = ",") -> str:
    """Insert sep every `size` digits, counting from the least significant one."""
    if size <= 0 or len(digits) <= size:
        return digits
    head = len(digits) % size
    parts = [digits[:head]] if head else []
    parts.extend(digits[i:i + size] for i in range(head, len(digits), size))
    return sep.join(parts)


def format_number(n, radix: int = 10, grouped: bool = False,
                  group_char: str = ",", prec: int = DEFAULT_PRECISION) -> str:
    """
    Render a Number.

    Integers outside radix 10 carry an "R#" prefix (12345678901 at radix 16
    is "16#2DFDC1C35"). With grouped=True a separator goes every 4 digits
    (every 3 at radix 10) of the integer part; the prefix and any fractional
    digits are never grouped.
    """
    if not 2 <= radix <= 36:
        raise ValueError(f"radix must be in 2..36, got {radix}")
    if not is_number(n):
        raise NotConverted(n)

    size = (3 if radix == 10 else 4) if grouped else 0
    prefix = "" if radix == 10 else f"{radix}#"

    def whole(k: int) -> str:
        return group_digits(int_to_digits(k, radix), size, group_char)

    if isinstance(n, Date):
        return _format_date(n)
    if isinstance(n, Complex):
        return "(" + ", ".join(format_number(p, radix, grouped, group_char, prec)
                               for p in (n.re, n.im)) + ")"

    sign = "-" if is_negative(n) else ""
    if isinstance(n, int):
        return sign + prefix + whole(abs(n))
    if isinstance(n, Fraction):
        return sign + prefix + whole(abs(n.numerator)) + ":" + whole(n.denominator)
    if radix == 10:
        return sign + _format_decimal_float(n, size, group_char, prec)
    return sign + prefix + _format_radix_float(n, radix, size, group_char, prec)


def _format_decimal_float(n: Float, size: int, sep: str, prec: int) -> str:
    digits = str(abs(n.mantissa))
    point = len(digits) + n.exponent
    if _SCI_LOW < point <= max(prec, len(digits)):
        if n.exponent >= 0:
            int_part, frac_part = digits + "0" * n.exponent, ""
        elif point > 0:
            int_part, frac_part = digits[:point], digits[point:]
        else:
            int_part, frac_part = "0", "0" * -point + digits
        return group_digits(int_part, size, sep) + "." + frac_part
    mant = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
    return f"{mant}e{point - 1}"


def _format_radix_float(n: Float, radix: int, size: int, sep: str, prec: int) -> str:
    value = abs(to_fraction(n))
    int_part = math.floor(value)
    frac = value - int_part
    int_digits = int_to_digits(int_part, radix)
    budget = max(1, math.ceil(prec / math.log10(radix)) - (len(int_digits) if int_part else 0))
    # Last place rounds half away from zero
    scale = radix ** budget
    scaled = math.floor(frac * scale + Fraction(1, 2))
    if scaled == scale:
        int_digits, scaled = int_to_digits(int_part + 1, radix), 0
    frac_digits = int_to_digits(scaled, radix).rjust(budget, "0") if scaled else ""
    return group_digits(int_digits, size, sep) + "." + frac_digits.rstrip("0")


def _format_date(d: Date) -> str:
    from .dates import date_to_gregorian, weekday
    year, month, day = date_to_gregorian(d.absolute)
    return f"<{WEEKDAY_NAMES[weekday(d.absolute)]} {MONTH_NAMES[month - 1]} {day}, {year}>"


# =============================================================================
# EXPRESSIONS
# =============================================================================

_BINARY = {
    Op.EQ: (" = ", 5),
    Op.ADD: (" + ", 10),
    Op.SUB: (" - ", 10),
    Op.MUL: (" * ", 20),
    Op.DIV: (" / ", 20),
    Op.POW: ("^", 30),
}
_NEG_PREC = 25
_ATOM_PREC = 100


def format_expr(e, mode: Optional[CalcMode] = None) -> str:
    """Render an expression in normal language with minimal parentheses."""
    return _render(e, mode or DEFAULT_MODE)[0]


def _render(e, mode: CalcMode) -> Tuple[str, int]:
    if is_number(e):
        text = format_number(e, mode.radix, mode.grouping, mode.group_char, mode.precision)
        return text, (_NEG_PREC if text.startswith("-") else _ATOM_PREC)
    if isinstance(e, Var):
        return e.name, _ATOM_PREC
    if not isinstance(e, Expr):
        return repr(e), _ATOM_PREC

    if e.op in _BINARY:
        sym, prec = _BINARY[e.op]
        left, lp = _render(e.args[0], mode)
        right, rp = _render(e.args[1], mode)
        if e.op == Op.POW:
            wrap_left, wrap_right = lp <= prec, rp < prec
        else:
            wrap_left = lp < prec
            wrap_right = rp <= prec or (rp == _NEG_PREC and e.op != Op.EQ)
        if wrap_left:
            left = f"({left})"
        if wrap_right:
            right = f"({right})"
        return left + sym + right, prec

    if e.op == Op.NEG:
        inner, ip = _render(e.args[0], mode)
        if ip <= _NEG_PREC:
            inner = f"({inner})"
        return "-" + inner, _NEG_PREC

    args = ", ".join(_render(a, mode)[0] for a in e.args)
    if e.op == Op.VEC:
        return f"[{args}]", _ATOM_PREC
    return f"{FUNCTION_NAMES[e.op]}({args})", _ATOM_PREC
