"""
Numeric Tower
=============

Number variants used throughout the core:

- int                  exact integers of any size
- fractions.Fraction   exact rationals; never built with denominator 1
- Float                decimal floating value mantissa * 10^exponent
- Complex              pair of real Numbers, imaginary part never exact 0
- Date                 absolute day count (day 1 = Gregorian 0001-01-01)

Representations are converted only on request. Any Float operand makes an
arithmetic result Float, rounded to `prec` significant digits.
"""

import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Tuple, Union

from .errors import DivisionByZero, NotConverted

DEFAULT_PRECISION = 12

_LOG10_2 = 0.30102999566398120


# =============================================================================
# VARIANTS
# =============================================================================

@dataclass(frozen=True)
class Float:
    """Decimal float mantissa * 10^exponent, trailing zeros stripped."""
    mantissa: int
    exponent: int = 0

    def __post_init__(self):
        if isinstance(self.mantissa, bool) or not isinstance(self.mantissa, int):
            raise NotConverted(self.mantissa, "float mantissa")
        m, e = self.mantissa, self.exponent
        if m == 0:
            e = 0
        else:
            while m % 10 == 0:
                m //= 10
                e += 1
        object.__setattr__(self, "mantissa", m)
        object.__setattr__(self, "exponent", e)

    @classmethod
    def from_float(cls, value: float, prec: int = DEFAULT_PRECISION) -> "Float":
        """Round a Python float to `prec` significant digits."""
        if isinstance(value, bool) or not math.isfinite(value):
            raise NotConverted(value, "finite float")
        if value == 0:
            return cls(0, 0)
        text = f"{value:.{prec - 1}e}"
        mant, exp = text.split("e")
        sign = -1 if mant.startswith("-") else 1
        digits = mant.lstrip("-").replace(".", "")
        return cls(sign * int(digits), int(exp) - (prec - 1))

    @classmethod
    def from_string(cls, text: str) -> "Float":
        """Exact Float from decimal text such as '12.5', '.5', '10.' or '1.5e-3'."""
        raw = text.strip().lower()
        exp = 0
        if "e" in raw:
            raw, exp_text = raw.split("e", 1)
            exp = int(exp_text)
        sign = 1
        if raw.startswith(("-", "+")):
            sign = -1 if raw[0] == "-" else 1
            raw = raw[1:]
        whole, _, frac = raw.partition(".")
        digits = (whole + frac) or "0"
        if not digits.isdigit():
            raise NotConverted(text, "decimal number")
        return cls(sign * int(digits), exp - len(frac))


@dataclass(frozen=True)
class Complex:
    """Complex value with real-Number parts."""
    re: object
    im: object


@dataclass(frozen=True)
class Date:
    """Absolute day count; day 1 is Gregorian 0001-01-01."""
    absolute: int


Number = Union[int, Fraction, Float, Complex, Date]


# =============================================================================
# PREDICATES
# =============================================================================

def is_number(x) -> bool:
    if isinstance(x, bool):
        return False
    return isinstance(x, (int, Fraction, Float, Complex, Date))


def is_integer(x) -> bool:
    return isinstance(x, int) and not isinstance(x, bool)


def is_rational(x) -> bool:
    return is_integer(x) or isinstance(x, Fraction)


def is_real(x) -> bool:
    return is_rational(x) or isinstance(x, Float)


def is_exact(x) -> bool:
    if isinstance(x, Complex):
        return is_rational(x.re) and is_rational(x.im)
    return is_rational(x) or isinstance(x, Date)


def check_number(x, context: str = "number"):
    if not is_number(x):
        raise NotConverted(x, context)
    return x


def check_real(x, context: str = "real number"):
    if not is_real(x):
        raise NotConverted(x, context)
    return x


def is_zero(x) -> bool:
    if isinstance(x, Float):
        return x.mantissa == 0
    if isinstance(x, Complex):
        return is_zero(x.re) and is_zero(x.im)
    if is_rational(x):
        return x == 0
    return False


def is_one(x) -> bool:
    if isinstance(x, Float):
        return x.mantissa == 1 and x.exponent == 0
    return is_rational(x) and x == 1


def is_negative(x) -> bool:
    if isinstance(x, Float):
        return x.mantissa < 0
    return is_rational(x) and x < 0


# =============================================================================
# CONSTRUCTION AND CONVERSION
# =============================================================================

def make_fraction(p: int, q: int = 1) -> Union[int, Fraction]:
    """Normalized rational p/q; an int when the reduced denominator is 1."""
    if q == 0:
        raise DivisionByZero(f"Division by zero: {p}/{q}")
    return _exact(Fraction(p, q))


def make_complex(re, im) -> Number:
    """Complex number, collapsed to its real part when im is exact 0."""
    check_real(re, "complex part")
    check_real(im, "complex part")
    if is_rational(im) and im == 0:
        return re
    return Complex(re, im)


def _exact(value):
    if isinstance(value, Fraction) and value.denominator == 1:
        return int(value.numerator)
    return value


def num_digits(n: int) -> int:
    """Number of decimal digits in |n| (1 for zero)."""
    n = abs(n)
    if n == 0:
        return 1
    est = int((n.bit_length() - 1) * _LOG10_2) + 1
    while 10 ** est <= n:
        est += 1
    while est > 1 and 10 ** (est - 1) > n:
        est -= 1
    return est


def to_fraction(x) -> Fraction:
    """Exact rational value of a real Number."""
    if isinstance(x, Float):
        if x.exponent >= 0:
            return Fraction(x.mantissa * 10 ** x.exponent)
        return Fraction(x.mantissa, 10 ** -x.exponent)
    if is_rational(x):
        return Fraction(x)
    raise NotConverted(x, "real number")


def round_to_float(value: Fraction, prec: int = DEFAULT_PRECISION) -> Float:
    """Round an exact rational to a Float with `prec` significant digits."""
    if value == 0:
        return Float(0, 0)
    sign = -1 if value < 0 else 1
    p, q = abs(value.numerator), value.denominator
    exp = num_digits(p) - num_digits(q) - prec
    while True:
        if exp <= 0:
            num, den = p * 10 ** -exp, q
        else:
            num, den = p, q * 10 ** exp
        mant, rem = divmod(num, den)
        if 2 * rem >= den:
            mant += 1
        if num_digits(mant) > prec:
            exp += 1
            continue
        return Float(sign * mant, exp)


def to_float(x, prec: int = DEFAULT_PRECISION) -> Number:
    """Float approximation of any Number (Complex parts converted separately)."""
    if isinstance(x, Complex):
        return Complex(to_float(x.re, prec), to_float(x.im, prec))
    if isinstance(x, Date):
        raise NotConverted(x, "plain number")
    return round_to_float(to_fraction(check_number(x)), prec)


def to_python_float(x) -> float:
    if isinstance(x, Float):
        return float(to_fraction(x))
    if is_rational(x):
        return float(x)
    raise NotConverted(x, "real number")


# =============================================================================
# ARITHMETIC
# =============================================================================

def _parts(x) -> Tuple[object, object]:
    if isinstance(x, Complex):
        return x.re, x.im
    return x, 0


def _plain(*values):
    for v in values:
        check_number(v)
        if isinstance(v, Date):
            raise NotConverted(v, "plain number")


def add(a, b, prec: int = DEFAULT_PRECISION) -> Number:
    if isinstance(a, Date) or isinstance(b, Date):
        if isinstance(a, Date) and is_integer(b):
            return Date(a.absolute + b)
        if isinstance(b, Date) and is_integer(a):
            return Date(a + b.absolute)
        raise NotConverted(b if isinstance(a, Date) else a, "day count")
    _plain(a, b)
    if isinstance(a, Complex) or isinstance(b, Complex):
        ar, ai = _parts(a)
        br, bi = _parts(b)
        return make_complex(add(ar, br, prec), add(ai, bi, prec))
    if isinstance(a, Float) or isinstance(b, Float):
        return round_to_float(to_fraction(a) + to_fraction(b), prec)
    return _exact(Fraction(a) + Fraction(b))


def neg(a) -> Number:
    _plain(a)
    if isinstance(a, Float):
        return Float(-a.mantissa, a.exponent)
    if isinstance(a, Complex):
        return Complex(neg(a.re), neg(a.im))
    return -a


def sub(a, b, prec: int = DEFAULT_PRECISION) -> Number:
    if isinstance(a, Date):
        if isinstance(b, Date):
            return a.absolute - b.absolute
        if is_integer(b):
            return Date(a.absolute - b)
        raise NotConverted(b, "day count")
    return add(a, neg(b), prec)


def mul(a, b, prec: int = DEFAULT_PRECISION) -> Number:
    _plain(a, b)
    if isinstance(a, Complex) or isinstance(b, Complex):
        ar, ai = _parts(a)
        br, bi = _parts(b)
        return make_complex(
            sub(mul(ar, br, prec), mul(ai, bi, prec), prec),
            add(mul(ar, bi, prec), mul(ai, br, prec), prec),
        )
    if isinstance(a, Float) or isinstance(b, Float):
        return round_to_float(to_fraction(a) * to_fraction(b), prec)
    return _exact(Fraction(a) * Fraction(b))


def div(a, b, prec: int = DEFAULT_PRECISION) -> Number:
    _plain(a, b)
    if is_zero(b):
        raise DivisionByZero(f"Division by zero: {a!r} / {b!r}")
    if isinstance(a, Complex) or isinstance(b, Complex):
        ar, ai = _parts(a)
        br, bi = _parts(b)
        denom = add(mul(br, br, prec), mul(bi, bi, prec), prec)
        return make_complex(
            div(add(mul(ar, br, prec), mul(ai, bi, prec), prec), denom, prec),
            div(sub(mul(ai, br, prec), mul(ar, bi, prec), prec), denom, prec),
        )
    if isinstance(a, Float) or isinstance(b, Float):
        return round_to_float(to_fraction(a) / to_fraction(b), prec)
    return make_fraction(Fraction(a).numerator * Fraction(b).denominator,
                         Fraction(a).denominator * Fraction(b).numerator)


def pow_int(a, n: int, prec: int = DEFAULT_PRECISION) -> Number:
    """a^n for an integer exponent."""
    _plain(a)
    if not is_integer(n):
        raise NotConverted(n, "integer exponent")
    if n < 0:
        if is_zero(a):
            raise DivisionByZero(f"Division by zero: {a!r}^{n}")
        return div(1, pow_int(a, -n, prec), prec)
    if isinstance(a, Complex):
        result, base = 1, a
        while n:
            if n & 1:
                result = mul(result, base, prec)
            base = mul(base, base, prec)
            n >>= 1
        return result
    if isinstance(a, Float):
        return round_to_float(to_fraction(a) ** n, prec)
    return _exact(Fraction(a) ** n)


def abs_value(a, prec: int = DEFAULT_PRECISION) -> Number:
    _plain(a)
    if isinstance(a, Complex):
        sq = add(mul(a.re, a.re, prec), mul(a.im, a.im, prec), prec)
        return sqrt_value(sq, prec)
    return neg(a) if is_negative(a) else a


def compare(a, b) -> int:
    """-1, 0 or 1 comparing two real Numbers (or two Dates)."""
    if isinstance(a, Date) and isinstance(b, Date):
        fa, fb = a.absolute, b.absolute
    else:
        fa, fb = to_fraction(a), to_fraction(b)
    return (fa > fb) - (fa < fb)


def num_equal(a, b) -> bool:
    """Numeric equivalence: same mathematical value regardless of representation."""
    check_number(a)
    check_number(b)
    if isinstance(a, Date) or isinstance(b, Date):
        return isinstance(a, Date) and isinstance(b, Date) and a.absolute == b.absolute
    if isinstance(a, Complex) or isinstance(b, Complex):
        ar, ai = _parts(a)
        br, bi = _parts(b)
        return num_equal(ar, br) and num_equal(ai, bi)
    return to_fraction(a) == to_fraction(b)


# =============================================================================
# GCD AND ROOTS
# =============================================================================

def integer_gcd(a: int, b: int) -> int:
    """Nonnegative greatest common divisor; gcd(0, 0) = 0."""
    if not (is_integer(a) and is_integer(b)):
        raise NotConverted(a if not is_integer(a) else b, "integer")
    return math.gcd(a, b)


def gcd_values(a, b) -> Union[int, Fraction]:
    """gcd of two rationals: gcd of numerators over lcm of denominators."""
    if not (is_rational(a) and is_rational(b)):
        raise NotConverted(a if not is_rational(a) else b, "rational")
    fa, fb = Fraction(a), Fraction(b)
    num = math.gcd(fa.numerator, fb.numerator)
    den = fa.denominator * fb.denominator // math.gcd(fa.denominator, fb.denominator)
    return make_fraction(num, den)


_SMALL_PRIMES = [p for p in range(2, 1000) if all(p % d for d in range(2, int(p ** 0.5) + 1))]


def sqrt_exact(n: int) -> Tuple[int, int]:
    """Split n >= 0 into (a, b) with n = a^2 * b and b free of small square factors."""
    if n < 0:
        raise NotConverted(n, "nonnegative integer")
    root = math.isqrt(n)
    if root * root == n:
        return root, 1
    outer, inner = 1, n
    for p in _SMALL_PRIMES:
        sq = p * p
        if sq > inner:
            break
        while inner % sq == 0:
            inner //= sq
            outer *= p
    root = math.isqrt(inner)
    if root * root == inner:
        return outer * root, 1
    return outer, inner


def sqrt_value(x, prec: int = DEFAULT_PRECISION) -> Number:
    """Numeric square root; exact when x is a perfect rational square."""
    _plain(x)
    if isinstance(x, Complex):
        raise NotConverted(x, "real number")
    if is_negative(x):
        return make_complex(0 if is_rational(x) else Float(0), sqrt_value(neg(x), prec))
    if is_rational(x):
        fr = Fraction(x)
        a1, b1 = sqrt_exact(fr.numerator)
        a2, b2 = sqrt_exact(fr.denominator)
        if b1 == 1 and b2 == 1:
            return make_fraction(a1, a2)
    fr = to_fraction(x)
    num, den = fr.numerator, fr.denominator
    k = max(0, prec + 2 - (num_digits(num) - num_digits(den)) // 2)
    root = math.isqrt(num * 10 ** (2 * k) // den)
    return round_to_float(Fraction(root, 10 ** k), prec)
