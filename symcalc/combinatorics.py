"""Generalized binomial coefficients, factorials and permutations."""

import math

from .errors import UnsupportedArguments
from .numbers import (
    DEFAULT_PRECISION, Number, check_number, div, is_integer, is_real, mul, sub,
)


def falling_factorial(n, k: int, prec: int = DEFAULT_PRECISION) -> Number:
    """n * (n-1) * ... * (n-k+1) for a real n and integer k >= 0."""
    result = 1
    for i in range(k):
        result = mul(result, sub(n, i, prec), prec)
    return result


def factorial(n) -> int:
    check_number(n)
    if not is_integer(n) or n < 0:
        raise UnsupportedArguments(f"fact: expected a nonnegative integer, got {n!r}")
    return math.factorial(n)


def permutations(n, k, prec: int = DEFAULT_PRECISION) -> Number:
    """Number of ordered selections: the falling factorial of n with k factors."""
    check_number(n)
    check_number(k)
    if not (is_integer(k) and k >= 0 and is_real(n)):
        raise UnsupportedArguments(f"perm: unsupported arguments ({n!r}, {k!r})")
    return falling_factorial(n, k, prec)


def choose(n, k, prec: int = DEFAULT_PRECISION) -> Number:
    """
    Generalized binomial coefficient.

    Integer n >= 0 gives the usual n!/(k!(n-k)!) for 0 <= k <= n, else 0.
    Integer n < 0 follows Kronenburg's extension:
        k >= 0      (-1)^k     * C(-n+k-1, k)
        k <= n      (-1)^(n-k) * C(-k-1, n-k)
        n < k < 0   0
    Non-integer n with integer k >= 0 is the falling factorial over k!.
    Any other combination raises UnsupportedArguments.
    """
    check_number(n)
    check_number(k)

    if is_integer(n) and is_integer(k):
        if n >= 0:
            return math.comb(n, k) if 0 <= k <= n else 0
        if k >= 0:
            return (-1) ** k * math.comb(-n + k - 1, k)
        if k <= n:
            return (-1) ** (n - k) * math.comb(-k - 1, n - k)
        return 0

    if is_integer(k) and k >= 0 and is_real(n):
        return div(falling_factorial(n, k, prec), math.factorial(k), prec)

    raise UnsupportedArguments(f"choose: unsupported argument combination ({n!r}, {k!r})")
