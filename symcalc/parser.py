"""
Parse calculator text to expression trees.

    parse("2 x + 3 = 11")        -> Eq(Add(Mul(2, x), 3), 11)
    parse("[x + y = 3, x = 1]")  -> Vec(Eq(...), Eq(...))
    parse("16#FF")               -> 255
    parse("sin(45 deg)")         -> Sin(Mul(45, deg))

Numbers: integers, decimals with optional e exponent (Float), p:q
fractions, R#digits radix literals and (re, im) complex literals.
"""

import re
from fractions import Fraction

from . import numbers as num
from .errors import MalformedInput
from .expr import (
    FUNCTIONS_BY_NAME, Add, Div, Eq, Expr, Mul, Neg, Pow, Sub, Var, Vec, numberp,
)

_TOKEN = re.compile(r"""
    (?P<radix>\d+\#[0-9A-Za-z]+(?:\.[0-9A-Za-z]*)?)
  | (?P<float>(?:\d+\.\d*|\.\d+)(?:[eE][+-]?\d+)?|\d+[eE][+-]?\d+)
  | (?P<frac>\d+:\d+)
  | (?P<int>\d+)
  | (?P<name>[A-Za-z_][A-Za-z_0-9]*)
  | (?P<op>\*\*|[-+*/^=(),\[\]])
  | (?P<space>\s+)
""", re.VERBOSE)

_STARTS_PRIMARY = ("(", "[")


class MathParser:
    """Parse calculator text to an expression tree."""

    def __init__(self):
        self.tokens = []
        self.pos = 0

    def parse(self, text: str):
        self._tokenize(text)
        self.pos = 0
        if not self.tokens:
            raise MalformedInput("empty input")
        expr = self._parse_equation()
        if self._current() is not None:
            raise MalformedInput(f"unexpected {self._current()[1]!r} in {text!r}")
        return expr

    # -------------------------------------------------------------------------
    # Tokens
    # -------------------------------------------------------------------------

    def _tokenize(self, text: str):
        self.tokens = []
        i = 0
        while i < len(text):
            m = _TOKEN.match(text, i)
            if m is None:
                raise MalformedInput(f"unexpected character {text[i]!r} at {i} in {text!r}")
            kind = m.lastgroup
            if kind != "space":
                value = m.group()
                if kind == "op" and value == "**":
                    value = "^"
                self.tokens.append((kind, value))
            i = m.end()

    def _current(self):
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _peek(self, offset: int = 1):
        i = self.pos + offset
        return self.tokens[i] if i < len(self.tokens) else None

    def _is_op(self, *values) -> bool:
        token = self._current()
        return token is not None and token[0] == "op" and token[1] in values

    def _consume(self, expected=None):
        token = self._current()
        if token is None:
            raise MalformedInput(f"unexpected end of input, expected {expected or 'a value'}")
        if expected is not None and token[1] != expected:
            raise MalformedInput(f"expected {expected!r}, got {token[1]!r}")
        self.pos += 1
        return token

    # -------------------------------------------------------------------------
    # Grammar
    # -------------------------------------------------------------------------

    def _parse_equation(self):
        left = self._parse_additive()
        if self._is_op("="):
            self._consume()
            return Eq(left, self._parse_additive())
        return left

    def _parse_additive(self):
        left = self._parse_multiplicative()
        while self._is_op("+", "-"):
            op = self._consume()[1]
            right = self._parse_multiplicative()
            left = Add(left, right) if op == "+" else Sub(left, right)
        return left

    def _parse_multiplicative(self):
        left = self._parse_unary()
        while True:
            if self._is_op("*", "/"):
                op = self._consume()[1]
                right = self._parse_unary()
                left = Mul(left, right) if op == "*" else Div(left, right)
            elif self._starts_primary():
                left = Mul(left, self._parse_power())
            else:
                return left

    def _starts_primary(self) -> bool:
        token = self._current()
        if token is None:
            return False
        if token[0] == "op":
            return token[1] in _STARTS_PRIMARY
        return True

    def _parse_unary(self):
        if self._is_op("-"):
            self._consume()
            operand = self._parse_unary()
            return num.neg(operand) if numberp(operand) and not isinstance(operand, num.Date) else Neg(operand)
        if self._is_op("+"):
            self._consume()
            return self._parse_unary()
        return self._parse_power()

    def _parse_power(self):
        base = self._parse_primary()
        if self._is_op("^"):
            self._consume()
            return Pow(base, self._parse_unary())
        return base

    def _parse_primary(self):
        kind, value = self._consume()

        if kind == "int":
            return int(value)
        if kind == "float":
            return num.Float.from_string(value)
        if kind == "frac":
            p, q = value.split(":")
            return num.make_fraction(int(p), int(q))
        if kind == "radix":
            return self._radix_literal(value)

        if kind == "name":
            if self._is_op("("):
                return self._parse_call(value)
            return Var(value)

        if value == "(":
            first = self._parse_equation()
            if self._is_op(","):
                self._consume()
                second = self._parse_equation()
                self._consume(")")
                if not (num.is_real(first) and num.is_real(second)):
                    raise MalformedInput(f"complex literal parts must be real numbers: ({first}, {second})")
                return num.make_complex(first, second)
            self._consume(")")
            return first

        if value == "[":
            items = []
            if not self._is_op("]"):
                items.append(self._parse_equation())
                while self._is_op(","):
                    self._consume()
                    items.append(self._parse_equation())
            self._consume("]")
            return Vec(*items)

        raise MalformedInput(f"unexpected {value!r}")

    def _parse_call(self, name: str) -> Expr:
        op = FUNCTIONS_BY_NAME.get(name)
        if op is None:
            raise MalformedInput(f"unknown function {name!r}")
        self._consume("(")
        args = []
        if not self._is_op(")"):
            args.append(self._parse_equation())
            while self._is_op(","):
                self._consume()
                args.append(self._parse_equation())
        self._consume(")")
        return Expr(op, tuple(args))

    @staticmethod
    def _radix_literal(text: str):
        radix_text, digits = text.split("#", 1)
        radix = int(radix_text)
        if not 2 <= radix <= 36:
            raise MalformedInput(f"radix {radix} outside 2..36 in {text!r}")
        whole, _, frac = digits.partition(".")
        try:
            value = int(whole or "0", radix)
            if "." not in digits:
                return value
            scaled = int((whole + frac) or "0", radix)
        except ValueError:
            raise MalformedInput(f"bad digits for radix {radix} in {text!r}")
        return num.round_to_float(Fraction(scaled, radix ** len(frac)))


def parse(text: str):
    return MathParser().parse(text)
