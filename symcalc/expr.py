"""
Expression system: symbols, forms, constructors and equality.

An expression is a Number (see numbers.py), a Var, or an Expr form made of
an operator tag and an ordered tuple of operand expressions. All three are
immutable values.
"""

from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from typing import Dict, Iterator, List, Union

from .errors import MalformedInput, NotConverted
from .numbers import Float, Number, is_number, make_fraction, num_equal


# =============================================================================
# OPERATORS
# =============================================================================

class Op(Enum):
    """All supported operators."""
    ADD = 0
    SUB = 1
    MUL = 2
    DIV = 3
    POW = 4
    NEG = 5
    EQ = 10
    VEC = 16
    SIN = 21
    COS = 22
    TAN = 23
    COT = 24
    SEC = 25
    CSC = 26
    SQRT = 27
    ABS = 28
    GCD = 30
    DET = 31
    CHOOSE = 32
    FACT = 33
    PERM = 34
    SUM = 35
    SOLVE = 36
    JULIAN = 40
    DATE = 41
    YEAR = 42
    MONTH = 43
    DAY = 44
    WEEKDAY = 45
    YEARDAY = 46
    PDIV = 50
    PREM = 51
    PGCD = 52


# Operand counts: int for fixed arity, (min, max) for a range, None for variadic
ARITY = {
    Op.ADD: 2, Op.SUB: 2, Op.MUL: 2, Op.DIV: 2, Op.POW: 2, Op.NEG: 1,
    Op.EQ: 2, Op.VEC: None,
    Op.SIN: 1, Op.COS: 1, Op.TAN: 1, Op.COT: 1, Op.SEC: 1, Op.CSC: 1,
    Op.SQRT: 1, Op.ABS: 1,
    Op.GCD: 2, Op.DET: 1, Op.CHOOSE: 2, Op.FACT: 1, Op.PERM: 2,
    Op.SUM: 4, Op.SOLVE: 2,
    Op.JULIAN: 1, Op.DATE: 3, Op.YEAR: 1, Op.MONTH: 1, Op.DAY: 1,
    Op.WEEKDAY: 1, Op.YEARDAY: 1,
    Op.PDIV: (2, 3), Op.PREM: (2, 3), Op.PGCD: (2, 3),
}

# Named functions, as written in text
FUNCTION_NAMES = {
    Op.SIN: "sin", Op.COS: "cos", Op.TAN: "tan", Op.COT: "cot",
    Op.SEC: "sec", Op.CSC: "csc", Op.SQRT: "sqrt", Op.ABS: "abs",
    Op.GCD: "gcd", Op.DET: "det", Op.CHOOSE: "choose", Op.FACT: "fact",
    Op.PERM: "perm", Op.SUM: "sum", Op.SOLVE: "solve",
    Op.JULIAN: "julian", Op.DATE: "date", Op.YEAR: "year", Op.MONTH: "month",
    Op.DAY: "day", Op.WEEKDAY: "weekday", Op.YEARDAY: "yearday",
    Op.PDIV: "pdiv", Op.PREM: "prem", Op.PGCD: "pgcd",
}
FUNCTIONS_BY_NAME = {name: op for op, name in FUNCTION_NAMES.items()}

TRIG_OPS = (Op.SIN, Op.COS, Op.TAN, Op.COT, Op.SEC, Op.CSC)
ARITHMETIC_OPS = (Op.ADD, Op.SUB, Op.MUL, Op.DIV, Op.POW, Op.NEG)


# =============================================================================
# NODES
# =============================================================================

@dataclass(frozen=True)
class Var:
    """
    Symbol reference.

    Two Vars are the same variable iff their idents match; the name is only
    used for display.
    """
    name: str = field(compare=False)
    ident: str = None

    def __post_init__(self):
        if self.ident is None:
            object.__setattr__(self, "ident", "var-" + self.name)

    def __repr__(self):
        return self.name

    __str__ = __repr__


@dataclass(frozen=True)
class Expr:
    """Compound expression: operator tag plus ordered operands."""
    op: Op
    args: tuple = ()

    def __post_init__(self):
        args = tuple(_coerce(a) for a in self.args)
        object.__setattr__(self, "args", args)
        arity = ARITY[self.op]
        n = len(args)
        if isinstance(arity, int) and n != arity:
            raise MalformedInput(f"{self.op.name} takes {arity} operands, got {n}")
        if isinstance(arity, tuple) and not arity[0] <= n <= arity[1]:
            raise MalformedInput(f"{self.op.name} takes {arity[0]}..{arity[1]} operands, got {n}")

    def __repr__(self):
        from .formatting import format_expr
        return format_expr(self)

    __str__ = __repr__

    def with_args(self, args) -> "Expr":
        """Same operator with new operands; returns self when nothing changed."""
        args = tuple(args)
        if len(args) == len(self.args) and all(a is b for a, b in zip(args, self.args)):
            return self
        return Expr(self.op, args)


Expression = Union[Number, Var, Expr]


# =============================================================================
# CONSTRUCTORS
# =============================================================================

def Const(v) -> Number:
    """Numeric leaf from a Python value."""
    if isinstance(v, bool):
        raise NotConverted(v)
    if isinstance(v, Fraction):
        return make_fraction(v.numerator, v.denominator)
    if is_number(v):
        return v
    if isinstance(v, float):
        return Float.from_float(v)
    if isinstance(v, str):
        text = v.strip()
        if text.lstrip("+-").isdigit():
            return int(text)
        return Float.from_string(text)
    raise NotConverted(v)


def _coerce(x) -> Expression:
    if isinstance(x, (Expr, Var)):
        return x
    if isinstance(x, str):
        return Var(x)
    return Const(x)


def Add(l, r): return Expr(Op.ADD, (l, r))
def Sub(l, r): return Expr(Op.SUB, (l, r))
def Mul(l, r): return Expr(Op.MUL, (l, r))
def Div(l, r): return Expr(Op.DIV, (l, r))
def Pow(b, e): return Expr(Op.POW, (b, e))
def Neg(e): return Expr(Op.NEG, (e,))
def Eq(l, r): return Expr(Op.EQ, (l, r))
def Vec(*items): return Expr(Op.VEC, items)
def Sin(e): return Expr(Op.SIN, (e,))
def Cos(e): return Expr(Op.COS, (e,))
def Tan(e): return Expr(Op.TAN, (e,))
def Cot(e): return Expr(Op.COT, (e,))
def Sec(e): return Expr(Op.SEC, (e,))
def Csc(e): return Expr(Op.CSC, (e,))
def Sqrt(e): return Expr(Op.SQRT, (e,))
def Abs(e): return Expr(Op.ABS, (e,))
def Gcd(a, b): return Expr(Op.GCD, (a, b))
def Det(m): return Expr(Op.DET, (m,))
def Choose(n, k): return Expr(Op.CHOOSE, (n, k))
def Fact(n): return Expr(Op.FACT, (n,))
def Perm(n, k): return Expr(Op.PERM, (n, k))
def Sum(body, var, lo, hi): return Expr(Op.SUM, (body, var, lo, hi))
def Solve(system, unknowns): return Expr(Op.SOLVE, (system, unknowns))
def Julian(d): return Expr(Op.JULIAN, (d,))
def Pdiv(a, b): return Expr(Op.PDIV, (a, b))
def Prem(a, b): return Expr(Op.PREM, (a, b))


def Matrix(rows) -> Expr:
    """vec of row vecs from nested Python sequences."""
    return Vec(*(Vec(*row) for row in rows))


PI = Var("pi")


# =============================================================================
# PREDICATES AND EQUALITY
# =============================================================================

def numberp(e) -> bool:
    return is_number(e)


def is_vec(e) -> bool:
    return isinstance(e, Expr) and e.op == Op.VEC


def is_matrix(e) -> bool:
    return is_vec(e) and len(e.args) > 0 and all(is_vec(row) for row in e.args)


def equal_expr(a, b) -> bool:
    """
    Compare two expressions.

    Numbers compare by numeric equivalence (10 equals 10.), forms by
    operator, operand count and operands in order, symbols by identity.
    """
    if numberp(a) and numberp(b):
        return num_equal(a, b)
    if isinstance(a, Expr) and isinstance(b, Expr):
        return (a.op == b.op and len(a.args) == len(b.args)
                and all(equal_expr(x, y) for x, y in zip(a.args, b.args)))
    return a == b


# =============================================================================
# TRAVERSAL
# =============================================================================

def walk(e) -> Iterator[Expression]:
    """Pre-order traversal of all nodes."""
    yield e
    if isinstance(e, Expr):
        for a in e.args:
            yield from walk(a)


def substitute(e, var: Var, value) -> Expression:
    """Replace var by value; a sum that rebinds var keeps its body untouched."""
    return substitute_all(e, {var: value})


def substitute_all(e, mapping: Dict[Var, Expression]) -> Expression:
    if isinstance(e, Var):
        return mapping.get(e, e)
    if not isinstance(e, Expr):
        return e
    if e.op == Op.SUM and e.args[1] in mapping:
        inner = {k: v for k, v in mapping.items() if k != e.args[1]}
        body = substitute_all(e.args[0], inner) if inner else e.args[0]
        return e.with_args((body, e.args[1],
                            substitute_all(e.args[2], mapping),
                            substitute_all(e.args[3], mapping)))
    return e.with_args(substitute_all(a, mapping) for a in e.args)


def variables(e) -> List[Var]:
    """Free variables in order of first appearance."""
    found: List[Var] = []

    def visit(node, bound):
        if isinstance(node, Var):
            if node not in bound and node not in found:
                found.append(node)
        elif isinstance(node, Expr):
            if node.op == Op.SUM and isinstance(node.args[1], Var):
                visit(node.args[0], bound | {node.args[1]})
                visit(node.args[2], bound)
                visit(node.args[3], bound)
                return
            for a in node.args:
                visit(a, bound)

    visit(e, frozenset())
    return found


def free_of(e, var: Var) -> bool:
    return var not in variables(e)
