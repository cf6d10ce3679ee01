"""Determinants of numeric and symbolic matrices."""

import logging

import numpy as np

from . import algebra
from . import numbers as num
from .errors import DimensionMismatch
from .expr import is_vec, numberp

logger = logging.getLogger(__name__)


def to_array(matrix) -> np.ndarray:
    """Square object array from a vec of row vecs."""
    rows = matrix.args
    n = len(rows)
    if n == 0:
        raise DimensionMismatch("det of an empty matrix")
    if not all(is_vec(r) for r in rows):
        raise DimensionMismatch("det requires a vector of row vectors")
    if any(len(r.args) != n for r in rows):
        raise DimensionMismatch(
            f"det requires a square matrix, got row lengths {[len(r.args) for r in rows]} for {n} rows")
    a = np.empty((n, n), dtype=object)
    for i, row in enumerate(rows):
        for j, x in enumerate(row.args):
            a[i, j] = x
    return a


def det(matrix, prec: int = num.DEFAULT_PRECISION):
    """
    Determinant of a vec of row vecs.

    A scalar is its own determinant. Matrices of Numbers are reduced by
    Gaussian elimination (exact for exact entries); anything symbolic goes
    through cofactor expansion so the result stays a canonical expression.
    """
    if not is_vec(matrix):
        return matrix
    a = to_array(matrix)
    if all(numberp(x) for x in a.flat):
        return _eliminate(a, prec)
    return _cofactor(a)


def _eliminate(a: np.ndarray, prec: int):
    a = a.copy()
    n = a.shape[0]
    result = 1
    for col in range(n):
        pivot = next((i for i in range(col, n) if not num.is_zero(a[i, col])), None)
        if pivot is None:
            return 0
        if pivot != col:
            a[[col, pivot]] = a[[pivot, col]]
            result = num.neg(result)
        lead = a[col, col]
        result = num.mul(result, lead, prec)
        for i in range(col + 1, n):
            if num.is_zero(a[i, col]):
                continue
            f = num.div(a[i, col], lead, prec)
            for j in range(col, n):
                a[i, j] = num.sub(a[i, j], num.mul(f, a[col, j], prec), prec)
    return result


def _cofactor(a: np.ndarray):
    n = a.shape[0]
    if n == 1:
        return a[0, 0]
    if n == 2:
        return algebra.sub(algebra.mul(a[0, 0], a[1, 1]), algebra.mul(a[0, 1], a[1, 0]))

    # Expand along the row with the most zero entries
    zeros = [sum(algebra.is_zero(x) for x in a[i]) for i in range(n)]
    i = zeros.index(max(zeros))
    minor_rows = np.delete(a, i, axis=0)
    total = 0
    for j in range(n):
        if algebra.is_zero(a[i, j]):
            continue
        term = algebra.mul(a[i, j], _cofactor(np.delete(minor_rows, j, axis=1)))
        total = algebra.sub(total, term) if (i + j) % 2 else algebra.add(total, term)
    return total
