"""Storage-Level Arithmetic Kernels.

Every matrix operator lands here with its operands reduced to storages (or
plain scalars), so writable and read-only operands share one codepath.

Scheme rules:
    - sparse (op) sparse stays sparse for add, subtract, product and
      Hadamard product
    - a Hadamard product with one sparse operand is sparse
    - scaling by a nonzero scalar keeps the scheme
    - everything else produces dense storage
"""

from numbers import Number
from typing import Union

import numpy as np

from .._errors import ShapeMismatchError
from ..storage import DenseStorage, SparseStorage, Storage

__all__ = [
    'add',
    'subtract',
    'negate',
    'multiply',
    'element_wise_multiply',
    'divide_by_scalar',
    'scalar_divide',
    'apply',
]

Operand = Union[Storage, Number]


# =============================================================================
# Helpers
# =============================================================================

def _is_sparse(x) -> bool:
    return isinstance(x, SparseStorage)


def _dense(storage: Storage) -> np.ndarray:
    return storage.to_numpy()


def _wrap_dense(arr) -> DenseStorage:
    return DenseStorage(np.asfortranarray(np.asarray(arr)))


def _check_same_shape(left: Storage, right: Storage) -> None:
    if left.shape != right.shape:
        raise ShapeMismatchError(
            f"Operands have different shapes {left.shape} and {right.shape}",
            "right",
        )


# =============================================================================
# Additive Operations
# =============================================================================

def add(left: Operand, right: Operand) -> Storage:
    """Elementwise sum with scalar broadcasting."""
    if isinstance(left, Number):
        left, right = right, left
    if isinstance(right, Number):
        if right == 0:
            return left.copy()
        return _wrap_dense(_dense(left) + right)
    _check_same_shape(left, right)
    if _is_sparse(left) and _is_sparse(right):
        return SparseStorage.from_scipy(left.to_scipy() + right.to_scipy())
    return _wrap_dense(_dense(left) + _dense(right))


def subtract(left: Operand, right: Operand) -> Storage:
    """Elementwise difference with scalar broadcasting."""
    if isinstance(left, Number):
        if left == 0:
            return negate(right)
        return _wrap_dense(left - _dense(right))
    if isinstance(right, Number):
        if right == 0:
            return left.copy()
        return _wrap_dense(_dense(left) - right)
    _check_same_shape(left, right)
    if _is_sparse(left) and _is_sparse(right):
        return SparseStorage.from_scipy(left.to_scipy() - right.to_scipy())
    return _wrap_dense(_dense(left) - _dense(right))


def negate(operand: Storage) -> Storage:
    if _is_sparse(operand):
        return SparseStorage.from_scipy(-operand.to_scipy())
    return _wrap_dense(-_dense(operand))


# =============================================================================
# Multiplicative Operations
# =============================================================================

def _scale(storage: Storage, scalar) -> Storage:
    if _is_sparse(storage) and np.isfinite(scalar):
        return SparseStorage.from_scipy(storage.to_scipy() * scalar)
    return _wrap_dense(_dense(storage) * scalar)


def multiply(left: Operand, right: Operand) -> Storage:
    """Matrix product (or scaling when one operand is a scalar)."""
    if isinstance(left, Number):
        return _scale(right, left)
    if isinstance(right, Number):
        return _scale(left, right)
    if left.shape[1] != right.shape[0]:
        raise ShapeMismatchError(
            "Number of columns of left must match number of rows of right",
            "right",
        )
    if _is_sparse(left) and _is_sparse(right):
        return SparseStorage.from_scipy(left.to_scipy() @ right.to_scipy())
    lhs = left.to_scipy() if _is_sparse(left) else _dense(left)
    rhs = right.to_scipy() if _is_sparse(right) else _dense(right)
    return _wrap_dense(lhs @ rhs)


def element_wise_multiply(left: Storage, right: Storage) -> Storage:
    """Hadamard product of two equally shaped operands."""
    _check_same_shape(left, right)
    if _is_sparse(left):
        other = right.to_scipy() if _is_sparse(right) else _dense(right)
        return SparseStorage.from_scipy(left.to_scipy().multiply(other))
    if _is_sparse(right):
        return SparseStorage.from_scipy(right.to_scipy().multiply(_dense(left)))
    return _wrap_dense(_dense(left) * _dense(right))


def divide_by_scalar(storage: Storage, scalar) -> Storage:
    """``matrix / scalar`` entry by entry."""
    if scalar == 1:
        return storage.copy()
    if _is_sparse(storage) and scalar != 0:
        return SparseStorage.from_scipy(storage.to_scipy() / scalar)
    with np.errstate(divide='ignore', invalid='ignore'):
        return _wrap_dense(_dense(storage) / scalar)


def scalar_divide(scalar, storage: Storage) -> Storage:
    """``scalar / matrix`` entry by entry; a zero divisor yields NaN."""
    values = _dense(storage)
    zero = values == 0
    with np.errstate(divide='ignore', invalid='ignore'):
        result = scalar / np.where(zero, 1, values)
    result = np.asarray(result)
    result[zero] = np.nan
    return _wrap_dense(result)


# =============================================================================
# Functional
# =============================================================================

def apply(storage: Storage, func) -> Storage:
    """New storage with ``func`` applied to every entry.

    Sparse storages keep their scheme only when ``func(0) == 0``.
    """
    if _is_sparse(storage) and func(storage.dtype.type(0)) == 0:
        csr = storage.to_scipy()
        csr.data = np.array([func(v) for v in csr.data], dtype=storage.dtype)
        return SparseStorage.from_scipy(csr, dtype=storage.dtype)
    values = _dense(storage)
    out = np.vectorize(func, otypes=[storage.dtype])(values) if values.size else values.copy()
    return _wrap_dense(out)
