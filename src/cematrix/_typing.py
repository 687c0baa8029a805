"""
cematrix Type Definitions and Input Coercion.

This module provides type aliases and conversion helpers so that every
public operation accepts the same family of inputs:

    - cematrix matrices (DoubleMatrix, ComplexMatrix, ReadOnlyMatrix)
    - SciPy sparse matrices and arrays
    - NumPy arrays
    - Python sequences (rectangular lists of rows, or flat vectors)

Writable and read-only matrices are interchangeable everywhere a matrix is
only read.

Example:
    >>> from cematrix._typing import MatrixInput, ensure_matrix
    >>>
    >>> def my_func(data: MatrixInput):
    ...     m = ensure_matrix(data, "data")
    ...     return m.number_of_rows
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Sequence, Union

import numpy as np

from ._errors import ArgumentError, NullArgumentError

if TYPE_CHECKING:
    from scipy import sparse as sp
    from .matrix import DoubleMatrix, ComplexMatrix, ReadOnlyMatrix

__all__ = [
    'MatrixInput',
    'VectorInput',
    'is_matrix',
    'is_scipy_sparse',
    'get_format',
    'ensure_matrix',
    'ensure_double_matrix',
    'ensure_vector',
]


# =============================================================================
# Type Aliases
# =============================================================================

MatrixInput = Union[
    "DoubleMatrix",
    "ComplexMatrix",
    "ReadOnlyMatrix",
    "np.ndarray",
    "sp.spmatrix",
    Sequence[Sequence[float]],
]

VectorInput = Union[
    "DoubleMatrix",
    "ReadOnlyMatrix",
    "np.ndarray",
    Sequence[float],
]


# =============================================================================
# Format Detection
# =============================================================================

def is_matrix(obj: Any) -> bool:
    """Check if object is a cematrix matrix (writable or read-only)."""
    from .matrix._matrix import _ReadableMatrix
    return isinstance(obj, _ReadableMatrix)


def is_scipy_sparse(obj: Any) -> bool:
    from scipy import sparse as sp
    return sp.issparse(obj)


def get_format(obj: Any) -> str:
    """Detect the format of a matrix input.

    Returns:
        Format string: 'cematrix', 'scipy', 'numpy', 'sequence', or 'unknown'.
    """
    if is_matrix(obj):
        return "cematrix"
    elif is_scipy_sparse(obj):
        return "scipy"
    elif isinstance(obj, np.ndarray):
        return "numpy"
    elif isinstance(obj, (list, tuple)):
        return "sequence"
    else:
        return "unknown"


# =============================================================================
# Conversion Functions
# =============================================================================

def ensure_matrix(data: MatrixInput, param_name: str = "data"):
    """Return ``data`` as a cematrix matrix, converting foreign inputs.

    Matrices (writable or read-only) pass through unchanged; everything else
    is copied into a new DoubleMatrix or ComplexMatrix according to its
    element type.

    Raises:
        NullArgumentError: If ``data`` is None.
        ArgumentError: If the format is not recognized.
    """
    from .matrix import ComplexMatrix, DoubleMatrix

    if data is None:
        raise NullArgumentError(param_name=param_name)
    fmt = get_format(data)
    if fmt == "cematrix":
        return data
    if fmt == "scipy":
        cls = ComplexMatrix if np.iscomplexobj(data.data) else DoubleMatrix
        return cls.from_scipy(data)
    if fmt in ("numpy", "sequence"):
        arr = np.asarray(data)
        cls = ComplexMatrix if np.iscomplexobj(arr) else DoubleMatrix
        return cls.from_array(data)
    raise ArgumentError(f"Unsupported input type {type(data).__name__}", param_name)


def ensure_double_matrix(data: MatrixInput, param_name: str = "data"):
    """Like :func:`ensure_matrix`, additionally requiring real entries."""
    m = ensure_matrix(data, param_name)
    if m.is_complex:
        raise ArgumentError("A real matrix is required", param_name)
    return m


def ensure_vector(
    vec: VectorInput,
    param_name: str = "vector",
    size: Optional[int] = None,
) -> np.ndarray:
    """Convert any vector input to a flat float64 array.

    Raises:
        ArgumentError: If the input is not a vector or its size doesn't
            match ``size``.
    """
    if vec is None:
        raise NullArgumentError(param_name=param_name)
    if is_matrix(vec):
        if not vec.is_vector:
            raise ArgumentError("Parameter must be a vector", param_name)
        result = vec.as_column_major_array().astype(np.float64)
    else:
        arr = np.asarray(vec, dtype=np.float64)
        if arr.ndim > 2 or (arr.ndim == 2 and 1 not in arr.shape):
            raise ArgumentError("Parameter must be a vector", param_name)
        result = arr.ravel()
    if size is not None and result.size != size:
        raise ArgumentError(
            f"Vector size mismatch: expected {size}, got {result.size}", param_name
        )
    return result
