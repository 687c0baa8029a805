"""
cematrix Matrices.

Real and complex matrices over dense or sparse storage, a read-only facade
sharing the same storage, and row views.

Operators:
    - ``+``, ``-`` (binary and unary): elementwise, scalars broadcast
    - ``*`` (alias ``@``): matrix product, or scaling by a scalar
    - ``/``: ``left / right`` solves ``X * right = left``;
      ``matrix / scalar`` and ``scalar / matrix`` act entry by entry
    - :func:`element_wise_multiply`: Hadamard product

Example:
    >>> from cematrix.matrix import DoubleMatrix
    >>> a = DoubleMatrix.from_array([[2.0, 0.0], [0.0, 4.0]])
    >>> b = DoubleMatrix.from_array([[1.0, 1.0]])
    >>> (b / a).to_numpy()
    array([[0.5 , 0.25]])
"""

from ._matrix import (
    ALL,
    DoubleMatrix,
    ComplexMatrix,
    Matrix,
    ReadOnlyMatrix,
    element_wise_multiply,
    wrap_storage,
)
from ._patterns import Bandwidths
from ._rows import MatrixRow, MatrixRowCollection

__all__ = [
    'ALL',
    'Matrix',
    'DoubleMatrix',
    'ComplexMatrix',
    'ReadOnlyMatrix',
    'MatrixRow',
    'MatrixRowCollection',
    'Bandwidths',
    'element_wise_multiply',
    'wrap_storage',
]
