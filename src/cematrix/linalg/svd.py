"""
Singular Value Decomposition.

For an ``m x n`` matrix ``A``:

    A = U * S * V^H

with ``U`` (m x m) and ``V^H`` (n x n) unitary and ``S`` (m x n) holding the
non-negative singular values on its main diagonal in descending order.
For complex input ``V^H`` is the conjugate transpose of the right singular
vectors.

Example:
    >>> from cematrix.linalg import svd
    >>> values, left, right_h = svd.decompose(a)
    >>> reconstructed = left * values * right_h
"""

import logging
from typing import Tuple

import numpy as np
import scipy.linalg as sla

from .._errors import NonConvergenceError
from .._typing import MatrixInput, ensure_matrix
from ..matrix import DoubleMatrix, Matrix, wrap_storage
from ..storage import DenseStorage

logger = logging.getLogger("cematrix.linalg")

__all__ = ['decompose', 'get_singular_values']


def _run(a: np.ndarray, compute_uv: bool):
    try:
        return sla.svd(a, full_matrices=True, compute_uv=compute_uv,
                       check_finite=False, lapack_driver='gesvd')
    except np.linalg.LinAlgError as exc:
        raise NonConvergenceError(param_name="matrix") from exc


def decompose(matrix: MatrixInput) -> Tuple[DoubleMatrix, Matrix, Matrix]:
    """Full singular value decomposition.

    Args:
        matrix: Real or complex matrix (writable or read-only).

    Returns:
        (values, left_singular_vectors, conjugate_transposed_right_singular_vectors)
        where ``values`` is a sparse ``m x n`` matrix holding the singular
        values on its diagonal.

    Raises:
        NullArgumentError: If ``matrix`` is None.
        NonConvergenceError: If the LAPACK iteration does not converge.
    """
    m = ensure_matrix(matrix, "matrix")
    nrows, ncols = m.shape
    u, s, vh = _run(m.to_numpy(), compute_uv=True)
    logger.debug("SVD of (%d x %d) matrix", nrows, ncols)

    values = DoubleMatrix.sparse(nrows, ncols, len(s))
    for i, v in enumerate(s):
        values[i, i] = float(v)
    left = wrap_storage(DenseStorage(np.asfortranarray(u)))
    right_h = wrap_storage(DenseStorage(np.asfortranarray(vh)))
    return values, left, right_h


def get_singular_values(matrix: MatrixInput) -> DoubleMatrix:
    """Singular values in descending order as a ``min(m, n) x 1`` column."""
    m = ensure_matrix(matrix, "matrix")
    s = _run(m.to_numpy(), compute_uv=False)
    return DoubleMatrix(DenseStorage(np.asfortranarray(s.reshape(-1, 1))))
