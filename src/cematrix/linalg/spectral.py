"""
Spectral Decomposition of symmetric and Hermitian matrices.

Only one triangular half of the input is read; the other half is taken as
its mirror (real symmetric) or conjugate mirror (Hermitian). Eigenvalues
are returned in ascending order and

    A = V * L * V^H

where ``L`` is the diagonal matrix of eigenvalues.
"""

import logging
from typing import Tuple

import numpy as np
import scipy.linalg as sla

from .._errors import ArgumentError, NonConvergenceError
from .._typing import MatrixInput, ensure_matrix
from ..matrix import DoubleMatrix, Matrix, wrap_storage
from ..storage import DenseStorage

logger = logging.getLogger("cematrix.linalg")

__all__ = ['decompose', 'get_eigenvalues']


def _square(matrix: MatrixInput):
    m = ensure_matrix(matrix, "matrix")
    if not m.is_square:
        raise ArgumentError("Parameter must be a square matrix", "matrix")
    return m


def _run(a: np.ndarray, lower_triangular_part: bool, eigvals_only: bool):
    try:
        return sla.eigh(a, lower=lower_triangular_part,
                        eigvals_only=eigvals_only, check_finite=False)
    except np.linalg.LinAlgError as exc:
        raise NonConvergenceError(param_name="matrix") from exc


def decompose(matrix: MatrixInput, lower_triangular_part: bool) -> Tuple[DoubleMatrix, Matrix]:
    """Eigenvalues and eigenvectors of a symmetric or Hermitian matrix.

    Args:
        matrix: Square real or complex matrix.
        lower_triangular_part: Read the lower half if True, else the upper.

    Returns:
        (eigenvalues, eigenvectors): a sparse diagonal matrix of ascending
        eigenvalues and the matrix whose columns are the eigenvectors.

    Raises:
        ArgumentError: If ``matrix`` is not square.
        NonConvergenceError: If the LAPACK iteration does not converge.
    """
    m = _square(matrix)
    n = m.number_of_rows
    w, v = _run(m.to_numpy(), lower_triangular_part, eigvals_only=False)
    logger.debug("Spectral decomposition of (%d x %d) matrix", n, n)

    eigenvalues = DoubleMatrix.sparse(n, n, n)
    for i, value in enumerate(w):
        eigenvalues[i, i] = float(value)
    eigenvectors = wrap_storage(DenseStorage(np.asfortranarray(v)))
    return eigenvalues, eigenvectors


def get_eigenvalues(matrix: MatrixInput, lower_triangular_part: bool) -> DoubleMatrix:
    """Ascending eigenvalues as an ``n x 1`` column."""
    m = _square(matrix)
    w = _run(m.to_numpy(), lower_triangular_part, eigvals_only=True)
    return DoubleMatrix(DenseStorage(np.asfortranarray(np.asarray(w, dtype=np.float64).reshape(-1, 1))))
