"""Right division of matrices.

``left / right`` solves ``X * right = left``. The equivalent system
``right^T * X^T = left^T`` is handed to the most specialized scipy.linalg
routine that the structure of ``right`` allows.

Dispatch (first match wins):
    1. ``left`` or ``right`` with a single entry: scalar division
    2. square ``right``: diagonal, triangular, Hessenberg, symmetric
       (Cholesky, then symmetric indefinite), general LU
    3. rectangular ``right``: rank check, then least squares (tall
       ``right^T``) or minimum norm (wide ``right^T``)
"""

import logging
import warnings
from enum import Enum

import numpy as np
import scipy.linalg as sla

from .._config import config
from .._errors import RankDeficiencyError, ShapeMismatchError
from ..matrix import _ops
from ..matrix._patterns import bandwidths, is_hermitian, is_symmetric
from ..storage import DenseStorage, Storage

logger = logging.getLogger("cematrix.linalg")

__all__ = ['SolverPath', 'classify', 'divide']


class SolverPath(Enum):
    """Algorithm selected to divide by a given right operand."""
    DIAGONAL = 'diagonal'
    UPPER_TRIANGULAR = 'upper_triangular'
    LOWER_TRIANGULAR = 'lower_triangular'
    UPPER_HESSENBERG = 'upper_hessenberg'
    LOWER_HESSENBERG = 'lower_hessenberg'
    SYMMETRIC = 'symmetric'
    GENERAL = 'general'
    LEAST_SQUARES = 'least_squares'
    MINIMUM_NORM = 'minimum_norm'


def classify(right: Storage) -> SolverPath:
    """Pick the solver path for dividing by ``right``."""
    nrows, ncols = right.shape
    if nrows != ncols:
        # X * R = L with R (m x n): more columns than rows gives an
        # overdetermined system in X^T
        return SolverPath.LEAST_SQUARES if ncols > nrows else SolverPath.MINIMUM_NORM
    bw = bandwidths(right)
    if bw.is_diagonal:
        return SolverPath.DIAGONAL
    if bw.is_upper_triangular:
        return SolverPath.UPPER_TRIANGULAR
    if bw.is_lower_triangular:
        return SolverPath.LOWER_TRIANGULAR
    if bw.is_upper_hessenberg:
        return SolverPath.UPPER_HESSENBERG
    if bw.is_lower_hessenberg:
        return SolverPath.LOWER_HESSENBERG
    tol = config.compute.symmetry_tolerance
    if right.dtype.kind == 'c':
        symmetric = is_hermitian(right, tol)
    else:
        symmetric = is_symmetric(right, tol)
    if symmetric:
        return SolverPath.SYMMETRIC
    return SolverPath.GENERAL


# =============================================================================
# Square Kernels
# =============================================================================
#
# Each kernel solves A * Y = B with A = R^T square.

def _singular() -> RankDeficiencyError:
    return RankDeficiencyError("Right operand is singular", "right")


def _check_pivots(pivots: np.ndarray, r: np.ndarray) -> None:
    """Raise unless every pivot exceeds the rank tolerance of ``r``."""
    tol = config.compute.rank_tolerance
    if tol is None:
        tol = max(r.shape) * np.finfo(np.float64).eps * np.abs(r).max()
    if np.any(np.abs(pivots) <= tol):
        raise _singular()


def _solve_triangular(r: np.ndarray, b: np.ndarray, r_is_lower: bool) -> np.ndarray:
    _check_pivots(np.diag(r), r)
    return sla.solve_triangular(r, b, trans='T', lower=r_is_lower)


def _solve_upper_hessenberg(h: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Gaussian elimination restricted to adjacent rows, then back substitution."""
    a = h
    h = np.array(h, copy=True)
    b = np.array(b, copy=True)
    n = h.shape[0]
    for i in range(n - 1):
        if abs(h[i + 1, i]) > abs(h[i, i]):
            h[[i, i + 1], i:] = h[[i + 1, i], i:]
            b[[i, i + 1]] = b[[i + 1, i]]
        if h[i, i] == 0:
            continue
        factor = h[i + 1, i] / h[i, i]
        h[i + 1, i:] -= factor * h[i, i:]
        b[i + 1] -= factor * b[i]
    _check_pivots(np.diag(h), a)
    return sla.solve_triangular(h, b, lower=False)


def _solve_hessenberg(r: np.ndarray, b: np.ndarray, r_is_upper: bool) -> np.ndarray:
    a = r.T
    if not r_is_upper:
        # R lower Hessenberg: A = R^T is upper Hessenberg
        return _solve_upper_hessenberg(a, b)
    # A lower Hessenberg: reversing rows and columns makes it upper
    y = _solve_upper_hessenberg(a[::-1, ::-1], b[::-1])
    return y[::-1]


def _solve_symmetric(r: np.ndarray, b: np.ndarray) -> np.ndarray:
    a = r.T
    try:
        factor = sla.cho_factor(a, lower=False, check_finite=False)
        _check_pivots(np.diag(factor[0]) ** 2, r)
        return sla.cho_solve(factor, b, check_finite=False)
    except np.linalg.LinAlgError:
        logger.debug("Cholesky factorization failed, using symmetric indefinite solve")
    _check_pivots(sla.eigvalsh(a, check_finite=False), r)
    assume_a = 'her' if np.iscomplexobj(a) else 'sym'
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", sla.LinAlgWarning)
            return sla.solve(a, b, assume_a=assume_a, check_finite=False)
    except np.linalg.LinAlgError as exc:
        raise _singular() from exc


def _solve_general(r: np.ndarray, b: np.ndarray) -> np.ndarray:
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", sla.LinAlgWarning)
        lu, piv = sla.lu_factor(r.T, check_finite=False)
    _check_pivots(np.diag(lu), r)
    return sla.lu_solve((lu, piv), b, check_finite=False)


# =============================================================================
# Rectangular Kernels
# =============================================================================

def _solve_rectangular(r: np.ndarray, b: np.ndarray) -> np.ndarray:
    rank = np.linalg.matrix_rank(r, tol=config.compute.rank_tolerance)
    if rank < min(r.shape):
        raise RankDeficiencyError(
            f"Right operand has rank {rank} < {min(r.shape)}", "right"
        )
    y, _, _, _ = sla.lstsq(r.T, b, check_finite=False)
    return y


# =============================================================================
# Entry Point
# =============================================================================

def divide(left: Storage, right: Storage) -> Storage:
    """Solve ``X * right = left`` for ``X``.

    Raises:
        ShapeMismatchError: If the operands have different numbers of columns.
        RankDeficiencyError: If ``right`` is singular (square) or has
            deficient rank (rectangular).
    """
    lrows, lcols = left.shape
    rrows, rcols = right.shape
    if lrows * lcols == 1:
        return _ops.scalar_divide(left.get(0, 0), right)
    if rrows * rcols == 1:
        return _ops.divide_by_scalar(left, right.get(0, 0))
    if lcols != rcols:
        raise ShapeMismatchError(
            "Left and right operands must have the same number of columns", "right"
        )

    dtype = np.result_type(left.dtype, right.dtype, np.float64)
    r = np.asarray(right.to_numpy(), dtype=dtype)
    b = np.asarray(left.to_numpy(), dtype=dtype).T

    path = classify(right)
    logger.debug("Dividing (%d x %d) by (%d x %d) via %s path",
                 lrows, lcols, rrows, rcols, path.value)

    if path is SolverPath.DIAGONAL:
        d = np.diag(r)
        _check_pivots(d, r)
        y = b / d[:, np.newaxis]
    elif path is SolverPath.UPPER_TRIANGULAR:
        y = _solve_triangular(r, b, r_is_lower=False)
    elif path is SolverPath.LOWER_TRIANGULAR:
        y = _solve_triangular(r, b, r_is_lower=True)
    elif path is SolverPath.UPPER_HESSENBERG:
        y = _solve_hessenberg(r, b, r_is_upper=True)
    elif path is SolverPath.LOWER_HESSENBERG:
        y = _solve_hessenberg(r, b, r_is_upper=False)
    elif path is SolverPath.SYMMETRIC:
        y = _solve_symmetric(r, b)
    elif path is SolverPath.GENERAL:
        y = _solve_general(r, b)
    else:
        y = _solve_rectangular(r, b)

    return DenseStorage(np.asfortranarray(np.asarray(y).T))
