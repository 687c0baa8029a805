"""
Covariance and Correlation.

Variables are the rows (DataOperation.ON_ROWS) or the columns
(DataOperation.ON_COLUMNS) of the data matrix; ON_ALL has no meaning here.
"""

import numpy as np

from .._typing import MatrixInput, ensure_double_matrix
from ..matrix import DoubleMatrix
from ..storage import DenseStorage
from ._types import DataOperation, check_data_operation
from .descriptive import _require_observations

__all__ = ['covariance', 'correlation']


def _variables(data: MatrixInput, data_operation) -> np.ndarray:
    """Data arranged with one variable per column."""
    op = check_data_operation(data_operation, allow_all=False)
    x = np.asarray(ensure_double_matrix(data, "data").to_numpy(), dtype=np.float64)
    return x if op is DataOperation.ON_COLUMNS else x.T


def _covariance(x: np.ndarray, adjust_for_bias: bool) -> np.ndarray:
    n = x.shape[0]
    if adjust_for_bias:
        _require_observations(n, 2, "covariance")
    d = x - x.mean(axis=0, keepdims=True)
    return (d.T @ d) / (n - 1.0 if adjust_for_bias else float(n))


def covariance(data: MatrixInput, adjust_for_bias: bool, data_operation) -> DoubleMatrix:
    """Covariance matrix among the rows or columns of ``data``.

    Args:
        data: Matrix of real values.
        adjust_for_bias: Divide by ``n - 1`` instead of ``n``, where ``n`` is
            the number of observations of each variable.
        data_operation: ON_ROWS if variables are rows, ON_COLUMNS if they
            are columns.

    Returns:
        A square matrix with one row and column per variable.

    Raises:
        InvalidOptionError: If ``data_operation`` is ON_ALL or unrecognized.
        BiasAdjustmentUndefinedError: If adjusting with fewer than 2
            observations.
    """
    x = _variables(data, data_operation)
    return DoubleMatrix(DenseStorage(np.asfortranarray(_covariance(x, adjust_for_bias))))


def correlation(data: MatrixInput, data_operation) -> DoubleMatrix:
    """Pearson correlation matrix among the rows or columns of ``data``.

    Entries involving a variable with zero variance are NaN.
    """
    x = _variables(data, data_operation)
    c = _covariance(x, adjust_for_bias=False)
    with np.errstate(divide='ignore', invalid='ignore'):
        inverse_std = 1.0 / np.sqrt(np.diag(c))
        r = inverse_std[:, np.newaxis] * c * inverse_std[np.newaxis, :]
    return DoubleMatrix(DenseStorage(np.asfortranarray(r)))
