"""
Descriptive Statistics of Matrices.

Every reduction accepts a ``data_operation``:

    - DataOperation.ON_ALL: a single float over all entries
    - DataOperation.ON_COLUMNS: one value per column, as a 1 x n matrix
    - DataOperation.ON_ROWS: one value per row, as an m x 1 matrix

Writable and read-only matrices are accepted interchangeably, as are numpy
arrays and rectangular lists of rows.

Bias-adjustable reductions (variance, standard deviation, skewness,
kurtosis, covariance) need a minimum number of observations when
``adjust_for_bias`` is True and raise
:class:`~cematrix.BiasAdjustmentUndefinedError` otherwise.
"""

from __future__ import annotations

from typing import Callable, List, Union

import numpy as np

from .._errors import ArgumentError, BiasAdjustmentUndefinedError
from .._typing import MatrixInput, ensure_double_matrix
from ..index import IndexCollection
from ..matrix import DoubleMatrix
from ..storage import DenseStorage
from ._types import (
    DataOperation,
    IndexValuePair,
    SortDirection,
    SortIndexResults,
    check_data_operation,
    check_sort_direction,
)

__all__ = [
    'sum',
    'mean',
    'sum_of_squared_deviations',
    'variance',
    'standard_deviation',
    'skewness',
    'kurtosis',
    'min',
    'max',
    'quantile',
    'sort',
    'sort_index',
]

Reduction = Union[float, DoubleMatrix]


# =============================================================================
# Helpers
# =============================================================================

def _values(data: MatrixInput) -> np.ndarray:
    return np.asarray(ensure_double_matrix(data, "data").to_numpy(), dtype=np.float64)


def _as_matrix(arr: np.ndarray) -> DoubleMatrix:
    return DoubleMatrix(DenseStorage(np.asfortranarray(arr, dtype=np.float64)))


def _observations(x: np.ndarray, op: DataOperation) -> int:
    if op is DataOperation.ON_ALL:
        return x.size
    if op is DataOperation.ON_COLUMNS:
        return x.shape[0]
    return x.shape[1]


def _reduce(x: np.ndarray, op: DataOperation, func: Callable) -> Reduction:
    """Apply ``func(array, axis)`` along the dimension selected by ``op``."""
    with np.errstate(divide='ignore', invalid='ignore'):
        if op is DataOperation.ON_ALL:
            return float(func(x.ravel(order='F'), 0))
        if op is DataOperation.ON_COLUMNS:
            return _as_matrix(np.asarray(func(x, 0)).reshape(1, -1))
        return _as_matrix(np.asarray(func(x, 1)).reshape(-1, 1))


def _require_observations(n: int, minimum: int, what: str) -> None:
    if n < minimum:
        raise BiasAdjustmentUndefinedError(
            f"Adjusting {what} for bias requires at least {minimum} observations",
            "adjust_for_bias",
        )


def _central_moment(x: np.ndarray, axis: int, order: int) -> np.ndarray:
    d = x - np.mean(x, axis=axis, keepdims=True)
    return np.mean(d ** order, axis=axis)


# =============================================================================
# Location and Dispersion
# =============================================================================

def sum(data: MatrixInput, data_operation=DataOperation.ON_ALL) -> Reduction:
    """Sum of entries.

    Args:
        data: Matrix of real values.
        data_operation: Dimension to reduce.

    Returns:
        A float for ON_ALL, otherwise a row (ON_COLUMNS) or column (ON_ROWS)
        vector.

    Examples:
        >>> from cematrix import DoubleMatrix, statistics as stat
        >>> m = DoubleMatrix.from_array([[1, 2], [3, 4]])
        >>> stat.sum(m)
        10.0
        >>> stat.sum(m, stat.DataOperation.ON_COLUMNS).to_numpy()
        array([[4., 6.]])
    """
    op = check_data_operation(data_operation)
    return _reduce(_values(data), op, lambda a, axis: np.sum(a, axis=axis))


def mean(data: MatrixInput, data_operation=DataOperation.ON_ALL) -> Reduction:
    """Arithmetic mean of entries."""
    op = check_data_operation(data_operation)
    return _reduce(_values(data), op, lambda a, axis: np.mean(a, axis=axis))


def sum_of_squared_deviations(data: MatrixInput, data_operation=DataOperation.ON_ALL) -> Reduction:
    """Sum of squared deviations from the mean."""
    op = check_data_operation(data_operation)

    def ssd(a, axis):
        d = a - np.mean(a, axis=axis, keepdims=True)
        return np.sum(d * d, axis=axis)

    return _reduce(_values(data), op, ssd)


def variance(
    data: MatrixInput,
    adjust_for_bias: bool,
    data_operation=DataOperation.ON_ALL,
) -> Reduction:
    """Variance of entries.

    The unadjusted variance divides the sum of squared deviations by ``n``;
    the adjusted one by ``n - 1``.

    Raises:
        BiasAdjustmentUndefinedError: If ``adjust_for_bias`` is True and
            fewer than 2 observations are reduced.
    """
    op = check_data_operation(data_operation)
    x = _values(data)
    if adjust_for_bias:
        _require_observations(_observations(x, op), 2, "variance")
    ddof = 1 if adjust_for_bias else 0
    return _reduce(x, op, lambda a, axis: np.var(a, axis=axis, ddof=ddof))


def standard_deviation(
    data: MatrixInput,
    adjust_for_bias: bool,
    data_operation=DataOperation.ON_ALL,
) -> Reduction:
    """Square root of :func:`variance`."""
    op = check_data_operation(data_operation)
    x = _values(data)
    if adjust_for_bias:
        _require_observations(_observations(x, op), 2, "standard deviation")
    ddof = 1 if adjust_for_bias else 0
    return _reduce(x, op, lambda a, axis: np.std(a, axis=axis, ddof=ddof))


# =============================================================================
# Shape
# =============================================================================

def skewness(
    data: MatrixInput,
    adjust_for_bias: bool,
    data_operation=DataOperation.ON_ALL,
) -> Reduction:
    """Skewness of entries.

    The unadjusted coefficient is ``g1 = m3 / m2^(3/2)`` where ``mr`` are
    the sample central moments. The adjusted coefficient is
    ``G1 = g1 * sqrt(n (n - 1)) / (n - 2)``.

    Raises:
        BiasAdjustmentUndefinedError: If ``adjust_for_bias`` is True and
            fewer than 3 observations are reduced.
    """
    op = check_data_operation(data_operation)
    x = _values(data)
    n = _observations(x, op)
    if adjust_for_bias:
        _require_observations(n, 3, "skewness")

    def g1(a, axis):
        result = _central_moment(a, axis, 3) / _central_moment(a, axis, 2) ** 1.5
        if adjust_for_bias:
            result = result * np.sqrt(n * (n - 1.0)) / (n - 2.0)
        return result

    return _reduce(x, op, g1)


def kurtosis(
    data: MatrixInput,
    adjust_for_bias: bool,
    data_operation=DataOperation.ON_ALL,
) -> Reduction:
    """Excess kurtosis of entries.

    The unadjusted coefficient is ``g2 = m4 / m2^2 - 3``. The adjusted
    coefficient is ``((n + 1) g2 + 6) (n - 1) / ((n - 2) (n - 3))``.

    Raises:
        BiasAdjustmentUndefinedError: If ``adjust_for_bias`` is True and
            fewer than 4 observations are reduced.
    """
    op = check_data_operation(data_operation)
    x = _values(data)
    n = _observations(x, op)
    if adjust_for_bias:
        _require_observations(n, 4, "kurtosis")

    def g2(a, axis):
        result = _central_moment(a, axis, 4) / _central_moment(a, axis, 2) ** 2 - 3.0
        if adjust_for_bias:
            result = ((n + 1.0) * result + 6.0) * (n - 1.0) / ((n - 2.0) * (n - 3.0))
        return result

    return _reduce(x, op, g2)


# =============================================================================
# Extrema
# =============================================================================

def _extremum(values: np.ndarray, pick: Callable) -> IndexValuePair:
    # First occurrence wins; NaN entries are skipped unless all are NaN
    if np.all(np.isnan(values)):
        return IndexValuePair(0, float('nan'))
    index = int(pick(values))
    return IndexValuePair(index, float(values[index]))


def _extrema(data: MatrixInput, data_operation, pick: Callable):
    op = check_data_operation(data_operation)
    x = _values(data)
    if op is DataOperation.ON_ALL:
        return _extremum(x.ravel(order='F'), pick)
    if op is DataOperation.ON_COLUMNS:
        return [_extremum(x[:, j], pick) for j in range(x.shape[1])]
    return [_extremum(x[i, :], pick) for i in range(x.shape[0])]


def min(data: MatrixInput, data_operation=DataOperation.ON_ALL):
    """Minimum value and its position.

    Returns:
        An :class:`IndexValuePair` for ON_ALL (index is the linear,
        column-major position), otherwise a list with one pair per column
        (ON_COLUMNS, index is the row) or per row (ON_ROWS, index is the
        column). Ties resolve to the first occurrence.
    """
    return _extrema(data, data_operation, np.nanargmin)


def max(data: MatrixInput, data_operation=DataOperation.ON_ALL):
    """Maximum value and its position; see :func:`min`."""
    return _extrema(data, data_operation, np.nanargmax)


# =============================================================================
# Order Statistics
# =============================================================================

def _quantiles_of(sorted_values: np.ndarray, probabilities: np.ndarray) -> np.ndarray:
    # Median-unbiased plotting positions (l + 2/3) / (n + 1/3), clamped at
    # the extremes and linearly interpolated in between.
    n = sorted_values.size
    known = (np.arange(n) + 2.0 / 3.0) / (n + 1.0 / 3.0)
    return np.interp(probabilities, known, sorted_values)


def quantile(
    data: MatrixInput,
    probabilities: MatrixInput,
    data_operation=DataOperation.ON_ALL,
):
    """Quantiles of entries.

    Args:
        data: Matrix of real values.
        probabilities: Matrix of probabilities, each in [0, 1].
        data_operation: Dimension to reduce.

    Returns:
        For ON_ALL a matrix shaped like ``probabilities``; otherwise a list
        of such matrices, one per row (ON_ROWS) or column (ON_COLUMNS).

    Raises:
        ArgumentError: If a probability lies outside [0, 1].
    """
    op = check_data_operation(data_operation)
    x = _values(data)
    p = _values(probabilities)
    if np.any((p < 0) | (p > 1)) or np.any(np.isnan(p)):
        raise ArgumentError("Probabilities must lie in [0, 1]", "probabilities")
    flat_p = p.ravel(order='F')

    def shaped(q: np.ndarray) -> DoubleMatrix:
        return _as_matrix(q.reshape(p.shape, order='F'))

    if op is DataOperation.ON_ALL:
        return shaped(_quantiles_of(np.sort(x.ravel(order='F')), flat_p))
    if op is DataOperation.ON_COLUMNS:
        return [shaped(_quantiles_of(np.sort(x[:, j]), flat_p)) for j in range(x.shape[1])]
    return [shaped(_quantiles_of(np.sort(x[i, :]), flat_p)) for i in range(x.shape[0])]


def _sort_order(values: np.ndarray, direction: SortDirection) -> np.ndarray:
    if direction is SortDirection.ASCENDING:
        return np.argsort(values, kind='stable')
    return np.argsort(-values, kind='stable')


def sort(data: MatrixInput, sort_direction=SortDirection.ASCENDING) -> DoubleMatrix:
    """Entries sorted in column-major order, keeping the shape of ``data``."""
    return sort_index(data, sort_direction).sorted_data


def sort_index(data: MatrixInput, sort_direction=SortDirection.ASCENDING) -> SortIndexResults:
    """Sorted entries and the linear positions they came from.

    Sorting is stable: equal entries keep their relative order.
    """
    direction = check_sort_direction(sort_direction)
    x = _values(data)
    flat = x.ravel(order='F')
    order = _sort_order(flat, direction)
    sorted_data = _as_matrix(flat[order].reshape(x.shape, order='F'))
    return SortIndexResults(
        sorted_data=sorted_data,
        sorted_indexes=IndexCollection.from_array(order),
    )
