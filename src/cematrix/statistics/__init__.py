"""
cematrix Statistics Module.

This module provides statistical reductions of matrices, including:

    - Location and dispersion (sum, mean, variance, standard deviation)
    - Shape (skewness, kurtosis)
    - Order statistics (min, max, quantile, sort)
    - Association (covariance, correlation)

Each reduction works on the whole matrix, on each row, or on each column,
as selected by a :class:`DataOperation`.

Example:
    >>> import cematrix.statistics as stat
    >>> from cematrix import DoubleMatrix
    >>>
    >>> m = DoubleMatrix.from_array([[1, 2, 3], [4, 5, 6]])
    >>> stat.mean(m, stat.DataOperation.ON_ROWS).to_numpy()
    array([[2.],
           [5.]])
    >>> stat.max(m)
    IndexValuePair(index=5, value=6.0)
"""

from ._types import (
    DataOperation,
    SortDirection,
    IndexValuePair,
    SortIndexResults,
)

from .descriptive import (
    sum,
    mean,
    sum_of_squared_deviations,
    variance,
    standard_deviation,
    skewness,
    kurtosis,
    min,
    max,
    quantile,
    sort,
    sort_index,
)

from .association import (
    covariance,
    correlation,
)

__all__ = [
    # Types
    "DataOperation",
    "SortDirection",
    "IndexValuePair",
    "SortIndexResults",
    # Descriptive
    "sum",
    "mean",
    "sum_of_squared_deviations",
    "variance",
    "standard_deviation",
    "skewness",
    "kurtosis",
    "min",
    "max",
    "quantile",
    "sort",
    "sort_index",
    # Association
    "covariance",
    "correlation",
]
