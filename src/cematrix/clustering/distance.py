"""Distances between observations and between clusters of observations.

A cluster is a matrix whose rows are observations; all distances are
Euclidean.
"""

import numpy as np
from scipy.spatial.distance import cdist, pdist

from .._errors import ArgumentError
from .._typing import MatrixInput, ensure_double_matrix
from ..matrix import DoubleMatrix
from ..storage import DenseStorage

__all__ = [
    'euclidean',
    'complete_diameter',
    'single_linkage',
    'complete_linkage',
    'average_linkage',
    'centroid_linkage',
]


def _rows(cluster: MatrixInput, param_name: str) -> np.ndarray:
    return np.asarray(ensure_double_matrix(cluster, param_name).to_numpy(), dtype=np.float64)


def _pair(left: MatrixInput, right: MatrixInput):
    a = _rows(left, "left")
    b = _rows(right, "right")
    if a.shape[1] != b.shape[1]:
        raise ArgumentError("Clusters must have the same number of columns", "right")
    return a, b


def euclidean(cluster: MatrixInput, other: MatrixInput = None):
    """Euclidean distances.

    With one argument, returns the symmetric matrix of distances between
    the rows of ``cluster``. With two vectors of equal length, returns
    the distance between them as a float.
    """
    if other is None:
        a = _rows(cluster, "cluster")
        d = cdist(a, a)
        return DoubleMatrix(DenseStorage(np.asfortranarray(d)))
    a = ensure_double_matrix(cluster, "cluster")
    b = ensure_double_matrix(other, "other")
    if not (a.is_vector and b.is_vector) or a.count != b.count:
        raise ArgumentError("Parameters must be vectors of the same length", "other")
    diff = a.as_column_major_array() - b.as_column_major_array()
    return float(np.sqrt(np.dot(diff, diff)))


def complete_diameter(cluster: MatrixInput) -> float:
    """Largest distance between two rows; 0 for a single row."""
    a = _rows(cluster, "cluster")
    if a.shape[0] < 2:
        return 0.0
    return float(pdist(a).max())


def single_linkage(left: MatrixInput, right: MatrixInput) -> float:
    """Smallest distance between a row of ``left`` and a row of ``right``."""
    a, b = _pair(left, right)
    return float(cdist(a, b).min())


def complete_linkage(left: MatrixInput, right: MatrixInput) -> float:
    """Largest distance between a row of ``left`` and a row of ``right``."""
    a, b = _pair(left, right)
    return float(cdist(a, b).max())


def average_linkage(left: MatrixInput, right: MatrixInput) -> float:
    a, b = _pair(left, right)
    return float(cdist(a, b).mean())


def centroid_linkage(left: MatrixInput, right: MatrixInput) -> float:
    """Distance between the row means of the two clusters."""
    a, b = _pair(left, right)
    diff = a.mean(axis=0) - b.mean(axis=0)
    return float(np.sqrt(np.dot(diff, diff)))
