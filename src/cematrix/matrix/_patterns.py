"""Structural patterns of a matrix entry layout.

All predicates derive from a single scan of the nonzero positions, so the
bandwidths reported here are exactly what the solvers in
``cematrix.linalg`` rely on.
"""

from dataclasses import dataclass

import numpy as np

from ..storage import Storage

__all__ = ['Bandwidths', 'bandwidths', 'is_symmetric', 'is_skew_symmetric', 'is_hermitian']


@dataclass(frozen=True)
class Bandwidths:
    """Lower and upper bandwidth of a matrix.

    Attributes:
        lower: Largest ``i - j`` over nonzero entries ``(i, j)`` (0 if none).
        upper: Largest ``j - i`` over nonzero entries ``(i, j)`` (0 if none).
    """
    lower: int
    upper: int

    @property
    def is_diagonal(self) -> bool:
        return self.lower == 0 and self.upper == 0

    @property
    def is_lower_triangular(self) -> bool:
        return self.upper == 0

    @property
    def is_upper_triangular(self) -> bool:
        return self.lower == 0

    @property
    def is_lower_bidiagonal(self) -> bool:
        return self.upper == 0 and self.lower <= 1

    @property
    def is_upper_bidiagonal(self) -> bool:
        return self.lower == 0 and self.upper <= 1

    @property
    def is_tridiagonal(self) -> bool:
        return self.lower <= 1 and self.upper <= 1

    @property
    def is_lower_hessenberg(self) -> bool:
        return self.upper <= 1

    @property
    def is_upper_hessenberg(self) -> bool:
        return self.lower <= 1


def bandwidths(storage: Storage) -> Bandwidths:
    """Scan nonzero positions once and report both bandwidths."""
    rows, cols = storage.nonzero()
    if len(rows) == 0:
        return Bandwidths(0, 0)
    offsets = np.asarray(rows, dtype=np.intp) - np.asarray(cols, dtype=np.intp)
    return Bandwidths(max(int(offsets.max()), 0), max(int(-offsets.min()), 0))


def is_symmetric(storage: Storage, tolerance: float = 0.0) -> bool:
    if storage.shape[0] != storage.shape[1]:
        return False
    a = storage.to_numpy()
    return bool(np.all(np.abs(a - a.T) <= tolerance))


def is_skew_symmetric(storage: Storage, tolerance: float = 0.0) -> bool:
    if storage.shape[0] != storage.shape[1]:
        return False
    a = storage.to_numpy()
    return bool(np.all(np.abs(a + a.T) <= tolerance))


def is_hermitian(storage: Storage, tolerance: float = 0.0) -> bool:
    if storage.shape[0] != storage.shape[1]:
        return False
    a = storage.to_numpy()
    return bool(np.all(np.abs(a - a.conj().T) <= tolerance))
