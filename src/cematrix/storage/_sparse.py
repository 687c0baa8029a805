"""Sparse storage: compressed sparse rows with a growable capacity.

Layout (CSR):
    data[k]     value of the k-th stored entry
    indices[k]  column of the k-th stored entry
    indptr[i]   offset of the first stored entry of row i

Only the first ``nnz`` slots of ``data``/``indices`` are live; the rest is
spare capacity. Inserting into a full buffer grows it geometrically so the
amortized cost of a write stays constant.
"""

import logging
from typing import Tuple

import numpy as np

from ._backend import Storage, StorageInfo, StorageScheme

logger = logging.getLogger("cematrix.storage")

__all__ = ['SparseStorage']


def _import_scipy_sparse():
    import scipy.sparse as sp
    return sp


class SparseStorage(Storage):
    """CSR strategy holding only explicitly set nonzero entries."""

    __slots__ = ('_shape', '_data', '_indices', '_indptr', '_nnz', '_growth_factor')

    scheme = StorageScheme.SPARSE

    def __init__(
        self,
        nrows: int,
        ncols: int,
        capacity: int,
        dtype=np.float64,
        growth_factor: float = 2.0,
    ):
        capacity = max(int(capacity), 1)
        self._shape = (int(nrows), int(ncols))
        self._data = np.zeros(capacity, dtype=dtype)
        self._indices = np.zeros(capacity, dtype=np.intp)
        self._indptr = np.zeros(nrows + 1, dtype=np.intp)
        self._nnz = 0
        self._growth_factor = max(float(growth_factor), 1.5)

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def from_scipy(cls, mat, dtype=None, growth_factor: float = 2.0) -> "SparseStorage":
        """Copy any scipy sparse matrix/array into CSR storage."""
        sp = _import_scipy_sparse()
        csr = sp.csr_array(mat, copy=True)
        csr.eliminate_zeros()
        csr.sum_duplicates()
        csr.sort_indices()
        dtype = csr.dtype if dtype is None else dtype
        nnz = int(csr.nnz)
        obj = cls(csr.shape[0], csr.shape[1], max(nnz, 1), dtype=dtype,
                  growth_factor=growth_factor)
        obj._data[:nnz] = csr.data
        obj._indices[:nnz] = csr.indices
        obj._indptr[:] = csr.indptr
        obj._nnz = nnz
        return obj

    @classmethod
    def from_dense(cls, arr: np.ndarray, growth_factor: float = 2.0) -> "SparseStorage":
        sp = _import_scipy_sparse()
        return cls.from_scipy(sp.csr_array(arr), dtype=arr.dtype,
                              growth_factor=growth_factor)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def shape(self) -> Tuple[int, int]:
        return self._shape

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def nnz(self) -> int:
        return self._nnz

    @property
    def capacity(self) -> int:
        return int(self._data.size)

    @property
    def info(self) -> StorageInfo:
        return StorageInfo(
            scheme=self.scheme,
            dtype=str(self._data.dtype),
            shape=self.shape,
            nnz=self._nnz,
            capacity=self.capacity,
        )

    # -------------------------------------------------------------------------
    # Element access
    # -------------------------------------------------------------------------

    def _find(self, row: int, col: int) -> Tuple[int, bool]:
        """Slot where (row, col) lives or would be inserted."""
        start, end = self._indptr[row], self._indptr[row + 1]
        pos = start + int(np.searchsorted(self._indices[start:end], col))
        found = pos < end and self._indices[pos] == col
        return pos, bool(found)

    def get(self, row: int, col: int):
        pos, found = self._find(row, col)
        if found:
            return self._data[pos].item()
        return self._data.dtype.type(0).item()

    def set(self, row: int, col: int, value) -> None:
        pos, found = self._find(row, col)
        if value == 0:
            if found:
                self._remove(row, pos)
            return
        if found:
            self._data[pos] = value
        else:
            self._insert(row, pos, col, value)

    def _grow(self, required: int) -> None:
        new_capacity = max(required, int(np.ceil(self.capacity * self._growth_factor)))
        logger.debug("Growing sparse storage capacity %d -> %d",
                     self.capacity, new_capacity)
        data = np.zeros(new_capacity, dtype=self._data.dtype)
        indices = np.zeros(new_capacity, dtype=np.intp)
        data[:self._nnz] = self._data[:self._nnz]
        indices[:self._nnz] = self._indices[:self._nnz]
        self._data = data
        self._indices = indices

    def _insert(self, row: int, pos: int, col: int, value) -> None:
        nnz = self._nnz
        if nnz == self.capacity:
            self._grow(nnz + 1)
        self._data[pos + 1:nnz + 1] = self._data[pos:nnz]
        self._indices[pos + 1:nnz + 1] = self._indices[pos:nnz]
        self._data[pos] = value
        self._indices[pos] = col
        self._indptr[row + 1:] += 1
        self._nnz = nnz + 1

    def _remove(self, row: int, pos: int) -> None:
        nnz = self._nnz
        self._data[pos:nnz - 1] = self._data[pos + 1:nnz]
        self._indices[pos:nnz - 1] = self._indices[pos + 1:nnz]
        self._data[nnz - 1] = 0
        self._indptr[row + 1:] -= 1
        self._nnz = nnz - 1

    def get_block(self, rows: np.ndarray, cols: np.ndarray) -> "SparseStorage":
        sub = self.to_scipy()[rows, :][:, cols]
        return SparseStorage.from_scipy(sub, dtype=self.dtype,
                                        growth_factor=self._growth_factor)

    def set_block(self, rows: np.ndarray, cols: np.ndarray, values: np.ndarray) -> None:
        for a, i in enumerate(rows):
            for b, j in enumerate(cols):
                self.set(int(i), int(j), values[a, b])

    def to_scipy(self):
        """scipy ``csr_array`` over a copy of the live entries."""
        sp = _import_scipy_sparse()
        nnz = self._nnz
        return sp.csr_array(
            (self._data[:nnz].copy(), self._indices[:nnz].copy(), self._indptr.copy()),
            shape=self._shape,
        )

    def to_numpy(self) -> np.ndarray:
        return np.asfortranarray(self.to_scipy().toarray())

    def nonzero(self) -> Tuple[np.ndarray, np.ndarray]:
        nnz = self._nnz
        rows = np.repeat(np.arange(self._shape[0]), np.diff(self._indptr))
        cols = self._indices[:nnz]
        live = self._data[:nnz] != 0
        return rows[live], cols[live].copy()

    def copy(self) -> "SparseStorage":
        obj = SparseStorage(self._shape[0], self._shape[1], self.capacity,
                            dtype=self.dtype, growth_factor=self._growth_factor)
        obj._data[:] = self._data
        obj._indices[:] = self._indices
        obj._indptr[:] = self._indptr
        obj._nnz = self._nnz
        return obj

    def transpose(self) -> "SparseStorage":
        return SparseStorage.from_scipy(self.to_scipy().T, dtype=self.dtype,
                                        growth_factor=self._growth_factor)

    def astype(self, dtype) -> "SparseStorage":
        obj = self.copy()
        obj._data = obj._data.astype(dtype)
        return obj

    def __repr__(self) -> str:
        return (f"SparseStorage(shape={self.shape}, nnz={self._nnz}, "
                f"capacity={self.capacity}, dtype={self.dtype})")
