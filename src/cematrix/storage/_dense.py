"""Dense storage: every entry of a ``rows x cols`` matrix in one buffer."""

from typing import Sequence, Tuple, Union

import numpy as np

from ._backend import Storage, StorageInfo, StorageOrder, StorageScheme

__all__ = ['DenseStorage']


class DenseStorage(Storage):
    """Dense strategy backed by a 2-D numpy array.

    The array is addressed by (row, col); linear positions follow
    column-major order whatever the memory layout of the array, so buffers
    supplied in row-major order are adopted by remapping their strides
    rather than by reordering their entries.
    """

    __slots__ = ('_data',)

    scheme = StorageScheme.DENSE

    def __init__(self, data: np.ndarray):
        if data.ndim != 2:
            raise ValueError("Dense storage requires a 2-D array")
        self._data = data

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def zeros(cls, nrows: int, ncols: int, dtype=np.float64) -> "DenseStorage":
        return cls(np.zeros((nrows, ncols), dtype=dtype, order='F'))

    @classmethod
    def full(cls, nrows: int, ncols: int, value, dtype=np.float64) -> "DenseStorage":
        return cls(np.full((nrows, ncols), value, dtype=dtype, order='F'))

    @classmethod
    def from_buffer(
        cls,
        nrows: int,
        ncols: int,
        data: Union[Sequence, np.ndarray],
        storage_order: StorageOrder = StorageOrder.COLUMN_MAJOR,
        dtype=np.float64,
    ) -> "DenseStorage":
        """Adopt a copy of a flat buffer laid out in ``storage_order``."""
        flat = np.array(data, dtype=dtype).ravel()
        if flat.size != nrows * ncols:
            raise ValueError(
                f"Buffer length {flat.size} does not match shape ({nrows}, {ncols})"
            )
        return cls(flat.reshape((nrows, ncols), order=storage_order.value))

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def shape(self) -> Tuple[int, int]:
        return self._data.shape

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def info(self) -> StorageInfo:
        size = int(self._data.size)
        return StorageInfo(
            scheme=self.scheme,
            dtype=str(self._data.dtype),
            shape=self.shape,
            nnz=size,
            capacity=size,
        )

    # -------------------------------------------------------------------------
    # Element access
    # -------------------------------------------------------------------------

    def get(self, row: int, col: int):
        return self._data[row, col].item()

    def set(self, row: int, col: int, value) -> None:
        self._data[row, col] = value

    def get_block(self, rows: np.ndarray, cols: np.ndarray) -> "DenseStorage":
        return DenseStorage(np.asfortranarray(self._data[np.ix_(rows, cols)]))

    def set_block(self, rows: np.ndarray, cols: np.ndarray, values: np.ndarray) -> None:
        self._data[np.ix_(rows, cols)] = values

    def to_numpy(self) -> np.ndarray:
        return self._data

    def nonzero(self) -> Tuple[np.ndarray, np.ndarray]:
        return np.nonzero(self._data)

    def copy(self) -> "DenseStorage":
        return DenseStorage(self._data.copy(order='F'))

    def transpose(self) -> "DenseStorage":
        return DenseStorage(np.asfortranarray(self._data.T))

    def astype(self, dtype) -> "DenseStorage":
        return DenseStorage(self._data.astype(dtype, order='F'))

    def __repr__(self) -> str:
        return f"DenseStorage(shape={self.shape}, dtype={self.dtype})"
