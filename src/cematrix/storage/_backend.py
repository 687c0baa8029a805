"""Storage Schemes and Storage Abstraction.

This module defines the storage system behind every matrix, providing:
- Storage schemes (Dense, Sparse)
- Storage order tags for flat buffers
- A common element-access interface implemented by each scheme

Design Philosophy:
    A single matrix class transparently manages different underlying
    storage mechanisms. The matrix holds exactly one storage strategy and
    delegates all entry access to it; callers never see the concrete type.

Storage Schemes:
    - DENSE: ``rows * cols`` entries addressed in column-major order
    - SPARSE: compressed rows holding only explicitly set nonzero entries,
      with a growable capacity

Example:
    >>> storage = DenseStorage.from_buffer(2, 2, [1, 2, 3, 4], StorageOrder.ROW_MAJOR)
    >>> storage.get(0, 1)
    2.0
    >>> storage.info.scheme
    <StorageScheme.DENSE: 'dense'>
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import numpy as np

__all__ = [
    'StorageScheme',
    'StorageOrder',
    'StorageInfo',
    'Storage',
]


# =============================================================================
# Enumerations
# =============================================================================

class StorageScheme(Enum):
    """Matrix storage scheme.

    Attributes:
        DENSE: Every entry is stored. Column-major addressing.

        SPARSE: Only explicitly set nonzero entries consume memory; all
                other entries read as the additive identity.

    Example:
        >>> DoubleMatrix.dense(2, 2).storage_scheme   # StorageScheme.DENSE
        >>> DoubleMatrix.sparse(2, 2, 4).storage_scheme  # StorageScheme.SPARSE
    """
    DENSE = 'dense'
    SPARSE = 'sparse'


class StorageOrder(Enum):
    """Convention used to flatten a two-dimensional array into a buffer.

    Attributes:
        ROW_MAJOR: Consecutive buffer entries walk along rows.
        COLUMN_MAJOR: Consecutive buffer entries walk down columns.
    """
    ROW_MAJOR = 'C'
    COLUMN_MAJOR = 'F'


# =============================================================================
# Storage Information
# =============================================================================

@dataclass
class StorageInfo:
    """Storage metadata for a matrix.

    Attributes:
        scheme: Storage scheme.
        dtype: Data type string ('float64', 'complex128').
        shape: Matrix dimensions (rows, cols).
        nnz: Number of stored entries (all entries for DENSE).
        capacity: Allocated entry slots (equal to nnz for DENSE).

    Note:
        This is primarily for introspection and debugging.
    """
    scheme: StorageScheme
    dtype: str
    shape: Tuple[int, int]
    nnz: int
    capacity: int

    def __repr__(self) -> str:
        return (
            f"StorageInfo(scheme={self.scheme.value}, dtype={self.dtype}, "
            f"shape={self.shape}, nnz={self.nnz}, capacity={self.capacity})"
        )


# =============================================================================
# Storage Interface
# =============================================================================

class Storage(ABC):
    """Element-access capability shared by all storage schemes.

    Index validation happens in the owning matrix; storages assume valid,
    non-negative positions.
    """

    __slots__ = ()

    scheme: StorageScheme

    @property
    @abstractmethod
    def shape(self) -> Tuple[int, int]:
        """Dimensions (rows, cols)."""

    @property
    @abstractmethod
    def dtype(self) -> np.dtype:
        """Entry data type."""

    @property
    @abstractmethod
    def info(self) -> StorageInfo:
        """Storage metadata."""

    @abstractmethod
    def get(self, row: int, col: int):
        """Read a single entry."""

    @abstractmethod
    def set(self, row: int, col: int, value) -> None:
        """Write a single entry."""

    @abstractmethod
    def get_block(self, rows: np.ndarray, cols: np.ndarray) -> "Storage":
        """Storage of the same scheme holding ``self[rows, cols]``."""

    @abstractmethod
    def set_block(self, rows: np.ndarray, cols: np.ndarray, values: np.ndarray) -> None:
        """Write a 2-D array of values at ``rows x cols``."""

    @abstractmethod
    def to_numpy(self) -> np.ndarray:
        """2-D array with the matrix content (may share memory for DENSE)."""

    @abstractmethod
    def nonzero(self) -> Tuple[np.ndarray, np.ndarray]:
        """Row and column positions of nonzero entries."""

    @abstractmethod
    def copy(self) -> "Storage":
        """Deep copy."""

    @abstractmethod
    def transpose(self) -> "Storage":
        """New storage of the same scheme holding the transpose."""

    @abstractmethod
    def astype(self, dtype) -> "Storage":
        """Copy converted to ``dtype``."""

    @property
    def nrows(self) -> int:
        return self.shape[0]

    @property
    def ncols(self) -> int:
        return self.shape[1]
