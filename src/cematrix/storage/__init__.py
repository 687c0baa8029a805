"""
Storage strategies behind cematrix matrices.

Example:
    >>> from cematrix.storage import DenseStorage, SparseStorage, StorageOrder
    >>> dense = DenseStorage.from_buffer(2, 3, range(6), StorageOrder.ROW_MAJOR)
    >>> sparse = SparseStorage(1000, 1000, capacity=16)
    >>> sparse.set(10, 20, 1.5)
    >>> sparse.info.nnz
    1
"""

from ._backend import (
    StorageScheme,
    StorageOrder,
    StorageInfo,
    Storage,
)
from ._dense import DenseStorage
from ._sparse import SparseStorage

__all__ = [
    'StorageScheme',
    'StorageOrder',
    'StorageInfo',
    'Storage',
    'DenseStorage',
    'SparseStorage',
]
