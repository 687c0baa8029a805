"""Real and Complex Matrices.

This module provides the matrix containers of cematrix:

    - DoubleMatrix: matrix of real (float64) entries
    - ComplexMatrix: matrix of complex (complex128) entries
    - ReadOnlyMatrix: mutation-blocking facade sharing a matrix's storage

Architecture:
    ┌──────────────────────────────────────────────┐
    │   DoubleMatrix / ComplexMatrix (writable)    │
    │   ReadOnlyMatrix (borrowed reference)        │
    ├──────────────────────────────────────────────┤
    │   _ReadableMatrix: every non-mutating op     │
    ├──────────────────────────────────────────────┤
    │   Storage: DENSE | SPARSE                    │
    └──────────────────────────────────────────────┘

Indexing:
    Entries are addressed 0-based, either by a linear position (column-major
    flattening) or by (row, column). Blocks are selected by passing, for each
    dimension, an int, an IndexCollection, a sequence of ints, a slice, or
    the ``":"`` sentinel meaning "all".

Example:
    >>> m = DoubleMatrix.dense(2, 3, [1, 2, 3, 4, 5, 6], StorageOrder.ROW_MAJOR)
    >>> m[0, 2]
    3.0
    >>> m[1]                       # linear, column-major
    4.0
    >>> m[":", IndexCollection.range(1, 2)].shape
    (2, 2)
    >>> ro = m.as_read_only()
    >>> m[0, 0] = 10.0
    >>> ro[0, 0]
    10.0
"""

from __future__ import annotations

import logging
from numbers import Number
from typing import Any, Callable, Dict, Iterator, Optional, Sequence, Tuple, Union

import numpy as np

from .._config import config
from .._errors import (
    ArgumentError,
    IndexRangeError,
    ReadOnlyAccessError,
    ShapeMismatchError,
    check_not_none,
)
from ..index import IndexCollection
from ..storage import (
    DenseStorage,
    SparseStorage,
    Storage,
    StorageInfo,
    StorageOrder,
    StorageScheme,
)
from . import _ops, _patterns
from ._rows import MatrixRowCollection

logger = logging.getLogger("cematrix.matrix")

__all__ = [
    'ALL',
    'DoubleMatrix',
    'ComplexMatrix',
    'ReadOnlyMatrix',
    'element_wise_multiply',
    'wrap_storage',
]

# Sentinel selecting every row or column
ALL = ":"

KeyPart = Union[int, slice, str, IndexCollection, Sequence[int], np.ndarray]


# =============================================================================
# Index Resolution
# =============================================================================

def _resolve(key: KeyPart, bound: int, param_name: str) -> Tuple[np.ndarray, bool]:
    """Positions selected by ``key`` in a dimension of length ``bound``.

    Returns:
        (positions, is_scalar) where ``is_scalar`` is True for an int key.
    """
    if isinstance(key, str):
        if key != ALL:
            raise ArgumentError(f"Unrecognized index sentinel '{key}'", param_name)
        return np.arange(bound), False
    if isinstance(key, slice):
        return np.arange(bound)[key], False
    if isinstance(key, IndexCollection):
        key.check_bound(bound, param_name)
        return key.to_array(), False
    if isinstance(key, (int, np.integer)) and not isinstance(key, bool):
        k = int(key)
        if k < 0 or k >= bound:
            raise IndexRangeError(param_name=param_name)
        return np.array([k], dtype=np.intp), True
    if key is None:
        raise ArgumentError("Index cannot be None", param_name)
    arr = np.asarray(key)
    if arr.ndim != 1 or (arr.size and arr.dtype.kind not in 'iu'):
        raise ArgumentError("Index must be a sequence of integers", param_name)
    arr = arr.astype(np.intp)
    if arr.size and (arr.min() < 0 or arr.max() >= bound):
        raise IndexRangeError(param_name=param_name)
    return arr, False


def _remap_names(names: Optional[Dict[int, str]], positions: np.ndarray) -> Optional[Dict[int, str]]:
    if not names:
        return None
    remapped = {
        new: names[int(old)]
        for new, old in enumerate(positions)
        if int(old) in names
    }
    return remapped or None


def wrap_storage(storage: Storage, name: Optional[str] = None) -> "Matrix":
    """Writable matrix of the right element type owning ``storage``."""
    if storage.dtype.kind == 'c':
        return ComplexMatrix(storage, name=name)
    if storage.dtype != np.float64:
        storage = storage.astype(np.float64)
    return DoubleMatrix(storage, name=name)


def _storage_of(operand) -> Union[Storage, Number, None]:
    if isinstance(operand, _ReadableMatrix):
        return operand._storage
    if isinstance(operand, Number):
        return operand
    return None


# =============================================================================
# Read Operations
# =============================================================================

class _ReadableMatrix:
    """Non-mutating operations shared by writable and read-only matrices.

    Subclasses expose ``_storage``, ``_name``, ``_row_names`` and
    ``_column_names``.
    """

    __slots__ = ()

    # numpy must defer to the reflected operators below
    __array_ufunc__ = None

    # -------------------------------------------------------------------------
    # Shape and metadata
    # -------------------------------------------------------------------------

    @property
    def number_of_rows(self) -> int:
        return self._storage.shape[0]

    @property
    def number_of_columns(self) -> int:
        return self._storage.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self._storage.shape

    @property
    def count(self) -> int:
        """Total number of entries."""
        return self.number_of_rows * self.number_of_columns

    @property
    def dtype(self) -> np.dtype:
        return self._storage.dtype

    @property
    def is_complex(self) -> bool:
        return self._storage.dtype.kind == 'c'

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def storage_scheme(self) -> StorageScheme:
        return self._storage.scheme

    @property
    def storage_info(self) -> StorageInfo:
        return self._storage.info

    def get_row_name(self, row: int) -> Optional[str]:
        _resolve(row, self.number_of_rows, "row")
        return (self._row_names or {}).get(int(row))

    def get_column_name(self, column: int) -> Optional[str]:
        _resolve(column, self.number_of_columns, "column")
        return (self._column_names or {}).get(int(column))

    @property
    def has_row_names(self) -> bool:
        return bool(self._row_names)

    @property
    def has_column_names(self) -> bool:
        return bool(self._column_names)

    @property
    def row_names(self) -> Dict[int, str]:
        """Copy of the sparse row-name map (only named rows appear)."""
        return dict(self._row_names or {})

    @property
    def column_names(self) -> Dict[int, str]:
        """Copy of the sparse column-name map (only named columns appear)."""
        return dict(self._column_names or {})

    # -------------------------------------------------------------------------
    # Shape predicates
    # -------------------------------------------------------------------------

    @property
    def is_square(self) -> bool:
        return self.number_of_rows == self.number_of_columns

    @property
    def is_row_vector(self) -> bool:
        return self.number_of_rows == 1

    @property
    def is_column_vector(self) -> bool:
        return self.number_of_columns == 1

    @property
    def is_vector(self) -> bool:
        return self.is_row_vector or self.is_column_vector

    @property
    def is_scalar(self) -> bool:
        return self.count == 1

    # -------------------------------------------------------------------------
    # Structural predicates
    # -------------------------------------------------------------------------

    @property
    def bandwidths(self) -> _patterns.Bandwidths:
        return _patterns.bandwidths(self._storage)

    @property
    def lower_bandwidth(self) -> int:
        return self.bandwidths.lower

    @property
    def upper_bandwidth(self) -> int:
        return self.bandwidths.upper

    @property
    def is_diagonal(self) -> bool:
        return self.bandwidths.is_diagonal

    @property
    def is_lower_triangular(self) -> bool:
        return self.bandwidths.is_lower_triangular

    @property
    def is_upper_triangular(self) -> bool:
        return self.bandwidths.is_upper_triangular

    @property
    def is_lower_bidiagonal(self) -> bool:
        return self.bandwidths.is_lower_bidiagonal

    @property
    def is_upper_bidiagonal(self) -> bool:
        return self.bandwidths.is_upper_bidiagonal

    @property
    def is_tridiagonal(self) -> bool:
        return self.bandwidths.is_tridiagonal

    @property
    def is_lower_hessenberg(self) -> bool:
        return self.bandwidths.is_lower_hessenberg

    @property
    def is_upper_hessenberg(self) -> bool:
        return self.bandwidths.is_upper_hessenberg

    @property
    def is_symmetric(self) -> bool:
        return _patterns.is_symmetric(self._storage, config.compute.symmetry_tolerance)

    @property
    def is_skew_symmetric(self) -> bool:
        return _patterns.is_skew_symmetric(self._storage, config.compute.symmetry_tolerance)

    @property
    def is_hermitian(self) -> bool:
        return _patterns.is_hermitian(self._storage, config.compute.symmetry_tolerance)

    # -------------------------------------------------------------------------
    # Entry access
    # -------------------------------------------------------------------------

    def _linear_to_coords(self, positions: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        nrows = self.number_of_rows
        return positions % nrows, positions // nrows

    def __getitem__(self, key):
        if isinstance(key, tuple):
            if len(key) != 2:
                raise ArgumentError("Expected (row, column) key", "key")
            rows, row_scalar = _resolve(key[0], self.number_of_rows, "row_index")
            cols, col_scalar = _resolve(key[1], self.number_of_columns, "column_index")
            if row_scalar and col_scalar:
                return self._storage.get(int(rows[0]), int(cols[0]))
            return self._block(rows, cols)
        positions, scalar = _resolve(key, self.count, "linear_index")
        if scalar:
            r, c = self._linear_to_coords(positions)
            return self._storage.get(int(r[0]), int(c[0]))
        return self._linear_block(positions)

    def _block(self, rows: np.ndarray, cols: np.ndarray) -> "Matrix":
        storage = self._storage.get_block(rows, cols)
        result = wrap_storage(storage)
        result._row_names = _remap_names(self._row_names, rows)
        result._column_names = _remap_names(self._column_names, cols)
        return result

    def _linear_block(self, positions: np.ndarray) -> "Matrix":
        r, c = self._linear_to_coords(positions)
        values = self._storage.to_numpy()[r, c]
        if self.is_row_vector:
            arr = values.reshape(1, -1)
        else:
            arr = values.reshape(-1, 1)
        return wrap_storage(DenseStorage(np.asfortranarray(arr)))

    def __iter__(self) -> Iterator:
        """Entries in column-major order."""
        values = self._storage.to_numpy()
        for v in values.ravel(order='F'):
            yield v.item()

    def vec(self, linear_indexes: Optional[IndexCollection] = None) -> "Matrix":
        """Column vector stacking the columns (optionally only some entries)."""
        if linear_indexes is None:
            values = self._storage.to_numpy().ravel(order='F')
        else:
            positions, _ = _resolve(linear_indexes, self.count, "linear_indexes")
            r, c = self._linear_to_coords(positions)
            values = self._storage.to_numpy()[r, c]
        return wrap_storage(DenseStorage(np.asfortranarray(values.reshape(-1, 1))))

    def find(self, value) -> Optional[IndexCollection]:
        """Linear positions holding ``value``; None if there are none."""
        flat = self._storage.to_numpy().ravel(order='F')
        if isinstance(value, float) and np.isnan(value):
            hits = np.flatnonzero(np.isnan(flat))
        else:
            hits = np.flatnonzero(flat == value)
        return IndexCollection._trusted(hits) if hits.size else None

    def find_nonzero(self) -> Optional[IndexCollection]:
        rows, cols = self._storage.nonzero()
        if len(rows) == 0:
            return None
        linear = np.sort(np.asarray(cols) * self.number_of_rows + np.asarray(rows))
        return IndexCollection._trusted(linear)

    def find_while(self, predicate: Callable[[Any], bool]) -> Optional[IndexCollection]:
        """Linear positions whose entry satisfies ``predicate``."""
        check_not_none(predicate, "predicate")
        hits = [k for k, v in enumerate(self) if predicate(v)]
        return IndexCollection._trusted(np.array(hits)) if hits else None

    # -------------------------------------------------------------------------
    # Conversions
    # -------------------------------------------------------------------------

    def to_numpy(self) -> np.ndarray:
        """2-D array copy of the content."""
        return np.array(self._storage.to_numpy(), copy=True)

    def to_scipy(self):
        """``scipy.sparse.csr_array`` copy of the content."""
        if isinstance(self._storage, SparseStorage):
            return self._storage.to_scipy()
        import scipy.sparse as sp
        return sp.csr_array(self._storage.to_numpy())

    def as_column_major_array(self) -> np.ndarray:
        """Flat copy of the entries in column-major order."""
        return self._storage.to_numpy().ravel(order='F').copy()

    def as_row_collection(self) -> MatrixRowCollection:
        return MatrixRowCollection(self)

    def copy(self) -> "Matrix":
        """Writable deep copy, names included."""
        result = wrap_storage(self._storage.copy(), name=self._name)
        result._row_names = dict(self._row_names) if self._row_names else None
        result._column_names = dict(self._column_names) if self._column_names else None
        return result

    # -------------------------------------------------------------------------
    # Functional transforms
    # -------------------------------------------------------------------------

    def transpose(self) -> "Matrix":
        result = wrap_storage(self._storage.transpose(), name=self._name)
        result._row_names = dict(self._column_names) if self._column_names else None
        result._column_names = dict(self._row_names) if self._row_names else None
        return result

    @property
    def T(self) -> "Matrix":
        return self.transpose()

    def apply(self, func: Callable) -> "Matrix":
        """New matrix with ``func`` applied to every entry."""
        check_not_none(func, "func")
        return wrap_storage(_ops.apply(self._storage, func))

    def conjugate(self) -> "Matrix":
        if not self.is_complex:
            return self.copy()
        return wrap_storage(_ops.apply(self._storage, np.conj))

    def conjugate_transpose(self) -> "Matrix":
        return self.conjugate().transpose()

    @property
    def real(self) -> "DoubleMatrix":
        return wrap_storage(DenseStorage(np.asfortranarray(self._storage.to_numpy().real)))

    @property
    def imag(self) -> "DoubleMatrix":
        return wrap_storage(DenseStorage(np.asfortranarray(self._storage.to_numpy().imag)))

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    def __add__(self, other):
        check_not_none(other, "right")
        rhs = _storage_of(other)
        if rhs is None:
            return NotImplemented
        return wrap_storage(_ops.add(self._storage, rhs))

    def __radd__(self, other):
        check_not_none(other, "left")
        lhs = _storage_of(other)
        if lhs is None:
            return NotImplemented
        return wrap_storage(_ops.add(lhs, self._storage))

    def __sub__(self, other):
        check_not_none(other, "right")
        rhs = _storage_of(other)
        if rhs is None:
            return NotImplemented
        return wrap_storage(_ops.subtract(self._storage, rhs))

    def __rsub__(self, other):
        check_not_none(other, "left")
        lhs = _storage_of(other)
        if lhs is None:
            return NotImplemented
        return wrap_storage(_ops.subtract(lhs, self._storage))

    def __neg__(self):
        return wrap_storage(_ops.negate(self._storage))

    def __pos__(self):
        return self.copy()

    def __mul__(self, other):
        """Matrix product (``left * right``), or scaling by a scalar."""
        check_not_none(other, "right")
        rhs = _storage_of(other)
        if rhs is None:
            return NotImplemented
        return wrap_storage(_ops.multiply(self._storage, rhs))

    def __rmul__(self, other):
        check_not_none(other, "left")
        lhs = _storage_of(other)
        if lhs is None:
            return NotImplemented
        return wrap_storage(_ops.multiply(lhs, self._storage))

    __matmul__ = __mul__
    __rmatmul__ = __rmul__

    def __truediv__(self, other):
        """``left / right``: solves ``X * right = left`` for matrices."""
        check_not_none(other, "right")
        rhs = _storage_of(other)
        if rhs is None:
            return NotImplemented
        if isinstance(rhs, Number):
            return wrap_storage(_ops.divide_by_scalar(self._storage, rhs))
        from ..linalg._solvers import divide
        return wrap_storage(divide(self._storage, rhs))

    def __rtruediv__(self, other):
        check_not_none(other, "left")
        if not isinstance(other, Number):
            return NotImplemented
        return wrap_storage(_ops.scalar_divide(other, self._storage))

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    def _format_value(self, v) -> str:
        if isinstance(v, complex):
            return f"({v.real:g}, {v.imag:g})"
        return f"{v:g}"

    def __str__(self) -> str:
        values = self._storage.to_numpy()
        lines = []
        if self._name:
            lines.append(f"[{self._name}]")
        row_names = self._row_names or {}
        col_names = self._column_names or {}
        prefix = max((len(n) for n in row_names.values()), default=0)
        if col_names:
            header = [col_names.get(j, "") for j in range(self.number_of_columns)]
            lines.append(" " * (prefix + 1 if prefix else 0)
                         + "".join(f"{h:<15}" for h in header).rstrip())
        for i in range(self.number_of_rows):
            cells = "".join(f"{self._format_value(values[i, j].item()):<15}"
                            for j in range(self.number_of_columns))
            label = f"{row_names.get(i, ''):<{prefix}} " if prefix else ""
            lines.append((label + cells).rstrip())
        return "\n".join(lines)

    def __repr__(self) -> str:
        kind = type(self).__name__
        return (f"{kind}(shape={self.shape}, scheme={self.storage_scheme.value}"
                + (f", name={self._name!r}" if self._name else "") + ")")


# =============================================================================
# Writable Matrices
# =============================================================================

class Matrix(_ReadableMatrix):
    """Writable matrix owning its storage.

    Use :class:`DoubleMatrix` or :class:`ComplexMatrix` factories to create
    instances.
    """

    __slots__ = ('_storage', '_name', '_row_names', '_column_names', '__weakref__')

    _dtype = np.float64

    def __init__(self, storage: Storage, name: Optional[str] = None):
        check_not_none(storage, "storage")
        self._storage = storage
        self._name = name
        self._row_names: Optional[Dict[int, str]] = None
        self._column_names: Optional[Dict[int, str]] = None

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def _check_dims(cls, nrows: int, ncols: int) -> None:
        if nrows < 1:
            raise ArgumentError("Number of rows must be positive", "number_of_rows")
        if ncols < 1:
            raise ArgumentError("Number of columns must be positive", "number_of_columns")

    @classmethod
    def dense(
        cls,
        number_of_rows: int,
        number_of_columns: int,
        data=None,
        storage_order: StorageOrder = StorageOrder.COLUMN_MAJOR,
    ):
        """Dense matrix.

        Args:
            number_of_rows: Positive number of rows.
            number_of_columns: Positive number of columns.
            data: None for zeros, a scalar to fill every entry, or a flat
                buffer of ``rows * cols`` values laid out in ``storage_order``.
            storage_order: Layout of ``data`` when it is a buffer.
        """
        cls._check_dims(number_of_rows, number_of_columns)
        if data is None:
            return cls(DenseStorage.zeros(number_of_rows, number_of_columns, cls._dtype))
        if isinstance(data, Number):
            return cls(DenseStorage.full(number_of_rows, number_of_columns, data, cls._dtype))
        if not isinstance(storage_order, StorageOrder):
            raise ArgumentError("Not a recognized storage order", "storage_order")
        try:
            storage = DenseStorage.from_buffer(
                number_of_rows, number_of_columns, data, storage_order, cls._dtype
            )
        except ValueError as exc:
            raise ShapeMismatchError(str(exc), "data") from exc
        return cls(storage)

    @classmethod
    def sparse(cls, number_of_rows: int, number_of_columns: int, capacity: Optional[int] = None):
        """Sparse matrix of zeros pre-allocating ``capacity`` nonzero slots."""
        cls._check_dims(number_of_rows, number_of_columns)
        sparse_config = config.sparse
        if capacity is None:
            capacity = sparse_config.initial_capacity
        if capacity < 1:
            raise ArgumentError("Capacity must be positive", "capacity")
        return cls(SparseStorage(number_of_rows, number_of_columns, capacity,
                                 dtype=cls._dtype,
                                 growth_factor=sparse_config.growth_factor))

    @classmethod
    def from_array(cls, data):
        """Dense matrix from a 2-D array or a rectangular list of rows."""
        check_not_none(data, "data")
        if isinstance(data, np.ndarray):
            arr = data
        else:
            rows = list(data)
            if not rows:
                raise ArgumentError("Data cannot be empty", "data")
            lengths = {len(r) for r in rows}
            if len(lengths) != 1:
                raise ArgumentError("Rows must all have the same length", "data")
            arr = np.array(rows)
        if arr.ndim == 1:
            arr = arr.reshape(1, -1)
        if arr.ndim != 2:
            raise ArgumentError("Data must be two-dimensional", "data")
        cls._check_dims(arr.shape[0], arr.shape[1])
        return cls(DenseStorage(np.array(arr, dtype=cls._dtype, order='F')))

    @classmethod
    def from_numpy(cls, arr: np.ndarray):
        return cls.from_array(np.asarray(arr))

    @classmethod
    def from_scipy(cls, mat):
        """Sparse matrix holding a copy of any scipy sparse matrix/array."""
        check_not_none(mat, "mat")
        return cls(SparseStorage.from_scipy(mat, dtype=cls._dtype,
                                            growth_factor=config.sparse.growth_factor))

    @classmethod
    def identity(cls, dimension: int):
        cls._check_dims(dimension, dimension)
        return cls(DenseStorage(np.asfortranarray(np.eye(dimension, dtype=cls._dtype))))

    @classmethod
    def diagonal(cls, main_diagonal):
        """Sparse square matrix with ``main_diagonal`` on its diagonal."""
        check_not_none(main_diagonal, "main_diagonal")
        if isinstance(main_diagonal, _ReadableMatrix):
            if not main_diagonal.is_vector:
                raise ArgumentError("Parameter must be a vector", "main_diagonal")
            values = main_diagonal.as_column_major_array()
        else:
            values = np.asarray(main_diagonal).ravel()
        n = values.size
        result = cls.sparse(n, n, n)
        for i, v in enumerate(values):
            result._storage.set(i, i, v)
        return result

    # -------------------------------------------------------------------------
    # Names
    # -------------------------------------------------------------------------

    @_ReadableMatrix.name.setter
    def name(self, value: Optional[str]):
        self._name = value

    def set_row_name(self, row: int, name: Optional[str]) -> None:
        _resolve(row, self.number_of_rows, "row")
        if self._row_names is None:
            self._row_names = {}
        if name is None:
            self._row_names.pop(int(row), None)
        else:
            self._row_names[int(row)] = name

    def set_column_name(self, column: int, name: Optional[str]) -> None:
        _resolve(column, self.number_of_columns, "column")
        if self._column_names is None:
            self._column_names = {}
        if name is None:
            self._column_names.pop(int(column), None)
        else:
            self._column_names[int(column)] = name

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def __setitem__(self, key, value):
        if isinstance(key, tuple):
            if len(key) != 2:
                raise ArgumentError("Expected (row, column) key", "key")
            rows, row_scalar = _resolve(key[0], self.number_of_rows, "row_index")
            cols, col_scalar = _resolve(key[1], self.number_of_columns, "column_index")
            if row_scalar and col_scalar:
                self._set_scalar(int(rows[0]), int(cols[0]), value)
                return
            self._set_block(rows, cols, value)
            return
        positions, scalar = _resolve(key, self.count, "linear_index")
        r, c = self._linear_to_coords(positions)
        if scalar:
            self._set_scalar(int(r[0]), int(c[0]), value)
            return
        if isinstance(value, Number):
            values = np.full(positions.size, value)
        elif isinstance(value, _ReadableMatrix):
            if value.count != positions.size:
                raise ShapeMismatchError("Value count does not match index count", "value")
            values = value.as_column_major_array()
        else:
            raise ArgumentError("Value must be a scalar or a matrix", "value")
        for i, j, v in zip(r, c, values):
            self._storage.set(int(i), int(j), v)

    def _set_scalar(self, row: int, col: int, value) -> None:
        if not isinstance(value, Number):
            raise ArgumentError("Value must be a scalar", "value")
        self._storage.set(row, col, value)

    def _set_block(self, rows: np.ndarray, cols: np.ndarray, value) -> None:
        if isinstance(value, Number):
            values = np.full((rows.size, cols.size), value)
        elif isinstance(value, _ReadableMatrix):
            if value.shape != (rows.size, cols.size):
                raise ShapeMismatchError(
                    f"Value shape {value.shape} does not match "
                    f"selection shape {(rows.size, cols.size)}",
                    "value",
                )
            values = value.to_numpy()
        else:
            raise ArgumentError("Value must be a scalar or a matrix", "value")
        self._storage.set_block(rows, cols, values)

    def in_place_apply(self, func: Callable) -> None:
        check_not_none(func, "func")
        self._storage = _ops.apply(self._storage, func)

    def in_place_transpose(self) -> None:
        self._storage = self._storage.transpose()
        self._row_names, self._column_names = self._column_names, self._row_names

    def in_place_conjugate(self) -> None:
        if self.is_complex:
            self._storage = _ops.apply(self._storage, np.conj)

    def in_place_conjugate_transpose(self) -> None:
        self.in_place_conjugate()
        self.in_place_transpose()

    def as_read_only(self) -> "ReadOnlyMatrix":
        return ReadOnlyMatrix(self)


class DoubleMatrix(Matrix):
    """Matrix of real entries."""

    __slots__ = ()

    _dtype = np.float64


class ComplexMatrix(Matrix):
    """Matrix of complex entries."""

    __slots__ = ()

    _dtype = np.complex128


# =============================================================================
# Read-Only Facade
# =============================================================================

class ReadOnlyMatrix(_ReadableMatrix):
    """Mutation-blocking view of a matrix.

    Holds a borrowed reference to the wrapped matrix and reads its current
    storage on every access, so writes through the matrix are visible here.
    Any write through the facade raises :class:`ReadOnlyAccessError`.
    """

    __slots__ = ('_matrix',)

    def __init__(self, matrix: Matrix):
        check_not_none(matrix, "matrix")
        if isinstance(matrix, ReadOnlyMatrix):
            matrix = matrix._matrix
        self._matrix = matrix

    @property
    def _storage(self) -> Storage:
        return self._matrix._storage

    @property
    def _name(self) -> Optional[str]:
        return self._matrix._name

    @property
    def _row_names(self) -> Optional[Dict[int, str]]:
        return self._matrix._row_names

    @property
    def _column_names(self) -> Optional[Dict[int, str]]:
        return self._matrix._column_names

    def __setitem__(self, key, value):
        raise ReadOnlyAccessError(param_name="matrix")

    def as_read_only(self) -> "ReadOnlyMatrix":
        return self

    def __repr__(self) -> str:
        return f"ReadOnlyMatrix({self._matrix!r})"


# =============================================================================
# Functions
# =============================================================================

def element_wise_multiply(left: _ReadableMatrix, right: _ReadableMatrix) -> Matrix:
    """Hadamard product of two matrices with the same shape."""
    check_not_none(left, "left")
    check_not_none(right, "right")
    return wrap_storage(_ops.element_wise_multiply(left._storage, right._storage))
