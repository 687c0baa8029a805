"""Row views over a matrix.

A :class:`MatrixRow` is a handle made of a matrix reference and a row index.
Reassigning ``row.index`` re-targets the handle without allocating, and
writes through ``row[j] = v`` land in the matrix storage.

Example:
    >>> rows = matrix.as_row_collection()
    >>> rows.x_data_column = 0
    >>> row = rows[0]
    >>> row.x_data
    1.0
    >>> row.index = 2
    >>> row.x_data
    5.0
"""

from functools import total_ordering
from typing import Iterator, List, Optional, Tuple

from .._errors import ArgumentError, IndexRangeError, check_not_none

__all__ = ['MatrixRow', 'MatrixRowCollection']


@total_ordering
class MatrixRow:
    """Cursor on one row of a matrix."""

    __slots__ = ('_collection', '_index')

    def __init__(self, collection: "MatrixRowCollection", index: int):
        self._collection = collection
        self.index = index

    @property
    def matrix(self):
        return self._collection.matrix

    @property
    def collection(self) -> "MatrixRowCollection":
        return self._collection

    @property
    def index(self) -> int:
        return self._index

    @index.setter
    def index(self, value: int) -> None:
        if value < 0 or value >= self._collection.matrix.number_of_rows:
            raise IndexRangeError(param_name="index")
        self._index = int(value)

    @property
    def length(self) -> int:
        return self._collection.matrix.number_of_columns

    def __len__(self) -> int:
        return self.length

    def __getitem__(self, column: int):
        return self._collection.matrix[self._index, column]

    def __setitem__(self, column: int, value) -> None:
        self._collection.matrix[self._index, column] = value

    def __iter__(self) -> Iterator:
        m = self._collection.matrix
        for j in range(m.number_of_columns):
            yield m[self._index, j]

    def _designated(self, column: Optional[int], label: str):
        if column is None:
            raise ArgumentError(f"No column is designated as {label} data", label)
        return self[column]

    @property
    def x_data(self):
        return self._designated(self._collection.x_data_column, "x")

    @x_data.setter
    def x_data(self, value) -> None:
        self[self._designated_column(self._collection.x_data_column, "x")] = value

    @property
    def y_data(self):
        return self._designated(self._collection.y_data_column, "y")

    @y_data.setter
    def y_data(self, value) -> None:
        self[self._designated_column(self._collection.y_data_column, "y")] = value

    @property
    def z_data(self):
        return self._designated(self._collection.z_data_column, "z")

    @z_data.setter
    def z_data(self, value) -> None:
        self[self._designated_column(self._collection.z_data_column, "z")] = value

    @staticmethod
    def _designated_column(column: Optional[int], label: str) -> int:
        if column is None:
            raise ArgumentError(f"No column is designated as {label} data", label)
        return column

    def to_tuple(self) -> Tuple:
        return tuple(self)

    def __eq__(self, other):
        if not isinstance(other, MatrixRow):
            return NotImplemented
        return self.to_tuple() == other.to_tuple()

    def __lt__(self, other):
        if not isinstance(other, MatrixRow):
            return NotImplemented
        return self.to_tuple() < other.to_tuple()

    def __hash__(self):
        return hash(self.to_tuple())

    def __repr__(self) -> str:
        return f"MatrixRow(index={self._index}, values={list(self)})"


class MatrixRowCollection:
    """Sequence of row views over a matrix.

    Optional ``x_data_column``/``y_data_column``/``z_data_column``
    designate the columns read by :attr:`MatrixRow.x_data` and friends.
    """

    def __init__(self, matrix):
        check_not_none(matrix, "matrix")
        self.matrix = matrix
        self._x_data_column: Optional[int] = None
        self._y_data_column: Optional[int] = None
        self._z_data_column: Optional[int] = None

    def _check_column(self, column: Optional[int], param_name: str) -> Optional[int]:
        if column is None:
            return None
        if column < 0 or column >= self.matrix.number_of_columns:
            raise IndexRangeError(param_name=param_name)
        return int(column)

    @property
    def x_data_column(self) -> Optional[int]:
        return self._x_data_column

    @x_data_column.setter
    def x_data_column(self, column: Optional[int]) -> None:
        self._x_data_column = self._check_column(column, "x_data_column")

    @property
    def y_data_column(self) -> Optional[int]:
        return self._y_data_column

    @y_data_column.setter
    def y_data_column(self, column: Optional[int]) -> None:
        self._y_data_column = self._check_column(column, "y_data_column")

    @property
    def z_data_column(self) -> Optional[int]:
        return self._z_data_column

    @z_data_column.setter
    def z_data_column(self, column: Optional[int]) -> None:
        self._z_data_column = self._check_column(column, "z_data_column")

    @property
    def count(self) -> int:
        return self.matrix.number_of_rows

    def __len__(self) -> int:
        return self.count

    def __getitem__(self, index: int) -> MatrixRow:
        return MatrixRow(self, index)

    def __iter__(self) -> Iterator[MatrixRow]:
        for i in range(self.count):
            yield MatrixRow(self, i)

    def to_list(self) -> List[MatrixRow]:
        return list(self)
