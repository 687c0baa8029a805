"""Options and result types of the statistical reductions."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple

from .._errors import InvalidOptionError

__all__ = [
    'DataOperation',
    'SortDirection',
    'IndexValuePair',
    'SortIndexResults',
    'check_data_operation',
    'check_sort_direction',
]


class DataOperation(Enum):
    """Dimension along which a reduction is applied.

    Attributes:
        ON_ALL: Reduce every entry to a single value.
        ON_ROWS: Reduce each row; results form a column vector.
        ON_COLUMNS: Reduce each column; results form a row vector.
    """
    ON_ALL = 'on_all'
    ON_ROWS = 'on_rows'
    ON_COLUMNS = 'on_columns'


class SortDirection(Enum):
    ASCENDING = 'ascending'
    DESCENDING = 'descending'


class IndexValuePair(NamedTuple):
    """Position of an extremum and its value."""
    index: int
    value: float


@dataclass(frozen=True)
class SortIndexResults:
    """Sorted data together with the positions the entries came from.

    Attributes:
        sorted_data: Matrix with the same shape as the input, entries sorted
            in column-major order.
        sorted_indexes: Linear positions in the input of the sorted entries.
    """
    sorted_data: Any
    sorted_indexes: Any


def check_data_operation(value, allow_all: bool = True) -> DataOperation:
    """Validate a data operation, accepting enum members or their values."""
    try:
        op = DataOperation(value)
    except ValueError:
        raise InvalidOptionError(
            "Not a recognized data operation", "data_operation"
        ) from None
    if op is DataOperation.ON_ALL and not allow_all:
        raise InvalidOptionError(
            "Operation requires ON_ROWS or ON_COLUMNS", "data_operation"
        )
    return op


def check_sort_direction(value) -> SortDirection:
    try:
        return SortDirection(value)
    except ValueError:
        raise InvalidOptionError(
            "Not a recognized sort direction", "sort_direction"
        ) from None
