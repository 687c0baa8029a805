"""
Index Collections.

An IndexCollection is an immutable, ordered sequence of non-negative integer
positions. Order is meaningful (collections are used to permute and reindex
matrices), so collections are never sorted implicitly.

Example:
    >>> from cematrix import IndexCollection
    >>> idx = IndexCollection.range(2, 5)
    >>> list(idx)
    [2, 3, 4, 5]
    >>> IndexCollection.sequence(0, 3, 10).to_array()
    array([0, 3, 6, 9])
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional, Sequence, Union

import numpy as np

from ._errors import ArgumentError, IndexRangeError, check_not_none

__all__ = ["IndexCollection"]


class IndexCollection:
    """Immutable ordered sequence of non-negative positions.

    Instances are built through the factory classmethods. Bounds are not
    stored: they are checked at the point of use against a matrix dimension.
    """

    __slots__ = ("_indexes",)

    def __init__(self, indexes: Iterable[int], allow_duplicates: bool = False):
        check_not_none(indexes, "indexes")
        raw = np.asarray(list(indexes) if not isinstance(indexes, np.ndarray) else indexes)
        if raw.dtype.kind not in "biu":
            if (raw.dtype.kind != "f" or not np.all(np.isfinite(raw))
                    or not np.all(raw == np.floor(raw))):
                raise ArgumentError("Indexes must be integral", "indexes")
        arr = raw.astype(np.intp).ravel()
        if arr.size == 0:
            raise ArgumentError("Index collection cannot be empty", "indexes")
        if arr.min() < 0:
            raise IndexRangeError("Indexes must be non-negative", "indexes")
        if not allow_duplicates and np.unique(arr).size != arr.size:
            raise ArgumentError("Indexes must be distinct", "indexes")
        arr.flags.writeable = False
        self._indexes = arr

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def range(cls, first: int, last: int) -> "IndexCollection":
        """Indexes from ``first`` to ``last``, both included."""
        if first < 0:
            raise IndexRangeError("Index must be non-negative", "first")
        if last < first:
            raise ArgumentError("last must not be less than first", "last")
        return cls._trusted(np.arange(first, last + 1, dtype=np.intp))

    @classmethod
    def sequence(cls, first: int, step: int, last: int) -> "IndexCollection":
        """Arithmetic sequence starting at ``first`` bounded by ``last``.

        A negative step walks down from ``first`` towards ``last``.
        """
        if first < 0:
            raise IndexRangeError("Index must be non-negative", "first")
        if last < 0:
            raise IndexRangeError("Index must be non-negative", "last")
        if step == 0:
            raise ArgumentError("Step cannot be zero", "step")
        if (step > 0 and last < first) or (step < 0 and last > first):
            raise ArgumentError("Step does not reach last from first", "step")
        stop = last + 1 if step > 0 else last - 1
        return cls._trusted(np.arange(first, stop, step, dtype=np.intp))

    @classmethod
    def default(cls, last: int) -> "IndexCollection":
        """Indexes 0, 1, ..., last."""
        return cls.range(0, last)

    @classmethod
    def from_array(
        cls, indexes: Union[Sequence[int], np.ndarray], allow_duplicates: bool = False
    ) -> "IndexCollection":
        """Collection from an explicit array of positions."""
        return cls(indexes, allow_duplicates=allow_duplicates)

    @classmethod
    def _trusted(cls, arr: np.ndarray) -> "IndexCollection":
        obj = cls.__new__(cls)
        arr = np.asarray(arr, dtype=np.intp)
        arr.flags.writeable = False
        obj._indexes = arr
        return obj

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def count(self) -> int:
        """Number of positions."""
        return int(self._indexes.size)

    @property
    def max(self) -> int:
        """Largest position."""
        return int(self._indexes.max())

    @property
    def min(self) -> int:
        """Smallest position."""
        return int(self._indexes.min())

    def to_array(self) -> np.ndarray:
        """Copy of the positions as an integer array."""
        return self._indexes.copy()

    def __array__(self, dtype=None, copy=None):
        return np.asarray(self._indexes, dtype=dtype)

    def __len__(self) -> int:
        return int(self._indexes.size)

    def __iter__(self) -> Iterator[int]:
        return (int(i) for i in self._indexes)

    def __contains__(self, value: object) -> bool:
        try:
            return bool(np.any(self._indexes == int(value)))
        except (TypeError, ValueError):
            return False

    def __getitem__(self, key):
        """Position at ``key``, or the composition ``self[other]``."""
        if isinstance(key, IndexCollection):
            if key.max >= self.count:
                raise IndexRangeError(param_name="key")
            return IndexCollection._trusted(self._indexes[key._indexes])
        if isinstance(key, slice):
            selected = self._indexes[key]
            if selected.size == 0:
                raise ArgumentError("Slice selects no positions", "key")
            return IndexCollection._trusted(selected)
        key = int(key)
        if key < 0 or key >= self.count:
            raise IndexRangeError(param_name="key")
        return int(self._indexes[key])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IndexCollection):
            return NotImplemented
        return np.array_equal(self._indexes, other._indexes)

    def __hash__(self) -> int:
        return hash(self._indexes.tobytes())

    def __repr__(self) -> str:
        shown = ", ".join(str(i) for i in self._indexes[:10])
        if self.count > 10:
            shown += ", ..."
        return f"IndexCollection([{shown}])"

    # -------------------------------------------------------------------------
    # Composition
    # -------------------------------------------------------------------------

    def sort(self) -> "IndexCollection":
        """Sorted copy."""
        return IndexCollection._trusted(np.sort(self._indexes, kind="stable"))

    def reverse(self) -> "IndexCollection":
        """Copy in reverse order."""
        return IndexCollection._trusted(self._indexes[::-1].copy())

    def union(self, other: "IndexCollection") -> "IndexCollection":
        """Positions of ``self`` followed by the new positions of ``other``."""
        check_not_none(other, "other")
        extra = other._indexes[~np.isin(other._indexes, self._indexes)]
        return IndexCollection._trusted(np.concatenate([self._indexes, extra]))

    def intersection(self, other: "IndexCollection") -> Optional["IndexCollection"]:
        """Positions of ``self`` also in ``other``; None when disjoint."""
        check_not_none(other, "other")
        kept = self._indexes[np.isin(self._indexes, other._indexes)]
        if kept.size == 0:
            return None
        return IndexCollection._trusted(kept)

    def difference(self, other: "IndexCollection") -> Optional["IndexCollection"]:
        """Positions of ``self`` not in ``other``; None when nothing is left."""
        check_not_none(other, "other")
        kept = self._indexes[~np.isin(self._indexes, other._indexes)]
        if kept.size == 0:
            return None
        return IndexCollection._trusted(kept)

    except_ = difference

    def check_bound(self, bound: int, param_name: str) -> None:
        """Raise IndexRangeError if any position is not below ``bound``."""
        if self.max >= bound:
            raise IndexRangeError(param_name=param_name)
