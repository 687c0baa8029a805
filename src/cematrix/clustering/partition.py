"""
Index Partitions.

An :class:`IndexPartition` maps each distinct identifier observed in a
source to the positions where it occurs. Parts are disjoint and together
cover every position of the source exactly once. Identifiers are kept in
sorted order when they are mutually comparable, in order of first
appearance otherwise.

Example:
    >>> from cematrix import DoubleMatrix
    >>> from cematrix.clustering import IndexPartition
    >>> labels = DoubleMatrix.from_array([[0, 1, 0, 2]])
    >>> partition = IndexPartition.create(labels)
    >>> partition.identifiers
    [0.0, 1.0, 2.0]
    >>> list(partition[0.0])
    [0, 2]
"""

from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, TypeVar

import numpy as np

from .._errors import ArgumentError, check_not_none
from .._typing import MatrixInput, ensure_double_matrix, ensure_vector, is_matrix
from ..index import IndexCollection
from . import distance

__all__ = [
    'IndexPartition',
    'davies_bouldin_index',
    'dunn_index',
    'minimum_centroid_linkage',
]

T = TypeVar("T")


class IndexPartition(Generic[T]):
    """Disjoint, exhaustive grouping of positions keyed by identifier."""

    __slots__ = ('_parts', '_identifiers')

    def __init__(self, parts: Dict[Any, List[int]]):
        try:
            identifiers = sorted(parts)
        except TypeError:
            identifiers = list(parts)
        self._identifiers = identifiers
        self._parts = {
            key: IndexCollection._trusted(np.array(parts[key], dtype=np.intp))
            for key in identifiers
        }

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def _group(cls, keyed) -> "IndexPartition":
        parts: Dict[Any, List[int]] = {}
        for position, key in keyed:
            parts.setdefault(key, []).append(position)
        return cls(parts)

    @classmethod
    def create(cls, elements, partitioner: Optional[Callable[[int], T]] = None) -> "IndexPartition":
        """Group positions by identifier.

        Args:
            elements: One of
                - a matrix: linear positions grouped by entry value
                - a :class:`MatrixRowCollection`: row positions grouped by
                  equal rows (identifiers are row views)
                - an :class:`IndexCollection` together with ``partitioner``:
                  each index grouped by ``partitioner(index)``
                - any other iterable: positions grouped by element
            partitioner: Function from an index to its part identifier;
                required with an IndexCollection, ignored otherwise.

        Raises:
            NullArgumentError: If ``elements`` is None, or ``partitioner`` is
                None for an IndexCollection.
        """
        check_not_none(elements, "elements")
        if isinstance(elements, IndexCollection):
            check_not_none(partitioner, "partitioner")
            return cls._group((i, partitioner(i)) for i in elements)
        if is_matrix(elements):
            m = ensure_double_matrix(elements, "elements")
            return cls._group(enumerate(m))
        return cls._group(enumerate(elements))

    @classmethod
    def discretize(cls, values, cut_points) -> "IndexPartition":
        """Group positions of ``values`` by the interval they fall into.

        Interval ``k`` is ``(cut_points[k-1], cut_points[k]]``, with the
        first open below and the last open above, so ``len(cut_points) + 1``
        intervals are possible; identifiers are interval numbers.

        Raises:
            ArgumentError: If ``cut_points`` is not strictly increasing.
        """
        v = ensure_vector(values, "values")
        cuts = ensure_vector(cut_points, "cut_points")
        if np.any(np.diff(cuts) <= 0):
            raise ArgumentError("Cut points must be strictly increasing", "cut_points")
        bins = np.searchsorted(cuts, v, side='left')
        return cls._group((i, int(b)) for i, b in enumerate(bins))

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def identifiers(self) -> List[T]:
        return list(self._identifiers)

    @property
    def count(self) -> int:
        """Number of parts."""
        return len(self._identifiers)

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[T]:
        return iter(self._identifiers)

    def __contains__(self, identifier) -> bool:
        return identifier in self._parts

    def __getitem__(self, identifier) -> IndexCollection:
        check_not_none(identifier, "identifier")
        try:
            return self._parts[identifier]
        except KeyError:
            raise ArgumentError(
                f"Not a part identifier: {identifier!r}", "identifier"
            ) from None

    def get(self, identifier, default=None) -> Optional[IndexCollection]:
        return self._parts.get(identifier, default)

    def index_of(self, position: int):
        """Identifier of the part containing ``position``."""
        for key in self._identifiers:
            if position in self._parts[key]:
                return key
        raise ArgumentError(f"Position {position} is not partitioned", "position")

    def items(self):
        return ((key, self._parts[key]) for key in self._identifiers)

    def __repr__(self) -> str:
        lines = [f"[Part identifier: {key}]\n{list(part)}" for key, part in self.items()]
        return "\n".join(lines)

    # -------------------------------------------------------------------------
    # Quality Indices
    # -------------------------------------------------------------------------

    @staticmethod
    def minimum_centroid_linkage(data: MatrixInput, partition: "IndexPartition") -> float:
        return minimum_centroid_linkage(data, partition)

    @staticmethod
    def dunn_index(data: MatrixInput, partition: "IndexPartition") -> float:
        return dunn_index(data, partition)

    @staticmethod
    def davies_bouldin_index(data: MatrixInput, partition: "IndexPartition") -> float:
        return davies_bouldin_index(data, partition)


# =============================================================================
# Partition Quality
# =============================================================================

def _clusters(data: MatrixInput, partition: IndexPartition) -> List[np.ndarray]:
    check_not_none(partition, "partition")
    x = np.asarray(ensure_double_matrix(data, "data").to_numpy(), dtype=np.float64)
    if partition.count < 2:
        raise ArgumentError("Partition must have at least two parts", "partition")
    clusters = []
    for _, part in partition.items():
        if part.max >= x.shape[0]:
            raise ArgumentError("Partition contains an invalid index", "partition")
        clusters.append(x[part.to_array(), :])
    return clusters


def minimum_centroid_linkage(data: MatrixInput, partition: IndexPartition) -> float:
    """Smallest distance between the centroids of two parts."""
    clusters = _clusters(data, partition)
    k = len(clusters)
    return min(
        distance.centroid_linkage(clusters[i], clusters[j])
        for i in range(k) for j in range(i + 1, k)
    )


def dunn_index(data: MatrixInput, partition: IndexPartition) -> float:
    """Dunn index of a partition of the rows of ``data``.

    Ratio of the smallest distance between points of different parts to
    the largest part diameter. Higher is better.
    """
    clusters = _clusters(data, partition)
    k = len(clusters)
    max_diameter = max(distance.complete_diameter(c) for c in clusters)
    min_separation = min(
        distance.single_linkage(clusters[i], clusters[j])
        for i in range(k) for j in range(i + 1, k)
    )
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.float64(min_separation) / max_diameter)


def davies_bouldin_index(data: MatrixInput, partition: IndexPartition) -> float:
    """Davies-Bouldin index of a partition of the rows of ``data``.

    For each part, the worst ratio of summed scatters to centroid distance
    over all other parts; averaged over parts. Scatter is the mean distance
    of a part's points from its centroid (0 for a single point). Lower is
    better.
    """
    clusters = _clusters(data, partition)
    k = len(clusters)
    centroids = np.vstack([c.mean(axis=0) for c in clusters])
    scatter = np.array([
        np.mean(np.sqrt(np.sum((c - centroids[i]) ** 2, axis=1)))
        for i, c in enumerate(clusters)
    ])
    separation = distance.euclidean(centroids).to_numpy()
    with np.errstate(divide='ignore', invalid='ignore'):
        worst = [
            np.max([(scatter[i] + scatter[j]) / separation[i, j] for j in range(k) if j != i])
            for i in range(k)
        ]
    return float(np.mean(worst))
