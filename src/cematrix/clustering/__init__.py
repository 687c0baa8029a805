"""
cematrix Clustering Module.

    - IndexPartition: grouping of positions by identifier
    - Partition quality: Davies-Bouldin index, Dunn index, minimum
      centroid linkage
    - distance: Euclidean distances, diameters and linkages between
      clusters of observations (matrix rows)

Example:
    >>> from cematrix.clustering import IndexPartition, davies_bouldin_index
    >>> partition = IndexPartition.create(labels)
    >>> davies_bouldin_index(data, partition)
"""

from . import distance
from .partition import (
    IndexPartition,
    davies_bouldin_index,
    dunn_index,
    minimum_centroid_linkage,
)

__all__ = [
    "distance",
    "IndexPartition",
    "davies_bouldin_index",
    "dunn_index",
    "minimum_centroid_linkage",
]
