"""
cematrix - Matrices and Cross-Entropy Optimization

Numerical matrix library with:
- Real and complex matrices over dense or sparse storage
- Read-only facades sharing storage, row views, named rows and columns
- Structure-aware division (triangular, Hessenberg, symmetric, general,
  least squares)
- Singular value and spectral decompositions
- Statistical reductions and index partitions
- Cross-Entropy optimization and rare event probability estimation

Modules:
- matrix: DoubleMatrix, ComplexMatrix, ReadOnlyMatrix, row views
- storage: dense and sparse storage strategies
- linalg: division dispatch, svd, spectral
- statistics: reductions on all entries, rows or columns
- clustering: IndexPartition, distances, partition quality indexes
- optimization: Cross-Entropy contexts, optimizer and estimator

Architecture:
    ┌──────────────────────────────────────────────┐
    │   optimization (contexts, programs)          │
    ├──────────────────────────────────────────────┤
    │   statistics | clustering | linalg           │
    ├──────────────────────────────────────────────┤
    │   DoubleMatrix / ComplexMatrix (+ read-only) │
    ├──────────────────────────────────────────────┤
    │   Storage: DENSE | SPARSE                    │
    └──────────────────────────────────────────────┘

Example:
    >>> import cematrix
    >>> from cematrix import DoubleMatrix
    >>>
    >>> m = DoubleMatrix.from_array([[0, 2, 4], [1, 3, 5]])
    >>> (10 / m)[0, 1]
    5.0
    >>>
    >>> # Parallel Cross-Entropy runs follow the global configuration
    >>> cematrix.set_parallel(num_threads=4)
"""

__version__ = '0.1.0'

from . import storage
from . import matrix
from . import linalg
from . import statistics
from . import clustering
from . import optimization

from ._config import (
    config,
    get_config,
    set_parallel,
    ParallelStrategy,
    ParallelConfig,
    ComputeConfig,
    SparseConfig,
)

from ._errors import (
    CematrixError,
    NullArgumentError,
    ArgumentError,
    ShapeMismatchError,
    IndexRangeError,
    InvalidOptionError,
    ReadOnlyAccessError,
    RankDeficiencyError,
    NonConvergenceError,
    BiasAdjustmentUndefinedError,
)

from .index import IndexCollection

from .storage import StorageOrder, StorageScheme

from .matrix import (
    ALL,
    Matrix,
    DoubleMatrix,
    ComplexMatrix,
    ReadOnlyMatrix,
    MatrixRow,
    MatrixRowCollection,
    element_wise_multiply,
)

from .statistics import DataOperation, SortDirection, IndexValuePair, SortIndexResults

from .clustering import IndexPartition

__all__ = [
    # Version
    '__version__',

    # Modules
    'storage',
    'matrix',
    'linalg',
    'statistics',
    'clustering',
    'optimization',

    # Configuration
    'config',
    'get_config',
    'set_parallel',
    'ParallelStrategy',
    'ParallelConfig',
    'ComputeConfig',
    'SparseConfig',

    # Errors
    'CematrixError',
    'NullArgumentError',
    'ArgumentError',
    'ShapeMismatchError',
    'IndexRangeError',
    'InvalidOptionError',
    'ReadOnlyAccessError',
    'RankDeficiencyError',
    'NonConvergenceError',
    'BiasAdjustmentUndefinedError',

    # Indexing
    'IndexCollection',

    # Matrices
    'StorageOrder',
    'StorageScheme',
    'ALL',
    'Matrix',
    'DoubleMatrix',
    'ComplexMatrix',
    'ReadOnlyMatrix',
    'MatrixRow',
    'MatrixRowCollection',
    'element_wise_multiply',

    # Statistics
    'DataOperation',
    'SortDirection',
    'IndexValuePair',
    'SortIndexResults',

    # Clustering
    'IndexPartition',
]
