"""
cematrix Linear Algebra.

Modules:
    - svd: singular value decomposition
    - spectral: eigen decomposition of symmetric / Hermitian matrices

Functions:
    - divide: solve ``X * right = left`` (what ``left / right`` computes)
    - solver_path: solver path chosen for a given right operand
"""

from . import spectral, svd
from ._solvers import SolverPath, classify, divide as _divide_storage
from .._typing import MatrixInput, ensure_matrix
from ..matrix import wrap_storage


def divide(left: MatrixInput, right: MatrixInput):
    """Solve ``X * right = left`` for ``X``; same as ``left / right``."""
    lhs = ensure_matrix(left, "left")
    rhs = ensure_matrix(right, "right")
    return wrap_storage(_divide_storage(lhs._storage, rhs._storage))


def solver_path(right: MatrixInput) -> SolverPath:
    """Solver path used when dividing by ``right``."""
    return classify(ensure_matrix(right, "right")._storage)


__all__ = [
    'svd',
    'spectral',
    'SolverPath',
    'divide',
    'solver_path',
]
