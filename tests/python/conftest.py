"""
Pytest configuration and shared fixtures for cematrix tests.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

import scipy.sparse as sp

import cematrix
from cematrix import DoubleMatrix, ComplexMatrix


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_config():
    """Restore the global configuration after each test."""
    yield
    cematrix.config.reset()


@pytest.fixture
def dense_matrix():
    """Create a small dense test matrix (3x4).

    Matrix:
    [[1, 0, 2, 0],
     [0, 3, 0, 4],
     [5, 0, 0, 6]]
    """
    return DoubleMatrix.from_array([
        [1.0, 0.0, 2.0, 0.0],
        [0.0, 3.0, 0.0, 4.0],
        [5.0, 0.0, 0.0, 6.0],
    ])


@pytest.fixture
def sparse_matrix(dense_array):
    """Same matrix as dense_matrix with sparse storage."""
    return DoubleMatrix.from_scipy(sp.csr_array(dense_array))


@pytest.fixture
def dense_array():
    """The numpy array behind dense_matrix and sparse_matrix."""
    return np.array([
        [1, 0, 2, 0],
        [0, 3, 0, 4],
        [5, 0, 0, 6],
    ], dtype=np.float64)


@pytest.fixture
def complex_matrix():
    """Create a small complex matrix (2x2)."""
    return ComplexMatrix.from_array([
        [1 + 1j, 2 - 1j],
        [0 + 3j, 4 + 0j],
    ])


@pytest.fixture
def spd_array():
    """Symmetric positive definite array with full bandwidth."""
    return np.array([
        [4.0, 1.0, 2.0],
        [1.0, 3.0, 0.5],
        [2.0, 0.5, 5.0],
    ])


@pytest.fixture
def rng():
    """Seeded random generator."""
    return np.random.default_rng(42)


@pytest.fixture
def clustered_data():
    """Two well separated clusters of three 2-D points each.

    Rows 0, 2, 4 lie around (0, 0), rows 1, 3, 5 around (10, 10).
    """
    return DoubleMatrix.from_array([
        [0.0, 0.0],
        [10.0, 10.0],
        [1.0, 0.0],
        [11.0, 10.0],
        [0.0, 1.0],
        [10.0, 11.0],
    ])


# =============================================================================
# Helper Functions
# =============================================================================

def assert_matrix_close(actual, expected, rtol=1e-7, atol=1e-10):
    """Assert a cematrix matrix has approximately the expected values."""
    if hasattr(actual, 'to_numpy'):
        actual = actual.to_numpy()
    if hasattr(expected, 'to_numpy'):
        expected = expected.to_numpy()
    expected = np.asarray(expected)
    assert np.shape(actual) == expected.shape
    np.testing.assert_allclose(actual, expected, rtol=rtol, atol=atol)
