"""
Unequal Probability Random Sampling.

Conditional Poisson sampling without replacement: a fixed-size sample of
distinct units is drawn with the distribution of independent Bernoulli
trials conditioned on exactly ``sample_size`` successes. Units are drawn
one at a time from the conditional distribution of the next unit given
those already selected (Chen, Dempster and Liu, 1994).

The draw probabilities are ratios of the functions

    R(k, C) = sum over subsets A of C with |A| = k of prod_{j in A} w_j

computed with the Newton recursion from the power sums
T(i, C) = sum_{j in C} w_j ** i.
"""

from __future__ import annotations

import numpy as np

from .._errors import ArgumentError, check_not_none, check_positive
from .._typing import ensure_vector
from ..index import IndexCollection
from ..matrix import DoubleMatrix
from ._context import _as_matrix

__all__ = ['UnequalProbabilityRandomSampling']


def _r_table(k: int, w: np.ndarray) -> np.ndarray:
    """Table of R values for the units ``w`` and each single deletion.

    Row ``i`` holds ``R(i, C)`` in column 0 and ``R(i, C \\ {j})`` in
    column ``j + 1``.
    """
    m = w.size
    powers = w[np.newaxis, :] ** np.arange(1, k + 1)[:, np.newaxis]
    t = np.empty((k, m + 1), dtype=np.float64)
    t[:, 0] = powers.sum(axis=1)
    t[:, 1:] = t[:, [0]] - powers

    r = np.zeros((k + 1, m + 1), dtype=np.float64)
    r[0, :] = 1.0
    for index in range(1, k + 1):
        sign = 1.0
        for i in range(1, index + 1):
            r[index] += sign * t[i - 1] * r[index - i]
            sign = -sign
        r[index] /= index
    return r


class UnequalProbabilityRandomSampling:
    """Fixed-size sampling design with unequal inclusion probabilities.

    Use :meth:`from_bernoulli_probabilities` to build an instance.
    """

    __slots__ = ('_weights', '_inclusion_probabilities', '_sample_size')

    def __init__(self, weights: np.ndarray, inclusion_probabilities: np.ndarray, sample_size: int):
        self._weights = weights
        self._inclusion_probabilities = inclusion_probabilities
        self._sample_size = sample_size

    @classmethod
    def from_bernoulli_probabilities(cls, bernoulli_probabilities, sample_size: int):
        """Conditional Poisson design from the Bernoulli success probabilities.

        Args:
            bernoulli_probabilities: Vector of probabilities, each in (0, 1),
                one per population unit.
            sample_size: Number of units to draw, less than the population
                size.

        Raises:
            NullArgumentError: If ``bernoulli_probabilities`` is None.
            ArgumentError: If the population has fewer than 2 units, a
                probability is outside (0, 1), or ``sample_size`` is not in
                [1, population size).
        """
        check_not_none(bernoulli_probabilities, "bernoulli_probabilities")
        p = ensure_vector(bernoulli_probabilities, "bernoulli_probabilities")
        population_size = p.size
        if population_size <= 1:
            raise ArgumentError(
                "The population must contain more than 1 unit", "bernoulli_probabilities"
            )
        if np.any((p <= 0.0) | (p >= 1.0)):
            raise ArgumentError(
                "Probabilities must lie in the open interval (0, 1)", "bernoulli_probabilities"
            )
        check_positive(sample_size, "sample_size")
        if sample_size >= population_size:
            raise ArgumentError(
                "Sample size must be less than the population size", "sample_size"
            )

        weights = p / (1.0 - p)
        r = _r_table(sample_size, weights)
        inclusion = weights * r[sample_size - 1, 1:] / r[sample_size, 0]
        return cls(weights, inclusion, sample_size)

    @property
    def population_size(self) -> int:
        return self._weights.size

    @property
    def sample_size(self) -> int:
        return self._sample_size

    @property
    def inclusion_probabilities(self) -> DoubleMatrix:
        """Probability of each unit to be included, as a column vector."""
        return _as_matrix(self._inclusion_probabilities.reshape(-1, 1)).as_read_only()

    @staticmethod
    def _draw(rng: np.random.Generator, units: np.ndarray, probabilities: np.ndarray) -> int:
        position = int(np.searchsorted(np.cumsum(probabilities), rng.random(), side='left'))
        return int(units[min(position, units.size - 1)])

    def _next_units(self, rng: np.random.Generator) -> np.ndarray:
        n = self._sample_size
        w = self._weights
        remaining = np.arange(w.size)
        chosen = np.empty(n, dtype=np.intp)

        probabilities = self._inclusion_probabilities / n
        for k in range(1, n + 1):
            if k > 1:
                left = n - k + 1
                r = _r_table(left, w[remaining])
                probabilities = w[remaining] * r[left - 1, 1:] / (left * r[left, 0])
            unit = self._draw(rng, remaining, probabilities)
            chosen[k - 1] = unit
            remaining = remaining[remaining != unit]
        return chosen

    def next_index_collection(self, rng: np.random.Generator) -> IndexCollection:
        """Positions of the units in a new sample, in drawing order."""
        return IndexCollection._trusted(self._next_units(rng))

    def next_matrix(self, rng: np.random.Generator) -> DoubleMatrix:
        """Row vector with 1.0 at the positions of a new sample, 0.0 elsewhere."""
        row = np.zeros((1, self.population_size), dtype=np.float64)
        row[0, self._next_units(rng)] = 1.0
        return _as_matrix(row)
