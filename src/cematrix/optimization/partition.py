"""
Partition Optimization.

Finds the partition of ``n`` items into at most ``k`` parts optimizing a
performance. A state is a 1 x n vector of part labels in ``0, ..., k-1``.
The parameter is a k x n matrix whose column ``j`` is the categorical
distribution of the label of item ``j``.
"""

from __future__ import annotations

from typing import Callable, List, Tuple

import numpy as np

from .._errors import ArgumentError, check_not_none, check_open_unit_interval
from ..matrix import DoubleMatrix
from .. import statistics
from ._context import OptimizationGoal, _as_matrix
from .system import SystemPerformanceOptimizationContext

__all__ = ['PartitionOptimizationContext']


class PartitionOptimizationContext(SystemPerformanceOptimizationContext):
    """Optimization over the partitions of ``state_dimension`` items.

    Execution stops once the most probable label of every item has not
    changed over the last ``minimum_number_of_iterations`` iterations.

    Raises:
        NullArgumentError: If ``objective_function`` is None.
        ArgumentError: If ``partition_dimension`` is less than 2 or not less
            than ``state_dimension``, or the smoothing coefficient is
            outside (0, 1).
    """

    def __init__(
        self,
        objective_function: Callable[[DoubleMatrix], float],
        state_dimension: int,
        partition_dimension: int,
        probability_smoothing_coefficient: float,
        optimization_goal: OptimizationGoal,
        minimum_number_of_iterations: int,
        maximum_number_of_iterations: int,
    ):
        check_not_none(objective_function, "objective_function")
        if partition_dimension < 2:
            raise ArgumentError(
                "Partition dimension must be at least 2", "partition_dimension"
            )
        if state_dimension <= partition_dimension:
            raise ArgumentError(
                "State dimension must be greater than the partition dimension",
                "state_dimension",
            )
        check_open_unit_interval(
            probability_smoothing_coefficient, "probability_smoothing_coefficient"
        )
        initial = np.full((partition_dimension, state_dimension), 1.0 / partition_dimension)
        super().__init__(
            state_dimension=state_dimension,
            initial_parameter=_as_matrix(initial),
            optimization_goal=optimization_goal,
            minimum_number_of_iterations=minimum_number_of_iterations,
            maximum_number_of_iterations=maximum_number_of_iterations,
        )
        self._objective_function = objective_function
        self._partition_dimension = partition_dimension
        self.probability_smoothing_coefficient = probability_smoothing_coefficient
        self._values_of_maximum_probabilities: List[Tuple[int, ...]] = []

    @property
    def partition_dimension(self) -> int:
        return self._partition_dimension

    @property
    def objective_function(self) -> Callable[[DoubleMatrix], float]:
        return self._objective_function

    @staticmethod
    def _most_probable_labels(parameter: DoubleMatrix) -> Tuple[int, ...]:
        pairs = statistics.max(parameter, statistics.DataOperation.ON_COLUMNS)
        return tuple(pair.index for pair in pairs)

    def performance(self, x: DoubleMatrix) -> float:
        return self._objective_function(x)

    def partial_sample(
        self,
        destination: np.ndarray,
        sample_subset_range: Tuple[int, int],
        rng: np.random.Generator,
        parameter: DoubleMatrix,
        sample_size: int,
    ) -> None:
        start, stop = sample_subset_range
        p = parameter.to_numpy()
        labels = np.arange(self._partition_dimension)
        for j in range(self.state_dimension):
            column = p[:, j] / p[:, j].sum()
            destination[start:stop, j] = rng.choice(labels, size=stop - start, p=column)

    def update_parameter(
        self, parameters: List[DoubleMatrix], elite_sample: DoubleMatrix
    ) -> DoubleMatrix:
        elite = elite_sample.to_numpy().astype(np.intp)
        k = self._partition_dimension
        frequencies = np.empty((k, self.state_dimension), dtype=np.float64)
        for j in range(self.state_dimension):
            frequencies[:, j] = np.bincount(elite[:, j], minlength=k)[:k]
        return _as_matrix(frequencies / elite.shape[0])

    def smooth_parameter(self, parameters: List[DoubleMatrix]) -> None:
        if len(parameters) <= 1:
            return
        alpha = self.probability_smoothing_coefficient
        current = parameters[-1].to_numpy()
        previous = parameters[-2].to_numpy()
        parameters[-1] = _as_matrix(alpha * current + (1.0 - alpha) * previous)

    def on_run_started(self) -> None:
        self._values_of_maximum_probabilities = []

    def on_executed_iteration(
        self,
        iteration: int,
        sample: np.ndarray,
        levels: List[float],
        parameters: List[DoubleMatrix],
    ) -> None:
        self._values_of_maximum_probabilities.append(
            self._most_probable_labels(parameters[-1])
        )
        super().on_executed_iteration(iteration, sample, levels, parameters)

    def stop_at_intermediate_iteration(
        self, iteration: int, levels: List[float], parameters: List[DoubleMatrix]
    ) -> bool:
        history = self._values_of_maximum_probabilities
        last = history[-1]
        return all(
            history[-1 - h] == last
            for h in range(1, self.minimum_number_of_iterations + 1)
        )

    def get_optimal_state(self, parameter: DoubleMatrix) -> DoubleMatrix:
        labels = np.array(self._most_probable_labels(parameter), dtype=np.float64)
        return _as_matrix(labels.reshape(1, -1))
