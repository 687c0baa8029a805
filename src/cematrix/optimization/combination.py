"""
Combination Optimization.

Selects the ``k``-subset of ``{0, ..., n-1}`` optimizing a performance.
A state is a 1 x n indicator vector with exactly ``k`` entries equal to 1.
The parameter is a 1 x n vector of Bernoulli probabilities; samples are
drawn by conditional Poisson sampling so that every state holds exactly
``k`` ones.
"""

from __future__ import annotations

from typing import Callable, FrozenSet, List, Tuple

import numpy as np

from .._errors import ArgumentError, check_not_none, check_open_unit_interval
from ..matrix import DoubleMatrix
from ._context import OptimizationGoal, _as_matrix
from ._sampling import UnequalProbabilityRandomSampling
from .system import SystemPerformanceOptimizationContext

__all__ = ['CombinationOptimizationContext']


class CombinationOptimizationContext(SystemPerformanceOptimizationContext):
    """Optimization over the combinations of ``k`` items out of ``n``.

    Execution stops once the positions of the ``k`` largest probabilities
    have not changed over the last ``minimum_number_of_iterations``
    iterations.

    Raises:
        NullArgumentError: If ``objective_function`` is None.
        ArgumentError: If the smoothing coefficient is outside (0, 1) or
            ``combination_dimension`` is not in [1, state_dimension).
    """

    def __init__(
        self,
        objective_function: Callable[[DoubleMatrix], float],
        state_dimension: int,
        combination_dimension: int,
        probability_smoothing_coefficient: float,
        optimization_goal: OptimizationGoal,
        minimum_number_of_iterations: int,
        maximum_number_of_iterations: int,
    ):
        check_not_none(objective_function, "objective_function")
        check_open_unit_interval(
            probability_smoothing_coefficient, "probability_smoothing_coefficient"
        )
        if combination_dimension < 1:
            raise ArgumentError("Parameter must be positive", "combination_dimension")
        if combination_dimension >= state_dimension:
            raise ArgumentError(
                "Combination dimension must be less than the state dimension",
                "combination_dimension",
            )
        super().__init__(
            state_dimension=state_dimension,
            initial_parameter=_as_matrix(np.full((1, state_dimension), 0.5)),
            optimization_goal=optimization_goal,
            minimum_number_of_iterations=minimum_number_of_iterations,
            maximum_number_of_iterations=maximum_number_of_iterations,
        )
        self._objective_function = objective_function
        self._combination_dimension = combination_dimension
        self.probability_smoothing_coefficient = probability_smoothing_coefficient
        self._largest_probability_positions: List[FrozenSet[int]] = []

    @property
    def combination_dimension(self) -> int:
        return self._combination_dimension

    @property
    def objective_function(self) -> Callable[[DoubleMatrix], float]:
        return self._objective_function

    def _largest_positions(self, parameter: DoubleMatrix) -> np.ndarray:
        order = np.argsort(parameter.as_column_major_array(), kind='stable')
        return order[self.state_dimension - self._combination_dimension:]

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
        sampling = UnequalProbabilityRandomSampling.from_bernoulli_probabilities(
            parameter, self._combination_dimension
        )
        start, stop = sample_subset_range
        for i in range(start, stop):
            destination[i, sampling.next_index_collection(rng).to_array()] = 1.0

    def update_parameter(
        self, parameters: List[DoubleMatrix], elite_sample: DoubleMatrix
    ) -> DoubleMatrix:
        p = elite_sample.to_numpy().mean(axis=0, keepdims=True)
        # Sampling requires probabilities strictly inside (0, 1)
        p[p == 0.0] = 1.0e-9
        p[p == 1.0] = 0.999999999
        return _as_matrix(p)

    def smooth_parameter(self, parameters: List[DoubleMatrix]) -> None:
        if len(parameters) <= 1:
            return
        alpha = self.probability_smoothing_coefficient
        current = parameters[-1].to_numpy()
        previous = parameters[-2].to_numpy()
        parameters[-1] = _as_matrix(alpha * current + (1.0 - alpha) * previous)

    def on_run_started(self) -> None:
        self._largest_probability_positions = []

    def on_executed_iteration(
        self,
        iteration: int,
        sample: np.ndarray,
        levels: List[float],
        parameters: List[DoubleMatrix],
    ) -> None:
        positions = frozenset(int(j) for j in self._largest_positions(parameters[-1]))
        self._largest_probability_positions.append(positions)
        super().on_executed_iteration(iteration, sample, levels, parameters)

    def stop_at_intermediate_iteration(
        self, iteration: int, levels: List[float], parameters: List[DoubleMatrix]
    ) -> bool:
        history = self._largest_probability_positions
        last = history[-1]
        return all(
            history[-1 - h] == last
            for h in range(1, self.minimum_number_of_iterations + 1)
        )

    def get_optimal_state(self, parameter: DoubleMatrix) -> DoubleMatrix:
        state = np.zeros((1, self.state_dimension), dtype=np.float64)
        state[0, self._largest_positions(parameter)] = 1.0
        return _as_matrix(state)
