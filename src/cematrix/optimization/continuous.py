"""
Continuous Optimization.

Gaussian Cross-Entropy search over real vectors. The parameter is a
2 x d matrix: row 0 holds the means, row 1 the standard deviations of d
independent Gaussian distributions.
"""

from __future__ import annotations

from typing import Callable, List, Tuple

import numpy as np

from .._errors import ArgumentError, check_not_none, check_open_unit_interval
from .._typing import ensure_double_matrix
from ..matrix import DoubleMatrix
from ._context import OptimizationGoal, _as_matrix
from .system import SystemPerformanceOptimizationContext, SystemPerformanceOptimizer

__all__ = ['ContinuousOptimizationContext', 'minimize', 'maximize']

ObjectiveFunction = Callable[[DoubleMatrix], float]


class ContinuousOptimizationContext(SystemPerformanceOptimizationContext):
    """Optimization of a real function of a row vector.

    Means are smoothed with the constant ``mean_smoothing_coefficient``;
    standard deviations with the dynamic coefficient
    ``beta * (1 - (1 - 1/t) ** q)``, where ``beta`` is the standard
    deviation smoothing coefficient, ``q`` the smoothing exponent and ``t``
    the number of parameters estimated so far. Execution stops once every
    standard deviation is below ``termination_tolerance``.

    Raises:
        NullArgumentError: If ``objective_function`` or ``initial_argument``
            is None.
        ArgumentError: If ``initial_argument`` is not a row vector, a
            smoothing coefficient is outside (0, 1), the exponent is less
            than 1, or the tolerance or initial standard deviation is not
            positive.
    """

    def __init__(
        self,
        objective_function: ObjectiveFunction,
        initial_argument,
        mean_smoothing_coefficient: float,
        standard_deviation_smoothing_coefficient: float,
        standard_deviation_smoothing_exponent: float,
        initial_standard_deviation: float,
        termination_tolerance: float,
        optimization_goal: OptimizationGoal,
        minimum_number_of_iterations: int,
        maximum_number_of_iterations: int,
    ):
        check_not_none(objective_function, "objective_function")
        argument = ensure_double_matrix(initial_argument, "initial_argument")
        if not argument.is_row_vector:
            raise ArgumentError("Parameter must be a row vector", "initial_argument")
        check_open_unit_interval(mean_smoothing_coefficient, "mean_smoothing_coefficient")
        check_open_unit_interval(
            standard_deviation_smoothing_coefficient,
            "standard_deviation_smoothing_coefficient",
        )
        if standard_deviation_smoothing_exponent < 1:
            raise ArgumentError(
                "Parameter must be at least 1", "standard_deviation_smoothing_exponent"
            )
        if not termination_tolerance > 0:
            raise ArgumentError("Parameter must be positive", "termination_tolerance")
        if not initial_standard_deviation > 0:
            raise ArgumentError("Parameter must be positive", "initial_standard_deviation")

        d = argument.count
        initial = np.empty((2, d), dtype=np.float64)
        initial[0, :] = argument.as_column_major_array()
        initial[1, :] = initial_standard_deviation
        super().__init__(
            state_dimension=d,
            initial_parameter=_as_matrix(initial),
            optimization_goal=optimization_goal,
            minimum_number_of_iterations=minimum_number_of_iterations,
            maximum_number_of_iterations=maximum_number_of_iterations,
        )
        self._objective_function = objective_function
        self.mean_smoothing_coefficient = mean_smoothing_coefficient
        self.standard_deviation_smoothing_coefficient = standard_deviation_smoothing_coefficient
        self.standard_deviation_smoothing_exponent = standard_deviation_smoothing_exponent
        self.termination_tolerance = termination_tolerance

    @property
    def objective_function(self) -> ObjectiveFunction:
        return self._objective_function

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
        for j in range(self.state_dimension):
            destination[start:stop, j] = rng.normal(p[0, j], p[1, j], size=stop - start)

    def update_parameter(
        self, parameters: List[DoubleMatrix], elite_sample: DoubleMatrix
    ) -> DoubleMatrix:
        elite = elite_sample.to_numpy()
        return _as_matrix(np.vstack([elite.mean(axis=0), elite.std(axis=0)]))

    def smooth_parameter(self, parameters: List[DoubleMatrix]) -> None:
        t = float(len(parameters))
        if t <= 1:
            return
        current = parameters[-1].to_numpy()
        previous = parameters[-2].to_numpy()

        alpha = self.mean_smoothing_coefficient
        beta = self.standard_deviation_smoothing_coefficient * (
            1.0 - (1.0 - 1.0 / t) ** self.standard_deviation_smoothing_exponent
        )
        smoothed = np.vstack([
            alpha * current[0] + (1.0 - alpha) * previous[0],
            beta * current[1] + (1.0 - beta) * previous[1],
        ])
        parameters[-1] = _as_matrix(smoothed)

    def stop_at_intermediate_iteration(
        self, iteration: int, levels: List[float], parameters: List[DoubleMatrix]
    ) -> bool:
        std_devs = parameters[-1].to_numpy()[1]
        return bool(np.all(std_devs < self.termination_tolerance))

    def get_optimal_state(self, parameter: DoubleMatrix) -> DoubleMatrix:
        return parameter[0, ":"]


# =============================================================================
# Convenience
# =============================================================================

def _optimize(objective_function, initial_argument, args, goal: OptimizationGoal) -> DoubleMatrix:
    check_not_none(objective_function, "objective_function")
    argument = ensure_double_matrix(initial_argument, "initial_argument")
    if not argument.is_row_vector:
        raise ArgumentError("Parameter must be a row vector", "initial_argument")

    def func(x):
        return objective_function(x, *args)

    context = ContinuousOptimizationContext(
        objective_function=func,
        initial_argument=argument,
        mean_smoothing_coefficient=0.8,
        standard_deviation_smoothing_coefficient=0.7,
        standard_deviation_smoothing_exponent=6,
        initial_standard_deviation=100.0,
        termination_tolerance=1.0e-3,
        optimization_goal=goal,
        minimum_number_of_iterations=3,
        maximum_number_of_iterations=1000,
    )
    results = SystemPerformanceOptimizer().optimize(
        context, rarity=0.01, sample_size=100 * argument.count
    )
    return results.optimal_state


def minimize(objective_function: Callable[..., float], initial_argument, *args) -> DoubleMatrix:
    """Minimizer of ``objective_function(x, *args)`` searched from a row vector.

    Example:
        >>> from cematrix.optimization import minimize
        >>> x = minimize(lambda x: (x[0] - 2.0) ** 2, [[0.0]])
        >>> round(x[0], 2)
        2.0
    """
    return _optimize(objective_function, initial_argument, args, OptimizationGoal.MINIMIZATION)


def maximize(objective_function: Callable[..., float], initial_argument, *args) -> DoubleMatrix:
    """Maximizer of ``objective_function(x, *args)``; see :func:`minimize`."""
    return _optimize(objective_function, initial_argument, args, OptimizationGoal.MAXIMIZATION)
