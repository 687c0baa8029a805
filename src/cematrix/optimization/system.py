"""
System Performance Optimization.

Example:
    >>> from cematrix import DoubleMatrix
    >>> from cematrix.optimization import ContinuousOptimizationContext
    >>> from cematrix.optimization import OptimizationGoal, SystemPerformanceOptimizer
    >>> context = ContinuousOptimizationContext(
    ...     objective_function=lambda x: (x[0] - 3.0) ** 2,
    ...     initial_argument=DoubleMatrix.dense(1, 1, 0.0),
    ...     mean_smoothing_coefficient=0.8,
    ...     standard_deviation_smoothing_coefficient=0.7,
    ...     standard_deviation_smoothing_exponent=6,
    ...     initial_standard_deviation=100.0,
    ...     termination_tolerance=1e-3,
    ...     optimization_goal=OptimizationGoal.MINIMIZATION,
    ...     minimum_number_of_iterations=3,
    ...     maximum_number_of_iterations=1000,
    ... )
    >>> results = SystemPerformanceOptimizer(seed=1).optimize(context, 0.01, 100)
    >>> results.has_converged
    True
"""

from __future__ import annotations

import logging
import math
from abc import abstractmethod
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .._errors import ArgumentError, check_not_none, check_positive
from ..matrix import DoubleMatrix
from ._context import CrossEntropyContext, EliteSampleDefinition, OptimizationGoal
from ._program import CrossEntropyProgram

__all__ = [
    'SystemPerformanceOptimizationContext',
    'SystemPerformanceOptimizationResults',
    'SystemPerformanceOptimizer',
]

logger = logging.getLogger("cematrix.optimization")


class SystemPerformanceOptimizationContext(CrossEntropyContext):
    """Context for finding the state of a system with optimal performance.

    Maximization keeps the states performing higher than the level,
    minimization those performing lower.

    Args:
        state_dimension: Length of a system state.
        initial_parameter: Parameter of the first sampling distribution.
        optimization_goal: Maximization or minimization of the performance.
        minimum_number_of_iterations: Iterations always executed before the
            intermediate stopping rule is consulted.
        maximum_number_of_iterations: Hard cap on the number of iterations.
    """

    def __init__(
        self,
        state_dimension: int,
        initial_parameter: DoubleMatrix,
        optimization_goal: OptimizationGoal,
        minimum_number_of_iterations: int,
        maximum_number_of_iterations: int,
    ):
        if not isinstance(optimization_goal, OptimizationGoal):
            raise ArgumentError("Not a recognized optimization goal", "optimization_goal")
        check_positive(minimum_number_of_iterations, "minimum_number_of_iterations")
        if maximum_number_of_iterations < minimum_number_of_iterations:
            raise ArgumentError(
                "Maximum number of iterations cannot be less than the minimum",
                "maximum_number_of_iterations",
            )
        check_positive(maximum_number_of_iterations, "maximum_number_of_iterations")
        definition = (
            EliteSampleDefinition.HIGHER_THAN_LEVEL
            if optimization_goal is OptimizationGoal.MAXIMIZATION
            else EliteSampleDefinition.LOWER_THAN_LEVEL
        )
        super().__init__(state_dimension, initial_parameter, definition)
        self._optimization_goal = optimization_goal
        self._minimum_number_of_iterations = minimum_number_of_iterations
        self._maximum_number_of_iterations = maximum_number_of_iterations

    @property
    def optimization_goal(self) -> OptimizationGoal:
        return self._optimization_goal

    @property
    def minimum_number_of_iterations(self) -> int:
        return self._minimum_number_of_iterations

    @property
    def maximum_number_of_iterations(self) -> int:
        return self._maximum_number_of_iterations

    @abstractmethod
    def get_optimal_state(self, parameter: DoubleMatrix) -> DoubleMatrix:
        """State judged optimal under ``parameter``."""

    def stop_at_intermediate_iteration(
        self, iteration: int, levels: List[float], parameters: List[DoubleMatrix]
    ) -> bool:
        """Stopping rule between the minimum and maximum iterations.

        Stops when the last level equals each of the previous
        ``minimum_number_of_iterations`` levels.
        """
        current = levels[-1]
        return all(
            levels[-1 - h] == current
            for h in range(1, self._minimum_number_of_iterations + 1)
        )

    def stop_execution(
        self, iteration: int, levels: List[float], parameters: List[DoubleMatrix]
    ) -> bool:
        if iteration == self._maximum_number_of_iterations:
            return True
        if self._minimum_number_of_iterations < iteration:
            return self.stop_at_intermediate_iteration(iteration, levels, parameters)
        return False

    def update_level(
        self,
        performances: np.ndarray,
        sample: np.ndarray,
        elite_sample_definition: EliteSampleDefinition,
        rarity: float,
    ) -> Tuple[float, DoubleMatrix]:
        check_not_none(performances, "performances")
        check_not_none(sample, "sample")
        return self._select_elite(
            performances, sample, elite_sample_definition, rarity, math.floor
        )


@dataclass(frozen=True)
class SystemPerformanceOptimizationResults:
    """Outcome of :meth:`SystemPerformanceOptimizer.optimize`.

    Attributes:
        optimal_state: State judged optimal under the last parameter.
        optimal_performance: Performance of ``optimal_state``.
        levels: Level reached at each iteration.
        parameters: Initial parameter followed by one per iteration.
        has_converged: False when the run was stopped by the maximum
            number of iterations.
    """
    optimal_state: DoubleMatrix
    optimal_performance: float
    levels: List[float]
    parameters: List[DoubleMatrix]
    has_converged: bool


class SystemPerformanceOptimizer(CrossEntropyProgram):
    """Cross-Entropy optimizer of system performances."""

    def optimize(
        self,
        context: SystemPerformanceOptimizationContext,
        rarity: float,
        sample_size: int,
    ) -> SystemPerformanceOptimizationResults:
        """Search the state with optimal performance.

        Args:
            context: Problem to optimize.
            rarity: Fraction of each sample kept as elite, in (0, 1).
            sample_size: Number of states drawn at each iteration.

        Raises:
            NullArgumentError: If ``context`` is None.
            ArgumentError: If ``sample_size`` or ``rarity`` are invalid.
        """
        check_not_none(context, "context")
        run = self.run(context, sample_size, rarity)
        optimal_state = context.get_optimal_state(run.parameters[-1])
        results = SystemPerformanceOptimizationResults(
            optimal_state=optimal_state,
            optimal_performance=float(context.performance(optimal_state)),
            levels=run.levels,
            parameters=run.parameters,
            has_converged=len(run.levels) < context.maximum_number_of_iterations,
        )
        logger.debug(
            "Optimization finished after %d iterations (converged: %s)",
            len(run.levels), results.has_converged,
        )
        return results
