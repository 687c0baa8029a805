"""
Tests for the Cross-Entropy framework: contexts, programs, optimizers and
the rare event estimator.
"""

import logging

import pytest
import numpy as np

import cematrix
from cematrix import (
    DoubleMatrix,
    ParallelStrategy,
    ArgumentError,
    NullArgumentError,
)
from cematrix.optimization import (
    CombinationOptimizationContext,
    ContinuousOptimizationContext,
    CrossEntropyProgram,
    EliteSampleDefinition,
    OptimizationGoal,
    ParallelOptions,
    PartitionOptimizationContext,
    RareEventPerformanceBoundedness,
    RareEventProbabilityEstimationContext,
    RareEventProbabilityEstimator,
    SystemPerformanceOptimizationContext,
    SystemPerformanceOptimizer,
    maximize,
    minimize,
)
from cematrix.optimization._program import _ranges
from conftest import assert_matrix_close


# =============================================================================
# Test Contexts
# =============================================================================

class GaussianContext(SystemPerformanceOptimizationContext):
    """One dimensional Gaussian search of a scalar function."""

    def __init__(self, objective, goal=OptimizationGoal.MINIMIZATION,
                 minimum_number_of_iterations=3, maximum_number_of_iterations=50):
        super().__init__(
            state_dimension=1,
            initial_parameter=DoubleMatrix.from_array([[0.0, 10.0]]),
            optimization_goal=goal,
            minimum_number_of_iterations=minimum_number_of_iterations,
            maximum_number_of_iterations=maximum_number_of_iterations,
        )
        self.objective = objective

    def performance(self, x):
        return self.objective(x[0])

    def partial_sample(self, destination, sample_subset_range, rng, parameter, sample_size):
        start, stop = sample_subset_range
        destination[start:stop, 0] = rng.normal(parameter[0], parameter[1], size=stop - start)

    def update_parameter(self, parameters, elite_sample):
        x = elite_sample.to_numpy()[:, 0]
        return DoubleMatrix.from_array([[x.mean(), x.std()]])

    def get_optimal_state(self, parameter):
        return DoubleMatrix.dense(1, 1, parameter[0])


class RosenbrockContext(SystemPerformanceOptimizationContext):
    """Minimization of the bi-dimensional Rosenbrock function."""

    def __init__(self):
        super().__init__(
            state_dimension=2,
            initial_parameter=DoubleMatrix.dense(2, 2, [-1.0, 10000.0, -1.0, 10000.0]),
            optimization_goal=OptimizationGoal.MINIMIZATION,
            minimum_number_of_iterations=3,
            maximum_number_of_iterations=10000,
        )

    def performance(self, x):
        return 100.0 * (x[1] - x[0] ** 2) ** 2 + (1.0 - x[0]) ** 2

    def partial_sample(self, destination, sample_subset_range, rng, parameter, sample_size):
        start, stop = sample_subset_range
        for j in range(self.state_dimension):
            destination[start:stop, j] = rng.normal(parameter[0, j], parameter[1, j],
                                                    size=stop - start)

    def get_optimal_state(self, parameter):
        return parameter[0, ":"]

    def update_parameter(self, parameters, elite_sample):
        parameter = DoubleMatrix.dense(2, self.state_dimension)
        parameter[0, ":"] = cematrix.statistics.mean(
            elite_sample, cematrix.DataOperation.ON_COLUMNS)
        parameter[1, ":"] = cematrix.statistics.standard_deviation(
            elite_sample, False, cematrix.DataOperation.ON_COLUMNS)
        return parameter

    def smooth_parameter(self, parameters):
        iteration = float(len(parameters))
        if iteration > 1:
            current = parameters[-1]
            previous = parameters[-2]
            alpha = 0.7
            current[0, ":"] = alpha * current[0, ":"] + (1.0 - alpha) * previous[0, ":"]
            beta = 0.9 * (1.0 - (1.0 - 1.0 / iteration) ** 6)
            current[1, ":"] = beta * current[1, ":"] + (1.0 - beta) * previous[1, ":"]

    def stop_at_intermediate_iteration(self, iteration, levels, parameters):
        return all(s < 0.05 for s in parameters[-1][1, ":"])


class ShortestPathContext(RareEventProbabilityEstimationContext):
    """Probability that the shortest path of a bridge network is at least 2.

    Edge lengths are independent exponentials whose means are the
    parameter entries.
    """

    def __init__(self):
        super().__init__(
            state_dimension=5,
            initial_parameter=DoubleMatrix.from_array([[0.25, 0.4, 0.1, 0.3, 0.2]]),
            threshold_level=2.0,
            performance_boundedness=RareEventPerformanceBoundedness.LOWER,
        )

    def performance(self, x):
        return min(
            x[0] + x[3],
            x[0] + x[2] + x[4],
            x[1] + x[2] + x[3],
            x[1] + x[4],
        )

    def partial_sample(self, destination, sample_subset_range, rng, parameter, sample_size):
        start, stop = sample_subset_range
        for j in range(self.state_dimension):
            destination[start:stop, j] = rng.exponential(parameter[j], size=stop - start)

    def get_likelihood_ratio(self, sample_point, nominal_parameter, reference_parameter):
        x = sample_point.as_column_major_array()
        u = nominal_parameter.as_column_major_array()
        v = reference_parameter.as_column_major_array()
        return float(np.exp(-np.sum(x * (1.0 / u - 1.0 / v))) * np.prod(v / u))

    def update_parameter(self, parameters, elite_sample):
        nominal = self.initial_parameter
        reference = parameters[-1]
        elite = elite_sample.to_numpy()
        weights = np.array([
            self.get_likelihood_ratio(DoubleMatrix.from_array(row), nominal, reference)
            for row in elite
        ])
        return DoubleMatrix.from_array((weights @ elite / weights.sum()).reshape(1, -1))


class FixedRareEventContext(RareEventProbabilityEstimationContext):
    """Rare event context used to check the level computation only."""

    def performance(self, x):
        return x[0]

    def partial_sample(self, destination, sample_subset_range, rng, parameter, sample_size):
        pass

    def get_likelihood_ratio(self, sample_point, nominal_parameter, reference_parameter):
        return 1.0

    def update_parameter(self, parameters, elite_sample):
        return parameters[-1]


# =============================================================================
# Contexts
# =============================================================================

class TestSystemPerformanceContext:
    """Test the shared behavior of optimization contexts."""

    @pytest.fixture
    def performances(self):
        return np.array([5.0, 1.0, 4.0, 2.0, 3.0])

    @pytest.fixture
    def sample(self, performances):
        return performances.reshape(-1, 1) * 10.0

    def test_elite_definition_follows_goal(self):
        """Test maximization keeps the higher tail."""
        high = GaussianContext(abs, OptimizationGoal.MAXIMIZATION)
        low = GaussianContext(abs, OptimizationGoal.MINIMIZATION)
        assert high.elite_sample_definition is EliteSampleDefinition.HIGHER_THAN_LEVEL
        assert low.elite_sample_definition is EliteSampleDefinition.LOWER_THAN_LEVEL

    def test_update_level_higher(self, performances, sample):
        """Test the level and elite of the upper tail."""
        context = GaussianContext(abs, OptimizationGoal.MAXIMIZATION)
        level, elite = context.update_level(
            performances, sample, EliteSampleDefinition.HIGHER_THAN_LEVEL, 0.3)
        assert level == 5.0
        assert_matrix_close(elite, [[50.0]])

    def test_update_level_lower(self, performances, sample):
        """Test the level and elite of the lower tail."""
        context = GaussianContext(abs)
        level, elite = context.update_level(
            performances, sample, EliteSampleDefinition.LOWER_THAN_LEVEL, 0.3)
        assert level == 2.0
        assert_matrix_close(elite, [[10.0], [20.0]])

    def test_stop_execution(self):
        """Test the minimum and maximum iteration rules."""
        context = GaussianContext(abs, minimum_number_of_iterations=2,
                                  maximum_number_of_iterations=5)
        p = [context.initial_parameter]
        assert not context.stop_execution(1, [1.0], p)
        assert not context.stop_execution(2, [2.0, 2.0], p)
        assert not context.stop_execution(3, [1.0, 2.0, 2.0], p)
        assert context.stop_execution(3, [2.0, 2.0, 2.0], p)
        assert context.stop_execution(5, [1.0, 2.0, 3.0, 4.0, 5.0], p)

    def test_validation(self):
        """Test invalid iteration bounds and goals."""
        with pytest.raises(ArgumentError):
            GaussianContext(abs, minimum_number_of_iterations=-1)
        with pytest.raises(ArgumentError):
            GaussianContext(abs, minimum_number_of_iterations=5, maximum_number_of_iterations=4)
        with pytest.raises(ArgumentError):
            GaussianContext(abs, minimum_number_of_iterations=0, maximum_number_of_iterations=0)
        with pytest.raises(ArgumentError):
            GaussianContext(abs, goal="minimization")

    def test_zero_minimum_iterations_rejected(self):
        """Test at least one iteration must always run."""
        with pytest.raises(ArgumentError) as exc_info:
            GaussianContext(abs, minimum_number_of_iterations=0, maximum_number_of_iterations=5)
        assert exc_info.value.param_name == "minimum_number_of_iterations"

    def test_initial_parameter_is_copied(self):
        """Test the context keeps its own copy of the initial parameter."""
        initial = DoubleMatrix.from_array([[0.0, 1.0]])
        context = ContinuousOptimizationContext(
            lambda x: x[0], initial, 0.8, 0.7, 6, 1.0, 1e-3,
            OptimizationGoal.MINIMIZATION, 3, 10)
        initial[0, 0] = 100.0
        assert context.initial_parameter[0, 0] == 0.0


class TestRareEventContext:
    """Test the level computation of rare event contexts."""

    @pytest.fixture
    def performances(self):
        return np.array([5.0, 1.0, 4.0, 2.0, 3.0])

    def _context(self, threshold, boundedness):
        return FixedRareEventContext(
            1, DoubleMatrix.dense(1, 1, 1.0), threshold, boundedness)

    def test_lower_tail_rounds_up(self, performances):
        """Test the lower tail boundary uses the ceiling."""
        context = self._context(0.5, RareEventPerformanceBoundedness.UPPER)
        assert context.elite_sample_definition is EliteSampleDefinition.LOWER_THAN_LEVEL
        level, elite = context.update_level(
            performances, performances.reshape(-1, 1),
            EliteSampleDefinition.LOWER_THAN_LEVEL, 0.3)
        assert level == 3.0
        assert elite.shape == (3, 1)

    def test_level_clamped_at_threshold(self, performances):
        """Test the level never passes the threshold while the elite is kept."""
        sample = performances.reshape(-1, 1)
        upper = self._context(3.5, RareEventPerformanceBoundedness.UPPER)
        level, elite = upper.update_level(
            performances, sample, EliteSampleDefinition.LOWER_THAN_LEVEL, 0.3)
        assert level == 3.5
        assert elite.shape == (3, 1)

        lower = self._context(4.5, RareEventPerformanceBoundedness.LOWER)
        level, elite = lower.update_level(
            performances, sample, EliteSampleDefinition.HIGHER_THAN_LEVEL, 0.3)
        assert level == 4.5
        assert_matrix_close(elite, [[5.0]])

    def test_stop_execution(self):
        """Test the run stops once the threshold is reached."""
        lower = self._context(2.0, RareEventPerformanceBoundedness.LOWER)
        p = [lower.initial_parameter]
        assert not lower.stop_execution(1, [1.5], p)
        assert lower.stop_execution(2, [1.5, 2.0], p)
        upper = self._context(2.0, RareEventPerformanceBoundedness.UPPER)
        assert not upper.stop_execution(1, [2.5], p)
        assert upper.stop_execution(1, [2.0], p)

    def test_invalid_boundedness(self):
        """Test unrecognized boundedness."""
        with pytest.raises(ArgumentError):
            self._context(1.0, "lower")


# =============================================================================
# Programs
# =============================================================================

class TestParallelOptions:
    """Test ParallelOptions and range splitting."""

    def test_validation(self):
        """Test invalid degrees of parallelism."""
        with pytest.raises(ArgumentError):
            ParallelOptions(0)
        with pytest.raises(ArgumentError):
            ParallelOptions(-2)

    def test_workers(self):
        """Test the number of workers."""
        assert ParallelOptions(3).workers() == 3
        assert ParallelOptions(-1).workers() >= 1

    def test_default_matches_parallel_config(self):
        """Test the default bound is the configured degree of parallelism."""
        cematrix.set_parallel(num_threads=5)
        expected = cematrix.config.parallel.degree_of_parallelism()
        assert ParallelOptions().max_degree_of_parallelism == expected == 5

    def test_default_follows_config(self):
        """Test defaults read the global configuration."""
        cematrix.set_parallel(strategy=ParallelStrategy.SEQUENTIAL)
        assert ParallelOptions().max_degree_of_parallelism == 1
        cematrix.set_parallel(num_threads=3)
        assert ParallelOptions().max_degree_of_parallelism == 3

    def test_ranges_cover_count(self):
        """Test ranges are contiguous and exhaustive."""
        cematrix.set_parallel(strategy=ParallelStrategy.PARALLEL)
        ranges = _ranges(100, ParallelOptions(4))
        assert ranges == [(0, 25), (25, 50), (50, 75), (75, 100)]
        assert len(_ranges(3, ParallelOptions(4))) == 3

    def test_auto_keeps_small_work_sequential(self):
        """Test AUTO does not split small counts."""
        assert _ranges(100, ParallelOptions(4)) == [(0, 100)]


class TestCrossEntropyProgram:
    """Test sampling, evaluation and the iteration loop."""

    def test_sample_shape(self):
        """Test the sample buffer layout."""
        context = GaussianContext(abs)
        sample = CrossEntropyProgram(seed=1).sample(context, 20, context.initial_parameter)
        assert sample.shape == (20, 1)

    def test_sample_parameter_mismatch(self):
        """Test parameters incompatible with the context."""
        context = GaussianContext(abs)
        with pytest.raises(ArgumentError):
            CrossEntropyProgram().sample(context, 10, DoubleMatrix.dense(2, 2))

    def test_evaluate_performances(self):
        """Test performances of each sample row."""
        context = GaussianContext(lambda v: v * 2.0)
        sample = np.array([[1.0], [2.0], [-3.0]])
        np.testing.assert_array_equal(
            CrossEntropyProgram().evaluate_performances(context, sample), [2.0, 4.0, -6.0])
        with pytest.raises(ArgumentError):
            CrossEntropyProgram().evaluate_performances(context, np.zeros((3, 2)))

    def test_run_validation(self):
        """Test invalid run arguments."""
        program = CrossEntropyProgram()
        high = GaussianContext(abs, OptimizationGoal.MAXIMIZATION)
        low = GaussianContext(abs)
        with pytest.raises(NullArgumentError):
            program.run(None, 10, 0.1)
        with pytest.raises(ArgumentError):
            program.run(low, 0, 0.1)
        with pytest.raises(ArgumentError):
            program.run(low, 10, 0.0)
        with pytest.raises(ArgumentError):
            program.run(low, 10, 1.0)
        with pytest.raises(ArgumentError):
            program.run(high, 10, 0.01)
        with pytest.raises(ArgumentError):
            program.run(low, 10, 0.95)

    def test_run_histories(self):
        """Test one level per iteration and one extra initial parameter."""
        context = GaussianContext(lambda v: (v - 1.0) ** 2)
        run = CrossEntropyProgram(seed=3).run(context, 100, 0.1)
        assert len(run.parameters) == len(run.levels) + 1
        assert run.parameters[0][0, 0] == 0.0

    def test_seeded_runs_repeat(self):
        """Test a seed makes runs reproducible."""
        cematrix.set_parallel(num_threads=4, strategy=ParallelStrategy.PARALLEL)
        optimizer = SystemPerformanceOptimizer(seed=11)
        first = optimizer.optimize(GaussianContext(lambda v: (v - 1.0) ** 2), 0.1, 200)
        second = optimizer.optimize(GaussianContext(lambda v: (v - 1.0) ** 2), 0.1, 200)
        assert first.levels == second.levels

    @pytest.mark.parametrize("strategy", [ParallelStrategy.SEQUENTIAL, ParallelStrategy.PARALLEL])
    def test_objective_errors_propagate(self, strategy):
        """Test exceptions raised by the performance reach the caller."""
        cematrix.set_parallel(num_threads=2, strategy=strategy)

        def failing(v):
            raise RuntimeError("objective failed")

        with pytest.raises(RuntimeError, match="objective failed"):
            SystemPerformanceOptimizer(seed=1).optimize(GaussianContext(failing), 0.1, 100)

    def test_trace_execution_logs_at_info(self, caplog):
        """Test traced runs report each iteration at INFO."""
        context = GaussianContext(lambda v: (v - 1.0) ** 2, maximum_number_of_iterations=3)
        context.trace_execution = True
        with caplog.at_level(logging.INFO, logger="cematrix.optimization"):
            SystemPerformanceOptimizer(seed=5).optimize(context, 0.1, 50)
        messages = [r.getMessage() for r in caplog.records]
        assert any(m.startswith("Iteration 1: level") for m in messages)
        assert any(m.startswith("Elite positions") for m in messages)


# =============================================================================
# Optimizers
# =============================================================================

class TestSystemPerformanceOptimizer:
    """Test SystemPerformanceOptimizer on known problems."""

    def test_quadratic(self):
        """Test a one dimensional quadratic."""
        context = GaussianContext(lambda v: (v - 3.0) ** 2, maximum_number_of_iterations=200)
        results = SystemPerformanceOptimizer(seed=0).optimize(context, 0.1, 200)
        assert results.optimal_state[0] == pytest.approx(3.0, abs=0.05)
        assert results.optimal_performance == pytest.approx(
            (results.optimal_state[0] - 3.0) ** 2)

    def test_maximum_iterations(self):
        """Test runs stopped by the cap report no convergence."""
        context = GaussianContext(lambda v: (v - 3.0) ** 2, minimum_number_of_iterations=3,
                                  maximum_number_of_iterations=3)
        results = SystemPerformanceOptimizer(seed=0).optimize(context, 0.1, 50)
        assert len(results.levels) == 3
        assert not results.has_converged

    def test_rosenbrock(self):
        """Test the Rosenbrock function is minimized near (1, 1)."""
        context = RosenbrockContext()
        results = SystemPerformanceOptimizer(seed=123).optimize(context, 0.1, 1000)
        assert results.has_converged
        state = results.optimal_state.to_numpy().ravel()
        np.testing.assert_allclose(state, [1.0, 1.0], atol=0.3)
        assert results.optimal_performance < 1.0


class TestContinuousOptimization:
    """Test ContinuousOptimizationContext and the minimize/maximize helpers."""

    def _context(self, **kwargs):
        args = dict(
            objective_function=lambda x: x[0] ** 2,
            initial_argument=DoubleMatrix.from_array([[1.0, 2.0]]),
            mean_smoothing_coefficient=0.8,
            standard_deviation_smoothing_coefficient=0.7,
            standard_deviation_smoothing_exponent=6,
            initial_standard_deviation=100.0,
            termination_tolerance=1e-3,
            optimization_goal=OptimizationGoal.MINIMIZATION,
            minimum_number_of_iterations=3,
            maximum_number_of_iterations=1000,
        )
        args.update(kwargs)
        return ContinuousOptimizationContext(**args)

    def test_initial_parameter(self):
        """Test means and standard deviations rows."""
        context = self._context()
        assert context.state_dimension == 2
        assert_matrix_close(context.initial_parameter, [[1.0, 2.0], [100.0, 100.0]])

    @pytest.mark.parametrize("kwargs", [
        dict(initial_argument=DoubleMatrix.from_array([[1.0], [2.0]])),
        dict(mean_smoothing_coefficient=1.0),
        dict(standard_deviation_smoothing_coefficient=0.0),
        dict(standard_deviation_smoothing_exponent=0.5),
        dict(initial_standard_deviation=0.0),
        dict(termination_tolerance=-1.0),
    ])
    def test_validation(self, kwargs):
        """Test invalid settings."""
        with pytest.raises(ArgumentError):
            self._context(**kwargs)

    def test_missing_objective(self):
        """Test a missing objective function."""
        with pytest.raises(NullArgumentError):
            self._context(objective_function=None)

    def test_smooth_parameter(self):
        """Test the constant and dynamic smoothing coefficients."""
        context = self._context()
        previous = DoubleMatrix.from_array([[0.0, 0.0], [10.0, 10.0]])
        current = DoubleMatrix.from_array([[1.0, 2.0], [2.0, 4.0]])
        parameters = [previous, current]
        context.smooth_parameter(parameters)
        beta = 0.7 * (1.0 - (1.0 - 1.0 / 2.0) ** 6)
        expected = [
            [0.8, 1.6],
            [beta * 2.0 + (1.0 - beta) * 10.0, beta * 4.0 + (1.0 - beta) * 10.0],
        ]
        assert_matrix_close(parameters[-1], expected)

    def test_update_parameter(self):
        """Test elite means and population standard deviations."""
        context = self._context()
        elite = DoubleMatrix.from_array([[1.0, 0.0], [3.0, 0.0]])
        parameter = context.update_parameter([context.initial_parameter], elite)
        assert_matrix_close(parameter, [[2.0, 0.0], [1.0, 0.0]])

    def test_optimize(self):
        """Test the optimizer finds the minimizer of a paraboloid."""
        context = self._context(
            objective_function=lambda x: (x[0] - 2.0) ** 2 + (x[1] + 1.0) ** 2)
        results = SystemPerformanceOptimizer(seed=42).optimize(context, 0.01, 200)
        assert results.has_converged
        assert_matrix_close(results.optimal_state, [[2.0, -1.0]], atol=0.01)

    def test_minimize(self):
        """Test the minimize helper forwards extra arguments."""
        x = minimize(lambda x, a, b: (x[0] - a) ** 2 + (x[1] - b) ** 2, [[0.0, 0.0]], 2.0, -1.0)
        assert x.shape == (1, 2)
        assert_matrix_close(x, [[2.0, -1.0]], atol=0.01)

    def test_maximize(self):
        """Test the maximize helper."""
        x = maximize(lambda x: -(x[0] - 0.5) ** 2, DoubleMatrix.from_array([[3.0]]))
        assert x[0] == pytest.approx(0.5, abs=0.01)

    def test_helpers_require_row_vector(self):
        """Test column vector starting points."""
        with pytest.raises(ArgumentError):
            minimize(lambda x: x[0], [[0.0], [1.0]])


class TestCombinationOptimization:
    """Test CombinationOptimizationContext."""

    weights = np.array([1.0, 5.0, 2.0, 8.0, 3.0, 4.0])

    def _context(self, **kwargs):
        weights = self.weights
        args = dict(
            objective_function=lambda x: float(x.to_numpy().ravel() @ weights),
            state_dimension=6,
            combination_dimension=2,
            probability_smoothing_coefficient=0.8,
            optimization_goal=OptimizationGoal.MAXIMIZATION,
            minimum_number_of_iterations=3,
            maximum_number_of_iterations=100,
        )
        args.update(kwargs)
        return CombinationOptimizationContext(**args)

    @pytest.mark.parametrize("kwargs", [
        dict(combination_dimension=0),
        dict(combination_dimension=6),
        dict(probability_smoothing_coefficient=1.5),
    ])
    def test_validation(self, kwargs):
        """Test invalid settings."""
        with pytest.raises(ArgumentError):
            self._context(**kwargs)

    def test_initial_parameter(self):
        """Test the initial Bernoulli probabilities."""
        assert_matrix_close(self._context().initial_parameter, np.full((1, 6), 0.5))

    def test_samples_have_k_ones(self):
        """Test every sampled state selects exactly k items."""
        context = self._context()
        sample = CrossEntropyProgram(seed=9).sample(context, 50, context.initial_parameter)
        assert sample.shape == (50, 6)
        np.testing.assert_array_equal(sample.sum(axis=1), np.full(50, 2.0))
        assert set(np.unique(sample)) <= {0.0, 1.0}

    def test_update_parameter_stays_inside_unit_interval(self):
        """Test degenerate frequencies are moved off 0 and 1."""
        context = self._context()
        elite = DoubleMatrix.from_array([[0, 1, 0, 1, 0, 0], [0, 1, 0, 1, 0, 0]])
        p = context.update_parameter([context.initial_parameter], elite).to_numpy()
        assert np.all(p > 0.0)
        assert np.all(p < 1.0)

    def test_optimize(self):
        """Test the best pair is selected."""
        results = SystemPerformanceOptimizer(seed=5).optimize(self._context(), 0.1, 100)
        assert results.has_converged
        assert_matrix_close(results.optimal_state, [[0, 1, 0, 1, 0, 0]])
        assert results.optimal_performance == 13.0


class TestPartitionOptimization:
    """Test PartitionOptimizationContext."""

    target = np.array([0.0, 1.0, 0.0, 1.0, 1.0, 0.0])

    def _context(self, **kwargs):
        target = self.target
        args = dict(
            objective_function=lambda x: -float(np.sum(np.abs(x.to_numpy().ravel() - target))),
            state_dimension=6,
            partition_dimension=2,
            probability_smoothing_coefficient=0.8,
            optimization_goal=OptimizationGoal.MAXIMIZATION,
            minimum_number_of_iterations=3,
            maximum_number_of_iterations=200,
        )
        args.update(kwargs)
        return PartitionOptimizationContext(**args)

    def test_validation(self):
        """Test invalid settings."""
        with pytest.raises(ArgumentError) as exc_info:
            self._context(partition_dimension=1)
        assert exc_info.value.param_name == "partition_dimension"
        with pytest.raises(ArgumentError) as exc_info:
            self._context(state_dimension=2)
        assert exc_info.value.param_name == "state_dimension"
        with pytest.raises(ArgumentError):
            self._context(probability_smoothing_coefficient=0.0)

    def test_initial_parameter(self):
        """Test uniform label distributions."""
        assert_matrix_close(self._context().initial_parameter, np.full((2, 6), 0.5))

    def test_samples_are_labels(self):
        """Test sampled states hold labels only."""
        context = self._context(partition_dimension=3)
        sample = CrossEntropyProgram(seed=2).sample(context, 40, context.initial_parameter)
        assert set(np.unique(sample)) <= {0.0, 1.0, 2.0}

    def test_update_parameter(self):
        """Test label frequencies over the elite."""
        context = self._context()
        elite = DoubleMatrix.from_array([[0, 1, 0, 1, 1, 0], [0, 0, 0, 1, 1, 1]])
        p = context.update_parameter([context.initial_parameter], elite)
        assert_matrix_close(p, [[1.0, 0.5, 1.0, 0.0, 0.0, 0.5],
                                [0.0, 0.5, 0.0, 1.0, 1.0, 0.5]])

    def test_optimize(self):
        """Test the target labelling is recovered."""
        results = SystemPerformanceOptimizer(seed=8).optimize(self._context(), 0.1, 200)
        assert results.has_converged
        assert_matrix_close(results.optimal_state, self.target.reshape(1, -1))
        assert results.optimal_performance == 0.0


# =============================================================================
# Rare Event Estimation
# =============================================================================

class TestRareEventProbabilityEstimator:
    """Test RareEventProbabilityEstimator."""

    def test_shortest_path(self):
        """Test the bridge network probability of a shortest path >= 2."""
        context = ShortestPathContext()
        results = RareEventProbabilityEstimator(seed=17).estimate(
            context, rarity=0.1, sample_size=1000, estimation_sample_size=10000)
        assert 0.8e-5 <= results.rare_event_probability <= 2.0e-5
        assert results.has_converged
        assert results.levels[-1] == 2.0
        assert len(results.parameters) == len(results.levels) + 1

    def test_validation(self):
        """Test invalid estimation arguments."""
        estimator = RareEventProbabilityEstimator()
        with pytest.raises(NullArgumentError):
            estimator.estimate(None, 0.1, 100, 100)
        with pytest.raises(ArgumentError):
            estimator.estimate(ShortestPathContext(), 0.1, 100, 0)
