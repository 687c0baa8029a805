"""
Cross-Entropy Program.

Drives the iterations shared by every Cross-Entropy algorithm:

    sample -> evaluate -> select elite (level) -> update parameter
           -> context hook (smoothing) -> stop check

Sampling and performance evaluation are data-parallel over disjoint row
ranges of the sample buffer. Every sampling range draws from its own child
stream spawned from the run's ``numpy.random.SeedSequence``.
"""

from __future__ import annotations

import logging
import math
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from .._config import ParallelStrategy, config
from .._errors import ArgumentError, check_not_none, check_open_unit_interval, check_positive
from ..matrix import DoubleMatrix
from ._context import CrossEntropyContext, EliteSampleDefinition, _as_matrix

__all__ = ['ParallelOptions', 'CrossEntropyProgram']

logger = logging.getLogger("cematrix.optimization")


# =============================================================================
# Parallel Options
# =============================================================================

def _default_degree() -> int:
    return config.parallel.degree_of_parallelism()


@dataclass
class ParallelOptions:
    """Degree of parallelism of a data-parallel step.

    ``max_degree_of_parallelism`` is -1 for all hardware threads, 1 for
    sequential execution, or k > 1 for at most k workers. The default
    follows ``cematrix.config.parallel`` at construction time.
    """
    max_degree_of_parallelism: int = field(default_factory=_default_degree)

    def __post_init__(self):
        if self.max_degree_of_parallelism == 0 or self.max_degree_of_parallelism < -1:
            raise ArgumentError(
                "Degree of parallelism must be -1 or positive",
                "max_degree_of_parallelism",
            )

    def workers(self) -> int:
        if self.max_degree_of_parallelism == -1:
            return os.cpu_count() or 1
        return self.max_degree_of_parallelism


def _ranges(count: int, options: ParallelOptions) -> List[Tuple[int, int]]:
    """Split ``[0, count)`` into contiguous ranges, one per worker."""
    workers = options.workers()
    if workers > 1 and config.parallel.strategy == ParallelStrategy.AUTO:
        workers = min(workers, max(1, count // config.parallel.min_items_per_task))
    workers = max(1, min(workers, count))
    bounds = np.linspace(0, count, workers + 1).astype(int)
    return [(int(bounds[i]), int(bounds[i + 1])) for i in range(workers)]


# =============================================================================
# Run State
# =============================================================================

@dataclass
class _RunResults:
    levels: List[float]
    parameters: List[DoubleMatrix]


# =============================================================================
# Program
# =============================================================================

class CrossEntropyProgram:
    """Iterative core shared by optimizers and estimators.

    Args:
        seed: Seed of the random streams; None draws fresh entropy for
            every run.

    Attributes:
        sample_generation_parallel_options: Parallelism of sampling.
        performance_evaluation_parallel_options: Parallelism of evaluation.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.sample_generation_parallel_options = ParallelOptions()
        self.performance_evaluation_parallel_options = ParallelOptions()
        self._seed_sequence: Optional[np.random.SeedSequence] = None

    # -------------------------------------------------------------------------
    # Primitive operations
    # -------------------------------------------------------------------------

    def _streams(self) -> np.random.SeedSequence:
        if self._seed_sequence is None:
            self._seed_sequence = np.random.SeedSequence(self.seed)
        return self._seed_sequence

    def sample(
        self, context: CrossEntropyContext, sample_size: int, parameter: DoubleMatrix
    ) -> np.ndarray:
        """Draw ``sample_size`` states from the distribution of ``parameter``.

        Returns:
            A ``sample_size x state_dimension`` float64 array.
        """
        check_not_none(context, "context")
        check_positive(sample_size, "sample_size")
        check_not_none(parameter, "parameter")
        if parameter.shape != context.initial_parameter.shape:
            raise ArgumentError("Parameter is incompatible with the context", "parameter")

        destination = np.zeros((sample_size, context.state_dimension), dtype=np.float64)
        ranges = _ranges(sample_size, self.sample_generation_parallel_options)
        generators = [np.random.default_rng(s) for s in self._streams().spawn(len(ranges))]

        if len(ranges) == 1:
            context.partial_sample(destination, ranges[0], generators[0], parameter, sample_size)
            return destination

        with ThreadPoolExecutor(max_workers=len(ranges)) as executor:
            futures = [
                executor.submit(context.partial_sample, destination, r, g, parameter, sample_size)
                for r, g in zip(ranges, generators)
            ]
            for future in futures:
                future.result()
        return destination

    def evaluate_performances(self, context: CrossEntropyContext, sample: np.ndarray) -> np.ndarray:
        """Performance of every row of ``sample``."""
        check_not_none(context, "context")
        check_not_none(sample, "sample")
        if sample.shape[1] != context.state_dimension:
            raise ArgumentError("Sample is incompatible with the context", "sample")

        performances = np.empty(sample.shape[0], dtype=np.float64)

        def evaluate(subset_range: Tuple[int, int]) -> None:
            for i in range(*subset_range):
                row = _as_matrix(sample[i:i + 1, :])
                performances[i] = context.performance(row)

        ranges = _ranges(sample.shape[0], self.performance_evaluation_parallel_options)
        if len(ranges) == 1:
            evaluate(ranges[0])
            return performances

        with ThreadPoolExecutor(max_workers=len(ranges)) as executor:
            for future in [executor.submit(evaluate, r) for r in ranges]:
                future.result()
        return performances

    # -------------------------------------------------------------------------
    # Iterations
    # -------------------------------------------------------------------------

    @staticmethod
    def _validate(context: CrossEntropyContext, sample_size: int, rarity: float) -> None:
        check_not_none(context, "context")
        check_positive(sample_size, "sample_size")
        check_open_unit_interval(rarity, "rarity")
        if context.elite_sample_definition is EliteSampleDefinition.HIGHER_THAN_LEVEL:
            if int(math.ceil(sample_size * (1.0 - rarity))) >= sample_size:
                raise ArgumentError(
                    "Rarity is too small for the sample size: the elite sample is empty",
                    "rarity",
                )
        elif int(math.ceil(sample_size * rarity)) >= sample_size:
            raise ArgumentError(
                "Rarity is too large for the sample size: the level is out of the sample",
                "rarity",
            )

    def run(self, context: CrossEntropyContext, sample_size: int, rarity: float) -> _RunResults:
        """Iterate until the context asks to stop.

        Raises:
            NullArgumentError: If ``context`` is None.
            ArgumentError: If ``sample_size`` is not positive, ``rarity`` is
                outside (0, 1), or the elite boundary falls outside the sample.
        """
        self._validate(context, sample_size, rarity)

        self._seed_sequence = np.random.SeedSequence(self.seed)
        context.on_run_started()
        definition = context.elite_sample_definition
        levels: List[float] = []
        parameters: List[DoubleMatrix] = [context.initial_parameter.copy()]
        log = logger.info if context.trace_execution else logger.debug

        iteration = 1
        while True:
            sample = self.sample(context, sample_size, parameters[-1])
            performances = self.evaluate_performances(context, sample)

            level, elite_sample = context.update_level(performances, sample, definition, rarity)
            levels.append(level)
            parameters.append(context.update_parameter(parameters, elite_sample))

            context.on_executed_iteration(iteration, sample, levels, parameters)
            stop = context.stop_execution(iteration, levels, parameters)

            log("Iteration %d: level %r", iteration, level)
            if context.trace_execution:
                logger.info("Parameter:\n%s", parameters[-1])
            if stop:
                break
            iteration += 1

        return _RunResults(levels=levels, parameters=parameters)
