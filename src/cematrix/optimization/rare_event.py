"""
Rare Event Probability Estimation.

Estimates tiny probabilities ``P(performance(X) >= threshold)`` (or
``<= threshold``) under a nominal distribution by importance sampling. The
Cross-Entropy iterations move the sampling distribution towards the rare
event; the final estimate weights the points hitting the event by the
likelihood ratio between the nominal and the final distributions.
"""

from __future__ import annotations

import logging
import math
from abc import abstractmethod
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .._errors import ArgumentError, check_not_none
from ..matrix import DoubleMatrix
from ._context import (
    CrossEntropyContext,
    EliteSampleDefinition,
    RareEventPerformanceBoundedness,
    _as_matrix,
)
from ._program import CrossEntropyProgram

__all__ = [
    'RareEventProbabilityEstimationContext',
    'RareEventProbabilityEstimationResults',
    'RareEventProbabilityEstimator',
]

logger = logging.getLogger("cematrix.optimization")


class RareEventProbabilityEstimationContext(CrossEntropyContext):
    """Context for estimating the probability of a rare event.

    Args:
        state_dimension: Length of a sampled point.
        initial_parameter: Nominal parameter, under which the probability
            is estimated.
        threshold_level: Performance bound defining the rare event.
        performance_boundedness: ``LOWER`` if the event is
            ``performance >= threshold_level``, ``UPPER`` if it is
            ``performance <= threshold_level``.

    Subclasses implement :meth:`performance`, :meth:`partial_sample`,
    :meth:`get_likelihood_ratio` and :meth:`update_parameter`.
    """

    def __init__(
        self,
        state_dimension: int,
        initial_parameter: DoubleMatrix,
        threshold_level: float,
        performance_boundedness: RareEventPerformanceBoundedness,
    ):
        if not isinstance(performance_boundedness, RareEventPerformanceBoundedness):
            raise ArgumentError(
                "Not a recognized performance boundedness", "performance_boundedness"
            )
        definition = (
            EliteSampleDefinition.LOWER_THAN_LEVEL
            if performance_boundedness is RareEventPerformanceBoundedness.UPPER
            else EliteSampleDefinition.HIGHER_THAN_LEVEL
        )
        super().__init__(state_dimension, initial_parameter, definition)
        self._threshold_level = float(threshold_level)
        self._performance_boundedness = performance_boundedness

    @property
    def threshold_level(self) -> float:
        return self._threshold_level

    @property
    def performance_boundedness(self) -> RareEventPerformanceBoundedness:
        return self._performance_boundedness

    @abstractmethod
    def get_likelihood_ratio(
        self,
        sample_point: DoubleMatrix,
        nominal_parameter: DoubleMatrix,
        reference_parameter: DoubleMatrix,
    ) -> float:
        """Ratio of the nominal to the reference density at ``sample_point``."""

    def stop_execution(
        self, iteration: int, levels: List[float], parameters: List[DoubleMatrix]
    ) -> bool:
        if self.elite_sample_definition is EliteSampleDefinition.HIGHER_THAN_LEVEL:
            return levels[-1] >= self._threshold_level
        return levels[-1] <= self._threshold_level

    def update_level(
        self,
        performances: np.ndarray,
        sample: np.ndarray,
        elite_sample_definition: EliteSampleDefinition,
        rarity: float,
    ) -> Tuple[float, DoubleMatrix]:
        check_not_none(performances, "performances")
        check_not_none(sample, "sample")
        level, elite_sample = self._select_elite(
            performances, sample, elite_sample_definition, rarity, math.ceil
        )
        # The level never overshoots the threshold
        if elite_sample_definition is EliteSampleDefinition.HIGHER_THAN_LEVEL:
            level = min(level, self._threshold_level)
        else:
            level = max(level, self._threshold_level)
        return level, elite_sample


@dataclass(frozen=True)
class RareEventProbabilityEstimationResults:
    """Outcome of :meth:`RareEventProbabilityEstimator.estimate`."""
    rare_event_probability: float
    levels: List[float]
    parameters: List[DoubleMatrix]
    has_converged: bool = True


class RareEventProbabilityEstimator(CrossEntropyProgram):
    """Cross-Entropy importance sampling estimator of rare event probabilities."""

    def estimate(
        self,
        context: RareEventProbabilityEstimationContext,
        rarity: float,
        sample_size: int,
        estimation_sample_size: int,
    ) -> RareEventProbabilityEstimationResults:
        """Estimate the probability of the rare event of ``context``.

        Args:
            context: Rare event description.
            rarity: Fraction of each sample kept as elite, in (0, 1).
            sample_size: Points drawn at each Cross-Entropy iteration.
            estimation_sample_size: Points drawn from the final distribution
                to compute the estimate.

        Returns:
            The estimate together with the level and parameter histories.
            The probability is 0 when no final point hits the event.

        Raises:
            NullArgumentError: If ``context`` is None.
            ArgumentError: If a size is not positive or ``rarity`` is
                invalid.
        """
        check_not_none(context, "context")
        if estimation_sample_size < 1:
            raise ArgumentError("Parameter must be positive", "estimation_sample_size")

        run = self.run(context, sample_size, rarity)
        reference = run.parameters[-1]
        nominal = context.initial_parameter

        final_sample = self.sample(context, estimation_sample_size, reference)
        performances = self.evaluate_performances(context, final_sample)
        if context.elite_sample_definition is EliteSampleDefinition.LOWER_THAN_LEVEL:
            hits = np.flatnonzero(performances <= context.threshold_level)
        else:
            hits = np.flatnonzero(performances >= context.threshold_level)

        total = 0.0
        for i in hits:
            point = _as_matrix(final_sample[i:i + 1, :])
            total += context.get_likelihood_ratio(point, nominal, reference)
        probability = total / float(estimation_sample_size)

        logger.debug(
            "Rare event estimate %r from %d hits after %d iterations",
            probability, hits.size, len(run.levels),
        )
        return RareEventProbabilityEstimationResults(
            rare_event_probability=probability,
            levels=run.levels,
            parameters=run.parameters,
            has_converged=True,
        )
