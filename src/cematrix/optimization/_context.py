"""
Cross-Entropy Contexts.

A context describes one problem solved by the Cross-Entropy method: how
states are sampled from a parametric family, how a state performs, how
the parameter is re-estimated from an elite sample, and when to stop.
Programs (optimizers and estimators) drive the iterations and never look
inside a concrete context.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Tuple

import numpy as np

from .._errors import ArgumentError, check_not_none, check_positive
from ..matrix import DoubleMatrix
from ..storage import DenseStorage

__all__ = [
    'EliteSampleDefinition',
    'OptimizationGoal',
    'RareEventPerformanceBoundedness',
    'CrossEntropyContext',
]

logger = logging.getLogger("cematrix.optimization")


# =============================================================================
# Enumerations
# =============================================================================

class EliteSampleDefinition(Enum):
    """Which tail of the sorted performances forms the elite sample."""
    HIGHER_THAN_LEVEL = "higher_than_level"
    LOWER_THAN_LEVEL = "lower_than_level"


class OptimizationGoal(Enum):
    MAXIMIZATION = "maximization"
    MINIMIZATION = "minimization"


class RareEventPerformanceBoundedness(Enum):
    """Side on which the performance of a rare event is bounded.

    ``LOWER``: the rare event is ``performance >= threshold``.
    ``UPPER``: the rare event is ``performance <= threshold``.
    """
    LOWER = "lower"
    UPPER = "upper"


def _as_matrix(arr: np.ndarray) -> DoubleMatrix:
    return DoubleMatrix(DenseStorage(np.array(arr, dtype=np.float64, order='F', ndmin=2)))


# =============================================================================
# Base Context
# =============================================================================

class CrossEntropyContext(ABC):
    """Problem description consumed by a Cross-Entropy program.

    Args:
        state_dimension: Length of each sampled state vector.
        initial_parameter: Parameter of the first sampling distribution.
        elite_sample_definition: Tail of the performances kept as elite.

    Attributes:
        trace_execution: When True, iteration reports are logged at INFO
            instead of DEBUG, together with the elite positions and the
            current parameter.
    """

    def __init__(
        self,
        state_dimension: int,
        initial_parameter: DoubleMatrix,
        elite_sample_definition: EliteSampleDefinition,
    ):
        check_positive(state_dimension, "state_dimension")
        check_not_none(initial_parameter, "initial_parameter")
        if not isinstance(elite_sample_definition, EliteSampleDefinition):
            raise ArgumentError(
                "Not a recognized elite sample definition", "elite_sample_definition"
            )
        self._state_dimension = state_dimension
        self._initial_parameter = initial_parameter.copy()
        self._elite_sample_definition = elite_sample_definition
        self.trace_execution = False

    @property
    def state_dimension(self) -> int:
        return self._state_dimension

    @property
    def initial_parameter(self) -> DoubleMatrix:
        return self._initial_parameter

    @property
    def elite_sample_definition(self) -> EliteSampleDefinition:
        return self._elite_sample_definition

    # -------------------------------------------------------------------------
    # Customization points
    # -------------------------------------------------------------------------

    @abstractmethod
    def performance(self, x: DoubleMatrix) -> float:
        """Performance of the state ``x`` (a 1 x state_dimension matrix)."""

    @abstractmethod
    def partial_sample(
        self,
        destination: np.ndarray,
        sample_subset_range: Tuple[int, int],
        rng: np.random.Generator,
        parameter: DoubleMatrix,
        sample_size: int,
    ) -> None:
        """Draw the rows ``[start, stop)`` of a sample into ``destination``.

        ``destination`` is the whole ``sample_size x state_dimension``
        buffer; implementations write only the rows of their range.
        """

    @abstractmethod
    def update_parameter(
        self, parameters: List[DoubleMatrix], elite_sample: DoubleMatrix
    ) -> DoubleMatrix:
        """New parameter estimated from the rows of ``elite_sample``."""

    @abstractmethod
    def update_level(
        self,
        performances: np.ndarray,
        sample: np.ndarray,
        elite_sample_definition: EliteSampleDefinition,
        rarity: float,
    ) -> Tuple[float, DoubleMatrix]:
        """Level reached by this iteration and the matching elite sample."""

    @abstractmethod
    def stop_execution(
        self, iteration: int, levels: List[float], parameters: List[DoubleMatrix]
    ) -> bool:
        """True when the program must stop after ``iteration``."""

    def smooth_parameter(self, parameters: List[DoubleMatrix]) -> None:
        """Blend the last parameter with its predecessors, in place.

        Does nothing unless overridden.
        """

    def on_executed_iteration(
        self,
        iteration: int,
        sample: np.ndarray,
        levels: List[float],
        parameters: List[DoubleMatrix],
    ) -> None:
        """Hook run after each parameter update; smooths the parameter."""
        self.smooth_parameter(parameters)

    def on_run_started(self) -> None:
        """Hook run before the first iteration of each program run."""

    # -------------------------------------------------------------------------
    # Elite selection shared by concrete context families
    # -------------------------------------------------------------------------

    def _elite_boundaries(
        self,
        sample_size: int,
        elite_sample_definition: EliteSampleDefinition,
        rarity: float,
        lower_rounding,
    ) -> Tuple[int, int]:
        if elite_sample_definition is EliteSampleDefinition.HIGHER_THAN_LEVEL:
            return int(math.ceil(sample_size * (1.0 - rarity))), sample_size - 1
        return 0, int(lower_rounding(sample_size * rarity))

    def _select_elite(
        self,
        performances: np.ndarray,
        sample: np.ndarray,
        elite_sample_definition: EliteSampleDefinition,
        rarity: float,
        lower_rounding,
    ) -> Tuple[float, DoubleMatrix]:
        order = np.argsort(performances, kind='stable')
        sorted_performances = performances[order]
        first, last = self._elite_boundaries(
            performances.size, elite_sample_definition, rarity, lower_rounding
        )
        level = float(sorted_performances[
            first if elite_sample_definition is EliteSampleDefinition.HIGHER_THAN_LEVEL else last
        ])
        log = logger.info if self.trace_execution else logger.debug
        log("Elite positions: %d - %d", first, last)
        elite = sample[order[first:last + 1], :]
        return level, _as_matrix(elite)
