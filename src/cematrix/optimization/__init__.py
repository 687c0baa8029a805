"""
cematrix Cross-Entropy Optimization.

Contexts (problem descriptions):
    - SystemPerformanceOptimizationContext: base of optimization problems
        - ContinuousOptimizationContext: real vectors, Gaussian sampling
        - CombinationOptimizationContext: k-subsets, conditional Poisson sampling
        - PartitionOptimizationContext: item labels, categorical sampling
    - RareEventProbabilityEstimationContext: base of rare event problems

Programs (iteration drivers):
    - SystemPerformanceOptimizer
    - RareEventProbabilityEstimator

Example:
    >>> from cematrix.optimization import minimize
    >>> x = minimize(lambda x: (x[0] - 2.0) ** 2 + (x[1] + 1.0) ** 2, [[0.0, 0.0]])
"""

from ._context import (
    CrossEntropyContext,
    EliteSampleDefinition,
    OptimizationGoal,
    RareEventPerformanceBoundedness,
)
from ._program import CrossEntropyProgram, ParallelOptions
from ._sampling import UnequalProbabilityRandomSampling
from .system import (
    SystemPerformanceOptimizationContext,
    SystemPerformanceOptimizationResults,
    SystemPerformanceOptimizer,
)
from .continuous import ContinuousOptimizationContext, maximize, minimize
from .combination import CombinationOptimizationContext
from .partition import PartitionOptimizationContext
from .rare_event import (
    RareEventProbabilityEstimationContext,
    RareEventProbabilityEstimationResults,
    RareEventProbabilityEstimator,
)

__all__ = [
    # Enumerations
    "EliteSampleDefinition",
    "OptimizationGoal",
    "RareEventPerformanceBoundedness",
    # Framework
    "CrossEntropyContext",
    "CrossEntropyProgram",
    "ParallelOptions",
    "UnequalProbabilityRandomSampling",
    # Optimization
    "SystemPerformanceOptimizationContext",
    "SystemPerformanceOptimizationResults",
    "SystemPerformanceOptimizer",
    "ContinuousOptimizationContext",
    "CombinationOptimizationContext",
    "PartitionOptimizationContext",
    "minimize",
    "maximize",
    # Rare events
    "RareEventProbabilityEstimationContext",
    "RareEventProbabilityEstimationResults",
    "RareEventProbabilityEstimator",
]
