"""
cematrix Config - Strategy Configuration System

Provides property-based configuration for parallel execution, numerical
tolerances and sparse storage growth. Allows fine-grained control over
computation behavior without modifying function signatures.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Dict, Any, List
from enum import IntEnum
import logging
import threading

logger = logging.getLogger("cematrix.config")


# =============================================================================
# Strategy Enumerations
# =============================================================================

class ParallelStrategy(IntEnum):
    """
    Strategy for parallel execution.
    """
    AUTO = 0           # Parallel only when there is enough work per thread
    SEQUENTIAL = 1     # Force sequential execution
    PARALLEL = 2       # Force parallel execution


# =============================================================================
# Configuration Classes
# =============================================================================

@dataclass
class ParallelConfig:
    """Configuration for parallel execution."""
    strategy: ParallelStrategy = ParallelStrategy.AUTO
    num_threads: int = 0           # 0 = all hardware threads
    min_items_per_task: int = 64   # Smallest range handed to a worker under AUTO

    def degree_of_parallelism(self) -> int:
        """Worker bound: 1 when sequential, -1 for all hardware threads."""
        if self.strategy == ParallelStrategy.SEQUENTIAL:
            return 1
        if self.num_threads > 0:
            return self.num_threads
        return -1


@dataclass
class ComputeConfig:
    """Configuration for numerical tolerances."""
    rank_tolerance: Optional[float] = None   # None = max(shape) * eps * sigma_max
    symmetry_tolerance: float = 0.0          # Exact comparison by default


@dataclass
class SparseConfig:
    """Configuration for sparse storage growth."""
    initial_capacity: int = 16
    growth_factor: float = 2.0


# =============================================================================
# Global Configuration Manager
# =============================================================================

_SECTIONS = ("parallel", "compute", "sparse")


class CematrixConfig:
    """
    Global configuration manager for cematrix.

    Provides thread-local configuration with context manager support.
    Configuration can be set globally or locally within a context.

    Example:
        # Global configuration
        cematrix.config.parallel.strategy = ParallelStrategy.SEQUENTIAL

        # Local configuration (context manager)
        with cematrix.config.local(parallel=ParallelConfig(num_threads=4)):
            # Use 4 threads here
            results = optimizer.optimize(context, rarity=0.1, sample_size=1000)
        # Back to global config
    """

    def __init__(self):
        self._global_parallel = ParallelConfig()
        self._global_compute = ComputeConfig()
        self._global_sparse = SparseConfig()

        # Thread-local storage for context overrides
        self._local = threading.local()

    # -------------------------------------------------------------------------
    # Property Accessors (with thread-local override support)
    # -------------------------------------------------------------------------

    @property
    def parallel(self) -> ParallelConfig:
        """Get parallel configuration."""
        if getattr(self._local, "parallel", None) is not None:
            return self._local.parallel
        return self._global_parallel

    @parallel.setter
    def parallel(self, value: ParallelConfig):
        """Set global parallel configuration."""
        self._global_parallel = value

    @property
    def compute(self) -> ComputeConfig:
        """Get compute configuration."""
        if getattr(self._local, "compute", None) is not None:
            return self._local.compute
        return self._global_compute

    @compute.setter
    def compute(self, value: ComputeConfig):
        """Set global compute configuration."""
        self._global_compute = value

    @property
    def sparse(self) -> SparseConfig:
        """Get sparse storage configuration."""
        if getattr(self._local, "sparse", None) is not None:
            return self._local.sparse
        return self._global_sparse

    @sparse.setter
    def sparse(self, value: SparseConfig):
        """Set global sparse storage configuration."""
        self._global_sparse = value

    # -------------------------------------------------------------------------
    # Context Manager Support
    # -------------------------------------------------------------------------

    def local(self, **kwargs) -> "_LocalConfigContext":
        """
        Create a local configuration context.

        Args:
            **kwargs: Configuration overrides (parallel, compute, sparse)

        Returns:
            Context manager
        """
        unknown = set(kwargs) - set(_SECTIONS)
        if unknown:
            raise ValueError(f"Unknown configuration sections: {sorted(unknown)}")
        return _LocalConfigContext(self, **kwargs)

    def _set_local(self, **kwargs):
        """Set thread-local configuration."""
        for key, value in kwargs.items():
            if value is not None:
                logger.debug("Local %s configuration: %r", key, value)
                setattr(self._local, key, value)

    def _clear_local(self, keys: List[str]):
        """Clear thread-local configuration."""
        for key in keys:
            if hasattr(self._local, key):
                setattr(self._local, key, None)

    # -------------------------------------------------------------------------
    # Reset
    # -------------------------------------------------------------------------

    def reset(self):
        """Reset all configurations to defaults."""
        self._global_parallel = ParallelConfig()
        self._global_compute = ComputeConfig()
        self._global_sparse = SparseConfig()
        self._local = threading.local()
        logger.debug("Configuration reset to defaults")

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            "parallel": {
                "strategy": self.parallel.strategy.name,
                "num_threads": self.parallel.num_threads,
                "min_items_per_task": self.parallel.min_items_per_task,
            },
            "compute": {
                "rank_tolerance": self.compute.rank_tolerance,
                "symmetry_tolerance": self.compute.symmetry_tolerance,
            },
            "sparse": {
                "initial_capacity": self.sparse.initial_capacity,
                "growth_factor": self.sparse.growth_factor,
            },
        }

    def __repr__(self) -> str:
        return f"CematrixConfig({self.to_dict()})"


class _LocalConfigContext:
    """Context manager for local configuration override."""

    def __init__(self, config: CematrixConfig, **kwargs):
        self._config = config
        self._kwargs = kwargs
        self._keys = list(kwargs.keys())

    def __enter__(self):
        self._config._set_local(**self._kwargs)
        return self._config

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._config._clear_local(self._keys)
        return False


# =============================================================================
# Global Instance
# =============================================================================

# Global configuration instance
config = CematrixConfig()


# =============================================================================
# Convenience Functions
# =============================================================================

def get_config() -> CematrixConfig:
    """Get the global configuration instance."""
    return config


def set_parallel(num_threads: int = 0, strategy: ParallelStrategy = ParallelStrategy.AUTO):
    """
    Configure parallel execution.

    Args:
        num_threads: Number of threads (0 = all hardware threads)
        strategy: Parallel strategy
    """
    config.parallel = ParallelConfig(
        strategy=strategy,
        num_threads=num_threads,
    )


__all__ = [
    "ParallelStrategy",
    "ParallelConfig",
    "ComputeConfig",
    "SparseConfig",
    "CematrixConfig",
    "config",
    "get_config",
    "set_parallel",
]
