"""
Error handling for cematrix.

Every error raised by the library carries a numeric code grouped by
category, plus the name of the offending parameter when one is known.
Concrete classes also derive from the closest builtin exception so callers
can catch either ``cematrix.ShapeMismatchError`` or ``ValueError``.
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# Error Codes
# =============================================================================

# Success
CEM_OK = 0

# General errors (1-9)
CEM_ERROR_UNKNOWN = 1
CEM_ERROR_NULL_ARGUMENT = 4

# Argument errors (10-19)
CEM_ERROR_INVALID_ARGUMENT = 10
CEM_ERROR_DIMENSION_MISMATCH = 11
CEM_ERROR_RANGE_ERROR = 13
CEM_ERROR_INVALID_OPTION = 15

# Access errors (20-29)
CEM_ERROR_READ_ONLY = 22

# Numerical errors (50-59)
CEM_ERROR_RANK_DEFICIENT = 51
CEM_ERROR_CONVERGENCE_ERROR = 54
CEM_ERROR_BIAS_UNDEFINED = 55


# Error code to message mapping
_ERROR_MESSAGES = {
    CEM_OK: "Success",
    CEM_ERROR_UNKNOWN: "Unknown error",
    CEM_ERROR_NULL_ARGUMENT: "Argument cannot be None",
    CEM_ERROR_INVALID_ARGUMENT: "Invalid argument",
    CEM_ERROR_DIMENSION_MISMATCH: "Dimension mismatch",
    CEM_ERROR_RANGE_ERROR: "Index out of range",
    CEM_ERROR_INVALID_OPTION: "Not a recognized option",
    CEM_ERROR_READ_ONLY: "Matrix is read-only",
    CEM_ERROR_RANK_DEFICIENT: "Matrix is rank deficient",
    CEM_ERROR_CONVERGENCE_ERROR: "Algorithm did not converge",
    CEM_ERROR_BIAS_UNDEFINED: "Bias adjustment undefined for too few observations",
}


def error_message(code: int) -> str:
    """Default message for an error code."""
    return _ERROR_MESSAGES.get(code, f"Unknown error (code={code})")


# =============================================================================
# Exception Classes
# =============================================================================

class CematrixError(Exception):
    """
    Base exception for all cematrix errors.

    Attributes:
        code: Numeric error code (one of the ``CEM_ERROR_*`` constants).
        message: Human readable description.
        param_name: Name of the offending parameter, if any.
    """

    OK = CEM_OK
    ERROR_UNKNOWN = CEM_ERROR_UNKNOWN
    ERROR_NULL_ARGUMENT = CEM_ERROR_NULL_ARGUMENT
    ERROR_INVALID_ARGUMENT = CEM_ERROR_INVALID_ARGUMENT
    ERROR_DIMENSION_MISMATCH = CEM_ERROR_DIMENSION_MISMATCH
    ERROR_RANGE_ERROR = CEM_ERROR_RANGE_ERROR
    ERROR_INVALID_OPTION = CEM_ERROR_INVALID_OPTION
    ERROR_READ_ONLY = CEM_ERROR_READ_ONLY
    ERROR_RANK_DEFICIENT = CEM_ERROR_RANK_DEFICIENT
    ERROR_CONVERGENCE_ERROR = CEM_ERROR_CONVERGENCE_ERROR
    ERROR_BIAS_UNDEFINED = CEM_ERROR_BIAS_UNDEFINED

    default_code = CEM_ERROR_UNKNOWN

    def __init__(
        self,
        message: Optional[str] = None,
        param_name: Optional[str] = None,
        code: Optional[int] = None,
    ):
        """
        Create a cematrix exception.

        Args:
            message: Optional detailed message (the code's default otherwise)
            param_name: Name of the offending parameter
            code: Error code (the class default otherwise)
        """
        self.code = self.default_code if code is None else code
        if message is None:
            message = error_message(self.code)
        self.message = message
        self.param_name = param_name
        text = f"{message} (parameter '{param_name}')" if param_name else message
        super().__init__(text)

    @classmethod
    def from_code(cls, code: int, context: str = "") -> "CematrixError":
        """Create the exception matching an error code with optional context."""
        base_msg = error_message(code)
        msg = f"{context}: {base_msg}" if context else base_msg
        exc_type = _CODE_TO_CLASS.get(code, cls)
        return exc_type(msg, code=code)


class NullArgumentError(CematrixError, TypeError):
    """A required argument is None."""
    default_code = CEM_ERROR_NULL_ARGUMENT


class ArgumentError(CematrixError, ValueError):
    """An argument value is outside its admissible domain."""
    default_code = CEM_ERROR_INVALID_ARGUMENT


class ShapeMismatchError(CematrixError, ValueError):
    """Operand dimensions are incompatible with the requested operation."""
    default_code = CEM_ERROR_DIMENSION_MISMATCH


class IndexRangeError(CematrixError, IndexError):
    """An index falls outside the valid bounds."""
    default_code = CEM_ERROR_RANGE_ERROR


class InvalidOptionError(CematrixError, ValueError):
    """A flag or mode parameter is not in its recognized value set."""
    default_code = CEM_ERROR_INVALID_OPTION


class ReadOnlyAccessError(CematrixError, PermissionError):
    """Attempt to mutate a matrix through a read-only wrapper."""
    default_code = CEM_ERROR_READ_ONLY


class RankDeficiencyError(CematrixError, ArithmeticError):
    """A division/solve operand failed the numerical rank check."""
    default_code = CEM_ERROR_RANK_DEFICIENT


class NonConvergenceError(CematrixError, ArithmeticError):
    """An iterative decomposition exceeded its iteration budget."""
    default_code = CEM_ERROR_CONVERGENCE_ERROR


class BiasAdjustmentUndefinedError(CematrixError, ValueError):
    """Bias adjustment requested on too few observations."""
    default_code = CEM_ERROR_BIAS_UNDEFINED


_CODE_TO_CLASS = {
    CEM_ERROR_NULL_ARGUMENT: NullArgumentError,
    CEM_ERROR_INVALID_ARGUMENT: ArgumentError,
    CEM_ERROR_DIMENSION_MISMATCH: ShapeMismatchError,
    CEM_ERROR_RANGE_ERROR: IndexRangeError,
    CEM_ERROR_INVALID_OPTION: InvalidOptionError,
    CEM_ERROR_READ_ONLY: ReadOnlyAccessError,
    CEM_ERROR_RANK_DEFICIENT: RankDeficiencyError,
    CEM_ERROR_CONVERGENCE_ERROR: NonConvergenceError,
    CEM_ERROR_BIAS_UNDEFINED: BiasAdjustmentUndefinedError,
}


# =============================================================================
# Validation Helpers
# =============================================================================

def check_not_none(value, param_name: str) -> None:
    """Raise NullArgumentError if value is None."""
    if value is None:
        raise NullArgumentError(param_name=param_name)


def check_positive(value: int, param_name: str) -> None:
    """Raise ArgumentError unless value is strictly positive."""
    if value < 1:
        raise ArgumentError("Parameter must be positive", param_name)


def check_open_unit_interval(value: float, param_name: str) -> None:
    """Raise ArgumentError unless 0 < value < 1."""
    if not (0.0 < value < 1.0):
        raise ArgumentError(
            "Parameter must be in the open interval (0, 1)", param_name
        )


__all__ = [
    "CEM_OK",
    "CEM_ERROR_UNKNOWN",
    "CEM_ERROR_NULL_ARGUMENT",
    "CEM_ERROR_INVALID_ARGUMENT",
    "CEM_ERROR_DIMENSION_MISMATCH",
    "CEM_ERROR_RANGE_ERROR",
    "CEM_ERROR_INVALID_OPTION",
    "CEM_ERROR_READ_ONLY",
    "CEM_ERROR_RANK_DEFICIENT",
    "CEM_ERROR_CONVERGENCE_ERROR",
    "CEM_ERROR_BIAS_UNDEFINED",
    "CematrixError",
    "NullArgumentError",
    "ArgumentError",
    "ShapeMismatchError",
    "IndexRangeError",
    "InvalidOptionError",
    "ReadOnlyAccessError",
    "RankDeficiencyError",
    "NonConvergenceError",
    "BiasAdjustmentUndefinedError",
    "error_message",
    "check_not_none",
    "check_positive",
    "check_open_unit_interval",
]
