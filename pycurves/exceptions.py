"""
pycurves Exception Hierarchy.

This module defines all custom exceptions raised by the pycurves package.
Every error is raised synchronously at the offending call and carries:
- A human-readable message
- A ``details`` dictionary with the values that caused the failure

The curve errors also derive from the matching builtin (``ValueError`` or
``RuntimeError``) so generic callers can catch them without importing
pycurves.
"""

from typing import Any, Optional


class CurvesError(Exception):
    """Base exception for all pycurves errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(CurvesError):
    """Error in configuration loading or validation."""

    pass


class ConfigNotFoundError(ConfigurationError):
    """Configuration file not found."""

    def __init__(self, config_path: str):
        super().__init__(
            f"Configuration file not found: {config_path}",
            details={"path": config_path},
        )


class ConfigValidationError(ConfigurationError):
    """Configuration validation failed."""

    def __init__(self, key: str, reason: str, value: Any = None):
        details = {"key": key, "reason": reason}
        if value is not None:
            details["value"] = str(value)
        super().__init__(
            f"Invalid configuration for '{key}': {reason}",
            details=details,
        )


# =============================================================================
# Curve Errors
# =============================================================================


class InvalidArgumentError(CurvesError, ValueError):
    """Invalid constructor argument (dimensions, interval, degree)."""

    def __init__(self, reason: str, **details: Any):
        super().__init__(reason, details=details)


class OutOfRangeError(CurvesError, ValueError):
    """Time outside the definition interval of a safe curve."""

    def __init__(self, t: float, t_min: float, t_max: float, what: str = "evaluate"):
        super().__init__(
            f"Cannot {what} curve: time t should be in range [Tmin, Tmax] of the curve",
            details={"t": t, "t_min": t_min, "t_max": t_max},
        )


class InvalidCurveStateError(CurvesError, RuntimeError):
    """Operation on a curve that has no coefficients set."""

    def __init__(self, curve_name: str = "polynomial"):
        super().__init__(
            f"Error in {curve_name}: there is no coefficients set, "
            "did you use the empty constructor?",
            details={"curve": curve_name},
        )


class DimensionMismatchError(CurvesError, ValueError):
    """Parameter vector length does not match the linear part of a variable."""

    def __init__(self, expected: int, actual: int):
        super().__init__(
            "Cannot evaluate linear variable, variable value does not have the correct dimension",
            details={"expected": expected, "actual": actual},
        )


# =============================================================================
# Serialization Errors
# =============================================================================


class SerializationError(CurvesError):
    """Malformed exported fields or unknown curve type tag."""

    def __init__(self, reason: str, **details: Any):
        super().__init__(f"Serialization error: {reason}", details=details)
