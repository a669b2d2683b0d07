"""
pycurves - Parametric curves for trajectory generation and optimization.

This package provides:
- CurveABC: the abstract curve interface (evaluation, derivatives, equality)
- Polynomial: polynomial curves, including C0/C1/C2 boundary-condition fits
- LinearVariable: affine points B x + c over an unresolved decision vector

Basic Usage:
    from pycurves import Polynomial

    curve = Polynomial.from_c1(init, d_init, end, d_end, 0.0, 1.0, safe=True)
    position = curve(0.5)
    velocity = curve.derivate(0.5, 1)

For more control:
    from pycurves.config import CurvesConfig, ConfigManager
    from pycurves.logging import LOG_DEBUG, profile_scope
    from pycurves.exceptions import OutOfRangeError
"""

from __future__ import annotations

__version__ = "0.1.0"

# =============================================================================
# Curves
# =============================================================================

from pycurves.curve_abc import CurveABC, arrays_approx_equal
from pycurves.polynomial import Polynomial
from pycurves.linear_variable import LinearVariable, evaluate_linear

# =============================================================================
# Serialization
# =============================================================================

from pycurves.serialization import Serializable
from pycurves.registry import (
    register_curve_type,
    get_curve_class,
    list_curve_types,
    curve_from_dict,
    CURVE_TYPES,
)

# =============================================================================
# Config
# =============================================================================

from pycurves.config import (
    create_default_config,
    load_config,
    CurvesConfig,
    ConfigManager,
    get_config,
    init_config,
    reset_config,
)

# =============================================================================
# Logging
# =============================================================================

from pycurves.logging import (
    LOG_DEBUG,
    get_logger,
    setup_logging,
    profile_scope,
    timed,
)

# =============================================================================
# Exceptions
# =============================================================================

from pycurves.exceptions import (
    CurvesError,
    ConfigurationError,
    ConfigNotFoundError,
    ConfigValidationError,
    InvalidArgumentError,
    OutOfRangeError,
    InvalidCurveStateError,
    DimensionMismatchError,
    SerializationError,
)

__all__ = [
    "__version__",
    # Curves
    "CurveABC",
    "arrays_approx_equal",
    "Polynomial",
    "LinearVariable",
    "evaluate_linear",
    # Serialization
    "Serializable",
    "register_curve_type",
    "get_curve_class",
    "list_curve_types",
    "curve_from_dict",
    "CURVE_TYPES",
    # Config
    "create_default_config",
    "load_config",
    "CurvesConfig",
    "ConfigManager",
    "get_config",
    "init_config",
    "reset_config",
    # Logging
    "LOG_DEBUG",
    "get_logger",
    "setup_logging",
    "profile_scope",
    "timed",
    # Exceptions
    "CurvesError",
    "ConfigurationError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "InvalidArgumentError",
    "OutOfRangeError",
    "InvalidCurveStateError",
    "DimensionMismatchError",
    "SerializationError",
]
