"""
Pytest configuration and fixtures for pycurves tests.

This module provides shared fixtures for testing:
- Configuration fixtures
- Polynomial fixtures
- Linear variable fixtures
- Temporary files fixtures
"""

from __future__ import annotations

import os
from pathlib import Path

import numpy as np
import pytest


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_global_config(monkeypatch):
    """Every test starts from the default configuration."""
    from pycurves.config import reset_config

    for key in list(os.environ):
        if key.startswith("PYCURVES_") and not key.startswith("PYCURVES_LOG_"):
            monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def curves_config():
    """Create typed pycurves configuration."""
    from pycurves.config import CurvesConfig

    return CurvesConfig()


# =============================================================================
# Polynomial Fixtures
# =============================================================================


@pytest.fixture
def cubic_coefficients() -> np.ndarray:
    """3D cubic: one column per degree."""
    return np.array(
        [
            [1.0, 4.0, 7.0, 10.0],
            [2.0, 5.0, 8.0, 11.0],
            [3.0, 6.0, 9.0, 12.0],
        ]
    )


@pytest.fixture
def cubic(cubic_coefficients):
    """Safe 3D cubic polynomial on [0, 1]."""
    from pycurves import Polynomial

    return Polynomial(cubic_coefficients, 0.0, 1.0, safe=True)


@pytest.fixture
def shifted_cubic(cubic_coefficients):
    """Same coefficients as ``cubic`` on [1, 3]."""
    from pycurves import Polynomial

    return Polynomial(cubic_coefficients, 1.0, 3.0, safe=True)


@pytest.fixture
def c2_boundary() -> dict:
    """2D boundary conditions for a quintic on [0.5, 2.5]."""
    return {
        "init": np.array([1.0, -2.0]),
        "d_init": np.array([0.5, 0.0]),
        "dd_init": np.array([0.0, 1.0]),
        "end": np.array([3.0, 4.0]),
        "d_end": np.array([-1.0, 2.0]),
        "dd_end": np.array([0.5, -0.5]),
        "t_min": 0.5,
        "t_max": 2.5,
    }


@pytest.fixture
def sample_times():
    """Times inside [0, 1]."""
    return np.linspace(0.0, 1.0, 11)


# =============================================================================
# Linear Variable Fixtures
# =============================================================================


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def mixed_variable(rng):
    """3D point depending on a 4D decision vector."""
    from pycurves import LinearVariable

    return LinearVariable(rng.normal(size=(3, 4)), rng.normal(size=3))


@pytest.fixture
def other_mixed_variable(rng):
    from pycurves import LinearVariable

    return LinearVariable(rng.normal(size=(3, 4)), rng.normal(size=3))


@pytest.fixture
def parameter_vector(rng) -> np.ndarray:
    return rng.normal(size=4)


# =============================================================================
# Temporary Files Fixtures
# =============================================================================


@pytest.fixture
def temp_config_file(tmp_path) -> Path:
    """Create a temporary configuration file."""
    import yaml

    config = {
        "polynomial": {
            "safe": True,
        },
        "comparison": {
            "precision": 1e-9,
            "sampling_step": 0.05,
        },
    }

    config_path = tmp_path / "test_config.yml"
    with open(config_path, "w") as f:
        yaml.dump(config, f)

    return config_path
