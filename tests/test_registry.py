"""
Tests for the curve type registry.
"""

from __future__ import annotations

import numpy as np
import pytest

from pycurves import LinearVariable, Polynomial
from pycurves.exceptions import SerializationError
from pycurves.registry import (
    CURVE_TYPES,
    curve_from_dict,
    get_curve_class,
    list_curve_types,
    register_curve_type,
)


class TestRegistry:
    """Tests for registration and lookup."""

    def test_builtin_types(self):
        assert "polynomial" in list_curve_types()
        assert "linear_variable" in list_curve_types()
        assert get_curve_class("polynomial") is Polynomial
        assert get_curve_class("linear_variable") is LinearVariable

    def test_unknown_type(self):
        assert get_curve_class("bezier") is None

    def test_register_custom_type(self, monkeypatch):
        monkeypatch.setitem(CURVE_TYPES, "polynomial_alias", Polynomial)
        assert get_curve_class("polynomial_alias") is Polynomial

    def test_register_returns_class(self, monkeypatch):
        monkeypatch.setattr("pycurves.registry.CURVE_TYPES", dict(CURVE_TYPES))
        assert register_curve_type("other", Polynomial) is Polynomial
        assert get_curve_class("other") is Polynomial


class TestCurveFromDict:
    """Tests for dispatching on the type tag."""

    def test_polynomial(self, cubic):
        rebuilt = curve_from_dict(cubic.to_dict())
        assert isinstance(rebuilt, Polynomial)
        assert rebuilt == cubic

    def test_linear_variable(self, mixed_variable, parameter_vector):
        rebuilt = curve_from_dict(mixed_variable.to_dict(), version=1)
        assert isinstance(rebuilt, LinearVariable)
        assert np.allclose(rebuilt(parameter_vector), mixed_variable(parameter_vector))

    def test_missing_tag(self, cubic):
        data = cubic.to_dict()
        del data["type"]
        with pytest.raises(SerializationError):
            curve_from_dict(data)

    def test_unknown_tag(self, cubic):
        data = cubic.to_dict()
        data["type"] = "bezier"
        with pytest.raises(SerializationError) as excinfo:
            curve_from_dict(data)
        assert "bezier" in str(excinfo.value)

    def test_tag_mismatch(self, mixed_variable):
        with pytest.raises(SerializationError):
            Polynomial.from_dict(mixed_variable.to_dict())
