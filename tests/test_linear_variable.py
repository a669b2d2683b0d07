"""
Tests for linear variables and their materialization.
"""

from __future__ import annotations

import copy

import casadi as cd
import numpy as np
import pytest

from pycurves import LinearVariable, Polynomial, evaluate_linear
from pycurves.exceptions import DimensionMismatchError, InvalidArgumentError


class WaypointCurve:
    """Minimal curve of linear-variable waypoints."""

    def __init__(self, waypoints, t_min, t_max):
        self._waypoints = list(waypoints)
        self._t_min = t_min
        self._t_max = t_max

    def waypoints(self):
        return self._waypoints

    def min(self):
        return self._t_min

    def max(self):
        return self._t_max


class TestConstruction:
    """Tests for the three construction forms."""

    def test_default_is_zero(self):
        var = LinearVariable()
        assert var.is_zero()
        assert var.size() == 0
        assert var.norm() == 0.0
        assert var.B().shape == (0, 0)
        assert var.c().shape == (0,)

    def test_constant(self):
        var = LinearVariable.constant([1.0, 2.0, 3.0])
        assert not var.is_zero()
        assert np.array_equal(var.B(), np.zeros((3, 3)))
        assert var.size() == 3

    def test_mixed(self, mixed_variable):
        assert not mixed_variable.is_zero()
        assert mixed_variable.B().shape == (3, 4)
        assert mixed_variable.size() == 4

    def test_b_only(self):
        var = LinearVariable(np.eye(2))
        assert np.array_equal(var.c(), np.zeros(2))

    def test_row_mismatch(self):
        with pytest.raises(InvalidArgumentError):
            LinearVariable(np.ones((3, 2)), np.ones(2))

    def test_sized_zero(self):
        """Zero(dim) carries a dim x dim linear part but is still the zero element."""
        var = LinearVariable.Zero(3)
        assert var.is_zero()
        assert var.B().shape == (3, 3)
        assert var.size() == 0
        assert var.is_approx(LinearVariable())
        assert LinearVariable().is_approx(var)


class TestEvaluation:
    """Tests for resolving a variable against a parameter vector."""

    def test_mixed(self, mixed_variable, parameter_vector):
        expected = mixed_variable.B() @ parameter_vector + mixed_variable.c()
        assert np.allclose(mixed_variable(parameter_vector), expected)

    def test_constant_ignores_parameters(self):
        var = LinearVariable.constant([1.0, -1.0])
        assert np.array_equal(var([5.0, 7.0]), [1.0, -1.0])

    def test_zero_ignores_parameters(self):
        """The zero fast path never looks at x."""
        assert np.array_equal(LinearVariable.Zero(2)(np.ones(17)), np.zeros(2))
        assert LinearVariable()(np.ones(3)).size == 0

    def test_safe_length_check(self, mixed_variable):
        with pytest.raises(DimensionMismatchError) as excinfo:
            mixed_variable(np.ones(3))
        assert excinfo.value.details == {"expected": 4, "actual": 3}

    def test_safe_by_default(self):
        assert LinearVariable().safe is True

    def test_configured_default(self, monkeypatch):
        from pycurves.config import reset_config

        monkeypatch.setenv("PYCURVES_LINEAR_VARIABLE_SAFE", "false")
        reset_config()
        assert LinearVariable(np.eye(2)).safe is False

    def test_symbolic(self, mixed_variable, parameter_vector):
        """The casadi expression agrees with numeric evaluation."""
        x = cd.SX.sym("x", 4)
        f = cd.Function("f", [x], [mixed_variable.symbolic(x)])
        assert np.allclose(np.array(f(parameter_vector)).ravel(), mixed_variable(parameter_vector))

    def test_symbolic_length_check(self, mixed_variable):
        with pytest.raises(DimensionMismatchError):
            mixed_variable.symbolic(cd.SX.sym("x", 3))


class TestAlgebra:
    """Tests for the affine algebra."""

    def test_zero_is_neutral(self, mixed_variable):
        assert (LinearVariable() + mixed_variable).is_approx(mixed_variable)
        assert (mixed_variable + LinearVariable()).is_approx(mixed_variable)
        assert (LinearVariable.Zero(3) + mixed_variable).is_approx(mixed_variable)

    def test_difference_with_itself_is_zero(self, mixed_variable):
        assert (mixed_variable - mixed_variable).is_approx(LinearVariable())
        assert (mixed_variable - mixed_variable).norm() == 0.0

    def test_addition_is_linear(self, mixed_variable, other_mixed_variable, parameter_vector):
        total = mixed_variable + other_mixed_variable
        expected = mixed_variable(parameter_vector) + other_mixed_variable(parameter_vector)
        assert np.allclose(total(parameter_vector), expected)

    def test_subtraction_is_linear(self, mixed_variable, other_mixed_variable, parameter_vector):
        difference = mixed_variable - other_mixed_variable
        expected = mixed_variable(parameter_vector) - other_mixed_variable(parameter_vector)
        assert np.allclose(difference(parameter_vector), expected)

    def test_operators_do_not_alias(self, mixed_variable, other_mixed_variable):
        before = copy.deepcopy(mixed_variable)
        total = mixed_variable + other_mixed_variable
        total += other_mixed_variable
        _ = mixed_variable * 3.0
        assert mixed_variable.is_approx(before)
        assert not np.shares_memory(total.B(), mixed_variable.B())

    def test_inplace_add_on_zero_adopts_operand(self, mixed_variable):
        var = LinearVariable()
        var += mixed_variable
        assert not var.is_zero()
        assert np.array_equal(var.B(), mixed_variable.B())
        assert np.array_equal(var.c(), mixed_variable.c())

    def test_inplace_subtract_on_zero_negates(self, mixed_variable, parameter_vector):
        var = LinearVariable.Zero(3)
        var -= mixed_variable
        assert np.allclose(var(parameter_vector), -mixed_variable(parameter_vector))

    def test_inplace_returns_same_object(self, mixed_variable, other_mixed_variable):
        var = mixed_variable
        var += other_mixed_variable
        assert var is mixed_variable

    def test_scaling(self, mixed_variable, parameter_vector):
        value = mixed_variable(parameter_vector)
        assert np.allclose((2.0 * mixed_variable)(parameter_vector), 2.0 * value)
        assert np.allclose((mixed_variable * 2.0)(parameter_vector), 2.0 * value)
        assert np.allclose((np.float64(2.0) * mixed_variable)(parameter_vector), 2.0 * value)
        assert np.allclose((mixed_variable / 4.0)(parameter_vector), value / 4.0)
        assert np.allclose((-mixed_variable)(parameter_vector), -value)

    def test_inplace_scaling(self, mixed_variable, parameter_vector):
        value = mixed_variable(parameter_vector)
        mixed_variable *= 3.0
        mixed_variable /= 2.0
        assert np.allclose(mixed_variable(parameter_vector), 1.5 * value)

    def test_scaling_zero_stays_zero(self):
        assert (LinearVariable() * 5.0).is_zero()

    def test_variable_product_is_not_defined(self, mixed_variable):
        with pytest.raises(TypeError):
            mixed_variable * mixed_variable

    def test_incompatible_shapes(self, mixed_variable):
        with pytest.raises(InvalidArgumentError):
            mixed_variable + LinearVariable.constant([1.0, 2.0, 3.0])

    def test_named_methods(self, mixed_variable, other_mixed_variable, parameter_vector):
        expected = 2.0 * (mixed_variable(parameter_vector) - other_mixed_variable(parameter_vector))
        result = copy.copy(mixed_variable).subtract(other_mixed_variable).scale(2.0)
        assert np.allclose(result(parameter_vector), expected)


class TestNorm:
    """Tests for norm and approximate equality."""

    def test_norm_sums_component_norms(self):
        """Sum of the two norms, not the norm of [B | c]."""
        var = LinearVariable(np.array([[3.0, 4.0]]), np.array([12.0]))
        assert var.norm() == pytest.approx(17.0)

    def test_is_approx_precision(self, mixed_variable):
        shifted = LinearVariable(mixed_variable.B(), mixed_variable.c() + 1e-6)
        assert not mixed_variable.is_approx(shifted)
        assert mixed_variable.is_approx(shifted, prec=1e-3)

    def test_is_approx_different_shapes(self, mixed_variable):
        """Variables of different shapes compare unequal instead of raising."""
        constant = LinearVariable.constant([1.0, 2.0, 3.0])
        assert constant.is_approx(mixed_variable) is False
        assert mixed_variable.is_approx(constant) is False
        assert LinearVariable.Zero(3).is_approx(mixed_variable) is False


class TestSerialization:
    """Tests for field export and import."""

    def test_rebuild_mixed(self, mixed_variable, parameter_vector):
        data = mixed_variable.to_dict()
        assert data["type"] == "linear_variable"
        rebuilt = LinearVariable.from_dict(data)
        assert rebuilt.is_approx(mixed_variable)
        assert np.allclose(rebuilt(parameter_vector), mixed_variable(parameter_vector))

    def test_rebuild_keeps_zero_flag(self):
        rebuilt = LinearVariable.from_dict(LinearVariable.Zero(2).to_dict())
        assert rebuilt.is_zero()
        assert rebuilt.B().shape == (2, 2)


class TestEvaluateLinear:
    """Tests for materializing a curve of linear variables."""

    def test_materialize_into_polynomial(self, mixed_variable, other_mixed_variable, parameter_vector):
        waypoints = [mixed_variable, other_mixed_variable, LinearVariable.Zero(3) + mixed_variable]
        curve = WaypointCurve(waypoints, 1.0, 2.0)
        fixed = evaluate_linear(curve, parameter_vector, Polynomial)
        assert isinstance(fixed, Polynomial)
        assert fixed.time_range() == (1.0, 2.0)
        assert fixed.degree() == 2
        assert np.allclose(fixed(1.0), mixed_variable(parameter_vector))
        assert np.allclose(fixed.coeff_at_degree(1), other_mixed_variable(parameter_vector))

    def test_materialize_checks_parameters(self, mixed_variable):
        curve = WaypointCurve([mixed_variable], 0.0, 1.0)
        with pytest.raises(DimensionMismatchError):
            evaluate_linear(curve, np.ones(2), Polynomial)
