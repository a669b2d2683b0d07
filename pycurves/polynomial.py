"""
Polynomial curves of arbitrary dimension and degree.

A polynomial is defined on [t_min, t_max] by

    x(t) = c_0 + c_1 (t - t_min) + ... + c_N (t - t_min)^N

where the coefficients c_i are stored as the columns of a ``dim x (N + 1)``
matrix. Besides raw coefficients, polynomials can be built from boundary
conditions:

- C0 (degree 1): connects ``init`` and ``end``
- C1 (degree 3): also matches the first derivatives at both ends
- C2 (degree 5): also matches the second derivatives at both ends

The C1/C2 coefficients come from inverting the (dimension independent)
boundary-condition matrix once and applying it to every dimension.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Union

import numpy as np

from pycurves.config import default_precision, default_safe
from pycurves.curve_abc import CurveABC, arrays_approx_equal
from pycurves.exceptions import InvalidArgumentError, InvalidCurveStateError, OutOfRangeError
from pycurves.logging import get_logger, profile_scope
from pycurves.serialization import Serializable, list_to_matrix, matrix_to_list, require_fields

logger = get_logger("polynomial")

# Above this the boundary-condition matrix is treated as ill-conditioned
ILL_CONDITIONED_THRESHOLD = 1e12

CoefficientsLike = Union[np.ndarray, Sequence[Sequence[float]]]


def fact(n: int, order: int) -> float:
    """Falling factorial n (n - 1) ... (n - order + 1)."""
    res = 1.0
    for i in range(order):
        res *= n - i
    return res


def _as_point(point: Any) -> np.ndarray:
    return np.atleast_1d(np.asarray(point, dtype=float)).ravel()


def _check_same_dimensions(reference_name: str, reference: np.ndarray, **points: np.ndarray) -> None:
    for name, point in points.items():
        if point.size != reference.size:
            raise InvalidArgumentError(
                f"{reference_name} and {name} points must have the same dimensions.",
                **{reference_name: reference.size, name: point.size},
            )


def boundary_matrix(T: float, n_derivatives: int) -> np.ndarray:
    """Boundary-condition matrix mapping coefficients to end-point values.

    Rows are ordered by derivative order, start point first:
    ``x(0), x(T), x'(0), x'(T), ...`` up to derivative ``n_derivatives``.
    For ``n_derivatives == 1`` and ``T`` the interval length this is::

        [1  0  0   0   ]
        [1  T  T^2 T^3 ]
        [0  1  0   0   ]
        [0  1  2T  3T^2]
    """
    size = 2 * (n_derivatives + 1)
    m = np.zeros((size, size))
    for k in range(n_derivatives + 1):
        m[2 * k, k] = fact(k, k)
        for j in range(k, size):
            m[2 * k + 1, j] = fact(j, k) * T ** (j - k)
    return m


class Polynomial(CurveABC, Serializable):
    """Polynomial curve of arbitrary dimension and degree.

    Args:
        coefficients: Either a 2-D ``numpy`` array whose column ``i`` is the
            coefficient of ``(t - t_min)^i``, or an ordered sequence of
            per-degree coefficient vectors (zero order first). Plain nested
            lists always take the second form: ``[[1, 2, 3]]`` is a single
            3-D constant coefficient, not a 1 x 3 matrix. Pass
            ``np.array(...)`` for the matrix form. ``None`` builds the empty
            curve, which cannot be evaluated.
        t_min: Lower bound of the definition interval.
        t_max: Upper bound of the definition interval.
        safe: Enable range and consistency checks. ``None`` takes the
            configured default (``polynomial.safe``) at construction.
    """

    serialization_tag = "polynomial"

    def __init__(
        self,
        coefficients: Optional[CoefficientsLike] = None,
        t_min: float = 0.0,
        t_max: float = 0.0,
        safe: Optional[bool] = None,
    ):
        self.safe = default_safe("polynomial") if safe is None else bool(safe)
        self._t_min = float(t_min)
        self._t_max = float(t_max)

        if coefficients is None:
            self._coefficients = np.zeros((0, 0))
            self._dim = 0
            self._degree = 0
            return

        self._coefficients = self._init_coeffs(coefficients)
        self._dim = self._coefficients.shape[0]
        self._degree = self._coefficients.shape[1] - 1
        self._safe_check()

    @staticmethod
    def _init_coeffs(coefficients: CoefficientsLike) -> np.ndarray:
        if isinstance(coefficients, np.ndarray) and coefficients.ndim == 2:
            if coefficients.shape[1] == 0:
                raise InvalidArgumentError("a polynomial needs at least one coefficient")
            return np.array(coefficients, dtype=float)

        columns = [_as_point(c) for c in coefficients]
        if not columns:
            raise InvalidArgumentError("a polynomial needs at least one coefficient")
        dim = columns[0].size
        for degree, column in enumerate(columns):
            if column.size != dim:
                raise InvalidArgumentError(
                    "all coefficients must have the same dimensions.",
                    expected=dim,
                    degree=degree,
                    actual=column.size,
                )
        return np.column_stack(columns)

    def _safe_check(self, degree: Optional[int] = None) -> None:
        if not self.safe:
            return
        if self._t_min > self._t_max:
            raise InvalidArgumentError("Tmin should be inferior to Tmax", t_min=self._t_min, t_max=self._t_max)
        expected = self._degree if degree is None else degree
        if self._coefficients.shape[1] != expected + 1:
            raise InvalidArgumentError(
                "Spline order and coefficients do not match",
                degree=expected,
                columns=self._coefficients.shape[1],
            )

    # ------------------------------------------------------------------
    # Boundary-condition constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_points(
        cls, init: Any, end: Any, t_min: float, t_max: float, safe: Optional[bool] = None
    ) -> "Polynomial":
        """Degree 1 polynomial connecting exactly ``init`` at t_min and ``end`` at t_max."""
        init, end = _as_point(init), _as_point(end)
        _check_same_dimensions("init", init, end=end)
        safe = default_safe("polynomial") if safe is None else bool(safe)
        if safe and t_max == t_min:
            raise InvalidArgumentError(
                "cannot connect two points over an empty interval", t_min=t_min, t_max=t_max
            )
        coefficients = np.column_stack([init, (end - init) / (t_max - t_min)])
        return cls(coefficients, t_min, t_max, safe=safe)

    @classmethod
    def from_c1(
        cls,
        init: Any,
        d_init: Any,
        end: Any,
        d_end: Any,
        t_min: float,
        t_max: float,
        safe: Optional[bool] = None,
    ) -> "Polynomial":
        """Degree 3 polynomial matching position and velocity at both ends."""
        init, d_init, end, d_end = (_as_point(p) for p in (init, d_init, end, d_end))
        _check_same_dimensions("init", init, end=end, d_init=d_init, d_end=d_end)
        bc = np.vstack([init, end, d_init, d_end])
        return cls(cls._solve_boundary(bc, t_max - t_min, 1), t_min, t_max, safe=safe)

    @classmethod
    def from_c2(
        cls,
        init: Any,
        d_init: Any,
        dd_init: Any,
        end: Any,
        d_end: Any,
        dd_end: Any,
        t_min: float,
        t_max: float,
        safe: Optional[bool] = None,
    ) -> "Polynomial":
        """Degree 5 polynomial matching position, velocity and acceleration at both ends."""
        init, d_init, dd_init, end, d_end, dd_end = (
            _as_point(p) for p in (init, d_init, dd_init, end, d_end, dd_end)
        )
        _check_same_dimensions(
            "init", init, end=end, d_init=d_init, d_end=d_end, dd_init=dd_init, dd_end=dd_end
        )
        bc = np.vstack([init, end, d_init, d_end, dd_init, dd_end])
        return cls(cls._solve_boundary(bc, t_max - t_min, 2), t_min, t_max, safe=safe)

    @staticmethod
    def _solve_boundary(bc: np.ndarray, T: float, n_derivatives: int) -> np.ndarray:
        """Solve ``m @ coeffs = bc`` for every dimension at once.

        ``bc`` holds one boundary value per row and one dimension per column;
        the result is the ``dim x (degree + 1)`` coefficient matrix.
        """
        with profile_scope(f"C{n_derivatives} boundary fit (dim={bc.shape[1]})", logger=logger):
            m = boundary_matrix(T, n_derivatives)
            try:
                m_inv = np.linalg.inv(m)
            except np.linalg.LinAlgError as e:
                raise InvalidArgumentError(
                    "boundary conditions cannot be solved over a degenerate interval", T=T
                ) from e
            condition = np.linalg.cond(m)
            if condition > ILL_CONDITIONED_THRESHOLD:
                logger.warning(
                    "Ill-conditioned C%d boundary system (cond=%.3g, T=%g)", n_derivatives, condition, T
                )
            return (m_inv @ bc).T

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _check_if_not_empty(self) -> None:
        if self._coefficients.size == 0:
            raise InvalidCurveStateError("polynomial")

    def _check_time(self, t: float, what: str) -> None:
        if self.safe and (t < self._t_min or t > self._t_max):
            raise OutOfRangeError(t, self._t_min, self._t_max, what=what)

    def __call__(self, t: float) -> np.ndarray:
        """Evaluate the polynomial at time ``t`` using Horner's scheme."""
        self._check_if_not_empty()
        self._check_time(t, "evaluate")
        dt = t - self._t_min
        h = self._coefficients[:, self._degree].copy()
        for i in range(self._degree - 1, -1, -1):
            h = dt * h + self._coefficients[:, i]
        return h

    def derivate(self, t: float, order: int) -> np.ndarray:
        """Evaluate the derivative of order ``order`` at time ``t``.

        Computed directly from the coefficients, without building the
        derivative curve.
        """
        self._check_if_not_empty()
        self._check_time(t, "evaluate derivative of")
        if order < 0:
            raise InvalidArgumentError("derivative order must be >= 0", order=order)
        dt = t - self._t_min
        cdt = 1.0
        current_point = np.zeros(self._dim)
        for i in range(order, self._degree + 1):
            current_point += cdt * self._coefficients[:, i] * fact(i, order)
            cdt *= dt
        return current_point

    def compute_derivate(self, order: int) -> "Polynomial":
        """Build the polynomial of the derivative of order ``order``.

        Differentiating more times than the degree gives the zero polynomial
        of degree 0.
        """
        self._check_if_not_empty()
        if order < 0:
            raise InvalidArgumentError("derivative order must be >= 0", order=order)
        coefficients = self._coefficients
        for _ in range(order):
            coefficients = self._deriv_coeff(coefficients)
        logger.debug("Derivative of order %d: degree %d -> %d", order, self._degree, coefficients.shape[1] - 1)
        return Polynomial(coefficients.copy(), self._t_min, self._t_max, safe=self.safe)

    @staticmethod
    def _deriv_coeff(coeff: np.ndarray) -> np.ndarray:
        if coeff.shape[1] == 1:
            # only the constant part is left
            return np.zeros((coeff.shape[0], 1))
        return coeff[:, 1:] * np.arange(1, coeff.shape[1], dtype=float)

    def is_approx(
        self,
        other: CurveABC,
        prec: Optional[float] = None,
        order: Optional[int] = None,
    ) -> bool:
        """Check equality with ``other`` up to ``prec``.

        Against another polynomial the coefficients fully determine the
        function, so the time range, dimension and degree are compared
        exactly and the coefficient matrices fuzzily; ``order`` is unused.
        Any other curve falls back to the sampling comparison.
        """
        if not isinstance(other, Polynomial):
            return super().is_approx(other, prec, order)
        if prec is None:
            prec = default_precision()
        return (
            self._t_min == other._t_min
            and self._t_max == other._t_max
            and self._dim == other._dim
            and self._degree == other._degree
            and arrays_approx_equal(self._coefficients, other._coefficients, prec)
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def dim(self) -> int:
        return self._dim

    def min(self) -> float:
        return self._t_min

    def max(self) -> float:
        return self._t_max

    def degree(self) -> int:
        return self._degree

    def coeff(self) -> np.ndarray:
        """Copy of the ``dim x (degree + 1)`` coefficient matrix."""
        return self._coefficients.copy()

    def coeff_at_degree(self, degree: int) -> np.ndarray:
        """Coefficient of ``(t - t_min)^degree``, empty if above the degree."""
        if 0 <= degree <= self._degree and self._coefficients.size:
            return self._coefficients[:, degree].copy()
        return np.zeros(0)

    def __copy__(self) -> "Polynomial":
        if self._coefficients.size == 0:
            return Polynomial(None, self._t_min, self._t_max, safe=self.safe)
        return Polynomial(self._coefficients.copy(), self._t_min, self._t_max, safe=self.safe)

    def __deepcopy__(self, memo: Dict[int, Any]) -> "Polynomial":
        return self.__copy__()

    def __repr__(self) -> str:
        return (
            f"Polynomial(dim={self._dim}, degree={self._degree}, "
            f"t_min={self._t_min}, t_max={self._t_max}, safe={self.safe})"
        )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.serialization_tag,
            "dim": self._dim,
            "degree": self._degree,
            "t_min": self._t_min,
            "t_max": self._t_max,
            "coefficients": matrix_to_list(self._coefficients),
            "safe": self.safe,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], version: Optional[int] = None) -> "Polynomial":
        require_fields(data, ("dim", "degree", "t_min", "t_max", "coefficients"), cls.serialization_tag)
        dim, degree = int(data["dim"]), int(data["degree"])
        safe = data.get("safe")
        if dim == 0 or not data["coefficients"]:
            return cls(None, data["t_min"], data["t_max"], safe=safe)
        coefficients = list_to_matrix(data["coefficients"], dim, len(data["coefficients"][0]))
        polynomial = cls(coefficients, data["t_min"], data["t_max"], safe=safe)
        polynomial._safe_check(degree)
        return polynomial
