"""
Linear variables: points of the form p = B x + c.

A linear variable stores a control point as an affine function of an
external decision vector ``x`` that is resolved later, typically by an
optimizer. Variables form a vector-space-like algebra (addition,
subtraction, scaling), so curve code written against points works
unchanged on them.

Three construction forms exist:

- ``LinearVariable()``: the zero element. Flagged zero, ``B`` and ``c``
  are empty and evaluation ignores ``x``.
- ``LinearVariable(c=c)`` / ``LinearVariable.constant(c)``: a constant.
  ``B`` is a square zero matrix, the variable is not flagged zero.
- ``LinearVariable(B, c)``: the general mixed form.

A zero-flagged variable always has a zero constant part.
"""

from __future__ import annotations

import numbers
from typing import Any, Callable, Dict, Optional, Sequence

import casadi as cd
import numpy as np

from pycurves.config import default_precision, default_safe
from pycurves.exceptions import DimensionMismatchError, InvalidArgumentError
from pycurves.logging import get_logger, timed
from pycurves.serialization import Serializable, list_to_matrix, matrix_to_list, require_fields

logger = get_logger("linear_variable")


class LinearVariable(Serializable):
    """Affine point ``B x + c`` over an unresolved parameter vector ``x``.

    Args:
        B: Linear part, ``dim x n_x``.
        c: Constant part, ``dim``. Defaults to zeros when only ``B`` is given.
        safe: Check the length of ``x`` on evaluation. ``None`` takes the
            configured default (``linear_variable.safe``) at construction.
    """

    serialization_tag = "linear_variable"
    # numpy scalars defer to __rmul__ instead of broadcasting
    __array_ufunc__ = None

    def __init__(self, B: Optional[Any] = None, c: Optional[Any] = None, safe: Optional[bool] = None):
        self.safe = default_safe("linear_variable") if safe is None else bool(safe)

        if B is None and c is None:
            self._B = np.zeros((0, 0))
            self._c = np.zeros(0)
            self._zero = True
            return

        if B is None:
            self._c = np.atleast_1d(np.asarray(c, dtype=float)).ravel()
            self._B = np.zeros((self._c.size, self._c.size))
        else:
            self._B = np.atleast_2d(np.asarray(B, dtype=float))
            if c is None:
                self._c = np.zeros(self._B.shape[0])
            else:
                self._c = np.atleast_1d(np.asarray(c, dtype=float)).ravel()
            if self._B.shape[0] != self._c.size:
                raise InvalidArgumentError(
                    "B and c must have the same number of rows.",
                    B=self._B.shape,
                    c=self._c.size,
                )
        self._zero = False

    @classmethod
    def constant(cls, c: Any, safe: Optional[bool] = None) -> "LinearVariable":
        return cls(c=c, safe=safe)

    @classmethod
    def Zero(cls, dim: int = 0, safe: Optional[bool] = None) -> "LinearVariable":
        """Zero element carrying a ``dim x dim`` linear part.

        It is flagged zero like ``LinearVariable()``, so both compare equal
        whatever size they carry.
        """
        res = cls(safe=safe)
        res._B = np.zeros((dim, dim))
        res._c = np.zeros(dim)
        return res

    def _copy(self) -> "LinearVariable":
        res = LinearVariable.__new__(LinearVariable)
        res.safe = self.safe
        res._B = self._B.copy()
        res._c = self._c.copy()
        res._zero = self._zero
        return res

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def __call__(self, x: Any) -> np.ndarray:
        """Resolve the variable for the parameter vector ``x``."""
        if self._zero:
            return self._c.copy()
        x = np.asarray(x, dtype=float).ravel()
        if self.safe and self._B.shape[1] != x.size:
            raise DimensionMismatchError(self._B.shape[1], x.size)
        return self._B @ x + self._c

    def symbolic(self, x: Any) -> Any:
        """Build the casadi expression ``B x + c`` for a symbolic ``x``.

        Args:
            x: casadi ``SX``/``MX`` column vector of decision variables.

        Returns:
            casadi expression of the point, to be used in an optimization
            problem. Nothing is resolved here.
        """
        if self._zero:
            return cd.DM(self._c)
        if self.safe and self._B.shape[1] != x.shape[0]:
            raise DimensionMismatchError(self._B.shape[1], x.shape[0])
        return cd.mtimes(cd.DM(self._B), x) + cd.DM(self._c)

    # ------------------------------------------------------------------
    # In-place algebra
    # ------------------------------------------------------------------

    def _check_compatible(self, other: "LinearVariable") -> None:
        if self._B.shape != other._B.shape or self._c.shape != other._c.shape:
            raise InvalidArgumentError(
                "linear variables must have the same dimensions.",
                left=(self._B.shape, self._c.size),
                right=(other._B.shape, other._c.size),
            )

    def add(self, other: "LinearVariable") -> "LinearVariable":
        """Add ``other`` in place and return ``self``."""
        if other._zero:
            return self
        if self._zero:
            self._B = other._B.copy()
            self._c = other._c.copy()
            self._zero = other._zero
            return self
        self._check_compatible(other)
        self._B = self._B + other._B
        self._c = self._c + other._c
        return self

    def subtract(self, other: "LinearVariable") -> "LinearVariable":
        """Subtract ``other`` in place and return ``self``."""
        if other._zero:
            return self
        if self._zero:
            self._B = -other._B
            self._c = -other._c
            self._zero = other._zero
            return self
        self._check_compatible(other)
        self._B = self._B - other._B
        self._c = self._c - other._c
        return self

    def scale(self, k: float) -> "LinearVariable":
        self._B = self._B * k
        self._c = self._c * k
        return self

    def divide(self, k: float) -> "LinearVariable":
        self._B = self._B / k
        self._c = self._c / k
        return self

    def __iadd__(self, other: "LinearVariable") -> "LinearVariable":
        if not isinstance(other, LinearVariable):
            return NotImplemented
        return self.add(other)

    def __isub__(self, other: "LinearVariable") -> "LinearVariable":
        if not isinstance(other, LinearVariable):
            return NotImplemented
        return self.subtract(other)

    def __imul__(self, k: float) -> "LinearVariable":
        if not isinstance(k, numbers.Real):
            return NotImplemented
        return self.scale(k)

    def __itruediv__(self, k: float) -> "LinearVariable":
        if not isinstance(k, numbers.Real):
            return NotImplemented
        return self.divide(k)

    # ------------------------------------------------------------------
    # Free operators, never alias their operands
    # ------------------------------------------------------------------

    def __add__(self, other: "LinearVariable") -> "LinearVariable":
        if not isinstance(other, LinearVariable):
            return NotImplemented
        return self._copy().add(other)

    def __sub__(self, other: "LinearVariable") -> "LinearVariable":
        if not isinstance(other, LinearVariable):
            return NotImplemented
        return self._copy().subtract(other)

    def __mul__(self, k: float) -> "LinearVariable":
        if not isinstance(k, numbers.Real):
            return NotImplemented
        return self._copy().scale(k)

    __rmul__ = __mul__

    def __truediv__(self, k: float) -> "LinearVariable":
        if not isinstance(k, numbers.Real):
            return NotImplemented
        return self._copy().divide(k)

    def __neg__(self) -> "LinearVariable":
        return self._copy().scale(-1.0)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def size(self) -> int:
        return 0 if self._zero else max(self._B.shape[1], self._c.size)

    def norm(self) -> float:
        """``||B|| + ||c||``, the sum of the two norms (not a joint norm)."""
        if self._zero:
            return 0.0
        return float(np.linalg.norm(self._B) + np.linalg.norm(self._c))

    def is_approx(self, other: "LinearVariable", prec: Optional[float] = None) -> bool:
        """Approximate equality; variables of different shapes are never equal."""
        if prec is None:
            prec = default_precision()
        if not (self._zero or other._zero):
            if self._B.shape != other._B.shape or self._c.shape != other._c.shape:
                return False
        return (self - other).norm() < prec

    def B(self) -> np.ndarray:
        return self._B

    def c(self) -> np.ndarray:
        return self._c

    def is_zero(self) -> bool:
        return self._zero

    def __copy__(self) -> "LinearVariable":
        return self._copy()

    def __deepcopy__(self, memo: Dict[int, Any]) -> "LinearVariable":
        return self._copy()

    def __repr__(self) -> str:
        if self._zero:
            return f"LinearVariable(zero, B={self._B.shape})"
        return f"LinearVariable(B={self._B.shape}, c={self._c.size}, safe={self.safe})"

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.serialization_tag,
            "B": matrix_to_list(self._B),
            "B_shape": list(self._B.shape),
            "c": matrix_to_list(self._c),
            "zero": self._zero,
            "safe": self.safe,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], version: Optional[int] = None) -> "LinearVariable":
        require_fields(data, ("B", "c", "zero"), cls.serialization_tag)
        B = np.asarray(data["B"], dtype=float)
        rows, cols = data.get("B_shape", B.shape if B.ndim == 2 else (0, 0))
        res = cls(safe=data.get("safe"))
        res._B = list_to_matrix(data["B"], int(rows), int(cols))
        res._c = np.asarray(data["c"], dtype=float).ravel()
        res._zero = bool(data["zero"])
        return res


@timed
def evaluate_linear(curve: Any, x: Any, curve_type: Callable[..., Any]) -> Any:
    """Materialize a curve of linear variables into a fixed-point curve.

    Args:
        curve: Curve whose ``waypoints()`` are LinearVariable instances and
            which exposes ``min()``/``max()``.
        x: Resolved parameter vector.
        curve_type: Constructor called as ``curve_type(points, t_min, t_max)``.

    Returns:
        A curve of the same family over the same time range.
    """
    waypoints: Sequence[LinearVariable] = curve.waypoints()
    fixed_waypoints = [waypoint(x) for waypoint in waypoints]
    logger.debug("Materialized %d waypoints into %s", len(fixed_waypoints), getattr(curve_type, "__name__", curve_type))
    return curve_type(fixed_waypoints, curve.min(), curve.max())
