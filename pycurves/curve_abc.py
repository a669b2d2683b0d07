"""
Abstract curve interface.

A curve maps a bounded time interval [t_min, t_max] to points of an
n-dimensional space and can be differentiated to arbitrary order. Concrete
curves implement evaluation, point-wise derivatives, derivative curves and
the introspection helpers; approximate equality has a generic sampling
implementation that subclasses may replace with an exact structural test.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Tuple

import numpy as np

from pycurves.config import get_config


def arrays_approx_equal(a: np.ndarray, b: np.ndarray, prec: float) -> bool:
    """Relative fuzzy comparison of two arrays.

    True when ``||a - b|| <= prec * min(||a||, ||b||)``; two all-zero arrays
    are equal. Arrays of different shapes are never equal.
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    if a.shape != b.shape:
        return False
    diff = float(np.sum((a - b) ** 2))
    bound = prec * prec * min(float(np.sum(a ** 2)), float(np.sum(b ** 2)))
    return diff <= bound


class CurveABC(ABC):
    """Curve of arbitrary dimension.

    When ``safe`` is False no verification is made on the evaluation time:
    evaluating outside [t_min, t_max] extrapolates.
    """

    safe: bool = False

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    @abstractmethod
    def __call__(self, t: float) -> np.ndarray:
        """Evaluate the curve at time ``t``."""

    @abstractmethod
    def derivate(self, t: float, order: int) -> np.ndarray:
        """Evaluate the derivative of order ``order`` at time ``t``.

        ``derivate(t, 0)`` equals ``self(t)``.
        """

    @abstractmethod
    def compute_derivate(self, order: int) -> "CurveABC":
        """Return a new, independent curve: the derivative of order ``order``."""

    def is_approx(
        self,
        other: "CurveABC",
        prec: Optional[float] = None,
        order: Optional[int] = None,
    ) -> bool:
        """Check whether ``other`` and ``self`` are equal up to ``prec``.

        The curves are compared by sampling both of them every
        ``comparison.sampling_step`` time units, first the values and then
        every derivative up to ``order``. Subclasses should override this
        with an exact comparison of their members when they can.

        Args:
            other: The other curve.
            prec: Precision threshold (default: configured precision).
            order: Highest derivative order compared (default: configured).
        """
        comparison = get_config().config.comparison
        if prec is None:
            prec = comparison.precision
        if order is None:
            order = comparison.max_derivative_order
        step = comparison.sampling_step

        if not (self.min() == other.min() and self.max() == other.max() and self.dim() == other.dim()):
            return False

        t = self.min()
        while t <= self.max():
            if not arrays_approx_equal(self(t), other(t), prec):
                return False
            t += step

        for n in range(1, order + 1):
            t = self.min()
            while t <= self.max():
                if not arrays_approx_equal(self.derivate(t, n), other.derivate(t, n), prec):
                    return False
                t += step
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CurveABC):
            return NotImplemented
        return self.is_approx(other)

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @abstractmethod
    def dim(self) -> int:
        """Dimension of the points of the curve."""

    @abstractmethod
    def min(self) -> float:
        """Lower bound of the time range."""

    @abstractmethod
    def max(self) -> float:
        """Upper bound of the time range."""

    @abstractmethod
    def degree(self) -> int:
        """Degree of the curve."""

    def time_range(self) -> Tuple[float, float]:
        return self.min(), self.max()
