"""Adaptive numerical integration.

:class:`AdaptiveIntegration` samples the interval with ``2**order`` equal
sub-intervals, applies a quadrature rule and doubles the sampling until two
successive approximations agree within the relative precision.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import numpy as np
from scipy.integrate import simpson, trapezoid

from phzpy.errors import ConvergenceError
from phzpy.function.base import Function

MAX_ORDER = 20


class Quadrature(ABC):
    """A quadrature rule on equally spaced samples."""

    minimal_order: int = 0

    @abstractmethod
    def __call__(self, values: np.ndarray, step: float) -> float:
        raise NotImplementedError


class TrapezoidQuadrature(Quadrature):
    def __call__(self, values: np.ndarray, step: float) -> float:
        return float(trapezoid(values, dx=step))


class SimpsonQuadrature(Quadrature):
    # needs an even number of intervals
    minimal_order: int = 1

    def __call__(self, values: np.ndarray, step: float) -> float:
        return float(simpson(values, dx=step))


class AdaptiveIntegration:
    """Integrate a function by repeatedly doubling the sampling.

    Parameters
    ----------
    quadrature:
        Rule applied to each sampling.
    relative_precision:
        Maximal relative difference between two successive approximations.
    initial_order:
        The first approximation uses ``2**initial_order`` intervals. Raised to
        the quadrature's minimal order when lower.
    max_order:
        Highest order tried before a :class:`~phzpy.errors.ConvergenceError`.
    """

    def __init__(
        self,
        quadrature: Quadrature,
        relative_precision: float,
        initial_order: int = 1,
        max_order: int = MAX_ORDER,
    ):
        if relative_precision <= 0:
            raise ValueError("relative_precision must be positive")
        self.quadrature = quadrature
        self.relative_precision = relative_precision
        self.initial_order = max(int(initial_order), quadrature.minimal_order)
        self.max_order = max_order
        self.log = logging.getLogger(self.__class__.__module__)

    def _approximate(self, function: Function, x1: float, x2: float, order: int) -> float:
        intervals = 2**order
        samples = np.linspace(x1, x2, intervals + 1)
        return self.quadrature(np.asarray(function(samples), dtype=float), (x2 - x1) / intervals)

    def __call__(self, function: Function, x1: float, x2: float) -> float:
        order = self.initial_order
        previous = self._approximate(function, x1, x2, order)
        while order < self.max_order:
            order += 1
            current = self._approximate(function, x1, x2, order)
            if current == previous or abs(current - previous) < self.relative_precision * abs(current):
                self.log.debug("Adaptive integration converged at order %d", order)
                return current
            previous = current
        raise ConvergenceError(
            f"Adaptive integration on [{x1}, {x2}] did not converge up to order {self.max_order}"
        )
