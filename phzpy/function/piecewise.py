from __future__ import annotations

from bisect import bisect_right
from typing import ClassVar, Sequence

import numpy as np

from phzpy.errors import DomainError
from phzpy.function.base import ArrayLike, Differentiable, Function, Integrable


class Piecewise(Integrable):
    """Function defined by knots and one sub-function per interval.

    Sub-function ``i`` is used on ``[knots[i], knots[i+1])``; the last knot
    belongs to the last interval. Outside ``[knots[0], knots[-1]]`` the value
    is zero. Infinite outer knots are allowed and make the outermost
    sub-functions extend to infinity.

    Parameters
    ----------
    knots:
        Strictly increasing knot positions.
    functions:
        ``len(knots) - 1`` sub-functions.
    """

    tag: ClassVar[str] = "piecewise"

    def __init__(self, knots: Sequence[float], functions: Sequence[Function]):
        knots = np.array(knots, dtype=float)
        functions = tuple(functions)
        if knots.ndim != 1 or knots.size < 2:
            raise DomainError("Piecewise needs at least two knots")
        if len(functions) != knots.size - 1:
            raise DomainError(
                f"Piecewise needs {knots.size - 1} functions for {knots.size} knots, "
                f"got {len(functions)}"
            )
        if np.any(np.isnan(knots)) or not np.all(np.diff(knots) > 0):
            raise DomainError("Piecewise knots must be strictly increasing")
        knots.setflags(write=False)
        self._knots = knots
        self._functions = functions

    @property
    def knots(self) -> np.ndarray:
        return self._knots

    @property
    def functions(self) -> tuple[Function, ...]:
        return self._functions

    @property
    def range(self) -> tuple[float, float]:
        return float(self._knots[0]), float(self._knots[-1])

    def interval_index(self, x: float) -> int:
        """Index of the interval containing ``x``, or ``-1`` outside."""

        if x == self._knots[-1]:
            return len(self._functions) - 1
        i = bisect_right(self._knots, x) - 1
        return i if 0 <= i < len(self._functions) else -1

    def __call__(self, x: ArrayLike) -> ArrayLike:
        if np.ndim(x) == 0:
            i = self.interval_index(float(x))
            return 0.0 if i < 0 else float(self._functions[i](float(x)))

        x = np.asarray(x, dtype=float)
        idx = np.searchsorted(self._knots, x, side="right") - 1
        idx[x == self._knots[-1]] = len(self._functions) - 1
        result = np.zeros(x.shape, dtype=float)
        for i in np.unique(idx):
            if 0 <= i < len(self._functions):
                mask = idx == i
                result[mask] = self._functions[i](x[mask])
        return result

    def clone(self) -> "Piecewise":
        return Piecewise(self._knots, [f.clone() for f in self._functions])

    def integrate(self, x1: float, x2: float) -> float:
        """Sum of the exact sub-interval integrals over ``[x1, x2]``."""

        from phzpy.function.tools import integrate

        if x1 > x2:
            return -self.integrate(x2, x1)
        low = max(x1, self._knots[0])
        high = min(x2, self._knots[-1])
        if low >= high:
            return 0.0

        first = self.interval_index(low)
        total = 0.0
        for i in range(first, len(self._functions)):
            start = max(low, self._knots[i])
            if start >= high:
                break
            stop = min(high, self._knots[i + 1])
            total += integrate(self._functions[i], float(start), float(stop))
        return total

    def derivative(self) -> "Piecewise":
        """Piecewise of the sub-function derivatives, same knots."""

        if not all(isinstance(f, Differentiable) for f in self._functions):
            raise DomainError("All sub-functions must be differentiable")
        return Piecewise(self._knots, [f.derivative() for f in self._functions])

    def __repr__(self) -> str:
        return f"Piecewise(knots={self._knots.tolist()}, functions={list(self._functions)})"
