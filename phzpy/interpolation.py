"""Linear and natural cubic spline interpolation.

Both interpolants are :class:`~phzpy.function.piecewise.Piecewise` functions of
:class:`~phzpy.function.polynomial.Polynomial` pieces, so they integrate
exactly and take the polynomial multiplication fast paths.

With ``extrapolate=True`` the outermost knots are moved to -inf and +inf and
the first and last segments extend beyond the data. Otherwise the interpolant
is zero outside ``[x[0], x[-1]]``.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Sequence

import numpy as np
from numpy.polynomial import polynomial as P
from scipy.linalg import solve_banded

from phzpy.errors import DomainError
from phzpy.function import Piecewise, Polynomial

if TYPE_CHECKING:  # pragma: no cover
    from phzpy.dataset.xydataset import XYDataset


class InterpolationType(Enum):
    LINEAR = "linear"
    CUBIC_SPLINE = "cubic_spline"


def _validate(x: Sequence[float], y: Sequence[float]) -> tuple[np.ndarray, np.ndarray]:
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    if x.ndim != 1 or y.ndim != 1:
        raise DomainError("Interpolation needs 1D x and y values")
    if x.size != y.size:
        raise DomainError(
            f"x and y must have the same length ({x.size} != {y.size})"
        )
    if x.size < 2:
        raise DomainError("Interpolation needs at least two points")
    if not np.all(np.diff(x) > 0):
        raise DomainError("x values must be strictly increasing")
    return x, y


def _knots(x: np.ndarray, extrapolate: bool) -> np.ndarray:
    knots = x.copy()
    if extrapolate:
        knots[0] = -np.inf
        knots[-1] = np.inf
    return knots


def linear_interpolation(
    x: Sequence[float], y: Sequence[float], extrapolate: bool = False
) -> Piecewise:
    """Piecewise linear interpolant through ``(x, y)``."""

    x, y = _validate(x, y)
    slopes = np.diff(y) / np.diff(x)
    functions = [
        Polynomial([y[i] - slopes[i] * x[i], slopes[i]]) for i in range(x.size - 1)
    ]
    return Piecewise(_knots(x, extrapolate), functions)


def _shift(local: np.ndarray, origin: float) -> np.ndarray:
    """Expand ``sum(local[k] * (x - origin)**k)`` into plain coefficients."""

    result = np.array([local[-1]])
    for c in local[-2::-1]:
        result = P.polyadd(P.polymul(result, [-origin, 1.0]), [c])
    return result


def spline_interpolation(
    x: Sequence[float], y: Sequence[float], extrapolate: bool = False
) -> Piecewise:
    """Natural cubic spline through ``(x, y)``.

    The second derivatives at the knots come from the usual tridiagonal system
    with ``M[0] = M[-1] = 0``. On interval ``i`` the spline is

    .. math::

        a_i + b_i (x - x_i) + c_i (x - x_i)^2 + d_i (x - x_i)^3
    """

    x, y = _validate(x, y)
    n = x.size
    h = np.diff(x)
    delta = np.diff(y) / h

    second = np.zeros(n)
    if n > 2:
        # banded storage: upper, main and lower diagonals of the interior system
        ab = np.zeros((3, n - 2))
        ab[0, 1:] = h[1:-1]
        ab[1, :] = 2.0 * (h[:-1] + h[1:])
        ab[2, :-1] = h[1:-1]
        rhs = 6.0 * (delta[1:] - delta[:-1])
        second[1:-1] = solve_banded((1, 1), ab, rhs)

    functions = []
    for i in range(n - 1):
        a = y[i]
        b = delta[i] - h[i] * (2.0 * second[i] + second[i + 1]) / 6.0
        c = second[i] / 2.0
        d = (second[i + 1] - second[i]) / (6.0 * h[i])
        functions.append(Polynomial(_shift(np.array([a, b, c, d]), x[i])))
    return Piecewise(_knots(x, extrapolate), functions)


def interpolate(
    x: "Sequence[float] | XYDataset",
    y: Sequence[float] | InterpolationType | None = None,
    interpolation_type: InterpolationType = InterpolationType.LINEAR,
    extrapolate: bool = False,
) -> Piecewise:
    """Interpolate either ``(x, y)`` sequences or an :class:`XYDataset`.

    Examples
    --------
    ``interpolate(xs, ys, InterpolationType.CUBIC_SPLINE)`` or
    ``interpolate(dataset, InterpolationType.LINEAR)``.
    """

    if isinstance(y, InterpolationType):
        interpolation_type = y
        y = None
    if y is None:
        x, y = x.x, x.y

    match interpolation_type:
        case InterpolationType.LINEAR:
            return linear_interpolation(x, y, extrapolate=extrapolate)
        case InterpolationType.CUBIC_SPLINE:
            return spline_interpolation(x, y, extrapolate=extrapolate)
        case _:
            raise ValueError(f"Unknown interpolation type {interpolation_type!r}")
