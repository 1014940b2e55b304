from __future__ import annotations

from typing import ClassVar, Sequence

import numpy as np
from numpy.polynomial import polynomial as P

from phzpy.function.base import ArrayLike, Differentiable, Function


class Polynomial(Differentiable):
    """Polynomial ``c0 + c1 x + ... + cn x^n``.

    Parameters
    ----------
    coefficients:
        Coefficients ordered by degree, lowest first.
    """

    tag: ClassVar[str] = "polynomial"

    def __init__(self, coefficients: Sequence[float]):
        super().__init__()
        coefficients = np.array(coefficients, dtype=float)
        if coefficients.ndim != 1 or coefficients.size == 0:
            raise ValueError("Polynomial needs a non-empty 1D coefficient sequence")
        coefficients.setflags(write=False)
        self._coefficients = coefficients

    @property
    def coefficients(self) -> np.ndarray:
        return self._coefficients

    @property
    def degree(self) -> int:
        return self._coefficients.size - 1

    def __call__(self, x: ArrayLike) -> ArrayLike:
        if np.ndim(x) == 0:
            # Horner, kept in plain floats for the scalar path
            value = 0.0
            x = float(x)
            for c in self._coefficients[::-1]:
                value = value * x + c
            return float(value)
        return P.polyval(np.asarray(x, dtype=float), self._coefficients)

    def clone(self) -> "Polynomial":
        return Polynomial(self._coefficients)

    def _compute_derivative(self) -> Function:
        return Polynomial(P.polyder(self._coefficients))

    def _compute_indefinite_integral(self) -> Function:
        return Polynomial(P.polyint(self._coefficients))

    def __repr__(self) -> str:
        return f"Polynomial({self._coefficients.tolist()})"
