"""Capability classes of the one-dimensional function algebra.

Every function carries a static :attr:`Function.tag` which the multiplication
dispatcher in :mod:`phzpy.function.multiplication` uses as its lookup key, so
no isinstance checks are needed on the hot path.

Capabilities
------------
- :class:`Function`: evaluation only.
- :class:`Integrable`: evaluation and exact definite integration.
- :class:`Differentiable`: evaluation, derivative and indefinite integral. The
  definite integral is ``F(b) - F(a)``.

All functions accept either a float or a numpy array. Scalars give a float,
arrays give an array of the same shape.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Callable, ClassVar

import numpy as np
import numpy.typing as npt

ArrayLike = float | npt.NDArray[np.floating]


class Function(ABC):
    """A real valued function of one real variable."""

    tag: ClassVar[str] = "generic"

    @abstractmethod
    def __call__(self, x: ArrayLike) -> ArrayLike:
        raise NotImplementedError

    @abstractmethod
    def clone(self) -> "Function":
        """Return an independent copy of the function."""

        raise NotImplementedError


class Integrable(Function):
    """A function which knows how to integrate itself exactly."""

    @abstractmethod
    def integrate(self, x1: float, x2: float) -> float:
        raise NotImplementedError


class Differentiable(Integrable):
    """A function with a derivative and an indefinite integral.

    Both are computed on first request and then published as immutable values.
    The computation happens under a per-instance lock, so concurrent
    observers of a shared function always see the same object.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._derivative: Function | None = None
        self._indefinite_integral: Function | None = None

    @abstractmethod
    def _compute_derivative(self) -> Function:
        raise NotImplementedError

    @abstractmethod
    def _compute_indefinite_integral(self) -> Function:
        raise NotImplementedError

    def derivative(self) -> Function:
        with self._lock:
            if self._derivative is None:
                self._derivative = self._compute_derivative()
            return self._derivative

    def indefinite_integral(self) -> Function:
        with self._lock:
            if self._indefinite_integral is None:
                self._indefinite_integral = self._compute_indefinite_integral()
            return self._indefinite_integral

    def integrate(self, x1: float, x2: float) -> float:
        antiderivative = self.indefinite_integral()
        return float(antiderivative(x2) - antiderivative(x1))

    # Locks can not be pickled; worker processes rebuild the caches.
    def __getstate__(self) -> dict:
        state = self.__dict__.copy()
        state["_lock"] = None
        state["_derivative"] = None
        state["_indefinite_integral"] = None
        return state

    def __setstate__(self, state: dict) -> None:
        self.__dict__.update(state)
        self._lock = threading.Lock()


class FunctionAdapter(Function):
    """Expose an arbitrary Python callable as a :class:`Function`.

    Parameters
    ----------
    func:
        Callable taking a float.
    vectorized:
        Set when ``func`` already handles numpy arrays elementwise.
    """

    def __init__(self, func: Callable[[float], float], vectorized: bool = False):
        self._func = func
        self._vectorized = vectorized

    def __call__(self, x: ArrayLike) -> ArrayLike:
        if np.ndim(x) == 0:
            return float(self._func(float(x)))
        if self._vectorized:
            return np.asarray(self._func(x), dtype=float)
        return np.vectorize(self._func, otypes=[float])(x)

    def clone(self) -> "FunctionAdapter":
        return FunctionAdapter(self._func, self._vectorized)


class Product(Function):
    """Lazy product of two functions, ``f(x) * g(x)``.

    This is what :func:`phzpy.function.multiply` falls back to when no fast
    path is registered for the operand types.
    """

    tag: ClassVar[str] = "product"

    def __init__(self, f: Function, g: Function):
        self._f = f
        self._g = g

    @property
    def factors(self) -> tuple[Function, Function]:
        return self._f, self._g

    def __call__(self, x: ArrayLike) -> ArrayLike:
        value = self._f(x) * self._g(x)
        return float(value) if np.ndim(value) == 0 else value

    def clone(self) -> "Product":
        return Product(self._f.clone(), self._g.clone())
