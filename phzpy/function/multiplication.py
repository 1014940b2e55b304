"""Function multiplication with typed fast paths.

Two registries hold the fast paths:

- ``SPECIFIC_SPECIFIC``: keyed on the pair ``(f.tag, g.tag)``;
- ``SPECIFIC_GENERIC``: keyed on a single tag, for implementations which can
  multiply that type with any other function.

:func:`multiply` tries, in order, ``(f, g)`` and ``(g, f)`` in the first
table, then ``f`` and ``g`` in the second one, and finally falls back to a lazy
:class:`~phzpy.function.base.Product`.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from typing import Callable

import numpy as np

from phzpy.function.base import Function, Product
from phzpy.function.piecewise import Piecewise
from phzpy.function.polynomial import Polynomial

MultiplyFunction = Callable[[Function, Function], Function]

SPECIFIC_SPECIFIC: dict[tuple[str, str], MultiplyFunction] = {}
SPECIFIC_GENERIC: dict[str, MultiplyFunction] = {}


def register_specific_specific(
    first: str, second: str
) -> Callable[[MultiplyFunction], MultiplyFunction]:
    """Register a fast path for the tag pair ``(first, second)``."""

    def decorator(func: MultiplyFunction) -> MultiplyFunction:
        SPECIFIC_SPECIFIC[(first, second)] = func
        return func

    return decorator


def register_specific_generic(tag: str) -> Callable[[MultiplyFunction], MultiplyFunction]:
    """Register a fast path multiplying ``tag`` functions with anything."""

    def decorator(func: MultiplyFunction) -> MultiplyFunction:
        SPECIFIC_GENERIC[tag] = func
        return func

    return decorator


def multiply(f: Function, g: Function) -> Function:
    """Return a new function with the value ``f(x) * g(x)``."""

    func = SPECIFIC_SPECIFIC.get((f.tag, g.tag))
    if func is not None:
        return func(f, g)
    func = SPECIFIC_SPECIFIC.get((g.tag, f.tag))
    if func is not None:
        return func(g, f)
    func = SPECIFIC_GENERIC.get(f.tag)
    if func is not None:
        return func(f, g)
    func = SPECIFIC_GENERIC.get(g.tag)
    if func is not None:
        return func(g, f)
    return Product(f.clone(), g.clone())


@register_specific_specific(Polynomial.tag, Polynomial.tag)
def multiply_polynomial_polynomial(f: Polynomial, g: Polynomial) -> Polynomial:
    return Polynomial(np.convolve(f.coefficients, g.coefficients))


@register_specific_generic(Piecewise.tag)
def multiply_piecewise_generic(piecewise: Piecewise, other: Function) -> Piecewise:
    return Piecewise(
        piecewise.knots, [multiply(sub, other) for sub in piecewise.functions]
    )


def _covering_index(knots: np.ndarray, low: float, high: float) -> int:
    """Index of the interval of ``knots`` containing the open interval ``(low, high)``."""

    if np.isfinite(low) and np.isfinite(high):
        i = bisect_right(knots, (low + high) / 2.0) - 1
    elif np.isfinite(low):
        i = bisect_right(knots, low) - 1
    elif np.isfinite(high):
        # the interval ending at high
        i = bisect_left(knots, high) - 1
    else:
        i = 0
    return min(max(i, 0), knots.size - 2)


@register_specific_specific(Piecewise.tag, Piecewise.tag)
def multiply_piecewise_piecewise(f: Piecewise, g: Piecewise) -> Function:
    low = max(f.knots[0], g.knots[0])
    high = min(f.knots[-1], g.knots[-1])
    if low >= high:
        return Polynomial([0.0])

    interior = np.concatenate((f.knots, g.knots))
    interior = interior[(interior > low) & (interior < high)]
    knots = np.concatenate(([low], np.unique(interior), [high]))

    functions = []
    for start, stop in zip(knots[:-1], knots[1:]):
        f_sub = f.functions[_covering_index(f.knots, start, stop)]
        g_sub = g.functions[_covering_index(g.knots, start, stop)]
        functions.append(multiply(f_sub, g_sub))
    return Piecewise(knots, functions)
