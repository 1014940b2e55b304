"""Helpers operating on any :class:`~phzpy.function.base.Function`."""

from __future__ import annotations

from phzpy.function.base import Function, Integrable

DEFAULT_RELATIVE_PRECISION = 1e-6
DEFAULT_INITIAL_ORDER = 3


def integrate(function: Function, x1: float, x2: float) -> float:
    """Definite integral of ``function`` over ``[x1, x2]``.

    Integrable functions use their exact integral. Anything else goes through
    adaptive Simpson integration.
    """

    if x1 == x2:
        return 0.0
    if isinstance(function, Integrable):
        return function.integrate(x1, x2)

    from phzpy.integration import AdaptiveIntegration, SimpsonQuadrature

    scheme = AdaptiveIntegration(
        SimpsonQuadrature(),
        relative_precision=DEFAULT_RELATIVE_PRECISION,
        initial_order=DEFAULT_INITIAL_ORDER,
    )
    if x1 > x2:
        return -scheme(function, x2, x1)
    return scheme(function, x1, x2)
