"""One-dimensional function algebra."""

from phzpy.function.base import (
    Differentiable,
    Function,
    FunctionAdapter,
    Integrable,
    Product,
)
from phzpy.function.multiplication import (
    multiply,
    register_specific_generic,
    register_specific_specific,
)
from phzpy.function.piecewise import Piecewise
from phzpy.function.polynomial import Polynomial
from phzpy.function.tools import integrate

__all__ = [
    "Function",
    "Integrable",
    "Differentiable",
    "FunctionAdapter",
    "Product",
    "Polynomial",
    "Piecewise",
    "multiply",
    "integrate",
    "register_specific_specific",
    "register_specific_generic",
]
