import numpy as np
import numpy.testing as npt
import pytest

from phzpy.function import (
    FunctionAdapter,
    Piecewise,
    Polynomial,
    Product,
    multiply,
)
from phzpy.function import multiplication
from phzpy.interpolation import linear_interpolation, spline_interpolation

X = np.arange(-2.0, 7.0, 0.1)


def _constants(knots, values):
    return Piecewise(knots, [Polynomial([v]) for v in values])


def test_polynomial_with_polynomial():
    result = multiply(Polynomial([1.0, 0.5, -2.0]), Polynomial([3.0, 0.0, 2.0]))
    assert isinstance(result, Polynomial)
    assert result.coefficients.tolist() == [3.0, 1.5, -4.0, 1.0, -4.0]


def test_piecewise_with_generic():
    piecewise = Piecewise(
        [-1.0, 0.0, 1.0, 2.0],
        [FunctionAdapter(lambda x: 1.0), FunctionAdapter(lambda x: 2.0), FunctionAdapter(lambda x: 1.0)],
    )
    generic = FunctionAdapter(lambda x: 5.0)

    result = multiply(piecewise, generic)

    assert isinstance(result, Piecewise)
    npt.assert_array_equal(result.knots, piecewise.knots)
    npt.assert_allclose(result(X), piecewise(X) * generic(X), rtol=1e-10)


def test_generic_with_piecewise_uses_same_fast_path():
    piecewise = _constants([0.0, 1.0, 3.0], [2.0, 4.0])
    generic = FunctionAdapter(np.cos, vectorized=True)

    result = multiply(generic, piecewise)

    assert isinstance(result, Piecewise)
    npt.assert_allclose(result(X), np.cos(X) * piecewise(X), rtol=1e-10)


def test_piecewise_with_piecewise():
    p1 = _constants([-1.0, 0.0, 1.0, 2.0], [1.0, 2.0, 1.0])
    p2 = _constants([0.5, 0.7, 1.0, 1.5, 4.0, 6.0], [3.0, 2.0, 1.0, 3.0, 4.0])

    for result in (multiply(p1, p2), multiply(p2, p1)):
        assert isinstance(result, Piecewise)
        npt.assert_array_equal(result.knots, [0.5, 0.7, 1.0, 1.5, 2.0])
        npt.assert_allclose(result(X), p1(X) * p2(X), rtol=1e-10)


def test_piecewise_with_piecewise_disjoint_ranges():
    p1 = _constants([-1.0, 0.0, 1.0, 2.0], [1.0, 2.0, 1.0])
    p2 = _constants([3.0, 4.0, 5.0, 6.0, 7.0, 8.0], [3.0, 2.0, 1.0, 3.0, 4.0])

    for result in (multiply(p1, p2), multiply(p2, p1)):
        assert isinstance(result, Polynomial)
        assert result.coefficients.tolist() == [0.0]


def test_piecewise_with_polynomial_keeps_polynomial_pieces():
    piecewise = Piecewise([0.0, 1.0, 2.0], [Polynomial([0.0, 1.0]), Polynomial([2.0, -1.0])])
    result = multiply(Polynomial([1.0, 1.0]), piecewise)

    assert isinstance(result, Piecewise)
    assert all(isinstance(f, Polynomial) for f in result.functions)
    npt.assert_allclose(result(X), (1.0 + X) * piecewise(X), rtol=1e-10, atol=1e-12)


def test_generic_fallback_is_lazy_product():
    f = FunctionAdapter(np.sin, vectorized=True)
    g = FunctionAdapter(np.exp, vectorized=True)

    result = multiply(f, g)

    assert isinstance(result, Product)
    assert result(0.3) == pytest.approx(np.sin(0.3) * np.exp(0.3))


@pytest.mark.parametrize(
    "f, g",
    [
        (Polynomial([1.0, -0.5]), Polynomial([0.0, 2.0, 1.0])),
        (_constants([0.0, 1.0, 2.5], [1.0, 3.0]), FunctionAdapter(np.sin, vectorized=True)),
        (
            _constants([0.0, 1.0, 2.5], [1.0, 3.0]),
            Piecewise([-1.0, 0.5, 4.0], [Polynomial([0.0, 1.0]), Polynomial([2.0])]),
        ),
    ],
)
def test_multiplication_is_order_insensitive(f, g):
    npt.assert_allclose(multiply(f, g)(X), multiply(g, f)(X), rtol=1e-10, atol=1e-10)


class _Tagged(FunctionAdapter):
    tag = "tagged"


def test_registered_fast_path_is_used_with_swapped_arguments(monkeypatch):
    calls = []

    def fast(tagged, polynomial):
        calls.append((tagged.tag, polynomial.tag))
        return Polynomial([42.0])

    monkeypatch.setitem(
        multiplication.SPECIFIC_SPECIFIC, ("tagged", Polynomial.tag), fast
    )

    result = multiply(Polynomial([1.0]), _Tagged(lambda x: 1.0))

    assert calls == [("tagged", "polynomial")]
    assert result(0.0) == 42.0


def test_extrapolated_interpolants():
    f = linear_interpolation([0.0, 1.0, 2.0], [0.0, 1.0, 4.0], extrapolate=True)
    g = linear_interpolation([0.0, 3.0], [1.0, 1.0], extrapolate=True)
    x = np.array([-5.0, -1.0, -0.5, 0.5, 1.5, 2.5, 10.0])

    for result in (multiply(f, g), multiply(g, f)):
        assert result(-1.0) == pytest.approx(-1.0)
        npt.assert_allclose(result(x), f(x) * g(x), rtol=1e-10, atol=1e-12)


def test_extrapolated_spline_with_linear():
    knots = np.linspace(0.0, 3.0, 7)
    spline = spline_interpolation(knots, knots**2, extrapolate=True)
    linear = linear_interpolation([0.5, 1.0, 4.0], [2.0, 1.0, 3.0], extrapolate=True)
    x = np.array([-3.0, -1.0, -0.1, 0.25, 0.75, 2.0, 3.5, 6.0])

    for result in (multiply(spline, linear), multiply(linear, spline)):
        npt.assert_allclose(result(x), spline(x) * linear(x), rtol=1e-10, atol=1e-10)
